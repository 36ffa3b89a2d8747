'''
carga y simulación de ensamblador Hack simbólico (para verificar la traducción)

Herramienta pública de apoyo: la usan las pruebas y se puede importar para
ejecutar la salida de vm-translate; el traductor no depende de ella.
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .lexer import strip_comment
from .utils import u16, sign_extend, MAX_CONSTANT

PREDEFINED: Dict[str, int] = {
    "SP": 0, "LCL": 1, "ARG": 2, "THIS": 3, "THAT": 4,
    "SCREEN": 16384, "KBD": 24576,
    **{f"R{i}": i for i in range(16)},
}

VARIABLE_BASE = 16
RAM_SIZE = 24577  # hasta KBD inclusive

_Comp = Callable[[int, int, int], int]

# comp -> f(D, A, M); A/M intercambiables según el bit 'a'
COMP: Dict[str, _Comp] = {
    "0":   lambda d, a, m: 0,
    "1":   lambda d, a, m: 1,
    "-1":  lambda d, a, m: -1,
    "D":   lambda d, a, m: d,
    "A":   lambda d, a, m: a,
    "M":   lambda d, a, m: m,
    "!D":  lambda d, a, m: ~d,
    "!A":  lambda d, a, m: ~a,
    "!M":  lambda d, a, m: ~m,
    "-D":  lambda d, a, m: -d,
    "-A":  lambda d, a, m: -a,
    "-M":  lambda d, a, m: -m,
    "D+1": lambda d, a, m: d + 1,
    "A+1": lambda d, a, m: a + 1,
    "M+1": lambda d, a, m: m + 1,
    "D-1": lambda d, a, m: d - 1,
    "A-1": lambda d, a, m: a - 1,
    "M-1": lambda d, a, m: m - 1,
    "D+A": lambda d, a, m: d + a,
    "D+M": lambda d, a, m: d + m,
    "D-A": lambda d, a, m: d - a,
    "D-M": lambda d, a, m: d - m,
    "A-D": lambda d, a, m: a - d,
    "M-D": lambda d, a, m: m - d,
    "D&A": lambda d, a, m: d & a,
    "D&M": lambda d, a, m: d & m,
    "D|A": lambda d, a, m: d | a,
    "D|M": lambda d, a, m: d | m,
}
# formas conmutadas aceptadas por el ensamblador
for _k in ("A+D", "M+D", "A&D", "M&D", "A|D", "M|D"):
    COMP[_k] = COMP[_k[2] + _k[1] + _k[0]]

JUMP: Dict[Optional[str], Callable[[int], bool]] = {
    None:  lambda v: False,
    "JGT": lambda v: v > 0,
    "JEQ": lambda v: v == 0,
    "JGE": lambda v: v >= 0,
    "JLT": lambda v: v < 0,
    "JNE": lambda v: v != 0,
    "JLE": lambda v: v <= 0,
    "JMP": lambda v: True,
}

class MachineError(Exception):
    pass

@dataclass(frozen=True)
class AInstr:
    value: int

@dataclass(frozen=True)
class CInstr:
    dest: str
    comp: str
    jump: Optional[str]

@dataclass
class Program:
    code: List[object]
    symbols: Dict[str, int]

def _parse_c(text: str) -> CInstr:
    dest, rest = ("", text)
    if "=" in text:
        dest, rest = text.split("=", 1)
    comp, jump = (rest, None)
    if ";" in rest:
        comp, jump = rest.split(";", 1)
    comp = comp.strip()
    if comp not in COMP:
        raise MachineError(f"comp inválido: '{text}'")
    if jump is not None and jump.strip() not in JUMP:
        raise MachineError(f"salto inválido: '{text}'")
    if any(ch not in "AMD" for ch in dest.strip()):
        raise MachineError(f"destino inválido: '{text}'")
    return CInstr(dest=dest.strip(), comp=comp, jump=jump.strip() if jump else None)

def load(lines: Iterable[str]) -> Program:
    """Dos pasadas: etiquetas '(X)' a direcciones de ROM, luego variables desde RAM[16]."""
    body: List[str] = []
    symbols = dict(PREDEFINED)
    for raw in lines:
        text = strip_comment(raw)
        if not text:
            continue
        if text.startswith("(") and text.endswith(")"):
            name = text[1:-1].strip()
            if not name or name in symbols:
                raise MachineError(f"etiqueta inválida o repetida: {text}")
            symbols[name] = len(body)
            continue
        body.append(text)

    code: List[object] = []
    next_var = VARIABLE_BASE
    for text in body:
        if text.startswith("@"):
            tok = text[1:].strip()
            if tok.isascii() and tok.isdigit():
                value = int(tok)
                if value > MAX_CONSTANT:
                    raise MachineError(f"constante fuera de rango: {text}")
            else:
                if tok not in symbols:
                    symbols[tok] = next_var
                    next_var += 1
                value = symbols[tok]
            code.append(AInstr(value))
        else:
            code.append(_parse_c(text))
    return Program(code=code, symbols=symbols)

class HackMachine:
    """CPU Hack: registros A, D, PC y RAM de 16 bits."""

    def __init__(self, program: Program, *, ram_size: int = RAM_SIZE):
        self.program = program
        self.ram: List[int] = [0] * ram_size
        self.a = 0
        self.d = 0
        self.pc = 0
        self.halted = False

    def _check(self, addr: int) -> int:
        if not 0 <= addr < len(self.ram):
            raise MachineError(f"acceso fuera de RAM: {addr} (pc={self.pc})")
        return addr

    def peek(self, addr: int) -> int:
        """Valor con signo de RAM[addr]."""
        return sign_extend(self.ram[self._check(addr)])

    def poke(self, addr: int, value: int) -> None:
        self.ram[self._check(addr)] = u16(value)

    def step(self) -> None:
        if not 0 <= self.pc < len(self.program.code):
            raise MachineError(f"PC fuera del programa: {self.pc}")
        ins = self.program.code[self.pc]
        if isinstance(ins, AInstr):
            self.a = ins.value
            self.pc += 1
            return

        assert isinstance(ins, CInstr)
        m = self.peek(self.a) if "M" in ins.comp or "M" in ins.dest else 0
        value = sign_extend(u16(COMP[ins.comp](sign_extend(self.d), sign_extend(self.a), m)))
        # M y el salto usan el A anterior a la instrucción
        addr = self.a
        if "M" in ins.dest:
            self.poke(addr, value)
        if "A" in ins.dest:
            self.a = u16(value)
        if "D" in ins.dest:
            self.d = u16(value)

        if JUMP[ins.jump](value):
            target = addr
            # '@L' seguido de '0;JMP' que vuelve a '@L': bucle de parada
            if ins.jump == "JMP" and target == self.pc - 1:
                self.halted = True
            self.pc = target
        else:
            self.pc += 1

    def run(self, max_steps: int = 100_000) -> int:
        """Ejecuta hasta el bucle de parada. Devuelve el número de pasos."""
        steps = 0
        while not self.halted:
            if steps >= max_steps:
                raise MachineError(f"sin parada tras {max_steps} pasos")
            self.step()
            steps += 1
        return steps

def run_asm(lines: Iterable[str], *, max_steps: int = 100_000) -> Tuple[HackMachine, int]:
    machine = HackMachine(load(lines))
    steps = machine.run(max_steps)
    return machine, steps
