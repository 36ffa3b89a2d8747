# src/vm_translator/parser.py
from __future__ import annotations
import re
from typing import List, Optional, Tuple

from .lexer import source_lines, tokens
from .ast import (
    SourceLine, CommandType, Instruction,
    Arithmetic, Push, Pop, Label, Goto, IfGoto, Function, Call, Return,
    ARITHMETIC_OPS, SEGMENTS,
)
from .segments import SegmentMap, DEFAULT_SEGMENTS, POINTER_REGISTERS, INDIRECT_SEGMENTS
from .utils import is_unsigned_nbit, MAX_CONSTANT
from .diagnostics import (
    Diagnostic, ClassificationError, InvalidArgumentError, error, warning,
)

DEC_INDEX_RE = re.compile(r"^[0-9]+$")
SYMBOL_RE    = re.compile(r"^[A-Za-z_.:$][A-Za-z0-9_.:$]*$")

BRANCH_COMMANDS = {"label": Label, "goto": Goto, "if-goto": IfGoto}

def _fail(src: SourceLine, message: str, *, filename: Optional[str], hint: Optional[str] = None):
    raise ClassificationError(error(message, line=src.line, file=filename, hint=hint), src.text)

def _unrecognized(src: SourceLine, filename: Optional[str]):
    _fail(src, f'comando no reconocido: "{src.text}"', filename=filename)

def _parse_count(src: SourceLine, command: str, token: str, *, filename: Optional[str]) -> int:
    if not DEC_INDEX_RE.match(token):
        _fail(src, f'{command}: argumento inválido "{token}"', filename=filename,
              hint="se espera un entero no negativo")
    return int(token)

def _parse_name(src: SourceLine, command: str, token: str, *, filename: Optional[str]) -> str:
    if not SYMBOL_RE.match(token):
        _fail(src, f'{command}: nombre inválido "{token}"', filename=filename,
              hint="letras, dígitos, '_', '.', ':' o '$', sin empezar por dígito")
    return token

def _literal(segment: str, index: int, segments: SegmentMap) -> Optional[int]:
    """Valor que el generador cargará con '@' para segment[index], si lo hay."""
    if segment in INDIRECT_SEGMENTS or segment == "constant":
        return index
    if segment == "temp":
        return segments["temp"].begin + index
    return None

def _classify_memory(src: SourceLine, parts: List[str], *, filename: Optional[str],
                     segments: SegmentMap) -> Instruction:
    command, segment, raw_index = parts
    if segment not in SEGMENTS:
        _fail(src, f'{command}: segmento desconocido "{segment}"', filename=filename,
              hint=", ".join(sorted(SEGMENTS)))
    index = _parse_count(src, f"{command} {segment}", raw_index, filename=filename)

    if segment == "constant" and command == "pop":
        _fail(src, "pop constant: el segmento constant no es escribible", filename=filename)
    literal = _literal(segment, index, segments)
    if literal is not None and not is_unsigned_nbit(literal, 15):
        _fail(src, f"{command} {segment}: valor fuera de rango: {index}", filename=filename,
              hint=f"la instrucción A admite 0..{MAX_CONSTANT}")
    if segment == "pointer" and index >= len(POINTER_REGISTERS):
        _fail(src, f"{command} pointer: índice inválido: {index}", filename=filename,
              hint="se espera 0 (this) o 1 (that)")

    if command == "push":
        return Push(segment=segment, index=index, line=src.line)
    return Pop(segment=segment, index=index, line=src.line)

def classify(src: SourceLine, *, filename: Optional[str] = None,
             segments: SegmentMap = DEFAULT_SEGMENTS) -> Instruction:
    """Clasifica una línea ya recortada.

    Reglas:
      - Un solo token aritmético/lógico (add, sub, neg, eq, gt, lt, and, or, not).
      - 'push'/'pop' + segmento + índice entero no negativo.
      - 'label'/'goto'/'if-goto' + nombre, 'function'/'call' + nombre + entero, 'return'.
    Cualquier otro caso lanza ClassificationError con la línea y el texto literal.
    """
    parts = tokens(src.text)
    if not parts:
        _unrecognized(src, filename)
    head, n = parts[0], len(parts)

    if head in ARITHMETIC_OPS:
        if n == 1:
            return Arithmetic(op=head, line=src.line)
    elif head in ("push", "pop"):
        if n == 3:
            return _classify_memory(src, parts, filename=filename, segments=segments)
    elif head in BRANCH_COMMANDS:
        if n == 2:
            name = _parse_name(src, head, parts[1], filename=filename)
            return BRANCH_COMMANDS[head](name=name, line=src.line)
    elif head in ("function", "call"):
        if n == 3:
            name = _parse_name(src, head, parts[1], filename=filename)
            count = _parse_count(src, head, parts[2], filename=filename)
            if head == "function":
                return Function(name=name, n_locals=count, line=src.line)
            return Call(name=name, n_args=count, line=src.line)
    elif head == "return":
        if n == 1:
            return Return(line=src.line)

    _unrecognized(src, filename)

def lint(ins: Instruction, segments: SegmentMap = DEFAULT_SEGMENTS, *,
         filename: Optional[str] = None) -> List[Diagnostic]:
    """Advertencias sobre accesos fuera de la ventana declarada del segmento."""
    diags: List[Diagnostic] = []
    if isinstance(ins, (Push, Pop)) and ins.segment in ("temp", "static"):
        seg = segments[ins.segment]
        if ins.index >= seg.size:
            diags.append(warning(
                f"{ins.segment} {ins.index} fuera del segmento ({seg.begin}..{seg.end})",
                line=ins.line, file=filename, hint=f"se espera 0..{seg.size - 1}"))
    return diags

class Parser:
    """Cursor sobre las líneas de comando de un programa VM.

    Expone el contrato del driver: has_more_commands / advance / command_type /
    instruction / arg1 / arg2. Las instrucciones se clasifican al pedirlas.
    """

    def __init__(self, text: str, *, filename: Optional[str] = None,
                 segments: SegmentMap = DEFAULT_SEGMENTS):
        self.filename = filename
        self.segments = segments
        self.lines: List[SourceLine] = source_lines(text)
        self.diagnostics: List[Diagnostic] = []
        self._idx = -1
        self._current: Optional[Instruction] = None

    def has_more_commands(self) -> bool:
        return self._idx < len(self.lines) - 1

    def advance(self) -> None:
        if not self.has_more_commands():
            raise IndexError("No hay más comandos")
        self._idx += 1
        self._current = None

    @property
    def current(self) -> SourceLine:
        if self._idx < 0:
            raise IndexError("advance() no ha sido llamado")
        return self.lines[self._idx]

    def instruction(self) -> Instruction:
        if self._current is None:
            ins = classify(self.current, filename=self.filename, segments=self.segments)
            self.diagnostics.extend(lint(ins, self.segments, filename=self.filename))
            self._current = ins
        return self._current

    def command_type(self) -> CommandType:
        return self.instruction().kind

    def _no_argument(self, which: str):
        ins = self.instruction()
        raise InvalidArgumentError(error(
            f'{which}() no aplica a "{self.current.text}" ({ins.kind.name})',
            line=ins.line, file=self.filename))

    def arg1(self) -> str:
        """Operación (aritmética), segmento (push/pop) o nombre (resto)."""
        ins = self.instruction()
        if isinstance(ins, Arithmetic):
            return ins.op
        if isinstance(ins, (Push, Pop)):
            return ins.segment
        if isinstance(ins, (Label, Goto, IfGoto, Function, Call)):
            return ins.name
        self._no_argument("arg1")

    def arg2(self) -> int:
        """Índice (push/pop), número de locales (function) o de argumentos (call)."""
        ins = self.instruction()
        if isinstance(ins, (Push, Pop)):
            return ins.index
        if isinstance(ins, Function):
            return ins.n_locals
        if isinstance(ins, Call):
            return ins.n_args
        self._no_argument("arg2")

def parse(text: str, *, filename: Optional[str] = None,
          segments: SegmentMap = DEFAULT_SEGMENTS) -> Tuple[List[Instruction], List[Diagnostic]]:
    """Clasifica un programa completo. Se detiene en el primer error (ClassificationError).

    Devuelve (instrucciones, advertencias).
    """
    p = Parser(text, filename=filename, segments=segments)
    out: List[Instruction] = []
    while p.has_more_commands():
        p.advance()
        out.append(p.instruction())
    return out, p.diagnostics
