# src/vm_translator/codegen.py
from __future__ import annotations
from typing import List, Optional, TextIO

from .ast import (
    Instruction, CommandType, Arithmetic, Push, Pop,
    Label, Goto, IfGoto, Function, Call, Return,
    UNARY_OPS, describe,
)
from .segments import SegmentMap, DEFAULT_SEGMENTS, INDIRECT_SEGMENTS
from .labels import LabelAllocator, HALT_LABEL, static_symbol
from .writers import write_line
from .diagnostics import (
    OutputWriteError, TranslationError, UnsupportedCommandError, error,
)

# ---------------- Tablas de operaciones ----------------

_UNARY_COMP = {"neg": "-M", "not": "!M"}
_BINARY_COMP = {"add": "D+M", "sub": "M-D", "and": "D&M", "or": "D|M"}
# Salto tomado cuando (segundo - cima) cumple la condición
_COMPARE_JUMP = {"eq": "JEQ", "lt": "JLT", "gt": "JGT"}

class CodeWriter:
    """Traduce instrucciones VM a ensamblador Hack, una línea por instrucción máquina.

    - Al construirse emite el arranque (SP, LCL, ARG, THIS, THAT).
    - close() emite el bucle final de parada.
    - annotate=True antepone un comentario '// <comando>' a cada bloque.
    - newline: fin de línea de la salida (el mismo que el de la entrada).
    """

    def __init__(self, out: TextIO, *, segments: SegmentMap = DEFAULT_SEGMENTS,
                 labels: Optional[LabelAllocator] = None, annotate: bool = False,
                 filename: Optional[str] = None, newline: str = "\n"):
        self.out = out
        self.segments = segments
        self.labels = labels if labels is not None else LabelAllocator()
        self.annotate = annotate
        self.filename = filename
        self.newline = newline
        self.closed = False
        self._write_bootstrap()

    # ---------------- Salida ----------------

    def _emit(self, *lines: str) -> None:
        if self.closed:
            raise OutputWriteError(error("escritura tras close()", file=self.filename))
        for line in lines:
            write_line(self.out, line, self.newline)

    def _comment(self, text: str) -> None:
        if self.annotate:
            self._emit(f"// {text}")

    # ---------------- Arranque / parada ----------------

    def _write_bootstrap(self) -> None:
        self._comment("bootstrap")
        for register, base in self.segments.bootstrap():
            self._emit(f"@{base}", "D=A", f"@{register}", "M=D")

    def close(self) -> None:
        """Emite la etiqueta de parada y un salto a sí misma. Idempotente."""
        if self.closed:
            return
        self._comment("halt")
        self._emit(f"({HALT_LABEL})", f"@{HALT_LABEL}", "0;JMP")
        self.closed = True

    # ---------------- Despacho ----------------

    def write(self, ins: Instruction) -> None:
        self._comment(describe(ins))
        if isinstance(ins, Arithmetic):
            self.write_arithmetic(ins.op)
        elif isinstance(ins, (Push, Pop)):
            self.write_push_pop(ins.kind, ins.segment, ins.index)
        elif isinstance(ins, (Label, Goto, IfGoto, Function, Call, Return)):
            raise UnsupportedCommandError(error(
                f'comando sin traducción: "{describe(ins)}"', line=ins.line, file=self.filename,
                hint="control de flujo y subrutinas no están soportados"))
        else:
            raise TypeError(f"Instrucción desconocida: {ins!r}")

    # ---------------- Aritmética ----------------

    def write_arithmetic(self, op: str) -> None:
        if op in UNARY_OPS:
            self._emit("@SP", "A=M-1", f"M={_UNARY_COMP[op]}")
            return

        # cima -> D
        self._emit("@SP", "M=M-1", "A=M", "D=M")
        # segundo operando en M
        self._emit("@SP", "M=M-1", "A=M")
        if op in _BINARY_COMP:
            self._emit(f"M={_BINARY_COMP[op]}")
        elif op in _COMPARE_JUMP:
            self._write_compare(op)
        else:
            raise TranslationError(error(f"operación aritmética desconocida: {op}", file=self.filename))
        self._emit("@SP", "M=M+1")

    def _write_compare(self, op: str) -> None:
        true_label = self.labels.next("assign.true")
        join_label = self.labels.next("assign.false")
        self._emit(
            "D=M-D",
            f"@{true_label}",
            f"D;{_COMPARE_JUMP[op]}",
            "D=0",
            f"@{join_label}",
            "0;JMP",
            f"({true_label})",
            "D=-1",
            f"({join_label})",
            "@SP",
            "A=M",
            "M=D",
        )

    # ---------------- Memoria ----------------

    def _segment_address(self, segment: str, index: int) -> List[str]:
        """Instrucciones que dejan en A la dirección efectiva de segment[index]."""
        if segment in INDIRECT_SEGMENTS:
            reg = self.segments.base_register(segment)
            return [f"@{reg}", "D=M", f"@{index}", "A=D+A"]
        if segment == "static":
            return [f"@{static_symbol(index)}"]
        if segment == "temp":
            return [f"@{self.segments['temp'].begin + index}"]
        if segment == "pointer":
            return [f"@{self.segments.pointer_register(index)}"]
        raise TranslationError(error(f"segmento sin dirección: {segment}", file=self.filename))

    def write_push_pop(self, kind: CommandType, segment: str, index: int) -> None:
        if kind is CommandType.PUSH:
            if segment == "constant":
                self._emit(f"@{index}", "D=A")
            else:
                self._emit(*self._segment_address(segment, index), "D=M")
            self._emit("@SP", "A=M", "M=D", "@SP", "M=M+1")
        elif kind is CommandType.POP:
            if segment == "constant":
                raise TranslationError(error("pop constant no es traducible", file=self.filename))
            scratch = self.segments.scratch
            # 1) dirección efectiva -> celda de intercambio
            self._emit(*self._segment_address(segment, index), "D=A", f"@{scratch}", "M=D")
            # 2) cima -> D, 3) D -> *scratch
            self._emit("@SP", "M=M-1", "A=M", "D=M")
            self._emit(f"@{scratch}", "A=M", "M=D")
        else:
            raise TranslationError(error(f"write_push_pop no admite {kind.name}", file=self.filename))
