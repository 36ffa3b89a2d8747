'''
dataclases de instrucciones VM (SourceLine, CommandType, Instruction)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Union

# ---- Fuente ----

@dataclass(frozen=True)
class SourceLine:
    """Texto de un comando ya recortado y su número de línea original (base 1)."""
    text: str
    line: int

class CommandType(Enum):
    ARITHMETIC = auto()
    PUSH = auto()
    POP = auto()
    LABEL = auto()
    GOTO = auto()
    IF = auto()
    FUNCTION = auto()
    RETURN = auto()
    CALL = auto()

ARITHMETIC_OPS = frozenset({"add", "sub", "neg", "eq", "gt", "lt", "and", "or", "not"})
UNARY_OPS = frozenset({"neg", "not"})

SEGMENTS = frozenset({"argument", "local", "this", "that", "static", "constant", "temp", "pointer"})

# ---- Instrucciones ----

@dataclass(frozen=True)
class Arithmetic:
    """Operación aritmética o lógica sobre la cima de la pila."""
    op: str
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.ARITHMETIC

@dataclass(frozen=True)
class Push:
    """push segment index"""
    segment: str
    index: int
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.PUSH

@dataclass(frozen=True)
class Pop:
    """pop segment index"""
    segment: str
    index: int
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.POP

# Comandos de control de flujo y subrutinas: se clasifican, no se traducen.

@dataclass(frozen=True)
class Label:
    name: str
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.LABEL

@dataclass(frozen=True)
class Goto:
    name: str
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.GOTO

@dataclass(frozen=True)
class IfGoto:
    name: str
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.IF

@dataclass(frozen=True)
class Function:
    name: str
    n_locals: int
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.FUNCTION

@dataclass(frozen=True)
class Call:
    name: str
    n_args: int
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.CALL

@dataclass(frozen=True)
class Return:
    line: int = 0
    kind: ClassVar[CommandType] = CommandType.RETURN

Instruction = Union[Arithmetic, Push, Pop, Label, Goto, IfGoto, Function, Call, Return]

def describe(ins: Instruction) -> str:
    """Texto VM canónico de una instrucción (para comentarios y mensajes)."""
    if isinstance(ins, Arithmetic):
        return ins.op
    if isinstance(ins, Push):
        return f"push {ins.segment} {ins.index}"
    if isinstance(ins, Pop):
        return f"pop {ins.segment} {ins.index}"
    if isinstance(ins, Label):
        return f"label {ins.name}"
    if isinstance(ins, Goto):
        return f"goto {ins.name}"
    if isinstance(ins, IfGoto):
        return f"if-goto {ins.name}"
    if isinstance(ins, Function):
        return f"function {ins.name} {ins.n_locals}"
    if isinstance(ins, Call):
        return f"call {ins.name} {ins.n_args}"
    if isinstance(ins, Return):
        return "return"
    raise TypeError(f"Instrucción desconocida: {ins!r}")
