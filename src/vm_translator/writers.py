from __future__ import annotations
from typing import Iterable, TextIO

from .diagnostics import OutputWriteError, error

def write_line(out: TextIO, line: str, newline: str = "\n") -> None:
    try:
        out.write(line + newline)
    except (OSError, ValueError) as ex:
        # ValueError: escritura sobre un archivo ya cerrado
        raise OutputWriteError(error(f"no se pudo escribir la salida: {ex}")) from ex

def write_asm(lines: Iterable[str], path: str, *, newline: str = "\n") -> None:
    try:
        # newline="": el fin de línea se escribe tal cual, sin traducir
        with open(path, "w", encoding="utf-8", newline="") as f:
            for line in lines:
                write_line(f, line, newline)
    except OSError as ex:
        raise OutputWriteError(error(f"no se pudo abrir la salida: {ex}", file=path)) from ex
