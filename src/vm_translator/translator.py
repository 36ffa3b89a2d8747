from __future__ import annotations
import argparse, io, os, sys
from typing import List, Optional, Tuple

from .parser import Parser
from .codegen import CodeWriter
from .labels import LabelAllocator
from .segments import SegmentMap, DEFAULT_SEGMENTS
from .diagnostics import Diagnostic, TranslationError, OutputWriteError
from .writers import write_asm
from .lexer import line_ending

VM_EXT = ".vm"
ASM_EXT = ".asm"

def translate(parser: Parser, writer: CodeWriter) -> int:
    """Bucle del driver: clasificar el siguiente comando y generarlo, luego cerrar.
    Devuelve el número de comandos traducidos."""
    count = 0
    while parser.has_more_commands():
        parser.advance()
        writer.write(parser.instruction())
        count += 1
    writer.close()
    return count

def translate_text(text: str, *, filename: str | None = None, annotate: bool = False,
                   segments: SegmentMap = DEFAULT_SEGMENTS) -> Tuple[List[str], List[Diagnostic]]:
    """Traduce un programa VM completo en memoria.
    Devuelve (líneas_asm, advertencias); los errores se lanzan como TranslationError."""
    out = io.StringIO()
    parser = Parser(text, filename=filename, segments=segments)
    writer = CodeWriter(out, segments=segments, labels=LabelAllocator(),
                        annotate=annotate, filename=filename, newline=line_ending(text))
    translate(parser, writer)
    return out.getvalue().splitlines(), parser.diagnostics

def default_output(source: str) -> str:
    return source[:-len(VM_EXT)] + ASM_EXT

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="vm-translate", description="VM -> Hack assembly translator")
    ap.add_argument("source", help="archivo .vm de entrada")
    ap.add_argument("-o", "--output", help="archivo .asm de salida (por defecto, junto a la entrada)")
    ap.add_argument("--annotate", action="store_true",
                    help="añade un comentario con el comando VM antes de cada bloque")
    args = ap.parse_args(argv)

    if not args.source.endswith(VM_EXT):
        print(f"ERROR: se espera un archivo {VM_EXT}: {args.source}", file=sys.stderr)
        return 2
    out_path = args.output or default_output(args.source)

    try:
        # newline="": conservar "\r\n" para repetirlo en la salida
        with open(args.source, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    name = os.path.basename(args.source)
    try:
        lines, diags = translate_text(text, filename=name, annotate=args.annotate)
    except TranslationError as ex:
        print(ex.diagnostic, file=sys.stderr)
        return 1

    for d in diags:
        print(d, file=sys.stderr)

    try:
        write_asm(lines, out_path, newline=line_ending(text))
    except OutputWriteError as ex:
        print(ex.diagnostic, file=sys.stderr)
        return 3

    print(f"OK: {len(lines)} líneas → {out_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
