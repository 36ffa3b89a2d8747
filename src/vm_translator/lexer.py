from __future__ import annotations
from typing import List

from .ast import SourceLine

COMMENT = "//"

def strip_comment(line: str) -> str:
    """Remove a '//' comment and the surrounding whitespace"""
    return line.split(COMMENT, 1)[0].strip()

def is_blank_or_comment(line: str) -> bool:
    return not strip_comment(line)

def source_lines(text: str) -> List[SourceLine]:
    """Keep the command lines of `text`, numbered as in the source file (1-based)."""
    out = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        core = strip_comment(raw)
        if not core:
            continue
        out.append(SourceLine(text=core, line=lineno))
    return out

def line_ending(text: str) -> str:
    """Line terminator of `text`: CRLF when its first line ends with one, else LF."""
    first = text.find("\n")
    if first > 0 and text[first - 1] == "\r":
        return "\r\n"
    return "\n"

def tokens(line: str) -> List[str]:
    return line.split()
