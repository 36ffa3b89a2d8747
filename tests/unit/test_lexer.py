import pytest
from src.vm_translator.lexer import strip_comment, is_blank_or_comment, source_lines, tokens, line_ending
from src.vm_translator.ast import SourceLine

# --- strip_comment ---
@pytest.mark.parametrize("src, expected", [
    ("push constant 7 // siete", "push constant 7"),
    ("// full comment", ""),
    ("   add   ", "add"),
    ("", ""),
])
def test_strip_comment(src, expected):
    assert strip_comment(src) == expected

@pytest.mark.parametrize("src, expected", [
    ("", True),
    ("   ", True),
    ("  // nota", True),
    ("neg", False),
])
def test_is_blank_or_comment(src, expected):
    assert is_blank_or_comment(src) == expected

def test_source_lines_keep_file_line_numbers():
    text = "// cabecera\n\npush constant 1\n   \n  add  // suma\n"
    assert source_lines(text) == [
        SourceLine("push constant 1", 3),
        SourceLine("add", 5),
    ]

def test_tokens_split_on_any_whitespace():
    assert tokens("push\tlocal   2") == ["push", "local", "2"]

@pytest.mark.parametrize("text, expected", [
    ("add\r\nneg\r\n", "\r\n"),
    ("add\nneg\n", "\n"),
    ("add", "\n"),
    ("", "\n"),
])
def test_line_ending(text, expected):
    assert line_ending(text) == expected
