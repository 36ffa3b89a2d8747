import io
import pytest
from src.vm_translator.codegen import CodeWriter
from src.vm_translator.ast import CommandType, Arithmetic, Push, Pop, Label, Call, Return
from src.vm_translator.labels import LabelAllocator, HALT_LABEL
from src.vm_translator.diagnostics import UnsupportedCommandError, OutputWriteError

BOOT = [
    "@256", "D=A", "@SP", "M=D",
    "@2048", "D=A", "@LCL", "M=D",
    "@2304", "D=A", "@ARG", "M=D",
    "@2560", "D=A", "@THIS", "M=D",
    "@3072", "D=A", "@THAT", "M=D",
]

def _writer(**kw):
    out = io.StringIO()
    return CodeWriter(out, **kw), out

def _lines(out):
    return out.getvalue().splitlines()

def test_bootstrap_emitted_on_construction():
    w, out = _writer()
    assert _lines(out) == BOOT

def test_close_emits_halt_once():
    w, out = _writer()
    w.close()
    w.close()
    assert _lines(out)[len(BOOT):] == [f"({HALT_LABEL})", f"@{HALT_LABEL}", "0;JMP"]

def test_write_after_close_fails():
    w, out = _writer()
    w.close()
    with pytest.raises(OutputWriteError):
        w.write(Arithmetic("add"))

def test_closed_stream_is_an_output_error():
    out = io.StringIO()
    w = CodeWriter(out)
    out.close()
    with pytest.raises(OutputWriteError):
        w.write(Push("constant", 1))

def test_unary_templates():
    w, out = _writer()
    w.write(Arithmetic("neg"))
    w.write(Arithmetic("not"))
    assert _lines(out)[len(BOOT):] == ["@SP", "A=M-1", "M=-M", "@SP", "A=M-1", "M=!M"]

def test_sub_template():
    w, out = _writer()
    w.write(Arithmetic("sub"))
    assert _lines(out)[len(BOOT):] == [
        "@SP", "M=M-1", "A=M", "D=M",
        "@SP", "M=M-1", "A=M", "M=M-D",
        "@SP", "M=M+1",
    ]

@pytest.mark.parametrize("op, jump", [("eq", "D;JEQ"), ("lt", "D;JLT"), ("gt", "D;JGT")])
def test_comparison_jump_mnemonic(op, jump):
    w, out = _writer()
    w.write(Arithmetic(op))
    body = _lines(out)[len(BOOT):]
    assert "D=M-D" in body
    assert body[body.index("D=M-D") + 2] == jump
    assert "(vm.assign.true$0)" in body and "(vm.assign.false$1)" in body

def test_comparison_labels_are_unique():
    alloc = LabelAllocator()
    w, out = _writer(labels=alloc)
    for op in ["eq", "lt", "gt"] * 10:
        w.write(Arithmetic(op))
    w.write(Push("static", 0))
    w.close()
    decls = [l for l in _lines(out) if l.startswith("(")]
    assert len(decls) == 61
    assert len(set(decls)) == len(decls)
    assert alloc.issued == 60
    assert not any("static" in d for d in decls)

def test_push_segments():
    w, out = _writer()
    w.write(Push("local", 3))
    w.write(Push("static", 5))
    w.write(Push("temp", 2))
    w.write(Push("pointer", 1))
    w.write(Push("constant", 17))
    body = _lines(out)[len(BOOT):]
    tail = ["@SP", "A=M", "M=D", "@SP", "M=M+1"]
    assert body == (
        ["@LCL", "D=M", "@3", "A=D+A", "D=M"] + tail
        + ["@static.5", "D=M"] + tail
        + ["@7", "D=M"] + tail
        + ["@THAT", "D=M"] + tail
        + ["@17", "D=A"] + tail
    )

def test_pop_stashes_address_before_reading_stack():
    w, out = _writer()
    w.write(Pop("argument", 2))
    assert _lines(out)[len(BOOT):] == [
        "@ARG", "D=M", "@2", "A=D+A", "D=A", "@13", "M=D",
        "@SP", "M=M-1", "A=M", "D=M",
        "@13", "A=M", "M=D",
    ]

def test_write_push_pop_accepts_command_type():
    w, out = _writer()
    w.write_push_pop(CommandType.POP, "pointer", 0)
    assert _lines(out)[len(BOOT):][:4] == ["@THIS", "D=A", "@13", "M=D"]

@pytest.mark.parametrize("ins", [Label("L", line=4), Call("f", 0, line=4), Return(line=4)])
def test_unimplemented_commands_are_rejected(ins):
    w, out = _writer(filename="t.vm")
    with pytest.raises(UnsupportedCommandError) as ei:
        w.write(ins)
    assert ei.value.line == 4
    assert "t.vm:4:" in str(ei.value)

def test_annotate_mode():
    w, out = _writer(annotate=True)
    w.write(Push("constant", 7))
    w.close()
    lines = _lines(out)
    assert lines[0] == "// bootstrap"
    assert "// push constant 7" in lines
    assert lines[-4] == "// halt"

def test_crlf_output():
    w, out = _writer(newline="\r\n")
    w.write(Arithmetic("add"))
    w.close()
    text = out.getvalue()
    assert text.endswith("0;JMP\r\n")
    assert text.count("\n") == text.count("\r\n") == len(_lines(out))
