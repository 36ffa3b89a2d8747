from src.vm_translator.diagnostics import error, warning, ClassificationError

def test_error_str():
    d = error("comando no reconocido", line=12, file="prog.vm", hint="revise la sintaxis")
    s = str(d)
    assert "prog.vm:12:" in s
    assert "ERROR: comando no reconocido" in s
    assert "(pista: revise la sintaxis)" in s

def test_warning_without_location():
    assert str(warning("temp 9 fuera del segmento")) == "ADVERTENCIA: temp 9 fuera del segmento"

def test_exception_carries_diagnostic():
    ex = ClassificationError(error("x", line=3), "foo 1 2")
    assert ex.line == 3
    assert ex.text == "foo 1 2"
    assert str(ex) == "3: ERROR: x"
