import pytest
from src.vm_translator.hack import load, run_asm, HackMachine, MachineError, AInstr, CInstr

def test_load_resolves_labels_and_variables():
    prog = load(["// c", "@x", "M=1", "(LOOP)", "@y", "@LOOP", "0;JMP"])
    assert prog.symbols["LOOP"] == 2
    assert prog.symbols["x"] == 16 and prog.symbols["y"] == 17
    assert prog.code[0] == AInstr(16)
    assert prog.code[1] == CInstr(dest="M", comp="1", jump=None)

def test_run_until_halt_loop():
    m, steps = run_asm(["@5", "D=A", "@R0", "M=D", "(END)", "@END", "0;JMP"])
    assert m.halted
    assert m.peek(0) == 5
    assert steps == 6

def test_sixteen_bit_wraparound():
    m, _ = run_asm(["@32767", "D=A", "D=D+1", "@R1", "M=D", "(E)", "@E", "0;JMP"])
    assert m.peek(1) == -32768

def test_conditional_jump():
    src = ["@3", "D=A", "@NEG", "D;JLT", "@R2", "M=1", "(NEG)", "(E)", "@E", "0;JMP"]
    m, _ = run_asm(src)
    assert m.peek(2) == 1

@pytest.mark.parametrize("bad", [["D=Q"], ["0;JXX"], ["X=D"], ["@40000"], ["(A)", "(A)"]])
def test_invalid_programs(bad):
    with pytest.raises(MachineError):
        load(bad)

def test_step_limit_and_bounds():
    with pytest.raises(MachineError):
        run_asm(["(L)", "@L", "D;JEQ"], max_steps=50)
    m = HackMachine(load(["@30000", "M=1"]))
    m.step()
    with pytest.raises(MachineError):
        m.step()

def test_jump_uses_address_loaded_before_instruction():
    src = [
        "@WRONG", "D=A", "@RIGHT", "A=D;JMP",
        "(RIGHT)", "@R0", "M=1", "@END", "0;JMP",
        "(WRONG)", "@R0", "M=-1",
        "(END)", "@END", "0;JMP",
    ]
    m, _ = run_asm(src)
    assert m.peek(0) == 1

def test_non_ascii_digits_are_symbols():
    prog = load(["@٣"])
    assert prog.code == [AInstr(16)]
