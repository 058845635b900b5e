"""Run generated code on the Hack emulator and check VM semantics."""
import pytest

from hackemu import HackCPU
from vmparse.ast import Arithmetic, IfGoto, Operator, Pop, Push, Segment
from vmtrans.asm import LabelDef
from vmtrans.writer import CodeWriter

from conftest import INITIAL, translate


TRUE, FALSE = -1, 0


def test_push_pop_round_trip(vm):
    cpu = vm({"Main": "push constant 7\npop local 0\npush local 0\n"})
    assert cpu.sp == 257
    assert cpu.stack() == [7]
    assert cpu.peek(300) == 7


@pytest.mark.parametrize("program, depth", [
    ("push constant 1\npush constant 2\nadd\n", 1),
    ("push constant 1\npush constant 2\npush constant 3\nlt\nneg\n", 2),
    ("push constant 4\npop temp 0\npush temp 0\npush temp 0\neq\nnot\n", 1),
    ("push constant 9\npush constant 8\npush constant 7\nsub\nor\npop static 0\n", 0),
])
def test_stack_balance(vm, program, depth):
    cpu = vm({"Main": program})
    assert cpu.sp == 256 + depth


@pytest.mark.parametrize("program, expected", [
    ("push constant 7\npush constant 8\nadd", 15),
    ("push constant 7\npush constant 8\nsub", -1),
    ("push constant 12\nneg", -12),
    ("push constant 12\npush constant 10\nand", 8),
    ("push constant 12\npush constant 3\nor", 15),
    ("push constant 0\nnot", TRUE),
    ("push constant 5\npush constant 3\ngt", TRUE),
    ("push constant 3\npush constant 5\ngt", FALSE),
    ("push constant 3\npush constant 5\nlt", TRUE),
    ("push constant 5\npush constant 5\nlt", FALSE),
    ("push constant 5\npush constant 5\neq", TRUE),
    ("push constant 5\npush constant 6\neq", FALSE),
    ("push constant 0\npush constant 5\nsub\npush constant 3\nlt", TRUE),
])
def test_arithmetic_results(vm, program, expected):
    cpu = vm({"Main": program + "\n"})
    assert cpu.stack() == [expected]


def test_hundred_comparisons_have_distinct_labels():
    ops = [Operator.EQ, Operator.GT, Operator.LT]
    w = CodeWriter()
    w.set_current_file("Main")
    for n in range(100):
        w.translate(Push(Segment.CONSTANT, n))
        w.translate(Push(Segment.CONSTANT, 50))
        w.translate(Arithmetic(ops[n % 3]))
        w.translate(Pop(Segment.TEMP, 0))
    names = [i.name for i in w.sink.lines if isinstance(i, LabelDef)]
    assert len(names) == 200
    assert len(set(names)) == 200
    # assembling would fail on a duplicate label
    cpu = HackCPU(w.sink.lines)
    cpu[0] = 256
    cpu.run()
    assert cpu.sp == 256


def test_pointer_this_that(vm):
    cpu = vm({"Main": """
        push constant 3030
        pop pointer 0
        push constant 3040
        pop pointer 1
        push constant 32
        pop this 2
        push constant 46
        pop that 6
        push pointer 0
        push pointer 1
        add
        push this 2
        sub
        push that 6
        add
    """})
    assert cpu["THIS"] == 3030
    assert cpu["THAT"] == 3040
    assert cpu.peek(3032) == 32
    assert cpu.peek(3046) == 46
    assert cpu.stack() == [3030 + 3040 - 32 + 46]


def test_temp_and_argument(vm):
    cpu = vm({"Main": "push constant 510\npop temp 6\npush constant 21\npop argument 2\npush temp 6\npush argument 2\nsub\n"})
    assert cpu.peek(11) == 510
    assert cpu.peek(402) == 21
    assert cpu.stack() == [489]


def test_static_isolation():
    w = CodeWriter()
    w.set_current_file("A")
    w.translate(Push(Segment.CONSTANT, 5))
    w.translate(Pop(Segment.STATIC, 2))
    w.set_current_file("B")
    w.translate(Push(Segment.CONSTANT, 9))
    w.translate(Pop(Segment.STATIC, 2))
    w.set_current_file("A")
    w.translate(Push(Segment.STATIC, 2))
    w.set_current_file("B")
    w.translate(Push(Segment.STATIC, 2))

    cpu = HackCPU(w.sink.lines)
    cpu[0] = 256
    cpu.run()
    assert cpu["A.2"] == 5
    assert cpu["B.2"] == 9
    assert cpu.stack() == [5, 9]


@pytest.mark.parametrize("cond, expected", [(1, 200), (-1, 200), (0, 100)])
def test_if_goto_consumes_condition(cond, expected):
    w = CodeWriter()
    w.set_current_file("Main")
    w.translate(Push(Segment.CONSTANT, abs(cond)))
    if cond < 0:
        w.translate(Arithmetic(Operator.NEG))
    w.translate(IfGoto("TAKEN"))
    # fall-through path
    w.translate(Push(Segment.CONSTANT, 100))
    w.write_goto("DONE")
    w.write_label("TAKEN")
    w.translate(Push(Segment.CONSTANT, 200))
    w.write_label("DONE")

    cpu = HackCPU(w.sink.lines)
    cpu[0] = 256
    cpu.run()
    assert cpu.stack() == [expected]


CALLER = """
push constant 7
call Foo 0
label END
goto END
function Foo 0
push constant 42
return
"""


def test_call_return_frame_integrity(vm):
    cpu = vm({"Main": CALLER})
    assert cpu.sp == 258
    assert cpu.stack() == [7, 42]
    for cell, value in INITIAL.items():
        if cell != "SP":
            assert cpu[cell] == value


def test_call_with_arguments_and_locals(vm):
    cpu = vm({"Main": """
        push constant 10
        push constant 32
        call Main.add 2
        label END
        goto END
        function Main.add 2
        push argument 0
        push argument 1
        add
        pop local 1
        push local 0
        push local 1
        add
        return
    """})
    assert cpu.stack() == [42]
    assert cpu["LCL"] == 300
    assert cpu["ARG"] == 400


SYS = """
function Sys.init 0
push constant 10
call Sum.sum 1
pop static 0
label HALT
goto HALT
"""

SUM = """
// sum(n) = n + sum(n - 1), sum(0) = 0
function Sum.sum 0
push argument 0
push constant 0
eq
if-goto BASE
push argument 0
push argument 0
push constant 1
sub
call Sum.sum 1
add
return
label BASE
push constant 0
return
"""


def test_recursive_program_with_bootstrap(vm):
    cpu = vm({"Sum": SUM, "Sys": SYS}, bootstrap=True)
    assert cpu.halted
    assert cpu["Sys.0"] == 55
    # Sys.init's frame: 5 saved cells above SP=256, no locals, nothing left on its stack
    assert cpu.sp == 261
    assert cpu["LCL"] == 261
    assert cpu["ARG"] == 256


def test_return_address_survives_zero_argument_call(vm):
    # with no arguments ARG points at the return address slot
    cpu = vm({"Sys": """
        function Sys.init 0
        call Sys.zero 0
        call Sys.zero 0
        add
        pop static 1
        label HALT
        goto HALT
        function Sys.zero 1
        push local 0
        push constant 1
        add
        return
    """}, bootstrap=True)
    assert cpu["Sys.1"] == 2


def test_bootstrap_is_first():
    w = translate({"Sys": SYS}, bootstrap=True)
    assert w.sink.render().splitlines()[:4] == ["@256", "D=A", "@SP", "M=D"]
