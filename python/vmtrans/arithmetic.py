from __future__ import annotations
from typing import List, Optional, Union

from vmparse.ast import Operator, OpCategory

from .asm import SP, TRUE, FALSE, At, Instruction, LabelDef, assign, jump
from .symbols import comparison_labels


_UNARY = {
    Operator.NEG: "-M",
    Operator.NOT: "!M",
}

# x is the deeper operand (in M), y the popped one (in D)
_BINARY = {
    Operator.ADD: "D+M",
    Operator.SUB: "M-D",
    Operator.AND: "D&M",
    Operator.OR: "D|M",
}

# jump taken when x - y satisfies the condition
_JUMPS = {
    Operator.EQ: "JEQ",
    Operator.GT: "JGT",
    Operator.LT: "JLT",
}


def _expect(op: Union[str, Operator], category: OpCategory) -> Operator:
    op = Operator.parse(op)
    if op.category is not category:
        raise ValueError(f"{op.value} is not a {category.value} operator")
    return op


def unary(op: Union[str, Operator]) -> List[Instruction]:
    op = _expect(op, OpCategory.UNARY)
    return [At(SP), assign("A", "M-1"), assign("M", _UNARY[op])]


def binary(op: Union[str, Operator]) -> List[Instruction]:
    op = _expect(op, OpCategory.BINARY)
    return [
        At(SP), assign("AM", "M-1"), assign("D", "M"),
        assign("A", "A-1"), assign("M", _BINARY[op]),
    ]


def compare(op: Union[str, Operator], ordinal: int) -> List[Instruction]:
    op = _expect(op, OpCategory.COMPARISON)
    true_label, end_label = comparison_labels(ordinal)
    return [
        At(SP), assign("AM", "M-1"), assign("D", "M"),
        assign("A", "A-1"), assign("D", "M-D"),
        At(true_label), jump("D", _JUMPS[op]),
        # false
        At(SP), assign("A", "M-1"), assign("M", str(FALSE)),
        At(end_label), jump("0"),
        LabelDef(true_label),
        At(SP), assign("A", "M-1"), assign("M", str(TRUE)),
        LabelDef(end_label),
    ]


def arithmetic(op: Union[str, Operator], ordinal: Optional[int] = None) -> List[Instruction]:
    op = Operator.parse(op)
    if op.category is OpCategory.UNARY:
        return unary(op)
    if op.category is OpCategory.BINARY:
        return binary(op)
    if ordinal is None:
        raise ValueError(f"{op.value} needs a label ordinal")
    return compare(op, ordinal)
