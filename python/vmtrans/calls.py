"""Function entry, call and return.

Frame layout built by ``call`` (addresses grow upwards)::

    ARG ->  arg 0
            ...
            arg n-1
            return address
            saved LCL
            saved ARG
            saved THIS
            saved THAT
    LCL ->  local 0
            ...

``return`` uses R13 for FRAME (the callee's LCL) and R14 for the return
address.
"""
from __future__ import annotations
from typing import List

from .asm import (
    ARG, LCL, R13, R14, SP, STACK_BASE, THAT, THIS,
    At, Instruction, LabelDef, assign, jump, pop_d, push_d,
)
from .symbols import return_label

FRAME_SIZE = 5

# saved by call in this order, restored by return in reverse
_SAVED = (LCL, ARG, THIS, THAT)


def function(name: str, n_locals: int) -> List[Instruction]:
    out: List[Instruction] = [LabelDef(name)]
    for _ in range(n_locals):
        out += [At(SP), assign("A", "M"), assign("M", "0"), At(SP), assign("M", "M+1")]
    return out


def call(name: str, n_args: int, ordinal: int) -> List[Instruction]:
    ret = return_label(name, ordinal)

    out: List[Instruction] = [At(ret), assign("D", "A")] + push_d()
    for cell in _SAVED:
        out += [At(cell), assign("D", "M")] + push_d()

    # ARG = SP - 5 - n_args
    out += [
        At(SP), assign("D", "M"),
        At(FRAME_SIZE + n_args), assign("D", "D-A"),
        At(ARG), assign("M", "D"),
    ]
    # LCL = SP
    out += [At(SP), assign("D", "M"), At(LCL), assign("M", "D")]

    out += [At(name), jump("0"), LabelDef(ret)]
    return out


def return_() -> List[Instruction]:
    # FRAME = LCL
    out: List[Instruction] = [At(LCL), assign("D", "M"), At(R13), assign("M", "D")]
    # RET = *(FRAME - 5); must be read before *ARG is written, ARG may point at it
    out += [
        At(FRAME_SIZE), assign("A", "D-A"), assign("D", "M"),
        At(R14), assign("M", "D"),
    ]
    # *ARG = pop()
    out += pop_d() + [At(ARG), assign("A", "M"), assign("M", "D")]
    # SP = ARG + 1
    out += [At(ARG), assign("D", "M+1"), At(SP), assign("M", "D")]
    # THAT, THIS, ARG, LCL = *(FRAME - 1), ..., *(FRAME - 4)
    for cell in reversed(_SAVED):
        out += [At(R13), assign("AM", "M-1"), assign("D", "M"), At(cell), assign("M", "D")]
    out += [At(R14), assign("A", "M"), jump("0")]
    return out


def bootstrap(stack_base: int = STACK_BASE, entry: str = "Sys.init", ordinal: int = 0) -> List[Instruction]:
    return [
        At(stack_base), assign("D", "A"),
        At(SP), assign("M", "D"),
    ] + call(entry, 0, ordinal)
