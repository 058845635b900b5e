from __future__ import annotations
from typing import List, Union

from vmparse.ast import Addressing, InvalidSegment, Segment, SegmentIndexError

from .asm import (
    ARG, LCL, POINTER_BASE, R13, TEMP_BASE, THAT, THIS,
    At, Instruction, assign, pop_d, push_d,
)
from .symbols import static_symbol


# base cells of the dynamic segments
_BASE_CELLS = {
    Segment.LOCAL: LCL,
    Segment.ARGUMENT: ARG,
    Segment.THIS: THIS,
    Segment.THAT: THAT,
}

# (base address, number of cells)
_FIXED = {
    Segment.POINTER: (POINTER_BASE, 2),
    Segment.TEMP: (TEMP_BASE, 8),
}


def _fixed_address(segment: Segment, index: int) -> int:
    base, size = _FIXED[segment]
    if not 0 <= index < size:
        raise SegmentIndexError(
            f"{segment.value} index out of range 0..{size - 1}: {index}"
        )
    return base + index


def push(segment: Union[str, Segment], index: int, file_name: str) -> List[Instruction]:
    segment = Segment.parse(segment)
    mode = segment.addressing

    if mode is Addressing.LITERAL:
        load = [At(index), assign("D", "A")]
    elif mode is Addressing.DYNAMIC:
        load = [
            At(_BASE_CELLS[segment]), assign("D", "M"),
            At(index), assign("A", "D+A"), assign("D", "M"),
        ]
    elif mode is Addressing.FIXED:
        load = [At(_fixed_address(segment, index)), assign("D", "M")]
    else:
        load = [At(static_symbol(file_name, index)), assign("D", "M")]

    return load + push_d()


def pop(segment: Union[str, Segment], index: int, file_name: str) -> List[Instruction]:
    segment = Segment.parse(segment)
    mode = segment.addressing

    if mode is Addressing.LITERAL:
        raise InvalidSegment("pop cannot target the constant segment")

    if mode is Addressing.DYNAMIC:
        # address goes to R13 first; D is needed for the popped value
        return [
            At(_BASE_CELLS[segment]), assign("D", "M"),
            At(index), assign("D", "D+A"),
            At(R13), assign("M", "D"),
        ] + pop_d() + [
            At(R13), assign("A", "M"), assign("M", "D"),
        ]

    if mode is Addressing.FIXED:
        target = At(_fixed_address(segment, index))
    else:
        target = At(static_symbol(file_name, index))
    return pop_d() + [target, assign("M", "D")]
