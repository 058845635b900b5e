from __future__ import annotations
from typing import List, Optional

from .asm import At, Instruction, LabelDef, jump, pop_d
from .symbols import qualify_label


def label(name: str, file_name: str, function_name: Optional[str] = None) -> List[Instruction]:
    return [LabelDef(qualify_label(file_name, name, function_name))]


def goto(name: str, file_name: str, function_name: Optional[str] = None) -> List[Instruction]:
    return [At(qualify_label(file_name, name, function_name)), jump("0")]


def if_goto(name: str, file_name: str, function_name: Optional[str] = None) -> List[Instruction]:
    # the condition is always consumed, the jump is taken on any non-zero value
    return pop_d() + [At(qualify_label(file_name, name, function_name)), jump("D", "JNE")]
