# vmtrans/asm.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Union


# Hack memory map
SP = "SP"
LCL = "LCL"
ARG = "ARG"
THIS = "THIS"
THAT = "THAT"
R13 = "R13"
R14 = "R14"

POINTER_BASE = 3
TEMP_BASE = 5
STACK_BASE = 256

TRUE = -1
FALSE = 0


@dataclass(frozen=True)
class At:
    """A-instruction: ``@value``."""
    value: Union[int, str]

    def render(self) -> str:
        return f"@{self.value}"


@dataclass(frozen=True)
class Compute:
    """C-instruction: ``dest=comp;jump``."""
    comp: str
    dest: str = ""
    jump: str = ""

    def render(self) -> str:
        s = self.comp
        if self.dest:
            s = f"{self.dest}={s}"
        if self.jump:
            s = f"{s};{self.jump}"
        return s


@dataclass(frozen=True)
class LabelDef:
    name: str

    def render(self) -> str:
        return f"({self.name})"


@dataclass(frozen=True)
class Comment:
    text: str

    def render(self) -> str:
        return f"// {self.text}"


Instruction = Union[At, Compute, LabelDef, Comment]


def assign(dest: str, comp: str) -> Compute:
    return Compute(comp=comp, dest=dest)


def jump(comp: str, cond: str = "JMP") -> Compute:
    return Compute(comp=comp, jump=cond)


# ----------------- stack snippets -----------------

def push_d() -> List[Instruction]:
    # *SP = D; SP++
    return [At(SP), assign("A", "M"), assign("M", "D"), At(SP), assign("M", "M+1")]


def pop_d() -> List[Instruction]:
    # SP--; D = *SP
    return [At(SP), assign("AM", "M-1"), assign("D", "M")]


# ----------------- sink -----------------

@dataclass
class AsmProgram:
    lines: List[Instruction] = field(default_factory=list)

    def extend(self, instrs: Iterable[Instruction]) -> None:
        self.lines.extend(instrs)

    def comment(self, text: str) -> None:
        self.lines.append(Comment(text))

    def code_size(self) -> int:
        """Number of instructions that occupy ROM (labels and comments don't)."""
        return sum(1 for i in self.lines if isinstance(i, (At, Compute)))

    def render(self) -> str:
        return "\n".join(i.render() for i in self.lines) + "\n"

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render())
