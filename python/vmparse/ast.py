from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


@dataclass
class ParseError:
    message: str
    line: int
    column: int


# ---- Errors ----
class TranslationError(ValueError):
    pass


class UnknownOperator(TranslationError):
    def __init__(self, name: str):
        super().__init__(f"unknown arithmetic command: {name}")
        self.name = name


class UnknownSegment(TranslationError):
    def __init__(self, name: str):
        super().__init__(f"{name} is not a valid segment")
        self.name = name


class InvalidSegment(TranslationError):
    pass


class SegmentIndexError(TranslationError):
    pass


class CommandKindError(TranslationError):
    pass


class SymbolClashError(TranslationError):
    pass


# ---- Kinds ----
class CommandKind(Enum):
    PUSH = "C_PUSH"
    POP = "C_POP"
    ARITHMETIC = "C_ARITHMETIC"
    LABEL = "C_LABEL"
    GOTO = "C_GOTO"
    IF = "C_IF"
    FUNCTION = "C_FUNCTION"
    CALL = "C_CALL"
    RETURN = "C_RETURN"


class Addressing(Enum):
    LITERAL = "literal"   # constant: the index is the value
    DYNAMIC = "dynamic"   # base cell + index
    FIXED = "fixed"       # fixed base + index
    STATIC = "static"     # per-file symbol


class Segment(Enum):
    CONSTANT = "constant"
    LOCAL = "local"
    ARGUMENT = "argument"
    THIS = "this"
    THAT = "that"
    POINTER = "pointer"
    TEMP = "temp"
    STATIC = "static"

    @classmethod
    def parse(cls, name: "str | Segment") -> "Segment":
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownSegment(str(name)) from None

    @property
    def addressing(self) -> Addressing:
        return _ADDRESSING[self]


_ADDRESSING = {
    Segment.CONSTANT: Addressing.LITERAL,
    Segment.LOCAL: Addressing.DYNAMIC,
    Segment.ARGUMENT: Addressing.DYNAMIC,
    Segment.THIS: Addressing.DYNAMIC,
    Segment.THAT: Addressing.DYNAMIC,
    Segment.POINTER: Addressing.FIXED,
    Segment.TEMP: Addressing.FIXED,
    Segment.STATIC: Addressing.STATIC,
}


class OpCategory(Enum):
    UNARY = "unary"
    BINARY = "binary"
    COMPARISON = "comparison"


class Operator(Enum):
    ADD = "add"
    SUB = "sub"
    NEG = "neg"
    EQ = "eq"
    GT = "gt"
    LT = "lt"
    AND = "and"
    OR = "or"
    NOT = "not"

    @classmethod
    def parse(cls, name: "str | Operator") -> "Operator":
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownOperator(str(name)) from None

    @property
    def category(self) -> OpCategory:
        if self in (Operator.NEG, Operator.NOT):
            return OpCategory.UNARY
        if self in (Operator.EQ, Operator.GT, Operator.LT):
            return OpCategory.COMPARISON
        return OpCategory.BINARY


# ---- Commands ----
class Command:
    kind: ClassVar[CommandKind]
    line: int


@dataclass(frozen=True)
class Push(Command):
    kind: ClassVar[CommandKind] = CommandKind.PUSH
    segment: Segment
    index: int
    line: int = 0

    def __str__(self) -> str:
        return f"push {self.segment.value} {self.index}"


@dataclass(frozen=True)
class Pop(Command):
    kind: ClassVar[CommandKind] = CommandKind.POP
    segment: Segment
    index: int
    line: int = 0

    def __str__(self) -> str:
        return f"pop {self.segment.value} {self.index}"


@dataclass(frozen=True)
class Arithmetic(Command):
    kind: ClassVar[CommandKind] = CommandKind.ARITHMETIC
    op: Operator
    line: int = 0

    def __str__(self) -> str:
        return self.op.value


@dataclass(frozen=True)
class Label(Command):
    kind: ClassVar[CommandKind] = CommandKind.LABEL
    name: str
    line: int = 0

    def __str__(self) -> str:
        return f"label {self.name}"


@dataclass(frozen=True)
class Goto(Command):
    kind: ClassVar[CommandKind] = CommandKind.GOTO
    name: str
    line: int = 0

    def __str__(self) -> str:
        return f"goto {self.name}"


@dataclass(frozen=True)
class IfGoto(Command):
    kind: ClassVar[CommandKind] = CommandKind.IF
    name: str
    line: int = 0

    def __str__(self) -> str:
        return f"if-goto {self.name}"


@dataclass(frozen=True)
class Function(Command):
    kind: ClassVar[CommandKind] = CommandKind.FUNCTION
    name: str
    n_locals: int
    line: int = 0

    def __str__(self) -> str:
        return f"function {self.name} {self.n_locals}"


@dataclass(frozen=True)
class Call(Command):
    kind: ClassVar[CommandKind] = CommandKind.CALL
    name: str
    n_args: int
    line: int = 0

    def __str__(self) -> str:
        return f"call {self.name} {self.n_args}"


@dataclass(frozen=True)
class Return(Command):
    kind: ClassVar[CommandKind] = CommandKind.RETURN
    line: int = 0

    def __str__(self) -> str:
        return "return"

