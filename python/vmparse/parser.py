from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from lark import Lark, Transformer, exceptions

from .ast import *


@dataclass
class ParseResult:
    commands: Optional[List[Command]]
    errors: List[ParseError]


class CommandBuilder(Transformer):
    def __init__(self, line: int = 0):
        super().__init__()
        self.line = line

    def start(self, items):
        return list(items)

    # --- memory access ---
    def push(self, items):
        segment, index = items
        return Push(
            segment=Segment.parse(str(segment)),
            index=int(index),
            line=self.line,
        )

    def pop(self, items):
        segment, index = items
        seg = Segment.parse(str(segment))
        if seg is Segment.CONSTANT:
            raise InvalidSegment("pop cannot target the constant segment")
        return Pop(segment=seg, index=int(index), line=self.line)

    # --- arithmetic ---
    def arithmetic(self, items):
        return Arithmetic(op=Operator.parse(str(items[0])), line=self.line)

    # --- program flow ---
    def label(self, items):
        return Label(name=str(items[0]), line=self.line)

    def goto(self, items):
        return Goto(name=str(items[0]), line=self.line)

    def if_goto(self, items):
        return IfGoto(name=str(items[0]), line=self.line)

    # --- functions ---
    def function(self, items):
        name, n_locals = items
        return Function(name=str(name), n_locals=int(n_locals), line=self.line)

    def call(self, items):
        name, n_args = items
        return Call(name=str(name), n_args=int(n_args), line=self.line)

    def return_(self, items):
        return Return(line=self.line)


def make_parser() -> Lark:
    grammar = Path(__file__).with_name("vm.lark").read_text(encoding="utf-8")
    return Lark(grammar, start="start", parser="lalr")


_PARSER: Optional[Lark] = None


def parse_line(text: str, line: int) -> List[Command]:
    """Commands on one source line (zero or one); raises on bad input."""
    global _PARSER
    if _PARSER is None:
        _PARSER = make_parser()
    return CommandBuilder(line).transform(_PARSER.parse(text))


def parse_text(text: str) -> ParseResult:
    # lines are independent, so one bad line does not hide the next one
    commands: List[Command] = []
    errors: List[ParseError] = []
    for lineno, line in enumerate(text.splitlines(), 1):
        try:
            commands.extend(parse_line(line, lineno))
        except exceptions.UnexpectedInput as e:
            errors.append(ParseError(message=str(e), line=lineno, column=e.column))
        except exceptions.VisitError as e:
            # unknown segment/operator raised while building a command
            if not isinstance(e.orig_exc, TranslationError):
                raise
            errors.append(ParseError(message=str(e.orig_exc), line=lineno, column=1))
    if errors:
        return ParseResult(commands=None, errors=errors)
    return ParseResult(commands=commands, errors=[])
