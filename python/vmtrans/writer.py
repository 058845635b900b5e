from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Callable, Dict, List, Optional, Set, Union

from vmparse.ast import (
    Command, CommandKind, CommandKindError, OpCategory, Operator,
    Segment, SymbolClashError,
)

from . import arithmetic, calls, flow, memory
from .asm import STACK_BASE, AsmProgram, Instruction, LabelDef
from .symbols import static_symbol

log = logging.getLogger(__name__)


@dataclass
class WriterOptions:
    bootstrap: bool = True
    annotate: bool = False      # "// <vm command>" before each command's code
    stack_base: int = STACK_BASE
    entry: str = "Sys.init"


@dataclass
class TranslationContext:
    file_name: str = ""
    function_name: Optional[str] = None
    label_counter: int = 0
    call_counter: int = 0
    # every label defined so far and every static symbol referenced so far;
    # the assembler has one namespace for both
    labels: Set[str] = field(default_factory=set)
    statics: Set[str] = field(default_factory=set)

    def next_label_ordinal(self) -> int:
        n = self.label_counter
        self.label_counter += 1
        return n

    def next_call_ordinal(self) -> int:
        n = self.call_counter
        self.call_counter += 1
        return n


class CodeWriter:
    """Translates VM commands into Hack instructions appended to ``sink``.

    One writer per translation run; the context it owns carries the label
    and call counters across every file of the run.
    """

    def __init__(self, sink: Optional[AsmProgram] = None, options: Optional[WriterOptions] = None):
        self.sink = sink if sink is not None else AsmProgram()
        self.options = options or WriterOptions()
        self.ctx = TranslationContext()
        self._handlers: Dict[CommandKind, Callable[[Command], List[Instruction]]] = {
            CommandKind.PUSH: lambda c: self._push_pop(c.kind, c.segment, c.index),
            CommandKind.POP: lambda c: self._push_pop(c.kind, c.segment, c.index),
            CommandKind.ARITHMETIC: lambda c: self._arithmetic(c.op),
            CommandKind.LABEL: lambda c: self._label(c.name),
            CommandKind.GOTO: lambda c: self._goto(c.name),
            CommandKind.IF: lambda c: self._if(c.name),
            CommandKind.FUNCTION: lambda c: self._function(c.name, c.n_locals),
            CommandKind.CALL: lambda c: self._call(c.name, c.n_args),
            CommandKind.RETURN: lambda c: calls.return_(),
        }

    def _emit(self, instrs: List[Instruction], note: Optional[str] = None) -> None:
        defined = [i.name for i in instrs if isinstance(i, LabelDef)]
        for name in defined:
            if name in self.ctx.labels:
                raise SymbolClashError(f"label defined twice: {name}")
            if name in self.ctx.statics:
                raise SymbolClashError(f"label {name} clashes with a static variable")
        self.ctx.labels.update(defined)

        if note is not None and self.options.annotate:
            self.sink.comment(note)
        self.sink.extend(instrs)

    # --- control surface ---

    def set_current_file(self, name: str) -> None:
        log.debug("current file: %s", name)
        self.ctx.file_name = name
        self.ctx.function_name = None

    def emit_bootstrap(self) -> None:
        self._emit(calls.bootstrap(
            self.options.stack_base,
            self.options.entry,
            self.ctx.next_call_ordinal(),
        ), note="bootstrap")

    def translate(self, command: Command) -> None:
        handler = self._handlers.get(getattr(command, "kind", None))
        if handler is None:
            raise CommandKindError(f"not a VM command: {command!r}")
        self._emit(handler(command), note=str(command))

    # --- per-kind writers ---

    def write_arithmetic(self, op: Union[str, Operator]) -> None:
        self._emit(self._arithmetic(op))

    def write_push_pop(self, kind: CommandKind, segment: Union[str, Segment], index: int) -> None:
        self._emit(self._push_pop(kind, segment, index))

    def write_label(self, name: str) -> None:
        self._emit(self._label(name))

    def write_goto(self, name: str) -> None:
        self._emit(self._goto(name))

    def write_if(self, name: str) -> None:
        self._emit(self._if(name))

    def write_function(self, name: str, n_locals: int) -> None:
        self._emit(self._function(name, n_locals))

    def write_call(self, name: str, n_args: int) -> None:
        self._emit(self._call(name, n_args))

    def write_return(self) -> None:
        self._emit(calls.return_())

    # --- code for one command ---

    def _arithmetic(self, op: Union[str, Operator]) -> List[Instruction]:
        op = Operator.parse(op)
        if op.category is OpCategory.COMPARISON:
            return arithmetic.compare(op, self.ctx.next_label_ordinal())
        return arithmetic.arithmetic(op)

    def _push_pop(self, kind: CommandKind, segment: Union[str, Segment], index: int) -> List[Instruction]:
        if kind is CommandKind.PUSH:
            code = memory.push(segment, index, self.ctx.file_name)
        elif kind is CommandKind.POP:
            code = memory.pop(segment, index, self.ctx.file_name)
        else:
            raise CommandKindError(f"{kind} neither push nor pop")

        if Segment.parse(segment) is Segment.STATIC:
            symbol = static_symbol(self.ctx.file_name, index)
            if symbol in self.ctx.labels:
                raise SymbolClashError(f"static variable {symbol} clashes with a label")
            self.ctx.statics.add(symbol)
        return code

    def _label(self, name: str) -> List[Instruction]:
        return flow.label(name, self.ctx.file_name, self.ctx.function_name)

    def _goto(self, name: str) -> List[Instruction]:
        return flow.goto(name, self.ctx.file_name, self.ctx.function_name)

    def _if(self, name: str) -> List[Instruction]:
        return flow.if_goto(name, self.ctx.file_name, self.ctx.function_name)

    def _function(self, name: str, n_locals: int) -> List[Instruction]:
        code = calls.function(name, n_locals)
        self.ctx.function_name = name
        return code

    def _call(self, name: str, n_args: int) -> List[Instruction]:
        return calls.call(name, n_args, self.ctx.next_call_ordinal())
