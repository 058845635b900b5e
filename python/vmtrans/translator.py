# vmtrans/translator.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import List, Optional

from vmparse.parser import parse_text

from .asm import AsmProgram
from .writer import CodeWriter, WriterOptions

log = logging.getLogger(__name__)

DEFAULT_BUF = 64 * 1024


@dataclass
class TranslationResult:
    program: Optional[AsmProgram]
    errors: List[str] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)


def read_source(path: Path, buf_size: int = DEFAULT_BUF) -> str:
    # read in blocks, not the whole file in one call
    chunks = []
    with open(path, "r", encoding="utf-8") as f:
        for part in iter(partial(f.read, buf_size), ""):
            chunks.append(part)
    return "".join(chunks)


def collect_sources(path: Path) -> List[Path]:
    """A single ``.vm`` file, or every ``.vm`` file of a directory (sorted)."""
    if path.is_dir():
        return sorted(p for p in path.glob("*.vm") if p.is_file())
    if path.suffix != ".vm":
        raise ValueError(f"not a .vm file: {path}")
    return [path]


def default_output(path: Path) -> Path:
    # Foo.vm -> Foo.asm; Prog/ -> Prog/Prog.asm
    if path.is_dir():
        return path / f"{path.resolve().name}.asm"
    return path.with_suffix(".asm")


def translate_sources(
    sources: List[Path],
    options: Optional[WriterOptions] = None,
    buf_size: int = DEFAULT_BUF,
) -> TranslationResult:
    options = options or WriterOptions()
    writer = CodeWriter(AsmProgram(), options)

    if options.bootstrap:
        writer.emit_bootstrap()

    for src in sources:
        text = read_source(src, buf_size)
        res = parse_text(text)
        if res.errors:
            errors = [
                f"[parse error] {src.name}: line={e.line} col={e.column}: {e.message}"
                for e in res.errors
            ]
            return TranslationResult(program=None, errors=errors, files=list(sources))

        writer.set_current_file(src.stem)
        for command in res.commands or []:
            writer.translate(command)
        log.info("translated %s (%d commands)", src.name, len(res.commands or []))

    log.debug("instructions: %d", writer.sink.code_size())
    return TranslationResult(program=writer.sink, files=list(sources))


def translate_path(
    inp: Path,
    out: Optional[Path] = None,
    options: Optional[WriterOptions] = None,
    buf_size: int = DEFAULT_BUF,
) -> TranslationResult:
    sources = collect_sources(inp)
    if not sources:
        return TranslationResult(program=None, errors=[f"[io error] no .vm files in {inp}"])

    res = translate_sources(sources, options, buf_size)
    if res.program is not None:
        out = out or default_output(inp)
        out.parent.mkdir(parents=True, exist_ok=True)
        res.program.save(str(out))
    return res
