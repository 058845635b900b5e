# vmtrans/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from vmparse.ast import TranslationError

from .asm import STACK_BASE
from .translator import DEFAULT_BUF, default_output, translate_path
from .writer import WriterOptions


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        prog="vmtrans",
        description="Translate VM code (.vm file or directory) to Hack assembly",
    )
    p.add_argument("input", help="Input .vm file or directory of .vm files")
    p.add_argument("-o", "--output", help="Output .asm file (default: next to input)")
    p.add_argument("--no-bootstrap", action="store_true", help="Do not emit SP=256; call Sys.init")
    p.add_argument("--annotate", action="store_true", help="Emit each VM command as a comment")
    p.add_argument("--stack-base", type=int, default=STACK_BASE, help="Initial stack pointer")
    p.add_argument("--entry", default="Sys.init", help="Function called by the bootstrap")
    p.add_argument("--buf", type=int, default=DEFAULT_BUF, help="Read buffer size")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[vmtrans] %(message)s",
    )

    inp = Path(args.input)
    if not inp.exists():
        print(f"[io error] input not found: {inp}", file=sys.stderr)
        return 2

    out = Path(args.output) if args.output else default_output(inp)
    options = WriterOptions(
        bootstrap=not args.no_bootstrap,
        annotate=args.annotate,
        stack_base=args.stack_base,
        entry=args.entry,
    )

    try:
        res = translate_path(inp, out, options, args.buf)
    except TranslationError as e:
        print(f"[translate error] {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"[io error] {e}", file=sys.stderr)
        return 2

    if res.errors:
        for e in res.errors:
            print(e, file=sys.stderr)
        return 2

    print(f"OK. files={len(res.files)}")
    print(f"OK. asm_written={out.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
