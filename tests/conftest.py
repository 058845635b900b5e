from __future__ import annotations
from typing import Dict, Optional

import pytest

from hackemu import HackCPU
from vmparse.parser import parse_text
from vmtrans.writer import CodeWriter, WriterOptions

# segment bases used when running without the bootstrap
INITIAL = {"SP": 256, "LCL": 300, "ARG": 400, "THIS": 3000, "THAT": 3010}


def translate(files: Dict[str, str], bootstrap: bool = False) -> CodeWriter:
    writer = CodeWriter(options=WriterOptions(bootstrap=bootstrap))
    if bootstrap:
        writer.emit_bootstrap()
    for name, text in files.items():
        res = parse_text(text)
        assert not res.errors, res.errors
        writer.set_current_file(name)
        for command in res.commands:
            writer.translate(command)
    return writer


def run_vm(files: Dict[str, str], bootstrap: bool = False, until: Optional[str] = None) -> HackCPU:
    writer = translate(files, bootstrap=bootstrap)
    cpu = HackCPU(writer.sink.lines)
    if not bootstrap:
        for cell, value in INITIAL.items():
            cpu[cell] = value
    return cpu.run(until=until)


@pytest.fixture
def vm():
    return run_vm
