from __future__ import annotations
from typing import Optional, Tuple


def static_symbol(file_name: str, index: int) -> str:
    """Symbol backing ``static index`` in ``file_name``.

    The assembler allocates one RAM cell per distinct symbol, so using the
    file name as prefix keeps two files from sharing a static variable.
    """
    return f"{file_name}.{index}"


def qualify_label(file_name: str, name: str, function_name: Optional[str] = None) -> str:
    # labels are local to the enclosing function; outside any function they
    # fall back to the file scope
    scope = function_name if function_name else file_name
    return f"{scope}${name}"


def return_label(function_name: str, ordinal: int) -> str:
    return f"{function_name}$ret.{ordinal}"


def comparison_labels(ordinal: int) -> Tuple[str, str]:
    # "$<n>" suffix: a static symbol always ends in ".<n>"
    return f"CMP$TRUE${ordinal}", f"CMP$END${ordinal}"
