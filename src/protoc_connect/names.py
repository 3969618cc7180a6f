"""Go identifier helpers and the per-service name set."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NameSet:
    base: str
    client: str
    client_constructor: str
    client_impl: str
    server: str
    server_constructor: str
    unimplemented_server: str


def unexport(name: str) -> str:
    """Lower-case the first code point only: ``Elizer`` -> ``elizer``."""
    return name[:1].lower() + name[1:]


def new_names(base: str) -> NameSet:
    return NameSet(
        base=base,
        client=f"{base}Client",
        client_constructor=f"New{base}Client",
        client_impl=f"{unexport(base)}Client",
        server=f"{base}Handler",
        server_constructor=f"New{base}Handler",
        unimplemented_server=f"Unimplemented{base}Handler",
    )


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def go_camel_case(name: str) -> str:
    """Camel-case a protobuf name the way protoc-gen-go does.

    - ``.`` followed by a lower-case letter is dropped, other ``.`` become ``_``
    - a leading ``_`` (or one right after ``.``) becomes ``X``
    - ``_`` followed by a lower-case letter is dropped
    - the first letter of every word is upper-cased
    """
    out = []
    i = 0
    while i < len(name):
        c = name[i]
        nxt = name[i + 1] if i + 1 < len(name) else ""
        if c == "." and _is_lower(nxt):
            pass
        elif c == ".":
            out.append("_")
        elif c == "_" and (i == 0 or name[i - 1] == "."):
            out.append("X")
        elif c == "_" and _is_lower(nxt):
            pass
        elif _is_digit(c):
            out.append(c)
        else:
            out.append(c.upper() if _is_lower(c) else c)
            while i + 1 < len(name) and _is_lower(name[i + 1]):
                i += 1
                out.append(name[i])
        i += 1
    return "".join(out)


_GO_KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type",
    "var",
})


def clean_package_name(name: str) -> str:
    """Turn an arbitrary string (usually an import path base) into a Go package name."""
    cleaned = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if cleaned in _GO_KEYWORDS:
        return cleaned + "_"
    if not cleaned or _is_digit(cleaned[0]):
        cleaned = "_" + cleaned
    return cleaned
