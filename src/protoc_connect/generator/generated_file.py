from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from protoc_connect.models import GoIdent
from protoc_connect.names import clean_package_name


def _get_template_env() -> Environment:
    template_dir = Path(__file__).parent.parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


class GeneratedFile:
    """Append-only buffer for one generated Go source file.

    Identifiers from other packages are qualified through
    :meth:`qualified_go_ident`, which also records the import; the import
    block is written after the package clause when :meth:`content` is called.
    """

    def __init__(
        self,
        filename: str,
        go_import_path: str,
        package_names: Optional[Dict[str, str]] = None,
    ):
        self.filename = filename
        self.go_import_path = go_import_path
        self._package_names = package_names or {}
        self._lines: List[str] = []
        self._imports: Dict[str, str] = {}
        self._import_index: Optional[int] = None
        self._env = _get_template_env()

    def p(self, *parts) -> None:
        """Append one line made of ``parts``; a :class:`GoIdent` part is qualified."""
        text = []
        for part in parts:
            if isinstance(part, GoIdent):
                text.append(self.qualified_go_ident(part))
            else:
                text.append(str(part))
        self._lines.append("".join(text))

    def extend(self, lines: List[str]) -> None:
        self._lines.extend(lines)

    def package_clause(self, name: str) -> None:
        self.p("package ", name)
        self.p()
        self._import_index = len(self._lines)

    def render(self, template_name: str, **context) -> None:
        """Render a template and append its lines."""
        text = self._env.get_template(template_name).render(**context)
        if text.endswith("\n"):
            text = text[:-1]
        self._lines.extend(text.split("\n"))

    def qualified_go_ident(self, ident: GoIdent) -> str:
        if not ident.import_path or ident.import_path == self.go_import_path:
            return ident.name
        return f"{self._import(ident.import_path)}.{ident.name}"

    def _import(self, import_path: str) -> str:
        if import_path in self._imports:
            return self._imports[import_path]
        base = clean_package_name(
            self._package_names.get(import_path) or posixpath.basename(import_path)
        )
        name = base
        taken = set(self._imports.values())
        suffix = 1
        while name in taken:
            suffix += 1
            name = f"{base}{suffix}"
        self._imports[import_path] = name
        return name

    @property
    def imports(self) -> Dict[str, str]:
        return dict(self._imports)

    def _import_block(self) -> List[str]:
        if not self._imports:
            return []
        block = ["import ("]
        for path in sorted(self._imports):
            block.append(f'\t{self._imports[path]} "{path}"')
        block.append(")")
        block.append("")
        return block

    def content(self) -> str:
        lines = list(self._lines)
        if self._import_index is not None:
            lines[self._import_index:self._import_index] = self._import_block()
        while lines and lines[-1] == "":
            lines.pop()
        return "\n".join(lines) + "\n"
