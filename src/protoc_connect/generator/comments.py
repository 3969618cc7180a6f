"""Go doc comment formatting.

Generated doc comments are reflowed so that every line, including the
``// `` prefix, fits in 100 columns. Proto leading comments are copied
verbatim, since their authors already chose the line breaks.
"""

from __future__ import annotations

from typing import List

from protoc_connect.generator.generated_file import GeneratedFile
from protoc_connect.models import CommentFragment, GoIdent

DEPRECATED = "// Deprecated: do not use."
SEPARATOR = "//"


def reflow(text: str, width: int) -> List[str]:
    """Greedily pack the words of ``text`` into lines of at most ``width`` code points.

    A word longer than ``width`` gets a line of its own.
    """
    lines: List[str] = []
    current: List[str] = []
    pos = 0
    for word in text.split():
        n = len(word)
        if pos > 0 and pos + n + 1 > width:
            lines.append(" ".join(current))
            current = []
            pos = 0
        if pos > 0:
            pos += 1
        current.append(word)
        pos += n
    if current:
        lines.append(" ".join(current))
    return lines


def wrap_comments(g: GeneratedFile, *fragments: CommentFragment, width: int) -> List[str]:
    """Join ``fragments`` and reflow them into ``// `` comment lines."""
    text = "".join(
        g.qualified_go_ident(fragment) if isinstance(fragment, GoIdent) else fragment
        for fragment in fragments
    )
    return ["// " + line for line in reflow(text, width)]


def doc_comment(
    g: GeneratedFile,
    *fragments: CommentFragment,
    width: int,
    deprecated: bool = False,
) -> List[str]:
    """A wrapped doc comment, followed by the deprecation marker if needed."""
    lines = wrap_comments(g, *fragments, width=width)
    if deprecated:
        lines.append(SEPARATOR)
        lines.append(DEPRECATED)
    return lines


def leading_comments(comments: str, deprecated: bool) -> List[str]:
    lines: List[str] = []
    if comments:
        body = comments[:-1] if comments.endswith("\n") else comments
        lines = ["//" + line for line in body.split("\n")]
        lines[-1] = lines[-1].rstrip()
    if deprecated:
        if lines:
            lines.append(SEPARATOR)
        lines.append(DEPRECATED)
    return lines
