"""Block provenance markers.

Each statement a block emits is preceded by an inert comment line carrying the
block id. A runtime traceback line number can then be mapped back to the
block by scanning upward to the nearest marker.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING

from blockgen.codegen._constants import _MARKER_PREFIX, _MARKER_RE
from blockgen.codegen.registry import GeneratorOutput

if TYPE_CHECKING:
    from blockgen.codegen.context import CodegenContext
    from blockgen.core.node import Node

NodeCompiler = Callable[["Node", "CodegenContext"], GeneratorOutput]


def marker_line(node_id: str) -> str:
    return f"{_MARKER_PREFIX}{node_id}"


def tag_statement(node_id: str, code: str) -> str:
    if not code or "\n" not in code:
        return code
    return f"{marker_line(node_id)}\n{code}"


def with_provenance(fn: NodeCompiler) -> NodeCompiler:
    """Prefix every statement ``fn`` produces with its node's marker line."""

    @functools.wraps(fn)
    def _tagged(node: Node, ctx: CodegenContext) -> GeneratorOutput:
        result = fn(node, ctx)
        if isinstance(result, str):
            return tag_statement(node.id, result)
        return result

    return _tagged


def strip_markers(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if _MARKER_RE.match(line) is None)


def markers(text: str) -> list[tuple[int, str]]:
    """Return ``(line_number, node_id)`` for every marker, 1-based."""
    found: list[tuple[int, str]] = []
    for index, line in enumerate(text.split("\n"), start=1):
        match = _MARKER_RE.match(line)
        if match is not None:
            found.append((index, match.group(1)))
    return found


def resolve_line(text: str, line_number: int) -> str | None:
    """Return the id of the block that emitted ``line_number`` (1-based), if known."""
    lines = text.split("\n")
    if line_number < 1:
        return None
    start = min(line_number, len(lines)) - 1
    for index in range(start, -1, -1):
        match = _MARKER_RE.match(lines[index])
        if match is not None:
            return match.group(1)
    return None


def clean_line_map(text: str) -> dict[int, int]:
    """Map line numbers of the marker-free text to line numbers of ``text``."""
    mapping: dict[int, int] = {}
    clean_number = 0
    for index, line in enumerate(text.split("\n"), start=1):
        if _MARKER_RE.match(line) is not None:
            continue
        clean_number += 1
        mapping[clean_number] = index
    return mapping
