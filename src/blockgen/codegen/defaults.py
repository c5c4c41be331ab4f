"""Fallback literals for missing or malformed block input.

Every generator substitutes one of these instead of failing, so a half-built
program still compiles to something that runs.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from blockgen.codegen.context import CodegenContext
    from blockgen.core.node import Node

FALLBACKS: dict[str, str] = {
    "number": "0",
    "text": "''",
    "boolean": "False",
    "colour": "(0, 0, 0)",
    "list": "[]",
    "none": "None",
}

BLACK = (0, 0, 0)

_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")


def parse_int_field(
    node: Node, name: str, ctx: CodegenContext, default: int, *, minimum: int | None = None
) -> int:
    raw = node.get(name)
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        try:
            value = int(float(str(raw).strip()))
        except (TypeError, ValueError):
            ctx.note_malformed(node, name, raw, str(default))
            return default
    if minimum is not None and value < minimum:
        ctx.note_malformed(node, name, raw, str(minimum))
        return minimum
    return value


def parse_number_field(node: Node, name: str, ctx: CodegenContext) -> str:
    """Return the field as numeric source text, or the number fallback."""
    raw = node.get(name)
    if isinstance(raw, bool):
        return "1" if raw else "0"
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float):
        return repr(raw) if raw != int(raw) else str(int(raw))
    text = str(raw).strip() if raw is not None else ""
    try:
        number = float(text)
    except ValueError:
        ctx.note_malformed(node, name, raw, FALLBACKS["number"])
        return FALLBACKS["number"]
    if number != number or number in (float("inf"), float("-inf")):
        ctx.note_malformed(node, name, raw, FALLBACKS["number"])
        return FALLBACKS["number"]
    if number == int(number) and "." not in text and "e" not in text.lower():
        return str(int(number))
    return repr(number)


def parse_hex_colour(raw: Any) -> tuple[int, int, int] | None:
    if not isinstance(raw, str):
        return None
    match = _HEX_RE.match(raw.strip())
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def colour_field(node: Node, name: str, ctx: CodegenContext) -> tuple[int, int, int]:
    raw = node.get(name)
    rgb = parse_hex_colour(raw)
    if rgb is None:
        ctx.note_malformed(node, name, raw, FALLBACKS["colour"])
        return BLACK
    return rgb


def choice_field(
    node: Node, name: str, ctx: CodegenContext, options: tuple[str, ...], default: str
) -> str:
    raw = node.get(name)
    value = str(raw) if raw is not None else ""
    if value in options:
        return value
    ctx.note_malformed(node, name, raw, repr(default))
    return default
