"""Tree walker: turns nodes into MicroPython source through the registry."""

from __future__ import annotations

from blockgen.codegen._constants import _PLACEHOLDER, Order
from blockgen.codegen._util import _indent_body
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS
from blockgen.codegen.provenance import with_provenance
from blockgen.codegen.registry import GeneratorOutput, ValueResult
from blockgen.core.node import Node

# (outer, inner) pairs that read the same without grouping
_ORDER_OVERRIDES = frozenset(
    {
        (Order.FUNCTION_CALL, Order.MEMBER),
        (Order.FUNCTION_CALL, Order.FUNCTION_CALL),
        (Order.MEMBER, Order.MEMBER),
        (Order.MEMBER, Order.FUNCTION_CALL),
        (Order.LOGICAL_NOT, Order.LOGICAL_NOT),
        (Order.LOGICAL_AND, Order.LOGICAL_AND),
        (Order.LOGICAL_OR, Order.LOGICAL_OR),
    }
)


def _dispatch(node: Node, ctx: CodegenContext) -> GeneratorOutput:
    """Compile one node: a statement string or a ``ValueResult``."""
    if not node.enabled:
        return ""
    entry = ctx.registry.lookup(node.type)
    if entry is None:
        ctx.note_unknown_type(node)
        return ""
    result = entry.fn(node, ctx)
    if entry.output == "value":
        if isinstance(result, ValueResult):
            return result
        if isinstance(result, tuple) and len(result) == 2:
            return ValueResult(str(result[0]), float(result[1]))
        return ValueResult(str(result), Order.NONE)
    if not isinstance(result, str):
        return ""
    return result


node_to_code = with_provenance(_dispatch)


def compile_chain(nodes: tuple[Node, ...], ctx: CodegenContext) -> str:
    """Concatenate the statements of a chain, top to bottom, unindented."""
    parts: list[str] = []
    for node in nodes:
        result = node_to_code(node, ctx)
        if isinstance(result, ValueResult):
            # A value block dropped into a statement chain runs as an expression statement.
            parts.append(f"{result.code}\n")
        elif result:
            parts.append(result)
    return "".join(parts)


def statement_to_code(node: Node, slot: str, ctx: CodegenContext) -> str:
    """Return the indented body for ``slot``; never empty."""
    body = compile_chain(node.chain(slot), ctx)
    if not body.strip():
        body = f"{_PLACEHOLDER}\n"
    return _indent_body(body, ctx.indent)


def value_result(node: Node, slot: str, ctx: CodegenContext) -> ValueResult | None:
    """Return the connected child's ``(code, order)`` pair unchanged, or None."""
    child = node.child(slot)
    if child is None:
        return None
    result = node_to_code(child, ctx)
    if isinstance(result, ValueResult):
        return result
    return None


def value_to_code(
    node: Node,
    slot: str,
    order: float,
    ctx: CodegenContext,
    default: str = FALLBACKS["none"],
) -> str:
    """Return the slot's code, parenthesized unless it binds tighter than ``order``."""
    result = value_result(node, slot, ctx)
    if result is None or not result.code:
        return default
    if _needs_parens(result.order, order):
        return f"({result.code})"
    return result.code


def _needs_parens(inner: float, outer: float) -> bool:
    if outer > inner:
        return False
    if outer == inner and outer in (Order.ATOMIC, Order.NONE):
        return False
    return (outer, inner) not in _ORDER_OVERRIDES
