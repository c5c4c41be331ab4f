"""String blocks."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen._util import _quote
from blockgen.codegen.compile import value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node


def _join_item_count(node: Node) -> int:
    declared = node.get("ITEMCOUNT")
    count = declared if isinstance(declared, int) and declared >= 0 else 0
    while f"ADD{count}" in node.slots:
        count += 1
    return count


def register_text_generators(registry: GeneratorRegistry) -> None:
    @registry.register("text", output="value")
    def text(node: Node, ctx: CodegenContext) -> ValueResult:
        return ValueResult(_quote(str(node.get("TEXT", ""))), Order.ATOMIC)

    @registry.register("text_multiline", output="value")
    def text_multiline(node: Node, ctx: CodegenContext) -> ValueResult:
        return ValueResult(_quote(str(node.get("TEXT", ""))), Order.ATOMIC)

    @registry.register("text_join", output="value")
    def text_join(node: Node, ctx: CodegenContext) -> ValueResult:
        items = [
            value_to_code(node, f"ADD{index}", Order.NONE, ctx, FALLBACKS["text"])
            for index in range(_join_item_count(node))
        ]
        if not items:
            return ValueResult(FALLBACKS["text"], Order.ATOMIC)
        if len(items) == 1:
            return ValueResult(f"str({items[0]})", Order.FUNCTION_CALL)
        joined = ", ".join(f"str({item})" for item in items)
        return ValueResult(f"''.join([{joined}])", Order.FUNCTION_CALL)

    @registry.register("text_print", output="statement")
    def text_print(node: Node, ctx: CodegenContext) -> str:
        message = value_to_code(node, "TEXT", Order.NONE, ctx, FALLBACKS["text"])
        return f"print({message})\n"
