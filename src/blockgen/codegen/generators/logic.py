"""Boolean logic blocks."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen.compile import value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS, choice_field
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_COMPARISONS = {
    "EQ": "==",
    "NEQ": "!=",
    "LT": "<",
    "LTE": "<=",
    "GT": ">",
    "GTE": ">=",
}


def register_logic_generators(registry: GeneratorRegistry) -> None:
    @registry.register("logic_compare", output="value")
    def logic_compare(node: Node, ctx: CodegenContext) -> ValueResult:
        op = choice_field(node, "OP", ctx, tuple(_COMPARISONS), "EQ")
        left = value_to_code(node, "A", Order.RELATIONAL, ctx, FALLBACKS["number"])
        right = value_to_code(node, "B", Order.RELATIONAL, ctx, FALLBACKS["number"])
        return ValueResult(f"{left} {_COMPARISONS[op]} {right}", Order.RELATIONAL)

    @registry.register("logic_operation", output="value")
    def logic_operation(node: Node, ctx: CodegenContext) -> ValueResult:
        op = choice_field(node, "OP", ctx, ("AND", "OR"), "AND")
        order = Order.LOGICAL_AND if op == "AND" else Order.LOGICAL_OR
        left = value_to_code(node, "A", order, ctx, default="")
        right = value_to_code(node, "B", order, ctx, default="")
        if not left and not right:
            left = right = FALLBACKS["boolean"]
        else:
            # One missing operand must not change the result of the other.
            neutral = "True" if op == "AND" else "False"
            left = left or neutral
            right = right or neutral
        return ValueResult(f"{left} {op.lower()} {right}", order)

    @registry.register("logic_negate", output="value")
    def logic_negate(node: Node, ctx: CodegenContext) -> ValueResult:
        operand = value_to_code(node, "BOOL", Order.LOGICAL_NOT, ctx, "True")
        return ValueResult(f"not {operand}", Order.LOGICAL_NOT)

    @registry.register("logic_boolean", output="value")
    def logic_boolean(node: Node, ctx: CodegenContext) -> ValueResult:
        value = choice_field(node, "BOOL", ctx, ("TRUE", "FALSE"), "FALSE")
        return ValueResult("True" if value == "TRUE" else "False", Order.ATOMIC)
