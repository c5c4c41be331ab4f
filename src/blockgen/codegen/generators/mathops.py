"""Number literals and arithmetic blocks."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen.compile import value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS, choice_field, parse_number_field
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_ARITHMETIC = {
    "ADD": (" + ", Order.ADDITIVE),
    "MINUS": (" - ", Order.ADDITIVE),
    "MULTIPLY": (" * ", Order.MULTIPLICATIVE),
    "DIVIDE": (" / ", Order.MULTIPLICATIVE),
    "POWER": (" ** ", Order.EXPONENTIATION),
}

_MAP_HELPER = "math_map_func"


def _number_literal(node: Node, ctx: CodegenContext, field_name: str) -> ValueResult:
    code = parse_number_field(node, field_name, ctx)
    order = Order.UNARY_SIGN if code.startswith("-") else Order.ATOMIC
    return ValueResult(code, order)


def register_math_generators(registry: GeneratorRegistry) -> None:
    @registry.register("math_number", output="value")
    def math_number(node: Node, ctx: CodegenContext) -> ValueResult:
        return _number_literal(node, ctx, "NUM")

    @registry.register("math_number_slider", output="value")
    def math_number_slider(node: Node, ctx: CodegenContext) -> ValueResult:
        return _number_literal(node, ctx, "NUM")

    @registry.register("math_arithmetic", output="value")
    def math_arithmetic(node: Node, ctx: CodegenContext) -> ValueResult:
        op = choice_field(node, "OP", ctx, tuple(_ARITHMETIC), "ADD")
        operator, order = _ARITHMETIC[op]
        left = value_to_code(node, "A", order, ctx, FALLBACKS["number"])
        right = value_to_code(node, "B", order, ctx, FALLBACKS["number"])
        return ValueResult(f"{left}{operator}{right}", order)

    @registry.register("math_modulo", output="value")
    def math_modulo(node: Node, ctx: CodegenContext) -> ValueResult:
        dividend = value_to_code(node, "DIVIDEND", Order.MULTIPLICATIVE, ctx, FALLBACKS["number"])
        divisor = value_to_code(node, "DIVISOR", Order.MULTIPLICATIVE, ctx, FALLBACKS["number"])
        return ValueResult(f"{dividend} % {divisor}", Order.MULTIPLICATIVE)

    @registry.register("math_round", output="value")
    def math_round(node: Node, ctx: CodegenContext) -> ValueResult:
        number = value_to_code(node, "NUM", Order.NONE, ctx, FALLBACKS["number"])
        return ValueResult(f"round({number})", Order.FUNCTION_CALL)

    @registry.register("math_map", output="value")
    def math_map(node: Node, ctx: CodegenContext) -> ValueResult:
        ctx.add_function(
            _MAP_HELPER,
            "\n".join(
                [
                    f"def {_MAP_HELPER}(x, in_min, in_max, out_min, out_max):",
                    "    if in_max == in_min:",
                    "        return out_min",
                    "    return (x - in_min) * (out_max - out_min) / (in_max - in_min) + out_min",
                ]
            ),
        )
        args = [
            value_to_code(node, "VALUE", Order.NONE, ctx, FALLBACKS["number"]),
            value_to_code(node, "FROM_LOW", Order.NONE, ctx, "0"),
            value_to_code(node, "FROM_HIGH", Order.NONE, ctx, "1023"),
            value_to_code(node, "TO_LOW", Order.NONE, ctx, "0"),
            value_to_code(node, "TO_HIGH", Order.NONE, ctx, "100"),
        ]
        return ValueResult(f"{_MAP_HELPER}({', '.join(args)})", Order.FUNCTION_CALL)

    @registry.register("math_random_int", output="value")
    def math_random_int(node: Node, ctx: CodegenContext) -> ValueResult:
        ctx.add_import("random")
        low = value_to_code(node, "FROM", Order.NONE, ctx, FALLBACKS["number"])
        high = value_to_code(node, "TO", Order.NONE, ctx, "100")
        return ValueResult(f"random.randint({low}, {high})", Order.FUNCTION_CALL)

    @registry.register("math_constrain", output="value")
    def math_constrain(node: Node, ctx: CodegenContext) -> ValueResult:
        value = value_to_code(node, "VALUE", Order.NONE, ctx, FALLBACKS["number"])
        low = value_to_code(node, "LOW", Order.NONE, ctx, "0")
        high = value_to_code(node, "HIGH", Order.NONE, ctx, "100")
        return ValueResult(f"min(max({value}, {low}), {high})", Order.FUNCTION_CALL)
