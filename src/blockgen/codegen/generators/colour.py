"""Colour values, as ``(r, g, b)`` tuples of 0-255 ints."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen.compile import value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS, colour_field
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_HEX_HELPER = "hex_to_rgb"


def register_colour_generators(registry: GeneratorRegistry) -> None:
    @registry.register("colour_picker", output="value")
    def colour_picker(node: Node, ctx: CodegenContext) -> ValueResult:
        r, g, b = colour_field(node, "COLOUR", ctx)
        return ValueResult(f"({r}, {g}, {b})", Order.ATOMIC)

    @registry.register("colour_from_hex", output="value")
    def colour_from_hex(node: Node, ctx: CodegenContext) -> ValueResult:
        ctx.add_function(
            _HEX_HELPER,
            "\n".join(
                [
                    f"def {_HEX_HELPER}(hex_str):",
                    "    hex_str = str(hex_str).lstrip('#')",
                    "    if len(hex_str) == 3:",
                    "        hex_str = ''.join(ch * 2 for ch in hex_str)",
                    "    try:",
                    "        return tuple(int(hex_str[i:i + 2], 16) for i in (0, 2, 4))",
                    "    except ValueError:",
                    f"        return {FALLBACKS['colour']}",
                ]
            ),
        )
        hex_code = value_to_code(node, "HEX", Order.NONE, ctx, "'#000000'")
        return ValueResult(f"{_HEX_HELPER}({hex_code})", Order.FUNCTION_CALL)

    @registry.register("colour_rgb_value", output="value")
    def colour_rgb_value(node: Node, ctx: CodegenContext) -> ValueResult:
        channels = [
            value_to_code(node, slot, Order.NONE, ctx, FALLBACKS["number"])
            for slot in ("RED", "GREEN", "BLUE")
        ]
        clamped = ", ".join(f"max(0, min(255, int({channel})))" for channel in channels)
        return ValueResult(f"({clamped})", Order.ATOMIC)
