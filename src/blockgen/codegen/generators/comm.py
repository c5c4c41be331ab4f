"""Serial console blocks.

The IDE reads ``plot:<name>:<colour>:<value>`` lines off the serial stream
and routes them to its plotter instead of the console.
"""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen._util import _quote
from blockgen.codegen.compile import value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import parse_hex_colour
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

PLOT_COLOUR = "#3b82f6"

_EMPTY = '""'


def register_comm_generators(registry: GeneratorRegistry) -> None:
    @registry.register("comm_print_line", output="statement")
    def comm_print_line(node: Node, ctx: CodegenContext) -> str:
        data = value_to_code(node, "DATA", Order.NONE, ctx, _EMPTY)
        return f"print(str({data}))\n"

    @registry.register("comm_print_no_newline", output="statement")
    def comm_print_no_newline(node: Node, ctx: CodegenContext) -> str:
        data = value_to_code(node, "DATA", Order.NONE, ctx, _EMPTY)
        return f'print(str({data}), end="")\n'

    @registry.register("comm_print_value", output="statement")
    def comm_print_value(node: Node, ctx: CodegenContext) -> str:
        name = value_to_code(node, "NAME", Order.NONE, ctx, _EMPTY)
        value = value_to_code(node, "VALUE", Order.NONE, ctx, _EMPTY)
        return f'print(str({name}) + " = " + str({value}))\n'

    @registry.register("comm_read_line", output="value")
    def comm_read_line(node: Node, ctx: CodegenContext) -> ValueResult:
        return ValueResult("input()", Order.FUNCTION_CALL)

    @registry.register("comm_plot_simple", output="statement")
    def comm_plot_simple(node: Node, ctx: CodegenContext) -> str:
        value = value_to_code(node, "VALUE", Order.NONE, ctx, "0")
        return f'print("plot:Value:{PLOT_COLOUR}:" + str({value}))\n'

    @registry.register("comm_plot_advanced", output="statement")
    def comm_plot_advanced(node: Node, ctx: CodegenContext) -> str:
        value = value_to_code(node, "VALUE", Order.NONE, ctx, "0")
        name = value_to_code(node, "NAME", Order.NONE, ctx, '"Data"')
        raw = node.get("COLOR")
        if parse_hex_colour(raw) is None:
            ctx.note_malformed(node, "COLOR", raw, _quote(PLOT_COLOUR))
            raw = PLOT_COLOUR
        return f'print("plot:" + str({name}) + ":{raw}:" + str({value}))\n'

    # Names used by older saved workspaces.
    registry.alias("usb_serial_println", "comm_print_line")
    registry.alias("usb_serial_print_value", "comm_print_value")
    registry.alias("usb_serial_read_line", "comm_read_line")
    registry.alias("usb_serial_plot_value", "comm_plot_advanced")
