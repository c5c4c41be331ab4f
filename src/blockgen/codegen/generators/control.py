"""Program structure and control-flow blocks."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen.compile import statement_to_code, value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS, choice_field
from blockgen.codegen.registry import GeneratorRegistry
from blockgen.core.node import Node

_RANGE_HELPER = "_block_range"


def _if_branch_count(node: Node) -> int:
    count = 0
    while f"IF{count}" in node.slots or f"DO{count}" in node.slots:
        count += 1
    declared = node.get("ELSEIFCOUNT")
    if isinstance(declared, int) and declared + 1 > count:
        count = declared + 1
    return max(count, 1)


def _ensure_range_helper(ctx: CodegenContext) -> str:
    ctx.add_function(
        _RANGE_HELPER,
        "\n".join(
            [
                f"def {_RANGE_HELPER}(start, stop, step):",
                "    step = abs(step) or 1",
                "    if start <= stop:",
                "        while start <= stop:",
                "            yield start",
                "            start += step",
                "    else:",
                "        while start >= stop:",
                "            yield start",
                "            start -= step",
            ]
        ),
    )
    return _RANGE_HELPER


def register_control_generators(registry: GeneratorRegistry) -> None:
    # Root bodies are read by the assembler; the roots themselves emit nothing.
    @registry.register("on_start", output="statement")
    def on_start(node: Node, ctx: CodegenContext) -> str:
        return ""

    @registry.register("forever", output="statement")
    def forever(node: Node, ctx: CodegenContext) -> str:
        return ""

    @registry.register("every_x_ms", output="statement")
    def every_x_ms(node: Node, ctx: CodegenContext) -> str:
        return ""

    @registry.register("control_delay_seconds", output="statement")
    def control_delay_seconds(node: Node, ctx: CodegenContext) -> str:
        ctx.add_import("time")
        seconds = value_to_code(node, "DELAY_SEC", Order.NONE, ctx, default="1")
        return f"time.sleep(float({seconds}))\n"

    @registry.register("controls_if", output="statement")
    def controls_if(node: Node, ctx: CodegenContext) -> str:
        code = ""
        for index in range(_if_branch_count(node)):
            condition = value_to_code(node, f"IF{index}", Order.NONE, ctx, FALLBACKS["boolean"])
            keyword = "if" if index == 0 else "elif"
            code += f"{keyword} {condition}:\n"
            code += statement_to_code(node, f"DO{index}", ctx)
        if "ELSE" in node.slots or node.get("HASELSE"):
            code += "else:\n"
            code += statement_to_code(node, "ELSE", ctx)
        return code

    @registry.register("controls_repeat_ext", output="statement")
    def controls_repeat_ext(node: Node, ctx: CodegenContext) -> str:
        times = value_to_code(node, "TIMES", Order.NONE, ctx, FALLBACKS["number"])
        loop_var = ctx.names.distinct("count")
        body = statement_to_code(node, "DO", ctx)
        return f"for {loop_var} in range(int({times})):\n{body}"

    @registry.register("controls_whileUntil", output="statement")
    def controls_while_until(node: Node, ctx: CodegenContext) -> str:
        mode = choice_field(node, "MODE", ctx, ("WHILE", "UNTIL"), "WHILE")
        if mode == "UNTIL":
            condition = value_to_code(node, "BOOL", Order.LOGICAL_NOT, ctx, FALLBACKS["boolean"])
            condition = f"not {condition}"
        else:
            condition = value_to_code(node, "BOOL", Order.NONE, ctx, FALLBACKS["boolean"])
        body = statement_to_code(node, "DO", ctx)
        return f"while {condition}:\n{body}"

    @registry.register("controls_for", output="statement")
    def controls_for(node: Node, ctx: CodegenContext) -> str:
        variable = ctx.names.variable(node.get("VAR") or "i")
        ctx.define(f"variable_{variable}", f"{variable} = None")
        start = value_to_code(node, "FROM", Order.NONE, ctx, FALLBACKS["number"])
        stop = value_to_code(node, "TO", Order.NONE, ctx, FALLBACKS["number"])
        step = value_to_code(node, "BY", Order.NONE, ctx, "1")
        helper = _ensure_range_helper(ctx)
        body = statement_to_code(node, "DO", ctx)
        return f"for {variable} in {helper}({start}, {stop}, {step}):\n{body}"

    @registry.register("controls_flow_statements", output="statement")
    def controls_flow_statements(node: Node, ctx: CodegenContext) -> str:
        flow = choice_field(node, "FLOW", ctx, ("BREAK", "CONTINUE"), "BREAK")
        return "break\n" if flow == "BREAK" else "continue\n"
