"""LED and RGB output blocks."""

from __future__ import annotations

from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import colour_field
from blockgen.codegen.generators.gpio import output_pin, pin_field, pwm_pin, state_field
from blockgen.codegen.registry import GeneratorRegistry
from blockgen.core.node import Node

BUILTIN_LED = "builtin_led"


def register_actuator_generators(registry: GeneratorRegistry) -> None:
    @registry.register("actuator_builtin_led", output="statement")
    def actuator_builtin_led(node: Node, ctx: CodegenContext) -> str:
        var = output_pin(ctx, BUILTIN_LED, ctx.board.builtin_led_pin)
        return f"{var}.value({state_field(node, ctx)})\n"

    @registry.register("actuator_led_set", output="statement")
    def actuator_led_set(node: Node, ctx: CodegenContext) -> str:
        pin = pin_field(node, ctx)
        var = output_pin(ctx, f"led_{pin}", pin)
        return f"{var}.value({state_field(node, ctx)})\n"

    @registry.register("actuator_led_toggle", output="statement")
    def actuator_led_toggle(node: Node, ctx: CodegenContext) -> str:
        pin = pin_field(node, ctx)
        var = output_pin(ctx, f"led_{pin}", pin)
        return f"{var}.value(not {var}.value())\n"

    @registry.register("actuator_rgb_set", output="statement")
    def actuator_rgb_set(node: Node, ctx: CodegenContext) -> str:
        rgb = colour_field(node, "COLOR", ctx)
        lines = []
        for channel, level in zip(("r", "g", "b"), rgb):
            pin = pin_field(node, ctx, f"PIN_{channel.upper()}")
            var = pwm_pin(ctx, f"rgb_{channel}_{pin}", pin)
            lines.append(ctx.board.duty_call(var, str(level), 255))
        return "\n".join(lines) + "\n"
