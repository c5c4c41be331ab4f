"""Board pin blocks.

Every physical pin gets exactly one module-level hardware object per role, no
matter how many blocks touch it. Its identifier comes from the pass's name
service under a fixed resource key such as ``pin_2``, so user variables and
procedures can never rebind it.
"""

from __future__ import annotations

from blockgen.codegen._constants import _PIN_REGISTRY, Order
from blockgen.codegen.compile import statement_to_code, value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS, choice_field, parse_int_field
from blockgen.codegen.generators.variables import function_text, variable_globals
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_HIGH = frozenset({"1", "HIGH", "ON", "TRUE"})
_LOW = frozenset({"0", "LOW", "OFF", "FALSE"})

_TRIGGERS = {
    "IRQ_RISING": "Pin.IRQ_RISING",
    "IRQ_FALLING": "Pin.IRQ_FALLING",
    "IRQ_BOTH": "Pin.IRQ_RISING | Pin.IRQ_FALLING",
}

# 8-bit input range of the analog write block
PWM_INPUT_MAX = 255


def pin_field(node: Node, ctx: CodegenContext, name: str = "PIN") -> int:
    return parse_int_field(node, name, ctx, 0, minimum=0)


def state_field(node: Node, ctx: CodegenContext, name: str = "STATE") -> str:
    raw = node.get(name)
    text = str(raw).strip().upper() if raw is not None else ""
    if text in _HIGH:
        return "1"
    if text in _LOW:
        return "0"
    ctx.note_malformed(node, name, raw, "0")
    return "0"


def hardware_name(ctx: CodegenContext, key: str) -> str:
    return ctx.names.resource(key)


def output_pin(ctx: CodegenContext, key: str, pin: int | str) -> str:
    var = hardware_name(ctx, key)
    ctx.add_import("machine", "Pin")
    ctx.define(var, f"{var} = Pin({pin}, Pin.OUT)")
    return var


def pwm_pin(ctx: CodegenContext, key: str, pin: int | str, freq: int = 1000) -> str:
    var = hardware_name(ctx, key)
    ctx.add_import("machine", "Pin")
    ctx.add_import("machine", "PWM")
    ctx.define(var, f"{var} = PWM(Pin({pin}), freq={freq})")
    return var


def input_pin(ctx: CodegenContext, key: str, pin: int | str) -> str:
    var = hardware_name(ctx, key)
    ctx.add_import("machine", "Pin")
    ctx.define(var, f"{var} = Pin({pin}, Pin.IN, Pin.PULL_UP)")
    return var


def register_gpio_generators(registry: GeneratorRegistry) -> None:
    @registry.register("gpio_digital_write", output="statement")
    def gpio_digital_write(node: Node, ctx: CodegenContext) -> str:
        pin = pin_field(node, ctx)
        var = output_pin(ctx, f"pin_{pin}", pin)
        return f"{var}.value({state_field(node, ctx)})\n"

    @registry.register("gpio_digital_read", output="value")
    def gpio_digital_read(node: Node, ctx: CodegenContext) -> ValueResult:
        pin = pin_field(node, ctx)
        var = input_pin(ctx, f"pin_{pin}_in", pin)
        return ValueResult(f"{var}.value()", Order.FUNCTION_CALL)

    @registry.register("gpio_analog_read", output="value")
    def gpio_analog_read(node: Node, ctx: CodegenContext) -> ValueResult:
        pin = pin_field(node, ctx)
        var = hardware_name(ctx, f"adc_{pin}")
        ctx.add_import("machine", "Pin")
        ctx.add_import("machine", "ADC")
        if ctx.define(var, f"{var} = ADC(Pin({pin}))") and ctx.board.adc_atten:
            # full 0-3.3V range
            ctx.define(f"{var}_atten", f"{var}.atten(ADC.ATTN_11DB)")
        return ValueResult(f"{var}.{ctx.board.adc_read}()", Order.FUNCTION_CALL)

    @registry.register("gpio_pwm_write", output="statement")
    def gpio_pwm_write(node: Node, ctx: CodegenContext) -> str:
        pin = pin_field(node, ctx)
        var = pwm_pin(ctx, f"pwm_{pin}", pin)
        value = value_to_code(node, "VALUE", Order.MULTIPLICATIVE, ctx, FALLBACKS["number"])
        return f"{ctx.board.duty_call(var, value, PWM_INPUT_MAX)}\n"

    @registry.register("gpio_on_pin_change", output="statement")
    def gpio_on_pin_change(node: Node, ctx: CodegenContext) -> str:
        pin = pin_field(node, ctx)
        trigger = choice_field(node, "TRIGGER", ctx, tuple(_TRIGGERS), "IRQ_FALLING")
        handler = ctx.names.distinct(f"handle_pin_{pin}_change")
        body = statement_to_code(node, "DO", ctx)
        ctx.add_function(
            handler,
            function_text(handler, ("p",), body, globals_=variable_globals(node, ctx), ctx=ctx),
        )
        ctx.register_handler(_PIN_REGISTRY, str(pin), handler)
        var = input_pin(ctx, f"pin_irq_{pin}", pin)
        return f"{var}.irq(trigger={_TRIGGERS[trigger]}, handler={handler})\n"
