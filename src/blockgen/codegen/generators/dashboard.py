"""IoT dashboard blocks.

Controls on the browser dashboard talk to the board over a websocket. Each
message updates ``_dashboard_state`` and fires the handlers registered for the
control id in ``_dashboard_event_registry``.
"""

from __future__ import annotations

from blockgen.codegen._constants import _DASHBOARD_REGISTRY, Order
from blockgen.codegen._util import _indent_body, _quote, _sanitize_identifier
from blockgen.codegen.compile import statement_to_code, value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.generators.variables import function_text, variable_globals
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_UNSET = "NONE"

_WS_CALLBACK = """def _ws_callback(client, msg):
    global _dashboard_state
    try:
        data = ujson.loads(msg)
        if 'id' in data:
            comp_id = data['id']
            if 'value' in data:
                try:
                    val = int(data['value'])
                except (TypeError, ValueError):
                    val = data['value']
                _dashboard_state[comp_id] = val
            if 'y' in data:
                _dashboard_state[comp_id + '_y'] = int(data['y'])
            if '_dashboard_event_registry' in globals() and comp_id in _dashboard_event_registry:
                for handler in _dashboard_event_registry[comp_id]:
                    try:
                        handler()
                    except Exception as e:
                        print('Handler Error:', e)
            for c in _ws_clients:
                if c is not client:
                    try:
                        c.send(msg)
                    except Exception:
                        pass
    except Exception as e:
        print('WS Error:', e)"""

_SEND_TO_DASHBOARD = """def send_to_dashboard(component_id, prop, value):
    msg = ujson.dumps({'id': component_id, 'prop': prop, 'value': value})
    for client in _ws_clients:
        try:
            client.send(msg)
        except Exception:
            pass"""


def ensure_dashboard_runtime(ctx: CodegenContext) -> None:
    ctx.define("import_ujson_ws", "import ujson")
    ctx.define("ws_clients", "_ws_clients = []")
    ctx.define("dashboard_state", "_dashboard_state = {}")
    ctx.add_function("_ws_callback", _WS_CALLBACK)
    ctx.add_function("send_to_dashboard", _SEND_TO_DASHBOARD)


def _control_id(node: Node, name: str = "CONTROL_ID") -> str:
    raw = node.get(name)
    return str(raw) if raw not in (None, "") else _UNSET


def _dashboard_handler(node: Node, ctx: CodegenContext, control: str, base: str, body: str) -> None:
    handler = ctx.names.distinct(base)
    text = function_text(handler, (), body, globals_=variable_globals(node, ctx), ctx=ctx)
    ctx.add_function(handler, text)
    ctx.register_handler(_DASHBOARD_REGISTRY, control, handler)


def register_dashboard_generators(registry: GeneratorRegistry) -> None:
    @registry.register("dashboard_on_control_change", output="statement")
    def dashboard_on_control_change(node: Node, ctx: CodegenContext) -> str:
        control = _control_id(node)
        if control == _UNSET:
            return ""
        ensure_dashboard_runtime(ctx)
        body = statement_to_code(node, "DO", ctx)
        base = f"on_{_sanitize_identifier(control)}_change_handler"
        _dashboard_handler(node, ctx, control, base, body)
        return ""

    @registry.register("dashboard_when_button_is", output="statement")
    def dashboard_when_button_is(node: Node, ctx: CodegenContext) -> str:
        control = _control_id(node)
        if control == _UNSET:
            return ""
        ensure_dashboard_runtime(ctx)
        state = str(node.get("STATE", "1"))
        check = f"if str(_dashboard_state.get({_quote(control)}, '0')) == {_quote(state)}:\n"
        body = _indent_body(check + statement_to_code(node, "DO", ctx), ctx.indent)
        base = f"on_{_sanitize_identifier(control)}_state_{_sanitize_identifier(state)}"
        _dashboard_handler(node, ctx, control, base, body)
        return ""

    @registry.register("dashboard_get_control_value", output="value")
    def dashboard_get_control_value(node: Node, ctx: CodegenContext) -> ValueResult:
        control = _control_id(node)
        if control == _UNSET:
            return ValueResult('"NONE"', Order.ATOMIC)
        ensure_dashboard_runtime(ctx)
        return ValueResult(f"_dashboard_state.get({_quote(control)}, 0)", Order.FUNCTION_CALL)

    @registry.register("dashboard_update_display", output="statement")
    def dashboard_update_display(node: Node, ctx: CodegenContext) -> str:
        display = _control_id(node, "DISPLAY_ID")
        if display == _UNSET:
            return ""
        ensure_dashboard_runtime(ctx)
        value = value_to_code(node, "VALUE", Order.NONE, ctx, '""')
        return f"send_to_dashboard({_quote(display)}, 'value', {value})\n"
