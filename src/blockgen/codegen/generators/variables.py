"""Variable blocks and the ``global`` bookkeeping shared by function bodies."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen._util import _global_line
from blockgen.codegen.compile import value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_VARIABLE_TYPES = frozenset({"variables_get", "variables_set", "math_change", "controls_for"})

# blocks that assign a module-level runtime global
_GLOBAL_WRITERS = {"wifi_send_web_response": "_web_html_content"}

_NUMBER_SHIM = "\n".join(
    ["try:", "    from numbers import Number", "except ImportError:", "    Number = (int, float)"]
)


def declare_variable(name: object, ctx: CodegenContext) -> str:
    """Return the identifier for a user variable and make sure it exists at module level."""
    symbol = ctx.names.variable(str(name) if name else "item")
    ctx.define(f"variable_{symbol}", f"{symbol} = None")
    return symbol


def variable_globals(
    node: Node, ctx: CodegenContext, exclude: tuple[str, ...] = ()
) -> list[str]:
    """Return the sorted identifiers a function body built from ``node`` must declare ``global``.

    That is every user variable read or written under ``node`` plus the runtime
    globals that blocks under it assign.
    """
    found: set[str] = set()
    for item in node.iter_tree():
        runtime_global = _GLOBAL_WRITERS.get(item.type)
        if runtime_global is not None:
            found.add(runtime_global)
            continue
        if item.type not in _VARIABLE_TYPES:
            continue
        symbol = declare_variable(item.get("VAR"), ctx)
        if symbol not in exclude:
            found.add(symbol)
    return sorted(found)


def function_text(
    name: str,
    params: tuple[str, ...],
    body: str,
    *,
    globals_: list[str] | None = None,
    ctx: CodegenContext,
) -> str:
    """Render ``def name(params):`` around an already-indented body."""
    lines = [f"def {name}({', '.join(params)}):"]
    global_line = _global_line(list(globals_ or ()), ctx.indent)
    if global_line is not None:
        lines.append(global_line)
    lines.append(body.rstrip("\n"))
    return "\n".join(lines)


def register_variable_generators(registry: GeneratorRegistry) -> None:
    @registry.register("variables_get", output="value")
    def variables_get(node: Node, ctx: CodegenContext) -> ValueResult:
        return ValueResult(declare_variable(node.get("VAR"), ctx), Order.ATOMIC)

    @registry.register("variables_set", output="statement")
    def variables_set(node: Node, ctx: CodegenContext) -> str:
        symbol = declare_variable(node.get("VAR"), ctx)
        value = value_to_code(node, "VALUE", Order.NONE, ctx, FALLBACKS["number"])
        return f"{symbol} = {value}\n"

    @registry.register("math_change", output="statement")
    def math_change(node: Node, ctx: CodegenContext) -> str:
        ctx.define("mock_number", _NUMBER_SHIM)
        symbol = declare_variable(node.get("VAR"), ctx)
        delta = value_to_code(node, "DELTA", Order.ADDITIVE, ctx, "1")
        return f"{symbol} = ({symbol} if isinstance({symbol}, Number) else 0) + {delta}\n"
