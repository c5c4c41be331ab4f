"""User-defined functions and their call sites."""

from __future__ import annotations

from blockgen.codegen._constants import Order
from blockgen.codegen._util import _indent_body
from blockgen.codegen.compile import compile_chain, value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import FALLBACKS
from blockgen.codegen.generators.variables import function_text, variable_globals
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node


def _params(node: Node, ctx: CodegenContext) -> tuple[str, ...]:
    raw = node.get("PARAMS") or ()
    if isinstance(raw, str):
        raw = tuple(part.strip() for part in raw.split(",") if part.strip())
    return tuple(ctx.names.variable(str(param)) for param in raw)


def _procedure_name(node: Node, ctx: CodegenContext) -> str:
    return ctx.names.procedure(node.get("NAME") or "procedure")


def _define_procedure(node: Node, ctx: CodegenContext, *, returns: bool) -> None:
    name = _procedure_name(node, ctx)
    params = _params(node, ctx)
    body = compile_chain(node.chain("STACK"), ctx)
    if returns:
        result = value_to_code(node, "RETURN", Order.NONE, ctx, FALLBACKS["none"])
        body += f"return {result}\n"
    if not body.strip():
        body = "pass\n"
    globals_ = variable_globals(node, ctx, exclude=params)
    text = function_text(
        name, params, _indent_body(body, ctx.indent), globals_=globals_, ctx=ctx
    )
    ctx.add_function(f"procedure_{name}", text)


def _call_args(node: Node, ctx: CodegenContext) -> str:
    args: list[str] = []
    index = 0
    while f"ARG{index}" in node.slots:
        args.append(value_to_code(node, f"ARG{index}", Order.NONE, ctx, FALLBACKS["none"]))
        index += 1
    return ", ".join(args)


def register_procedure_generators(registry: GeneratorRegistry) -> None:
    @registry.register("procedures_defnoreturn", output="statement")
    def procedures_defnoreturn(node: Node, ctx: CodegenContext) -> str:
        _define_procedure(node, ctx, returns=False)
        return ""

    @registry.register("procedures_defreturn", output="statement")
    def procedures_defreturn(node: Node, ctx: CodegenContext) -> str:
        _define_procedure(node, ctx, returns=True)
        return ""

    @registry.register("procedures_callnoreturn", output="statement")
    def procedures_callnoreturn(node: Node, ctx: CodegenContext) -> str:
        return f"{_procedure_name(node, ctx)}({_call_args(node, ctx)})\n"

    @registry.register("procedures_callreturn", output="value")
    def procedures_callreturn(node: Node, ctx: CodegenContext) -> ValueResult:
        call = f"{_procedure_name(node, ctx)}({_call_args(node, ctx)})"
        return ValueResult(call, Order.FUNCTION_CALL)
