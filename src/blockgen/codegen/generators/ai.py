"""Browser-side model results, streamed to the board as JSON lines on stdin.

The board never runs a model. The IDE writes one JSON object per line and
``process_ai_data`` (polled once per loop iteration) stores it in ``ai_data``
and calls every registered handler.
"""

from __future__ import annotations

from blockgen.codegen._constants import _AI_POLL_FUNCTION, _AI_REGISTRY, Order
from blockgen.codegen._util import _indent_body, _quote, _sanitize_identifier
from blockgen.codegen.compile import statement_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.generators.variables import function_text, variable_globals
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.core.node import Node

_UNSET = "NONE"

_PROCESSOR = f"""def {_AI_POLL_FUNCTION}():
    global ai_data
    if poller.poll(0):
        line = sys.stdin.readline()
        if line:
            line = line.strip()
            try:
                data = json.loads(line)
                if isinstance(data, dict):
                    ai_data = data
                    for handler in ai_event_handlers:
                        handler()
            except (ValueError, KeyError):
                pass"""


def ensure_ai_data_processor(ctx: CodegenContext) -> None:
    if ctx.has_function(_AI_POLL_FUNCTION):
        return
    ctx.define("ai_event_handlers_list", "ai_event_handlers = []")
    ctx.add_import("sys")
    ctx.define("import_ujson", "import ujson as json")
    ctx.add_import("uselect")
    ctx.define(
        "ai_data_poller", "poller = uselect.poll()\npoller.register(sys.stdin, uselect.POLLIN)"
    )
    ctx.define("ai_data_dict", "ai_data = {}")
    ctx.add_function(_AI_POLL_FUNCTION, _PROCESSOR)
    ctx.add_polling_call(f"{_AI_POLL_FUNCTION}()")


def _top_class_check(label: str) -> str:
    return (
        "(len(ai_data.get('predictions', [])) > 0 and "
        f"ai_data.get('predictions', [])[0].get('class') == {_quote(label)})"
    )


def _category_check(label: str) -> str:
    return f"ai_data.get('classification', {{}}).get('category', '') == {_quote(label)}"


def _class_handler(
    node: Node, ctx: CodegenContext, label: str, prefix: str, condition: str
) -> None:
    """Register a handler that runs the ``DO`` chain when ``condition`` holds."""
    handler = ctx.names.distinct(f"{prefix}_{_sanitize_identifier(label)}")
    body = f"if {condition}:\n{statement_to_code(node, 'DO', ctx)}"
    text = function_text(
        handler, (), _indent_body(body, ctx.indent), globals_=variable_globals(node, ctx), ctx=ctx
    )
    ctx.add_function(handler, text)
    ctx.register_handler(_AI_REGISTRY, label, handler)


def register_ai_generators(registry: GeneratorRegistry) -> None:
    @registry.register("custom_model_enable", output="statement")
    def custom_model_enable(node: Node, ctx: CodegenContext) -> str:
        ensure_ai_data_processor(ctx)
        return "# UI: Custom Model processing enabled in browser via Block settings.\n"

    @registry.register("custom_model_when_class", output="statement")
    def custom_model_when_class(node: Node, ctx: CodegenContext) -> str:
        ensure_ai_data_processor(ctx)
        label = str(node.get("CLASS_NAME", _UNSET))
        if label == _UNSET:
            return ""
        _class_handler(node, ctx, label, "on_custom_class", _top_class_check(label))
        return ""

    @registry.register("custom_model_is_class", output="value")
    def custom_model_is_class(node: Node, ctx: CodegenContext) -> ValueResult:
        ensure_ai_data_processor(ctx)
        label = str(node.get("CLASS_NAME", _UNSET))
        if label == _UNSET:
            return ValueResult("False", Order.ATOMIC)
        return ValueResult(_top_class_check(label), Order.ATOMIC)

    @registry.register("image_classification_on_class", output="statement")
    def image_classification_on_class(node: Node, ctx: CodegenContext) -> str:
        ensure_ai_data_processor(ctx)
        label = str(node.get("CLASS", _UNSET))
        if label == _UNSET:
            return ""
        _class_handler(node, ctx, label, "on_image_class", _category_check(label))
        return ""

    @registry.register("image_classification_is_class", output="value")
    def image_classification_is_class(node: Node, ctx: CodegenContext) -> ValueResult:
        ensure_ai_data_processor(ctx)
        label = str(node.get("CLASS", _UNSET))
        return ValueResult(_category_check(label), Order.RELATIONAL)
