"""Program assembly: root selection, walk order and the two output shapes."""

from __future__ import annotations

from dataclasses import dataclass

from blockgen.codegen._constants import (
    _AI_REGISTRY,
    _DASHBOARD_REGISTRY,
    _DEFAULT_LOOP_DELAY_MS,
    _DEFAULT_TIMED_DELAY_MS,
    _PLACEHOLDER,
    _SETUP_HEADER,
    _SIM_SETUP_HEADER,
    _STARTUP_BANNER,
    _WEB_REGISTRY,
)
from blockgen.codegen._util import _indent_body, _is_placeholder, _quote
from blockgen.codegen.compile import compile_chain, node_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.defaults import parse_int_field
from blockgen.core.node import ENTRY_TYPE, LOOP_TYPE, TIMED_LOOP_TYPE, Node, ProgramModel


@dataclass(frozen=True)
class RootSelection:
    entry: Node | None
    loop: Node | None


@dataclass(frozen=True)
class WalkResult:
    setup_text: str
    loop_text: str
    loop_delay_ms: int
    activations: tuple[str, ...]
    has_entry: bool


def select_roots(model: ProgramModel) -> RootSelection:
    """Pick the entry and loop roots; ``forever`` wins over ``every_x_ms``."""
    enabled = [root for root in model.roots if root.enabled]
    entry = next((root for root in enabled if root.type == ENTRY_TYPE), None)
    loop = next((root for root in enabled if root.type == LOOP_TYPE), None)
    if loop is None:
        loop = next((root for root in enabled if root.type == TIMED_LOOP_TYPE), None)
    return RootSelection(entry=entry, loop=loop)


def _body_text(root: Node | None, ctx: CodegenContext) -> str:
    if root is None:
        return _PLACEHOLDER
    body = compile_chain(root.chain("DO"), ctx).strip("\n")
    if not body.strip():
        return _PLACEHOLDER
    return body


def _loop_delay(root: Node | None, ctx: CodegenContext) -> int:
    if root is None or root.type != TIMED_LOOP_TYPE:
        return _DEFAULT_LOOP_DELAY_MS
    return parse_int_field(root, "TIME", ctx, _DEFAULT_TIMED_DELAY_MS, minimum=0)


def walk_program(model: ProgramModel, ctx: CodegenContext) -> WalkResult:
    """Compile every root in model order, then the entry body, then the loop body.

    Event and procedure roots only register functions and handlers; a root
    may also return inline activation code, which is kept in model order.
    """
    activations: list[str] = []
    for root in model.valid_roots():
        if not root.enabled:
            continue
        code = node_to_code(root, ctx)
        if isinstance(code, str) and code.strip():
            activations.append(code.rstrip("\n"))

    selection = select_roots(model)
    setup_text = _body_text(selection.entry, ctx)
    loop_text = _body_text(selection.loop, ctx)
    return WalkResult(
        setup_text=setup_text,
        loop_text=loop_text,
        loop_delay_ms=_loop_delay(selection.loop, ctx),
        activations=tuple(activations),
        has_entry=selection.entry is not None,
    )


def _render_definitions(ctx: CodegenContext) -> str:
    lines: list[str] = []
    for line in ctx.definitions.values():
        if line not in lines:
            lines.append(line)
    return "\n".join(lines)


def _render_functions(ctx: CodegenContext) -> str:
    return "\n\n".join(text.strip("\n") for text in ctx.functions.values())


def _render_tables(ctx: CodegenContext) -> str:
    blocks: list[str] = []

    ai_handlers = [name for names in ctx.handlers(_AI_REGISTRY).values() for name in names]
    if ai_handlers:
        blocks.append(f"ai_event_handlers = [{', '.join(ai_handlers)}]")

    dashboard = ctx.handlers(_DASHBOARD_REGISTRY)
    if dashboard:
        lines = ["_dashboard_event_registry = {"]
        for control_id, names in dashboard.items():
            lines.append(f"{ctx.indent}{_quote(control_id)}: [{', '.join(names)}],")
        lines.append("}")
        blocks.append("\n".join(lines))

    web_handlers = [name for names in ctx.handlers(_WEB_REGISTRY).values() for name in names]
    if web_handlers:
        # one request handler slot; the last registered block owns it
        blocks.append(f"_web_request_handler = {web_handlers[-1]}")

    return "\n".join(blocks)


def _render_loop(walk: WalkResult, ctx: CodegenContext) -> str:
    has_user_loop = not _is_placeholder(walk.loop_text)
    if not (has_user_loop or ctx.polling_calls or ctx.needs_heartbeat):
        return ""
    lines = ["while True:"]
    lines.extend(f"{ctx.indent}{call}" for call in ctx.polling_calls)
    if has_user_loop:
        lines.append(_indent_body(walk.loop_text, ctx.indent))
    elif not ctx.polling_calls:
        lines.append(f"{ctx.indent}{_PLACEHOLDER}")
    lines.append(f"{ctx.indent}time.sleep_ms({walk.loop_delay_ms})")
    return "\n".join(lines)


def _join_sections(sections: list[str]) -> str:
    return "\n\n".join(section for section in sections if section) + "\n"


def render_full_script(walk: WalkResult, ctx: CodegenContext) -> str:
    setup = f"{_SETUP_HEADER}\n{walk.setup_text}" if walk.has_entry else ""
    return _join_sections(
        [
            _render_definitions(ctx),
            _render_functions(ctx),
            _render_tables(ctx),
            "\n".join(walk.activations),
            _STARTUP_BANNER,
            setup,
            _render_loop(walk, ctx),
        ]
    )


def render_simulation_setup(walk: WalkResult, ctx: CodegenContext) -> str:
    return _join_sections(
        [
            _render_definitions(ctx),
            _render_functions(ctx),
            _render_tables(ctx),
            "\n".join(walk.activations),
            _STARTUP_BANNER,
            f"{_SIM_SETUP_HEADER}\n{walk.setup_text}",
        ]
    )
