"""Public compilation entry points."""

from __future__ import annotations

from typing import NamedTuple

from pyrsistent import pvector

from blockgen.codegen.boards import BoardProfile, board_profile
from blockgen.codegen.compile import node_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.program import CompiledProgram
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.codegen.render import (
    _render_definitions,
    _render_functions,
    render_full_script,
    render_simulation_setup,
    walk_program,
)
from blockgen.codegen.validation import find_orphans, orphan_findings, shadowed_root_findings
from blockgen.core.node import Node, ProgramModel


class LiveResult(NamedTuple):
    """Code for one block sent straight to a running board."""

    code: str
    is_value: bool
    preamble: str


def _resolve_registry(registry: GeneratorRegistry | None) -> GeneratorRegistry:
    if registry is None:
        from blockgen.codegen.generators import default_registry

        return default_registry()
    if not isinstance(registry, GeneratorRegistry):
        raise TypeError(
            f"registry must be GeneratorRegistry or None, got {type(registry).__name__}"
        )
    return registry


def _new_context(
    board: str | BoardProfile, registry: GeneratorRegistry | None, *, live_mode: bool
) -> CodegenContext:
    ctx = CodegenContext(
        registry=_resolve_registry(registry),
        board=board_profile(board),
        live_mode=live_mode,
    )
    # the startup banner and the loop pause both need it
    ctx.add_import("time")
    return ctx


def compile_program(
    model: ProgramModel,
    *,
    board: str | BoardProfile = "esp32",
    registry: GeneratorRegistry | None = None,
) -> CompiledProgram:
    """Compile ``model`` into the upload script and the simulator setup/loop pair.

    Every call starts from a fresh context, so compiling the same model twice
    yields identical output.
    """
    if not isinstance(model, ProgramModel):
        raise TypeError(f"model must be ProgramModel, got {type(model).__name__}")

    ctx = _new_context(board, registry, live_mode=False)
    walk = walk_program(model, ctx)
    full_script = render_full_script(walk, ctx)
    simulation_setup = render_simulation_setup(walk, ctx)

    findings = [*orphan_findings(model), *shadowed_root_findings(model)]
    findings.extend(finding for finding in ctx.findings if finding not in findings)

    return CompiledProgram(
        setup_text=walk.setup_text,
        loop_text=walk.loop_text,
        loop_delay_ms=walk.loop_delay_ms,
        full_script_text=full_script,
        simulation_setup_text=simulation_setup,
        polling_calls=pvector(ctx.polling_calls),
        orphans=pvector(root.id for root in find_orphans(model)),
        findings=pvector(findings),
    )


def compile_one(
    node: Node,
    *,
    board: str | BoardProfile = "esp32",
    registry: GeneratorRegistry | None = None,
) -> LiveResult:
    """Compile a single node for immediate execution.

    Value nodes are wrapped in ``print(...)`` so their result shows up on the
    console. Definitions and helpers the node needs are returned separately in
    ``preamble``.
    """
    if not isinstance(node, Node):
        raise TypeError(f"node must be Node, got {type(node).__name__}")

    ctx = _new_context(board, registry, live_mode=True)
    result = node_to_code(node, ctx)
    if isinstance(result, ValueResult):
        code = f"print({result.code})\n" if result.code else ""
        is_value = True
    else:
        code = result
        is_value = False
    preamble = "\n\n".join(
        section for section in (_render_definitions(ctx), _render_functions(ctx)) if section
    )
    return LiveResult(code=code, is_value=is_value, preamble=preamble)


__all__ = ["LiveResult", "compile_one", "compile_program", "find_orphans"]
