"""Immutable result of one compilation pass."""

from __future__ import annotations

from pyrsistent import PVector, PRecord, field, pvector

from blockgen.codegen._constants import _DEFAULT_LOOP_DELAY_MS, _PLACEHOLDER
from blockgen.codegen.provenance import resolve_line, strip_markers
from blockgen.codegen.validation import CompileReport, build_report


class CompiledProgram(PRecord):
    """Both output shapes of a compiled block program.

    Attributes:
        setup_text: Entry body, dedented; ``pass`` when there is none.
        loop_text: Loop body, dedented; ``pass`` when there is none.
        loop_delay_ms: Pause between loop iterations.
        full_script_text: Self-contained script for upload to the board.
        simulation_setup_text: Everything the simulator runs once before
            stepping ``loop_text``.
        polling_calls: Calls the loop makes before each iteration.
        orphans: Ids of top-level blocks that are not valid entry points.
        findings: ``CompileFinding`` records produced during the pass.
    """

    setup_text = field(type=str, initial=_PLACEHOLDER)
    loop_text = field(type=str, initial=_PLACEHOLDER)
    loop_delay_ms = field(type=int, initial=_DEFAULT_LOOP_DELAY_MS)
    full_script_text = field(type=str, initial="")
    simulation_setup_text = field(type=str, initial="")
    polling_calls = field(type=PVector, initial=pvector())
    orphans = field(type=PVector, initial=pvector())
    findings = field(type=PVector, initial=pvector())

    def clean_script(self) -> str:
        """Return the upload script with provenance markers removed."""
        return strip_markers(self.full_script_text)

    def locate(self, line_number: int) -> str | None:
        """Return the id of the block behind ``line_number`` of the upload script."""
        return resolve_line(self.full_script_text, line_number)

    def report(self) -> CompileReport:
        return build_report(self.findings)
