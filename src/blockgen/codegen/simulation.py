"""Decomposed setup/iteration pair for the browser simulator.

The simulator runs the setup once and then awaits one loop iteration per
tick, so blocking sleeps in top-level code become awaitable simulator sleeps.
Sleeps inside ``def`` bodies are left alone; those functions stay synchronous.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from blockgen.codegen._constants import _PLACEHOLDER
from blockgen.codegen._util import _is_placeholder
from blockgen.codegen.program import CompiledProgram

_SLEEP_MS_RE = re.compile(r"\btime\.sleep_ms\(")
_SLEEP_RE = re.compile(r"\btime\.sleep\(")

SIM_SLEEP = "_sim_sleep"
SIM_SLEEP_MS = "_sim_sleep_ms"


@dataclass(frozen=True)
class SimulationPlan:
    setup: str
    iteration: str
    delay_ms: int


def _await_sleeps(line: str) -> str:
    line = _SLEEP_MS_RE.sub(f"await {SIM_SLEEP_MS}(", line)
    return _SLEEP_RE.sub(f"await {SIM_SLEEP}(", line)


def rewrite_sleeps(text: str) -> str:
    """Turn top-level ``time.sleep``/``time.sleep_ms`` calls into simulator awaits."""
    out: list[str] = []
    in_def = False
    for line in text.split("\n"):
        if line.startswith(("def ", "async def ")):
            in_def = True
        elif line and not line[0].isspace():
            in_def = False
        out.append(line if in_def else _await_sleeps(line))
    return "\n".join(out)


def plan_simulation(program: CompiledProgram) -> SimulationPlan:
    if not isinstance(program, CompiledProgram):
        raise TypeError(f"program must be CompiledProgram, got {type(program).__name__}")
    lines = list(program.polling_calls)
    if not _is_placeholder(program.loop_text):
        lines.append(program.loop_text)
    iteration = "\n".join(lines) if lines else _PLACEHOLDER
    return SimulationPlan(
        setup=rewrite_sleeps(program.simulation_setup_text),
        iteration=rewrite_sleeps(iteration),
        delay_ms=program.loop_delay_ms,
    )
