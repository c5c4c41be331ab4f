"""Findings produced while checking or compiling a block program.

Nothing here is fatal: a compilation pass always finishes with a usable
program, and findings are how the editor learns what was skipped or patched.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from blockgen.core.node import (
    ENTRY_TYPE,
    LOOP_TYPE,
    TIMED_LOOP_TYPE,
    Node,
    ProgramModel,
    classify_root,
)

if TYPE_CHECKING:
    from blockgen.codegen.registry import GeneratorRegistry

FindingSeverity = Literal["error", "warning", "hint"]

BLK_ORPHAN_ROOT = "BLK_ORPHAN_ROOT"
BLK_UNKNOWN_TYPE = "BLK_UNKNOWN_TYPE"
BLK_MALFORMED_LITERAL = "BLK_MALFORMED_LITERAL"
BLK_SHADOWED_ROOT = "BLK_SHADOWED_ROOT"

_SEVERITY_BY_CODE: dict[str, FindingSeverity] = {
    BLK_ORPHAN_ROOT: "warning",
    BLK_UNKNOWN_TYPE: "warning",
    BLK_MALFORMED_LITERAL: "warning",
    BLK_SHADOWED_ROOT: "hint",
}


class MalformedLiteralWarning(UserWarning):
    """A block field held a value that could not be parsed; a fallback was used."""


@dataclass(frozen=True)
class CompileFinding:
    code: str
    severity: FindingSeverity
    message: str
    node_id: str | None = None


@dataclass(frozen=True)
class CompileReport:
    errors: tuple[CompileFinding, ...] = ()
    warnings: tuple[CompileFinding, ...] = ()
    hints: tuple[CompileFinding, ...] = ()

    def summary(self) -> str:
        parts: list[str] = []
        if self.errors:
            parts.append(f"{len(self.errors)} error(s)")
        if self.warnings:
            parts.append(f"{len(self.warnings)} warning(s)")
        if self.hints:
            parts.append(f"{len(self.hints)} hint(s)")
        if not parts:
            return "No findings."
        return ", ".join(parts) + "."


def make_finding(code: str, message: str, node_id: str | None = None) -> CompileFinding:
    return CompileFinding(
        code=code,
        severity=_SEVERITY_BY_CODE.get(code, "warning"),
        message=message,
        node_id=node_id,
    )


def build_report(findings: Iterable[CompileFinding]) -> CompileReport:
    errors: list[CompileFinding] = []
    warnings: list[CompileFinding] = []
    hints: list[CompileFinding] = []
    seen: set[CompileFinding] = set()
    for finding in findings:
        if finding in seen:
            continue
        seen.add(finding)
        if finding.severity == "error":
            errors.append(finding)
        elif finding.severity == "warning":
            warnings.append(finding)
        else:
            hints.append(finding)
    return CompileReport(errors=tuple(errors), warnings=tuple(warnings), hints=tuple(hints))


def find_orphans(model: ProgramModel) -> tuple[Node, ...]:
    """Top-level nodes whose type is not a valid program entry point."""
    return tuple(root for root in model.roots if classify_root(root) is None)


def orphan_findings(model: ProgramModel) -> list[CompileFinding]:
    return [
        make_finding(
            BLK_ORPHAN_ROOT,
            f"Block {root.type!r} is not attached to a start, loop or event block; "
            "it will not run.",
            root.id,
        )
        for root in find_orphans(model)
    ]


def shadowed_root_findings(model: ProgramModel) -> list[CompileFinding]:
    findings: list[CompileFinding] = []
    entry_seen = False
    loop_seen = False
    enabled_roots = [root for root in model.roots if root.enabled]
    has_forever = any(root.type == LOOP_TYPE for root in enabled_roots)
    for root in enabled_roots:
        if root.type == ENTRY_TYPE:
            if entry_seen:
                findings.append(
                    make_finding(
                        BLK_SHADOWED_ROOT,
                        "Only the first 'on start' block runs; this one is ignored.",
                        root.id,
                    )
                )
            entry_seen = True
        elif root.type in (LOOP_TYPE, TIMED_LOOP_TYPE):
            if root.type == TIMED_LOOP_TYPE and has_forever:
                findings.append(
                    make_finding(
                        BLK_SHADOWED_ROOT,
                        "A 'forever' block takes precedence; this timed loop is ignored.",
                        root.id,
                    )
                )
                continue
            if loop_seen:
                findings.append(
                    make_finding(
                        BLK_SHADOWED_ROOT,
                        "Only the first main loop block runs; this one is ignored.",
                        root.id,
                    )
                )
            loop_seen = True
    return findings


def unknown_type_findings(model: ProgramModel, registry: GeneratorRegistry) -> list[CompileFinding]:
    findings: list[CompileFinding] = []
    for node in model.iter_nodes():
        if registry.lookup(node.type) is None:
            findings.append(
                make_finding(
                    BLK_UNKNOWN_TYPE,
                    f"No code generator is registered for block type {node.type!r}.",
                    node.id,
                )
            )
    return findings


def validate_program(
    model: ProgramModel, registry: GeneratorRegistry | None = None
) -> CompileReport:
    """Check ``model`` without compiling it."""
    if not isinstance(model, ProgramModel):
        raise TypeError(f"model must be ProgramModel, got {type(model).__name__}")
    if registry is None:
        from blockgen.codegen.generators import default_registry

        registry = default_registry()
    findings = [
        *orphan_findings(model),
        *shadowed_root_findings(model),
        *unknown_type_findings(model, registry),
    ]
    return build_report(findings)
