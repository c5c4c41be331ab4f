"""Per-pass compiler state.

A ``CodegenContext`` is created empty at the start of every compilation pass
and threaded through every generator call. Nothing in it survives a pass,
which is what keeps compilation idempotent.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from blockgen.codegen._constants import INDENT
from blockgen.codegen.boards import BoardProfile
from blockgen.codegen.names import NameRegistry
from blockgen.codegen.validation import (
    BLK_MALFORMED_LITERAL,
    BLK_UNKNOWN_TYPE,
    CompileFinding,
    MalformedLiteralWarning,
    make_finding,
)

if TYPE_CHECKING:
    from blockgen.codegen.registry import GeneratorRegistry
    from blockgen.core.node import Node


@dataclass
class CodegenContext:
    registry: GeneratorRegistry
    board: BoardProfile
    live_mode: bool = False
    indent: str = INDENT

    definitions: dict[str, str] = field(default_factory=dict)
    functions: dict[str, str] = field(default_factory=dict)
    event_registries: dict[str, dict[str, list[str]]] = field(default_factory=dict)
    polling_calls: list[str] = field(default_factory=list)
    needs_heartbeat: bool = False
    names: NameRegistry = field(default_factory=NameRegistry)
    findings: list[CompileFinding] = field(default_factory=list)
    _from_imports: dict[str, list[str]] = field(default_factory=dict)

    def define(self, key: str, line: str) -> bool:
        """Record a one-time initialization line; return False if ``key`` exists."""
        if key in self.definitions:
            return False
        self.definitions[key] = line
        return True

    def is_defined(self, key: str) -> bool:
        return key in self.definitions

    def add_import(self, module: str, name: str | None = None) -> None:
        """Import ``module`` (or ``name`` from it), merging repeated ``from`` imports."""
        if name is None:
            self.define(f"import_{module}", f"import {module}")
            return
        names = self._from_imports.setdefault(module, [])
        if name not in names:
            names.append(name)
        self.definitions[f"from_{module}"] = f"from {module} import {', '.join(sorted(names))}"

    def add_function(self, key: str, text: str) -> bool:
        if key in self.functions:
            return False
        self.functions[key] = text
        return True

    def has_function(self, key: str) -> bool:
        return key in self.functions

    def register_handler(self, registry: str, source: str, handler: str) -> None:
        handlers = self.event_registries.setdefault(registry, {}).setdefault(str(source), [])
        if handler not in handlers:
            handlers.append(handler)

    def handlers(self, registry: str) -> dict[str, list[str]]:
        return self.event_registries.get(registry, {})

    def add_polling_call(self, call: str) -> None:
        if call not in self.polling_calls:
            self.polling_calls.append(call)

    def require_heartbeat(self) -> None:
        self.needs_heartbeat = True

    def note(self, finding: CompileFinding) -> None:
        if finding not in self.findings:
            self.findings.append(finding)

    def note_unknown_type(self, node: Node) -> None:
        self.note(
            make_finding(
                BLK_UNKNOWN_TYPE,
                f"No code generator is registered for block type {node.type!r}.",
                node.id,
            )
        )

    def note_malformed(self, node: Node, field_name: str, raw: Any, fallback: str) -> None:
        message = (
            f"Field {field_name!r} of block {node.type!r} has unusable value {raw!r}; "
            f"using {fallback}."
        )
        self.note(make_finding(BLK_MALFORMED_LITERAL, message, node.id))
        warnings.warn(message, MalformedLiteralWarning, stacklevel=3)
