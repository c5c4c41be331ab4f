"""Block type -> generator table.

The registry is the only extension point for new block vocabulary. Every
entry declares whether it produces a statement or a value, so the walker and
the program loader never have to guess from the generator's return value.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, NamedTuple, Union

if TYPE_CHECKING:
    from blockgen.codegen.context import CodegenContext
    from blockgen.core.node import Node

OutputKind = Literal["statement", "value"]


class ValueResult(NamedTuple):
    code: str
    order: float


GeneratorOutput = Union[str, ValueResult]
Generator = Callable[["Node", "CodegenContext"], GeneratorOutput]


@dataclass(frozen=True)
class GeneratorEntry:
    type: str
    output: OutputKind
    fn: Generator


class GeneratorRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, GeneratorEntry] = {}

    def register(self, type_: str, *, output: OutputKind) -> Callable[[Generator], Generator]:
        if output not in ("statement", "value"):
            raise ValueError(f"output must be 'statement' or 'value', got {output!r}")

        def _decorate(fn: Generator) -> Generator:
            if type_ in self._entries:
                raise ValueError(f"Block type {type_!r} is already registered")
            self._entries[type_] = GeneratorEntry(type=type_, output=output, fn=fn)
            return fn

        return _decorate

    def alias(self, new_type: str, existing_type: str) -> None:
        entry = self._entries.get(existing_type)
        if entry is None:
            raise KeyError(f"Cannot alias unknown block type {existing_type!r}")
        if new_type in self._entries:
            raise ValueError(f"Block type {new_type!r} is already registered")
        self._entries[new_type] = GeneratorEntry(type=new_type, output=entry.output, fn=entry.fn)

    def lookup(self, type_: str) -> GeneratorEntry | None:
        return self._entries.get(type_)

    def output_kind(self, type_: str) -> OutputKind | None:
        entry = self._entries.get(type_)
        return entry.output if entry is not None else None

    def types(self) -> tuple[str, ...]:
        return tuple(sorted(self._entries))

    def missing(self, types: Iterable[str]) -> tuple[str, ...]:
        """Return the given block types that have no generator, sorted."""
        return tuple(sorted({t for t in types if t not in self._entries}))

    def copy(self) -> GeneratorRegistry:
        clone = GeneratorRegistry()
        clone._entries = dict(self._entries)
        return clone

    def __contains__(self, type_: object) -> bool:
        return type_ in self._entries

    def __len__(self) -> int:
        return len(self._entries)
