"""Name-distinctness service for one compilation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from blockgen.codegen._constants import _RESERVED_NAMES
from blockgen.codegen._util import _sanitize_identifier

NameKind = Literal["variable", "procedure"]


@dataclass
class NameRegistry:
    """Hands out legal, non-colliding Python identifiers.

    User-facing names (variables, procedures) and hardware objects (``pin_2``,
    ``adc_34``) map to the same identifier every time they are asked for within
    a pass. All of them share one pool, so a variable called ``pin_2`` and the
    Pin object for pin 2 get different identifiers. ``distinct`` never returns
    the same identifier twice.
    """

    reserved: frozenset[str] = _RESERVED_NAMES
    _issued: set[str] = field(default_factory=set)
    _by_user_name: dict[tuple[NameKind, str], str] = field(default_factory=dict)
    _by_resource: dict[str, str] = field(default_factory=dict)

    def variable(self, name: str) -> str:
        return self._user_name("variable", name)

    def procedure(self, name: str) -> str:
        return self._user_name("procedure", name)

    def distinct(self, base: str) -> str:
        return self._claim(_sanitize_identifier(base, fallback="unnamed"))

    def resource(self, key: str) -> str:
        symbol = self._by_resource.get(key)
        if symbol is None:
            symbol = self._claim(_sanitize_identifier(key, fallback="unnamed"))
            self._by_resource[key] = symbol
        return symbol

    def _user_name(self, kind: NameKind, name: str) -> str:
        key = (kind, str(name))
        existing = self._by_user_name.get(key)
        if existing is not None:
            return existing
        symbol = self._claim(_sanitize_identifier(name, fallback="unnamed"))
        self._by_user_name[key] = symbol
        return symbol

    def _claim(self, candidate: str) -> str:
        if candidate not in self._issued and candidate not in self.reserved:
            self._issued.add(candidate)
            return candidate
        n = 2
        while True:
            next_candidate = f"{candidate}_{n}"
            if next_candidate not in self._issued and next_candidate not in self.reserved:
                self._issued.add(next_candidate)
                return next_candidate
            n += 1
