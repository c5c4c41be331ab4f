"""Program model: the block forest the compiler reads.

A ``Node`` is one visual block instance. Its ``slots`` hold either a single
value-producing child or an ordered statement chain. The model is read-only
input; nothing in the compiler mutates it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True, eq=False)
class Node:
    id: str
    type: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    slots: Mapping[str, Node | tuple[Node, ...]] = field(default_factory=dict)
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Node id must be a non-empty string, got {self.id!r}")
        if not isinstance(self.type, str) or not self.type:
            raise ValueError(f"Node type must be a non-empty string (node {self.id!r})")
        for name, value in self.slots.items():
            if isinstance(value, list):
                raise TypeError(
                    f"Slot {name!r} of node {self.id!r} must be a Node or a tuple of Nodes"
                )

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def child(self, slot: str) -> Node | None:
        """Return the enabled value child connected to ``slot``, if any."""
        value = self.slots.get(slot)
        if isinstance(value, tuple):
            value = value[0] if value else None
        if value is None or not value.enabled:
            return None
        return value

    def chain(self, slot: str) -> tuple[Node, ...]:
        """Return the enabled statement chain attached to ``slot``, top to bottom."""
        value = self.slots.get(slot)
        if value is None:
            return ()
        if isinstance(value, Node):
            value = (value,)
        return tuple(item for item in value if item.enabled)

    def children(self) -> Iterator[Node]:
        for value in self.slots.values():
            if isinstance(value, Node):
                yield value
            else:
                yield from value

    def iter_tree(self) -> Iterator[Node]:
        yield self
        for child in self.children():
            yield from child.iter_tree()

    def __repr__(self) -> str:
        return f"Node({self.type!r}, id={self.id!r})"


class RootKind(Enum):
    ENTRY = "entry"
    LOOP = "loop"
    TIMED_LOOP = "timed_loop"
    PROCEDURE = "procedure"
    EVENT = "event"


ENTRY_TYPE = "on_start"
LOOP_TYPE = "forever"
TIMED_LOOP_TYPE = "every_x_ms"
PROCEDURE_TYPES = frozenset({"procedures_defnoreturn", "procedures_defreturn"})
EVENT_PREFIXES = (
    "gpio_on_",
    "wifi_on_",
    "face_landmark_on_",
    "hand_gesture_on_",
    "image_classification_on_",
    "object_detection_on_",
    "custom_model_when_",
    "dashboard_on_",
    "dashboard_when_",
)


def classify_root(node: Node) -> RootKind | None:
    """Return the root kind for ``node``, or None when it may not stand at top level."""
    if node.type == ENTRY_TYPE:
        return RootKind.ENTRY
    if node.type == LOOP_TYPE:
        return RootKind.LOOP
    if node.type == TIMED_LOOP_TYPE:
        return RootKind.TIMED_LOOP
    if node.type in PROCEDURE_TYPES:
        return RootKind.PROCEDURE
    if node.type.startswith(EVENT_PREFIXES):
        return RootKind.EVENT
    return None


@dataclass(frozen=True, eq=False)
class ProgramModel:
    roots: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.roots, tuple):
            object.__setattr__(self, "roots", tuple(self.roots))
        seen: set[str] = set()
        for node in self.iter_nodes():
            if node.id in seen:
                raise ValueError(f"Duplicate node id {node.id!r} in program model")
            seen.add(node.id)

    def iter_nodes(self) -> Iterator[Node]:
        for root in self.roots:
            yield from root.iter_tree()

    def find(self, node_id: str) -> Node | None:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def valid_roots(self) -> tuple[Node, ...]:
        return tuple(root for root in self.roots if classify_root(root) is not None)
