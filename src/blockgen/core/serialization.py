"""Load a ``ProgramModel`` from the editor's JSON workspace or the native form.

Two shapes are accepted:

* The block editor's workspace serialization::

      {"blocks": {"blocks": [...]}, "variables": [{"id": ..., "name": ...}]}

  Top-level blocks become roots. ``inputs[NAME].block`` (or ``.shadow``) is
  the slot child; ``next`` links turn a child into a statement chain.

* The native form::

      {"roots": [{"id": ..., "type": ..., "fields": {...}, "slots": {...}}]}

  where each slot holds one node mapping or a list of them.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from blockgen.core.node import Node, ProgramModel

if TYPE_CHECKING:
    from blockgen.codegen.registry import GeneratorRegistry

# Rest of a top-level stack below its first block.
NEXT_SLOT = "NEXT"


class ProgramFormatError(ValueError):
    """Input could not be read as a block program."""


def load_program(
    data: Mapping[str, Any], registry: GeneratorRegistry | None = None
) -> ProgramModel:
    if not isinstance(data, Mapping):
        raise ProgramFormatError(f"Program must be a JSON object, got {type(data).__name__}")
    if "roots" in data:
        roots = tuple(_native_node(item, "roots") for item in _as_list(data["roots"], "roots"))
    else:
        roots = _BlocklyReader(data, registry).roots()
    try:
        return ProgramModel(roots=roots)
    except ValueError as exc:
        raise ProgramFormatError(str(exc)) from exc


def load_program_file(
    path: str | Path, registry: GeneratorRegistry | None = None
) -> ProgramModel:
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        message = f"{path}: not valid JSON ({exc.msg} at line {exc.lineno})"
        raise ProgramFormatError(message) from exc
    return load_program(data, registry)


def _as_list(value: Any, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise ProgramFormatError(f"{where} must be a list, got {type(value).__name__}")
    return value


def _require_str(item: Mapping[str, Any], key: str, where: str) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not value:
        raise ProgramFormatError(f"{where}: missing or empty {key!r}")
    return value


def _native_node(item: Any, where: str) -> Node:
    if not isinstance(item, Mapping):
        raise ProgramFormatError(f"{where}: node must be an object, got {type(item).__name__}")
    node_id = _require_str(item, "id", where)
    node_type = _require_str(item, "type", f"{where}/{node_id}")
    fields = item.get("fields", {})
    if not isinstance(fields, Mapping):
        raise ProgramFormatError(f"{where}/{node_id}: 'fields' must be an object")
    slots: dict[str, Node | tuple[Node, ...]] = {}
    for name, value in dict(item.get("slots", {})).items():
        slot_where = f"{where}/{node_id}.{name}"
        if isinstance(value, list):
            slots[name] = tuple(_native_node(child, slot_where) for child in value)
        else:
            slots[name] = _native_node(value, slot_where)
    return Node(
        id=node_id,
        type=node_type,
        fields=dict(fields),
        slots=slots,
        enabled=bool(item.get("enabled", True)),
    )


class _BlocklyReader:
    def __init__(self, data: Mapping[str, Any], registry: GeneratorRegistry | None) -> None:
        blocks = data.get("blocks", {})
        if isinstance(blocks, Mapping):
            blocks = blocks.get("blocks", [])
        self._top = _as_list(blocks, "blocks.blocks")
        self._registry = registry
        self._variables: dict[str, str] = {}
        for variable in _as_list(data.get("variables", []), "variables"):
            if isinstance(variable, Mapping) and "id" in variable:
                self._variables[str(variable["id"])] = str(variable.get("name", variable["id"]))

    def roots(self) -> tuple[Node, ...]:
        roots: list[Node] = []
        for index, block in enumerate(self._top):
            where = f"blocks[{index}]"
            node = self._block(block, where)
            rest = self._chain_after(block, where)
            if rest:
                node = Node(
                    id=node.id,
                    type=node.type,
                    fields=node.fields,
                    slots={**node.slots, NEXT_SLOT: rest},
                    enabled=node.enabled,
                )
            roots.append(node)
        return tuple(roots)

    def _chain_after(self, block: Mapping[str, Any], where: str) -> tuple[Node, ...]:
        chain: list[Node] = []
        current = block
        while True:
            link = current.get("next")
            if not isinstance(link, Mapping) or not isinstance(link.get("block"), Mapping):
                return tuple(chain)
            current = link["block"]
            where = f"{where}.next"
            chain.append(self._block(current, where))

    def _block(self, block: Any, where: str) -> Node:
        if not isinstance(block, Mapping):
            raise ProgramFormatError(f"{where}: block must be an object")
        node_id = _require_str(block, "id", where)
        node_type = _require_str(block, "type", f"{where}/{node_id}")
        fields = {
            name: self._field_value(value) for name, value in dict(block.get("fields", {})).items()
        }
        extra = block.get("extraState")
        if isinstance(extra, Mapping):
            for key, value in self._extra_fields(extra).items():
                fields.setdefault(key, value)

        slots: dict[str, Node | tuple[Node, ...]] = {}
        for name, connection in dict(block.get("inputs", {})).items():
            if not isinstance(connection, Mapping):
                continue
            child = connection.get("block") or connection.get("shadow")
            if not isinstance(child, Mapping):
                continue
            slot_where = f"{where}/{node_id}.{name}"
            head = self._block(child, slot_where)
            rest = self._chain_after(child, slot_where)
            if rest or self._is_statement(head.type):
                slots[name] = (head, *rest)
            else:
                slots[name] = head

        enabled = block.get("enabled", True) is not False and not block.get("disabledReasons")
        return Node(id=node_id, type=node_type, fields=fields, slots=slots, enabled=enabled)

    def _is_statement(self, block_type: str) -> bool:
        if self._registry is None:
            return False
        return self._registry.output_kind(block_type) == "statement"

    def _field_value(self, value: Any) -> Any:
        if isinstance(value, Mapping) and "id" in value:
            # variable reference
            return self._variables.get(str(value["id"]), value.get("name", value["id"]))
        return value

    def _extra_fields(self, extra: Mapping[str, Any]) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for key, value in extra.items():
            if key == "params" and isinstance(value, list):
                fields["PARAMS"] = tuple(
                    str(param.get("name", "")) if isinstance(param, Mapping) else str(param)
                    for param in value
                )
            else:
                fields[key.upper()] = value
        return fields
