"""Pytest configuration and test helpers."""

from __future__ import annotations

import itertools
from typing import Any

from blockgen.codegen import CompiledProgram, compile_program
from blockgen.core import Node, ProgramModel

_ids = itertools.count(1)


def block(
    type_: str,
    id_: str | None = None,
    *,
    enabled: bool = True,
    slots: dict[str, Node | tuple[Node, ...]] | None = None,
    **fields: Any,
) -> Node:
    """Build a node; ids are generated when not given.

    Args:
        type_: Block type.
        id_: Explicit node id, for tests that look ids up in the output.
        enabled: Whether the node takes part in compilation.
        slots: Value children or statement chains by slot name.
        **fields: Field values by name.
    """
    return Node(
        id=id_ or f"{type_}#{next(_ids)}",
        type=type_,
        fields=fields,
        slots=slots or {},
        enabled=enabled,
    )


def num(value: Any, id_: str | None = None) -> Node:
    return block("math_number", id_, NUM=value)


def text(value: str, id_: str | None = None) -> Node:
    return block("text", id_, TEXT=value)


def var(name: str, id_: str | None = None) -> Node:
    return block("variables_get", id_, VAR=name)


def print_text(value: str, id_: str | None = None) -> Node:
    return block("text_print", id_, slots={"TEXT": text(value)})


def digital_write(pin: Any, state: Any, id_: str | None = None) -> Node:
    return block("gpio_digital_write", id_, PIN=pin, STATE=state)


def on_start(*body: Node, id_: str = "start") -> Node:
    return block("on_start", id_, slots={"DO": body})


def forever(*body: Node, id_: str = "loop") -> Node:
    return block("forever", id_, slots={"DO": body})


def every_ms(time: Any, *body: Node, id_: str = "timed") -> Node:
    return block("every_x_ms", id_, TIME=time, slots={"DO": body})


def program(*roots: Node) -> ProgramModel:
    return ProgramModel(roots=roots)


def compile_roots(*roots: Node, **kwargs: Any) -> CompiledProgram:
    """Compile a program made of ``roots``."""
    return compile_program(program(*roots), **kwargs)


def assert_valid_python(source: str) -> None:
    compile(source, "main.py", "exec")
