"""Program model: the read-only block forest the compiler consumes."""

from blockgen.core.node import (
    ENTRY_TYPE,
    EVENT_PREFIXES,
    LOOP_TYPE,
    PROCEDURE_TYPES,
    TIMED_LOOP_TYPE,
    Node,
    ProgramModel,
    RootKind,
    classify_root,
)
from blockgen.core.serialization import ProgramFormatError, load_program, load_program_file

__all__ = [
    "ENTRY_TYPE",
    "EVENT_PREFIXES",
    "LOOP_TYPE",
    "Node",
    "PROCEDURE_TYPES",
    "ProgramFormatError",
    "ProgramModel",
    "RootKind",
    "TIMED_LOOP_TYPE",
    "classify_root",
    "load_program",
    "load_program_file",
]
