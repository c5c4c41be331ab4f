"""MicroPython code generation for block programs.

Compile a ``ProgramModel`` into an upload script and a simulator pair::

    from blockgen.codegen import compile_program
    from blockgen.core import load_program_file

    program = compile_program(load_program_file("blink.json"), board="pico")
    print(program.clean_script())

New block types are added by registering generators on a registry copy::

    registry = default_registry()

    @registry.register("my_block", output="statement")
    def my_block(node, ctx):
        return "do_something()\\n"
"""

from blockgen.codegen._constants import INDENT, Order
from blockgen.codegen.boards import BOARDS, BoardProfile, board_profile
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.generate import LiveResult, compile_one, compile_program, find_orphans
from blockgen.codegen.generators import default_registry
from blockgen.codegen.program import CompiledProgram
from blockgen.codegen.provenance import markers, resolve_line, strip_markers
from blockgen.codegen.registry import GeneratorRegistry, ValueResult
from blockgen.codegen.scheduler import CompileScheduler
from blockgen.codegen.simulation import SimulationPlan, plan_simulation
from blockgen.codegen.validation import (
    CompileFinding,
    CompileReport,
    MalformedLiteralWarning,
    validate_program,
)

__all__ = [
    "BOARDS",
    "BoardProfile",
    "CodegenContext",
    "CompileFinding",
    "CompileReport",
    "CompileScheduler",
    "CompiledProgram",
    "GeneratorRegistry",
    "INDENT",
    "LiveResult",
    "MalformedLiteralWarning",
    "Order",
    "SimulationPlan",
    "ValueResult",
    "board_profile",
    "compile_one",
    "compile_program",
    "default_registry",
    "find_orphans",
    "markers",
    "plan_simulation",
    "resolve_line",
    "strip_markers",
    "validate_program",
]
