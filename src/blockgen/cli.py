"""Command line front end: ``blockgen compile | orphans | locate | check``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from blockgen.codegen import (
    BOARDS,
    CompiledProgram,
    CompileReport,
    compile_program,
    find_orphans,
    validate_program,
)
from blockgen.codegen.generators import default_registry
from blockgen.core import ProgramFormatError, ProgramModel, load_program_file

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_BAD_INPUT = 2

_TARGETS = ("upload", "clean", "sim", "loop")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockgen",
        description="Compile block programs to MicroPython.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    compile_cmd = sub.add_parser("compile", help="Compile a program file.")
    compile_cmd.add_argument("path", type=Path, help="Workspace JSON file.")
    compile_cmd.add_argument(
        "--board",
        choices=sorted(BOARDS),
        default="esp32",
        help="Target board (default: esp32).",
    )
    compile_cmd.add_argument(
        "--target",
        choices=_TARGETS,
        default="upload",
        help=(
            "upload: script with block markers; clean: script without markers; "
            "sim: simulator setup; loop: simulator loop body (default: upload)."
        ),
    )
    compile_cmd.add_argument("--output", type=Path, default=None, help="Write to this file.")
    compile_cmd.add_argument(
        "--highlight",
        action="store_true",
        help="Pretty-print with syntax highlighting and line numbers.",
    )

    orphans_cmd = sub.add_parser("orphans", help="List top-level blocks that will not run.")
    orphans_cmd.add_argument("path", type=Path)

    locate_cmd = sub.add_parser("locate", help="Map an upload-script line to its block.")
    locate_cmd.add_argument("path", type=Path)
    locate_cmd.add_argument("line", type=int, help="1-based line number in the upload script.")
    locate_cmd.add_argument("--board", choices=sorted(BOARDS), default="esp32")

    check_cmd = sub.add_parser("check", help="Report problems without compiling.")
    check_cmd.add_argument("path", type=Path)
    return parser


def _select_text(program: CompiledProgram, target: str) -> str:
    if target == "clean":
        return program.clean_script()
    if target == "sim":
        return program.simulation_setup_text
    if target == "loop":
        return program.loop_text + "\n"
    return program.full_script_text


def _print_report(report: CompileReport, console: Console) -> None:
    findings = [*report.errors, *report.warnings, *report.hints]
    if not findings:
        return
    table = Table(title=report.summary(), show_lines=False)
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Block")
    table.add_column("Message")
    styles = {"error": "bold red", "warning": "yellow", "hint": "cyan"}
    for finding in findings:
        table.add_row(
            f"[{styles[finding.severity]}]{finding.severity}[/]",
            finding.code,
            finding.node_id or "-",
            finding.message,
        )
    console.print(table)


def _cmd_compile(args: argparse.Namespace, model: ProgramModel, err: Console) -> int:
    program = compile_program(model, board=args.board)
    text = _select_text(program, args.target)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        err.print(f"[green]Wrote[/green] {args.output} ({len(text.splitlines())} lines)")
    elif args.highlight:
        Console().print(Syntax(text, "python", line_numbers=True))
    else:
        sys.stdout.write(text)
    _print_report(program.report(), err)
    return EXIT_OK


def _cmd_orphans(model: ProgramModel) -> int:
    orphans = find_orphans(model)
    if not orphans:
        Console().print("No orphaned blocks.")
        return EXIT_OK
    table = Table(title=f"{len(orphans)} orphaned block(s)")
    table.add_column("Id")
    table.add_column("Type")
    table.add_column("Enabled")
    for node in orphans:
        table.add_row(node.id, node.type, "yes" if node.enabled else "no")
    Console().print(table)
    return EXIT_OK


def _cmd_locate(args: argparse.Namespace, model: ProgramModel, err: Console) -> int:
    program = compile_program(model, board=args.board)
    node_id = program.locate(args.line)
    if node_id is None:
        err.print(f"[yellow]No block emitted line {args.line}.[/yellow]")
        return EXIT_NOT_FOUND
    node = model.find(node_id)
    node_type = node.type if node is not None else "?"
    sys.stdout.write(f"{node_id}\t{node_type}\n")
    return EXIT_OK


def _cmd_check(model: ProgramModel) -> int:
    report = validate_program(model)
    console = Console()
    _print_report(report, console)
    if not (report.errors or report.warnings or report.hints):
        console.print(report.summary())
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    err = Console(stderr=True)
    try:
        model = load_program_file(args.path, registry=default_registry())
    except (ProgramFormatError, OSError) as exc:
        err.print(f"[bold red]Cannot read program:[/bold red] {exc}")
        return EXIT_BAD_INPUT

    if args.command == "compile":
        return _cmd_compile(args, model, err)
    if args.command == "orphans":
        return _cmd_orphans(model)
    if args.command == "locate":
        return _cmd_locate(args, model, err)
    return _cmd_check(model)


if __name__ == "__main__":
    raise SystemExit(main())
