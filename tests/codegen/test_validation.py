"""Program checks that run without compiling."""

from __future__ import annotations

import pytest

from blockgen.codegen import (
    CompileFinding,
    CompileReport,
    GeneratorRegistry,
    find_orphans,
    validate_program,
)
from blockgen.codegen.validation import (
    BLK_ORPHAN_ROOT,
    BLK_SHADOWED_ROOT,
    BLK_UNKNOWN_TYPE,
    build_report,
    make_finding,
)
from tests.conftest import block, every_ms, forever, on_start, print_text, program


class TestFindOrphans:
    def test_loose_blocks_are_orphans_in_model_order(self):
        loose_a = print_text("a", "la")
        loose_b = block("math_number", "lb", NUM=1)
        model = program(loose_a, on_start(), loose_b, forever())
        assert [node.id for node in find_orphans(model)] == ["la", "lb"]

    def test_disabled_loose_block_still_reported(self):
        loose = print_text("a", "la")
        model = program(block("text_print", "off", enabled=False), loose)
        assert [node.id for node in find_orphans(model)] == ["off", "la"]

    def test_event_and_procedure_roots_are_valid(self):
        model = program(
            block("gpio_on_pin_change", PIN=4),
            block("procedures_defnoreturn", NAME="f"),
            block("dashboard_on_control_change", CONTROL_ID="x"),
        )
        assert find_orphans(model) == ()


class TestValidateProgram:
    def test_clean_program(self):
        report = validate_program(program(on_start(print_text("hi")), forever()))
        assert report == CompileReport()
        assert report.summary() == "No findings."

    def test_collects_every_kind(self):
        model = program(
            on_start(id_="s1"),
            on_start(id_="s2"),
            forever(id_="f"),
            every_ms(100, id_="t"),
            print_text("loose", "loose"),
            on_start(block("mystery_block", "m"), id_="s3"),
        )
        report = validate_program(model)
        assert [(f.code, f.node_id) for f in report.warnings] == [
            (BLK_ORPHAN_ROOT, "loose"),
            (BLK_UNKNOWN_TYPE, "m"),
        ]
        assert [(f.code, f.node_id) for f in report.hints] == [
            (BLK_SHADOWED_ROOT, "s2"),
            (BLK_SHADOWED_ROOT, "t"),
            (BLK_SHADOWED_ROOT, "s3"),
        ]
        assert report.summary() == "2 warning(s), 3 hint(s)."

    def test_second_forever_is_shadowed(self):
        report = validate_program(program(forever(id_="a"), forever(id_="b")))
        assert [f.node_id for f in report.hints] == ["b"]

    def test_disabled_roots_are_not_shadowed(self):
        model = program(on_start(id_="a"), block("on_start", "b", enabled=False))
        assert validate_program(model).hints == ()

    def test_custom_registry(self):
        report = validate_program(program(on_start(id_="s")), registry=GeneratorRegistry())
        assert [f.node_id for f in report.warnings] == ["s"]

    def test_rejects_non_model(self):
        with pytest.raises(TypeError, match="model must be ProgramModel"):
            validate_program({"roots": []})


class TestReport:
    def test_findings_grouped_and_deduplicated(self):
        orphan = make_finding(BLK_ORPHAN_ROOT, "loose", "a")
        shadow = make_finding(BLK_SHADOWED_ROOT, "ignored", "b")
        custom = CompileFinding(code="X", severity="error", message="boom")
        report = build_report([orphan, shadow, orphan, custom])
        assert report.errors == (custom,)
        assert report.warnings == (orphan,)
        assert report.hints == (shadow,)
        assert report.summary() == "1 error(s), 1 warning(s), 1 hint(s)."

    def test_unknown_code_defaults_to_warning(self):
        assert make_finding("SOMETHING_NEW", "msg").severity == "warning"
