"""Tree walker, operator precedence and provenance markers."""

from __future__ import annotations

import pytest

from blockgen.codegen import (
    CodegenContext,
    Order,
    ValueResult,
    board_profile,
    default_registry,
    markers,
    resolve_line,
    strip_markers,
)
from blockgen.codegen.compile import (
    compile_chain,
    node_to_code,
    statement_to_code,
    value_result,
    value_to_code,
)
from blockgen.codegen.provenance import clean_line_map, tag_statement
from blockgen.codegen.validation import BLK_UNKNOWN_TYPE
from tests.conftest import (
    block,
    compile_roots,
    digital_write,
    forever,
    num,
    on_start,
    print_text,
    var,
)


def _ctx() -> CodegenContext:
    return CodegenContext(registry=default_registry(), board=board_profile("esp32"))


def _arith(op: str, a, b, id_=None):
    return block("math_arithmetic", id_, OP=op, slots={"A": a, "B": b})


class TestDispatch:
    def test_disabled_node_produces_nothing(self):
        ctx = _ctx()
        assert node_to_code(block("text_print", enabled=False), ctx) == ""
        assert ctx.definitions == {}

    def test_unknown_statement_type_is_skipped_and_reported(self):
        ctx = _ctx()
        assert node_to_code(block("mystery", "m"), ctx) == ""
        assert [(f.code, f.node_id) for f in ctx.findings] == [(BLK_UNKNOWN_TYPE, "m")]

    def test_unknown_value_type_uses_caller_default(self):
        ctx = _ctx()
        parent = block("text_print", slots={"TEXT": block("mystery_value", "mv")})
        assert node_to_code(parent, ctx).endswith("print('')\n")
        assert ctx.findings[0].node_id == "mv"

    def test_value_generator_tuple_is_coerced(self):
        registry = default_registry()

        @registry.register("legacy_value", output="value")
        def legacy_value(node, ctx):
            return ("42", Order.ATOMIC)

        ctx = CodegenContext(registry=registry, board=board_profile("esp32"))
        assert node_to_code(block("legacy_value"), ctx) == ValueResult("42", Order.ATOMIC)

    def test_value_block_in_statement_chain_runs_as_expression(self):
        ctx = _ctx()
        assert compile_chain((num(7),), ctx) == "7\n"


class TestStatementToCode:
    def test_empty_chain_is_placeholder(self):
        ctx = _ctx()
        assert statement_to_code(on_start(), "DO", ctx) == "    pass\n"

    def test_chain_indented_top_to_bottom(self):
        ctx = _ctx()
        body = statement_to_code(on_start(print_text("a", "a"), print_text("b", "b")), "DO", ctx)
        assert body == "    # block_id=a\n    print('a')\n    # block_id=b\n    print('b')\n"

    def test_nested_bodies_indent_cumulatively(self):
        inner = block(
            "controls_if",
            "if",
            slots={"IF0": block("logic_boolean", BOOL="TRUE"), "DO0": (print_text("deep", "p"),)},
        )
        result = compile_roots(forever(inner))
        assert "    if True:\n        # block_id=p\n        print('deep')" in (
            result.full_script_text
        )


class TestPrecedence:
    def test_value_result_is_returned_unchanged(self):
        ctx = _ctx()
        parent = block("text_print", slots={"TEXT": _arith("ADD", num(1), num(2))})
        assert value_result(parent, "TEXT", ctx) == ValueResult("1 + 2", Order.ADDITIVE)
        assert value_result(parent, "MISSING", ctx) is None

    @pytest.mark.parametrize(
        "expr, expected",
        [
            (_arith("MULTIPLY", _arith("ADD", num(1), num(2)), num(3)), "(1 + 2) * 3"),
            (_arith("ADD", _arith("MULTIPLY", num(1), num(2)), num(3)), "1 * 2 + 3"),
            (_arith("POWER", num(-2), num(2)), "(-2) ** 2"),
            (_arith("POWER", num(2), _arith("POWER", num(3), num(2))), "2 ** (3 ** 2)"),
            (_arith("MINUS", num(5), _arith("MINUS", num(3), num(1))), "5 - (3 - 1)"),
            (_arith("MINUS", _arith("MINUS", num(5), num(3)), num(1)), "(5 - 3) - 1"),
            (
                block(
                    "logic_negate",
                    slots={"BOOL": block("logic_operation", OP="OR", slots={"A": var("a")})},
                ),
                "not (a or False)",
            ),
        ],
    )
    def test_parenthesization(self, expr, expected):
        ctx = _ctx()
        parent = block("text_print", slots={"TEXT": expr})
        assert value_to_code(parent, "TEXT", Order.NONE, ctx) == expected

    def test_missing_child_uses_default(self):
        ctx = _ctx()
        assert value_to_code(block("text_print"), "TEXT", Order.ATOMIC, ctx, "'?'") == "'?'"


class TestProvenance:
    def test_tag_requires_newline(self):
        assert tag_statement("a", "x = 1\n") == "# block_id=a\nx = 1\n"
        assert tag_statement("a", "") == ""
        assert tag_statement("a", "inline") == "inline"

    def test_every_statement_line_resolves_to_its_block(self):
        result = compile_roots(
            on_start(digital_write(2, 1, "w1"), print_text("hi", "p1")),
            forever(digital_write(2, 0, "w2")),
        )
        script = result.full_script_text
        lines = script.split("\n")
        for line_number, node_id in markers(script):
            code_line = line_number + 1
            assert not lines[code_line - 1].lstrip().startswith("# block_id=")
            assert result.locate(code_line) == node_id
        assert {node_id for _, node_id in markers(script)} == {"w1", "p1", "w2"}

    def test_lines_before_any_marker_resolve_to_none(self):
        result = compile_roots(on_start(print_text("x", "p")))
        assert result.locate(1) is None
        assert resolve_line(result.full_script_text, 0) is None

    def test_line_past_end_resolves_to_last_marker(self):
        result = compile_roots(on_start(print_text("x", "p")))
        assert result.locate(10_000) == "p"

    def test_strip_markers_leaves_clean_code(self):
        result = compile_roots(on_start(print_text("x", "p")), forever(print_text("y", "q")))
        clean = strip_markers(result.full_script_text)
        assert "block_id" not in clean
        assert clean == result.clean_script()
        assert "print('x')" in clean and "print('y')" in clean

    def test_clean_line_map_points_at_source_lines(self):
        text = "# block_id=a\nx = 1\n# block_id=b\ny = 2"
        assert clean_line_map(text) == {1: 2, 2: 4}
