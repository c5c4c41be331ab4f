"""Command line front end."""

from __future__ import annotations

import json

import pytest

from blockgen.cli import EXIT_BAD_INPUT, EXIT_NOT_FOUND, EXIT_OK, main
from blockgen.codegen import compile_program
from blockgen.codegen.generators import default_registry
from blockgen.core import load_program_file

WORKSPACE = {
    "roots": [
        {
            "id": "start",
            "type": "on_start",
            "slots": {
                "DO": [
                    {"id": "A", "type": "gpio_digital_write", "fields": {"PIN": 2, "STATE": "1"}},
                ]
            },
        },
        {
            "id": "loop",
            "type": "forever",
            "slots": {
                "DO": [
                    {"id": "B", "type": "gpio_digital_write", "fields": {"PIN": 2, "STATE": "0"}},
                ]
            },
        },
        {"id": "loose", "type": "text_print"},
    ]
}


@pytest.fixture(autouse=True)
def _wide_console(monkeypatch):
    # keep rich from wrapping long temp paths mid-message
    monkeypatch.setenv("COLUMNS", "400")


@pytest.fixture
def workspace(tmp_path):
    path = tmp_path / "program.json"
    path.write_text(json.dumps(WORKSPACE), encoding="utf-8")
    return path


def _expected(path, **kwargs):
    return compile_program(load_program_file(path, registry=default_registry()), **kwargs)


class TestCompileCommand:
    def test_writes_upload_script_to_stdout(self, workspace, capsys):
        assert main(["compile", str(workspace)]) == EXIT_OK
        out, err = capsys.readouterr()
        assert out == _expected(workspace).full_script_text
        assert "BLK_ORPHAN_ROOT" in err

    @pytest.mark.parametrize(
        ("target", "attr"),
        [("clean", None), ("sim", "simulation_setup_text"), ("loop", "loop_text")],
    )
    def test_targets(self, workspace, capsys, target, attr):
        assert main(["compile", str(workspace), "--target", target]) == EXIT_OK
        out = capsys.readouterr().out
        expected = _expected(workspace)
        if target == "clean":
            assert out == expected.clean_script()
            assert "# block_id=" not in out
        elif target == "loop":
            assert out == expected.loop_text + "\n"
        else:
            assert out == getattr(expected, attr)

    def test_board_option(self, workspace, capsys):
        led = {"id": "L", "type": "actuator_builtin_led", "fields": {"STATE": 1}}
        payload = {"roots": [{"id": "start", "type": "on_start", "slots": {"DO": [led]}}]}
        workspace.write_text(json.dumps(payload), encoding="utf-8")
        assert main(["compile", str(workspace), "--board", "pico"]) == EXIT_OK
        assert 'builtin_led = Pin("LED", Pin.OUT)' in capsys.readouterr().out

    def test_output_file(self, workspace, tmp_path, capsys):
        target = tmp_path / "build" / "main.py"
        assert main(["compile", str(workspace), "--output", str(target)]) == EXIT_OK
        assert target.read_text(encoding="utf-8") == _expected(workspace).full_script_text
        assert capsys.readouterr().out == ""


class TestOrphansCommand:
    def test_lists_orphans(self, workspace, capsys):
        assert main(["orphans", str(workspace)]) == EXIT_OK
        out = capsys.readouterr().out
        assert "loose" in out
        assert "text_print" in out

    def test_no_orphans(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"roots": []}), encoding="utf-8")
        assert main(["orphans", str(path)]) == EXIT_OK
        assert "No orphaned blocks." in capsys.readouterr().out


class TestLocateCommand:
    def test_maps_line_to_block(self, workspace, capsys):
        script = _expected(workspace).full_script_text.split("\n")
        line = script.index("    pin_2.value(0)") + 1
        assert main(["locate", str(workspace), str(line)]) == EXIT_OK
        assert capsys.readouterr().out == "B\tgpio_digital_write\n"

    def test_line_before_any_block(self, workspace, capsys):
        assert main(["locate", str(workspace), "1"]) == EXIT_NOT_FOUND
        assert capsys.readouterr().out == ""


class TestCheckCommand:
    def test_reports_findings(self, workspace, capsys):
        assert main(["check", str(workspace)]) == EXIT_OK
        out = capsys.readouterr().out
        assert "1 warning(s)." in out
        assert "BLK_ORPHAN_ROOT" in out

    def test_clean_program(self, tmp_path, capsys):
        path = tmp_path / "ok.json"
        path.write_text(json.dumps({"roots": [{"id": "s", "type": "on_start"}]}))
        assert main(["check", str(path)]) == EXIT_OK
        assert "No findings." in capsys.readouterr().out


class TestBadInput:
    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["compile", str(path)]) == EXIT_BAD_INPUT
        assert "not valid JSON" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "nope.json")]) == EXIT_BAD_INPUT
        assert "Cannot read program" in capsys.readouterr().err

    def test_malformed_program(self, tmp_path, capsys):
        path = tmp_path / "dupes.json"
        roots = [{"id": "x", "type": "on_start"}, {"id": "x", "type": "forever"}]
        path.write_text(json.dumps({"roots": roots}), encoding="utf-8")
        assert main(["compile", str(path)]) == EXIT_BAD_INPUT

    def test_unknown_subcommand_exits_via_argparse(self):
        with pytest.raises(SystemExit):
            main(["explode"])
