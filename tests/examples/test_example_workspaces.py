"""The sample workspaces under examples/ compile to runnable scripts."""

from __future__ import annotations

from pathlib import Path

import pytest

from blockgen.codegen import compile_program, default_registry, plan_simulation
from blockgen.core import load_program_file
from tests.conftest import assert_valid_python

EXAMPLES = Path(__file__).resolve().parents[2] / "examples"


def _compile(name: str, **kwargs):
    model = load_program_file(EXAMPLES / name, registry=default_registry())
    return compile_program(model, **kwargs)


@pytest.mark.parametrize("path", sorted(EXAMPLES.glob("*.json")), ids=lambda p: p.stem)
@pytest.mark.parametrize("board", ["esp32", "pico"])
def test_example_compiles_cleanly(path: Path, board: str) -> None:
    result = _compile(path.name, board=board)
    assert_valid_python(result.full_script_text)
    assert_valid_python(result.clean_script())
    assert_valid_python(result.simulation_setup_text)
    assert list(result.orphans) == []
    assert result.report().warnings == ()


def test_blink() -> None:
    result = _compile("blink.json")
    assert result.setup_text == "# block_id=hello\nprint('Blinking')"
    assert result.loop_text == (
        "# block_id=toggle\n"
        "led_2.value(not led_2.value())\n"
        "# block_id=wait\n"
        "time.sleep(float(0.5))"
    )
    assert result.clean_script().endswith(
        "while True:\n"
        "    led_2.value(not led_2.value())\n"
        "    time.sleep(float(0.5))\n"
        "    time.sleep_ms(20)\n"
    )


def test_night_light() -> None:
    result = _compile("night_light.json")
    script = result.clean_script()
    assert result.loop_delay_ms == 250
    assert "level = math_map_func(adc_34.read(), 0, 4095, 255, 0)" in script
    assert "pwm_5.duty(int(level / 255 * 1023))" in script
    assert "send_to_dashboard('level_label', 'value', level)" in script
    assert "'boost_button': [on_boost_button_state_1]," in script
    assert "start_web_and_ws_server()" in result.setup_text


def test_pet_door() -> None:
    result = _compile("pet_door.json")
    script = result.clean_script()
    assert "def set_door(open):\n    global moves\n    if open:" in script
    assert "    else:\n        led_13.value(0)" in script
    assert "set_door(False)" in result.setup_text
    assert "pin_irq_0.irq(trigger=Pin.IRQ_FALLING, handler=handle_pin_0_change)" in script
    assert "ai_event_handlers = [on_custom_class_cat]" in script
    assert list(result.polling_calls) == ["process_ai_data()"]

    plan = plan_simulation(result)
    assert plan.iteration == "process_ai_data()"
