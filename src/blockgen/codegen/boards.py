"""Target board capability flags consulted by hardware block generators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BoardProfile:
    name: str
    pwm_method: str
    pwm_max: int
    builtin_led_pin: str
    adc_read: str
    adc_atten: bool

    def duty_call(self, pin_var: str, value: str, max_input: int | str) -> str:
        return f"{pin_var}.{self.pwm_method}(int({value} / {max_input} * {self.pwm_max}))"


BOARDS: dict[str, BoardProfile] = {
    "esp32": BoardProfile(
        name="esp32",
        pwm_method="duty",
        pwm_max=1023,
        builtin_led_pin="2",
        adc_read="read",
        adc_atten=True,
    ),
    "pico": BoardProfile(
        name="pico",
        pwm_method="duty_u16",
        pwm_max=65535,
        builtin_led_pin='"LED"',
        adc_read="read_u16",
        adc_atten=False,
    ),
}


def board_profile(board: str | BoardProfile) -> BoardProfile:
    if isinstance(board, BoardProfile):
        return board
    if not isinstance(board, str):
        raise TypeError(f"board must be str or BoardProfile, got {type(board).__name__}")
    profile = BOARDS.get(board.lower())
    if profile is None:
        raise ValueError(f"Unknown board {board!r}; expected one of {sorted(BOARDS)}")
    return profile
