"""Built-in block generators."""

from __future__ import annotations

from blockgen.codegen.generators.actuators import register_actuator_generators
from blockgen.codegen.generators.ai import ensure_ai_data_processor, register_ai_generators
from blockgen.codegen.generators.colour import register_colour_generators
from blockgen.codegen.generators.comm import register_comm_generators
from blockgen.codegen.generators.control import register_control_generators
from blockgen.codegen.generators.dashboard import (
    ensure_dashboard_runtime,
    register_dashboard_generators,
)
from blockgen.codegen.generators.gpio import register_gpio_generators
from blockgen.codegen.generators.logic import register_logic_generators
from blockgen.codegen.generators.mathops import register_math_generators
from blockgen.codegen.generators.procedures import register_procedure_generators
from blockgen.codegen.generators.text import register_text_generators
from blockgen.codegen.generators.variables import register_variable_generators
from blockgen.codegen.generators.wifi import register_wifi_generators
from blockgen.codegen.registry import GeneratorRegistry

_CATALOG = (
    register_control_generators,
    register_logic_generators,
    register_math_generators,
    register_text_generators,
    register_variable_generators,
    register_procedure_generators,
    register_gpio_generators,
    register_actuator_generators,
    register_colour_generators,
    register_comm_generators,
    register_dashboard_generators,
    register_ai_generators,
    register_wifi_generators,
)


def default_registry() -> GeneratorRegistry:
    """Return a new registry holding every built-in generator.

    Each call builds a fresh registry, so callers may register extra block
    types on the result without affecting anyone else.
    """
    registry = GeneratorRegistry()
    for register in _CATALOG:
        register(registry)
    return registry


__all__ = [
    "default_registry",
    "ensure_ai_data_processor",
    "ensure_dashboard_runtime",
]
