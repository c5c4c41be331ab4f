"""MicroPython code generation constants."""

from __future__ import annotations

import keyword
import re

_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")


INDENT = "    "


class Order:
    """Operator precedence for emitted expressions (lower binds tighter)."""

    ATOMIC = 0.0
    COLLECTION = 1.0
    STRING_CONVERSION = 1.0
    MEMBER = 2.1
    FUNCTION_CALL = 2.2
    EXPONENTIATION = 3.0
    UNARY_SIGN = 4.0
    BITWISE_NOT = 4.0
    MULTIPLICATIVE = 5.0
    ADDITIVE = 6.0
    BITWISE_SHIFT = 7.0
    BITWISE_AND = 8.0
    BITWISE_XOR = 9.0
    BITWISE_OR = 10.0
    RELATIONAL = 11.0
    LOGICAL_NOT = 12.0
    LOGICAL_AND = 13.0
    LOGICAL_OR = 14.0
    CONDITIONAL = 15.0
    LAMBDA = 16.0
    NONE = 99.0


_PLACEHOLDER = "pass"


_MARKER_PREFIX = "# block_id="


_MARKER_RE = re.compile(r"^\s*# block_id=(\S+)\s*$")


_STARTUP_BANNER = "print('--- Starting Program ---')\ntime.sleep(1)"


_SETUP_HEADER = "# Code that runs once"


_SIM_SETUP_HEADER = "# --- User's ON START code ---"


_DEFAULT_LOOP_DELAY_MS = 20


_DEFAULT_TIMED_DELAY_MS = 500


_AI_POLL_FUNCTION = "process_ai_data"


_AI_REGISTRY = "ai"


_DASHBOARD_REGISTRY = "dashboard"


_PIN_REGISTRY = "pin"


_WEB_REGISTRY = "web"


_RESERVED_NAMES = frozenset(
    set(keyword.kwlist)
    | {
        "ADC",
        "Number",
        "PWM",
        "Pin",
        "ai_data",
        "ai_event_handlers",
        "esp32",
        "json",
        "machine",
        "math",
        "network",
        "poller",
        "print",
        "random",
        "range",
        "str",
        "sys",
        "time",
        "uselect",
        "_dashboard_event_registry",
        "_dashboard_state",
        "_web_html_content",
        "_web_request_handler",
        "_wlan",
        "_thread",
        "_ws_clients",
        "connect_to_wifi",
        "process_ai_data",
        "send_to_dashboard",
        "socket",
        "ujson",
        "websocket_server",
        "_block_range",
        "_web_server_thread",
        "_ws_callback",
        "hex_to_rgb",
        "math_map_func",
        "start_web_and_ws_server",
    }
)
