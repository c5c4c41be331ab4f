"""MicroPython code generation helpers."""

from __future__ import annotations

from blockgen.codegen._constants import _IDENT_RE, _PLACEHOLDER, INDENT


def _indent_body(text: str, prefix: str = INDENT) -> str:
    lines = text.split("\n")
    return "\n".join(f"{prefix}{line}" if line.strip() else line for line in lines)


def _is_placeholder(text: str) -> bool:
    stripped = [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    return not stripped or stripped == [_PLACEHOLDER]


def _quote(value: str) -> str:
    """Return a single-quoted Python string literal for ``value``."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f"'{escaped}'"


def _sanitize_identifier(name: str, fallback: str = "_") -> str:
    sanitized = _IDENT_RE.sub("_", str(name))
    if not sanitized:
        sanitized = fallback
    if sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


def _global_line(symbols: list[str], indent: str = INDENT) -> str | None:
    if not symbols:
        return None
    return f"{indent}global {', '.join(symbols)}"
