"""Normalization helpers for output formatting settings."""

from __future__ import annotations


_ESCAPES = (("\\n", "\n"), ("\\t", "\t"), ("\\r", "\r"))


def unescape_whitespace(value: str) -> str:
    """Turn literal backslash sequences (\\n, \\t, \\r) into real whitespace."""
    for escaped, real in _ESCAPES:
        value = value.replace(escaped, real)
    return value


def is_blank(value: str) -> bool:
    return value.strip() == ""
