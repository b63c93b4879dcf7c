"""Parsing, payload formatting and topic naming shared by every publisher path."""

from __future__ import annotations

import math

from services.errors import UnparseableValue

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def _is_plain_number_text(raw: str) -> bool:
    # int()/float() also take padding, digit separators and non-ASCII digits.
    return bool(raw) and raw.isascii() and raw == raw.strip() and "_" not in raw


def parse_integer(source_key: str, raw: str) -> int:
    """Signed 32-bit integer in plain ASCII decimal notation."""
    if not _is_plain_number_text(raw):
        raise UnparseableValue(source_key, raw)
    try:
        value = int(raw)
    except ValueError as exc:
        raise UnparseableValue(source_key, raw) from exc
    if not INT32_MIN <= value <= INT32_MAX:
        raise UnparseableValue(source_key, raw)
    return value


def parse_decimal(source_key: str, raw: str) -> float:
    if not _is_plain_number_text(raw):
        raise UnparseableValue(source_key, raw)
    try:
        value = float(raw)
    except ValueError as exc:
        raise UnparseableValue(source_key, raw) from exc
    if not math.isfinite(value):
        raise UnparseableValue(source_key, raw)
    return value


def format_integer(value: int) -> str:
    return str(value)


def format_decimal(value: float, precision: int) -> str:
    """Fixed-point rendering with exactly ``precision`` fractional digits.

    Rounds half-to-even on the binary value, the same as ``round()``.
    """
    return f"{value:.{precision}f}"


def state_topic(base_topic: str, topic_suffix: str) -> str:
    return f"{base_topic}/{topic_suffix}/state"


def config_topic(base_topic: str, topic_suffix: str) -> str:
    return f"{base_topic}/{topic_suffix}/config"
