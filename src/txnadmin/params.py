"""Conversion of raw command-line text into typed admin parameters.

Nothing in here talks to the network: every function either returns a typed
value or raises :class:`ParameterError`.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from .exceptions import ParameterError
from .types import INT32_MAX, INT32_MIN, INT64_MAX, INT64_MIN, Position, TopicName, TransactionId


_INT_RE = re.compile(r"^[+-]?\d+$")
_RELATIVE_TIME_RE = re.compile(r"^(?P<magnitude>[+-]?\d+)(?P<unit>[A-Za-z]?)$")

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
    "y": 365 * 24 * 60 * 60,
}

_BOUNDS = {
    32: (INT32_MIN, INT32_MAX),
    64: (INT64_MIN, INT64_MAX),
}


def _text(value: Any) -> str:
    return str(value).strip()


def parse_int(value: Any, flag: str, bits: int = 32, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise ParameterError(f"{flag} expects an integer, got {value!r}", flag)
    if isinstance(value, int):
        number = value
    else:
        raw = _text(value)
        if not _INT_RE.match(raw):
            raise ParameterError(f"{flag} expects an integer, got '{raw}'", flag)
        number = int(raw)

    low, high = _BOUNDS[bits]
    if not low <= number <= high:
        raise ParameterError(f"{flag} is out of range for a {bits}-bit integer: {number}", flag)
    if minimum is not None and number < minimum:
        raise ParameterError(f"{flag} must be >= {minimum}, got {number}", flag)
    return number


def parse_transaction_id(most_sig_bits: Any, least_sig_bits: Any) -> TransactionId:
    if most_sig_bits is None:
        raise ParameterError("most-sig-bits is required to build a transaction id", "--most-sig-bits")
    if least_sig_bits is None:
        raise ParameterError("least-sig-bits is required to build a transaction id", "--least-sig-bits")
    return TransactionId(
        parse_int(most_sig_bits, "--most-sig-bits", bits=32),
        parse_int(least_sig_bits, "--least-sig-bits", bits=64),
    )


def _relative_time_seconds(text: str) -> int:
    raw = (text or "").strip()
    if not raw:
        raise ValueError("time cannot be empty")
    match = _RELATIVE_TIME_RE.match(raw)
    if not match:
        raise ValueError(f"Invalid relative time '{raw}'")

    unit = match["unit"].lower() or "s"
    if unit not in _UNIT_SECONDS:
        raise ValueError(f"Invalid time unit '{match['unit']}'")

    magnitude = int(match["magnitude"])
    if magnitude < 0:
        raise ValueError(f"Invalid duration '{raw}', must be non-negative")
    seconds = magnitude * _UNIT_SECONDS[unit]
    # the result travels as milliseconds in a signed 64-bit field
    if magnitude > INT64_MAX or seconds * 1000 > INT64_MAX:
        raise ValueError(f"Invalid duration '{raw}', too large")
    return seconds


def parse_relative_time_ms(text: Any, flag: str = "--time") -> int:
    """Parse ``1s``, ``10m``, ``5h``, ``3d`` (also ``w``, ``y``, or bare seconds) into milliseconds."""
    try:
        seconds = _relative_time_seconds("" if text is None else str(text))
    except ValueError as exc:
        raise ParameterError(str(exc), flag) from exc
    return seconds * 1000


def parse_position(ledger_id: Any, entry_id: Any, batch_index: Any = None) -> Position:
    if ledger_id is None:
        raise ParameterError("ledger-id is required to build a position", "--ledger-id")
    if entry_id is None:
        raise ParameterError("entry-id is required to build a position", "--entry-id")
    batch = None
    if batch_index is not None:
        batch = parse_int(batch_index, "--batch-index", bits=32, minimum=0)
    return Position(
        parse_int(ledger_id, "--ledger-id", bits=64),
        parse_int(entry_id, "--entry-id", bits=64),
        batch,
    )


def parse_coordinator_id(value: Any, flag: str = "--coordinator-id") -> Optional[int]:
    # None selects every coordinator, which is not the same as coordinator 0
    if value is None:
        return None
    return parse_int(value, flag, bits=32, minimum=0)


def parse_replicas(value: Any, flag: str = "--replicas") -> int:
    return parse_int(value, flag, bits=32, minimum=1)


def parse_topic(value: Any, flag: str = "--topic") -> TopicName:
    try:
        return TopicName.parse("" if value is None else str(value))
    except ValueError as exc:
        raise ParameterError(str(exc), flag) from exc


def parse_subscription(value: Any, flag: str = "--sub-name") -> str:
    name = "" if value is None else _text(value)
    if not name:
        raise ParameterError("Subscription name cannot be empty", flag)
    return name


def parse_flag(value: Any, flag: Optional[str] = None) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raw = _text(value).lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ParameterError(f"Expected a boolean flag value, got '{value}'", flag)
