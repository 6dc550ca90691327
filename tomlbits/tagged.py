"""The tagged JSON form of TOML documents used by language-agnostic test suites.

Every leaf value is written as ``{"type": <kind>, "value": <string>}``;
tables become JSON objects and arrays become JSON arrays.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from tomlbits.errors import ParserError
from tomlbits.localtime import LocalDate, LocalDateTime, LocalTime, parse_date_time

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)
_OFFSET_DATETIME = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]+)?(?:Z|[+-][0-9]{2}:[0-9]{2})",
    re.ASCII,
)
_DATETIME_KINDS = ("datetime", "datetime-local", "date-local", "time-local")


class TaggedMismatch(AssertionError):
    """Two tagged JSON documents do not describe the same TOML data."""


def _tag(kind: str, text: str) -> dict[str, str]:
    return {"type": kind, "value": text}


def _format_float(value: float) -> str:
    """Format a float the way the shortest ``%g``-style representation does."""
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"

    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple))
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped.lstrip("0")
    count = len(digits)
    point = count + exponent
    power = point - 1

    if power < -4 or power >= 6:
        mantissa = digits[0] + ("." + digits[1:] if count > 1 else "")
        exp_sign = "-" if power < 0 else "+"
        return f"{sign}{mantissa}e{exp_sign}{abs(power):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= count:
        return sign + digits + "0" * (point - count)
    return f"{sign}{digits[:point]}.{digits[point:]}"


def _format_datetime(value: datetime) -> str:
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    seconds = 0 if offset is None else int(offset.total_seconds())
    if seconds == 0:
        return text + "Z"
    sign = "-" if seconds < 0 else "+"
    hours, minutes = divmod(abs(seconds) // 60, 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def add_tag(value: Any) -> Any:
    """Return the tagged JSON structure describing ``value``."""
    if isinstance(value, dict):
        return {k: add_tag(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [add_tag(v) for v in value]
    if isinstance(value, LocalTime):
        return _tag("time-local", str(value))
    if isinstance(value, LocalDate):
        return _tag("date-local", str(value))
    if isinstance(value, LocalDateTime):
        return _tag("datetime-local", str(value))
    if isinstance(value, datetime):
        return _tag("datetime", _format_datetime(value))
    if isinstance(value, bool):
        return _tag("bool", "true" if value else "false")
    if isinstance(value, str):
        return _tag("string", value)
    if isinstance(value, int):
        return _tag("integer", str(value))
    if isinstance(value, float):
        if math.isnan(value):
            return _tag("float", "nan")
        return _tag("float", _format_float(value))
    raise TypeError(f"unknown type: {type(value).__name__}")


def _is_value(m: dict[str, Any]) -> bool:
    return len(m) == 2 and "type" in m and "value" in m


def rm_tag(typed: Any) -> Any:
    """Turn a tagged JSON structure back into plain values."""
    if isinstance(typed, dict):
        if _is_value(typed):
            try:
                return untag(typed)
            except ValueError as exc:
                raise ValueError(f"tag.Remove: {exc}") from exc
        return {k: rm_tag(v) for k, v in typed.items()}
    if isinstance(typed, list):
        return [rm_tag(v) for v in typed]
    raise ValueError(f"unrecognized JSON format '{type(typed).__name__}'")


def _parse_float(text: str) -> float:
    if not _FLOAT.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def _parse_int64(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def untag(typed: dict[str, Any]) -> Any:
    """Convert one ``{"type", "value"}`` pair into the value it describes."""
    kind = typed["type"]
    text = typed["value"]
    if not isinstance(kind, str) or not isinstance(text, str):
        raise TypeError("tagged values need a string 'type' and a string 'value'")

    try:
        if kind == "string":
            return text
        if kind == "integer":
            return _parse_int64(text)
        if kind == "float":
            return _parse_float(text)
        if kind == "datetime":
            if not _OFFSET_DATETIME.fullmatch(text):
                raise ValueError(f'parsing time "{text}": invalid format')
            return parse_date_time(text)
        if kind == "datetime-local":
            return LocalDateTime.from_text(text)
        if kind == "date-local":
            return LocalDate.from_text(text)
        if kind == "time-local":
            return LocalTime.from_text(text)
    except (ValueError, ParserError) as exc:
        raise ValueError(f"untag: {exc}") from exc

    if kind == "bool":
        if text == "true":
            return True
        if text == "false":
            return False
        raise ValueError(f'untag: could not parse "{text}" as a boolean')

    raise ValueError(f'untag: unrecognized tag type "{kind}"')


def _join(old: str, key: str) -> str:
    return f"{old}.{key}" if old else key


def compare_json(key: str, want: Any, have: Any) -> None:
    """Check that ``have`` describes the same data as ``want``.

    Raises TaggedMismatch on the first difference found, and ValueError when
    ``want`` itself is malformed.
    """
    if isinstance(want, dict):
        _compare_maps(key, want, have)
    elif isinstance(want, list):
        _compare_arrays(key, want, have)
    else:
        raise TaggedMismatch(
            f"Key '{key}' in expected output should be a map or a list of maps, "
            f"but it's a {type(want).__name__}"
        )


def _compare_maps(key: str, want: dict[str, Any], have: Any) -> None:
    if not isinstance(have, dict):
        raise TaggedMismatch(
            f"Key '{key}' is not a table but {type(have).__name__}:\n"
            f"  Expected:     {want!r}\n"
            f"  Your encoder: {have!r}"
        )

    want_value, have_value = _is_value(want), _is_value(have)
    if want_value and not have_value:
        raise TaggedMismatch(f"Key '{key}' is supposed to be a value, but the parser reports it as a table")
    if not want_value and have_value:
        raise TaggedMismatch(f"Key '{key}' is supposed to be a table, but the parser reports it as a value")
    if want_value:
        _compare_values(key, want, have)
        return

    for k in want:
        if k not in have:
            raise TaggedMismatch(f"Could not find key '{_join(key, k)}' in parser output.")
    for k in have:
        if k not in want:
            raise TaggedMismatch(f"Could not find key '{_join(key, k)}' in expected output.")
    for k, v in want.items():
        compare_json(_join(key, k), v, have[k])


def _compare_arrays(key: str, want: Any, have: Any) -> None:
    if not isinstance(want, list):
        raise ValueError(f"'value' should be a JSON array when 'type=array', but it is a {type(want).__name__}")
    if not isinstance(have, list):
        raise TaggedMismatch(f"Malformed output from your encoder: 'value' is not a JSON array: {type(have).__name__}")
    if len(want) != len(have):
        raise TaggedMismatch(
            f"Array lengths differ for key '{key}':\n"
            f"  Expected:     {len(want)}\n"
            f"  Your encoder: {len(have)}"
        )
    for w, h in zip(want, have):
        compare_json(key, w, h)


def _values_differ(key: str, want: Any, have: Any) -> TaggedMismatch:
    return TaggedMismatch(
        f"Values for key '{key}' don't match:\n"
        f"  Expected:     {want}\n"
        f"  Your encoder: {have}"
    )


def _compare_values(key: str, want: dict[str, Any], have: dict[str, Any]) -> None:
    want_type = want["type"]
    if not isinstance(want_type, str):
        raise ValueError(f"'type' should be a string, but it is a {type(want_type).__name__}")
    have_type = have["type"]
    if not isinstance(have_type, str):
        raise TaggedMismatch(f"Malformed output from your encoder: 'type' is not a string: {type(have_type).__name__}")
    if want_type != have_type:
        raise TaggedMismatch(
            f"Key '{key}' is not an {want_type} but {have_type}:\n"
            f"  Expected:     {want!r}\n"
            f"  Your encoder: {have!r}"
        )

    if want_type == "array":
        _compare_arrays(key, want["value"], have["value"])
        return

    want_text = want["value"]
    if not isinstance(want_text, str):
        raise ValueError(f"'value' {want_text!r} should be a string, but it is a {type(want_text).__name__}")
    have_text = have["value"]
    if not isinstance(have_text, str):
        raise TaggedMismatch(f"Malformed output from your encoder: {type(have_text).__name__} is not a string")

    if want_type == "float":
        _compare_floats(key, want_text, have_text)
    elif want_type in _DATETIME_KINDS:
        _compare_datetimes(key, want_type, want_text, have_text)
    elif want_text != have_text:
        raise _values_differ(key, want_text, have_text)


def _compare_floats(key: str, want: str, have: str) -> None:
    if want.endswith("nan") or have.endswith("nan"):
        if want != have:
            raise _values_differ(key, want, have)
        return
    try:
        want_f = _parse_float(want)
    except ValueError as exc:
        raise ValueError(f"Could not read '{want}' as a float value for key '{key}'") from exc
    try:
        have_f = _parse_float(have)
    except ValueError as exc:
        raise TaggedMismatch(f"Malformed output from your encoder: key '{key}' is not a float: '{have}'") from exc
    if want_f != have_f:
        raise _values_differ(key, want_f, have_f)


def _time_key(t: LocalTime) -> tuple[int, int, int, int]:
    return t.hour, t.minute, t.second, t.nanosecond


def _datetime_key(kind: str, text: str) -> Any:
    text = text.replace(" ", "T").replace("t", "T").replace("z", "Z")
    if kind == "datetime":
        return parse_date_time(text)
    if kind == "datetime-local":
        value = LocalDateTime.from_text(text)
        return value.date, _time_key(value.time)
    if kind == "date-local":
        return LocalDate.from_text(text)
    return _time_key(LocalTime.from_text(text))


def _compare_datetimes(key: str, kind: str, want: str, have: str) -> None:
    try:
        want_t = _datetime_key(kind, want)
    except (ParserError, ValueError) as exc:
        raise ValueError(f"Could not read '{want}' as a datetime value for key '{key}'") from exc
    try:
        have_t = _datetime_key(kind, have)
    except (ParserError, ValueError) as exc:
        raise TaggedMismatch(f"Malformed output from your encoder: key '{key}' is not a datetime: '{have}'") from exc
    if want_t != have_t:
        raise _values_differ(key, want, have)