"""Parsing of TOML integer and float literals."""

from __future__ import annotations

import math
import re

from tomlbits.errors import ParserError

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_BASES = {
    ord("x"): (16, "hexadecimal", re.compile(rb"[+-]?[0-9a-fA-F]+")),
    ord("o"): (8, "octal", re.compile(rb"[+-]?[0-7]+")),
    ord("b"): (2, "binary", re.compile(rb"[+-]?[01]+")),
}
_DECIMAL = re.compile(rb"[+-]?[0-9]+")
_FLOAT = re.compile(rb"[+-]?(?:inf|nan|[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?)")


def _as_bytes(data: bytes | bytearray | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _error(data: bytes, start: int, end: int, message: str) -> ParserError:
    start = max(start, 0)
    return ParserError(message, data[start:end], start)


def _is_digit(c: int) -> bool:
    return 0x30 <= c <= 0x39


def _to_int64(data: bytes, cleaned: bytes, base: int, name: str, pattern: re.Pattern[bytes]) -> int:
    if not pattern.fullmatch(cleaned):
        raise _error(data, 0, len(data), f"couldn't parse {name} number: invalid syntax")
    value = int(cleaned, base)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise _error(data, 0, len(data), f"couldn't parse {name} number: value out of range")
    return value


def check_and_remove_underscores_integers(data: bytes | str) -> bytes:
    """Validate digit-separating underscores in an integer and strip them."""
    raw = _as_bytes(data)
    if not raw:
        raise ParserError("number cannot be empty")
    start = 1 if raw[:1] in (b"+", b"-") else 0
    if len(raw) == start:
        return raw
    if raw[start] == ord("_"):
        raise _error(raw, start, start + 1, "number cannot start with underscore")
    if raw.endswith(b"_"):
        raise _error(raw, len(raw) - 1, len(raw), "number cannot end with underscore")
    doubled = raw.find(b"__")
    if doubled >= 0:
        raise _error(raw, doubled, doubled + 2, "number must have at least one digit between underscores")
    return raw.replace(b"_", b"")


def check_and_remove_underscores_floats(data: bytes | str) -> bytes:
    """Validate digit-separating underscores in a float and strip them."""
    raw = _as_bytes(data)
    if not raw:
        raise ParserError("number cannot be empty")
    if raw.startswith(b"_"):
        raise _error(raw, 0, 1, "number cannot start with underscore")
    if raw.endswith(b"_"):
        raise _error(raw, len(raw) - 1, len(raw), "number cannot end with underscore")
    if b"_" not in raw:
        return raw

    before = False
    cleaned = bytearray()
    for i, c in enumerate(raw):
        following = raw[i + 1 : i + 2]
        if c == ord("_"):
            if not before:
                raise _error(raw, i - 1, i + 1, "number must have at least one digit between underscores")
            if following in (b"e", b"E"):
                raise _error(raw, i + 1, i + 2, "cannot have underscore before exponent")
            before = False
        elif c in b"+-":
            cleaned.append(c)
            before = False
        elif c in b"eE":
            if following == b"_":
                raise _error(raw, i + 1, i + 2, "cannot have underscore after exponent")
            cleaned.append(c)
        elif c == ord("."):
            if following == b"_":
                raise _error(raw, i + 1, i + 2, "cannot have underscore after decimal point")
            if i > 0 and raw[i - 1] == ord("_"):
                raise _error(raw, i - 1, i, "cannot have underscore before decimal point")
            cleaned.append(c)
        else:
            before = True
            cleaned.append(c)
    return bytes(cleaned)


def _parse_int_decimal(raw: bytes) -> int:
    cleaned = check_and_remove_underscores_integers(raw)
    start = 1 if cleaned[:1] in (b"+", b"-") else 0
    if len(cleaned) > start + 1 and cleaned[start] == ord("0"):
        raise _error(raw, 0, len(raw), "leading zero not allowed on decimal number")
    return _to_int64(raw, cleaned, 10, "decimal", _DECIMAL)


def parse_integer(data: bytes | str) -> int:
    """Parse a TOML integer literal (decimal, 0x, 0o or 0b) into a 64-bit value."""
    raw = _as_bytes(data)
    if len(raw) > 2 and raw[0] == ord("0"):
        prefix = _BASES.get(raw[1])
        if prefix is None:
            raise _error(raw, 1, 2, f"invalid base '{chr(raw[1])}'")
        base, name, pattern = prefix
        cleaned = check_and_remove_underscores_integers(raw[2:])
        return _to_int64(raw, cleaned, base, name, pattern)
    return _parse_int_decimal(raw)


def parse_float(data: bytes | str) -> float:
    """Parse a TOML float literal, including ``inf`` and ``nan`` forms."""
    raw = _as_bytes(data)
    if raw in (b"+nan", b"-nan"):
        return math.nan

    cleaned = check_and_remove_underscores_floats(raw)

    if cleaned.startswith(b"."):
        raise _error(raw, 0, len(raw), "float cannot start with a dot")
    if cleaned.endswith(b"."):
        raise _error(raw, 0, len(raw), "float cannot end with a dot")

    seen_dot = False
    for i, c in enumerate(cleaned):
        if c != ord("."):
            continue
        if seen_dot:
            raise _error(raw, i, i + 1, "float can have at most one decimal point")
        if not _is_digit(cleaned[i - 1]):
            raise _error(raw, i - 1, i + 1, "float decimal point must be preceded by a digit")
        if not _is_digit(cleaned[i + 1]):
            raise _error(raw, i, i + 2, "float decimal point must be followed by a digit")
        seen_dot = True

    start = 1 if cleaned[:1] in (b"+", b"-") else 0
    if len(cleaned) <= start:
        raise _error(raw, 0, len(raw), "unable to parse float: invalid syntax")
    if cleaned[start] == ord("0") and len(cleaned) > start + 1 and _is_digit(cleaned[start + 1]):
        raise _error(raw, 0, len(raw), "float integer part cannot have leading zeroes")

    if not _FLOAT.fullmatch(cleaned):
        raise _error(raw, 0, len(raw), "unable to parse float: invalid syntax")
    value = float(cleaned)
    if math.isinf(value) and b"inf" not in cleaned:
        raise _error(raw, 0, len(raw), "unable to parse float: value out of range")
    return value