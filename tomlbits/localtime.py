"""Dates and times without a time zone, and the parsers for TOML's formats.

Fractional seconds are kept at nanosecond precision on the local types.
Conversions to :mod:`datetime` objects truncate to microseconds, which is the
finest resolution Python's standard library offers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from tomlbits.errors import ParserError

_MAX_FRAC_PRECISION = 9
_DIGIT_RUN = re.compile(rb"[0-9]*")
_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _as_bytes(data: bytes | bytearray | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _error(data: bytes, start: int, end: int, message: str, base: int) -> ParserError:
    return ParserError(message, data[start:end], base + start)


@dataclass(frozen=True)
class LocalDate:
    """A calendar day in no specific time zone."""

    year: int = 0
    month: int = 0
    day: int = 0

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def as_datetime(self, tz: tzinfo | None) -> datetime:
        """Return midnight of this day in ``tz``."""
        return datetime(self.year, self.month, self.day, tzinfo=tz)

    @classmethod
    def from_text(cls, text: bytes | str) -> LocalDate:
        """Parse an RFC 3339 full-date such as ``2021-06-08``."""
        return parse_local_date(text)


@dataclass(frozen=True)
class LocalTime:
    """A time of day on no specific day, in no specific time zone."""

    hour: int = 0
    minute: int = 0
    second: int = 0
    nanosecond: int = 0
    precision: int = 0

    def __str__(self) -> str:
        text = f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        fraction = f".{self.nanosecond:09d}"
        if self.precision > 0:
            text += fraction[: self.precision + 1]
        elif self.nanosecond > 0:
            text += fraction.rstrip("0")
        return text

    def as_timedelta(self) -> timedelta:
        """Return the time elapsed since midnight."""
        return timedelta(
            hours=self.hour,
            minutes=self.minute,
            seconds=self.second,
            microseconds=self.nanosecond // 1000,
        )

    @classmethod
    def from_text(cls, text: bytes | str) -> LocalTime:
        """Parse ``HH:MM:SS[.fraction]``, rejecting trailing characters."""
        data = _as_bytes(text)
        result, consumed = _parse_local_time(data, 0)
        if consumed != len(data):
            raise _error(data, consumed, len(data), "extra characters", 0)
        return result


@dataclass(frozen=True)
class LocalDateTime:
    """A time of a specific day, in no specific time zone."""

    date: LocalDate = LocalDate()
    time: LocalTime = LocalTime()

    def __str__(self) -> str:
        return f"{self.date}T{self.time}"

    def as_datetime(self, tz: tzinfo | None) -> datetime:
        """Return this moment as an aware (or naive, if ``tz`` is None) datetime."""
        return _build_datetime(self, tz)

    @classmethod
    def from_text(cls, text: bytes | str) -> LocalDateTime:
        """Parse ``YYYY-MM-DDTHH:MM:SS[.fraction]``, rejecting trailing characters."""
        data = _as_bytes(text)
        result, consumed = _parse_local_date_time(data, 0)
        if consumed != len(data):
            raise _error(data, consumed, len(data), "extra characters", 0)
        return result


def _build_datetime(value: LocalDateTime, tz: tzinfo | None) -> datetime:
    d, t = value.date, value.time
    base = datetime(d.year, d.month, d.day, t.hour, t.minute, 0, t.nanosecond // 1000, tzinfo=tz)
    # Adding the seconds separately lets a leap second roll over to the next minute.
    return base + timedelta(seconds=t.second)


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Return True if the given day exists in the proleptic Gregorian calendar."""
    if not 0 < month < 13:
        return False
    days = _DAYS_IN_MONTH[month - 1]
    if month == 2 and year % 4 == 0 and (year % 100 != 0 or year % 400 == 0):
        days = 29
    return 0 < day <= days


def _parse_decimal_digits(data: bytes, base: int) -> int:
    value = 0
    for i, c in enumerate(data):
        if not 0x30 <= c <= 0x39:
            raise _error(data, i, i + 1, "expected digit (0-9)", base)
        value = value * 10 + (c - 0x30)
    return value


def parse_decimal_digits(data: bytes | str) -> int:
    """Parse a run of ASCII decimal digits into an integer."""
    return _parse_decimal_digits(_as_bytes(data), 0)


def _parse_local_date(data: bytes, base: int) -> LocalDate:
    if len(data) != 10 or data[4:5] != b"-" or data[7:8] != b"-":
        raise _error(data, 0, len(data), "dates are expected to have the format YYYY-MM-DD", base)
    year = _parse_decimal_digits(data[0:4], base)
    month = _parse_decimal_digits(data[5:7], base + 5)
    day = _parse_decimal_digits(data[8:10], base + 8)
    if not is_valid_date(year, month, day):
        raise _error(data, 0, len(data), "impossible date", base)
    return LocalDate(year, month, day)


def parse_local_date(data: bytes | str) -> LocalDate:
    """Parse exactly ``YYYY-MM-DD``."""
    return _parse_local_date(_as_bytes(data), 0)


def _parse_local_time(data: bytes, base: int) -> tuple[LocalTime, int]:
    """Parse a time at the start of ``data``; return it and the bytes consumed."""
    if len(data) < 8:
        raise _error(data, 0, len(data), "times are expected to have the format HH:MM:SS[.NNNNNN]", base)

    hour = _parse_decimal_digits(data[0:2], base)
    if hour > 23:
        raise _error(data, 0, 2, "hour cannot be greater 23", base)
    if data[2:3] != b":":
        raise _error(data, 2, 3, "expecting colon between hours and minutes", base)

    minute = _parse_decimal_digits(data[3:5], base + 3)
    if minute > 59:
        raise _error(data, 3, 5, "minutes cannot be greater 59", base)
    if data[5:6] != b":":
        raise _error(data, 5, 6, "expecting colon between minutes and seconds", base)

    second = _parse_decimal_digits(data[6:8], base + 6)
    if second > 60:
        raise _error(data, 6, 8, "seconds cannot be greater 60", base)

    if data[8:9] != b".":
        return LocalTime(hour, minute, second), 8

    run = _DIGIT_RUN.match(data, 9).group()
    if not run:
        message = (
            "need at least one digit after fraction point"
            if len(data) > 9
            else "nanoseconds need at least one digit"
        )
        raise _error(data, 8, 9, message, base)

    # Digits beyond nanosecond precision are accepted and ignored.
    kept = run[:_MAX_FRAC_PRECISION]
    precision = len(kept)
    nanosecond = int(kept) * 10 ** (_MAX_FRAC_PRECISION - precision)
    return LocalTime(hour, minute, second, nanosecond, precision), 9 + len(run)


def parse_local_time(data: bytes | str) -> tuple[LocalTime, bytes]:
    """Parse a time at the start of ``data``; return it and the unparsed rest."""
    raw = _as_bytes(data)
    result, consumed = _parse_local_time(raw, 0)
    return result, raw[consumed:]


def _parse_local_date_time(data: bytes, base: int) -> tuple[LocalDateTime, int]:
    if len(data) < 11:
        raise _error(
            data,
            0,
            len(data),
            "local datetimes are expected to have the format YYYY-MM-DDTHH:MM:SS[.NNNNNNNNN]",
            base,
        )
    date = _parse_local_date(data[:10], base)
    if data[10:11] not in (b"T", b"t", b" "):
        raise _error(data, 10, 11, "datetime separator is expected to be T or a space", base)
    time, consumed = _parse_local_time(data[11:], base + 11)
    return LocalDateTime(date, time), 11 + consumed


def parse_local_date_time(data: bytes | str) -> tuple[LocalDateTime, bytes]:
    """Parse a local date-time at the start of ``data``; return it and the rest."""
    raw = _as_bytes(data)
    result, consumed = _parse_local_date_time(raw, 0)
    return result, raw[consumed:]


def parse_date_time(data: bytes | str) -> datetime:
    """Parse an offset date-time such as ``1979-05-27T07:32:00-07:00``."""
    raw = _as_bytes(data)
    local, pos = _parse_local_date_time(raw, 0)
    zone_part = raw[pos:]

    if not zone_part:
        raise _error(raw, 0, len(raw), "date time should have a timezone", 0)

    zone: tzinfo
    if zone_part[:1] in (b"Z", b"z"):
        zone = timezone.utc
        pos += 1
    else:
        if len(zone_part) != 6:
            raise _error(raw, pos, len(raw), "invalid date-time timezone", 0)
        sign = zone_part[:1]
        if sign == b"-":
            direction = -1
        elif sign == b"+":
            direction = 1
        else:
            raise _error(raw, pos, pos + 1, "invalid timezone offset character", 0)
        if zone_part[3:4] != b":":
            raise _error(raw, pos + 3, pos + 4, "expected a : separator", 0)
        hours = _parse_decimal_digits(zone_part[1:3], pos + 1)
        if hours > 23:
            raise _error(raw, pos, pos + 1, "invalid timezone offset hours", 0)
        minutes = _parse_decimal_digits(zone_part[4:6], pos + 4)
        if minutes > 59:
            raise _error(raw, pos, pos + 1, "invalid timezone offset minutes", 0)
        seconds = direction * (hours * 3600 + minutes * 60)
        zone = timezone.utc if seconds == 0 else timezone(timedelta(seconds=seconds))
        pos += 6

    if pos != len(raw):
        raise _error(raw, pos, len(raw), "extra bytes at the end of the timezone", 0)

    try:
        return _build_datetime(local, zone)
    except (ValueError, OverflowError) as exc:
        raise _error(raw, 0, len(raw), f"date-time out of range: {exc}", 0) from exc