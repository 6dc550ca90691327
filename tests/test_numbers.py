import math

import pytest

from tomlbits.errors import ParserError
from tomlbits.numbers import (
    check_and_remove_underscores_floats,
    check_and_remove_underscores_integers,
    parse_float,
    parse_integer,
)


@pytest.mark.parametrize("n", [0, 1, 7, 255, 8001, 123456789])
def test_integer_round_trips_in_every_base(n):
    assert parse_integer(str(n).encode()) == n
    assert parse_integer(f"0x{n:x}".encode()) == n
    assert parse_integer(f"0x{n:X}".encode()) == n
    assert parse_integer(f"0o{n:o}".encode()) == n
    assert parse_integer(f"0b{n:b}".encode()) == n


@pytest.mark.parametrize("n", [-1, -42, 99])
def test_signed_decimal(n):
    assert parse_integer(f"{n:+d}") == n


def test_integer_underscores_are_ignored():
    assert parse_integer(b"1_000") == parse_integer(b"1000")
    assert parse_integer(b"0xdead_beef") == parse_integer(b"0xdeadbeef")


def test_int64_limits():
    assert parse_integer(b"9223372036854775807") == 2**63 - 1
    assert parse_integer(b"-9223372036854775808") == -(2**63)
    with pytest.raises(ParserError, match="value out of range"):
        parse_integer(b"9223372036854775808")
    with pytest.raises(ParserError, match="couldn't parse hexadecimal number"):
        parse_integer(b"0x8000000000000000")


def test_integer_leading_zero():
    with pytest.raises(ParserError, match="leading zero not allowed on decimal number"):
        parse_integer(b"+01")


def test_integer_invalid_digits():
    with pytest.raises(ParserError, match="couldn't parse octal number"):
        parse_integer(b"0o9")
    with pytest.raises(ParserError, match="couldn't parse binary number"):
        parse_integer(b"0b102")
    with pytest.raises(ParserError, match="invalid base"):
        parse_integer(b"0z1")


def test_double_underscore_error_matches_source_example():
    with pytest.raises(ParserError) as info:
        parse_integer(b"123__456")
    assert str(info.value) == "number must have at least one digit between underscores"
    assert info.value.highlight == b"__"
    assert info.value.offset == 3


def test_integer_underscore_edges():
    with pytest.raises(ParserError, match="cannot start with underscore"):
        check_and_remove_underscores_integers(b"+_1")
    with pytest.raises(ParserError, match="cannot end with underscore"):
        check_and_remove_underscores_integers(b"1_")
    assert check_and_remove_underscores_integers(b"+") == b"+"
    assert check_and_remove_underscores_integers(b"1_2_3") == b"123"


@pytest.mark.parametrize("text", ["3.14", "-0.5", "1e10", "6.626e-34", "+1.5E+3", "0.0"])
def test_float_values(text):
    assert parse_float(text) == float(text)


def test_float_special_values():
    assert math.isnan(parse_float(b"+nan"))
    assert math.isnan(parse_float(b"-nan"))
    assert math.isnan(parse_float(b"nan"))
    assert parse_float(b"inf") == math.inf
    assert parse_float(b"-inf") == -math.inf


def test_float_underscores():
    assert parse_float(b"1_000.5") == parse_float(b"1000.5")
    assert check_and_remove_underscores_floats(b"1_0.0_1e+1_0") == b"10.01e+10"
    assert check_and_remove_underscores_floats(b"1.5") == b"1.5"


@pytest.mark.parametrize(
    "text, message",
    [
        (b".5", "float cannot start with a dot"),
        (b"5.", "float cannot end with a dot"),
        (b"1.2.3", "at most one decimal point"),
        (b"+.5", "must be preceded by a digit"),
        (b"1.e5", "must be followed by a digit"),
        (b"01.5", "cannot have leading zeroes"),
        (b"1_e5", "cannot have underscore before exponent"),
        (b"1e_5", "cannot have underscore after exponent"),
        (b"1_.5", "cannot have underscore before decimal point"),
        (b"1._5", "cannot have underscore after decimal point"),
        (b"_1.5", "cannot start with underscore"),
        (b"1.5_", "cannot end with underscore"),
        (b"1e+_5", "at least one digit between underscores"),
        (b"1e400", "value out of range"),
        (b"12a4", "invalid syntax"),
        (b"+", "invalid syntax"),
    ],
)
def test_float_errors(text, message):
    with pytest.raises(ParserError, match=message):
        parse_float(text)


def test_error_highlight_is_part_of_input():
    data = b"1.2.3"
    with pytest.raises(ParserError) as info:
        parse_float(data)
    err = info.value
    assert data[err.offset : err.offset + len(err.highlight)] == err.highlight