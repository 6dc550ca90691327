import math
from datetime import datetime, timedelta, timezone

import pytest

from tomlbits.localtime import LocalDate, LocalDateTime, LocalTime
from tomlbits.tagged import TaggedMismatch, add_tag, compare_json, rm_tag, untag

UTC = timezone.utc


def test_add_tag_primitives():
    assert add_tag("hello") == {"type": "string", "value": "hello"}
    assert add_tag(True) == {"type": "bool", "value": "true"}
    assert add_tag(False) == {"type": "bool", "value": "false"}
    assert add_tag(42) == {"type": "integer", "value": "42"}
    assert add_tag(3.5) == {"type": "float", "value": "3.5"}
    assert add_tag(math.nan) == {"type": "float", "value": "nan"}


def test_add_tag_float_uses_exponent_for_large_values():
    assert add_tag(1e6)["value"] == "1e+06"


def test_add_tag_local_types():
    assert add_tag(LocalDate(2021, 6, 8)) == {"type": "date-local", "value": "2021-06-08"}
    assert add_tag(LocalTime(20, 12, 1, 2, 9)) == {"type": "time-local", "value": "20:12:01.000000002"}
    dt = LocalDateTime(LocalDate(2021, 6, 8), LocalTime(20, 12, 1, 2, 9))
    assert add_tag(dt) == {"type": "datetime-local", "value": "2021-06-08T20:12:01.000000002"}


def test_add_tag_datetime_utc():
    value = datetime(1979, 5, 27, 7, 32, tzinfo=UTC)
    assert add_tag(value) == {"type": "datetime", "value": "1979-05-27T07:32:00Z"}


def test_add_tag_datetime_with_offset():
    value = datetime(1979, 5, 27, 0, 32, tzinfo=timezone(timedelta(hours=-7)))
    assert add_tag(value)["value"] == "1979-05-27T00:32:00-07:00"


def test_add_tag_nested():
    doc = {"a": [1, {"b": "c"}]}
    assert add_tag(doc) == {
        "a": [
            {"type": "integer", "value": "1"},
            {"b": {"type": "string", "value": "c"}},
        ]
    }


def test_add_tag_unknown_type():
    with pytest.raises(TypeError):
        add_tag(None)


@pytest.mark.parametrize(
    "doc",
    [
        {"s": "text", "i": -17, "b": True},
        {"f": 0.1, "g": 1e6, "h": -0.0, "big": 1.5e300},
        {"t": {"inner": [1, 2, 3], "more": [{"x": "y"}]}},
        {"d": LocalDate(2021, 6, 8), "lt": LocalTime(20, 12, 1, 2, 9)},
        {"ldt": LocalDateTime(LocalDate(2021, 6, 8), LocalTime(7, 32, 0, 0, 0))},
        {"dt": datetime(1979, 5, 27, 7, 32, 0, 500000, tzinfo=UTC)},
        {"dt": datetime(1979, 5, 27, 0, 32, tzinfo=timezone(timedelta(hours=5, minutes=30)))},
    ],
)
def test_round_trip(doc):
    tagged = add_tag(doc)
    assert rm_tag(tagged) == doc
    compare_json("", tagged, add_tag(rm_tag(tagged)))


def test_untag_datetime_local():
    value = untag({"type": "datetime-local", "value": "2021-06-08 20:12:01.000000002"})
    assert value == LocalDateTime(LocalDate(2021, 6, 8), LocalTime(20, 12, 1, 2, 9))


def test_untag_datetime():
    value = untag({"type": "datetime", "value": "1979-05-27T07:32:00Z"})
    assert value == datetime(1979, 5, 27, 7, 32, tzinfo=UTC)


def test_untag_booleans():
    assert untag({"type": "bool", "value": "true"}) is True
    assert untag({"type": "bool", "value": "false"}) is False
    with pytest.raises(ValueError, match="as a boolean"):
        untag({"type": "bool", "value": "yes"})


def test_untag_integer_range():
    assert untag({"type": "integer", "value": "9223372036854775807"}) == 2**63 - 1
    with pytest.raises(ValueError, match="out of range"):
        untag({"type": "integer", "value": "9223372036854775808"})


@pytest.mark.parametrize(
    "typed",
    [
        {"type": "integer", "value": "12a"},
        {"type": "float", "value": "abc"},
        {"type": "date-local", "value": "what"},
        {"type": "time-local", "value": "what"},
        {"type": "datetime", "value": "1979-05-27"},
        {"type": "wat", "value": "1"},
    ],
)
def test_rm_tag_reports_bad_values(typed):
    with pytest.raises(ValueError, match="tag.Remove"):
        rm_tag({"k": typed})


def test_rm_tag_rejects_bare_primitives():
    with pytest.raises(ValueError, match="unrecognized JSON format"):
        rm_tag("plain")


def test_compare_json_floats_by_value():
    compare_json("", {"f": {"type": "float", "value": "1.0"}}, {"f": {"type": "float", "value": "1"}})
    with pytest.raises(TaggedMismatch, match="'f'"):
        compare_json("", {"f": {"type": "float", "value": "1.0"}}, {"f": {"type": "float", "value": "2"}})


def test_compare_json_nan_must_match_textually():
    with pytest.raises(TaggedMismatch):
        compare_json("", {"f": {"type": "float", "value": "nan"}}, {"f": {"type": "float", "value": "1"}})


def test_compare_json_datetimes_normalised():
    want = {"d": {"type": "datetime", "value": "1979-05-27T07:32:00Z"}}
    same = {"d": {"type": "datetime", "value": "1979-05-27 07:32:00z"}}
    other = {"d": {"type": "datetime", "value": "1979-05-27T08:32:00Z"}}
    compare_json("", want, same)
    with pytest.raises(TaggedMismatch, match="'d'"):
        compare_json("", want, other)


def test_compare_json_missing_and_extra_keys():
    want = {"a": {"type": "string", "value": "x"}}
    with pytest.raises(TaggedMismatch, match="parser output"):
        compare_json("", want, {})
    with pytest.raises(TaggedMismatch, match="expected output"):
        compare_json("", want, {**want, "b": {"type": "string", "value": "y"}})


def test_compare_json_type_and_shape_mismatches():
    with pytest.raises(TaggedMismatch, match="not an integer but string"):
        compare_json("", {"a": {"type": "integer", "value": "1"}}, {"a": {"type": "string", "value": "1"}})
    with pytest.raises(TaggedMismatch, match="supposed to be a value"):
        compare_json("", {"a": {"type": "integer", "value": "1"}}, {"a": {"x": {"type": "string", "value": "1"}}})
    with pytest.raises(TaggedMismatch, match="Array lengths differ"):
        compare_json("", [{"type": "integer", "value": "1"}], [])


def test_compare_json_string_values():
    with pytest.raises(TaggedMismatch, match="don't match"):
        compare_json("", {"s": {"type": "string", "value": "a"}}, {"s": {"type": "string", "value": "b"}})