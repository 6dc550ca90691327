# tomlbits

Small, self-contained pieces for building TOML tools in Python. The package
has no third-party dependencies and needs Python 3.10 or newer.

## Modules

- **`tomlbits.localtime`** has the TOML local date and time types:
  `LocalDate`, `LocalTime` and `LocalDateTime`. These are frozen dataclasses
  with no time zone.
  - `str()` gives the RFC 3339 form of each type.
  - `from_text` parses text and rejects trailing characters.
  - `LocalDate.as_datetime(tz)` and `LocalDateTime.as_datetime(tz)` convert
    to `datetime`. `LocalTime.as_timedelta()` gives the time since midnight.
    Both conversions truncate to microseconds.
  - The module also has the parsers `parse_local_date`, `parse_local_time`,
    `parse_local_date_time`, `parse_date_time` and `parse_decimal_digits`.
    `parse_local_time` and `parse_local_date_time` return the value together
    with the unparsed rest of the input. `parse_date_time` parses offset
    date-times ending in `Z` or `±HH:MM`.
  - `is_valid_date` checks whether a day exists in the calendar.
  - Fractional seconds keep up to nine digits. Further digits are accepted
    and ignored.
- **`tomlbits.numbers`** has `parse_integer` and `parse_float` for TOML
  number literals.
  - They handle `0x`, `0o` and `0b` prefixes, underscore separators, and
    `inf` and `nan`.
  - They reject leading zeroes.
  - Integers must fit in 64 bits.
  - `check_and_remove_underscores_integers` and
    `check_and_remove_underscores_floats` validate the underscores and strip
    them.
- **`tomlbits.characters`** checks raw bytes for characters TOML allows:
  - `invalid_ascii(b)` tests a single byte.
  - `utf8_toml_valid_already_escaped(p)` returns `None` for valid input.
    Otherwise it returns the `(index, size)` of the first bad sequence.
  - `utf8_valid_next(p)` returns the byte length of the first character, or
    `0` if that character is invalid.
- **`tomlbits.errors`** defines the error types:
  - `ParserError` carries a message, the highlighted bytes and their offset
    in the document.
  - `wrap_decode_error(document, error)` turns a `ParserError` into a
    `DecodeError`. The `DecodeError` has a 1-based `position()` and a
    `human` report that shows up to three numbered lines of context on each
    side of the problem and underlines it.
  - `StrictMissingError` groups several `DecodeError`s. Its `describe()`
    method joins their reports.
- **`tomlbits.tagged`** converts values to and from the tagged JSON form
  used by the language-agnostic TOML test suite, in which each leaf value is
  `{"type": ..., "value": ...}`.
  - `add_tag` tags plain values.
  - `rm_tag` and `untag` turn tagged values back into plain ones.
  - `compare_json` compares two tagged documents. It raises `TaggedMismatch`
    at the first difference. Floats and date-times are compared by value,
    not as text.
- **`tomlbits.cli`** has `Program`, a driver for converter commands. It
  takes a conversion function `fn(input, output)` on binary streams.
  - It reads standard input, or the first file named.
  - With `inplace=True`, it rewrites every named file with its converted
    output instead.
  - `main(files, stdin, stdout, stderr)` returns `0` on success. On failure
    it writes the error to `stderr` and returns `-1`. For a `DecodeError` it
    also writes the report and the row and column.
  - `execute(argv)` parses the arguments and exits with that status.

## Example

```python
from tomlbits.localtime import LocalDate, LocalTime
from tomlbits.numbers import parse_integer

day = LocalDate.from_text("2021-06-08")
print(day)                      # 2021-06-08

moment = LocalTime.from_text("20:12:01.500")
print(moment)                   # 20:12:01.500
print(moment.as_timedelta())    # 20:12:01.500000

print(parse_integer("0xdead_beef"))  # 3735928559
```

## Error reports

```python
from tomlbits.errors import ParserError, wrap_decode_error

doc = b"name = 123__456"
err = wrap_decode_error(
    doc,
    ParserError("number must have at least one digit between underscores", b"__", 10),
)
print(err.human)
print(err.position())           # (1, 11)
```

prints

```
1| name = 123__456
 |           ~~ number must have at least one digit between underscores
```

## What this package does not do

There is no full TOML document parser here. There is also no decoder into
Python objects and no encoder back to TOML. The package supplies the scalar
parsers, types, error reporting and tagged-JSON helpers such tools are built
from. It installs no commands. `Program` is a driver for commands that
supply their own conversion function.