"""Errors raised while parsing and decoding TOML documents."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

_LINES_OF_CONTEXT = 3


class ParserError(Exception):
    """A parsing problem tied to a highlighted range of the document.

    ``highlight`` is the offending bytes and ``offset`` their position in the
    document they were taken from.
    """

    def __init__(
        self,
        message: str,
        highlight: bytes = b"",
        offset: int = 0,
        key: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.highlight = bytes(highlight)
        self.offset = offset
        self.key = tuple(key)

    def __str__(self) -> str:
        return self.message


class DecodeError(Exception):
    """An error located in a TOML document, with a human-readable excerpt."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        key: Sequence[str] = (),
        human: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.key = tuple(key)
        self.human = human

    def __str__(self) -> str:
        return "toml: " + self.message

    def position(self) -> tuple[int, int]:
        """Return the 1-indexed (line, column) where the error occurred."""
        return self.line, self.column


class StrictMissingError(Exception):
    """Document keys that have no counterpart in the target value."""

    def __init__(self, errors: Iterable[DecodeError]) -> None:
        self.errors = list(errors)
        super().__init__(str(self))

    def __str__(self) -> str:
        return "strict mode: fields in the document are missing in the target struct"

    def describe(self) -> str:
        """Return the human-readable description of every missing field."""
        return "\n---\n".join(e.human for e in self.errors)


def _position_at_end(data: bytes) -> tuple[int, int]:
    row = data.count(b"\n") + 1
    last_newline = data.rfind(b"\n")
    column = len(data) - last_newline
    if last_newline < 0:
        column = len(data) + 1
    return row, column


def _before_lines(document: bytes, offset: int, around: int) -> list[bytes]:
    """Lines before the highlight, nearest first; the first is the line prefix."""
    rest = document[:offset]
    if not rest:
        return []
    parts = rest.split(b"\n")[::-1]
    if parts[-1] == b"":
        parts.pop()
    return parts[: around + 1]


def _after_lines(document: bytes, end: int, around: int) -> list[bytes]:
    """Lines after the highlight; the first is the remainder of its line."""
    rest = document[end:]
    if not rest:
        return []
    parts = rest.split(b"\n")
    if parts[-1] == b"":
        parts.pop()
    return parts[: around + 1]


def _line_number(line: int, width: int) -> bytes:
    return f"{line:>{width}}".encode()


def wrap_decode_error(document: bytes | str, error: ParserError) -> DecodeError:
    """Build a DecodeError pointing at the range ``error`` highlights."""
    if isinstance(document, str):
        document = document.encode("utf-8")
    highlight = error.highlight
    offset = error.offset
    end = offset + len(highlight)
    if offset < 0 or end > len(document) or document[offset:end] != highlight:
        raise ValueError("error highlight is not a part of the document")

    message = str(error)
    err_line, err_column = _position_at_end(document[:offset])
    before = _before_lines(document, offset, _LINES_OF_CONTEXT)
    after = _after_lines(document, end, _LINES_OF_CONTEXT)

    width = len(str(err_line + len(after) - 1))
    out = bytearray()

    for i in range(len(before) - 1, 0, -1):
        out += _line_number(err_line - i, width) + b"|"
        if before[i]:
            out += b" " + before[i]
        out += b"\n"

    out += _line_number(err_line, width) + b"| "
    if before:
        out += before[0]
    out += highlight
    if after:
        out += after[0]
    out += b"\n"

    out += b" " * width + b"| "
    if before:
        out += b" " * len(before[0])
    out += b"~" * len(highlight)
    if message:
        out += b" " + message.encode("utf-8")

    for i in range(1, len(after)):
        out += b"\n" + _line_number(err_line + i, width) + b"|"
        if after[i]:
            out += b" " + after[i]

    return DecodeError(
        message=message,
        line=err_line,
        column=err_column,
        key=error.key,
        human=out.decode("utf-8", errors="replace"),
    )