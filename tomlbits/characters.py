"""Byte-level checks for the characters TOML allows inside strings.

Any Unicode character may appear except the control characters other than
tab (U+0000 to U+0008, U+000A to U+001F, U+007F). Line feed and carriage
return are accepted here because multi-line strings handle them separately.
"""

from __future__ import annotations

_LOW_CONTINUATION = 0x80
_HIGH_CONTINUATION = 0xBF

_INVALID_ASCII = frozenset(
    [*range(0x00, 0x09), 0x0B, 0x0C, *range(0x0E, 0x20), 0x7F]
)


def invalid_ascii(b: int) -> bool:
    """Return True if the ASCII byte ``b`` may not appear unescaped."""
    return b in _INVALID_ASCII


def _lead_info(c: int) -> tuple[int, int, int] | None:
    """Return (size, low, high) for a UTF-8 lead byte, or None if illegal.

    ``low`` and ``high`` bound the second byte of the sequence, which rules
    out overlong forms, surrogates and code points above U+10FFFF.
    """
    if c < 0xC2:
        return None
    if c < 0xE0:
        return 2, _LOW_CONTINUATION, _HIGH_CONTINUATION
    if c == 0xE0:
        return 3, 0xA0, _HIGH_CONTINUATION
    if c == 0xED:
        return 3, _LOW_CONTINUATION, 0x9F
    if c < 0xF0:
        return 3, _LOW_CONTINUATION, _HIGH_CONTINUATION
    if c == 0xF0:
        return 4, 0x90, _HIGH_CONTINUATION
    if c < 0xF4:
        return 4, _LOW_CONTINUATION, _HIGH_CONTINUATION
    if c == 0xF4:
        return 4, _LOW_CONTINUATION, 0x8F
    return None


def _scan(data: bytes, i: int) -> tuple[int, int]:
    """Inspect the character starting at ``data[i]``.

    Returns ``(size, 0)`` for a valid character, or ``(0, bad)`` where
    ``bad`` is the number of bytes that make up the invalid sequence.
    """
    n = len(data)
    c = data[i]
    if c < 0x80:
        return (0, 1) if c in _INVALID_ASCII else (1, 0)

    info = _lead_info(c)
    if info is None:
        return 0, 1
    size, low, high = info
    if i + size > n:
        return 0, n - i
    if not low <= data[i + 1] <= high:
        return 0, 2
    for k in range(2, size):
        if not _LOW_CONTINUATION <= data[i + k] <= _HIGH_CONTINUATION:
            return 0, k + 1
    return size, 0


def utf8_toml_valid_already_escaped(p: bytes) -> tuple[int, int] | None:
    """Check that ``p`` is valid UTF-8 made only of characters TOML allows.

    Quotation marks and backslashes are expected to have been handled
    already. Returns None when the input is valid, otherwise a pair
    ``(index, size)`` locating the first offending byte sequence.
    """
    data = bytes(p)
    i = 0
    while i < len(data):
        size, bad = _scan(data, i)
        if bad:
            return i, bad
        i += size
    return None


def utf8_valid_next(p: bytes) -> int:
    """Return the byte size of the first character of ``p``, or 0 if invalid."""
    data = bytes(p)
    if not data:
        raise ValueError("cannot inspect the next character of empty input")
    size, _ = _scan(data, 0)
    return size