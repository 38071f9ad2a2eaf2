"""Percent-escaped text fields.

GFF3 embeds reserved characters (tab, newline, ``;``, ``=``, ``,``,
``&``...) in field text as ``%XX`` hex escapes of their UTF-8 bytes.
:class:`EscapedString` is a ``str`` whose escapes have all been
resolved; construction either decodes every escape or raises
:class:`~seqformats.errors.EscapeDecodeError`.

Example:
    >>> from seqformats.gff.escape import EscapedString, escape
    >>> EscapedString("Note%3Dtwo%20words")
    'Note=two words'
    >>> escape("a;b")
    'a%3Bb'
"""

from __future__ import annotations

import string

from seqformats.errors import EscapeDecodeError

# =============================================================================
# Constants
# =============================================================================

HEX_DIGITS = frozenset(string.hexdigits)

# Characters that must be percent-encoded anywhere in a GFF3 line
ALWAYS_ESCAPED = frozenset("\t\n\r%\x7f") | frozenset(chr(c) for c in range(0x20))

# Additional characters with meaning inside column 9
ATTRIBUTE_ESCAPED = frozenset(";=&,")


# =============================================================================
# Decoding
# =============================================================================


class EscapedString(str):
    """A string with every ``%XX`` escape resolved.

    Behaves exactly like ``str`` once built. Input without a ``%`` is
    returned unchanged.

    Raises:
        EscapeDecodeError: If an escape is truncated, holds non-hex
            digits, or the decoded bytes are not valid UTF-8.
    """

    __slots__ = ()

    def __new__(cls, raw: str = "") -> EscapedString:
        if isinstance(raw, EscapedString):
            return raw
        if "%" not in raw:
            return super().__new__(cls, raw)
        return super().__new__(cls, _unescape(raw))


def _unescape(raw: str) -> str:
    out = bytearray()
    pos = 0
    while True:
        idx = raw.find("%", pos)
        if idx == -1:
            out += raw[pos:].encode("utf-8")
            break
        out += raw[pos:idx].encode("utf-8")

        digits = raw[idx + 1 : idx + 3]
        if len(digits) < 2:
            raise EscapeDecodeError(
                f"Incomplete percent-escape at end of {raw!r}",
                fragment=raw[idx:],
                offset=idx,
            )
        if not (digits[0] in HEX_DIGITS and digits[1] in HEX_DIGITS):
            raise EscapeDecodeError(
                f"Invalid percent-escape {raw[idx : idx + 3]!r}, expected two hex digits",
                fragment=raw[idx : idx + 3],
                offset=idx,
            )
        out.append(int(digits, 16))
        pos = idx + 3

    try:
        return out.decode("utf-8")
    except UnicodeDecodeError as e:
        raise EscapeDecodeError(
            f"Percent-escapes in {raw!r} do not form valid UTF-8",
            fragment=raw,
            offset=0,
        ) from e


def unescape(raw: str, offset: int = 0) -> EscapedString:
    """Decode ``raw``, reporting failures relative to ``offset``.

    Args:
        raw: Field text as found in the source line.
        offset: Position of ``raw`` within its line.

    Returns:
        The decoded string.
    """
    try:
        return EscapedString(raw)
    except EscapeDecodeError as e:
        raise e.shifted(offset)


# =============================================================================
# Encoding
# =============================================================================


def escape(text: str, *, attribute: bool = False, keep: str = "") -> str:
    """Percent-encode the characters GFF3 reserves.

    Args:
        text: Decoded text.
        attribute: Also encode the column 9 separators ``;=&,``.
        keep: Characters to leave alone even if reserved (for instance
            ``","`` when writing an already-split multi-value list).

    Returns:
        Text safe to place in a GFF3 column.
    """
    reserved = ALWAYS_ESCAPED | ATTRIBUTE_ESCAPED if attribute else ALWAYS_ESCAPED
    parts = []
    for char in text:
        if (char in reserved or not char.isascii()) and char not in keep:
            parts.append("".join(f"%{b:02X}" for b in char.encode("utf-8")))
        else:
            parts.append(char)
    return "".join(parts)
