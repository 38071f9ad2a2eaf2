"""Column parsers for GFF3 entry lines.

An entry line has nine tab-separated columns::

    seqid  source  type  start  end  score  strand  phase  attributes

Each column has its own parser here. The parsers validate the raw text
of one column (everything up to the next tab) and return a primitive
value; text columns stay borrowed ``str`` slices until
:class:`~seqformats.gff.entry.Entry` decodes them into owned
:class:`~seqformats.gff.escape.EscapedString` values.

Errors carry an offset relative to the column; :func:`split_entry`
shifts them into line coordinates.

Example:
    >>> from seqformats.gff.fields import range_bound, score, Strand
    >>> range_bound("100")
    100
    >>> score(".") is None
    True
    >>> Strand.parse("-")
    <Strand.NEGATIVE: '-'>
"""

from __future__ import annotations

import re
import string
from enum import Enum
from typing import NamedTuple

from seqformats.errors import (
    GFFError,
    InvalidFieldError,
    InvalidPhaseError,
    InvalidRangeError,
    InvalidScoreError,
    InvalidStrandError,
    MalformedLineError,
    NumericConversionError,
)

# =============================================================================
# Constants
# =============================================================================

# GFF3 column indices
COL_SEQID = 0
COL_SOURCE = 1
COL_TYPE = 2
COL_START = 3
COL_END = 4
COL_SCORE = 5
COL_STRAND = 6
COL_PHASE = 7
COL_ATTRIBUTES = 8

COLUMN_NAMES = (
    "seqid",
    "source",
    "type",
    "start",
    "end",
    "score",
    "strand",
    "phase",
    "attributes",
)

SEQ_ID_CHARS = frozenset(string.ascii_letters + string.digits + ".:^*$@!+_?-|%>")

# Printable ASCII; reserved characters must arrive percent-encoded
ATTRIBUTE_CHARS = frozenset(chr(c) for c in range(0x20, 0x7F))

RESERVED_CHARS = frozenset("\t\r\n")

UNDEFINED = "."

U64_MAX = 2**64 - 1
U64_MAX_DIGITS = len(str(U64_MAX))

_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE | re.ASCII,
)


# =============================================================================
# Strand
# =============================================================================


class Strand(Enum):
    """Orientation of a feature relative to the reference."""

    POSITIVE = "+"
    NEGATIVE = "-"
    UNKNOWN = "?"

    @classmethod
    def parse(cls, char: str) -> Strand:
        """Elevate a strand character to the enum.

        Args:
            char: One of ``+``, ``-`` or ``?``.

        Raises:
            InvalidStrandError: For any other input.
        """
        try:
            return cls(char)
        except ValueError:
            raise InvalidStrandError(
                f"Unexpected strand kind, expected one of ['+', '-', '?'], got {char!r}",
                fragment=char,
                offset=0,
            ) from None

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Column Parsers
# =============================================================================


def _first_bad_char(text: str, allowed: frozenset[str]) -> int | None:
    for i, char in enumerate(text):
        if char not in allowed:
            return i
    return None


def seq_id(text: str) -> str:
    """Validate a sequence identifier column.

    Accepts ASCII letters, digits and ``.:^*$@!+_?-|%>``; rejects empty
    values and values beginning with ``>`` (a FASTA header leaking into
    GFF input).
    """
    if not text:
        raise InvalidFieldError("Empty seqid", fragment=text, offset=0)
    if text.startswith(">"):
        raise InvalidFieldError(
            f"Seqid may not start with '>', got {text!r}", fragment=text, offset=0
        )
    bad = _first_bad_char(text, SEQ_ID_CHARS)
    if bad is not None:
        raise InvalidFieldError(
            f"Invalid seqid character {text[bad]!r} in {text!r}",
            fragment=text[bad],
            offset=bad,
        )
    return text


def _free_text(text: str, what: str) -> str:
    if not text:
        raise InvalidFieldError(f"Empty {what}", fragment=text, offset=0)
    for i, char in enumerate(text):
        if char in RESERVED_CHARS:
            raise InvalidFieldError(
                f"Reserved character {char!r} in {what}", fragment=char, offset=i
            )
    return text


def source(text: str) -> str:
    """Validate the source column (anything but tab, CR, LF)."""
    return _free_text(text, "source")


def feature_type(text: str) -> str:
    """Validate the feature type column (anything but tab, CR, LF)."""
    return _free_text(text, "feature type")


def parse_u64(text: str, what: str = "integer") -> int:
    """Parse an unsigned 64-bit decimal integer.

    Args:
        text: ASCII digits only; no sign, no whitespace.
        what: Name of the value for error messages.

    Raises:
        NumericConversionError: If ``text`` is not all digits or the
            value does not fit 64 bits.
    """
    if not text or not (text.isascii() and text.isdigit()):
        raise NumericConversionError(
            f"Non-number input found in {what}: {text!r}", fragment=text, offset=0
        )
    digits = text.lstrip("0") or "0"
    # u64 max has 20 digits; longer strings would also hit int() size limits
    if len(digits) > U64_MAX_DIGITS or int(digits) > U64_MAX:
        raise NumericConversionError(
            f"{what.capitalize()} with {len(digits)} significant digits does not fit in 64 bits",
            fragment=text,
            offset=0,
        )
    return int(digits)


def range_bound(text: str) -> int:
    """Parse a start or end column into an unsigned integer.

    Raises:
        InvalidRangeError: If the column is not a digit string.
        NumericConversionError: If the value overflows 64 bits.
    """
    if not text or not (text.isascii() and text.isdigit()):
        raise InvalidRangeError(
            f"Non-number input found in range bound: {text!r}", fragment=text, offset=0
        )
    return parse_u64(text, "range bound")


def score(text: str) -> float | None:
    """Parse the score column: ``.`` is undefined, else a float literal."""
    if text == UNDEFINED:
        return None
    if not _FLOAT_PATTERN.fullmatch(text):
        raise InvalidScoreError(
            "Invalid score, expected one of '.' or a valid floating point number, "
            f"got {text!r}",
            fragment=text,
            offset=0,
        )
    return float(text)


def strand(text: str) -> str | None:
    """Parse the strand column: ``.`` or one of ``+ - ?``."""
    if text == UNDEFINED:
        return None
    if text in ("+", "-", "?"):
        return text
    raise InvalidStrandError(
        f"Invalid strand, expected one of ['.', '+', '-', '?'], got {text!r}",
        fragment=text,
        offset=0,
    )


def phase(text: str) -> int | None:
    """Parse the phase column: ``.`` or one of ``0 1 2``."""
    if text == UNDEFINED:
        return None
    if text in ("0", "1", "2"):
        return int(text)
    raise InvalidPhaseError(
        f"Invalid phase, expected one of ['.', '0', '1', '2'], got {text!r}",
        fragment=text,
        offset=0,
    )


def attributes(text: str) -> str:
    """Validate the attribute column's character set.

    The column is returned as-is for
    :meth:`~seqformats.gff.attributes.AttributeSet.parse` to decompose.
    """
    if not text:
        raise InvalidFieldError("Empty attributes column", fragment=text, offset=0)
    bad = _first_bad_char(text, ATTRIBUTE_CHARS)
    if bad is not None:
        raise InvalidFieldError(
            f"Attributes contained an invalid character {text[bad]!r}",
            fragment=text[bad],
            offset=bad,
        )
    return text


# =============================================================================
# Whole Line
# =============================================================================


class RawEntry(NamedTuple):
    """Validated but undecoded columns of one entry line.

    ``offsets`` holds the start position of every column in the line so
    later stages can report errors in line coordinates.
    """

    seq_id: str
    source: str
    feature_type: str
    start: int
    end: int
    score: float | None
    strand: str | None
    phase: int | None
    attributes: str
    offsets: tuple[int, ...]


_COLUMN_PARSERS = (
    seq_id,
    source,
    feature_type,
    range_bound,
    range_bound,
    score,
    strand,
    phase,
    attributes,
)


def split_entry(line: str) -> RawEntry:
    """Split and validate the nine columns of an entry line.

    Args:
        line: One line of GFF3 text without its newline.

    Returns:
        RawEntry with every column validated.

    Raises:
        MalformedLineError: If the line has fewer or more than nine
            tab-separated columns.
        GFFError: Subclass raised by the failing column parser, with the
            offset moved into line coordinates.
    """
    columns = line.split("\t")

    offsets = []
    pos = 0
    for column in columns:
        offsets.append(pos)
        pos += len(column) + 1

    if len(columns) < len(COLUMN_NAMES):
        missing = COLUMN_NAMES[len(columns)]
        raise MalformedLineError(
            f"Expected 9 tab-separated columns, found {len(columns)} "
            f"(missing tab before {missing})",
            fragment=columns[-1],
            offset=offsets[-1],
        )
    if len(columns) > len(COLUMN_NAMES):
        trailing = "\t".join(columns[len(COLUMN_NAMES) :])
        raise MalformedLineError(
            "Trailing input after attributes column",
            fragment=trailing,
            offset=offsets[len(COLUMN_NAMES)],
        )

    values = []
    for parser, column, offset in zip(_COLUMN_PARSERS, columns, offsets):
        try:
            values.append(parser(column))
        except GFFError as e:
            raise e.shifted(offset)

    return RawEntry(*values, offsets=tuple(offsets))
