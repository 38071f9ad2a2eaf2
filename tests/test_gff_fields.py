"""Unit tests for seqformats.gff.fields module.

Tests cover:
- Individual column parsers (seqid, source, range, score, strand, phase)
- Strand enum closure
- Whole-line splitting and column offsets
"""

import pytest

from seqformats.errors import (
    InvalidFieldError,
    InvalidPhaseError,
    InvalidRangeError,
    InvalidScoreError,
    InvalidStrandError,
    MalformedLineError,
    NumericConversionError,
)
from seqformats.gff import fields
from seqformats.gff.fields import Strand, split_entry

# =============================================================================
# Column Parsers
# =============================================================================


class TestSeqId:
    """Tests for the seqid column."""

    @pytest.mark.parametrize(
        "value",
        ["chr1", "NC_045512.2", "ctg:1^2*3$4@5!6+7_8?9-0|x", "a%20b", "scaf>1"],
    )
    def test_valid(self, value: str) -> None:
        """Letters, digits and the allowed punctuation are accepted."""
        assert fields.seq_id(value) == value

    def test_rejects_leading_gt(self) -> None:
        """A FASTA header leaking into GFF input is rejected."""
        with pytest.raises(InvalidFieldError, match="may not start with '>'"):
            fields.seq_id(">chr1")

    def test_rejects_space(self) -> None:
        """Characters outside the class are reported with their offset."""
        with pytest.raises(InvalidFieldError) as exc_info:
            fields.seq_id("chr 1")
        assert exc_info.value.offset == 3

    def test_rejects_empty(self) -> None:
        """An empty seqid is invalid."""
        with pytest.raises(InvalidFieldError):
            fields.seq_id("")


class TestFreeText:
    """Tests for source and type columns."""

    def test_source_allows_spaces(self) -> None:
        """Anything but tab, CR and LF is accepted."""
        assert fields.source("Gnomon prediction") == "Gnomon prediction"

    def test_type_rejects_empty(self) -> None:
        """Empty type column fails."""
        with pytest.raises(InvalidFieldError, match="Empty feature type"):
            fields.feature_type("")

    def test_source_rejects_cr(self) -> None:
        """Reserved characters fail."""
        with pytest.raises(InvalidFieldError):
            fields.source("a\rb")


class TestRangeBound:
    """Tests for start/end columns."""

    def test_valid(self) -> None:
        """Digit strings parse to integers."""
        assert fields.range_bound("100") == 100
        assert fields.range_bound("0") == 0

    @pytest.mark.parametrize("value", ["-5", "+5", "1.5", "", "12a", "٣"])
    def test_rejects_non_digits(self, value: str) -> None:
        """Signs, decimals and non-ASCII digits are rejected."""
        with pytest.raises(InvalidRangeError):
            fields.range_bound(value)

    def test_u64_max(self) -> None:
        """The largest 64-bit value is accepted."""
        assert fields.range_bound("18446744073709551615") == 2**64 - 1

    def test_overflow(self) -> None:
        """Overflow is an error, not wraparound."""
        with pytest.raises(NumericConversionError):
            fields.range_bound("18446744073709551616")

    def test_very_long_digit_string(self) -> None:
        """Thousands of digits are an overflow, not an interpreter error."""
        with pytest.raises(NumericConversionError, match="does not fit in 64 bits"):
            fields.range_bound("1" * 5000)

    def test_leading_zeros(self) -> None:
        """Leading zeros do not count towards the 64-bit limit."""
        assert fields.range_bound("0" * 30 + "100") == 100


class TestScore:
    """Tests for the score column."""

    def test_undefined(self) -> None:
        """'.' maps to None."""
        assert fields.score(".") is None

    @pytest.mark.parametrize(
        "value,expected",
        [("3.14", 3.14), ("0", 0.0), ("-1e-5", -1e-5), (".5", 0.5), ("1E+20", 1e20)],
    )
    def test_valid(self, value: str, expected: float) -> None:
        """Float literals parse."""
        assert fields.score(value) == expected

    def test_infinity(self) -> None:
        """inf is a valid literal."""
        assert fields.score("inf") == float("inf")

    @pytest.mark.parametrize("value", ["\u0661.\u0665", "\u0663", "1e\u0662"])
    def test_non_ascii_digits(self, value: str) -> None:
        """Only ASCII digits form a score."""
        with pytest.raises(InvalidScoreError):
            fields.score(value)

    @pytest.mark.parametrize("value", ["abc", "", "1.0.0", " 1", "1_000", ".."])
    def test_invalid(self, value: str) -> None:
        """Anything else fails."""
        with pytest.raises(InvalidScoreError):
            fields.score(value)


class TestStrand:
    """Tests for strand column and enum."""

    @pytest.mark.parametrize(
        "char,expected",
        [("+", Strand.POSITIVE), ("-", Strand.NEGATIVE), ("?", Strand.UNKNOWN)],
    )
    def test_enum_parse(self, char: str, expected: Strand) -> None:
        """The three strand characters map to the enum."""
        assert Strand.parse(char) is expected
        assert str(expected) == char

    @pytest.mark.parametrize("char", [".", "x", "", "++", "0"])
    def test_enum_rejects_others(self, char: str) -> None:
        """Any other input is an error."""
        with pytest.raises(InvalidStrandError):
            Strand.parse(char)

    def test_column(self) -> None:
        """The column accepts '.' as undefined."""
        assert fields.strand(".") is None
        assert fields.strand("-") == "-"
        with pytest.raises(InvalidStrandError):
            fields.strand("*")


class TestPhase:
    """Tests for the phase column."""

    @pytest.mark.parametrize("value,expected", [(".", None), ("0", 0), ("1", 1), ("2", 2)])
    def test_valid(self, value: str, expected: int | None) -> None:
        """Only '.', 0, 1 and 2 are valid."""
        assert fields.phase(value) == expected

    @pytest.mark.parametrize("value", ["3", "-1", "01", ""])
    def test_invalid(self, value: str) -> None:
        """Other values fail."""
        with pytest.raises(InvalidPhaseError):
            fields.phase(value)


class TestAttributesColumn:
    """Tests for the attribute column charset check."""

    def test_valid(self) -> None:
        """Printable ASCII including quotes and brackets is accepted."""
        text = "ID=a;Note=\"x\" (y)/z's"
        assert fields.attributes(text) == text

    def test_rejects_non_ascii(self) -> None:
        """Non-ASCII text must be percent-encoded."""
        with pytest.raises(InvalidFieldError) as exc_info:
            fields.attributes("Note=café")
        assert exc_info.value.offset == 8


# =============================================================================
# Whole Line
# =============================================================================


class TestSplitEntry:
    """Tests for splitting an entry line into columns."""

    def test_valid(self) -> None:
        """All nine columns are validated and returned."""
        raw = split_entry("chr1\tsrc\tgene\t1\t300\t0.5\t+\t0\tID=g1")
        assert raw.seq_id == "chr1"
        assert (raw.start, raw.end) == (1, 300)
        assert raw.score == 0.5
        assert raw.strand == "+"
        assert raw.phase == 0
        assert raw.attributes == "ID=g1"
        assert raw.offsets == (0, 5, 9, 14, 16, 20, 24, 26, 28)

    def test_missing_columns(self) -> None:
        """Too few columns names the first missing one."""
        with pytest.raises(MalformedLineError, match="missing tab before start"):
            split_entry("chr1\tsrc\tgene")

    def test_trailing_input(self) -> None:
        """A tenth column is rejected."""
        with pytest.raises(MalformedLineError, match="Trailing input"):
            split_entry("chr1\tsrc\tgene\t1\t2\t.\t+\t.\tID=a\textra")

    def test_error_offset_in_line_coordinates(self) -> None:
        """Column errors are shifted to the column's position."""
        with pytest.raises(InvalidPhaseError) as exc_info:
            split_entry("chr1\tsrc\tgene\t1\t300\t.\t+\t5\tID=g1")
        assert exc_info.value.offset == 24
