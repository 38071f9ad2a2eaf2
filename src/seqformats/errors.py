"""Exception hierarchy for seqformats.

Every parse failure raised by the library derives from
:class:`SeqFormatError`, which is a :class:`ValueError` so callers that
only care about "bad input" can catch that. GFF failures carry enough
context (line number, raw line, offset of the failing fragment) to be
rendered as a pointer into the source without re-parsing.

Hierarchy:
    SeqFormatError
        GFFError
            GFFDecodeError
            MalformedLineError
            InvalidFieldError
                InvalidRangeError, InvalidScoreError,
                InvalidStrandError, InvalidPhaseError
            InvalidAttributeError
                ReservedAttributeError, InvalidGapKindError,
                DuplicateEntryIdError
            PragmaError
                InvalidVersionError, InvalidGenomeBuildError,
                DuplicateSequenceError, DuplicateMetaAttributeError
            EscapeDecodeError
            NumericConversionError
        SequenceError
            InvalidSymbolError, FastaFormatError,
            FastqFormatError, InvalidQualityError

Example:
    >>> from seqformats.gff import GFF
    >>> from seqformats.errors import GFFError
    >>> try:
    ...     GFF.parse("chr1\\tsrc\\tgene\\t1\\t10\\t.\\tx\\t.\\tID=a")
    ... except GFFError as e:
    ...     print(e.render())
"""

from __future__ import annotations


class SeqFormatError(ValueError):
    """Base class for all seqformats parse failures."""


# =============================================================================
# GFF Errors
# =============================================================================


class GFFError(SeqFormatError):
    """A GFF3 document could not be parsed.

    Attributes:
        message: Human-readable reason, citing the offending token.
        fragment: The failing substring, if known.
        offset: 0-based character offset of ``fragment`` in ``line``.
        line_number: 1-based line number in the document.
        line: The raw line the error occurred on.
    """

    def __init__(
        self,
        message: str,
        *,
        fragment: str | None = None,
        offset: int | None = None,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.fragment = fragment
        self.offset = offset
        self.line_number = line_number
        self.line = line

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"

    def shifted(self, delta: int) -> GFFError:
        """Move the recorded offset right by ``delta`` characters.

        Parsers working on a slice of a line raise offsets relative to
        that slice; the caller shifts them into line coordinates.
        """
        if self.offset is not None:
            self.offset += delta
        return self

    def locate(self, line_number: int, line: str) -> GFFError:
        """Attach the document position, keeping any existing one."""
        if self.line_number is None:
            self.line_number = line_number
            self.line = line
        return self

    def render(self) -> str:
        """Render the error with a caret under the failing fragment.

        Returns:
            Multi-line diagnostic string. Without a known line only the
            message is returned.
        """
        header = str(self)
        if self.line is None:
            return header

        lines = [header, f"  {self.line}"]
        if self.offset is not None and 0 <= self.offset <= len(self.line):
            # keep tabs so the caret lines up under tab-separated columns
            pad = "".join("\t" if c == "\t" else " " for c in self.line[: self.offset])
            width = max(len(self.fragment or ""), 1)
            lines.append(f"  {pad}{'^' * width}")
        return "\n".join(lines)


class GFFDecodeError(GFFError):
    """Raw input bytes were not valid UTF-8."""


class MalformedLineError(GFFError):
    """A line does not decompose into a recognizable structure."""


class InvalidFieldError(GFFError):
    """A fixed column of an entry line holds an invalid value."""


class InvalidRangeError(InvalidFieldError):
    """A range bound is not an unsigned integer."""


class InvalidScoreError(InvalidFieldError):
    """The score column is neither ``.`` nor a float literal."""


class InvalidStrandError(InvalidFieldError):
    """The strand column is not one of ``. + - ?``."""


class InvalidPhaseError(InvalidFieldError):
    """The phase column is not one of ``. 0 1 2``."""


class InvalidAttributeError(GFFError):
    """A tag=value pair is malformed or a structured value is incomplete."""


class ReservedAttributeError(InvalidAttributeError):
    """An unknown attribute tag starts with an uppercase letter.

    GFF3 reserves tags beginning with an uppercase letter for the
    official attribute set.
    """

    def __init__(self, tag: str, **kwargs) -> None:
        super().__init__(
            "Attribute tags that start with an uppercase letter must match one "
            f"of the official attributes, got {tag!r}",
            **kwargs,
        )
        self.tag = tag


class InvalidGapKindError(InvalidAttributeError):
    """A Gap operation letter is not one of M, I, D, F, R."""


class DuplicateEntryIdError(InvalidAttributeError):
    """A single entry carries more than one ID attribute."""


class PragmaError(GFFError):
    """A ``##`` or ``#!`` metadata line holds an invalid value."""


class InvalidVersionError(PragmaError):
    """The declared GFF version is not 3.x."""


class InvalidGenomeBuildError(PragmaError):
    """A genome-build pragma does not name a source and a build."""


class DuplicateSequenceError(PragmaError):
    """Two sequence-region pragmas name the same sequence."""

    def __init__(self, seq_id: str, **kwargs) -> None:
        super().__init__(f"Duplicate sequence-region for {seq_id!r}", **kwargs)
        self.seq_id = seq_id


class DuplicateMetaAttributeError(PragmaError):
    """The same metadata key was declared twice."""

    def __init__(self, key: str, **kwargs) -> None:
        super().__init__(f"Duplicate metadata key {key!r}", **kwargs)
        self.key = key


class EscapeDecodeError(GFFError):
    """A percent-escape is malformed or decodes to invalid UTF-8."""


class NumericConversionError(GFFError):
    """An integer literal is malformed or does not fit 64 bits."""


# =============================================================================
# Sequence Errors
# =============================================================================


class SequenceError(SeqFormatError):
    """A sequence, FASTA or FASTQ input could not be parsed."""


class InvalidSymbolError(SequenceError):
    """A character is not part of the residue alphabet.

    Attributes:
        symbol: The rejected character.
        alphabet: Name of the alphabet it was checked against.
        position: 0-based position in the sequence, if known.
    """

    def __init__(self, symbol: str, alphabet: str, position: int | None = None) -> None:
        where = "" if position is None else f" at position {position}"
        super().__init__(f"Invalid {alphabet} symbol {symbol!r}{where}")
        self.symbol = symbol
        self.alphabet = alphabet
        self.position = position


class FastaFormatError(SequenceError):
    """FASTA text is structurally invalid."""


class FastqFormatError(SequenceError):
    """FASTQ text is structurally invalid."""


class InvalidQualityError(SequenceError):
    """A quality character is outside the encoding's range."""
