"""GFF3 document assembler.

Drives line-by-line classification of a GFF3 text and folds the lines
into a :class:`GFF` document:

- ``###``: terminator (see :class:`~seqformats.config.TerminatorMode`)
- ``##FASTA``: the rest of the text is an embedded FASTA section
- ``##``: structural pragma
- ``#!``: application-specific meta attribute
- ``#``: plain comment, ignored
- anything else: a nine-column entry

Blank lines are skipped. Lines are processed in document order and the
first invalid line aborts the parse; no cross-entry validation (such as
Parent references) is done.

Example:
    >>> from seqformats.gff import GFF
    >>> gff = GFF.parse(
    ...     "##gff-version 3\\n"
    ...     "ctg1\\tsrc\\tgene\\t1\\t100\\t.\\t+\\t.\\tID=g1\\n"
    ... )
    >>> gff.metadata.version
    GFFVersion(minor=0, patch=0)
    >>> gff.find("g1").range
    SeqRange(start=1, end=100)
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO

import attrs

from seqformats.config import GFFConfig, TerminatorMode
from seqformats.errors import FastaFormatError, GFFDecodeError, GFFError, SequenceError
from seqformats.gff.entry import Entry
from seqformats.gff.metadata import Metadata
from seqformats.sequences.alphabet import alphabet_by_name
from seqformats.sequences.fasta import FastaRecord, parse_fasta

logger = logging.getLogger(__name__)

# =============================================================================
# Line Classification
# =============================================================================

TERMINATOR = "###"
FASTA_DIRECTIVE = "##FASTA"
PRAGMA_PREFIX = "##"
META_PREFIX = "#!"
COMMENT_PREFIX = "#"


class LineKind(Enum):
    """Role of one non-blank line in a GFF3 document."""

    TERMINATOR = "terminator"
    FASTA = "fasta"
    PRAGMA = "pragma"
    META = "meta"
    COMMENT = "comment"
    ENTRY = "entry"


def classify_line(line: str) -> LineKind:
    """Classify a line by its leading characters.

    Prefixes are checked in priority order: ``###``, ``##FASTA``, ``##``,
    ``#!``, ``#``.
    """
    if line.startswith(TERMINATOR):
        return LineKind.TERMINATOR
    if line.rstrip() == FASTA_DIRECTIVE:
        return LineKind.FASTA
    if line.startswith(PRAGMA_PREFIX):
        return LineKind.PRAGMA
    if line.startswith(META_PREFIX):
        return LineKind.META
    if line.startswith(COMMENT_PREFIX):
        return LineKind.COMMENT
    return LineKind.ENTRY


def _iter_lines(text: str) -> Iterator[tuple[int, str]]:
    # 1-based line numbers; CRLF endings and blank lines dropped
    for number, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        if line.strip():
            yield number, line


def _decode(src: str | bytes) -> str:
    if isinstance(src, str):
        return src.removeprefix("\ufeff")
    try:
        return src.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        line_start = src.rfind(b"\n", 0, e.start) + 1
        line_end = src.find(b"\n", e.start)
        raw_line = src[line_start : line_end if line_end != -1 else len(src)]
        raise GFFDecodeError(
            f"Input is not valid UTF-8 (byte {src[e.start]:#04x})",
            fragment=None,
            offset=None,
            line_number=src.count(b"\n", 0, e.start) + 1,
            line=raw_line.decode("utf-8", errors="replace"),
        ) from e


# =============================================================================
# GFF Document
# =============================================================================


@attrs.define(frozen=True)
class GFF:
    """A parsed GFF3 document.

    Attributes:
        metadata: Document header built from pragma lines (a read-only
            copy, see :meth:`Metadata.freeze`).
        entries: Entries in document order.
        sequences: Records of an embedded ``##FASTA`` section.
    """

    metadata: Metadata = attrs.field(factory=Metadata, converter=Metadata.freeze)
    entries: tuple[Entry, ...] = attrs.field(factory=tuple, converter=tuple)
    sequences: tuple[FastaRecord, ...] = attrs.field(factory=tuple, converter=tuple)

    @classmethod
    def parse(cls, src: str | bytes, config: GFFConfig | None = None) -> GFF:
        """Parse a complete GFF3 text.

        Args:
            src: Document text, or UTF-8 bytes.
            config: Parser configuration; strict defaults if None.

        Returns:
            Parsed document.

        Raises:
            GFFError: Subclass for the first invalid line, with
                ``line_number`` and ``line`` set.
            FastaFormatError: If an embedded ``##FASTA`` section is invalid.
        """
        config = config or GFFConfig()
        builder = _DocumentBuilder(config)
        builder.consume(list(_iter_lines(_decode(src))))
        return builder.build()

    @classmethod
    def read_from(cls, stream: BinaryIO | TextIO, config: GFFConfig | None = None) -> GFF:
        """Read a stream to the end and parse it.

        I/O errors from the stream propagate unchanged.
        """
        return cls.parse(stream.read(), config)

    def __len__(self) -> int:
        return len(self.entries)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def iter_entries(self, feature_type: str | None = None) -> Iterator[Entry]:
        """Iterate entries, optionally only those of one feature type."""
        for entry in self.entries:
            if feature_type is None or entry.feature_type == feature_type:
                yield entry

    def entries_in_region(self, seq_id: str, start: int, end: int) -> list[Entry]:
        """Entries on ``seq_id`` whose range overlaps ``[start, end)``."""
        return [
            entry
            for entry in self.entries
            if entry.seq_id == seq_id and entry.range.overlaps(start, end)
        ]

    def feature_type_counts(self) -> dict[str, int]:
        """Number of entries per feature type, most common first."""
        return dict(Counter(entry.feature_type for entry in self.entries).most_common())

    def find(self, entry_id: str) -> Entry | None:
        """First entry whose ID attribute equals ``entry_id``."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None


# =============================================================================
# Assembler
# =============================================================================


class _DocumentBuilder:
    """Accumulates metadata and entries for one document."""

    def __init__(self, config: GFFConfig) -> None:
        self.config = config
        self.metadata = Metadata()
        self.entries: list[Entry] = []
        self.sequences: list[FastaRecord] = []
        self.comments = 0

    def consume(self, lines: list[tuple[int, str]], split_documents: bool = False) -> int:
        """Feed numbered lines until the input or the document ends.

        Args:
            lines: (line number, line) pairs without blank lines.
            split_documents: End the document at ``###`` so the caller can
                start a new one, instead of applying the configured
                terminator mode.

        Returns:
            Number of lines consumed, including a terminating ``###``.
        """
        for index, (number, line) in enumerate(lines):
            kind = classify_line(line)

            if kind is LineKind.TERMINATOR:
                if split_documents:
                    logger.debug(f"Terminator at line {number}, document ends")
                    return index + 1
                if self.config.terminator is TerminatorMode.STOP:
                    logger.debug(f"Terminator at line {number}, ignoring remaining lines")
                    return len(lines)
                continue

            if kind is LineKind.FASTA:
                self._read_fasta(lines[index + 1 :], number)
                return len(lines)

            try:
                self._apply(kind, line)
            except GFFError as e:
                raise e.locate(number, line)

        return len(lines)

    def _apply(self, kind: LineKind, line: str) -> None:
        if kind is LineKind.PRAGMA:
            self.metadata.apply_pragma(line[len(PRAGMA_PREFIX) :], len(PRAGMA_PREFIX))
        elif kind is LineKind.META:
            self.metadata.apply_domain_meta(line[len(META_PREFIX) :], len(META_PREFIX))
        elif kind is LineKind.COMMENT:
            self.comments += 1
            logger.debug(f"Skipping comment: {line}")
        else:
            self.entries.append(Entry.parse(line, duplicate_id=self.config.duplicate_id))

    def _read_fasta(self, lines: list[tuple[int, str]], directive_line: int) -> None:
        logger.debug(f"Embedded FASTA section at line {directive_line}")
        alphabet = alphabet_by_name(self.config.fasta_alphabet)
        try:
            self.sequences = parse_fasta("\n".join(line for _, line in lines), alphabet)
        except SequenceError as e:
            raise FastaFormatError(
                f"##FASTA section starting at line {directive_line}: {e}"
            ) from e

    @property
    def is_empty(self) -> bool:
        return not self.entries and not self.sequences and self.metadata == Metadata()

    def build(self) -> GFF:
        logger.info(
            f"Parsed GFF3 document: {len(self.entries)} entries, "
            f"{len(self.metadata.sequence_regions)} sequence regions"
            + (f", {len(self.sequences)} sequences" if self.sequences else "")
        )
        return GFF(self.metadata, self.entries, self.sequences)


# =============================================================================
# Convenience Functions
# =============================================================================


def parse_documents(src: str | bytes, config: GFFConfig | None = None) -> list[GFF]:
    """Split a text at every ``###`` and parse each block as its own document.

    Each document starts with fresh metadata, so a block may repeat the
    pragmas of the previous one. A block with no content (for example
    after a trailing ``###``) is dropped. An embedded ``##FASTA`` section
    belongs to the document it appears in and ends the input.

    Args:
        src: Text or UTF-8 bytes holding one or more documents.
        config: Parser configuration; its terminator mode is ignored.

    Returns:
        Documents in input order; a single empty document if the input
        has no content at all.
    """
    config = config or GFFConfig()
    lines = list(_iter_lines(_decode(src)))

    documents = []
    pos = 0
    while True:
        builder = _DocumentBuilder(config)
        pos += builder.consume(lines[pos:], split_documents=True)
        if not builder.is_empty:
            documents.append(builder.build())
        if pos >= len(lines):
            break

    if not documents:
        documents.append(GFF())
    return documents


def read_gff(path: Path | str, config: GFFConfig | None = None) -> GFF:
    """Read and parse a GFF3 file.

    Args:
        path: Path to the GFF3 file.
        config: Parser configuration.

    Returns:
        Parsed document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        GFFError: If the content is invalid.
    """
    path = Path(path)
    logger.info(f"Reading GFF3 file: {path}")
    with open(path, "rb") as f:
        return GFF.read_from(f, config)
