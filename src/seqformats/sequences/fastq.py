"""FASTQ records and parser.

Each record spans exactly four lines::

    @<description>
    <sequence>
    +[<description>]
    <qualities>

A description after ``+`` is optional but must repeat the ``@`` one when
present. Blank lines are skipped, so empty reads are not representable.

Example:
    >>> from seqformats.sequences.fastq import parse_fastq
    >>> records = parse_fastq("@read1\\nACGT\\n+\\nII5!\\n")
    >>> records[0].quality.scores.tolist()
    [40, 40, 20, 0]
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import attrs

from seqformats.errors import FastqFormatError, SequenceError
from seqformats.sequences.alphabet import DNA
from seqformats.sequences.quality import Quality, QualityEncoding
from seqformats.sequences.sequence import Sequence
from seqformats.utils.parallel import map_ordered

logger = logging.getLogger(__name__)

LINES_PER_RECORD = 4


@attrs.define(frozen=True, eq=False)
class FastqRecord:
    """One FASTQ read.

    Attributes:
        description: Text after ``@``; None when empty.
        sequence: Base calls.
        quality: Per-base quality scores, same length as ``sequence``.
    """

    description: str | None
    sequence: Sequence
    quality: Quality

    def __len__(self) -> int:
        return len(self.sequence)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FastqRecord):
            return NotImplemented
        return (
            self.description == other.description
            and self.sequence == other.sequence
            and self.quality == other.quality
        )

    def format(self) -> str:
        """Serialize as four FASTQ lines."""
        return f"@{self.description or ''}\n{self.sequence}\n+\n{self.quality}\n"


def _description(line: str, marker: str, line_number: int) -> str | None:
    if not line.startswith(marker):
        raise FastqFormatError(
            f"line {line_number}: expected a line starting with {marker!r}, got {line!r}"
        )
    return line[1:] or None


def _parse_record(
    chunk: list[tuple[int, str]],
    alphabet: type[Enum],
    encoding: QualityEncoding,
) -> FastqRecord:
    (head_no, head), (seq_no, seq_line), (plus_no, plus), (qual_no, qual_line) = chunk

    description = _description(head, "@", head_no)
    repeated = _description(plus, "+", plus_no)
    if repeated is not None and repeated != description:
        raise FastqFormatError(
            f"line {plus_no}: description {repeated!r} does not match {description!r}"
        )

    try:
        sequence = Sequence.parse(seq_line, alphabet)
    except SequenceError as e:
        raise FastqFormatError(f"line {seq_no}: {e}") from e
    try:
        quality = Quality.parse(qual_line, encoding)
    except SequenceError as e:
        raise FastqFormatError(f"line {qual_no}: {e}") from e

    if len(sequence) != len(quality):
        raise FastqFormatError(
            f"line {qual_no}: {len(quality)} quality scores for "
            f"{len(sequence)} bases in read {description!r}"
        )
    return FastqRecord(description, sequence, quality)


def parse_fastq(
    text: str,
    alphabet: type[Enum] = DNA,
    encoding: QualityEncoding = QualityEncoding.PHRED,
    workers: int = 1,
) -> list[FastqRecord]:
    """Parse every record of a FASTQ text.

    Args:
        text: FASTQ text.
        alphabet: Residue alphabet of the reads.
        encoding: Quality encoding.
        workers: Threads used to parse records.

    Returns:
        Records in input order.

    Raises:
        FastqFormatError: For a truncated or malformed record, mismatched
            descriptions, mismatched lengths, or invalid base or quality
            characters (chained to the underlying error).
    """
    lines = [
        (number, line.rstrip("\r"))
        for number, line in enumerate(text.split("\n"), start=1)
        if line.strip()
    ]
    if len(lines) % LINES_PER_RECORD:
        first_line = lines[len(lines) - len(lines) % LINES_PER_RECORD][0]
        raise FastqFormatError(
            f"line {first_line}: unexpected end of input in FASTQ record"
        )

    chunks = [
        lines[i : i + LINES_PER_RECORD] for i in range(0, len(lines), LINES_PER_RECORD)
    ]
    records = map_ordered(
        lambda chunk: _parse_record(chunk, alphabet, encoding), chunks, n_workers=workers
    )
    logger.debug(f"Parsed {len(records)} FASTQ records ({encoding.label})")
    return records


def read_fastq(
    path: Path | str,
    alphabet: type[Enum] = DNA,
    encoding: QualityEncoding = QualityEncoding.PHRED,
    workers: int = 1,
) -> list[FastqRecord]:
    """Read and parse a FASTQ file."""
    path = Path(path)
    logger.info(f"Reading FASTQ file: {path}")
    with open(path, encoding="utf-8") as f:
        return parse_fastq(f.read(), alphabet, encoding, workers)
