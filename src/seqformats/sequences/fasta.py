"""FASTA records and parser.

A FASTA text is a series of records, each starting with a description
line beginning with ``>`` (or the legacy ``;``) followed by any number
of sequence lines. Records are split from the text first and then
parsed independently, optionally across a thread pool; the result keeps
the input order.

Example:
    >>> from seqformats.sequences.fasta import parse_fasta
    >>> records = parse_fasta(">chr1 test\\nACGT\\nNNAC\\n>chr2\\nGG\\n")
    >>> [(r.description, len(r.sequence)) for r in records]
    [('chr1 test', 8), ('chr2', 2)]
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, NamedTuple

import attrs

from seqformats.errors import FastaFormatError, InvalidSymbolError
from seqformats.sequences.alphabet import DNA
from seqformats.sequences.sequence import Sequence
from seqformats.utils.parallel import map_ordered

logger = logging.getLogger(__name__)

HEADER_CHARS = (">", ";")

DEFAULT_LINE_WIDTH = 60


# =============================================================================
# Records
# =============================================================================


@attrs.define(frozen=True)
class FastaRecord:
    """One FASTA record.

    Attributes:
        description: Header text after ``>``; None for an empty header.
        sequence: Parsed sequence.
    """

    description: str | None
    sequence: Sequence

    @property
    def name(self) -> str | None:
        """First word of the description (the sequence identifier)."""
        if not self.description:
            return None
        return self.description.split(None, 1)[0]

    def __len__(self) -> int:
        return len(self.sequence)

    def format(self, width: int = DEFAULT_LINE_WIDTH) -> str:
        """Serialize as FASTA text, wrapping the sequence at ``width``."""
        lines = [f">{self.description or ''}"]
        if len(self.sequence):
            lines.append(self.sequence.wrapped(width))
        return "\n".join(lines) + "\n"


class _RawRecord(NamedTuple):
    description: str | None
    lines: list[str]
    line_number: int


# =============================================================================
# Parsing
# =============================================================================


def _split_records(text: str) -> list[_RawRecord]:
    records: list[_RawRecord] = []
    for number, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        if line[0] in HEADER_CHARS:
            description = line[1:].strip() or None
            records.append(_RawRecord(description, [], number))
        elif not records:
            raise FastaFormatError(
                f"line {number}: sequence data before the first '>' header"
            )
        else:
            records[-1].lines.append(line.strip())
    return records


def _parse_record(raw: _RawRecord, alphabet: type[Enum]) -> FastaRecord:
    try:
        sequence = Sequence.parse("\n".join(raw.lines), alphabet)
    except InvalidSymbolError as e:
        raise FastaFormatError(
            f"line {raw.line_number}: record {raw.description!r}: {e}"
        ) from e
    return FastaRecord(raw.description, sequence)


def parse_fasta(
    text: str,
    alphabet: type[Enum] = DNA,
    workers: int = 1,
) -> list[FastaRecord]:
    """Parse every record of a FASTA text.

    Args:
        text: FASTA text.
        alphabet: Residue alphabet of the sequences.
        workers: Threads used to parse records.

    Returns:
        Records in input order.

    Raises:
        FastaFormatError: For sequence text before the first header or a
            residue outside ``alphabet`` (chained to the
            :class:`~seqformats.errors.InvalidSymbolError`).
    """
    raw_records = _split_records(text)
    records = map_ordered(
        lambda raw: _parse_record(raw, alphabet), raw_records, n_workers=workers
    )
    logger.debug(f"Parsed {len(records)} FASTA records ({alphabet.__name__})")
    return records


def read_fasta(
    path: Path | str,
    alphabet: type[Enum] = DNA,
    workers: int = 1,
) -> list[FastaRecord]:
    """Read and parse a FASTA file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        FastaFormatError: If the content is invalid.
    """
    path = Path(path)
    logger.info(f"Reading FASTA file: {path}")
    with open(path, encoding="utf-8") as f:
        return parse_fasta(f.read(), alphabet, workers)


def write_fasta(
    records: Iterable[FastaRecord],
    path: Path | str,
    width: int = DEFAULT_LINE_WIDTH,
) -> int:
    """Write records to a FASTA file.

    Returns:
        Number of records written.
    """
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(record.format(width))
            count += 1
    logger.info(f"Wrote {count} FASTA records to {path}")
    return count
