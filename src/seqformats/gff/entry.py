"""GFF3 entry records.

Example:
    >>> from seqformats.gff.entry import Entry
    >>> entry = Entry.parse("chr1\\tRefSeq\\tgene\\t1\\t300\\t.\\t+\\t.\\tID=g1")
    >>> entry.range
    SeqRange(start=1, end=300)
    >>> entry.attrs.id
    'g1'
"""

from __future__ import annotations

from typing import NamedTuple

import attrs

from seqformats.config import DuplicateIdPolicy
from seqformats.errors import GFFError
from seqformats.gff.attributes import AttributeSet
from seqformats.gff.escape import EscapedString, unescape
from seqformats.gff.fields import (
    COL_ATTRIBUTES,
    COL_SEQID,
    COL_SOURCE,
    COL_STRAND,
    COL_TYPE,
    Strand,
    split_entry,
)


class SeqRange(NamedTuple):
    """Half-open integer interval as written in the source.

    ``start < end`` is not enforced by the parser.

    Attributes:
        start: Start coordinate.
        end: End coordinate.
    """

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    @property
    def length(self) -> int:
        """Length of the interval, 0 if it is inverted."""
        return max(self.end - self.start, 0)

    def overlaps(self, start: int, end: int) -> bool:
        """Check if this interval overlaps ``[start, end)``."""
        return self.start < end and start < self.end


@attrs.define(frozen=True)
class Entry:
    """One annotation line of a GFF3 document.

    Attributes:
        seq_id: Landmark the coordinates refer to.
        source: Program or database that produced the feature.
        feature_type: Feature type (a Sequence Ontology term).
        range: Start and end coordinates.
        score: Feature score, None when undefined.
        strand: Feature strand, None when undefined.
        phase: CDS phase (0, 1 or 2), None when undefined.
        attrs: Column 9 attributes.
    """

    seq_id: EscapedString
    source: EscapedString
    feature_type: EscapedString
    range: SeqRange
    score: float | None = None
    strand: Strand | None = None
    phase: int | None = None
    attrs: AttributeSet = attrs.Factory(AttributeSet)

    @classmethod
    def parse(
        cls,
        line: str,
        *,
        duplicate_id: DuplicateIdPolicy = DuplicateIdPolicy.ERROR,
    ) -> Entry:
        """Parse a tab-separated entry line.

        Columns are validated first on the raw line, then the text
        columns are percent-decoded and column 9 is parsed.

        Args:
            line: Entry line without its newline.
            duplicate_id: Policy for a repeated ID attribute.

        Returns:
            Parsed Entry.

        Raises:
            GFFError: Subclass describing the first invalid column. The
                error's ``line`` is set to ``line``.
        """
        try:
            raw = split_entry(line)
            offsets = raw.offsets

            seq_id = unescape(raw.seq_id, offsets[COL_SEQID])
            source = unescape(raw.source, offsets[COL_SOURCE])
            feature_type = unescape(raw.feature_type, offsets[COL_TYPE])

            strand = None
            if raw.strand is not None:
                try:
                    strand = Strand.parse(raw.strand)
                except GFFError as e:
                    raise e.shifted(offsets[COL_STRAND])

            try:
                entry_attrs = AttributeSet.parse(raw.attributes, duplicate_id=duplicate_id)
            except GFFError as e:
                raise e.shifted(offsets[COL_ATTRIBUTES])

            return cls(
                seq_id=seq_id,
                source=source,
                feature_type=feature_type,
                range=SeqRange(raw.start, raw.end),
                score=raw.score,
                strand=strand,
                phase=raw.phase,
                attrs=entry_attrs,
            )
        except GFFError as e:
            if e.line is None:
                e.line = line
            raise

    @property
    def id(self) -> EscapedString | None:
        """Shortcut for ``attrs.id``."""
        return self.attrs.id
