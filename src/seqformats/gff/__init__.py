"""GFF3 parsing and serialization.

- Escaped-string decoding of percent-encoded text
- Column and attribute grammars
- Pragma / metadata model
- Document assembler and writer

Example:
    >>> from seqformats.gff import read_gff
    >>> gff = read_gff("annotations.gff3")
    >>> gff.feature_type_counts()
    {'exon': 12, 'gene': 3, 'mRNA': 3}
"""

from seqformats.gff.attributes import AttributeSet, GapKind, GapOp, Target
from seqformats.gff.document import GFF, LineKind, classify_line, parse_documents, read_gff
from seqformats.gff.entry import Entry, SeqRange
from seqformats.gff.escape import EscapedString, escape, unescape
from seqformats.gff.fields import Strand
from seqformats.gff.metadata import GFFVersion, Metadata
from seqformats.gff.writer import (
    GFF3Writer,
    dumps,
    format_attributes,
    format_entry,
    format_metadata,
    write_gff,
)

__all__ = [
    "GFF",
    "AttributeSet",
    "Entry",
    "EscapedString",
    "GFF3Writer",
    "GFFVersion",
    "GapKind",
    "GapOp",
    "LineKind",
    "Metadata",
    "SeqRange",
    "Strand",
    "Target",
    "classify_line",
    "dumps",
    "escape",
    "format_attributes",
    "format_entry",
    "format_metadata",
    "parse_documents",
    "read_gff",
    "unescape",
    "write_gff",
]
