"""GFF3 serialization.

Turns parsed documents back into GFF3 text. Every value is
percent-encoded where the grammar requires it, so that re-parsing the
output gives back an equal value::

    Entry.parse(format_entry(entry)) == entry

(scores of NaN excepted, since NaN never compares equal).

Example:
    >>> from seqformats.gff import GFF
    >>> from seqformats.gff.writer import dumps
    >>> gff = GFF.parse("ctg1\\tsrc\\tgene\\t1\\t100\\t.\\t+\\t.\\tID=g1;Note=a%3Bb")
    >>> dumps(gff).splitlines()
    ['##gff-version 3.0.0', 'ctg1\\tsrc\\tgene\\t1\\t100\\t.\\t+\\t.\\tID=g1;Note=a%3Bb']
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

from seqformats.gff.attributes import KNOWN_TAGS, TAG_ID, AttributeSet, Target
from seqformats.gff.entry import Entry
from seqformats.gff.escape import escape
from seqformats.gff.fields import SEQ_ID_CHARS, UNDEFINED
from seqformats.gff.metadata import (
    PRAGMA_GENOME_BUILD,
    PRAGMA_SEQUENCE_REGION,
    PRAGMA_VERSION,
    URI_PRAGMAS,
    GFFVersion,
    Metadata,
)

if TYPE_CHECKING:
    from seqformats.gff.document import GFF

logger = logging.getLogger(__name__)

DEFAULT_VERSION = GFFVersion()


# =============================================================================
# Value Encoding
# =============================================================================


def _encode_seq_id(text: str) -> str:
    parts = []
    for i, char in enumerate(text):
        # '%' must be encoded to survive decoding; a leading '>' is rejected
        if char not in SEQ_ID_CHARS or char == "%" or (i == 0 and char == ">"):
            parts.append("".join(f"%{b:02X}" for b in char.encode("utf-8")))
        else:
            parts.append(char)
    return "".join(parts)


def _encode_token(text: str, attribute: bool = False) -> str:
    # Space-separated sub-values (Target, pragmas) also need ' ' encoded
    return escape(text, attribute=attribute).replace(" ", "%20")


def _encode_meta_value(text: str) -> str:
    # The reader strips #! values, so edge spaces stay encoded
    encoded = escape(text)
    core = encoded.strip(" ")
    if not core:
        return encoded.replace(" ", "%20")
    lead = len(encoded) - len(encoded.lstrip(" "))
    trail = len(encoded) - len(encoded.rstrip(" "))
    return "%20" * lead + core + "%20" * trail


def _format_score(score: float | None) -> str:
    if score is None:
        return UNDEFINED
    return repr(score)


def _format_target(target: Target) -> str:
    tokens = [
        _encode_token(target.target_id, attribute=True),
        str(target.start),
        str(target.end),
    ]
    if target.strand is not None:
        tokens.append(str(target.strand))
    return " ".join(tokens)


def _format_value(tag: str, value: Any) -> str:
    if tag == "Parent":
        return ",".join(escape(parent, attribute=True) for parent in value)
    if tag == "Target":
        return _format_target(value)
    if tag == "Gap":
        return " ".join(str(op) for op in value)
    if tag == "Is_circular":
        return "true" if value else "false"
    return escape(value, attribute=True)


# =============================================================================
# Formatting
# =============================================================================


def format_attributes(attrs: AttributeSet) -> str:
    """Format an attribute set as a column 9 string.

    Tags are written in the order ID, the official tags, then unknown
    tags in their original order. An empty set is written as ``.``.
    """
    parts = []
    if attrs.id is not None:
        parts.append(f"{TAG_ID}={escape(attrs.id, attribute=True)}")
    for tag, field_name in KNOWN_TAGS.items():
        value = getattr(attrs, field_name)
        if value is not None:
            parts.append(f"{tag}={_format_value(tag, value)}")
    for tag, value in attrs.other or ():
        parts.append(f"{escape(tag, attribute=True)}={escape(value, attribute=True)}")

    if not parts:
        return UNDEFINED
    return ";".join(parts)


def format_entry(entry: Entry) -> str:
    """Format an entry as one tab-separated line (without newline)."""
    columns = [
        _encode_seq_id(entry.seq_id),
        escape(entry.source),
        escape(entry.feature_type),
        str(entry.range.start),
        str(entry.range.end),
        _format_score(entry.score),
        UNDEFINED if entry.strand is None else str(entry.strand),
        UNDEFINED if entry.phase is None else str(entry.phase),
        format_attributes(entry.attrs),
    ]
    return "\t".join(columns)


def format_metadata(metadata: Metadata) -> list[str]:
    """Format document metadata as pragma and meta lines.

    The version line always comes first; a document without a declared
    version is written as GFF 3.0.0.
    """
    version = metadata.version or DEFAULT_VERSION
    lines = [f"##{PRAGMA_VERSION} {version}"]

    for region_id, region in metadata.sequence_regions.items():
        lines.append(
            f"##{PRAGMA_SEQUENCE_REGION} {_encode_seq_id(region_id)} "
            f"{region.start} {region.end}"
        )
    for keyword, field_name in URI_PRAGMAS.items():
        value = getattr(metadata, field_name)
        if value is not None:
            lines.append(f"##{keyword} {_encode_token(value)}")
    if metadata.genome_build is not None:
        build_source, build_name = metadata.genome_build
        lines.append(
            f"##{PRAGMA_GENOME_BUILD} {_encode_token(build_source)} {_encode_token(build_name)}"
        )
    for key, value in metadata.other_meta.items():
        lines.append(f"#!{_encode_token(key)} {_encode_meta_value(value)}")
    return lines


def dumps(gff: GFF) -> str:
    """Serialize a whole document, including an embedded FASTA section."""
    lines = format_metadata(gff.metadata)
    lines.extend(format_entry(entry) for entry in gff.entries)
    text = "\n".join(lines) + "\n"
    if gff.sequences:
        text += "##FASTA\n" + "".join(record.format() for record in gff.sequences)
    return text


# =============================================================================
# Writer
# =============================================================================


class GFF3Writer:
    """Write GFF3 documents or individual entries to a file.

    Example:
        >>> with GFF3Writer("output.gff3") as writer:
        ...     writer.write_header(gff.metadata)
        ...     writer.write_entries(gff.entries)
    """

    def __init__(self, output_path: Path | str) -> None:
        """Initialize the writer.

        Args:
            output_path: Output file path.
        """
        self.path = Path(output_path)
        self._file = open(self.path, "w", encoding="utf-8")
        self._header_written = False
        self.entry_count = 0

    def __enter__(self) -> GFF3Writer:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the output file."""
        if self._file:
            self._file.close()
            self._file = None

    def write_header(self, metadata: Metadata | None = None) -> None:
        """Write the version pragma and any other metadata."""
        for line in format_metadata(metadata or Metadata()):
            self._file.write(line + "\n")
        self._header_written = True

    def write_entry(self, entry: Entry) -> None:
        """Write one entry, emitting a default header first if needed."""
        if not self._header_written:
            self.write_header()
        self._file.write(format_entry(entry) + "\n")
        self.entry_count += 1

    def write_entries(self, entries: Iterable[Entry]) -> None:
        for entry in entries:
            self.write_entry(entry)

    def write_document(self, gff: GFF) -> None:
        """Write a complete document, embedded sequences included."""
        self.write_header(gff.metadata)
        self.write_entries(gff.entries)
        if gff.sequences:
            self._file.write("##FASTA\n")
            for record in gff.sequences:
                self._file.write(record.format())


def write_gff(gff: GFF, path: Path | str) -> None:
    """Write a document to a GFF3 file.

    Args:
        gff: Parsed document.
        path: Output file path.
    """
    with GFF3Writer(path) as writer:
        writer.write_document(gff)
    logger.info(f"Wrote {writer.entry_count} entries to {path}")
