"""Column 9 attribute parsing.

The attribute column is a ``;``-separated list of ``tag=value`` pairs.
Tags from the official GFF3 set have dedicated sub-grammars; any other
tag must start with something other than an uppercase letter (those are
reserved) and is kept verbatim in :attr:`AttributeSet.other`.

Official tags:
    ID, Name, Alias, Parent, Target, Gap, Derives_from, Note, Dbxref,
    Ontology_term, Is_circular

Percent-encoding is the only way to put ``;``, ``=``, ``,`` or ``&``
inside a value; no quoting is recognized.

Example:
    >>> from seqformats.gff.attributes import AttributeSet
    >>> attrs = AttributeSet.parse("ID=gene1;Name=foo;Is_circular=true")
    >>> attrs.id, attrs.name, attrs.is_circular
    ('gene1', 'foo', True)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, NamedTuple

import attrs

from seqformats.config import DuplicateIdPolicy
from seqformats.errors import (
    DuplicateEntryIdError,
    GFFError,
    InvalidAttributeError,
    InvalidGapKindError,
    ReservedAttributeError,
)
from seqformats.gff.escape import EscapedString, unescape
from seqformats.gff.fields import UNDEFINED, Strand, parse_u64

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

TAG_ID = "ID"

# Official tag -> AttributeSet field, in canonical output order
KNOWN_TAGS = {
    "Name": "name",
    "Alias": "alias",
    "Parent": "parent",
    "Target": "target",
    "Gap": "gap",
    "Derives_from": "derives_from",
    "Note": "note",
    "Dbxref": "dbx_ref",
    "Ontology_term": "ontology_term",
    "Is_circular": "is_circular",
}

RESERVED_TAGS = frozenset(KNOWN_TAGS) | {TAG_ID}


# =============================================================================
# Structured Values
# =============================================================================


class GapKind(Enum):
    """Alignment operation codes used by the Gap attribute."""

    MATCH = "M"
    INSERT = "I"
    DELETE = "D"
    FWD_FRAMESHIFT = "F"
    REV_FRAMESHIFT = "R"

    @classmethod
    def parse(cls, code: str) -> GapKind:
        """Look up a gap operation by its letter.

        Raises:
            InvalidGapKindError: If ``code`` is not one of M, I, D, F, R.
        """
        try:
            return cls(code)
        except ValueError:
            raise InvalidGapKindError(
                f"Invalid Gap kind, expected one of ['M', 'I', 'D', 'F', 'R'], got {code!r}",
                fragment=code,
                offset=0,
            ) from None


class GapOp(NamedTuple):
    """One (kind, length) step of a Gap alignment."""

    kind: GapKind
    length: int

    def __str__(self) -> str:
        return f"{self.kind.value}{self.length}"


@attrs.define(frozen=True)
class Target:
    """Alignment target of a feature (``Target=id start end [strand]``).

    Attributes:
        target_id: Identifier of the target sequence.
        start: Start on the target.
        end: End on the target.
        strand: Orientation on the target, if given.
    """

    target_id: EscapedString
    start: int
    end: int
    strand: Strand | None = None


# =============================================================================
# Value Sub-parsers
# =============================================================================
#
# Each sub-parser receives the raw value and its offset in the line and
# returns the typed value stored on AttributeSet.


def _parse_text(value: str, offset: int) -> EscapedString:
    return unescape(value, offset)


def _parse_parent(value: str, offset: int) -> tuple[EscapedString, ...]:
    ids = []
    pos = offset
    for part in value.split(","):
        ids.append(unescape(part, pos))
        pos += len(part) + 1
    return tuple(ids)


def _parse_target(value: str, offset: int) -> Target:
    tokens = value.split(" ")
    names = ("Target_id", "Start", "End")
    if len(tokens) < len(names):
        missing = names[len(tokens)]
        raise InvalidAttributeError(
            f"Unexpected end of Target attribute, missing {missing} (Target={value})",
            fragment=value,
            offset=offset,
        )
    if len(tokens) > 4:
        raise InvalidAttributeError(
            f"Too many components in Target attribute (Target={value})",
            fragment=value,
            offset=offset,
        )

    token_offsets = []
    pos = offset
    for token in tokens:
        token_offsets.append(pos)
        pos += len(token) + 1

    target_id = unescape(tokens[0], token_offsets[0])
    try:
        start = parse_u64(tokens[1], "Target start")
    except GFFError as e:
        raise e.shifted(token_offsets[1])
    try:
        end = parse_u64(tokens[2], "Target end")
    except GFFError as e:
        raise e.shifted(token_offsets[2])

    target_strand = None
    if len(tokens) == 4 and tokens[3] != UNDEFINED:
        try:
            target_strand = Strand.parse(tokens[3])
        except GFFError as e:
            raise e.shifted(token_offsets[3])

    return Target(target_id, start, end, target_strand)


def _parse_gap(value: str, offset: int) -> tuple[GapOp, ...]:
    ops = []
    pos = offset
    for token in value.split(" "):
        try:
            if not token:
                raise InvalidAttributeError(
                    f"Empty Gap operation in {value!r}", fragment=token, offset=0
                )
            kind = GapKind.parse(token[0])
            try:
                length = parse_u64(token[1:], "Gap length")
            except GFFError as e:
                raise e.shifted(1)
        except GFFError as e:
            raise e.shifted(pos)
        ops.append(GapOp(kind, length))
        pos += len(token) + 1
    return tuple(ops)


def _parse_bool(value: str, offset: int) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise InvalidAttributeError(
        f"Invalid Is_circular attribute, expected one of ['true', 'false'], got {value!r}",
        fragment=value,
        offset=offset,
    )


_SUBPARSERS: dict[str, Callable[[str, int], object]] = {
    "Name": _parse_text,
    "Alias": _parse_text,
    "Parent": _parse_parent,
    "Target": _parse_target,
    "Gap": _parse_gap,
    "Derives_from": _parse_text,
    "Note": _parse_text,
    "Dbxref": _parse_text,
    "Ontology_term": _parse_text,
    "Is_circular": _parse_bool,
}


# =============================================================================
# AttributeSet
# =============================================================================


@attrs.define(frozen=True)
class AttributeSet:
    """Parsed attributes of one GFF3 entry.

    All fields are optional. Known tags get dedicated fields; unknown
    lowercase tags are kept in order in ``other`` as (tag, value) pairs.

    Attributes:
        id: Unique identifier of the feature.
        name: Display name.
        alias: Secondary name.
        parent: IDs of parent features (several for discontinuous features).
        target: Alignment target.
        gap: Alignment of the feature to the target.
        derives_from: ID of the feature this one derives from.
        note: Free text note.
        dbx_ref: Database cross reference.
        ontology_term: Ontology cross reference.
        is_circular: Whether the feature is circular.
        other: Unrecognized (tag, value) pairs.
    """

    id: EscapedString | None = None
    name: EscapedString | None = None
    alias: EscapedString | None = None
    parent: tuple[EscapedString, ...] | None = None
    target: Target | None = None
    gap: tuple[GapOp, ...] | None = None
    derives_from: EscapedString | None = None
    note: EscapedString | None = None
    dbx_ref: EscapedString | None = None
    ontology_term: EscapedString | None = None
    is_circular: bool | None = None
    other: tuple[tuple[EscapedString, EscapedString], ...] | None = None

    @classmethod
    def parse(
        cls,
        text: str,
        *,
        duplicate_id: DuplicateIdPolicy = DuplicateIdPolicy.ERROR,
    ) -> AttributeSet:
        """Parse an attribute column.

        Args:
            text: Raw column 9 text. A lone ``.`` means no attributes.
            duplicate_id: What to do with a repeated ``ID`` tag.

        Returns:
            Parsed AttributeSet.

        Raises:
            InvalidAttributeError: For a pair without ``=``, an empty tag,
                an incomplete Target, a bad Is_circular value or a
                repeated official tag.
            ReservedAttributeError: For an unknown tag starting with an
                uppercase letter.
            InvalidGapKindError: For a Gap operation letter outside MIDFR.
            DuplicateEntryIdError: For a repeated ID under the ERROR policy.
            EscapeDecodeError: For malformed percent-escapes.
            NumericConversionError: For malformed Target/Gap numbers.
        """
        if text == UNDEFINED:
            return cls()

        values: dict[str, object] = {}
        other: list[tuple[EscapedString, EscapedString]] = []

        pos = 0
        for chunk in text.split(";"):
            chunk_offset = pos
            pos += len(chunk) + 1
            if not chunk:
                continue

            raw_tag, sep, value = chunk.partition("=")
            if not sep:
                raise InvalidAttributeError(
                    f"Invalid attribute, expected tag=value, got {chunk!r}",
                    fragment=chunk,
                    offset=chunk_offset,
                )
            if not raw_tag:
                raise InvalidAttributeError(
                    f"Got empty attribute tag in {chunk!r}",
                    fragment=chunk,
                    offset=chunk_offset,
                )
            # Tag rules apply to the decoded tag, so %49D is ID
            tag = unescape(raw_tag, chunk_offset)
            value_offset = chunk_offset + len(raw_tag) + 1

            if tag == TAG_ID:
                if "id" in values:
                    if duplicate_id is DuplicateIdPolicy.ERROR:
                        raise DuplicateEntryIdError(
                            "Encountered duplicate ID attribute in GFF entry",
                            fragment=chunk,
                            offset=chunk_offset,
                        )
                    logger.warning(f"Ignoring duplicate ID attribute: {chunk}")
                    continue
                values["id"] = unescape(value, value_offset)
            elif tag in KNOWN_TAGS:
                field_name = KNOWN_TAGS[tag]
                if field_name in values:
                    raise InvalidAttributeError(
                        f"Duplicate {tag} attribute; use commas for multiple values",
                        fragment=chunk,
                        offset=chunk_offset,
                    )
                values[field_name] = _SUBPARSERS[tag](value, value_offset)
            elif tag[0].isascii() and tag[0].isupper():
                raise ReservedAttributeError(tag, fragment=raw_tag, offset=chunk_offset)
            else:
                other.append((tag, unescape(value, value_offset)))

        if other:
            values["other"] = tuple(other)
        return cls(**values)

    def get_other(self, tag: str) -> list[EscapedString]:
        """Return every value stored for an unrecognized tag, in order."""
        if not self.other:
            return []
        return [value for other_tag, value in self.other if other_tag == tag]

    @property
    def is_empty(self) -> bool:
        """True if no attribute is set."""
        return self == AttributeSet()
