"""GFF3 document metadata.

Metadata comes from two kinds of ``#``-prefixed lines:

- ``##`` pragmas defined by the GFF3 specification (``gff-version``,
  ``sequence-region``, ontology URIs, ``species``, ``genome-build``)
- ``#!`` application-specific meta attributes, stored as free-form
  key/value pairs, except ``#!spec-version`` which sets the version

Pragmas are applied one line at a time in document order. Keys that can
only hold one value are rejected when declared twice.

Example:
    >>> from seqformats.gff.metadata import Metadata
    >>> meta = Metadata()
    >>> meta.apply_pragma("gff-version 3.1.26")
    >>> meta.apply_pragma("sequence-region ctg123 1 1497228")
    >>> meta.version
    GFFVersion(minor=1, patch=26)
    >>> meta.sequence_regions["ctg123"]
    SeqRange(start=1, end=1497228)
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import NamedTuple

import attrs

from seqformats.errors import (
    DuplicateMetaAttributeError,
    DuplicateSequenceError,
    GFFError,
    InvalidAttributeError,
    InvalidGenomeBuildError,
    InvalidVersionError,
    MalformedLineError,
    PragmaError,
)
from seqformats.gff.entry import SeqRange
from seqformats.gff.escape import EscapedString, unescape
from seqformats.gff.fields import parse_u64, seq_id

# =============================================================================
# Constants
# =============================================================================

PRAGMA_VERSION = "gff-version"
PRAGMA_SEQUENCE_REGION = "sequence-region"
PRAGMA_FEATURE_ONTOLOGY = "feature-ontology"
PRAGMA_ATTRIBUTE_ONTOLOGY = "attribute-ontology"
PRAGMA_SOURCE_ONTOLOGY = "source-ontology"
PRAGMA_SPECIES = "species"
PRAGMA_GENOME_BUILD = "genome-build"

META_SPEC_VERSION = "spec-version"

# URI pragmas -> Metadata field
URI_PRAGMAS = {
    PRAGMA_FEATURE_ONTOLOGY: "feature_ontology_uri",
    PRAGMA_ATTRIBUTE_ONTOLOGY: "attribute_ontology_uri",
    PRAGMA_SOURCE_ONTOLOGY: "source_ontology_uri",
    PRAGMA_SPECIES: "species_uri",
}

_VERSION_PATTERN = re.compile(r"3(?:\.([0-9]+)(?:\.([0-9]+))?)?")
_TOKEN_PATTERN = re.compile(r"\S+")

MAX_VERSION_PART = 255


class GFFVersion(NamedTuple):
    """Minor and patch level of a GFF 3.x version.

    The major version is always 3. Compares equal to a plain
    ``(minor, patch)`` tuple.
    """

    minor: int = 0
    patch: int = 0

    @property
    def major(self) -> int:
        return 3

    def __str__(self) -> str:
        return f"3.{self.minor}.{self.patch}"


def parse_version(text: str) -> GFFVersion:
    """Parse ``3``, ``3.<minor>`` or ``3.<minor>.<patch>``.

    Raises:
        InvalidVersionError: If the version is not 3.x or a part does
            not fit in 0-255.
    """
    match = _VERSION_PATTERN.fullmatch(text)
    if not match:
        raise InvalidVersionError(
            f"Unsupported GFF version {text!r}, expected 3 or 3.<minor>.<patch>",
            fragment=text,
            offset=0,
        )
    parts = [(part or "0").lstrip("0") or "0" for part in match.groups()]
    if any(len(part) > 3 or int(part) > MAX_VERSION_PART for part in parts):
        raise InvalidVersionError(
            f"Version component out of range in {text!r}", fragment=text, offset=0
        )
    return GFFVersion(*map(int, parts))


def _tokens(text: str, offset: int) -> list[tuple[str, int]]:
    return [(m.group(), offset + m.start()) for m in _TOKEN_PATTERN.finditer(text)]


# =============================================================================
# Metadata
# =============================================================================


def _reject_when_frozen(instance: Metadata, attribute: attrs.Attribute, value: object) -> object:
    instance._check_writable()
    return value


@attrs.define(on_setattr=_reject_when_frozen)
class Metadata:
    """Document-level metadata accumulated from pragma lines.

    A parser fills one instance line by line; documents hold a read-only
    copy made by :meth:`freeze`.

    Attributes:
        version: GFF version as (minor, patch); major is always 3.
        sequence_regions: Sequence id -> declared range.
        feature_ontology_uri: URI of the feature ontology.
        attribute_ontology_uri: URI of the attribute ontology.
        source_ontology_uri: URI of the source ontology.
        species_uri: URI of the species (NCBI taxonomy).
        genome_build: (source, build name) pair.
        other_meta: Application-specific ``#!`` key/value pairs.
    """

    version: GFFVersion | None = None
    sequence_regions: dict[EscapedString, SeqRange] = attrs.Factory(dict)
    feature_ontology_uri: EscapedString | None = None
    attribute_ontology_uri: EscapedString | None = None
    source_ontology_uri: EscapedString | None = None
    species_uri: EscapedString | None = None
    genome_build: tuple[EscapedString, EscapedString] | None = None
    other_meta: dict[EscapedString, EscapedString] = attrs.Factory(dict)
    _frozen: bool = attrs.field(default=False, init=False, eq=False, repr=False)

    def freeze(self) -> Metadata:
        """Return a read-only copy whose maps cannot be changed either."""
        if self._frozen:
            return self
        frozen = attrs.evolve(
            self,
            sequence_regions=MappingProxyType(dict(self.sequence_regions)),
            other_meta=MappingProxyType(dict(self.other_meta)),
        )
        object.__setattr__(frozen, "_frozen", True)
        return frozen

    def _check_writable(self) -> None:
        if self._frozen:
            raise attrs.exceptions.FrozenInstanceError()

    def apply_pragma(self, body: str, offset: int = 0) -> None:
        """Apply one ``##`` pragma.

        Args:
            body: Line text after the leading ``##``.
            offset: Position of ``body`` in its line.

        Raises:
            MalformedLineError: If the pragma has no keyword.
            InvalidAttributeError: If the keyword is unknown.
            PragmaError: Subclass for invalid or duplicate values.
            FrozenInstanceError: If this is the copy held by a document.
        """
        self._check_writable()
        tokens = _tokens(body, offset)
        if not tokens:
            raise MalformedLineError("Pragma line without a keyword", fragment="", offset=offset)

        (keyword, keyword_offset), values = tokens[0], tokens[1:]

        if keyword == PRAGMA_VERSION:
            self._set_version(keyword, values, keyword_offset)
        elif keyword == PRAGMA_SEQUENCE_REGION:
            self._add_sequence_region(values, keyword_offset)
        elif keyword in URI_PRAGMAS:
            self._set_uri(keyword, values, keyword_offset)
        elif keyword == PRAGMA_GENOME_BUILD:
            self._set_genome_build(values, keyword_offset)
        else:
            raise InvalidAttributeError(
                f"Unknown pragma {keyword!r}", fragment=keyword, offset=keyword_offset
            )

    def apply_domain_meta(self, body: str, offset: int = 0) -> None:
        """Apply one ``#!`` meta attribute.

        Args:
            body: Line text after the leading ``#!``.
            offset: Position of ``body`` in its line.

        Raises:
            MalformedLineError: If the key has no value.
            DuplicateMetaAttributeError: If the key was already declared.
            FrozenInstanceError: If this is the copy held by a document.
        """
        self._check_writable()
        parts = body.split(None, 1)
        if len(parts) < 2:
            raise MalformedLineError(
                f"Meta attribute did not contain data: {body!r}",
                fragment=body,
                offset=offset,
            )
        key, value = parts[0], parts[1].rstrip()
        key_pos = body.index(key)
        key_offset = offset + key_pos
        value_offset = offset + body.index(value, key_pos + len(key))

        if key == META_SPEC_VERSION:
            self._set_version(key, _tokens(value, value_offset), key_offset)
            return

        decoded_key = unescape(key, key_offset)
        if decoded_key in self.other_meta:
            raise DuplicateMetaAttributeError(key, fragment=key, offset=key_offset)
        self.other_meta[decoded_key] = unescape(value, value_offset)

    # -------------------------------------------------------------------------
    # Individual pragmas
    # -------------------------------------------------------------------------

    def _set_version(self, key: str, values: list[tuple[str, int]], offset: int) -> None:
        if len(values) != 1:
            raise InvalidVersionError(
                f"{key} expects exactly one value", fragment=key, offset=offset
            )
        if self.version is not None:
            raise DuplicateMetaAttributeError(key, fragment=key, offset=offset)
        text, value_offset = values[0]
        try:
            self.version = parse_version(text)
        except GFFError as e:
            raise e.shifted(value_offset)

    def _add_sequence_region(self, values: list[tuple[str, int]], offset: int) -> None:
        if len(values) != 3:
            raise PragmaError(
                "sequence-region expects '<seqid> <start> <end>'",
                fragment=PRAGMA_SEQUENCE_REGION,
                offset=offset,
            )
        (raw_id, id_offset), (raw_start, start_offset), (raw_end, end_offset) = values

        try:
            seq_id(raw_id)
        except GFFError as e:
            raise e.shifted(id_offset)
        region_id = unescape(raw_id, id_offset)

        bounds = []
        for text, token_offset in ((raw_start, start_offset), (raw_end, end_offset)):
            try:
                bounds.append(parse_u64(text, "sequence-region bound"))
            except GFFError as e:
                raise e.shifted(token_offset)

        if region_id in self.sequence_regions:
            raise DuplicateSequenceError(region_id, fragment=raw_id, offset=id_offset)
        self.sequence_regions[region_id] = SeqRange(*bounds)

    def _set_uri(self, keyword: str, values: list[tuple[str, int]], offset: int) -> None:
        field_name = URI_PRAGMAS[keyword]
        if len(values) != 1:
            raise PragmaError(
                f"{keyword} expects exactly one URI", fragment=keyword, offset=offset
            )
        if getattr(self, field_name) is not None:
            raise DuplicateMetaAttributeError(keyword, fragment=keyword, offset=offset)
        text, value_offset = values[0]
        setattr(self, field_name, unescape(text, value_offset))

    def _set_genome_build(self, values: list[tuple[str, int]], offset: int) -> None:
        if len(values) != 2:
            raise InvalidGenomeBuildError(
                f"genome-build expects '<source> <build-name>', got {len(values)} value(s)",
                fragment=PRAGMA_GENOME_BUILD,
                offset=offset,
            )
        if self.genome_build is not None:
            raise DuplicateMetaAttributeError(
                PRAGMA_GENOME_BUILD, fragment=PRAGMA_GENOME_BUILD, offset=offset
            )
        (build_source, source_offset), (build_name, name_offset) = values
        self.genome_build = (
            unescape(build_source, source_offset),
            unescape(build_name, name_offset),
        )
