"""Configuration management for seqformats.

Parser behaviour that GFF3 profiles disagree on is exposed as settings
instead of being hard-coded. Configuration can come from:
- Default values (strict)
- A TOML file with ``[gff]`` and ``[sequences]`` tables

Example:
    >>> from seqformats.config import Config
    >>> config = Config.load("seqformats.toml")
    >>> config.gff.terminator
    <TerminatorMode.STOP: 'stop'>

Example TOML::

    [gff]
    duplicate_id = "first"
    terminator = "continue"
    fasta_alphabet = "dna"

    [sequences]
    workers = 4
    quality_encoding = "phred"
"""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

import attrs

# =============================================================================
# Enums
# =============================================================================


class DuplicateIdPolicy(Enum):
    """What to do with a second ``ID=`` attribute inside one entry."""

    ERROR = "error"  # raise DuplicateEntryIdError
    FIRST = "first"  # keep the first ID, ignore the rest


class TerminatorMode(Enum):
    """Meaning of the ``###`` directive."""

    STOP = "stop"  # end of document, later lines are ignored
    CONTINUE = "continue"  # forward references resolved, keep parsing


# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_DUPLICATE_ID = DuplicateIdPolicy.ERROR
DEFAULT_TERMINATOR = TerminatorMode.STOP
DEFAULT_FASTA_ALPHABET = "dna"

DEFAULT_WORKERS = 1
DEFAULT_QUALITY_ENCODING = "phred"

ALPHABET_NAMES = ("dna", "rna", "protein")
QUALITY_ENCODINGS = ("phred", "solexa")


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define(frozen=True)
class GFFConfig:
    """Configuration for the GFF3 document parser.

    Attributes:
        duplicate_id: Policy for repeated ID attributes in one entry.
        terminator: Meaning of ``###`` lines.
        fasta_alphabet: Alphabet of an embedded ``##FASTA`` section.
    """

    duplicate_id: DuplicateIdPolicy = attrs.field(
        default=DEFAULT_DUPLICATE_ID, converter=DuplicateIdPolicy
    )
    terminator: TerminatorMode = attrs.field(
        default=DEFAULT_TERMINATOR, converter=TerminatorMode
    )
    fasta_alphabet: str = attrs.field(
        default=DEFAULT_FASTA_ALPHABET, validator=attrs.validators.in_(ALPHABET_NAMES)
    )


@attrs.define(frozen=True)
class SequenceConfig:
    """Configuration for FASTA/FASTQ parsing.

    Attributes:
        workers: Threads used to parse independent records.
        quality_encoding: FASTQ quality encoding (phred or solexa).
    """

    workers: int = attrs.field(
        default=DEFAULT_WORKERS,
        validator=[attrs.validators.instance_of(int), attrs.validators.ge(1)],
    )
    quality_encoding: str = attrs.field(
        default=DEFAULT_QUALITY_ENCODING,
        validator=attrs.validators.in_(QUALITY_ENCODINGS),
    )


@attrs.define(frozen=True)
class Config:
    """Main configuration container for seqformats.

    Attributes:
        gff: GFF3 parser configuration.
        sequences: FASTA/FASTQ parser configuration.
    """

    gff: GFFConfig = attrs.Factory(GFFConfig)
    sequences: SequenceConfig = attrs.Factory(SequenceConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration from a TOML file.

        Args:
            path: Path to configuration file. If None, returns the
                default configuration.

        Returns:
            Loaded configuration object.

        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            ValueError: If the file has unknown tables/keys or invalid values.
        """
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from nested dictionaries.

        Raises:
            ValueError: For unknown sections or keys, or invalid values.
        """
        sections = {"gff": GFFConfig, "sequences": SequenceConfig}
        unknown = set(data) - set(sections)
        if unknown:
            raise ValueError(f"Unknown configuration section(s): {sorted(unknown)}")

        kwargs = {}
        for name, section_cls in sections.items():
            values = data.get(name, {})
            allowed = {a.name for a in attrs.fields(section_cls)}
            bad_keys = set(values) - allowed
            if bad_keys:
                raise ValueError(f"Unknown key(s) in [{name}]: {sorted(bad_keys)}")
            try:
                kwargs[name] = section_cls(**values)
            except TypeError as e:
                raise ValueError(f"Invalid value in [{name}]: {e}") from e
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation with enums as their string values.
        """
        return attrs.asdict(
            self,
            value_serializer=lambda _inst, _field, value: (
                value.value if isinstance(value, Enum) else value
            ),
        )
