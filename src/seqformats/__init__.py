"""seqformats: typed, validating parsers for GFF3, FASTA and FASTQ.

seqformats converts loosely standardized bioinformatics text formats
into validated in-memory structures and reports location-aware errors
when input violates the format.

Example:
    >>> import seqformats
    >>> gff = seqformats.GFF.parse("##gff-version 3.1.26\\n")
    >>> gff.metadata.version
    GFFVersion(minor=1, patch=26)

Modules:
    gff: GFF3 escaping, grammars, metadata, document assembler, writer
    sequences: Alphabets, sequences, translation, FASTA and FASTQ
    config: Parser configuration and TOML loading
    errors: Exception hierarchy
    utils: Logging and thread fan-out helpers
"""

__version__ = "0.1.0"

from seqformats.config import Config, DuplicateIdPolicy, GFFConfig, SequenceConfig, TerminatorMode
from seqformats.errors import GFFError, SeqFormatError, SequenceError
from seqformats.gff import GFF, Entry, parse_documents, read_gff, write_gff
from seqformats.sequences import (
    DNA,
    RNA,
    AminoAcid,
    Sequence,
    parse_fasta,
    parse_fastq,
    read_fasta,
    read_fastq,
    translate,
)

__all__ = [
    "__version__",
    "DNA",
    "GFF",
    "RNA",
    "AminoAcid",
    "Config",
    "DuplicateIdPolicy",
    "Entry",
    "GFFConfig",
    "GFFError",
    "SeqFormatError",
    "Sequence",
    "SequenceConfig",
    "SequenceError",
    "TerminatorMode",
    "parse_documents",
    "parse_fasta",
    "parse_fastq",
    "read_fasta",
    "read_fastq",
    "read_gff",
    "translate",
    "write_gff",
]
