"""Sequence alphabets, containers and FASTA/FASTQ readers.

- DNA, RNA and amino acid alphabets
- Sequence container and translation
- Phred / Solexa quality scores
- FASTA and FASTQ parsers

Example:
    >>> from seqformats.sequences import DNA, parse_fasta, translate
    >>> records = parse_fasta(">cds\\nATGAAATAG\\n", DNA)
    >>> str(translate(records[0].sequence, to_stop=True))
    'MK'
"""

from seqformats.sequences.alphabet import (
    ALPHABETS,
    DNA,
    RNA,
    AminoAcid,
    alphabet_by_name,
)
from seqformats.sequences.fasta import FastaRecord, parse_fasta, read_fasta, write_fasta
from seqformats.sequences.fastq import FastqRecord, parse_fastq, read_fastq
from seqformats.sequences.quality import Quality, QualityEncoding
from seqformats.sequences.sequence import Sequence
from seqformats.sequences.translation import CODON_TABLE_STANDARD, translate

__all__ = [
    "ALPHABETS",
    "CODON_TABLE_STANDARD",
    "DNA",
    "RNA",
    "AminoAcid",
    "FastaRecord",
    "FastqRecord",
    "Quality",
    "QualityEncoding",
    "Sequence",
    "alphabet_by_name",
    "parse_fasta",
    "parse_fastq",
    "read_fasta",
    "read_fastq",
    "translate",
    "write_fasta",
]
