"""Translation of nucleotide sequences to protein.

Only the standard genetic code (NCBI Table 1) is provided.

Example:
    >>> from seqformats.sequences import Sequence, translate
    >>> str(translate(Sequence.parse("ATGAAATAG")))
    'MK*'
    >>> str(translate("ATGAAATAG", to_stop=True))
    'MK'
"""

from __future__ import annotations

from seqformats.errors import SequenceError
from seqformats.sequences.alphabet import DNA, AminoAcid
from seqformats.sequences.sequence import Sequence

# =============================================================================
# Constants
# =============================================================================

# Standard genetic code (NCBI Table 1)
CODON_TABLE_STANDARD = {
    "TTT": "F",
    "TTC": "F",
    "TTA": "L",
    "TTG": "L",
    "CTT": "L",
    "CTC": "L",
    "CTA": "L",
    "CTG": "L",
    "ATT": "I",
    "ATC": "I",
    "ATA": "I",
    "ATG": "M",
    "GTT": "V",
    "GTC": "V",
    "GTA": "V",
    "GTG": "V",
    "TCT": "S",
    "TCC": "S",
    "TCA": "S",
    "TCG": "S",
    "CCT": "P",
    "CCC": "P",
    "CCA": "P",
    "CCG": "P",
    "ACT": "T",
    "ACC": "T",
    "ACA": "T",
    "ACG": "T",
    "GCT": "A",
    "GCC": "A",
    "GCA": "A",
    "GCG": "A",
    "TAT": "Y",
    "TAC": "Y",
    "TAA": "*",
    "TAG": "*",
    "CAT": "H",
    "CAC": "H",
    "CAA": "Q",
    "CAG": "Q",
    "AAT": "N",
    "AAC": "N",
    "AAA": "K",
    "AAG": "K",
    "GAT": "D",
    "GAC": "D",
    "GAA": "E",
    "GAG": "E",
    "TGT": "C",
    "TGC": "C",
    "TGA": "*",
    "TGG": "W",
    "CGT": "R",
    "CGC": "R",
    "CGA": "R",
    "CGG": "R",
    "AGT": "S",
    "AGC": "S",
    "AGA": "R",
    "AGG": "R",
    "GGT": "G",
    "GGC": "G",
    "GGA": "G",
    "GGG": "G",
}

START_CODONS = {"ATG"}

STOP_CODONS = {"TAA", "TAG", "TGA"}

# Codon table keyed by base masks instead of letters; RNA uses the same
# masks (U == T == 8), so one table serves both alphabets.
_MASK_TABLE = {
    tuple(DNA.from_char(base).value for base in codon): AminoAcid(aa)
    for codon, aa in CODON_TABLE_STANDARD.items()
}


# =============================================================================
# Translation
# =============================================================================


def translate(sequence: Sequence | str, to_stop: bool = False) -> Sequence:
    """Translate a DNA or RNA coding sequence to protein.

    Codons holding an ambiguity code or a gap translate to
    :attr:`AminoAcid.UNKNOWN`.

    Args:
        sequence: Nucleotide sequence. Plain strings are parsed as DNA.
        to_stop: If True, stop before the first stop codon.

    Returns:
        Amino acid sequence.

    Raises:
        SequenceError: If the sequence is not nucleotide or its length
            is not a multiple of 3.
        InvalidSymbolError: If a string argument is not valid DNA.
    """
    if isinstance(sequence, str):
        sequence = Sequence.parse(sequence, DNA)

    if not sequence.is_nucleotide:
        raise SequenceError(f"Cannot translate a {sequence.alphabet.__name__} sequence")
    if len(sequence) % 3 != 0:
        raise SequenceError(f"Sequence length ({len(sequence)}) is not a multiple of 3")

    masks = [residue.value for residue in sequence]
    protein = []
    for i in range(0, len(masks), 3):
        aa = _MASK_TABLE.get(tuple(masks[i : i + 3]), AminoAcid.UNKNOWN)
        if aa is AminoAcid.STOP and to_stop:
            break
        protein.append(aa)

    return Sequence(AminoAcid, protein)
