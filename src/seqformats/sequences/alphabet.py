"""Residue alphabets for nucleotide and protein sequences.

Each alphabet is an :class:`~enum.Enum` whose members are the legal
residues. All alphabets share the same small interface:

- ``symbols()``: the closed set of legal characters
- ``from_char(c)``: one character -> residue, raising
  :class:`~seqformats.errors.InvalidSymbolError` for anything else
- ``char``: residue -> its one-letter code

Nucleotide members carry the IUPAC 4-bit base mask as their value
(A=1, C=2, G=4, T/U=8; ambiguity codes are unions, N=15, gap=0), so
complementing is a bit permutation.

Example:
    >>> from seqformats.sequences.alphabet import DNA, AminoAcid
    >>> DNA.from_char("r")
    <DNA.PURINE: 5>
    >>> DNA.PURINE.complement()
    <DNA.PYRIMIDINE: 10>
    >>> AminoAcid.from_char("W").long_name
    'Tryptophan'
"""

from __future__ import annotations

from enum import Enum
from functools import cache

from seqformats.errors import InvalidSymbolError

# =============================================================================
# Nucleotides
# =============================================================================

# One-letter code for each 4-bit mask; index 8 is T (DNA) or U (RNA)
DNA_CODES = "0ACMGRSVTWYHKDBN"
RNA_CODES = "0ACMGRSVUWYHKDBN"


def _swap_strands(mask: int) -> int:
    # A(1) <-> T(8), C(2) <-> G(4)
    return (
        ((mask & 0x1) << 3)
        | ((mask & 0x8) >> 3)
        | ((mask & 0x2) << 1)
        | ((mask & 0x4) >> 1)
    )


class _Nucleotide(Enum):
    """Shared behaviour of DNA and RNA bases."""

    @classmethod
    def codes(cls) -> str:
        raise NotImplementedError

    @classmethod
    @cache
    def symbols(cls) -> frozenset[str]:
        """Legal characters (upper and lower case)."""
        codes = cls.codes()
        return frozenset(codes) | frozenset(codes.lower())

    @classmethod
    def from_char(cls, char: str) -> _Nucleotide:
        """Convert one character (case-insensitive) into a base."""
        idx = cls.codes().find(char.upper()) if len(char) == 1 else -1
        if idx == -1:
            raise InvalidSymbolError(char, cls.__name__)
        return cls(idx)

    @property
    def char(self) -> str:
        """Upper-case one-letter code."""
        return self.codes()[self.value]

    @property
    def is_ambiguous(self) -> bool:
        """True for codes that stand for more than one base."""
        return bin(self.value).count("1") != 1

    def complement(self) -> _Nucleotide:
        """Watson-Crick complement, ambiguity codes included."""
        return type(self)(_swap_strands(self.value))

    def __str__(self) -> str:
        return self.char


class DNA(_Nucleotide):
    """IUPAC DNA bases (NC-IUB 1984 nomenclature)."""

    GAP = 0x0
    ADENINE = 0x1
    CYTOSINE = 0x2
    AMINO = 0x3  # A or C
    GUANINE = 0x4
    PURINE = 0x5  # A or G
    STRONG = 0x6  # C or G
    NOT_T = 0x7
    THYMINE = 0x8
    WEAK = 0x9  # A or T
    PYRIMIDINE = 0xA  # C or T
    NOT_G = 0xB
    KETO = 0xC  # G or T
    NOT_C = 0xD
    NOT_A = 0xE
    ANY = 0xF

    @classmethod
    def codes(cls) -> str:
        return DNA_CODES


class RNA(_Nucleotide):
    """IUPAC RNA bases; identical to DNA with U in place of T."""

    GAP = 0x0
    ADENINE = 0x1
    CYTOSINE = 0x2
    AMINO = 0x3
    GUANINE = 0x4
    PURINE = 0x5
    STRONG = 0x6
    NOT_U = 0x7
    URACIL = 0x8
    WEAK = 0x9
    PYRIMIDINE = 0xA
    NOT_G = 0xB
    KETO = 0xC
    NOT_C = 0xD
    NOT_A = 0xE
    ANY = 0xF

    @classmethod
    def codes(cls) -> str:
        return RNA_CODES


# =============================================================================
# Amino Acids
# =============================================================================


class AminoAcid(Enum):
    """Amino acid residues by one-letter code.

    The 22 proteinogenic amino acids plus the stop marker ``*`` and the
    unknown residue ``X`` produced by translating ambiguous codons.
    """

    ALANINE = "A"
    ARGININE = "R"
    ASPARAGINE = "N"
    ASPARTATE = "D"
    CYSTEINE = "C"
    GLUTAMINE = "Q"
    GLUTAMATE = "E"
    GLYCINE = "G"
    HISTIDINE = "H"
    ISOLEUCINE = "I"
    LEUCINE = "L"
    LYSINE = "K"
    METHIONINE = "M"
    PHENYLALANINE = "F"
    PROLINE = "P"
    SERINE = "S"
    THREONINE = "T"
    TRYPTOPHAN = "W"
    TYROSINE = "Y"
    VALINE = "V"
    SELENOCYSTEINE = "U"
    PYRROLYSINE = "O"
    STOP = "*"
    UNKNOWN = "X"

    @classmethod
    @cache
    def symbols(cls) -> frozenset[str]:
        """Legal characters (upper and lower case)."""
        codes = "".join(member.value for member in cls)
        return frozenset(codes) | frozenset(codes.lower())

    @classmethod
    def from_char(cls, char: str) -> AminoAcid:
        """Convert a one-letter code (case-insensitive) into a residue."""
        try:
            return cls(char.upper())
        except ValueError:
            raise InvalidSymbolError(char, cls.__name__) from None

    @classmethod
    def from_name(cls, name: str) -> AminoAcid:
        """Look up a residue by long name, three-letter or one-letter code."""
        for member in cls:
            if name in (member.value, member.abbreviation, member.long_name):
                return member
        raise InvalidSymbolError(name, cls.__name__)

    @property
    def char(self) -> str:
        return self.value

    @property
    def abbreviation(self) -> str:
        """Three-letter code (``Ter`` for stop, ``Xaa`` for unknown)."""
        return _ABBREVIATIONS[self]

    @property
    def long_name(self) -> str:
        return self.name.replace("_", " ").capitalize()

    def __str__(self) -> str:
        return self.value


_ABBREVIATIONS = {
    AminoAcid.ALANINE: "Ala",
    AminoAcid.ARGININE: "Arg",
    AminoAcid.ASPARAGINE: "Asn",
    AminoAcid.ASPARTATE: "Asp",
    AminoAcid.CYSTEINE: "Cys",
    AminoAcid.GLUTAMINE: "Gln",
    AminoAcid.GLUTAMATE: "Glu",
    AminoAcid.GLYCINE: "Gly",
    AminoAcid.HISTIDINE: "His",
    AminoAcid.ISOLEUCINE: "Ile",
    AminoAcid.LEUCINE: "Leu",
    AminoAcid.LYSINE: "Lys",
    AminoAcid.METHIONINE: "Met",
    AminoAcid.PHENYLALANINE: "Phe",
    AminoAcid.PROLINE: "Pro",
    AminoAcid.SERINE: "Ser",
    AminoAcid.THREONINE: "Thr",
    AminoAcid.TRYPTOPHAN: "Trp",
    AminoAcid.TYROSINE: "Tyr",
    AminoAcid.VALINE: "Val",
    AminoAcid.SELENOCYSTEINE: "Sec",
    AminoAcid.PYRROLYSINE: "Pyl",
    AminoAcid.STOP: "Ter",
    AminoAcid.UNKNOWN: "Xaa",
}


# =============================================================================
# Lookup
# =============================================================================

Residue = DNA | RNA | AminoAcid

ALPHABETS: dict[str, type[Enum]] = {
    "dna": DNA,
    "rna": RNA,
    "protein": AminoAcid,
}


def alphabet_by_name(name: str) -> type[Enum]:
    """Return the alphabet class registered under ``name``.

    Raises:
        ValueError: If ``name`` is not one of dna, rna, protein.
    """
    try:
        return ALPHABETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown alphabet {name!r}, expected one of {sorted(ALPHABETS)}"
        ) from None
