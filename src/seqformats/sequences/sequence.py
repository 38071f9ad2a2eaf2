"""Residue sequences over a single alphabet.

:class:`Sequence` is the validated in-memory form of sequence text: every
character has been converted into a member of one alphabet
(:class:`~seqformats.sequences.alphabet.DNA`,
:class:`~seqformats.sequences.alphabet.RNA` or
:class:`~seqformats.sequences.alphabet.AminoAcid`).

Example:
    >>> from seqformats.sequences import DNA, Sequence
    >>> seq = Sequence.parse("ACGT\\nNNAC", DNA)
    >>> len(seq)
    8
    >>> str(seq.reverse_complement())
    'GTNNACGT'
"""

from __future__ import annotations

from enum import Enum
from functools import cache
from typing import Iterable, Iterator

from seqformats.errors import InvalidSymbolError, SequenceError
from seqformats.sequences.alphabet import DNA, RNA

# Characters dropped while parsing multi-line sequence text
LINE_BREAKS = frozenset("\r\n")


@cache
def _lookup_table(alphabet: type[Enum]) -> dict[str, Enum]:
    return {char: alphabet.from_char(char) for char in alphabet.symbols()}


class Sequence:
    """An ordered run of residues from one alphabet.

    Attributes:
        alphabet: The alphabet every residue belongs to.
    """

    __slots__ = ("alphabet", "_residues")

    def __init__(self, alphabet: type[Enum], residues: Iterable[Enum] = ()) -> None:
        self.alphabet = alphabet
        self._residues: list[Enum] = []
        self.extend(residues)

    @classmethod
    def parse(cls, text: str, alphabet: type[Enum] = DNA) -> Sequence:
        """Parse sequence text, ignoring line breaks.

        Args:
            text: Sequence characters, possibly wrapped over several lines.
            alphabet: Alphabet to validate against.

        Returns:
            Parsed Sequence.

        Raises:
            InvalidSymbolError: For the first character outside the alphabet.
        """
        table = _lookup_table(alphabet)
        residues = []
        for position, char in enumerate(text):
            if char in LINE_BREAKS:
                continue
            residue = table.get(char)
            if residue is None:
                raise InvalidSymbolError(char, alphabet.__name__, position)
            residues.append(residue)

        seq = cls(alphabet)
        seq._residues = residues
        return seq

    @classmethod
    def from_symbols(
        cls,
        symbols: Iterable[Enum],
        alphabet: type[Enum] | None = None,
    ) -> Sequence:
        """Build a sequence from already-validated residues.

        Args:
            symbols: Residues, all from the same alphabet.
            alphabet: Alphabet of the residues. Inferred from the first
                residue if omitted.

        Raises:
            SequenceError: If the alphabet cannot be inferred (no residues).
            InvalidSymbolError: If a residue belongs to another alphabet.
        """
        symbols = list(symbols)
        if alphabet is None:
            if not symbols:
                raise SequenceError("Cannot infer the alphabet of an empty sequence")
            alphabet = type(symbols[0])
        return cls(alphabet, symbols)

    def extend(self, residues: Iterable[Enum]) -> None:
        """Append residues, checking each belongs to the alphabet."""
        for residue in residues:
            if not isinstance(residue, self.alphabet):
                raise InvalidSymbolError(
                    str(residue), self.alphabet.__name__, len(self._residues)
                )
            self._residues.append(residue)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return "".join(residue.char for residue in self._residues)

    def to_bytes(self) -> bytes:
        """Serialize as ASCII bytes."""
        return str(self).encode("ascii")

    def wrapped(self, width: int = 60) -> str:
        """Serialize with a line break every ``width`` residues."""
        text = str(self)
        return "\n".join(text[i : i + width] for i in range(0, len(text), width))

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._residues)

    def __iter__(self) -> Iterator[Enum]:
        return iter(self._residues)

    def __getitem__(self, index):
        if isinstance(index, slice):
            seq = type(self)(self.alphabet)
            seq._residues = self._residues[index]
            return seq
        return self._residues[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return self.alphabet is other.alphabet and self._residues == other._residues

    __hash__ = None

    def __repr__(self) -> str:
        text = str(self)
        if len(text) > 30:
            text = text[:27] + "..."
        return f"Sequence({self.alphabet.__name__}, {text!r}, length={len(self)})"

    # -------------------------------------------------------------------------
    # Nucleotide helpers
    # -------------------------------------------------------------------------

    @property
    def is_nucleotide(self) -> bool:
        return self.alphabet in (DNA, RNA)

    def reverse_complement(self) -> Sequence:
        """Reverse complement of a DNA or RNA sequence.

        Raises:
            SequenceError: For protein sequences.
        """
        if not self.is_nucleotide:
            raise SequenceError(
                f"Cannot reverse complement a {self.alphabet.__name__} sequence"
            )
        seq = type(self)(self.alphabet)
        seq._residues = [residue.complement() for residue in reversed(self._residues)]
        return seq

    def gc_content(self) -> float:
        """Fraction of G and C among unambiguous bases.

        Returns:
            GC content as a fraction (0.0 to 1.0); 0.0 if there are no
            unambiguous bases.
        """
        if not self.is_nucleotide:
            raise SequenceError(f"GC content is undefined for {self.alphabet.__name__}")
        gc = self.alphabet.GUANINE, self.alphabet.CYTOSINE
        valid = [r for r in self._residues if not r.is_ambiguous]
        if not valid:
            return 0.0
        return sum(1 for r in valid if r in gc) / len(valid)
