"""Per-base quality scores for FASTQ records.

Two ASCII encodings are supported:

- ``PHRED`` (Sanger / Illumina 1.8+): offset 33, characters ``!`` to ``~``,
  scores 0 to 93, ``Q = -10 log10(p)``
- ``SOLEXA`` (Solexa / Illumina 1.0): offset 64, characters ``;`` to ``~``,
  scores -5 to 62, ``Q = -10 log10(p / (1 - p))``

Scores are held in a numpy ``int16`` array.

Example:
    >>> from seqformats.sequences.quality import Quality, QualityEncoding
    >>> q = Quality.parse("II5!", QualityEncoding.PHRED)
    >>> q.scores.tolist()
    [40, 40, 20, 0]
    >>> str(q)
    'II5!'
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from seqformats.errors import InvalidQualityError

# =============================================================================
# Encodings
# =============================================================================


class QualityEncoding(Enum):
    """ASCII quality encodings as (name, offset, lowest character)."""

    PHRED = ("phred", 33, "!")
    SOLEXA = ("solexa", 64, ";")

    def __init__(self, label: str, offset: int, lowest: str) -> None:
        self.label = label
        self.offset = offset
        self.lowest = lowest

    @property
    def min_score(self) -> int:
        return ord(self.lowest) - self.offset

    @property
    def max_score(self) -> int:
        return ord("~") - self.offset

    @classmethod
    def from_name(cls, name: str) -> QualityEncoding:
        """Look up an encoding by name (``phred`` or ``solexa``).

        Raises:
            ValueError: For any other name.
        """
        for member in cls:
            if member.label == name.lower():
                return member
        raise ValueError(
            f"Unknown quality encoding {name!r}, expected one of "
            f"{[m.label for m in cls]}"
        )


# =============================================================================
# Quality
# =============================================================================


class Quality:
    """Decoded quality scores of one read.

    Attributes:
        scores: Per-base scores (int16).
        encoding: Encoding the scores were read with.
    """

    __slots__ = ("scores", "encoding")

    def __init__(self, scores, encoding: QualityEncoding = QualityEncoding.PHRED) -> None:
        scores = np.asarray(scores, dtype=np.int16)
        if scores.size and (
            scores.min() < encoding.min_score or scores.max() > encoding.max_score
        ):
            raise InvalidQualityError(
                f"{encoding.label} scores must lie in "
                f"[{encoding.min_score}, {encoding.max_score}]"
            )
        self.scores = scores
        self.encoding = encoding

    @classmethod
    def parse(
        cls, text: str, encoding: QualityEncoding = QualityEncoding.PHRED
    ) -> Quality:
        """Decode a quality string.

        Raises:
            InvalidQualityError: If a character lies outside the encoding's
                range.
        """
        try:
            raw = np.frombuffer(text.encode("ascii"), dtype=np.uint8)
        except UnicodeEncodeError as e:
            raise InvalidQualityError(
                f"Non-ASCII quality character at position {e.start}"
            ) from None

        bad = np.flatnonzero((raw < ord(encoding.lowest)) | (raw > ord("~")))
        if bad.size:
            pos = int(bad[0])
            raise InvalidQualityError(
                f"Invalid {encoding.label} quality character {text[pos]!r} "
                f"at position {pos}"
            )

        quality = cls.__new__(cls)
        quality.scores = raw.astype(np.int16) - encoding.offset
        quality.encoding = encoding
        return quality

    def error_probabilities(self) -> np.ndarray:
        """Per-base probability that the base call is wrong.

        Returns:
            float64 array of the same length as ``scores``.
        """
        odds = np.power(10.0, -self.scores / 10.0)
        if self.encoding is QualityEncoding.SOLEXA:
            return odds / (1.0 + odds)
        return odds

    def mean_error_probability(self) -> float:
        """Mean of :meth:`error_probabilities`, 0.0 for an empty read."""
        if not self.scores.size:
            return 0.0
        return float(self.error_probabilities().mean())

    def __len__(self) -> int:
        return int(self.scores.size)

    def __str__(self) -> str:
        return (self.scores + self.encoding.offset).astype(np.uint8).tobytes().decode("ascii")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quality):
            return NotImplemented
        return self.encoding is other.encoding and np.array_equal(self.scores, other.scores)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Quality({str(self)!r}, {self.encoding.name})"
