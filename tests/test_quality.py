"""Unit tests for seqformats.sequences.quality module."""

import numpy as np
import pytest

from seqformats.errors import InvalidQualityError
from seqformats.sequences.quality import Quality, QualityEncoding


class TestQualityEncoding:
    """Tests for the encoding table."""

    def test_phred_range(self) -> None:
        """Phred+33 spans 0 to 93."""
        assert QualityEncoding.PHRED.offset == 33
        assert QualityEncoding.PHRED.min_score == 0
        assert QualityEncoding.PHRED.max_score == 93

    def test_solexa_range(self) -> None:
        """Solexa+64 spans -5 to 62."""
        assert QualityEncoding.SOLEXA.offset == 64
        assert QualityEncoding.SOLEXA.min_score == -5
        assert QualityEncoding.SOLEXA.max_score == 62

    def test_from_name(self) -> None:
        """Encodings are looked up by name."""
        assert QualityEncoding.from_name("Phred") is QualityEncoding.PHRED
        with pytest.raises(ValueError, match="Unknown quality encoding"):
            QualityEncoding.from_name("illumina13")


class TestQualityParse:
    """Tests for decoding quality strings."""

    def test_phred(self) -> None:
        """Characters decode to offset-subtracted scores."""
        quality = Quality.parse("II5!~")
        assert quality.scores.dtype == np.int16
        assert quality.scores.tolist() == [40, 40, 20, 0, 93]
        assert len(quality) == 5

    def test_solexa(self) -> None:
        """Solexa allows negative scores."""
        quality = Quality.parse(";@h", QualityEncoding.SOLEXA)
        assert quality.scores.tolist() == [-5, 0, 40]

    def test_out_of_range(self) -> None:
        """Characters below the encoding's lowest fail with a position."""
        with pytest.raises(InvalidQualityError, match="position 1"):
            Quality.parse("h:h", QualityEncoding.SOLEXA)

    @pytest.mark.parametrize("text", ["II I", "II\x7f", "IIé"])
    def test_invalid_characters(self, text: str) -> None:
        """Spaces, DEL and non-ASCII characters fail."""
        with pytest.raises(InvalidQualityError):
            Quality.parse(text)

    def test_encode_round_trip(self) -> None:
        """str() re-encodes the scores."""
        assert str(Quality.parse("II5!")) == "II5!"
        assert str(Quality([40, 0])) == "I!"


class TestQualityScores:
    """Tests for building Quality from scores."""

    def test_constructor_range_check(self) -> None:
        """Scores outside the encoding range fail."""
        with pytest.raises(InvalidQualityError):
            Quality([94])
        with pytest.raises(InvalidQualityError):
            Quality([-1])
        assert Quality([-5], QualityEncoding.SOLEXA).scores.tolist() == [-5]

    def test_error_probabilities_phred(self) -> None:
        """Phred scores are -10 log10(p)."""
        probs = Quality([0, 10, 20, 30]).error_probabilities()
        np.testing.assert_allclose(probs, [1.0, 0.1, 0.01, 0.001])

    def test_error_probabilities_solexa(self) -> None:
        """Solexa scores are -10 log10(p / (1 - p))."""
        probs = Quality([0, 10], QualityEncoding.SOLEXA).error_probabilities()
        np.testing.assert_allclose(probs, [0.5, 0.1 / 1.1])

    def test_mean_error_probability(self) -> None:
        """Mean over all bases; empty reads give 0."""
        assert Quality([10, 20]).mean_error_probability() == pytest.approx(0.055)
        assert Quality([]).mean_error_probability() == 0.0

    def test_equality(self) -> None:
        """Equal scores and encoding compare equal."""
        assert Quality.parse("II") == Quality([40, 40])
        assert Quality([10]) != Quality([10], QualityEncoding.SOLEXA)
