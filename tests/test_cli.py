"""Tests for the seqformats command-line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from seqformats import __version__
from seqformats.cli import main
from seqformats.gff import GFF, read_gff

TWO_BLOCKS = (
    "##gff-version 3\n"
    "ctg1\tsrc\tgene\t1\t100\t.\t+\t.\tID=g1\n"
    "###\n"
    "ctg1\tsrc\tgene\t200\t300\t.\t+\t.\tID=g2\n"
)


@pytest.fixture
def two_block_file(tmp_path: Path) -> Path:
    path = tmp_path / "blocks.gff3"
    path.write_text(TWO_BLOCKS)
    return path


# =============================================================================
# Group Options
# =============================================================================


class TestMainGroup:
    """Tests for options on the command group."""

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        """--help shows the three format commands."""
        result = cli_runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("gff", "fasta", "fastq"):
            assert command in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        """--version prints the package version."""
        result = cli_runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_config_changes_terminator(
        self, cli_runner: CliRunner, tmp_path: Path, two_block_file: Path
    ) -> None:
        """A TOML config is applied to the parser."""
        config = tmp_path / "seqformats.toml"
        config.write_text('[gff]\nterminator = "continue"\n')

        default = cli_runner.invoke(main, ["gff", str(two_block_file)])
        configured = cli_runner.invoke(main, ["--config", str(config), "gff", str(two_block_file)])

        assert default.exit_code == 0
        assert "Entries:           1" in default.output
        assert configured.exit_code == 0
        assert "Entries:           2" in configured.output

    def test_bad_config(self, cli_runner: CliRunner, tmp_path: Path, sample_gff_file: Path) -> None:
        """Invalid configuration exits with status 1."""
        config = tmp_path / "bad.toml"
        config.write_text("[gff]\ncolour = 'blue'\n")

        result = cli_runner.invoke(main, ["--config", str(config), "gff", str(sample_gff_file)])
        assert result.exit_code == 1
        assert "Unknown key" in result.output


# =============================================================================
# gff command
# =============================================================================


class TestGffCommand:
    """Tests for the gff command."""

    def test_summary(self, cli_runner: CliRunner, sample_gff_file: Path) -> None:
        """The summary shows metadata and feature counts."""
        result = cli_runner.invoke(main, ["gff", str(sample_gff_file)])

        assert result.exit_code == 0
        assert "3.1.26" in result.output
        assert "Entries:           7" in result.output
        assert "NCBI GRCh38" in result.output
        assert "exon" in result.output

    def test_invalid_file(self, cli_runner: CliRunner, invalid_gff_file: Path) -> None:
        """Parse errors are rendered and exit with status 1."""
        result = cli_runner.invoke(main, ["gff", str(invalid_gff_file)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "line 3" in result.output
        assert "^" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Click rejects a file that does not exist."""
        result = cli_runner.invoke(main, ["gff", str(tmp_path / "missing.gff3")])
        assert result.exit_code != 0

    def test_output(self, cli_runner: CliRunner, sample_gff_file: Path, tmp_path: Path) -> None:
        """--output writes a document that reads back equal."""
        out = tmp_path / "out.gff3"
        result = cli_runner.invoke(main, ["gff", str(sample_gff_file), "-o", str(out)])

        assert result.exit_code == 0
        assert "Wrote GFF3" in result.output
        assert read_gff(out) == read_gff(sample_gff_file)

    def test_split_blocks(
        self, cli_runner: CliRunner, two_block_file: Path, tmp_path: Path
    ) -> None:
        """--split-blocks reports and writes each document."""
        out = tmp_path / "split.gff3"
        result = cli_runner.invoke(
            main, ["gff", str(two_block_file), "--split-blocks", "-o", str(out)]
        )

        assert result.exit_code == 0
        assert "document 2" in result.output
        text = out.read_text()
        assert text.count("###\n") == 1
        assert GFF.parse(text.split("###\n")[1]).find("g2") is not None

    def test_quiet(self, cli_runner: CliRunner, sample_gff_file: Path) -> None:
        """-q suppresses the summary."""
        result = cli_runner.invoke(main, ["-q", "gff", str(sample_gff_file)])
        assert result.exit_code == 0
        assert "Entries" not in result.output


# =============================================================================
# fasta / fastq commands
# =============================================================================


class TestFastaCommand:
    """Tests for the fasta command."""

    def test_lists_records(self, cli_runner: CliRunner, sample_fasta_file: Path) -> None:
        """Each record is listed with its length."""
        result = cli_runner.invoke(main, ["fasta", str(sample_fasta_file), "-j", "2"])

        assert result.exit_code == 0
        assert "2 records" in result.output
        assert "chr1 first test scaffold" in result.output
        assert "18" in result.output

    def test_wrong_alphabet(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Residues outside the alphabet fail."""
        path = tmp_path / "protein.fa"
        path.write_text(">p\nMKVL\n")

        assert cli_runner.invoke(main, ["fasta", str(path)]).exit_code == 1
        result = cli_runner.invoke(main, ["fasta", str(path), "--alphabet", "protein"])
        assert result.exit_code == 0


class TestFastqCommand:
    """Tests for the fastq command."""

    def test_statistics(self, cli_runner: CliRunner, sample_fastq_file: Path) -> None:
        """Read count, base count and mean error are reported."""
        result = cli_runner.invoke(main, ["fastq", str(sample_fastq_file)])

        assert result.exit_code == 0
        assert "phred" in result.output
        assert "Reads:                   2" in result.output
        assert "Bases:                   9" in result.output
        assert "0.115600" in result.output

    def test_wrong_encoding(self, cli_runner: CliRunner, sample_fastq_file: Path) -> None:
        """'!' is below the Solexa range."""
        result = cli_runner.invoke(
            main, ["fastq", str(sample_fastq_file), "--encoding", "solexa"]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output
