"""Pytest configuration and shared fixtures for seqformats tests.

Fixtures are organized by category:

- GFF3 fixtures: Document text and files
- Sequence fixtures: FASTA and FASTQ text and files
- CLI fixtures: Click test runner
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

# =============================================================================
# GFF3 Fixtures
# =============================================================================

SAMPLE_GFF = """\
##gff-version 3.1.26
##sequence-region ctg123 1 1497228
##species https://www.ncbi.nlm.nih.gov/Taxonomy/Browser/wwwtax.cgi?id=9606
##genome-build NCBI GRCh38
#!processor seqformats-tests
# plain comment
ctg123\t.\tgene\t1000\t9000\t.\t+\t.\tID=gene00001;Name=EDEN
ctg123\t.\tmRNA\t1050\t9000\t.\t+\t.\tID=mRNA00001;Parent=gene00001;Name=EDEN.1
ctg123\t.\texon\t1050\t1500\t.\t+\t.\tID=exon00001;Parent=mRNA00001
ctg123\t.\texon\t3000\t3902\t.\t+\t.\tID=exon00002;Parent=mRNA00001
ctg123\t.\tCDS\t1201\t1500\t.\t+\t0\tID=cds00001;Parent=mRNA00001
ctg123\t.\tCDS\t3000\t3902\t.\t+\t0\tID=cds00001;Parent=mRNA00001
ctg123\test2genome\tmatch\t5000\t5500\t0.93\t-\t.\tID=match1;Target=EST23 1 501 +;Gap=M300 I2 M199
"""

NC_045512_LINE = (
    "NC_045512.2\tRefSeq\tregion\t1\t29903\t.\t+\t.\tID=NC_045512.2:1..29903;gbkey=Src"
)


@pytest.fixture
def sample_gff_text() -> str:
    """A small, valid GFF3 document with every kind of line."""
    return SAMPLE_GFF


@pytest.fixture
def sample_gff_file(tmp_path: Path) -> Path:
    """Write the sample GFF3 document to a temporary file."""
    gff_path = tmp_path / "sample.gff3"
    gff_path.write_text(SAMPLE_GFF)
    return gff_path


@pytest.fixture
def nc_045512_line() -> str:
    """The SARS-CoV-2 region entry used as a full-entry example."""
    return NC_045512_LINE


@pytest.fixture
def invalid_gff_file(tmp_path: Path) -> Path:
    """A GFF3 file whose third line has an invalid strand."""
    gff_path = tmp_path / "invalid.gff3"
    gff_path.write_text(
        "##gff-version 3\n"
        "ctg1\tsrc\tgene\t1\t100\t.\t+\t.\tID=g1\n"
        "ctg1\tsrc\tgene\t200\t300\t.\tx\t.\tID=g2\n"
    )
    return gff_path


# =============================================================================
# Sequence Fixtures
# =============================================================================

SAMPLE_FASTA = """\
>chr1 first test scaffold
ACGTACGTAC
GTNNACGT
>chr2
GGGCCCAAATTT
"""

SAMPLE_FASTQ = """\
@read1 lane 1
ACGTN
+
IIII!
@read2
GGCC
+read2
5555
"""


@pytest.fixture
def sample_fasta_text() -> str:
    """Two-record FASTA text; chr1 is wrapped over two lines."""
    return SAMPLE_FASTA


@pytest.fixture
def sample_fasta_file(tmp_path: Path) -> Path:
    """Write the sample FASTA text to a temporary file."""
    fasta_path = tmp_path / "sample.fa"
    fasta_path.write_text(SAMPLE_FASTA)
    return fasta_path


@pytest.fixture
def sample_fastq_text() -> str:
    """Two Phred-encoded FASTQ records."""
    return SAMPLE_FASTQ


@pytest.fixture
def sample_fastq_file(tmp_path: Path) -> Path:
    """Write the sample FASTQ text to a temporary file."""
    fastq_path = tmp_path / "sample.fq"
    fastq_path.write_text(SAMPLE_FASTQ)
    return fastq_path


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click test runner."""
    return CliRunner()
