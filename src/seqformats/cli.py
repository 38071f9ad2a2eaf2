"""Command-line interface for seqformats.

This module provides the main entry point for the seqformats CLI tool.
It uses Click to define one command per file format; each command parses
its input, prints a summary and exits with status 1 and a rendered
diagnostic if the input is invalid.

Commands:
    gff: Parse a GFF3 file, summarize it and optionally re-serialize it
    fasta: Parse a FASTA file and list its records
    fastq: Parse a FASTQ file and report read statistics

Example:
    $ seqformats --help
    $ seqformats gff annotations.gff3 --output normalized.gff3
    $ seqformats -v fasta genome.fa --alphabet dna -j 4
    $ seqformats fastq reads.fq --encoding solexa
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
import numpy as np
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from seqformats import __version__
from seqformats.config import ALPHABET_NAMES, QUALITY_ENCODINGS, Config
from seqformats.errors import GFFError, SeqFormatError
from seqformats.gff import GFF, dumps, parse_documents, read_gff, write_gff
from seqformats.sequences import QualityEncoding, alphabet_by_name, read_fasta, read_fastq
from seqformats.utils.logging import Timer, setup_logging

logger = logging.getLogger(__name__)

# Initialize rich console for pretty output
console = Console()


def _fail(e: Exception) -> None:
    message = e.render() if isinstance(e, GFFError) else str(e)
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)
    raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="seqformats")
@click.option("-v", "--verbose", count=True, help="Increase log output (-vv for debug).")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: int, quiet: bool, config_path: Path | None) -> None:
    """seqformats: validate and inspect GFF3, FASTA and FASTQ files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    setup_logging(verbosity=-1 if quiet else verbose)

    try:
        ctx.obj["config"] = Config.load(config_path)
    except ValueError as e:
        _fail(e)


# =============================================================================
# gff command
# =============================================================================


def _print_gff_summary(gff: GFF, title: str) -> None:
    meta = gff.metadata
    console.print(f"[bold]{escape(title)}[/bold]")
    console.print(f"  GFF version:       {meta.version or 'undeclared'}")
    console.print(f"  Entries:           {len(gff.entries):,}")
    console.print(f"  Sequence regions:  {len(meta.sequence_regions):,}")
    if meta.genome_build is not None:
        console.print(f"  Genome build:      {escape(' '.join(meta.genome_build))}")
    if gff.sequences:
        console.print(f"  FASTA sequences:   {len(gff.sequences):,}")

    counts = gff.feature_type_counts()
    if counts:
        table = Table("Feature type", "Count")
        for feature_type, count in counts.items():
            table.add_row(escape(feature_type), f"{count:,}")
        console.print(table)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--split-blocks",
    is_flag=True,
    help="Treat every ### line as the start of a new document.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Write the parsed document(s) back out as GFF3.",
)
@click.pass_context
def gff(ctx: click.Context, file: Path, split_blocks: bool, output: Path | None) -> None:
    """Parse and summarize a GFF3 file."""
    config: Config = ctx.obj["config"]
    quiet = ctx.obj["quiet"]

    try:
        with Timer(f"Parsing {file.name}", logger):
            if split_blocks:
                documents = parse_documents(file.read_bytes(), config.gff)
            else:
                documents = [read_gff(file, config.gff)]
    except (SeqFormatError, OSError) as e:
        _fail(e)

    if not quiet:
        for number, document in enumerate(documents, start=1):
            title = file.name if len(documents) == 1 else f"{file.name} (document {number})"
            _print_gff_summary(document, title)

    if output is not None:
        if len(documents) == 1:
            write_gff(documents[0], output)
        else:
            output.write_text("###\n".join(dumps(document) for document in documents))
        if not quiet:
            console.print(f"[green]Wrote GFF3:[/green] {output}")


# =============================================================================
# fasta command
# =============================================================================


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--alphabet",
    type=click.Choice(ALPHABET_NAMES),
    default="dna",
    show_default=True,
    help="Residue alphabet of the sequences.",
)
@click.option("-j", "--threads", type=click.IntRange(min=1), help="Worker threads.")
@click.pass_context
def fasta(ctx: click.Context, file: Path, alphabet: str, threads: int | None) -> None:
    """Parse a FASTA file and list its records."""
    config: Config = ctx.obj["config"]
    workers = threads or config.sequences.workers

    try:
        with Timer(f"Parsing {file.name}", logger):
            records = read_fasta(file, alphabet_by_name(alphabet), workers)
    except (SeqFormatError, OSError) as e:
        _fail(e)

    if ctx.obj["quiet"]:
        return

    table = Table("Description", "Length", title=f"{file.name}: {len(records):,} records")
    for record in records:
        table.add_row(escape(record.description or ""), f"{len(record):,}")
    console.print(table)


# =============================================================================
# fastq command
# =============================================================================


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--alphabet",
    type=click.Choice(ALPHABET_NAMES),
    default="dna",
    show_default=True,
    help="Residue alphabet of the reads.",
)
@click.option(
    "--encoding",
    type=click.Choice(QUALITY_ENCODINGS),
    help="Quality encoding (default from config: phred).",
)
@click.option("-j", "--threads", type=click.IntRange(min=1), help="Worker threads.")
@click.pass_context
def fastq(
    ctx: click.Context,
    file: Path,
    alphabet: str,
    encoding: str | None,
    threads: int | None,
) -> None:
    """Parse a FASTQ file and report read statistics."""
    config: Config = ctx.obj["config"]
    workers = threads or config.sequences.workers
    quality_encoding = QualityEncoding.from_name(encoding or config.sequences.quality_encoding)

    try:
        with Timer(f"Parsing {file.name}", logger):
            records = read_fastq(file, alphabet_by_name(alphabet), quality_encoding, workers)
    except (SeqFormatError, OSError) as e:
        _fail(e)

    if ctx.obj["quiet"]:
        return

    total_bases = sum(len(record) for record in records)
    if total_bases:
        probabilities = np.concatenate(
            [record.quality.error_probabilities() for record in records]
        )
        mean_error = float(probabilities.mean())
    else:
        mean_error = 0.0

    console.print(f"[bold]{escape(file.name)}[/bold]")
    console.print(f"  Encoding:                {quality_encoding.label}")
    console.print(f"  Reads:                   {len(records):,}")
    console.print(f"  Bases:                   {total_bases:,}")
    console.print(f"  Mean error probability:  {mean_error:.6f}")


if __name__ == "__main__":
    main()
