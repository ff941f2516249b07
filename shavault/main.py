"""
SHAVault - Main Entry Point
Command line interface for the from-scratch SHA-256 implementation.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from .core_crypto.sha256 import sha256_string
from .files.file_hashing import DEFAULT_CHUNK_SIZE, hash_file, hash_stream
from .kat.loader import VectorFormatError
from .kat.runner import RunnerConfig, print_summary, run_all


logger = logging.getLogger(__name__)

app = typer.Typer(help="SHAVault - pure Python SHA-256")


@app.callback()
def main(
    log_level: str = typer.Option(
        "warning", "--log-level", envvar="SHAVAULT_LOG_LEVEL", help="Logging verbosity"
    ),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        force=True,
    )


@app.command("hash")
def hash_command(
    path: Optional[Path] = typer.Argument(None, help="File to hash ('-' or omitted for stdin)"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Hash this UTF-8 string instead"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Read chunk size"),
) -> None:
    """Print the SHA-256 digest of a file, stdin or a string."""
    if text is not None:
        typer.echo(sha256_string(text).hex())
        return

    if path is None or str(path) == "-":
        typer.echo(f"{hash_stream(sys.stdin.buffer, chunk_size).hex()}  -")
        return

    if not path.is_file():
        typer.echo(f"No such file: {path}", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"{hash_file(path, chunk_size).hex()}  {path}")


@app.command()
def selftest(
    vectors: Optional[Path] = typer.Option(None, "--vectors", help="JSON vector file"),
    random_count: int = typer.Option(1000, "--random-count", min=0, help="Random consistency messages"),
    skip_million: bool = typer.Option(False, "--skip-million", help="Skip the one million 'a' test"),
) -> None:
    """Run the known-answer and consistency tests."""
    config = RunnerConfig(random_count=random_count, include_million=not skip_million)
    try:
        report = run_all(config, vectors)
    except (OSError, VectorFormatError) as exc:
        typer.echo(f"Cannot load vectors: {exc}", err=True)
        raise typer.Exit(code=2)

    print_summary(report)
    if not report.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
