"""CLI implementation for fastexif."""

import asyncio
import json
import sys
import warnings
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer

from . import read_exif, read_exif_sync
from .core.error import DecodeWarning, Error
from .core.model import Exif, Result
from .core.util import exif_asdict, result_asdict
from .io.http_async import close_global_client

app = typer.Typer(add_completion=False, help="Extract Exif attributes from files and URLs.")


def iter_sources(files: list[str]) -> list[str]:
    """Get list of sources from files argument or stdin."""
    if "-" in files:
        return [ln.strip() for ln in sys.stdin if ln.strip()]
    return list(files)


def _normalise(src: str) -> str:
    parsed = urlparse(src)
    if parsed.scheme and parsed.netloc:
        return src
    return str(Path(src).resolve())


def _to_result(src: str, outcome, sel_fields) -> Result:
    """Turn an Exif or an exception into a Result, distilling partial results."""
    if isinstance(outcome, Exif):
        return Result(True, {"source": src, **exif_asdict(outcome, fields=sel_fields)}, None)
    if not isinstance(outcome, Error):
        return Result(False, None, f"{src}: {outcome}")
    skipped: list[str] = []
    try:
        exif = outcome.distill_partial_result(lambda errors: skipped.extend(str(e) for e in errors))
    except Error as err:
        return Result(False, None, f"{src}: {err}")
    for msg in skipped:
        typer.echo(f"{src}: skipped: {msg}", err=True)
    return Result(True, {"source": src, **exif_asdict(exif, fields=sel_fields)}, None, skipped)


def _read_sync(src: str, continue_on_error: bool):
    try:
        return read_exif_sync(src, continue_on_error=continue_on_error)
    except Exception as err:
        return err


async def _batch_read(sources: list[str], continue_on_error: bool) -> list:
    """Asynchronously read Exif from a list of sources."""
    tasks = [read_exif(src, continue_on_error=continue_on_error) for src in sources]
    try:
        return await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        await close_global_client()


@app.command()
def main(
    files: list[str] = typer.Argument(None, help="Files or URLs to process, or '-' for stdin"),
    fields: Optional[str] = typer.Option(None, "--fields", help="Comma-separated tag names to emit"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    sync: bool = typer.Option(False, "--sync", help="Force synchronous I/O"),
    continue_on_error: bool = typer.Option(
        False, "--continue-on-error", help="Keep decoding past recoverable errors"),
):
    """Extract Exif attributes from one or many local paths or URLs."""
    sel_fields = set(fields.split(",")) if fields else None
    sources = [_normalise(s) for s in iter_sources(files or [])]

    if not sources:
        typer.echo("No input files given.", err=True)
        raise typer.Exit(code=1)

    # skipped errors are reported per source below
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DecodeWarning)
        if sync:
            outcomes = [_read_sync(src, continue_on_error) for src in sources]
        else:
            outcomes = asyncio.run(_batch_read(sources, continue_on_error))
    results = [_to_result(src, out, sel_fields) for src, out in zip(sources, outcomes)]

    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        if len(sources) == 1 and not jsonl:
            json.dump(result_asdict(results[0]), sink, indent=2)
            sink.write("\n")
        else:
            for res in results:
                sink.write(json.dumps(result_asdict(res)))
                sink.write("\n")
    finally:
        if output:
            sink.close()

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
