from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import config
from .pipeline.ingest import sample_request
from .pipeline.run import ReportStatus, run_reports

app = typer.Typer(help="Early-sale analysis report renderer")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def build(
    inputs: List[Path] = typer.Argument(..., help="Report request JSON files"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    preview: bool = typer.Option(False, "--preview", help="Also render PNG previews"),
    strict: bool = typer.Option(False, "--strict", help="Clip value text to its slot"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    _configure_logging(verbose)
    if out:
        config.set_out_dir(out)
    results = run_reports(inputs, previews=preview, strict=strict)
    typer.echo(f"READY: {len(results[ReportStatus.READY.value])}")
    typer.echo(f"FAILED: {len(results[ReportStatus.FAILED.value])}")
    for slug in results[ReportStatus.FAILED.value]:
        typer.echo(f"FAILED: {slug}")
    if results[ReportStatus.FAILED.value]:
        raise typer.Exit(code=1)


@app.command()
def sample(
    out: Path = typer.Option(Path("sample_request.json"), "--out", help="Where to write the sample request"),
) -> None:
    request = sample_request()
    out.write_text(
        json.dumps(request.model_dump(mode="json"), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    typer.echo(f"Wrote {out}")


if __name__ == "__main__":
    app()
