from __future__ import annotations

from pathlib import Path

from . import config


ARTIFACT_NAMES = {
    "preview_1": "preview_1.png",
    "preview_2": "preview_2.png",
    "preview_3": "preview_3.png",
    "request": "request.json",
    "error": "error.log",
}


def report_dir(slug: str, base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    path = root / slug
    path.mkdir(parents=True, exist_ok=True)
    return path


def artifact_path(slug: str, artifact_type: str, base_dir: Path | None = None) -> Path:
    filename = ARTIFACT_NAMES[artifact_type]
    return report_dir(slug, base_dir=base_dir) / filename


def pdf_path(slug: str, filename: str, base_dir: Path | None = None) -> Path:
    name = Path(filename).name
    if not name or name in {".", ".."}:
        raise ValueError(f"Invalid output filename: {filename!r}")
    return report_dir(slug, base_dir=base_dir) / name
