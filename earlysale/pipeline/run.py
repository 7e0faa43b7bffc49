from __future__ import annotations

import json
import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Iterable, List

from .. import config
from ..storage import artifact_path, pdf_path
from .ingest import load_request, slug_from_name
from .render_pdf import write_report
from .render_preview import render_previews


logger = logging.getLogger(__name__)


class ReportStatus(str, Enum):
    READY = "READY"
    FAILED = "FAILED"


def _write_error(slug: str, message: str) -> None:
    error_path = artifact_path(slug, "error", base_dir=config.OUT_DIR)
    error_path.write_text(message, encoding="utf-8")


def _prepare_temp_dir(slug: str) -> Path:
    temp_dir = config.OUT_DIR / f"{slug}.tmp"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def _finalize(temp_dir: Path, final_dir: Path) -> None:
    if final_dir.exists():
        shutil.rmtree(final_dir)
    temp_dir.replace(final_dir)


def process_request(request_path: Path, previews: bool = False, strict: bool = False) -> List[Path]:
    """Build one request into OUT_DIR/<slug>/; nothing lands there unless every step succeeds."""
    slug = slug_from_name(request_path.stem)
    request = load_request(request_path)
    temp_dir = _prepare_temp_dir(slug)
    try:
        staging = temp_dir.parent
        stage_slug = temp_dir.name
        pdf = write_report(request, pdf_path(stage_slug, request.output_name, base_dir=staging), strict=strict)
        request_copy = artifact_path(stage_slug, "request", base_dir=staging)
        request_copy.write_text(
            json.dumps(request.model_dump(mode="json"), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        produced = [pdf, request_copy]
        if previews:
            produced.extend(render_previews(stage_slug, pdf, base_dir=staging))
    except Exception:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    final_dir = config.OUT_DIR / slug
    _finalize(temp_dir, final_dir)
    return [final_dir / path.relative_to(temp_dir) for path in produced]


def run_reports(
    request_paths: Iterable[Path],
    previews: bool = False,
    strict: bool = False,
) -> dict[str, list[str]]:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    results: dict[str, list[str]] = {ReportStatus.READY.value: [], ReportStatus.FAILED.value: []}
    for request_path in request_paths:
        slug = slug_from_name(request_path.stem)
        try:
            artifacts = process_request(request_path, previews=previews, strict=strict)
        except Exception as exc:
            logger.exception("Report build failed for %s", request_path)
            _write_error(slug, f"{type(exc).__name__}: {exc}")
            results[ReportStatus.FAILED.value].append(slug)
            continue
        logger.info("Report %s ready: %s", slug, ", ".join(path.name for path in artifacts))
        results[ReportStatus.READY.value].append(slug)
    return results
