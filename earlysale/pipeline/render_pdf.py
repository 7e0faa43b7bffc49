from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from reportlab.lib.pagesizes import A4

from ..config import MARGIN_BOTTOM, MARGIN_TOP, labels_for
from ..formatting import CurrencyFormatter, format_brl
from ..models import PageRecord, ReportRequest
from .blocks import (
    PageState,
    RenderContext,
    draw_decomposition,
    draw_header_bar,
    draw_info_grid,
    draw_secondary_grid,
    draw_subheader,
)
from .surface import Surface


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockExtent:
    name: str
    top: float
    next_y: float


@dataclass
class PageLayout:
    blocks: List[BlockExtent] = field(default_factory=list)
    bottom: float = 0.0
    overflow: bool = False


def render_page(
    surface: Surface,
    page: PageRecord,
    labels: Dict[str, str],
    format_currency: CurrencyFormatter = format_brl,
    strict: bool = False,
) -> PageLayout:
    ctx = RenderContext(surface=surface, labels=labels, format_currency=format_currency, strict=strict)
    state = PageState()

    steps: List[Tuple[str, Callable[[float], float]]] = [
        ("header_bar", lambda y: draw_header_bar(ctx, y, page.header.title)),
        ("info_grid", lambda y: draw_info_grid(ctx, state, y, page.header)),
        ("secondary_subheader", lambda y: draw_subheader(ctx, y, labels["secondary_title"])),
        ("secondary_grid", lambda y: draw_secondary_grid(ctx, y, page.secondary)),
        ("decomposition_subheader", lambda y: draw_subheader(ctx, y, labels["decomposition_title"])),
        ("decomposition", lambda y: draw_decomposition(ctx, y, page.left, page.right)),
    ]

    layout = PageLayout()
    y = MARGIN_TOP
    for name, step in steps:
        next_y = step(y)
        layout.blocks.append(BlockExtent(name, y, next_y))
        y = next_y

    layout.bottom = y
    limit = surface.height - MARGIN_BOTTOM
    if y > limit:
        # emitted as laid out; no reflow onto a new page
        layout.overflow = True
        logger.warning(
            "Page %d content ends at %.1fpt, past the bottom margin (%.1fpt)",
            surface.page_count,
            y,
            limit,
        )
    return layout


def build_report(
    request: ReportRequest,
    format_currency: CurrencyFormatter = format_brl,
    page_size: Tuple[float, float] = A4,
    strict: bool = False,
    supports_clipping: bool = True,
) -> bytes:
    surface = Surface(page_size, supports_clipping=supports_clipping)
    labels = labels_for(request.language)

    for i, page in enumerate(request.pages):
        if i:
            surface.new_page()
        render_page(surface, page, labels, format_currency=format_currency, strict=strict)

    data = surface.finish()
    logger.info("Built report with %d page(s), %d bytes", len(request.pages), len(data))
    return data


def write_report(request: ReportRequest, output_path: Path, **kwargs) -> Path:
    data = build_report(request, **kwargs)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    return output_path
