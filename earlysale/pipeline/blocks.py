from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from reportlab.lib.units import mm

from ..config import (
    BLUE,
    BLUE_LIGHT,
    CARD_BG,
    CARD_GAP,
    FONT_BOLD,
    FONT_REGULAR,
    FOOTER_PALETTE,
    GREEN,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MIN_FONT_SIZE,
    ROW_PITCH,
    SECTION_GAP,
    TEXT,
    TONE_NEUTRAL,
    TONE_PALETTE,
    WHITE,
)
from ..formatting import CurrencyFormatter
from ..models import AssetInfo, DecompositionColumn, LineItem, SecondaryAssetSummary
from .surface import BoxStyle, LayoutError, Measure, Surface, TextStyle
from .text_fit import shrink_to_fit, wrap_words


logger = logging.getLogger(__name__)


LABEL_SIZE = 8.0
VALUE_SIZE = 9.0
LABEL_LEADING = 10.0

# Header / subheader bars
HEADER_H = 14 * mm
HEADER_PAD = 4 * mm
HEADER_SIZE = 12.0
SUBHEADER_H = 10 * mm
SUBHEADER_PAD = 3.5 * mm
SUBHEADER_SIZE = 10.0
BAR_INSET = 6 * mm

# Info grid
CARD_W = 55 * mm
CARD_H = 30 * mm
CARD_GUTTER = 4 * mm
SUBCOL_GAP = 4 * mm
SUBCOL_PAD = 2 * mm
LABEL_TRAIL = 3.0
VALUE_GAP = 3 * mm
MIN_VALUE_W = 15 * mm

# Secondary grid
SECONDARY_LABEL_W = 32 * mm
SECONDARY_VALUE_W = 45 * mm
SECONDARY_PAD = 2 * mm

# Decomposition stacks
STACK_INSET = 6 * mm
STACK_GUTTER = 10 * mm
TITLE_SIZE = 10.0
ITEM_MIN_H = 9 * mm
ITEM_PAD_Y = 2.5 * mm
ITEM_TEXT_INSET = 5 * mm
ITEM_LEADING = 11.0
LABEL_SHARE = 0.62
VALUE_SHARE = 0.33
FOOTER_H = 11 * mm
FOOTER_BASELINE_PAD = 3.6 * mm
FOOTER_SIZE = 10.0


class HeaderAlreadyDrawnError(LayoutError):
    """The primary info grid was asked to draw twice on one page."""


@dataclass
class PageState:
    header_drawn: bool = False


@dataclass(frozen=True)
class RenderContext:
    surface: Surface
    labels: Dict[str, str]
    format_currency: CurrencyFormatter
    strict: bool = False


def content_width(page_width: float) -> float:
    return page_width - MARGIN_LEFT - MARGIN_RIGHT


def _baseline(top: float, height: float, size: float) -> float:
    # cap height of Helvetica is roughly 0.7 em
    return top + (height + size * 0.7) / 2.0


def _draw_value(
    ctx: RenderContext,
    text: str,
    right_x: float,
    top: float,
    width: float,
    height: float,
    style: TextStyle,
) -> float:
    width = max(0.0, width)
    size = shrink_to_fit(text, width, ctx.surface.measure(style.font), style.size, MIN_FONT_SIZE)
    baseline = _baseline(top, height, size)
    if ctx.strict:
        with ctx.surface.clip(right_x - width, top, width, height):
            ctx.surface.text(right_x, baseline, text, style.with_size(size), align="right")
    else:
        ctx.surface.text(right_x, baseline, text, style.with_size(size), align="right")
    return size


def _bar(ctx: RenderContext, y: float, title: str, height: float, pad: float, size: float, fill) -> float:
    surface = ctx.surface
    x = MARGIN_LEFT
    w = content_width(surface.width)
    surface.round_rect(x, y, w, height, BoxStyle(fill=fill, radius=3))
    fit = shrink_to_fit(title, w - 2 * BAR_INSET, surface.measure(FONT_BOLD), size)
    surface.text(x + BAR_INSET, y + height - pad, title, TextStyle(FONT_BOLD, fit, WHITE))
    return y + height + SECTION_GAP


def draw_header_bar(ctx: RenderContext, y: float, title: str) -> float:
    return _bar(ctx, y, title, HEADER_H, HEADER_PAD, HEADER_SIZE, BLUE)


def draw_subheader(ctx: RenderContext, y: float, title: str) -> float:
    return _bar(ctx, y, title, SUBHEADER_H, SUBHEADER_PAD, SUBHEADER_SIZE, BLUE_LIGHT)


# -------------------- label/value groups --------------------
@dataclass(frozen=True)
class PairGroup:
    rows: Sequence[Tuple[str, str]]
    x: float
    label_width: float
    value_right: float
    value_width: float


def label_column_width(labels: Sequence[str], measure: Measure, size: float = LABEL_SIZE) -> float:
    """Widest label at the bold label size plus a trailing pad."""
    if not labels:
        return LABEL_TRAIL
    return max(measure(label, size) for label in labels) + LABEL_TRAIL


def _pair_height(line_count: int) -> float:
    return ROW_PITCH + (max(1, line_count) - 1) * LABEL_LEADING


def _draw_lockstep_rows(ctx: RenderContext, top: float, groups: Sequence[PairGroup]) -> float:
    """
    Row i of every group starts on the same y; the shared cursor advances by the
    tallest row at that index. Groups may differ in length. Returns the lowest
    bottom over all groups.
    """
    surface = ctx.surface
    bold = surface.measure(FONT_BOLD)
    label_style = TextStyle(FONT_BOLD, LABEL_SIZE, TEXT)
    value_style = TextStyle(FONT_REGULAR, VALUE_SIZE, BLUE)

    wrapped = [
        [wrap_words(label, group.label_width, bold, LABEL_SIZE) for label, _ in group.rows]
        for group in groups
    ]
    bottoms = [top for _ in groups]
    y = top
    depth = max((len(group.rows) for group in groups), default=0)
    for i in range(depth):
        row_h = 0.0
        for gi, group in enumerate(groups):
            if i >= len(group.rows):
                continue
            lines = wrapped[gi][i]
            h = _pair_height(len(lines))
            surface.text(
                group.x,
                _baseline(y, ROW_PITCH, LABEL_SIZE),
                lines,
                label_style,
                leading=LABEL_LEADING,
            )
            _draw_value(ctx, group.rows[i][1], group.value_right, y, group.value_width, ROW_PITCH, value_style)
            bottoms[gi] = y + h
            row_h = max(row_h, h)
        y += row_h
    return max(bottoms, default=top)


# -------------------- info grid --------------------
@dataclass(frozen=True)
class InfoGridGeometry:
    left_x: float
    right_x: float
    column_width: float
    left_label_width: float
    right_label_width: float
    card_x: float

    def value_width(self, label_width: float) -> float:
        """Room left for the value; never below MIN_VALUE_W, even if that overlaps a long label."""
        return max(MIN_VALUE_W, self.column_width - label_width - VALUE_GAP)

    def value_slot_collapsed(self, label_width: float) -> bool:
        return self.column_width - label_width - VALUE_GAP < MIN_VALUE_W


def info_grid_geometry(
    page_width: float,
    left_labels: Sequence[str],
    right_labels: Sequence[str],
    measure: Measure,
) -> InfoGridGeometry:
    total = content_width(page_width)
    block_w = total - CARD_W - CARD_GUTTER
    sub_w = (block_w - SUBCOL_GAP) / 2.0
    if sub_w <= 2 * SUBCOL_PAD:
        raise LayoutError(f"Page too narrow for info grid: {page_width}")
    left_x = MARGIN_LEFT + SUBCOL_PAD
    right_x = MARGIN_LEFT + sub_w + SUBCOL_GAP + SUBCOL_PAD
    return InfoGridGeometry(
        left_x=left_x,
        right_x=right_x,
        column_width=sub_w - 2 * SUBCOL_PAD,
        left_label_width=label_column_width(left_labels, measure),
        right_label_width=label_column_width(right_labels, measure),
        card_x=MARGIN_LEFT + total - CARD_W,
    )


def _draw_result_card(ctx: RenderContext, x: float, y: float, header: AssetInfo) -> None:
    surface = ctx.surface
    surface.round_rect(x, y, CARD_W, CARD_H, BoxStyle(fill=CARD_BG, radius=3))
    cx = x + CARD_W / 2.0
    inner = CARD_W - 2 * (3 * mm)

    lines = (
        (header.result_title, TextStyle(FONT_REGULAR, 9, TEXT), y + 9 * mm),
        (header.result_value, TextStyle(FONT_BOLD, 14, BLUE), y + CARD_H / 2.0 + 2 * mm),
        (header.result_subtitle, TextStyle(FONT_REGULAR, 8, GREEN), y + CARD_H - 6 * mm),
    )
    for text, style, baseline in lines:
        size = shrink_to_fit(text, inner, surface.measure(style.font), style.size)
        surface.text(cx, baseline, text, style.with_size(size), align="center")


def draw_info_grid(ctx: RenderContext, state: PageState, y: float, header: AssetInfo) -> float:
    if state.header_drawn:
        raise HeaderAlreadyDrawnError("Info grid already drawn on this page")
    state.header_drawn = True

    labels = ctx.labels
    fmt = ctx.format_currency
    left_rows = [
        (labels["asset_type"], header.asset_type),
        (labels["index"], header.index),
        (labels["rate"], header.rate),
        (labels["maturity"], header.maturity),
        (labels["tax_treatment"], header.tax_treatment),
    ]
    right_rows = [
        (labels["purchase_value"], fmt(header.purchase_value)),
        (labels["curve_value"], fmt(header.curve_value)),
        (labels["coupons_received"], fmt(header.coupons_received)),
        (labels["sale_value"], fmt(header.sale_value)),
    ]
    geo = info_grid_geometry(
        ctx.surface.width,
        [label for label, _ in left_rows],
        [label for label, _ in right_rows],
        ctx.surface.measure(FONT_BOLD),
    )
    for side, width in (("left", geo.left_label_width), ("right", geo.right_label_width)):
        if geo.value_slot_collapsed(width):
            logger.warning(
                "Info grid %s labels need %.1fpt of a %.1fpt column; values overlap the labels",
                side,
                width,
                geo.column_width,
            )
    groups = [
        PairGroup(
            rows=left_rows,
            x=geo.left_x,
            label_width=geo.left_label_width,
            value_right=geo.left_x + geo.column_width,
            value_width=geo.value_width(geo.left_label_width),
        ),
        PairGroup(
            rows=right_rows,
            x=geo.right_x,
            label_width=geo.right_label_width,
            value_right=geo.right_x + geo.column_width,
            value_width=geo.value_width(geo.right_label_width),
        ),
    ]
    rows_bottom = _draw_lockstep_rows(ctx, y, groups)
    _draw_result_card(ctx, geo.card_x, y, header)
    return max(rows_bottom, y + CARD_H) + SECTION_GAP


# -------------------- secondary asset grid --------------------
def draw_secondary_grid(ctx: RenderContext, y: float, summary: SecondaryAssetSummary) -> float:
    labels = ctx.labels
    half = content_width(ctx.surface.width) / 2.0
    span = SECONDARY_LABEL_W + VALUE_GAP + SECONDARY_VALUE_W
    left_x = MARGIN_LEFT + SECONDARY_PAD
    right_x = MARGIN_LEFT + half + SECONDARY_PAD

    groups = [
        PairGroup(
            rows=[
                (labels["asset_type"], summary.asset_type),
                (labels["distribution"], summary.distribution),
                (labels["maturity"], summary.maturity),
            ],
            x=left_x,
            label_width=SECONDARY_LABEL_W,
            value_right=left_x + span,
            value_width=SECONDARY_VALUE_W,
        ),
        PairGroup(
            rows=[
                (labels["purchase_value"], ctx.format_currency(summary.purchase_value)),
                (labels["tax_treatment"], summary.tax_treatment),
                (labels["rate"], summary.rate),
            ],
            x=right_x,
            label_width=SECONDARY_LABEL_W,
            value_right=right_x + span,
            value_width=SECONDARY_VALUE_W,
        ),
    ]
    return _draw_lockstep_rows(ctx, y, groups) + SECTION_GAP


# -------------------- decomposition stacks --------------------
def tone_colors(tone: str) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    return TONE_PALETTE.get(tone or TONE_NEUTRAL, TONE_PALETTE[TONE_NEUTRAL])


def item_card_height(line_count: int) -> float:
    needed = VALUE_SIZE + (max(1, line_count) - 1) * ITEM_LEADING + 2 * ITEM_PAD_Y
    return max(ITEM_MIN_H, needed)


def _draw_item_card(ctx: RenderContext, x: float, y: float, w: float, item: LineItem) -> float:
    surface = ctx.surface
    fill, border = tone_colors(item.tone)
    label_w = w * LABEL_SHARE - ITEM_TEXT_INSET
    value_w = w * VALUE_SHARE - ITEM_TEXT_INSET

    lines = wrap_words(item.label, label_w, surface.measure(FONT_REGULAR), VALUE_SIZE)
    h = item_card_height(len(lines))
    surface.round_rect(x, y, w, h, BoxStyle(fill=fill, stroke=border, line_width=0.8, radius=3))

    block_h = VALUE_SIZE + (len(lines) - 1) * ITEM_LEADING
    first_baseline = y + (h - block_h) / 2.0 + VALUE_SIZE * 0.8
    surface.text(
        x + ITEM_TEXT_INSET,
        first_baseline,
        lines,
        TextStyle(FONT_REGULAR, VALUE_SIZE, TEXT),
        leading=ITEM_LEADING,
    )
    _draw_value(
        ctx,
        item.value,
        x + w - ITEM_TEXT_INSET,
        y,
        value_w,
        h,
        TextStyle(FONT_BOLD, VALUE_SIZE, TEXT),
    )
    return h


def _draw_footer_card(ctx: RenderContext, x: float, y: float, w: float, total: str) -> float:
    surface = ctx.surface
    fill, border = FOOTER_PALETTE
    surface.round_rect(x, y, w, FOOTER_H, BoxStyle(fill=fill, stroke=border, line_width=0.8, radius=3))

    label = ctx.labels["final_value"]
    style = TextStyle(FONT_BOLD, FOOTER_SIZE, TEXT)
    baseline = y + FOOTER_H - FOOTER_BASELINE_PAD
    surface.text(x + ITEM_TEXT_INSET, baseline, label, style)

    label_w = surface.string_width(label, FONT_BOLD, FOOTER_SIZE)
    room = max(0.0, w - 2 * ITEM_TEXT_INSET - label_w - VALUE_GAP)
    size = shrink_to_fit(total, room, surface.measure(FONT_BOLD), FOOTER_SIZE)
    surface.text(x + w - ITEM_TEXT_INSET, baseline, total, style.with_size(size), align="right")
    return FOOTER_H


def _draw_stack(ctx: RenderContext, x: float, y: float, w: float, column: DecompositionColumn) -> float:
    surface = ctx.surface
    size = shrink_to_fit(column.title, w, surface.measure(FONT_BOLD), TITLE_SIZE)
    surface.text(x, y + TITLE_SIZE, column.title, TextStyle(FONT_BOLD, size, TEXT))

    cur = y + TITLE_SIZE + CARD_GAP
    for item in column.items:
        cur += _draw_item_card(ctx, x, cur, w, item) + CARD_GAP
    return cur + _draw_footer_card(ctx, x, cur, w, column.final_value)


def stack_columns(page_width: float) -> Tuple[float, float, float]:
    """(left x, right x, column width) of the two decomposition stacks."""
    x1 = MARGIN_LEFT + STACK_INSET
    total = content_width(page_width) - 2 * STACK_INSET
    col_w = (total - STACK_GUTTER) / 2.0
    return x1, x1 + col_w + STACK_GUTTER, col_w


def draw_decomposition(
    ctx: RenderContext,
    y: float,
    left: DecompositionColumn,
    right: DecompositionColumn,
) -> float:
    x1, x2, col_w = stack_columns(ctx.surface.width)
    bottoms: List[float] = [
        _draw_stack(ctx, x1, y, col_w, left),
        _draw_stack(ctx, x2, y, col_w, right),
    ]
    return max(bottoms) + SECTION_GAP
