from __future__ import annotations

import io
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence, Tuple, Union

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..config import FONT_REGULAR, RGB, TEXT


Measure = Callable[[str, float], float]


class LayoutError(ValueError):
    """Template or geometry bug: raised immediately, never recovered from."""


@dataclass(frozen=True)
class TextStyle:
    font: str = FONT_REGULAR
    size: float = 9.0
    color: RGB = TEXT

    def with_size(self, size: float) -> "TextStyle":
        return TextStyle(self.font, size, self.color)


@dataclass(frozen=True)
class BoxStyle:
    fill: Optional[RGB] = None
    stroke: Optional[RGB] = None
    line_width: float = 1.0
    radius: float = 3.0


def _rgb(value: RGB) -> colors.Color:
    r, g, b = value
    return colors.Color(r / 255.0, g / 255.0, b / 255.0)


class Surface:
    """
    Drawing surface over a ReportLab canvas.

    Coordinates are top-down: ``y`` grows towards the bottom of the page,
    text ``y`` is the baseline. Every draw call takes its style explicitly
    and runs inside saveState/restoreState, so no font, color or line width
    survives past the call that set it.
    """

    def __init__(
        self,
        page_size: Tuple[float, float] = A4,
        supports_clipping: bool = True,
    ) -> None:
        self._buffer = io.BytesIO()
        # invariant=1 drops timestamps and random ids from the output
        self._canv = canvas.Canvas(self._buffer, pagesize=page_size, invariant=1)
        self.width, self.height = page_size
        self.supports_clipping = supports_clipping
        self.page_count = 1

    def string_width(self, text: str, font: str, size: float) -> float:
        return self._canv.stringWidth(text, font, size)

    def measure(self, font: str) -> Measure:
        return lambda text, size: self.string_width(text, font, size)

    @contextmanager
    def _scoped(self) -> Iterator[canvas.Canvas]:
        self._canv.saveState()
        try:
            yield self._canv
        finally:
            self._canv.restoreState()

    def _box_flags(self, canv: canvas.Canvas, box: BoxStyle) -> Tuple[int, int]:
        if box.fill is not None:
            canv.setFillColor(_rgb(box.fill))
        if box.stroke is not None:
            canv.setStrokeColor(_rgb(box.stroke))
            canv.setLineWidth(box.line_width)
        return (1 if box.stroke is not None else 0, 1 if box.fill is not None else 0)

    def rect(self, x: float, y: float, w: float, h: float, box: BoxStyle) -> None:
        with self._scoped() as canv:
            stroke, fill = self._box_flags(canv, box)
            canv.rect(x, self.height - y - h, w, h, stroke=stroke, fill=fill)

    def round_rect(self, x: float, y: float, w: float, h: float, box: BoxStyle) -> None:
        radius = max(0.0, min(box.radius, w / 2.0, h / 2.0))
        with self._scoped() as canv:
            stroke, fill = self._box_flags(canv, box)
            canv.roundRect(x, self.height - y - h, w, h, radius=radius, stroke=stroke, fill=fill)

    def text(
        self,
        x: float,
        y: float,
        text: Union[str, Sequence[str]],
        style: TextStyle,
        align: str = "left",
        leading: Optional[float] = None,
    ) -> None:
        lines = [text] if isinstance(text, str) else list(text)
        step = leading if leading is not None else style.size * 1.2
        with self._scoped() as canv:
            canv.setFont(style.font, style.size)
            canv.setFillColor(_rgb(style.color))
            for i, line in enumerate(lines):
                baseline = self.height - (y + i * step)
                if align == "left":
                    canv.drawString(x, baseline, line)
                elif align == "center":
                    canv.drawCentredString(x, baseline, line)
                elif align == "right":
                    canv.drawRightString(x, baseline, line)
                else:
                    raise LayoutError(f"Unknown text alignment: {align}")

    @contextmanager
    def clip(self, x: float, y: float, w: float, h: float) -> Iterator[None]:
        values = (x, y, w, h)
        if not all(math.isfinite(v) for v in values):
            raise LayoutError(f"Clip region must be finite: {values}")
        if w < 0 or h < 0:
            raise LayoutError(f"Clip region must have non-negative size: {values}")
        if not self.supports_clipping:
            yield
            return
        with self._scoped() as canv:
            path = canv.beginPath()
            path.rect(x, self.height - y - h, w, h)
            canv.clipPath(path, stroke=0, fill=0)
            yield

    def new_page(self) -> None:
        self._canv.showPage()
        self.page_count += 1

    def finish(self) -> bytes:
        self._canv.save()
        return self._buffer.getvalue()
