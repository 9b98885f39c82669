"""Signature capture: pointer strokes to a PNG raster."""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw

from utils.app_settings import ReportSettings

from .models import SignatureImage

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Stroke = Tuple[Point, ...]

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 200


class SignatureCapture:
    """Accumulates pen strokes for one signature pad.

    Coordinates are logical canvas units.  The raster is produced at
    ``size * pixel_ratio`` pixels, matching a high-DPI canvas.

    Resizing the pad clears it: recorded coordinates belong to the old
    geometry and are not rescaled.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        *,
        pixel_ratio: float = 1.0,
        pen_color: str = "#000000",
        min_width: float = 1.0,
        max_width: float = 3.0,
    ) -> None:
        self._check_geometry(width, height, pixel_ratio)
        self._width = int(width)
        self._height = int(height)
        self._pixel_ratio = float(pixel_ratio)
        self._pen_color = pen_color
        self._pen_rgba = ImageColor.getrgb(pen_color)[:3] + (255,)
        self._min_width = float(min_width)
        self._max_width = float(max_width)
        self._strokes: List[Stroke] = []
        self._current: Optional[List[Point]] = None

    @classmethod
    def from_settings(cls, settings: ReportSettings, *, pixel_ratio: float = 1.0) -> "SignatureCapture":
        return cls(
            settings.signature_width,
            settings.signature_height,
            pixel_ratio=pixel_ratio,
            pen_color=settings.pen_color,
            min_width=settings.pen_min_width,
            max_width=settings.pen_max_width,
        )

    @staticmethod
    def _check_geometry(width: int, height: int, pixel_ratio: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if pixel_ratio <= 0:
            raise ValueError(f"Pixel ratio must be positive, got {pixel_ratio}")

    # --- geometry --------------------------------------------------------
    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def pixel_ratio(self) -> float:
        return self._pixel_ratio

    @property
    def pixel_size(self) -> Tuple[int, int]:
        ratio = max(self._pixel_ratio, 1.0)
        return max(1, round(self._width * ratio)), max(1, round(self._height * ratio))

    def resize(self, width: int, height: int, pixel_ratio: Optional[float] = None) -> None:
        """Adopt a new canvas geometry and discard every stroke."""

        ratio = self._pixel_ratio if pixel_ratio is None else float(pixel_ratio)
        self._check_geometry(width, height, ratio)
        self._width, self._height, self._pixel_ratio = int(width), int(height), ratio
        if self._strokes or self._current:
            logger.debug("Signature pad resized to %sx%s; clearing %d stroke(s)", width, height, len(self._strokes))
        self.clear()

    # --- pointer events --------------------------------------------------
    def pointer_down(self, x: float, y: float) -> None:
        self._current = [(float(x), float(y))]

    def pointer_move(self, x: float, y: float) -> None:
        if self._current is not None:
            self._current.append((float(x), float(y)))

    def pointer_up(self) -> None:
        if self._current:
            self._strokes.append(tuple(self._current))
        self._current = None

    def add_stroke(self, points: Iterable[Sequence[float]]) -> None:
        stroke = tuple((float(x), float(y)) for x, y in points)
        if not stroke:
            raise ValueError("A stroke needs at least one point")
        self._strokes.append(stroke)

    # --- state -----------------------------------------------------------
    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._strokes)

    @property
    def current_stroke(self) -> Stroke:
        return tuple(self._current or ())

    def is_empty(self) -> bool:
        return not self._strokes

    def clear(self) -> None:
        self._strokes.clear()
        self._current = None

    # --- export ----------------------------------------------------------
    @property
    def pen_color(self) -> str:
        return self._pen_color

    @property
    def pen_width(self) -> float:
        return (self._min_width + self._max_width) / 2.0

    def export_image(self) -> SignatureImage:
        """Rasterise the recorded strokes into a transparent PNG."""

        w, h = self.pixel_size
        scale = max(self._pixel_ratio, 1.0)
        img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        drw = ImageDraw.Draw(img)
        width = max(1, round(self.pen_width * scale))
        radius = width / 2.0
        for stroke in self._strokes:
            poly = [(x * scale, y * scale) for x, y in stroke]
            if len(poly) >= 2:
                drw.line(poly, fill=self._pen_rgba, width=width, joint="curve")
                ends = (poly[0], poly[-1])
            else:
                ends = (poly[0],)
            # Round caps, matching the pad's on-screen pen.
            for x, y in ends:
                drw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=self._pen_rgba)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return SignatureImage(png=buf.getvalue(), width=w, height=h, is_empty=self.is_empty())


__all__ = ["SignatureCapture", "Point", "Stroke", "DEFAULT_WIDTH", "DEFAULT_HEIGHT"]
