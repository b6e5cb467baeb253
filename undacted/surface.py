"""
Raster drawing surfaces.

The report compositor draws through the RasterSurface capability so that it
never depends on a particular rendering API. PillowSurface implements it over
an in-memory Pillow image.
"""

import math
from functools import lru_cache
from typing import Optional, Protocol

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .models import PixelBuffer, Rect


Color = tuple[int, int, int, int]


class RasterSurface(Protocol):
    """Pixel access and primitive drawing over an RGBA raster."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def get_pixels(self, rect: Rect) -> PixelBuffer: ...

    def paste(self, buffer: PixelBuffer, x: int = 0, y: int = 0) -> None: ...

    def put_rect(self, rect: Rect, color: Color) -> None: ...

    def put_text(
        self,
        text: str,
        position: tuple[float, float],
        color: Color,
        font_size: int,
        anchor: str = "ls",
        bold: bool = False,
        clip: Optional[Rect] = None,
        backing: Optional[Color] = None,
    ) -> None: ...

    def snapshot(self) -> PixelBuffer: ...


@lru_cache(maxsize=32)
def load_font(size: int) -> ImageFont.FreeTypeFont:
    """Load Pillow's bundled scalable font at a pixel size."""
    return ImageFont.load_default(size=size)


def put_backing(
    image: Image.Image,
    origin: tuple[float, float],
    text: str,
    font: ImageFont.FreeTypeFont,
    anchor: str,
    stroke: int,
    color: Color
) -> None:
    """
    Composite a plate under where text will be drawn, in place.

    The plate covers the text bounding box and the pixel holding the anchor
    point, clipped to the image.
    """
    left, top, right, bottom = ImageDraw.Draw(image).textbbox(
        origin, text, font=font, anchor=anchor, stroke_width=stroke
    )
    ax, ay = math.floor(origin[0]), math.floor(origin[1])

    x0 = max(0, min(math.floor(left), ax))
    y0 = max(0, min(math.floor(top), ay))
    x1 = min(image.width, max(math.ceil(right), ax + 1))
    y1 = min(image.height, max(math.ceil(bottom), ay + 1))
    if x1 <= x0 or y1 <= y0:
        return

    plate = Image.new("RGBA", (x1 - x0, y1 - y0), color)
    image.alpha_composite(plate, dest=(x0, y0))


class PillowSurface:
    """
    RasterSurface backed by a Pillow RGBA image.

    Text anchors follow Pillow's two-letter convention: "ls" is left/baseline
    (a 2D canvas' default), "mm" is centered on both axes.
    """

    def __init__(self, width: int, height: int, background: Color = (0, 0, 0, 0)):
        self.image = Image.new("RGBA", (width, height), background)
        self._draw = ImageDraw.Draw(self.image)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def _clip_box(self, rect: Rect) -> Optional[tuple[int, int, int, int]]:
        x0 = max(0, rect.x)
        y0 = max(0, rect.y)
        x1 = min(self.width, rect.x1)
        y1 = min(self.height, rect.y1)
        if x1 <= x0 or y1 <= y0:
            return None
        return (x0, y0, x1, y1)

    def get_pixels(self, rect: Rect) -> PixelBuffer:
        box = self._clip_box(rect)
        if box is None:
            return PixelBuffer(np.zeros((0, 0, 4), dtype=np.uint8))
        return PixelBuffer(np.array(self.image.crop(box)))

    def paste(self, buffer: PixelBuffer, x: int = 0, y: int = 0) -> None:
        """Copy a buffer onto the surface, replacing pixels (no blending)."""
        source = Image.fromarray(np.array(buffer.pixels))
        self.image.paste(source, (x, y))

    def put_rect(self, rect: Rect, color: Color) -> None:
        box = self._clip_box(rect)
        if box is None:
            return
        x0, y0, x1, y1 = box
        # Pillow rectangles include their far edge
        self._draw.rectangle([x0, y0, x1 - 1, y1 - 1], fill=color)

    def put_text(
        self,
        text: str,
        position: tuple[float, float],
        color: Color,
        font_size: int,
        anchor: str = "ls",
        bold: bool = False,
        clip: Optional[Rect] = None,
        backing: Optional[Color] = None,
    ) -> None:
        """
        Draw a line of text.

        Args:
            text: Text to render
            position: Anchor point in surface coordinates
            color: RGBA fill
            font_size: Font size in pixels
            anchor: Pillow text anchor
            bold: Thicken glyphs with a same-colored stroke
            clip: Only pixels inside this rect are modified
            backing: RGBA plate composited under the text's bounding box
                (extended to cover the anchor pixel) before the glyphs
        """
        if not text:
            return

        font = load_font(max(1, int(font_size)))
        stroke = max(1, round(font_size / 20)) if bold else 0

        if clip is None:
            box = (0, 0, self.width, self.height)
        else:
            box = self._clip_box(clip)
            if box is None:
                return

        x0, y0 = box[0], box[1]
        origin = (position[0] - x0, position[1] - y0)
        tile = self.image.crop(box)

        if backing is not None:
            put_backing(tile, origin, text, font, anchor, stroke, backing)

        ImageDraw.Draw(tile).text(
            origin, text, fill=color, font=font,
            anchor=anchor, stroke_width=stroke, stroke_fill=color,
        )
        self.image.paste(tile, (x0, y0))

    def snapshot(self) -> PixelBuffer:
        return PixelBuffer(np.array(self.image))
