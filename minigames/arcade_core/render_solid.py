"""
Solid Renderer
==============

Fast numpy-based draw surface. Rectangles are written straight into an RGB
array (with alpha blending for RGBA colors); text goes through OpenCV.
"""

from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from minigames.arcade_core.surface import (
    ALIGN_CENTER,
    BASELINE_ALPHABETIC,
    BASELINE_MIDDLE,
    Color,
)

# Hershey font height at font_scale=1.0, in pixels
_HERSHEY_PX = 22.0


class ArraySurface:
    """
    Draw surface backed by a (height, width, 3) uint8 array.

    Engines draw in their own logical coordinates; ``scale`` maps those to
    pixels, e.g. a 200x200 catch field on a 400x400 image uses scale 2.0.

    OpenCV's Hershey fonts only cover ASCII, so non-ASCII glyphs (emoji)
    are drawn as solid discs in the requested color.
    """

    def __init__(
        self,
        width: int,
        height: int,
        scale: float = 1.0,
        background: Color = (255, 255, 255)
    ):
        """
        Initialize surface.

        Args:
            width: Logical width.
            height: Logical height.
            scale: Pixels per logical unit.
            background: Initial fill color.
        """
        self.width = width
        self.height = height
        self._scale = scale
        self._background = np.array(background[:3], dtype=np.uint8)
        self._img = np.zeros(
            (int(round(height * scale)), int(round(width * scale)), 3),
            dtype=np.uint8
        )
        self.clear()

    @property
    def image(self) -> np.ndarray:
        """The backing RGB array (not a copy)."""
        return self._img

    def to_array(self) -> np.ndarray:
        """Copy of the current image."""
        return self._img.copy()

    def clear(self) -> None:
        """Reset to the background color."""
        self._img[:] = self._background

    def _px(self, v: float) -> int:
        return int(round(v * self._scale))

    def _clip_box(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        img_h, img_w = self._img.shape[:2]
        x0 = max(0, self._px(x))
        y0 = max(0, self._px(y))
        x1 = min(img_w, self._px(x + w))
        y1 = min(img_h, self._px(y + h))
        return x0, y0, x1, y1

    def _paint(self, region: np.ndarray, color: Color, mask: np.ndarray = None) -> None:
        """Write a color into a region view, blending if it has alpha."""
        rgb = np.array(color[:3], dtype=np.float32)
        alpha = color[3] / 255.0 if len(color) == 4 else 1.0

        if mask is None:
            if alpha >= 1.0:
                region[:] = rgb.astype(np.uint8)
            else:
                blended = region.astype(np.float32) * (1.0 - alpha) + rgb * alpha
                region[:] = blended.astype(np.uint8)
            return

        if alpha >= 1.0:
            region[mask] = rgb.astype(np.uint8)
        else:
            pixels = region[mask].astype(np.float32)
            region[mask] = (pixels * (1.0 - alpha) + rgb * alpha).astype(np.uint8)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        x0, y0, x1, y1 = self._clip_box(x, y, w, h)
        if x0 >= x1 or y0 >= y1:
            return
        self._paint(self._img[y0:y1, x0:x1], color)

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        """One-pixel outline."""
        x0, y0, x1, y1 = self._clip_box(x, y, w, h)
        if x0 >= x1 or y0 >= y1:
            return
        region = self._img[y0:y1, x0:x1]
        mask = np.zeros(region.shape[:2], dtype=bool)
        mask[0, :] = True
        mask[-1, :] = True
        mask[:, 0] = True
        mask[:, -1] = True
        self._paint(region, color, mask)

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color,
        size: int = 12,
        bold: bool = False,
        align: str = "start",
        baseline: str = BASELINE_ALPHABETIC
    ) -> None:
        if not text:
            return

        px = self._px(x)
        py = self._px(y)
        pixel_size = max(1.0, size * self._scale)

        if not text.isascii():
            self._draw_glyph_disc(px, py, pixel_size, color, align, baseline)
            return

        font = cv2.FONT_HERSHEY_SIMPLEX
        font_scale = pixel_size / _HERSHEY_PX
        thickness = 2 if bold else 1
        (text_w, text_h), _ = cv2.getTextSize(text, font, font_scale, thickness)

        if align == ALIGN_CENTER:
            px -= text_w // 2
        if baseline == BASELINE_MIDDLE:
            py += text_h // 2

        rgb = tuple(int(c) for c in color[:3])
        if len(color) == 4 and color[3] < 255:
            layer = self._img.copy()
            cv2.putText(layer, text, (px, py), font, font_scale, rgb, thickness, cv2.LINE_AA)
            alpha = color[3] / 255.0
            self._img[:] = (
                self._img.astype(np.float32) * (1.0 - alpha) + layer.astype(np.float32) * alpha
            ).astype(np.uint8)
        else:
            cv2.putText(self._img, text, (px, py), font, font_scale, rgb, thickness, cv2.LINE_AA)

    def _draw_glyph_disc(
        self,
        cx: int,
        cy: int,
        pixel_size: float,
        color: Color,
        align: str,
        baseline: str
    ) -> None:
        """Stand-in for a glyph the font cannot draw."""
        radius = max(1, int(pixel_size * 0.4))
        if align != ALIGN_CENTER:
            cx += radius
        if baseline != BASELINE_MIDDLE:
            cy -= radius

        height, width = self._img.shape[:2]
        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)
        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max), np.arange(x_min, x_max), indexing="ij"
        )
        mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius ** 2
        self._paint(self._img[y_min:y_max, x_min:x_max], color, mask)
