"""
Full Pygame Renderer
====================

Draw surface adapter over a pygame Surface, used for on-screen human play.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from minigames.arcade_core.surface import (
    ALIGN_CENTER,
    BASELINE_ALPHABETIC,
    BASELINE_MIDDLE,
    Color,
)


class PygameSurface:
    """
    Engine draw target that paints onto a pygame Surface.

    Supports:
    - Logical-to-pixel scaling
    - Translucent fills (RGBA colors)
    - Font cache per (size, bold)
    - RGB array export for agents
    """

    def __init__(
        self,
        target: Optional["pygame.Surface"] = None,
        width: int = 500,
        height: int = 500,
        scale: float = 1.0
    ):
        """
        Initialize surface.

        Args:
            target: Surface to draw on (e.g. the display). A new off-screen
                surface of the scaled size is created if None.
            width: Logical width.
            height: Logical height.
            scale: Pixels per logical unit.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameSurface")

        if not pygame.get_init():
            pygame.init()
        pygame.font.init()

        self.width = width
        self.height = height
        self._scale = scale
        if target is None:
            target = pygame.Surface((int(width * scale), int(height * scale)))
        self._target = target
        self._fonts: Dict[Tuple[int, bool], "pygame.font.Font"] = {}

    @property
    def target(self) -> "pygame.Surface":
        return self._target

    def _rect(self, x: float, y: float, w: float, h: float) -> "pygame.Rect":
        s = self._scale
        return pygame.Rect(int(round(x * s)), int(round(y * s)), int(round(w * s)), int(round(h * s)))

    def _font(self, size: int, bold: bool) -> "pygame.font.Font":
        key = (max(1, int(size * self._scale)), bold)
        if key not in self._fonts:
            font = pygame.font.Font(None, int(key[0] * 1.3))
            font.set_bold(bold)
            self._fonts[key] = font
        return self._fonts[key]

    def clear(self, color: Color = (255, 255, 255)) -> None:
        self._target.fill(color[:3])

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        rect = self._rect(x, y, w, h)
        if len(color) == 4 and color[3] < 255:
            overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
            overlay.fill(color)
            self._target.blit(overlay, rect.topleft)
        else:
            pygame.draw.rect(self._target, color[:3], rect)

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        pygame.draw.rect(self._target, color[:3], self._rect(x, y, w, h), 1)

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

        px = int(round(x * self._scale))
        py = int(round(y * self._scale))

        if not text.isascii():
            # Default font has no emoji; draw a disc in the glyph color
            radius = max(1, int(size * self._scale * 0.4))
            cx = px if align == ALIGN_CENTER else px + radius
            cy = py if baseline == BASELINE_MIDDLE else py - radius
            pygame.draw.circle(self._target, color[:3], (cx, cy), radius)
            return

        rendered = self._font(size, bold).render(text, True, color[:3])
        rect = rendered.get_rect()
        if align == ALIGN_CENTER:
            rect.centerx = px
        else:
            rect.left = px
        if baseline == BASELINE_MIDDLE:
            rect.centery = py
        else:
            rect.bottom = py
        self._target.blit(rendered, rect)

    def to_array(self) -> np.ndarray:
        """(height, width, 3) uint8 copy of the target."""
        array = pygame.surfarray.array3d(self._target)
        return np.transpose(array, (1, 0, 2))
