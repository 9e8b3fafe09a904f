"""
Drawing Surface
===============

Minimal draw-command interface the engines render onto.

Engines only ever issue filled rectangles, stroked rectangles and text, so
any backend (numpy canvas, pygame window, command recorder) can act as a
target.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

Color = Tuple[int, ...]  # RGB or RGBA

ALIGN_START = "start"
ALIGN_CENTER = "center"
BASELINE_ALPHABETIC = "alphabetic"
BASELINE_MIDDLE = "middle"


class Surface(Protocol):
    """Draw target accepted by ``CatchGame.render`` and ``MinesGame.render``."""

    width: int
    height: int

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        ...

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        ...

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color,
        size: int = 12,
        bold: bool = False,
        align: str = ALIGN_START,
        baseline: str = BASELINE_ALPHABETIC
    ) -> None:
        ...


@dataclass
class DrawCommand:
    """One recorded draw call."""
    op: str
    args: Dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.args[key]


class RecordingSurface:
    """
    Surface that stores draw calls instead of drawing.

    Useful for tests and for inspecting what an engine renders without a
    pixel backend.
    """

    def __init__(self, width: int = 500, height: int = 500):
        self.width = width
        self.height = height
        self.commands: List[DrawCommand] = []

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        self.commands.append(DrawCommand("fill_rect", {"x": x, "y": y, "w": w, "h": h, "color": tuple(color)}))

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        self.commands.append(DrawCommand("stroke_rect", {"x": x, "y": y, "w": w, "h": h, "color": tuple(color)}))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color,
        size: int = 12,
        bold: bool = False,
        align: str = ALIGN_START,
        baseline: str = BASELINE_ALPHABETIC
    ) -> None:
        self.commands.append(DrawCommand("draw_text", {
            "text": text,
            "x": x,
            "y": y,
            "color": tuple(color),
            "size": size,
            "bold": bold,
            "align": align,
            "baseline": baseline,
        }))

    def ops(self, op: Optional[str] = None) -> List[DrawCommand]:
        """Recorded commands, optionally filtered by operation name."""
        if op is None:
            return list(self.commands)
        return [c for c in self.commands if c.op == op]

    def texts(self) -> List[str]:
        """All text strings drawn, in order."""
        return [c["text"] for c in self.commands if c.op == "draw_text"]

    def clear(self) -> None:
        self.commands = []
