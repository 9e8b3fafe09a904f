"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

Color = Tuple[int, ...]

# Locked mines board dimensions
BOARD_ROWS = 9
BOARD_COLS = 9
BOARD_MINES = 9


@dataclass(frozen=True)
class FieldConfig:
    """Logical drawing area of the catch game."""
    width: int
    height: int


@dataclass(frozen=True)
class BasketConfig:
    """Basket geometry and catch band."""
    y: float
    width: int
    height: int
    band_top: float              # Inclusive upper edge of the catch band
    band_bottom: float           # Inclusive lower edge of the catch band


@dataclass(frozen=True)
class TimerConfig:
    """Round countdown settings."""
    time_limit: int              # Seconds per round
    tick_seconds: float          # Countdown cadence


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn cadence and difficulty curve."""
    base_interval_ms: int
    min_interval_ms: int
    interval_step_ms: int
    base_speed: float
    speed_per_level: float


@dataclass(frozen=True)
class CategoryConfig:
    """Configuration for a single falling item category."""
    id: int
    name: str
    score: int
    weight: float
    color: Color
    glyph: str
    is_hazard: bool = False      # If True, catching it ends the round


@dataclass(frozen=True)
class LabelConfig:
    """Position labels recognised by the basket lookup."""
    left: Tuple[str, ...]
    right: Tuple[str, ...]
    center: Tuple[str, ...]


@dataclass(frozen=True)
class HudConfig:
    """Heads-up display and game-over panel styling."""
    text_color: Color
    font_size: int
    score_pos: Tuple[float, float]
    level_pos: Tuple[float, float]
    time_pos: Tuple[float, float]
    basket_glyph: str
    basket_color: Color
    basket_font_size: int
    item_font_size: int
    overlay_color: Color
    title_color: Color
    score_color: Color
    bomb_alert: str


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium wrapper parameters."""
    fps: int
    max_items: int


@dataclass(frozen=True)
class CatchConfig:
    """Complete configuration of the falling-item game."""
    field: FieldConfig
    lanes: Tuple[float, ...]
    basket: BasketConfig
    despawn_y: float
    timer: TimerConfig
    spawn: SpawnConfig
    points_per_level: int
    labels: LabelConfig
    categories: Tuple[CategoryConfig, ...]
    hud: HudConfig
    env: EnvConfig

    @property
    def num_lanes(self) -> int:
        return len(self.lanes)

    @property
    def center_lane(self) -> int:
        """Index of the middle lane."""
        return len(self.lanes) // 2


@dataclass(frozen=True)
class MinesColors:
    """Minesweeper board palette."""
    background: Color
    border: Color
    revealed: Color
    mine_background: Color
    hidden: Color
    mine_glyph: Color
    flag_glyph: Color


@dataclass(frozen=True)
class MinesConfig:
    """Configuration of the minesweeper board."""
    rows: int
    cols: int
    mine_count: int
    board_pixels: int
    colors: MinesColors
    number_colors: Tuple[Color, ...]
    font_size: int
    mine_glyph: str
    flag_glyph: str
    mine_alert: str

    @property
    def cell_size(self) -> float:
        """Pixel size of one (square) cell."""
        return self.board_pixels / self.cols

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    @property
    def safe_cell_count(self) -> int:
        """Number of non-mine cells."""
        return self.cell_count - self.mine_count


@dataclass(frozen=True)
class GameConfig:
    """
    Complete configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    catch: CatchConfig
    mines: MinesConfig


def _parse_color(color_data: List, allow_alpha: bool = False) -> Color:
    """Parse an RGB (or RGBA) color from YAML."""
    sizes = (3, 4) if allow_alpha else (3,)
    if len(color_data) not in sizes:
        expected = "[R, G, B] or [R, G, B, A]" if allow_alpha else "[R, G, B]"
        raise ValueError(f"Color must be {expected}, got {color_data}")
    color = tuple(int(c) for c in color_data)
    for channel in color:
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channel out of range [0, 255]: {color_data}")
    return color


def _parse_point(point_data: List) -> Tuple[float, float]:
    """Parse an [x, y] pair from YAML."""
    if len(point_data) != 2:
        raise ValueError(f"Point must have 2 values [x, y], got {point_data}")
    return (float(point_data[0]), float(point_data[1]))


def _parse_category(index: int, data: dict) -> CategoryConfig:
    """Parse a single item category from YAML."""
    return CategoryConfig(
        id=index,
        name=str(data["name"]),
        score=int(data["score"]),
        weight=float(data["weight"]),
        color=_parse_color(data["color"]),
        glyph=str(data.get("glyph", "?")),
        is_hazard=bool(data.get("is_hazard", False))
    )


def _parse_labels(data: Dict) -> LabelConfig:
    """Parse the recognised position labels."""
    def as_tuple(key: str) -> Tuple[str, ...]:
        return tuple(str(label) for label in data.get(key, [key]))

    return LabelConfig(
        left=as_tuple("left"),
        right=as_tuple("right"),
        center=as_tuple("center")
    )


def _parse_catch(raw: dict) -> CatchConfig:
    """Parse the catch section."""
    field_data = raw["field"]
    field = FieldConfig(
        width=int(field_data["width"]),
        height=int(field_data["height"])
    )

    basket_data = raw["basket"]
    band = _parse_point(basket_data["catch_band"])
    basket = BasketConfig(
        y=float(basket_data["y"]),
        width=int(basket_data.get("width", 40)),
        height=int(basket_data.get("height", 20)),
        band_top=band[0],
        band_bottom=band[1]
    )

    timer_data = raw["timer"]
    timer = TimerConfig(
        time_limit=int(timer_data["time_limit"]),
        tick_seconds=float(timer_data.get("tick_seconds", 1.0))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        base_interval_ms=int(spawn_data["base_interval_ms"]),
        min_interval_ms=int(spawn_data["min_interval_ms"]),
        interval_step_ms=int(spawn_data["interval_step_ms"]),
        base_speed=float(spawn_data["base_speed"]),
        speed_per_level=float(spawn_data["speed_per_level"])
    )

    hud_data = raw["hud"]
    hud = HudConfig(
        text_color=_parse_color(hud_data["text_color"]),
        font_size=int(hud_data.get("font_size", 12)),
        score_pos=_parse_point(hud_data["score_pos"]),
        level_pos=_parse_point(hud_data["level_pos"]),
        time_pos=_parse_point(hud_data["time_pos"]),
        basket_glyph=str(hud_data.get("basket_glyph", "U")),
        basket_color=_parse_color(hud_data.get("basket_color", [0, 0, 255])),
        basket_font_size=int(hud_data.get("basket_font_size", 30)),
        item_font_size=int(hud_data.get("item_font_size", 24)),
        overlay_color=_parse_color(hud_data["overlay_color"], allow_alpha=True),
        title_color=_parse_color(hud_data["title_color"]),
        score_color=_parse_color(hud_data["score_color"]),
        bomb_alert=str(hud_data.get("bomb_alert", "Game over!"))
    )

    env_data = raw.get("env", {})
    env = EnvConfig(
        fps=int(env_data.get("fps", 30)),
        max_items=int(env_data.get("max_items", 32))
    )

    return CatchConfig(
        field=field,
        lanes=tuple(float(x) for x in raw["lanes"]),
        basket=basket,
        despawn_y=float(raw["despawn_y"]),
        timer=timer,
        spawn=spawn,
        points_per_level=int(raw["scoring"]["points_per_level"]),
        labels=_parse_labels(raw.get("labels", {})),
        categories=tuple(
            _parse_category(i, c) for i, c in enumerate(raw["categories"])
        ),
        hud=hud,
        env=env
    )


def _parse_mines(raw: dict) -> MinesConfig:
    """Parse the mines section."""
    colors_data = raw["colors"]
    colors = MinesColors(
        background=_parse_color(colors_data["background"]),
        border=_parse_color(colors_data["border"]),
        revealed=_parse_color(colors_data["revealed"]),
        mine_background=_parse_color(colors_data["mine_background"]),
        hidden=_parse_color(colors_data["hidden"]),
        mine_glyph=_parse_color(colors_data["mine_glyph"]),
        flag_glyph=_parse_color(colors_data["flag_glyph"])
    )

    return MinesConfig(
        rows=int(raw["rows"]),
        cols=int(raw["cols"]),
        mine_count=int(raw["mine_count"]),
        board_pixels=int(raw["board_pixels"]),
        colors=colors,
        number_colors=tuple(_parse_color(c) for c in raw["number_colors"]),
        font_size=int(raw.get("font_size", 20)),
        mine_glyph=str(raw.get("mine_glyph", "*")),
        flag_glyph=str(raw.get("flag_glyph", "F")),
        mine_alert=str(raw.get("mine_alert", "Game over!"))
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    catch = config.catch

    # Exactly three lanes
    if catch.num_lanes != 3:
        raise ValueError(f"Catch game needs exactly 3 lanes, got {catch.num_lanes}")

    # Category weights form a probability distribution
    if not catch.categories:
        raise ValueError("At least one item category is required")
    total_weight = sum(c.weight for c in catch.categories)
    if not math.isclose(total_weight, 1.0, abs_tol=1e-9):
        raise ValueError(f"Category weights must sum to 1.0, got {total_weight}")
    for category in catch.categories:
        if category.weight < 0:
            raise ValueError(f"Negative weight for category {category.name}")

    names = [c.name for c in catch.categories]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate category names: {names}")

    # Catch band must lie inside the field, above the despawn line
    basket = catch.basket
    if basket.band_top > basket.band_bottom:
        raise ValueError(
            f"catch_band top ({basket.band_top}) exceeds bottom ({basket.band_bottom})"
        )
    if basket.band_bottom > catch.despawn_y:
        raise ValueError(
            f"catch_band bottom ({basket.band_bottom}) is below despawn_y ({catch.despawn_y})"
        )

    spawn = catch.spawn
    if spawn.min_interval_ms > spawn.base_interval_ms:
        raise ValueError(
            f"min_interval_ms ({spawn.min_interval_ms}) exceeds "
            f"base_interval_ms ({spawn.base_interval_ms})"
        )
    if spawn.interval_step_ms < 0:
        raise ValueError("interval_step_ms must not be negative")

    if catch.points_per_level <= 0:
        raise ValueError("points_per_level must be positive")
    if catch.timer.time_limit <= 0:
        raise ValueError("time_limit must be positive")

    # Fixed 9x9 board with 9 mines
    mines = config.mines
    if (mines.rows, mines.cols) != (BOARD_ROWS, BOARD_COLS):
        raise ValueError(
            f"Mines board must be {BOARD_ROWS}x{BOARD_COLS}, got {mines.rows}x{mines.cols}"
        )
    if mines.mine_count != BOARD_MINES:
        raise ValueError(f"mine_count must be {BOARD_MINES}, got {mines.mine_count}")
    if len(mines.number_colors) != 8:
        raise ValueError(
            f"number_colors needs one color per count 1-8, got {len(mines.number_colors)}"
        )


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    config = GameConfig(
        catch=_parse_catch(raw["catch"]),
        mines=_parse_mines(raw["mines"])
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
