"""
Arcade Core - The game engines and their supporting systems.

Main exports:
- CatchGame: Falling-item engine (start / stop / update / render)
- MinesGame: Minesweeper engine (init / set_mode / handle_click / render)
- CatchEnv, MinesEnv: Gymnasium wrappers
- ArraySurface, RecordingSurface: Draw targets for render()
- Scheduler, ManualClock: Cooperative countdown timing
- GameConfig: Configuration loaded from game_config.yaml
"""

from minigames.arcade_core.config_loader import GameConfig, load_config
from minigames.arcade_core.clock import ManualClock, Scheduler
from minigames.arcade_core.item_catalog import ItemCatalog, ItemCategory
from minigames.arcade_core.rules import Lane
from minigames.arcade_core.catch_game import CatchGame, Item, RoundState, UpdateResult
from minigames.arcade_core.minefield import Cell, Minefield
from minigames.arcade_core.mines_game import MinesGame, Mode
from minigames.arcade_core.surface import RecordingSurface, Surface
from minigames.arcade_core.render_solid import ArraySurface
from minigames.arcade_core.env_gym import CatchEnv, MinesEnv

__all__ = [
    "GameConfig",
    "load_config",
    "ManualClock",
    "Scheduler",
    "ItemCatalog",
    "ItemCategory",
    "Lane",
    "CatchGame",
    "Item",
    "RoundState",
    "UpdateResult",
    "Cell",
    "Minefield",
    "MinesGame",
    "Mode",
    "RecordingSurface",
    "Surface",
    "ArraySurface",
    "CatchEnv",
    "MinesEnv",
]
