"""
Gymnasium Environment Wrappers
==============================

Standard Gymnasium interfaces to both engines.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from minigames.arcade_core.catch_game import CatchGame
from minigames.arcade_core.clock import ManualClock, Scheduler
from minigames.arcade_core.config_loader import GameConfig, load_config
from minigames.arcade_core.mines_game import MinesGame, Mode
from minigames.arcade_core.render_solid import ArraySurface
from minigames.arcade_core.rules import Lane
from minigames.arcade_core.state_snapshot import SnapshotBuilder

# Action index -> label handed to the engine, matching Lane order
ACTION_LABELS = ("left", "center", "right")


class CatchEnv(gym.Env):
    """
    Catch game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = left, 1 = center, 2 = right. The action stands in
        for the external position classifier's label.

    Observation Space:
        Dict with basket lane, score/level/time and padded item arrays.

    Time:
        One step is one frame. A manual clock advances ``1 / fps`` seconds
        per step, which drives both spawning and the round countdown.

    Reward:
        Always 0.0. Use ``info["delta_score"]``.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 30,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        time_limit: Optional[int] = None,
        render_scale: float = 2.0,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            time_limit: Round length override in seconds.
            render_scale: Pixels per logical unit for rendered frames.
            debug: If True, prints a trace line per step.
        """
        super().__init__()

        self._config: GameConfig = load_config(config_path)
        catch = self._config.catch

        self.render_mode = render_mode
        self._time_limit = time_limit
        self._render_scale = render_scale
        self._debug = debug
        self._frame_seconds = 1.0 / catch.env.fps

        self._clock = ManualClock()
        self._game = CatchGame(config=catch, scheduler=Scheduler(self._clock))
        self._snapshots = SnapshotBuilder(max_items=catch.env.max_items)

        self.action_space = spaces.Discrete(len(ACTION_LABELS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CatchEnv initialized")
            print(f"[DEBUG]   Field: {catch.field.width}x{catch.field.height}")
            print(f"[DEBUG]   Frame: {self._frame_seconds * 1000:.1f} ms")

    def _build_observation_space(self) -> spaces.Dict:
        catch = self._config.catch
        n = catch.env.max_items
        int64 = np.iinfo(np.int64)
        return spaces.Dict({
            "basket_lane": spaces.Discrete(catch.num_lanes),
            "score": spaces.Box(low=int64.min, high=int64.max, shape=(), dtype=np.int64),
            "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "time_left": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "spawn_interval_ms": spaces.Box(
                low=catch.spawn.min_interval_ms, high=catch.spawn.base_interval_ms,
                shape=(), dtype=np.int32
            ),
            "items_count": spaces.Box(low=0, high=n, shape=(), dtype=np.int32),
            "item_lane": spaces.Box(low=-1, high=catch.num_lanes - 1, shape=(n,), dtype=np.int8),
            "item_y": spaces.Box(low=-np.inf, high=np.inf, shape=(n,), dtype=np.float32),
            "item_category": spaces.Box(
                low=-1, high=len(catch.categories) - 1, shape=(n,), dtype=np.int8
            ),
            "item_speed": spaces.Box(low=0, high=np.inf, shape=(n,), dtype=np.float32),
            "item_mask": spaces.MultiBinary(n),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Start a new round.

        Args:
            seed: Random seed for reproducibility.
            options: Optional ``{"time_limit": seconds}``.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        time_limit = self._time_limit
        if options and "time_limit" in options:
            time_limit = options["time_limit"]

        self._game.start(time_limit=time_limit, seed=seed)

        obs = self._snapshots.build_catch(self._game).to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = 0
        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Advance one frame with the basket at the chosen lane.

        Returns:
            (observation, reward, terminated, truncated, info). Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        action = int(action)
        if not 0 <= action < len(ACTION_LABELS):
            raise ValueError(f"Invalid action {action}, expected 0-{len(ACTION_LABELS) - 1}")

        self._clock.advance(self._frame_seconds)
        result = self._game.update(ACTION_LABELS[action])

        obs = self._snapshots.build_catch(self._game).to_obs_dict()
        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["caught"] = len(result.caught)
        info["missed"] = len(result.missed)

        terminated = self._game.is_over

        if self._debug:
            print(f"[DEBUG] Step: lane={Lane(action).name}, delta_score={result.delta_score}, "
                  f"items={info['item_count']}, time_left={info['time_left']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, 0.0, terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current frame.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode != "rgb_array":
            return None
        field = self._config.catch.field
        surface = ArraySurface(field.width, field.height, scale=self._render_scale)
        self._game.render(surface)
        return surface.to_array()

    def close(self) -> None:
        self._game.scheduler.cancel_all()

    @property
    def game(self) -> CatchGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def clock(self) -> ManualClock:
        return self._clock

    @property
    def config(self) -> GameConfig:
        return self._config


class MinesEnv(gym.Env):
    """
    Minesweeper as a Gymnasium environment.

    Action Space:
        MultiDiscrete([2, rows * cols]): (mode, cell). Mode 0 reveals, 1 flags;
        the cell index is row-major. The action is applied as a click at
        the cell's pixel center, through the same path as mouse input.

    Observation Space:
        Dict with the visible board (-2 flagged, -1 hidden, 0-8, 9 mine) and
        counters.

    Reward:
        Always 0.0. ``info["game_won"]`` / ``info["game_over"]`` tell the outcome.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 30,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        debug: bool = False,
    ):
        super().__init__()

        self._config: GameConfig = load_config(config_path)
        mines = self._config.mines

        self.render_mode = render_mode
        self._debug = debug

        self._game = MinesGame(config=mines)
        self._snapshots = SnapshotBuilder()

        self.action_space = spaces.MultiDiscrete([2, mines.cell_count])
        self.observation_space = spaces.Dict({
            "board": spaces.Box(low=-2, high=9, shape=(mines.rows, mines.cols), dtype=np.int8),
            "mode": spaces.Discrete(2),
            "flags_placed": spaces.Box(low=0, high=mines.cell_count, shape=(), dtype=np.int32),
            "hidden_count": spaces.Box(low=0, high=mines.cell_count, shape=(), dtype=np.int32),
        })

        if self._debug:
            print(f"[DEBUG] MinesEnv initialized")
            print(f"[DEBUG]   Board: {mines.rows}x{mines.cols}, {mines.mine_count} mines")

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Start a new board.

        Args:
            seed: Random seed for mine placement.
            options: Optional ``{"mine_positions": [(row, col), ...]}``.
        """
        super().reset(seed=seed)

        mine_positions = None
        if options and "mine_positions" in options:
            mine_positions = options["mine_positions"]

        self._game.init(seed=seed, mine_positions=mine_positions)

        obs = self._snapshots.build_mines(self._game).to_obs_dict()
        return obs, self._game.get_info()

    def step(
        self,
        action: Union[Tuple[int, int], np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Click one cell in the chosen mode.

        Returns:
            (observation, reward, terminated, truncated, info). Reward is always 0.0.
        """
        mode_index, cell_index = (int(a) for a in np.asarray(action).reshape(-1)[:2])
        mines = self._config.mines
        if mode_index not in (0, 1) or not 0 <= cell_index < mines.cell_count:
            raise ValueError(f"Invalid action {action}")

        row, col = divmod(cell_index, mines.cols)
        self._game.set_mode(Mode.REVEAL if mode_index == 0 else Mode.FLAG)
        x, y = self._game.cell_center(row, col)
        applied = self._game.handle_click(x, y)

        obs = self._snapshots.build_mines(self._game).to_obs_dict()
        info = self._game.get_info()
        info["applied"] = applied

        terminated = self._game.game_over

        if self._debug:
            print(f"[DEBUG] Step: {self._game.mode.value} ({row}, {col}), "
                  f"revealed={info['revealed_safe']}/{info['safe_total']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {'won' if self._game.game_won else 'mine'}")

        return obs, 0.0, terminated, False, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        size = self._config.mines.board_pixels
        surface = ArraySurface(size, size)
        self._game.render(surface)
        return surface.to_array()

    def close(self) -> None:
        """Nothing to release."""

    @property
    def game(self) -> MinesGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        return self._config
