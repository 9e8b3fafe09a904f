"""
Catch Game
==========

Falling-item engine: a basket in one of three lanes catches apples and
grapes and must avoid bombs before the countdown runs out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from minigames.arcade_core.clock import Clock, IntervalTimer, Scheduler
from minigames.arcade_core.config_loader import CatchConfig, get_config
from minigames.arcade_core.item_catalog import ItemCatalog, ItemCategory
from minigames.arcade_core.rng import SpawnPicker
from minigames.arcade_core.rules import GameRules, Lane, TerminationResult
from minigames.arcade_core.scoring import ScoreEvent, ScoreTracker
from minigames.arcade_core.surface import (
    ALIGN_CENTER,
    BASELINE_MIDDLE,
    Surface,
)

logger = logging.getLogger(__name__)

ScoreCallback = Callable[[int, int], None]
AlertCallback = Callable[[str], None]


class RoundState(Enum):
    """Lifecycle of a round."""
    INACTIVE = "inactive"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class Basket:
    """The player's basket. Only its lane changes during play."""
    lane: Lane
    x: float
    y: float
    width: int
    height: int


@dataclass
class Item:
    """A falling item."""
    lane: Lane
    x: float
    y: float
    category: ItemCategory
    speed: float

    @property
    def score(self) -> int:
        return self.category.score

    @property
    def is_hazard(self) -> bool:
        return self.category.is_hazard


@dataclass
class UpdateResult:
    """Outcome of a single ``update`` call."""
    lane: Lane
    spawned: Optional[Item] = None
    caught: List[Item] = field(default_factory=list)
    missed: List[Item] = field(default_factory=list)
    score_events: List[ScoreEvent] = field(default_factory=list)
    delta_score: int = 0
    ended: bool = False
    reason: str = ""


class CatchGame:
    """
    Falling-item round engine.

    States: INACTIVE -> ACTIVE -> ENDED. ``start`` may be called again from
    any state to begin a fresh round.

    Timing uses an injectable clock. The one-second countdown is a
    cooperative timer on a ``Scheduler``; ``update`` polls it every frame and
    external drivers may poll it too.
    """

    def __init__(
        self,
        config: Optional[CatchConfig] = None,
        seed: Optional[int] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None
    ):
        """
        Initialize engine.

        Args:
            config: Catch configuration. Uses default if None.
            seed: Random seed for lanes and categories.
            clock: Seconds clock used for spawning. Defaults to the
                scheduler's clock (``time.monotonic`` if neither is given).
            scheduler: Timer registry for the countdown. A new one over
                ``clock`` is created if None.
        """
        if config is None:
            config = get_config().catch

        if scheduler is None:
            scheduler = Scheduler(clock)
        if clock is None:
            clock = scheduler.clock

        self._config = config
        self._clock = clock
        self._scheduler = scheduler

        # Subsystems
        self._catalog = ItemCatalog(config)
        self._rules = GameRules(config)
        self._scorer = ScoreTracker(config)
        self._picker = SpawnPicker(self._catalog, config.num_lanes, seed)

        # Observers
        self._score_listeners: List[ScoreCallback] = []
        self._end_listeners: List[ScoreCallback] = []
        self._alert_listeners: List[AlertCallback] = []

        # Round state
        center = Lane(config.center_lane)
        self._basket = Basket(
            lane=center,
            x=self._rules.lanes.lane_x(center),
            y=config.basket.y,
            width=config.basket.width,
            height=config.basket.height
        )
        self._items: List[Item] = []
        self._state = RoundState.INACTIVE
        self._time_left: int = config.timer.time_limit
        self._spawn_interval_ms: int = self._rules.spawn.base_interval_ms
        self._last_spawn_time: float = 0.0
        self._timer: Optional[IntervalTimer] = None
        self._termination_reason: str = ""
        self._round_id: int = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> CatchConfig:
        return self._config

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def is_active(self) -> bool:
        """True while a round is being played."""
        return self._state is RoundState.ACTIVE

    @property
    def is_over(self) -> bool:
        """True once a round has ended (until the next start)."""
        return self._state is RoundState.ENDED

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def level(self) -> int:
        return self._scorer.level

    @property
    def time_left(self) -> int:
        """Remaining seconds in the round."""
        return self._time_left

    @property
    def basket(self) -> Basket:
        return self._basket

    @property
    def items(self) -> List[Item]:
        """Live items (copy)."""
        return list(self._items)

    @property
    def spawn_interval_ms(self) -> int:
        return self._spawn_interval_ms

    @property
    def termination_reason(self) -> str:
        """Reason the last round ended, or empty string."""
        return self._termination_reason

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def on_score_change(self, callback: ScoreCallback) -> None:
        """Register ``callback(score, level)`` for every scoring catch."""
        self._score_listeners.append(callback)

    def on_game_end(self, callback: ScoreCallback) -> None:
        """Register ``callback(score, level)`` for every ``stop``."""
        self._end_listeners.append(callback)

    def on_alert(self, callback: AlertCallback) -> None:
        """Register ``callback(message)`` for terminal user-facing alerts."""
        self._alert_listeners.append(callback)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, time_limit: Optional[int] = None, seed: Optional[int] = None) -> None:
        """
        Start a new round.

        Any countdown left from a previous round is cancelled before the
        counters are reset.

        Args:
            time_limit: Round length in seconds. Uses config default if None.
            seed: Reseed lane/category draws. Keeps current stream if None.
        """
        self._clear_timer()
        self._round_id += 1

        if seed is not None:
            self._picker.reset(seed)

        self._scorer.reset()
        self._items = []
        self._time_left = int(time_limit) if time_limit else self._config.timer.time_limit
        self._spawn_interval_ms = self._rules.spawn.base_interval_ms
        self._set_basket_lane(Lane(self._config.center_lane))
        self._last_spawn_time = self._clock()
        self._termination_reason = ""
        self._state = RoundState.ACTIVE

        self._timer = self._scheduler.call_every(
            self._config.timer.tick_seconds,
            self._on_timer_tick
        )
        logger.info("Catch round started (time limit %ss)", self._time_left)

    def stop(self, reason: Optional[str] = None) -> None:
        """
        End the round.

        Always cancels the countdown. Notifies ``on_game_end`` once per call.

        Args:
            reason: Termination reason recorded on the engine. Defaults to
                "stopped".
        """
        if reason is None:
            reason = TerminationResult.stopped().reason
        self._clear_timer()
        self._state = RoundState.ENDED
        self._termination_reason = reason
        logger.info(
            "Catch round ended (%s): score=%d level=%d",
            reason, self._scorer.score, self._scorer.level
        )
        for callback in list(self._end_listeners):
            callback(self._scorer.score, self._scorer.level)

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer_tick(self) -> None:
        """Countdown callback, fired once per tick period."""
        self._time_left -= 1
        if self._time_left <= 0:
            self._time_left = 0
            self.stop(TerminationResult.time_up().reason)

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------

    def update(self, label: Any) -> UpdateResult:
        """
        Advance the round by one frame.

        Args:
            label: Position label from the classifier. Anything other than a
                recognised left/right label means center.

        Returns:
            UpdateResult for this frame. Empty if the round is not active.
        """
        self._scheduler.poll()
        if not self.is_active:
            return UpdateResult(
                lane=self._basket.lane,
                ended=self.is_over,
                reason=self._termination_reason
            )

        result = UpdateResult(lane=self._basket.lane)
        round_id = self._round_id

        # 1. Basket placement
        self._set_basket_lane(self._rules.lanes.label_to_lane(label))
        result.lane = self._basket.lane

        # 2. Spawn scheduling
        now = self._clock()
        if (now - self._last_spawn_time) * 1000.0 > self._spawn_interval_ms:
            result.spawned = self.spawn_item()
            self._last_spawn_time = now
            self._spawn_interval_ms = self._rules.spawn.interval_ms(self._scorer.level)

        # 3. Fall and collision
        self._update_items(result, round_id)

        result.delta_score = sum(event.points for event in result.score_events)
        if self._round_id != round_id:
            # A listener restarted the round; report the one that ended
            return result
        result.ended = self.is_over
        result.reason = self._termination_reason
        return result

    def _set_basket_lane(self, lane: Lane) -> None:
        self._basket.lane = lane
        self._basket.x = self._rules.lanes.lane_x(lane)

    def spawn_item(
        self,
        lane: Optional[Lane] = None,
        category: Optional[ItemCategory] = None
    ) -> Item:
        """
        Create one item at the top of a lane.

        Args:
            lane: Lane to drop into. Uniformly random if None.
            category: Item category. Weighted random if None.

        Returns:
            The new item (already live).
        """
        if lane is None:
            lane = Lane(self._picker.pick_lane())
        if category is None:
            category = self._picker.pick_category()
        item = Item(
            lane=lane,
            x=self._rules.lanes.lane_x(lane),
            y=0.0,
            category=category,
            speed=self._rules.spawn.fall_speed(self._scorer.level)
        )
        self._items.append(item)
        return item

    def _update_items(self, result: UpdateResult, round_id: int) -> None:
        """
        Advance every item; resolve catches and discard misses.

        Stops early if a catch ends the round. If a listener started a new
        round meanwhile, the new round's items are left untouched.
        """
        collision = self._rules.collision
        remaining: List[Item] = []

        for index, item in enumerate(self._items):
            item.y += item.speed

            if collision.is_catch(item.lane, item.y, self._basket.lane):
                result.caught.append(item)
                self._handle_catch(item, result)
                if self._round_id != round_id:
                    return
                if not self.is_active:
                    # Round ended mid-pass; untouched items stay as they were
                    remaining.extend(self._items[index + 1:])
                    break
                continue

            if collision.is_gone(item.y):
                result.missed.append(item)
                continue

            remaining.append(item)

        self._items = remaining

    def _handle_catch(self, item: Item, result: UpdateResult) -> None:
        if item.is_hazard:
            logger.info("Hazard caught: %s", item.category.name)
            reason = TerminationResult.hazard(item.category.name).reason
            result.ended = True
            result.reason = reason
            self.stop(reason)
            self._alert(self._config.hud.bomb_alert)
            return

        event = self._scorer.apply_catch(item.score, item.category.name)
        result.score_events.append(event)
        if event.leveled_up:
            logger.debug("Level up: %d (score %d)", event.level, event.score)
        for callback in list(self._score_listeners):
            callback(event.score, event.level)

    def _alert(self, message: str) -> None:
        for callback in list(self._alert_listeners):
            callback(message)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, surface: Surface) -> None:
        """
        Draw basket, items and HUD; overlay the game-over panel once ended.

        No-op before the first round.
        """
        if self._state is RoundState.INACTIVE:
            return

        hud = self._config.hud

        surface.draw_text(
            hud.basket_glyph, self._basket.x, self._basket.y, hud.basket_color,
            size=hud.basket_font_size, align=ALIGN_CENTER, baseline=BASELINE_MIDDLE
        )

        for item in self._items:
            surface.draw_text(
                item.category.glyph, item.x, item.y, item.category.color,
                size=hud.item_font_size, align=ALIGN_CENTER, baseline=BASELINE_MIDDLE
            )

        surface.draw_text(f"Score: {self._scorer.score}", *hud.score_pos, hud.text_color, size=hud.font_size)
        surface.draw_text(f"Time: {self._time_left}", *hud.time_pos, hud.text_color, size=hud.font_size)
        surface.draw_text(f"Lv: {self._scorer.level}", *hud.level_pos, hud.text_color, size=hud.font_size)

        if self.is_over:
            self._render_game_over(surface)

    def _render_game_over(self, surface: Surface) -> None:
        hud = self._config.hud
        width = self._config.field.width
        height = self._config.field.height

        surface.fill_rect(0, 0, width, height, hud.overlay_color)
        surface.draw_text(
            "GAME OVER", width / 2, height * 0.4, hud.title_color,
            size=30, bold=True, align=ALIGN_CENTER
        )
        surface.draw_text(
            f"Score: {self._scorer.score}", width / 2, height * 0.6, hud.score_color,
            size=24, bold=True, align=ALIGN_CENTER
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "level": self._scorer.level,
            "time_left": self._time_left,
            "catches": self._scorer.catches,
            "item_count": len(self._items),
            "spawn_interval_ms": self._spawn_interval_ms,
            "terminated_reason": self._termination_reason,
        }
