"""
Tests for the catch game engine.
"""

import pytest

from minigames.arcade_core.catch_game import CatchGame, RoundState
from minigames.arcade_core.clock import ManualClock, Scheduler
from minigames.arcade_core.config_loader import load_config
from minigames.arcade_core.rules import Lane
from minigames.arcade_core.surface import RecordingSurface

# Level 1 items fall 2.5 px/frame: y=170 (band top) is reached on frame 68,
# y > 200 (despawn) on frame 81.
FRAMES_TO_BAND = 68
FRAMES_TO_DESPAWN = 81


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def game(config, clock):
    return CatchGame(config=config.catch, seed=42, scheduler=Scheduler(clock))


@pytest.fixture
def events(game):
    """Record every notification in order."""
    log = []
    game.on_score_change(lambda score, level: log.append(("score", score, level)))
    game.on_game_end(lambda score, level: log.append(("end", score, level)))
    game.on_alert(lambda message: log.append(("alert", message)))
    return log


def tick_seconds(game, clock, seconds):
    """Let the countdown run for whole seconds."""
    for _ in range(seconds):
        clock.advance(1.0)
        game.scheduler.poll()


def run_frames(game, label, frames):
    results = []
    for _ in range(frames):
        results.append(game.update(label))
    return results


class TestLifecycle:
    """Test start/stop and the state machine."""

    def test_initially_inactive(self, game):
        assert game.state is RoundState.INACTIVE
        assert not game.is_active
        assert not game.is_over

    def test_start_resets_round(self, game, config):
        game.start()

        assert game.is_active
        assert game.score == 0
        assert game.level == 1
        assert game.time_left == config.catch.timer.time_limit
        assert game.items == []
        assert game.basket.lane is Lane.CENTER
        assert game.spawn_interval_ms == config.catch.spawn.base_interval_ms

    def test_time_limit_override(self, game):
        game.start(time_limit=5)
        assert game.time_left == 5

    def test_stop_ends_round_and_notifies(self, game, events):
        game.start()
        game.stop()

        assert game.state is RoundState.ENDED
        assert game.is_over
        assert not game.is_active
        assert events == [("end", 0, 1)]
        assert game.termination_reason == "stopped"

    def test_stop_cancels_timer(self, game, clock):
        game.start(time_limit=10)
        game.stop()

        assert game.scheduler.pending == 0
        tick_seconds(game, clock, 3)
        assert game.time_left == 10

    def test_stop_twice_notifies_twice(self, game, events):
        """Each explicit stop fires the end notification; cleanup is idempotent."""
        game.start()
        game.stop()
        game.stop()

        assert [e[0] for e in events] == ["end", "end"]
        assert game.scheduler.pending == 0

    def test_restart_after_end(self, game):
        game.start()
        game.stop()
        game.start()

        assert game.is_active
        assert not game.is_over
        assert game.termination_reason == ""


class TestCountdown:
    """Test the one-second countdown timer."""

    def test_ticks_decrement_time(self, game, clock):
        game.start(time_limit=10)
        tick_seconds(game, clock, 3)
        assert game.time_left == 7

    def test_time_up_ends_round(self, game, clock, events):
        """start(time_limit=5) then 5 ticks ends the round exactly once."""
        game.start(time_limit=5)
        tick_seconds(game, clock, 5)

        assert not game.is_active
        assert game.is_over
        assert game.time_left == 0
        assert game.termination_reason == "time_up"
        assert events == [("end", 0, 1)]

    def test_no_ticks_after_time_up(self, game, clock, events):
        game.start(time_limit=2)
        tick_seconds(game, clock, 6)

        assert game.time_left == 0
        assert len(events) == 1

    def test_restart_does_not_double_decrement(self, game, clock):
        """The old countdown is cancelled before a restart."""
        game.start(time_limit=10)
        clock.advance(0.5)
        game.start(time_limit=10)

        clock.advance(1.0)
        game.scheduler.poll()

        assert game.time_left == 9
        assert game.scheduler.pending == 1

    def test_update_polls_countdown(self, game, clock):
        """Frames alone keep the countdown running."""
        game.start(time_limit=3)
        for _ in range(3):
            clock.advance(1.0)
            game.update("center")

        assert game.is_over
        assert game.termination_reason == "time_up"

    def test_late_poll_catches_up(self, game, clock):
        game.start(time_limit=10)
        clock.advance(4.0)
        game.scheduler.poll()
        assert game.time_left == 6


class TestBasket:
    """Test label to lane mapping."""

    @pytest.mark.parametrize("label,lane", [
        ("left", Lane.LEFT),
        ("LEFT", Lane.LEFT),
        ("왼쪽", Lane.LEFT),
        ("right", Lane.RIGHT),
        ("오른쪽", Lane.RIGHT),
        ("center", Lane.CENTER),
        ("중앙", Lane.CENTER),
        ("up", Lane.CENTER),
        ("", Lane.CENTER),
        (None, Lane.CENTER),
        (42, Lane.CENTER),
    ])
    def test_label_to_lane(self, game, config, label, lane):
        game.start()
        game.update(label)

        assert game.basket.lane is lane
        assert game.basket.x == config.catch.lanes[lane]

    def test_update_ignored_when_inactive(self, game):
        result = game.update("left")

        assert game.basket.lane is Lane.CENTER
        assert result.spawned is None
        assert not result.ended


class TestSpawning:
    """Test spawn cadence and item creation."""

    def test_no_spawn_before_interval(self, game, clock):
        game.start()
        clock.advance(1.0)  # Exactly the interval: not yet exceeded
        result = game.update("center")

        assert result.spawned is None
        assert game.items == []

    def test_spawn_after_interval(self, game, clock):
        game.start()
        clock.advance(1.001)
        result = game.update("center")

        assert result.spawned is not None
        # Spawned then advanced once in the same frame
        assert result.spawned.y == pytest.approx(result.spawned.speed)
        assert len(game.items) == 1

    def test_spawn_resets_clock(self, game, clock):
        game.start()
        clock.advance(1.001)
        game.update("center")
        clock.advance(0.5)
        result = game.update("center")

        assert result.spawned is None

    def test_item_speed_scales_with_level(self, game, config):
        game.start()
        item = game.spawn_item(Lane.LEFT, game.catalog.get_by_name("APPLE"))

        spawn = config.catch.spawn
        assert item.speed == spawn.base_speed + 1 * spawn.speed_per_level
        assert item.x == config.catch.lanes[Lane.LEFT]
        assert item.y == 0.0

    def test_interval_shrinks_after_level_up(self, game, clock, config):
        game.start()
        grape = game.catalog.get_by_name("GRAPE")
        for _ in range(3):
            game.spawn_item(Lane.CENTER, grape)
            run_frames(game, "center", FRAMES_TO_BAND)
        assert game.level == 2

        # Interval is recomputed on the next spawn
        assert game.spawn_interval_ms == 1000
        clock.advance(1.001)
        game.update("left")
        assert game.spawn_interval_ms == 900


class TestCollision:
    """Test falling, catching and despawning."""

    def test_catch_in_same_lane(self, game, events):
        game.start()
        game.spawn_item(Lane.CENTER, game.catalog.get_by_name("APPLE"))

        results = run_frames(game, "center", FRAMES_TO_BAND)

        assert all(not r.caught for r in results[:-1])
        assert len(results[-1].caught) == 1
        assert results[-1].delta_score == 100
        assert game.score == 100
        assert game.items == []
        assert events == [("score", 100, 1)]

    def test_no_catch_in_other_lane(self, game, events):
        game.start()
        game.spawn_item(Lane.LEFT, game.catalog.get_by_name("GRAPE"))

        results = run_frames(game, "center", FRAMES_TO_DESPAWN - 1)
        assert len(game.items) == 1
        assert all(not r.caught for r in results)

        result = game.update("center")
        assert len(result.missed) == 1
        assert game.items == []
        assert game.score == 0
        assert events == []

    def test_moving_basket_into_band_catches(self, game):
        game.start()
        game.spawn_item(Lane.RIGHT, game.catalog.get_by_name("GRAPE"))

        run_frames(game, "center", FRAMES_TO_BAND - 1)
        result = game.update("right")

        assert len(result.caught) == 1
        assert game.score == 200

    def test_leaving_band_no_catch(self, game):
        """An item below the band is never caught even in the right lane."""
        game.start()
        game.spawn_item(Lane.LEFT, game.catalog.get_by_name("APPLE"))

        # Band spans frames 68-76 (y 170-190); stay away, then move under it
        run_frames(game, "center", 77)
        assert game.items[0].y > 190
        results = run_frames(game, "left", 3)

        assert all(not r.caught for r in results)
        assert game.score == 0

    def test_bomb_ends_round(self, game, events):
        game.start()
        game.spawn_item(Lane.CENTER, game.catalog.get_by_name("BOMB"))

        results = run_frames(game, "center", FRAMES_TO_BAND)

        assert results[-1].ended
        assert results[-1].reason == "bomb"
        assert game.is_over
        assert game.score == 0
        assert events[0] == ("end", 0, 1)
        assert events[1][0] == "alert"
        assert game.scheduler.pending == 0

    def test_bomb_fatal_at_any_score(self, game):
        game.start()
        grape = game.catalog.get_by_name("GRAPE")
        for _ in range(4):
            game.spawn_item(Lane.CENTER, grape)
            run_frames(game, "center", FRAMES_TO_BAND)
        assert game.score == 800

        game.spawn_item(Lane.CENTER, game.catalog.get_by_name("BOMB"))
        run_frames(game, "center", FRAMES_TO_BAND)

        assert game.is_over
        assert game.score == 800

    def test_restart_from_end_listener_starts_clean(self, game, config):
        """A round restarted from on_game_end keeps none of the old items."""
        game.on_game_end(lambda score, level: game.start())
        game.start()
        bomb = game.spawn_item(Lane.CENTER, game.catalog.get_by_name("BOMB"))
        apple = game.spawn_item(Lane.LEFT, game.catalog.get_by_name("APPLE"))
        bomb.y = 175.0 - bomb.speed
        apple.y = 10.0

        result = game.update("center")

        assert result.ended
        assert result.reason == "bomb"
        assert game.is_active
        assert game.items == []
        assert game.time_left == config.catch.timer.time_limit
        assert apple.y == 10.0

    def test_restart_from_end_listener_keeps_new_items(self, game):
        def restart(score, level):
            game.start()
            game.spawn_item(Lane.RIGHT, game.catalog.get_by_name("GRAPE"))

        game.on_game_end(restart)
        game.start()
        bomb = game.spawn_item(Lane.CENTER, game.catalog.get_by_name("BOMB"))
        game.spawn_item(Lane.LEFT, game.catalog.get_by_name("APPLE"))
        bomb.y = 175.0 - bomb.speed

        game.update("center")

        assert [(item.category.name, item.y) for item in game.items] == [("GRAPE", 0.0)]

    def test_updates_after_bomb_are_ignored(self, game):
        game.start()
        game.spawn_item(Lane.CENTER, game.catalog.get_by_name("BOMB"))
        game.spawn_item(Lane.LEFT, game.catalog.get_by_name("APPLE"))
        run_frames(game, "center", FRAMES_TO_BAND)

        frozen = [item.y for item in game.items]
        game.update("left")
        assert [item.y for item in game.items] == frozen


class TestLevels:
    """Test level progression."""

    def test_level_follows_score_brackets(self, game, events):
        game.start()
        grape = game.catalog.get_by_name("GRAPE")
        levels = []
        for _ in range(6):
            game.spawn_item(Lane.CENTER, grape)
            run_frames(game, "center", FRAMES_TO_BAND)
            levels.append(game.level)

        # Scores 200, 400, 600, 800, 1000, 1200
        assert levels == [1, 1, 2, 2, 3, 3]
        assert events[-1] == ("score", 1200, 3)

    def test_level_never_decreases(self, game):
        game.start()
        for score in (300, 300, -500):
            game._scorer.apply_catch(score)
        assert game.score == 100
        assert game.level == 2


class TestRender:
    """Test draw commands."""

    def test_no_render_before_start(self, game):
        surface = RecordingSurface(200, 200)
        game.render(surface)
        assert surface.commands == []

    def test_render_active(self, game, config):
        game.start(time_limit=30)
        game.spawn_item(Lane.LEFT, game.catalog.get_by_name("GRAPE"))

        surface = RecordingSurface(200, 200)
        game.render(surface)
        texts = surface.texts()

        assert config.catch.hud.basket_glyph in texts
        assert game.catalog.get_by_name("GRAPE").glyph in texts
        assert "Score: 0" in texts
        assert "Time: 30" in texts
        assert "Lv: 1" in texts
        assert "GAME OVER" not in texts
        assert surface.ops("fill_rect") == []

    def test_render_game_over_panel(self, game):
        game.start()
        game.stop()

        surface = RecordingSurface(200, 200)
        game.render(surface)
        texts = surface.texts()

        assert "GAME OVER" in texts
        assert texts[-1] == "Score: 0"
        overlay = surface.ops("fill_rect")[0]
        assert overlay["w"] == 200 and overlay["h"] == 200
        assert len(overlay["color"]) == 4
