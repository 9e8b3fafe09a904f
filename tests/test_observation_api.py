"""
Test suite for verifying all observation and action API elements.

Ensures the environments return correctly shaped and typed observations,
and that actions are processed correctly.
"""

import numpy as np
import pytest

from minigames.arcade_core.env_gym import CatchEnv, MinesEnv
from minigames.arcade_core.rules import Lane


class TestCatchObservationAPI:
    """Verify all catch observation space elements."""

    @pytest.fixture
    def env(self):
        """Create fresh environment for each test."""
        env = CatchEnv()
        yield env
        env.close()

    @pytest.fixture
    def obs_after_reset(self, env):
        obs, info = env.reset(seed=42)
        return obs

    @pytest.fixture
    def obs_with_items(self, env):
        """Observation after two items are placed and one frame has run."""
        env.reset(seed=42)
        catalog = env.game.catalog
        env.game.spawn_item(Lane.LEFT, catalog.get_by_name("APPLE"))
        env.game.spawn_item(Lane.RIGHT, catalog.get_by_name("BOMB"))
        obs, _, _, _, _ = env.step(1)
        return obs

    # =========================================================================
    # Space membership
    # =========================================================================

    def test_reset_obs_in_space(self, env, obs_after_reset):
        assert env.observation_space.contains(obs_after_reset)

    def test_step_obs_in_space(self, env, obs_with_items):
        assert env.observation_space.contains(obs_with_items)

    def test_all_keys_present(self, env, obs_after_reset):
        assert set(obs_after_reset) == set(env.observation_space.spaces)

    # =========================================================================
    # Scalars
    # =========================================================================

    def test_scalars_after_reset(self, obs_after_reset):
        assert int(obs_after_reset["basket_lane"]) == 1
        assert int(obs_after_reset["score"]) == 0
        assert int(obs_after_reset["level"]) == 1
        assert int(obs_after_reset["time_left"]) == 60
        assert int(obs_after_reset["spawn_interval_ms"]) == 1000
        assert int(obs_after_reset["items_count"]) == 0

    def test_scalar_dtypes(self, obs_after_reset):
        assert obs_after_reset["score"].dtype == np.int64
        assert obs_after_reset["level"].dtype == np.int32
        assert obs_after_reset["time_left"].dtype == np.int32

    # =========================================================================
    # Item arrays
    # =========================================================================

    def test_item_array_shapes(self, env, obs_after_reset):
        n = env.config.catch.env.max_items
        for key in ("item_lane", "item_y", "item_category", "item_speed", "item_mask"):
            assert obs_after_reset[key].shape == (n,)

    def test_empty_slots_padded(self, obs_after_reset):
        assert np.all(obs_after_reset["item_lane"] == -1)
        assert np.all(obs_after_reset["item_category"] == -1)
        assert np.all(obs_after_reset["item_mask"] == 0)

    def test_item_values(self, obs_with_items):
        obs = obs_with_items
        assert int(obs["items_count"]) == 2
        assert obs["item_mask"][:3].tolist() == [1, 1, 0]
        assert obs["item_lane"][:2].tolist() == [0, 2]
        assert obs["item_category"][:2].tolist() == [0, 2]
        assert obs["item_y"][:2] == pytest.approx([2.5, 2.5])
        assert obs["item_speed"][:2] == pytest.approx([2.5, 2.5])

    def test_overflow_items_truncated(self, env):
        env.reset(seed=42)
        apple = env.game.catalog.get_by_name("APPLE")
        for _ in range(env.config.catch.env.max_items + 5):
            env.game.spawn_item(Lane.LEFT, apple)

        obs, *_ = env.step(1)

        assert int(obs["items_count"]) == env.config.catch.env.max_items
        assert env.observation_space.contains(obs)


class TestMinesObservationAPI:
    """Verify all mines observation space elements."""

    @pytest.fixture
    def env(self):
        env = MinesEnv()
        yield env
        env.close()

    def test_reset_obs_in_space(self, env):
        obs, _ = env.reset(seed=42)
        assert env.observation_space.contains(obs)

    def test_board_dtype(self, env):
        obs, _ = env.reset(seed=42)
        assert obs["board"].dtype == np.int8

    def test_obs_in_space_after_loss(self, env):
        obs, _ = env.reset(options={"mine_positions": [(r, 0) for r in range(9)]})
        obs, *_ = env.step((0, 0))
        assert env.observation_space.contains(obs)

    def test_mode_reflects_last_action(self, env):
        env.reset(seed=3)
        obs, *_ = env.step((1, 40))
        assert int(obs["mode"]) == 1
        obs, *_ = env.step((1, 40))
        assert int(obs["mode"]) == 1
        assert int(obs["flags_placed"]) == 0

    def test_action_space(self, env):
        assert env.action_space.nvec.tolist() == [2, 81]
