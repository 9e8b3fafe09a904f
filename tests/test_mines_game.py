"""
Tests for the minesweeper engine.
"""

import pytest

from minigames.arcade_core.config_loader import load_config
from minigames.arcade_core.mines_game import MinesGame, Mode
from minigames.arcade_core.surface import RecordingSurface

# Mines along the top row and left column
EDGE_MINES = [
    (0, 0), (0, 2), (0, 4), (0, 6), (0, 8),
    (2, 0), (4, 0), (6, 0), (8, 0),
]
COLUMN_WALL_MINES = [(row, 4) for row in range(9)]


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return MinesGame(config=config.mines, seed=42)


@pytest.fixture
def alerts(game):
    messages = []
    game.on_alert(messages.append)
    return messages


def click_cell(game, row, col):
    x, y = game.cell_center(row, col)
    return game.handle_click(x, y)


class TestInit:
    """Test board creation and state flags."""

    def test_before_init(self, game):
        assert not game.active
        assert not game.game_over
        assert not game.game_won
        assert game.handle_click(10, 10) is False
        with pytest.raises(RuntimeError):
            game.field

    def test_init_state(self, game):
        game.init()

        assert game.active
        assert not game.game_over
        assert not game.game_won
        assert game.mode is Mode.REVEAL
        assert game.field.mine_count == 9
        assert game.field.revealed_safe_count() == 0

    def test_reinit_resets(self, game):
        game.init(mine_positions=EDGE_MINES)
        game.set_mode(Mode.FLAG)
        click_cell(game, 0, 0)
        game.init()

        assert game.mode is Mode.REVEAL
        assert game.flags_placed == 0
        assert not game.game_over

    def test_seeded_layout(self, config):
        a = MinesGame(config=config.mines)
        b = MinesGame(config=config.mines)
        a.init(seed=9)
        b.init(seed=9)
        assert a.field.mine_positions == b.field.mine_positions

    def test_fixed_layout_wrong_count(self, game):
        with pytest.raises(ValueError):
            game.init(mine_positions=[(0, 0), (1, 1)])


class TestInput:
    """Test pixel mapping and modes."""

    @pytest.mark.parametrize("x,y,expected", [
        (0, 0, (0, 0)),
        (60, 10, (0, 1)),
        (10, 60, (1, 0)),
        (499.9, 499.9, (8, 8)),
        (500, 10, None),
        (-1, 10, None),
        (10, 500, None),
    ])
    def test_pixel_to_cell(self, game, x, y, expected):
        assert game.pixel_to_cell(x, y) == expected

    def test_click_outside_board_ignored(self, game):
        game.init(mine_positions=EDGE_MINES)
        assert game.handle_click(600, 600) is False

    def test_mode_strings(self, game):
        game.set_mode("flag")
        assert game.mode is Mode.FLAG
        game.set_mode("REVEAL")
        assert game.mode is Mode.REVEAL

    def test_invalid_mode(self, game):
        with pytest.raises(ValueError):
            game.set_mode("DIG")

    def test_flag_mode_toggles(self, game):
        game.init(mine_positions=EDGE_MINES)
        game.set_mode(Mode.FLAG)

        click_cell(game, 0, 0)
        assert game.field[(0, 0)].is_flagged
        assert game.flags_placed == 1
        assert game.mines_remaining == 8
        assert not game.game_over

        click_cell(game, 0, 0)
        assert not game.field[(0, 0)].is_flagged

    def test_flagged_cell_not_revealed(self, game):
        game.init(mine_positions=EDGE_MINES)
        game.set_mode(Mode.FLAG)
        click_cell(game, 0, 0)
        game.set_mode(Mode.REVEAL)
        click_cell(game, 0, 0)

        assert not game.field[(0, 0)].is_revealed
        assert not game.game_over

    def test_mines_remaining_goes_negative(self, game):
        game.init(mine_positions=EDGE_MINES)
        game.set_mode(Mode.FLAG)
        for col in range(9):
            for row in (3, 5):
                click_cell(game, row, col)
        assert game.mines_remaining == 9 - 18


class TestReveal:
    """Test reveal outcomes."""

    def test_flood_from_far_corner(self, game, alerts):
        game.init(mine_positions=EDGE_MINES)
        expected = game.field.zero_region(8, 8)

        click_cell(game, 8, 8)

        revealed = [(r, c) for r, c, cell in game.field if cell.is_revealed]
        assert revealed == expected
        assert not game.field[(0, 1)].is_revealed
        assert not game.game_over
        assert alerts == []

    def test_mine_hit_ends_game(self, game, alerts, config):
        game.init(mine_positions=EDGE_MINES)

        click_cell(game, 0, 0)

        assert game.game_over
        assert not game.game_won
        assert all(game.field[p].is_revealed for p in EDGE_MINES)
        assert alerts == [config.mines.mine_alert]

    def test_clicks_ignored_after_loss(self, game):
        game.init(mine_positions=EDGE_MINES)
        click_cell(game, 0, 0)

        assert click_cell(game, 8, 8) is False
        assert not game.field[(8, 8)].is_revealed

    def test_number_cell_reveals_single(self, game):
        game.init(mine_positions=EDGE_MINES)
        click_cell(game, 0, 1)
        assert game.field.revealed_safe_count() == 1
        assert game.field[(0, 1)].neighbor_count == 2


class TestWin:
    """Test the win condition."""

    def test_clear_both_halves(self, game, alerts):
        game.init(mine_positions=COLUMN_WALL_MINES)

        click_cell(game, 8, 8)
        assert game.field.revealed_safe_count() == 36
        assert not game.game_won

        click_cell(game, 0, 0)
        assert game.field.revealed_safe_count() == 72
        assert game.game_won
        assert game.game_over
        assert alerts == []

    def test_clicks_ignored_after_win(self, game):
        game.init(mine_positions=COLUMN_WALL_MINES)
        click_cell(game, 8, 8)
        click_cell(game, 0, 0)

        assert click_cell(game, 0, 4) is False
        assert not game.field[(0, 4)].is_revealed

    def test_flags_do_not_block_win(self, game):
        """Winning only needs the safe cells; flags on mines are irrelevant."""
        game.init(mine_positions=COLUMN_WALL_MINES)
        game.set_mode(Mode.FLAG)
        click_cell(game, 0, 4)
        game.set_mode(Mode.REVEAL)
        click_cell(game, 8, 8)
        click_cell(game, 0, 0)

        assert game.game_won


class TestRender:
    """Test board draw commands."""

    def test_no_render_before_init(self, game):
        surface = RecordingSurface()
        game.render(surface)
        assert surface.commands == []

    def test_fresh_board(self, game, config):
        game.init(mine_positions=EDGE_MINES)
        surface = RecordingSurface()
        game.render(surface)

        background = surface.commands[0]
        assert background.op == "fill_rect"
        assert (background["w"], background["h"]) == (500, 500)
        assert len(surface.ops("stroke_rect")) == 81
        # Background plus one inset tile per hidden cell
        assert len(surface.ops("fill_rect")) == 82
        tile = surface.ops("fill_rect")[1]
        assert tile["x"] == 1 and tile["y"] == 1
        assert tile["color"] == config.mines.colors.hidden
        assert surface.texts() == []

    def test_revealed_numbers_and_flags(self, game, config):
        game.init(mine_positions=EDGE_MINES)
        click_cell(game, 0, 1)
        game.set_mode(Mode.FLAG)
        click_cell(game, 0, 0)

        surface = RecordingSurface()
        game.render(surface)
        texts = surface.texts()

        assert "2" in texts
        assert config.mines.flag_glyph in texts

    def test_mines_drawn_after_loss(self, game, config):
        game.init(mine_positions=EDGE_MINES)
        click_cell(game, 0, 0)

        surface = RecordingSurface()
        game.render(surface)

        assert surface.texts().count(config.mines.mine_glyph) == 9
        mine_fills = [
            c for c in surface.ops("fill_rect")
            if c["color"] == config.mines.colors.mine_background
        ]
        assert len(mine_fills) == 9

    def test_number_colors(self, game, config):
        assert game.number_color(1) == config.mines.number_colors[0]
        assert game.number_color(8) == config.mines.number_colors[7]
