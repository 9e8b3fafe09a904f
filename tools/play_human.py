"""
Human Play Mode
================

Play either minigame interactively in a pygame window.

Controls (catch):
    - Left/Right arrows or A/D: Hold to move the basket (released = center)
    - R: Restart round
    - ESC: Quit

Controls (mines):
    - Mouse click: Reveal or flag, depending on mode
    - F: Toggle reveal/flag mode
    - R: New board
    - ESC: Quit

The keyboard stands in for the pose classifier: each frame it produces one
of the labels "left", "center" or "right".

Usage:
    python -m tools.play_human [--game catch|mines] [--seed SEED] [--scale S]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from minigames.arcade_core.catch_game import CatchGame
from minigames.arcade_core.config_loader import GameConfig, load_config
from minigames.arcade_core.mines_game import MinesGame, Mode
from minigames.arcade_core.render_full_pygame import PygameSurface


class CatchPlayer:
    """Human-playable catch round on a wall clock."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        scale: float = 3.0,
        target_fps: int = 60,
        time_limit: Optional[int] = None
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        self._config = config.catch
        self._seed = seed
        self._target_fps = target_fps
        self._time_limit = time_limit

        self._game = CatchGame(config=self._config, seed=seed)
        self._game.on_score_change(self._print_score)
        self._game.on_game_end(self._print_end)
        self._game.on_alert(lambda message: print(f"\n!! {message}"))

        field = self._config.field
        pygame.init()
        self._screen = pygame.display.set_mode(
            (int(field.width * scale), int(field.height * scale))
        )
        pygame.display.set_caption("Catch Fruit")
        self._clock = pygame.time.Clock()
        self._surface = PygameSurface(self._screen, field.width, field.height, scale)

        self._running = True

    @staticmethod
    def _print_score(score: int, level: int) -> None:
        print(f"  Score: {score}  Lv: {level}")

    @staticmethod
    def _print_end(score: int, level: int) -> None:
        print(f"\nGAME OVER - Score: {score}, Level: {level}")

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Catch Fruit ===")
        print("Hold Left/Right (or A/D) to move the basket")
        print("R to restart, ESC to quit")
        print()

        self._game.start(time_limit=self._time_limit)

        while self._running:
            self._handle_events()
            self._game.update(self._current_label())
            self._render()
            self._clock.tick(self._target_fps)

        self._game.scheduler.cancel_all()
        pygame.quit()
        return self._game.score

    def _current_label(self) -> str:
        """Translate held keys into a position label."""
        keys = pygame.key.get_pressed()
        left = keys[pygame.K_LEFT] or keys[pygame.K_a]
        right = keys[pygame.K_RIGHT] or keys[pygame.K_d]
        if left and not right:
            return "left"
        if right and not left:
            return "right"
        return "center"

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._game.start(time_limit=self._time_limit)
                    print("\n=== Round Restarted ===\n")

    def _render(self) -> None:
        self._surface.clear((255, 255, 255))
        self._game.render(self._surface)
        pygame.display.flip()


class MinesPlayer:
    """Human-playable minesweeper board."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        scale: float = 1.0,
        target_fps: int = 30
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        self._config = config.mines
        self._scale = scale
        self._target_fps = target_fps

        self._game = MinesGame(config=self._config, seed=seed)
        self._game.on_alert(lambda message: print(f"\n!! {message}"))

        size = self._config.board_pixels
        pygame.init()
        self._screen = pygame.display.set_mode((int(size * scale), int(size * scale)))
        pygame.display.set_caption("Minesweeper (9x9)")
        self._clock = pygame.time.Clock()
        self._surface = PygameSurface(self._screen, size, size, scale)

        self._running = True
        self._reported = False

    def run(self) -> bool:
        """Run the game loop. Returns True if the last board was cleared."""
        print("=== Minesweeper ===")
        print("Click to reveal, F toggles flag mode")
        print("R for a new board, ESC to quit")
        print()

        self._game.init()

        while self._running:
            self._handle_events()
            self._report_outcome()
            self._game.render(self._surface)
            pygame.display.flip()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.game_won

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._game.init()
                    self._reported = False
                    print("\n=== New Board ===\n")
                elif event.key == pygame.K_f:
                    mode = Mode.FLAG if self._game.mode is Mode.REVEAL else Mode.REVEAL
                    self._game.set_mode(mode)
                    pygame.display.set_caption(f"Minesweeper (9x9) - {mode.value}")
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                self._game.handle_click(x / self._scale, y / self._scale)

    def _report_outcome(self) -> None:
        if self._reported or not self._game.game_over:
            return
        self._reported = True
        if self._game.game_won:
            print("\nBOARD CLEARED!")
        else:
            print("\nGAME OVER")


def main():
    parser = argparse.ArgumentParser(description="Play a minigame interactively")
    parser.add_argument("--game", choices=["catch", "mines"], default="catch", help="Which game to play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=float, default=None, help="Window scale factor")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--time-limit", type=int, default=None, help="Catch round length in seconds")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_config()
        if args.game == "catch":
            player = CatchPlayer(
                config=config,
                seed=args.seed,
                scale=args.scale or 3.0,
                target_fps=args.fps,
                time_limit=args.time_limit
            )
            score = player.run()
            print(f"\nFinal Score: {score}")
        else:
            player = MinesPlayer(
                config=config,
                seed=args.seed,
                scale=args.scale or 1.0,
                target_fps=args.fps
            )
            player.run()
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
