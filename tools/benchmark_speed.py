"""
Performance Benchmark
=====================

Measures engine and environment step throughput.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np

from minigames.arcade_core.catch_game import CatchGame
from minigames.arcade_core.clock import ManualClock, Scheduler
from minigames.arcade_core.config_loader import load_config
from minigames.arcade_core.env_gym import ACTION_LABELS, CatchEnv, MinesEnv
from minigames.arcade_core.mines_game import MinesGame


def _timing(mode: str, num_steps: int, elapsed: float) -> dict:
    return {
        "mode": mode,
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_catch_game(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CatchGame frames without Gym overhead.

    Uses a manual clock advancing 1/30 s per frame and a long round so the
    board fills with items.
    """
    config = load_config()
    clock = ManualClock()
    game = CatchGame(config=config.catch, seed=seed, scheduler=Scheduler(clock))
    rng = np.random.default_rng(seed)
    frame = 1.0 / config.catch.env.fps

    game.start(time_limit=10_000)
    start = time.perf_counter()

    for _ in range(num_steps):
        clock.advance(frame)
        result = game.update(ACTION_LABELS[rng.integers(0, 3)])
        if result.ended:
            game.start(time_limit=10_000)

    elapsed = time.perf_counter() - start
    return _timing("catch_game", num_steps, elapsed)


def benchmark_mines_game(
    num_boards: int = 200,
    seed: int = 42
) -> dict:
    """
    Benchmark MinesGame: build boards and click until each ends.

    One step is one click.
    """
    config = load_config()
    game = MinesGame(config=config.mines, seed=seed)
    rng = np.random.default_rng(seed)
    size = config.mines.board_pixels

    clicks = 0
    start = time.perf_counter()

    for _ in range(num_boards):
        game.init()
        while not game.game_over:
            game.handle_click(rng.uniform(0, size), rng.uniform(0, size))
            clicks += 1

    elapsed = time.perf_counter() - start
    return _timing("mines_game", clicks, elapsed)


def benchmark_catch_env(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """Benchmark CatchEnv steps including observation packing."""
    env = CatchEnv(time_limit=10_000)
    rng = np.random.default_rng(seed)

    env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        _, _, terminated, truncated, _ = env.step(int(rng.integers(0, 3)))
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()
    return _timing("catch_env", num_steps, elapsed)


def benchmark_mines_env(
    num_steps: int = 1000,
    seed: int = 42
) -> dict:
    """Benchmark MinesEnv with random reveal actions."""
    env = MinesEnv()
    rng = np.random.default_rng(seed)
    cells = env.config.mines.cell_count

    env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        _, _, terminated, truncated, _ = env.step((0, int(rng.integers(0, cells))))
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()
    return _timing("mines_env", num_steps, elapsed)


def run_all_benchmarks(steps: int = 500) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("MINIGAMES PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    for label, fn, kwargs in (
        ("CatchGame (raw)", benchmark_catch_game, {"num_steps": steps}),
        ("MinesGame (raw)", benchmark_mines_game, {"num_boards": max(1, steps // 5)}),
        ("CatchEnv", benchmark_catch_env, {"num_steps": steps}),
        ("MinesEnv", benchmark_mines_env, {"num_steps": steps}),
    ):
        print(f"Benchmarking {label}...")
        result = fn(**kwargs)
        results.append(result)
        print(f"  Steps/sec: {result['steps_per_second']:.1f}")
        print(f"  ms/step:   {result['ms_per_step']:.3f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps':>8} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 52)

    for r in results:
        print(f"{r['mode']:<20} {r['num_steps']:>8} {r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark minigame engine performance")
    parser.add_argument("--steps", type=int, default=500, help="Steps per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps
    run_all_benchmarks(steps=steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
