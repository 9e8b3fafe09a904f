"""
Minigames Package
=================

Rule engines for two small arcade games:

- Catch: a basket in one of three lanes catches falling apples and grapes
  and must avoid bombs before the countdown runs out.
- Mines: a 9x9 minesweeper with 9 mines and a reveal/flag click mode.

Gameplay constants live in game_config.yaml and are locked; the only runtime
override is the catch round's time limit.
"""
