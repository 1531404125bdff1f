"""
Flappy Dragon Package
=====================

A side-scrolling cave runner. The dragon holds a fixed horizontal position
while procedurally generated cave terrain scrolls past; the player climbs
and falls to avoid stalactites and stalagmites.

- cave_core: game logic (cave generation, player, rules, state machine,
  frame loop) plus the Gymnasium wrapper
- game_config.yaml: every tunable parameter
"""
