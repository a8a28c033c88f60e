"""Physics engine bridges."""

from rigidscene.sim.physics.matter_bridge import simulate_world

__all__ = [
    "simulate_world",  # Matter.js worker
]
