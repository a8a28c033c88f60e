"""Scene hydration and simulation.

This module provides:
- Engine adapter with an in-memory Matter.js-style world (engine.py)
- Two-pass World Hydrator (hydrator.py)
- World lifecycle: start, stop, SceneSession (world.py)
- Physics engines (physics/):
  - Matter.js bridge for stepping a hydrated world
"""

from rigidscene.sim.engine import Engine, EngineBody, EngineComposite, EngineConstraint, MatterWorld
from rigidscene.sim.hydrator import HydrationIndex, create_bodies, create_constraints, create_world
from rigidscene.sim.physics import simulate_world
from rigidscene.sim.world import SceneSession, WorldHandle, start, stop

__all__ = [
    # Engine
    "Engine",
    "EngineBody",
    "EngineComposite",
    "EngineConstraint",
    "MatterWorld",
    # Hydrator
    "HydrationIndex",
    "create_bodies",
    "create_constraints",
    "create_world",
    # Lifecycle
    "SceneSession",
    "WorldHandle",
    "start",
    "stop",
    # Physics engine
    "simulate_world",
]
