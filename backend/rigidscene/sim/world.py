"""World lifecycle: start, stop and re-run scenes.

There is no process-wide current world. `start` returns a `WorldHandle` that
the caller threads into `stop`; `SceneSession` does that bookkeeping for a
caller that re-runs programs one after another.
"""
from __future__ import annotations

import math
import random
from typing import Any, Callable, Dict, Optional

from rigidscene.lang.entities import Composite
from rigidscene.lang.evaluator import run_program
from rigidscene.logging_utils import get_logger
from rigidscene.models.settings import settings

from .engine import MatterWorld, Vector2
from .hydrator import HydrationIndex, create_world
from .physics.matter_bridge import simulate_world

logger = get_logger(__name__)

EngineFactory = Callable[[], MatterWorld]

EXPLODE_SPEED = 25.0


def default_engine() -> MatterWorld:
  return MatterWorld(
    gravity_y=settings.WORLD_GRAVITY_Y,
    width=settings.WORLD_WIDTH,
    height=settings.WORLD_HEIGHT,
  )


def add_boundaries(engine: MatterWorld) -> None:
  """Static walls just outside the visible area."""
  width, height = engine.width, engine.height
  thickness = height / 2.0
  t2 = thickness / 2.0
  options = {
    "isStatic": True,
    "restitution": settings.BODY_DEFAULT_RESTITUTION,
    "friction": settings.BODY_DEFAULT_FRICTION,
    "label": "Wall",
  }
  walls = [
    (-t2, height / 2.0, thickness, height),
    (width + t2, height / 2.0, thickness, height),
    (width / 2.0, -t2, width, thickness),
    (width / 2.0, height + t2, width, thickness),
  ]
  for x, y, w, h in walls:
    engine.add(engine.world, engine.create_body("rectangle", [x, y, w, h], options))


class WorldHandle:
  """A live, hydrated world. Use as a context manager to guarantee teardown."""

  def __init__(self, engine: MatterWorld, scene: Composite, index: HydrationIndex):
    self.engine = engine
    self.scene = scene
    self.index = index
    self.running = True

  @property
  def world(self):
    return self.engine.world

  def __enter__(self) -> "WorldHandle":
    return self

  def __exit__(self, exc_type, exc, tb) -> None:
    stop(self)

  def _require_running(self) -> None:
    if not self.running:
      raise RuntimeError("World has been stopped")

  def explode(self, rng: Optional[random.Random] = None) -> None:
    """Kick every dynamic body with a random velocity."""
    self._require_running()
    rng = rng or random.Random()
    for body in self.engine.all_bodies():
      if body.isStatic:
        continue
      body.velocity = Vector2(
        x=rng.uniform(-EXPLODE_SPEED, EXPLODE_SPEED),
        y=rng.uniform(-EXPLODE_SPEED, EXPLODE_SPEED),
      )

  def rotate(self, angle: float = math.pi / 12) -> None:
    """Rotate the whole world about the centre of the view."""
    self._require_running()
    centre = Vector2(x=self.engine.width / 2.0, y=self.engine.height / 2.0)
    self.engine.rotate(self.engine.world, angle, centre)

  def simulate(self, duration_s: Optional[float] = None, frame_rate: Optional[int] = None) -> Dict[str, Any]:
    self._require_running()
    return simulate_world(self.engine.to_payload(), duration_s, frame_rate)

  def summary(self) -> Dict[str, int]:
    return {
      "bodies": len(self.engine.all_bodies()),
      "constraints": len(self.engine.all_constraints()),
      "composites": len(self.engine.world.composites),
    }


def start(
  scene: Composite,
  *,
  engine_factory: Optional[EngineFactory] = None,
  boundaries: Optional[bool] = None,
  strict: Optional[bool] = None,
) -> WorldHandle:
  """Create a fresh engine and hydrate `scene` into it."""
  engine = (engine_factory or default_engine)()
  if settings.WORLD_BOUNDARIES if boundaries is None else boundaries:
    add_boundaries(engine)
  index = create_world(engine, engine.world, scene, strict)
  logger.info("started world %d", engine.world.id)
  return WorldHandle(engine, scene, index)


def stop(handle: Optional[WorldHandle]) -> None:
  """Tear down a world. Stopping twice (or stopping None) is a no-op."""
  if handle is None or not handle.running:
    return
  handle.engine.clear(handle.engine.world)
  handle.running = False
  logger.info("stopped world %d", handle.engine.world.id)


class SceneSession:
  """Runs programs one at a time; each successful run replaces the last world."""

  def __init__(
    self,
    engine_factory: Optional[EngineFactory] = None,
    boundaries: Optional[bool] = None,
  ):
    self.engine_factory = engine_factory
    self.boundaries = boundaries
    self.handle: Optional[WorldHandle] = None

  def run(self, source: str, grammar: Optional[str] = None, strict: Optional[bool] = None) -> WorldHandle:
    # the new world is built in its own engine, a failing program leaves the live one running
    scene = run_program(source, grammar=grammar)
    handle = start(scene, engine_factory=self.engine_factory, boundaries=self.boundaries, strict=strict)
    stop(self.handle)
    self.handle = handle
    return handle

  def stop(self) -> None:
    stop(self.handle)
    self.handle = None

  def __enter__(self) -> "SceneSession":
    return self

  def __exit__(self, exc_type, exc, tb) -> None:
    self.stop()


__all__ = [
  "WorldHandle",
  "SceneSession",
  "add_boundaries",
  "default_engine",
  "start",
  "stop",
]
