"""Two-pass hydration of an evaluated scene into an engine world.

Constraints may point at bodies declared anywhere in the program, so every
body is created first (pass 1) and constraints are wired afterwards (pass 2).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from rigidscene.lang.entities import Body, Composite, Constraint, Endpoint, Point
from rigidscene.lang.errors import HydrationError, UnresolvedEndpointError
from rigidscene.lang.shapes import shape_params
from rigidscene.logging_utils import get_logger
from rigidscene.models.settings import settings

from .engine import Engine, EngineBody, EngineComposite

logger = get_logger(__name__)

CONSTRAINT_DEFAULTS: Dict[str, Dict[str, float]] = {
  "rigid": {"stiffness": 1},
  "spring": {"stiffness": 0.01},
  "pin": {"stiffness": 1, "length": 0},
  "rope": {"damping": 0.7, "stiffness": 0.3},
}

TRANSFORM_KEYS = ("x", "y", "angle", "scale")


@dataclass
class HydrationIndex:
  """Engine objects created during pass 1, keyed for pass 2 lookups."""
  by_id: Dict[str, EngineBody] = field(default_factory=dict)
  by_label: Dict[str, EngineBody] = field(default_factory=dict)
  composites: Dict[str, EngineComposite] = field(default_factory=dict)

  def register(self, body: Body, engine_body: EngineBody) -> None:
    self.by_id[body.id] = engine_body
    if body.label is None:
      return
    if body.label in self.by_label:
      # first registration wins
      logger.warning("Label %r names more than one body, keeping the first", body.label)
      return
    self.by_label[body.label] = engine_body

  def resolve(self, endpoint: Endpoint) -> Optional[EngineBody]:
    if endpoint.body_id and endpoint.body_id in self.by_id:
      return self.by_id[endpoint.body_id]
    if endpoint.label:
      return self.by_label.get(endpoint.label)
    return None


def _number(name: str, value: Any) -> float:
  if isinstance(value, bool) or not isinstance(value, (int, float)):
    raise HydrationError(f"attribute '{name}' must be a number, got {value!r}")
  return float(value)


def deg2rad(value: Any) -> float:
  return _number("angle", value) * math.pi / 180.0


def _plain(value: Any) -> Any:
  """Engine-friendly form of an evaluated attribute value."""
  if isinstance(value, Point):
    return {"x": value.x, "y": value.y}
  if callable(value):
    return repr(value)
  return value


def body_options(body: Body) -> Dict[str, Any]:
  options: Dict[str, Any] = {
    "restitution": settings.BODY_DEFAULT_RESTITUTION,
    "friction": settings.BODY_DEFAULT_FRICTION,
  }
  options.update({k: _plain(v) for k, v in body.props.items()})
  if options.get("angle"):
    options["angle"] = deg2rad(options["angle"])
  if options.get("color"):
    options["render"] = {**options.get("render", {}), "fillStyle": options["color"]}
  if body.label is not None:
    options["label"] = body.label
  return options


def constraint_options(constraint: Constraint) -> Dict[str, Any]:
  options: Dict[str, Any] = dict(CONSTRAINT_DEFAULTS[constraint.edge])
  options.update({k: _plain(v) for k, v in constraint.props.items()})
  if options.get("color"):
    options["render"] = {**options.get("render", {}), "strokeStyle": options["color"]}
  if constraint.label is not None:
    options["label"] = constraint.label
  return options


def _transform(engine: Engine, group: EngineComposite, props: Dict[str, Any]) -> None:
  x, y = props.get("x"), props.get("y")
  if x or y:
    engine.translate(group, _number("x", x or 0), _number("y", y or 0))
  if props.get("angle"):
    engine.rotate(group, deg2rad(props["angle"]))
  if props.get("scale"):
    engine.scale(group, _number("scale", props["scale"]))


def create_bodies(engine: Engine, parent: EngineComposite, composite: Composite, index: HydrationIndex) -> HydrationIndex:
  """Pass 1: create every body under `composite`, depth first."""
  index.composites[composite.id] = parent
  for body in composite.bodies:
    params = shape_params(body.shape)
    args = [_plain(body.params.get(name)) for name in params]
    engine_body = engine.create_body(body.shape, args, body_options(body))
    engine.add(parent, engine_body)
    index.register(body, engine_body)

  for child in composite.composites:
    options = {k: _plain(v) for k, v in child.props.items() if k not in TRANSFORM_KEYS}
    if child.label is not None:
      options["label"] = child.label
    group = engine.create_composite(options)
    create_bodies(engine, group, child, index)
    _transform(engine, group, child.props)
    engine.add(parent, group)
  return index


def create_constraints(
  engine: Engine,
  composite: Composite,
  index: HydrationIndex,
  strict: Optional[bool] = None,
) -> int:
  """Pass 2: wire constraints into the engine composite of their scope.

  Returns the number of constraints created. An endpoint that names no body is
  skipped, unless `strict` (default `settings.STRICT_CONSTRAINTS`) is set.
  """
  strict = settings.STRICT_CONSTRAINTS if strict is None else strict
  parent = index.composites[composite.id]
  created = 0
  for constraint in composite.constraints:
    body_a = index.resolve(constraint.source)
    body_b = index.resolve(constraint.target)
    if body_a is None or body_b is None:
      missing = constraint.source if body_a is None else constraint.target
      if strict:
        raise UnresolvedEndpointError(missing.describe())
      logger.debug("Skipping %s constraint: no body named %r", constraint.edge, missing.describe())
      continue
    options = constraint_options(constraint)
    options.update(bodyA=body_a, bodyB=body_b)
    engine.add(parent, engine.create_constraint(options))
    created += 1

  for child in composite.composites:
    created += create_constraints(engine, child, index, strict)
  return created


def create_world(engine: Engine, world: EngineComposite, composite: Composite, strict: Optional[bool] = None) -> HydrationIndex:
  """Hydrate `composite` into `world`: all bodies, then all constraints."""
  index = create_bodies(engine, world, composite, HydrationIndex())
  created = create_constraints(engine, composite, index, strict)
  logger.info(
    "hydrated world: %d bodies, %d of %d constraints",
    len(index.by_id), created, len(composite.all_constraints()),
  )
  return index


__all__ = [
  "CONSTRAINT_DEFAULTS",
  "HydrationIndex",
  "body_options",
  "constraint_options",
  "create_bodies",
  "create_constraints",
  "create_world",
  "deg2rad",
]
