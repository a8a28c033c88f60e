"""Physics engine adapter.

`Engine` is the slice of the Matter.js API the hydrator talks to. `MatterWorld`
implements it in memory: it keeps Matter-shaped records of every body,
constraint and composite so a world can be inspected in Python or shipped as
JSON to the Matter.js worker, which replays it with the real engine.
"""
from __future__ import annotations

import itertools
import math
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, Field


class Vector2(BaseModel):
  x: float = 0.0
  y: float = 0.0


class EngineBody(BaseModel):
  id: int
  label: str = "Body"
  shape: str
  args: list[Any] = Field(default_factory=list, description="Constructor args as passed to Matter.Bodies[shape].")
  position: Vector2 = Field(default_factory=Vector2)
  angle: float = Field(0.0, description="Rotation in radians.")
  scale: float = 1.0
  velocity: Vector2 = Field(default_factory=Vector2)
  isStatic: bool = False
  options: dict[str, Any] = Field(default_factory=dict)


class EngineConstraint(BaseModel):
  id: int
  label: str = "Constraint"
  bodyA: Optional[int] = None
  bodyB: Optional[int] = None
  pointA: Vector2 = Field(default_factory=Vector2)
  pointB: Vector2 = Field(default_factory=Vector2)
  length: float = 0.0
  stiffness: float = 1.0
  damping: float = 0.0
  options: dict[str, Any] = Field(default_factory=dict)


class EngineComposite(BaseModel):
  id: int
  label: str = "Composite"
  bodies: list[EngineBody] = Field(default_factory=list)
  constraints: list[EngineConstraint] = Field(default_factory=list)
  composites: list["EngineComposite"] = Field(default_factory=list)
  options: dict[str, Any] = Field(default_factory=dict)


EngineComposite.model_rebuild()

EngineObject = Union[EngineBody, EngineConstraint, EngineComposite]


class Engine(Protocol):
  world: EngineComposite

  def create_body(self, shape: str, args: Sequence[Any], options: Dict[str, Any]) -> EngineBody: ...
  def create_composite(self, options: Dict[str, Any]) -> EngineComposite: ...
  def create_constraint(self, options: Dict[str, Any]) -> EngineConstraint: ...
  def add(self, parent: EngineComposite, obj: EngineObject) -> None: ...
  def translate(self, composite: EngineComposite, dx: float, dy: float) -> None: ...
  def rotate(self, composite: EngineComposite, angle: float, point: Optional[Vector2] = None) -> None: ...
  def scale(self, composite: EngineComposite, factor: float, point: Optional[Vector2] = None) -> None: ...
  def clear(self, composite: EngineComposite) -> None: ...


def _as_float(value: Any, default: float = 0.0) -> float:
  try:
    result = float(value)
  except (TypeError, ValueError):
    return default
  if math.isnan(result):
    return default
  return result


def _truthy(value: Any) -> bool:
  if isinstance(value, str):
    return value.strip().lower() not in {"", "false", "0"}
  return bool(value)


def _as_vector(value: Any) -> Vector2:
  if value is None:
    return Vector2()
  if isinstance(value, Vector2):
    return value
  if isinstance(value, dict):
    return Vector2(x=_as_float(value.get("x")), y=_as_float(value.get("y")))
  return Vector2(x=_as_float(getattr(value, "x", 0.0)), y=_as_float(getattr(value, "y", 0.0)))


def _rotate_about(p: Vector2, pivot: Vector2, cos_a: float, sin_a: float) -> Vector2:
  dx, dy = p.x - pivot.x, p.y - pivot.y
  return Vector2(x=pivot.x + dx * cos_a - dy * sin_a, y=pivot.y + dx * sin_a + dy * cos_a)


class MatterWorld:
  """In-memory Matter.js-style world."""

  def __init__(self, gravity_y: float = 1.0, width: int = 800, height: int = 450):
    self._ids = itertools.count(1)
    self.gravity = Vector2(x=0.0, y=gravity_y)
    self.width = width
    self.height = height
    self.world = EngineComposite(id=next(self._ids), label="World")

  # --- factories ---

  def create_body(self, shape: str, args: Sequence[Any], options: Dict[str, Any]) -> EngineBody:
    options = dict(options)
    label = str(options.pop("label", "Body"))
    angle = _as_float(options.pop("angle", 0.0))
    is_static = _truthy(options.pop("isStatic", False))
    x = _as_float(args[0]) if len(args) > 0 else 0.0
    y = _as_float(args[1]) if len(args) > 1 else 0.0
    return EngineBody(
      id=next(self._ids),
      label=label,
      shape=shape,
      args=list(args),
      position=Vector2(x=x, y=y),
      angle=angle,
      isStatic=is_static,
      options=options,
    )

  def create_composite(self, options: Dict[str, Any]) -> EngineComposite:
    options = dict(options)
    label = str(options.pop("label", None) or "Composite")
    return EngineComposite(id=next(self._ids), label=label, options=options)

  def create_constraint(self, options: Dict[str, Any]) -> EngineConstraint:
    """Build a constraint; `bodyA`/`bodyB` are EngineBody objects (or None)."""
    options = dict(options)
    body_a: Optional[EngineBody] = options.pop("bodyA", None)
    body_b: Optional[EngineBody] = options.pop("bodyB", None)
    point_a = _as_vector(options.pop("pointA", None))
    point_b = _as_vector(options.pop("pointB", None))
    length = options.pop("length", None)
    if length is None:
      # Matter.js measures the initial distance between the two anchors
      a = _anchor(body_a, point_a)
      b = _anchor(body_b, point_b)
      length = math.hypot(a.x - b.x, a.y - b.y)
    length = _as_float(length)
    stiffness = _as_float(options.pop("stiffness", None), 1.0 if length > 0 else 0.7)
    damping = _as_float(options.pop("damping", 0.0))
    return EngineConstraint(
      id=next(self._ids),
      label=str(options.pop("label", "Constraint")),
      bodyA=body_a.id if body_a else None,
      bodyB=body_b.id if body_b else None,
      pointA=point_a,
      pointB=point_b,
      length=length,
      stiffness=stiffness,
      damping=damping,
      options=options,
    )

  # --- composite operations ---

  def add(self, parent: EngineComposite, obj: EngineObject) -> None:
    if isinstance(obj, EngineBody):
      parent.bodies.append(obj)
    elif isinstance(obj, EngineConstraint):
      parent.constraints.append(obj)
    elif isinstance(obj, EngineComposite):
      parent.composites.append(obj)
    else:
      raise TypeError(f"Cannot add {type(obj)!r} to a composite")

  def translate(self, composite: EngineComposite, dx: float, dy: float) -> None:
    for body in all_bodies(composite):
      body.position = Vector2(x=body.position.x + dx, y=body.position.y + dy)

  def rotate(self, composite: EngineComposite, angle: float, point: Optional[Vector2] = None) -> None:
    bodies = all_bodies(composite)
    pivot = point or centroid(bodies)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    for body in bodies:
      body.position = _rotate_about(body.position, pivot, cos_a, sin_a)
      body.angle += angle

  def scale(self, composite: EngineComposite, factor: float, point: Optional[Vector2] = None) -> None:
    bodies = all_bodies(composite)
    pivot = point or centroid(bodies)
    for body in bodies:
      body.position = Vector2(
        x=pivot.x + (body.position.x - pivot.x) * factor,
        y=pivot.y + (body.position.y - pivot.y) * factor,
      )
      body.scale *= factor

  def clear(self, composite: EngineComposite) -> None:
    composite.bodies.clear()
    composite.constraints.clear()
    composite.composites.clear()

  # --- inspection ---

  def all_bodies(self) -> List[EngineBody]:
    return all_bodies(self.world)

  def all_constraints(self) -> List[EngineConstraint]:
    return all_constraints(self.world)

  def find_body(self, body_id: int) -> Optional[EngineBody]:
    return next((b for b in self.all_bodies() if b.id == body_id), None)

  def to_payload(self) -> Dict[str, Any]:
    """JSON document replayed by the Matter.js worker."""
    return {
      "gravity": self.gravity.model_dump(),
      "bounds": {"width": self.width, "height": self.height},
      "world": self.world.model_dump(mode="json"),
    }


def _anchor(body: Optional[EngineBody], point: Vector2) -> Vector2:
  if body is None:
    return point
  return Vector2(x=body.position.x + point.x, y=body.position.y + point.y)


def all_bodies(composite: EngineComposite) -> List[EngineBody]:
  found = list(composite.bodies)
  for child in composite.composites:
    found.extend(all_bodies(child))
  return found


def all_constraints(composite: EngineComposite) -> List[EngineConstraint]:
  found = list(composite.constraints)
  for child in composite.composites:
    found.extend(all_constraints(child))
  return found


def centroid(bodies: Sequence[EngineBody]) -> Vector2:
  if not bodies:
    return Vector2()
  return Vector2(
    x=sum(b.position.x for b in bodies) / len(bodies),
    y=sum(b.position.y for b in bodies) / len(bodies),
  )


__all__ = [
  "Vector2",
  "EngineBody",
  "EngineConstraint",
  "EngineComposite",
  "Engine",
  "MatterWorld",
  "all_bodies",
  "all_constraints",
  "centroid",
]
