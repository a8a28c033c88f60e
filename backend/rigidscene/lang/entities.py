"""Entity values produced by evaluation.

Bodies, constraints and composites are immutable pydantic models; relabeling
an entity produces a copy with the same internal `id`, so identity survives
a `label` expression.
"""
from __future__ import annotations

import uuid
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

EdgeKind = Literal["rigid", "spring", "pin", "rope"]


def new_id(prefix: str) -> str:
  """Mint a unique internal identifier for an entity."""
  return f"{prefix}-{uuid.uuid4().hex[:12]}"


class Point(BaseModel):
  model_config = ConfigDict(frozen=True)

  x: Any
  y: Any


class Body(BaseModel):
  """A realized body: shape, positional shape params and a property bag."""
  model_config = ConfigDict(frozen=True)

  type: Literal["body"] = "body"
  id: str = Field(default_factory=lambda: new_id("body"))
  shape: str
  params: dict[str, Any] = Field(default_factory=dict, description="Positional shape params by name.")
  props: dict[str, Any] = Field(default_factory=dict, description="Physical / rendering attributes.")
  label: Optional[str] = None


class Endpoint(BaseModel):
  """One end of a constraint.

  `body_id` is known when the endpoint was an inline body, or when the label
  already named a body at evaluation time. Otherwise only `label` is set and
  the hydrator resolves it against every body in the program.
  """
  model_config = ConfigDict(frozen=True)

  label: Optional[str] = None
  body_id: Optional[str] = None

  def describe(self) -> str:
    return self.label or self.body_id or "<anonymous>"


class Constraint(BaseModel):
  model_config = ConfigDict(frozen=True)

  type: Literal["constraint"] = "constraint"
  id: str = Field(default_factory=lambda: new_id("constraint"))
  edge: EdgeKind
  source: Endpoint
  target: Endpoint
  props: dict[str, Any] = Field(default_factory=dict, description="Overrides: length, stiffness, damping, color, ...")
  label: Optional[str] = None


class Composite(BaseModel):
  """A group of bodies, constraints and nested composites.

  `props` holds the placement transform (`x`, `y`, `angle` in degrees,
  `scale`) together with any other attributes of the scope.
  """
  model_config = ConfigDict(frozen=True)

  type: Literal["composite"] = "composite"
  id: str = Field(default_factory=lambda: new_id("composite"))
  bodies: list[Body] = Field(default_factory=list)
  constraints: list[Constraint] = Field(default_factory=list)
  composites: list["Composite"] = Field(default_factory=list)
  props: dict[str, Any] = Field(default_factory=dict)
  label: Optional[str] = None

  def all_bodies(self) -> list[Body]:
    found = list(self.bodies)
    for child in self.composites:
      found.extend(child.all_bodies())
    return found

  def all_constraints(self) -> list[Constraint]:
    found = list(self.constraints)
    for child in self.composites:
      found.extend(child.all_constraints())
    return found


Composite.model_rebuild()

Entity = Body | Constraint | Composite

# entity type -> environment accumulator
ENTITY_PLURAL: dict[str, str] = {
  "body": "bodies",
  "constraint": "constraints",
  "composite": "composites",
}


def is_entity(value: Any) -> bool:
  return isinstance(value, (Body, Constraint, Composite))


__all__ = [
  "EdgeKind",
  "new_id",
  "Point",
  "Body",
  "Endpoint",
  "Constraint",
  "Composite",
  "Entity",
  "ENTITY_PLURAL",
  "is_entity",
]
