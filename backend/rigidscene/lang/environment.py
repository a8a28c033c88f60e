"""The environment threaded through evaluation.

An Environment is never mutated: every operation returns a new one. It holds
the label bindings in scope plus the entities accumulated so far, in order.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple

from .entities import ENTITY_PLURAL, Body, Composite, Constraint
from .errors import DuplicateLabelError


@dataclass(frozen=True)
class Environment:
  labels: Dict[str, Any] = field(default_factory=dict)
  bodies: Tuple[Body, ...] = ()
  constraints: Tuple[Constraint, ...] = ()
  composites: Tuple[Composite, ...] = ()
  # "reject" | "first", see Settings.DUPLICATE_LABELS
  duplicate_labels: str = "reject"

  # --- labels ---

  def lookup(self, name: str) -> Optional[Any]:
    return self.labels.get(name)

  def bind(self, name: str, value: Any) -> "Environment":
    return replace(self, labels={**self.labels, name: value})

  def bind_params(self, params: Sequence[str], args: Sequence[Any]) -> "Environment":
    """Shadow `params` with `args` (pairwise; surplus on either side is ignored)."""
    return replace(self, labels={**self.labels, **dict(zip(params, args))})

  # --- entity accumulators ---

  def accumulate(self, kind: str, entity: Any) -> "Environment":
    """Append `entity` to the `bodies`, `constraints` or `composites` accumulator."""
    current = self._accumulator(kind)
    return replace(self, **{kind: current + (entity,)})

  def cleared(self) -> "Environment":
    """Same labels, empty accumulators: the starting point of a scope."""
    return replace(self, bodies=(), constraints=(), composites=())

  def merge_entities(self, other: "Environment") -> "Environment":
    """Take `other`'s accumulators, keeping this environment's labels."""
    return replace(
      self,
      bodies=other.bodies,
      constraints=other.constraints,
      composites=other.composites,
    )

  def relabel(self, entity: Any, name: str) -> Tuple["Environment", Any]:
    """Rename an accumulated entity, replacing it in place.

    The most recently appended entity with the same id is replaced. An entity
    that is not in this environment's accumulators is bound as a plain label.
    """
    kind = ENTITY_PLURAL[entity.type]
    items = self._accumulator(kind)
    for index in range(len(items) - 1, -1, -1):
      if items[index].id == entity.id:
        break
    else:
      return self.bind(name, entity), entity

    if self.duplicate_labels == "reject" and any(
      other.label == name for i, other in enumerate(items) if i != index
    ):
      raise DuplicateLabelError(name, kind)

    renamed = items[index].model_copy(update={"label": name})
    items = items[:index] + (renamed,) + items[index + 1:]
    return replace(self, **{kind: items}), renamed

  def find_body(self, label: str) -> Optional[Body]:
    """First accumulated body carrying `label`, if any."""
    return next((b for b in self.bodies if b.label == label), None)

  def to_composite(self, props: Optional[Dict[str, Any]] = None, label: Optional[str] = None) -> Composite:
    return Composite(
      bodies=list(self.bodies),
      constraints=list(self.constraints),
      composites=list(self.composites),
      props=dict(props or {}),
      label=label,
    )

  def entity_count(self) -> int:
    return len(self.bodies) + len(self.constraints) + len(self.composites)

  def _accumulator(self, kind: str) -> Tuple[Any, ...]:
    if kind not in ENTITY_PLURAL.values():
      raise ValueError(f"Unknown entity accumulator: {kind}")
    return getattr(self, kind)


def initial_environment(labels: Optional[Dict[str, Any]] = None, duplicate_labels: str = "reject") -> Environment:
  return Environment(labels=dict(labels or {}), duplicate_labels=duplicate_labels)


__all__ = ["Environment", "initial_environment"]
