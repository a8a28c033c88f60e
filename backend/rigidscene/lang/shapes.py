"""Positional parameter signatures of the body shapes."""
from __future__ import annotations

from .errors import UnknownShapeError

BODY_SHAPES: dict[str, tuple[str, ...]] = {
  "rectangle": ("x", "y", "width", "height"),
  "circle": ("x", "y", "radius"),
  "polygon": ("x", "y", "sides", "radius"),
  "trapezoid": ("x", "y", "width", "height", "slope"),
  "fromVertices": ("x", "y", "vertices"),
}


def shape_params(shape: str) -> tuple[str, ...]:
  try:
    return BODY_SHAPES[shape]
  except KeyError:
    raise UnknownShapeError(shape) from None


__all__ = ["BODY_SHAPES", "shape_params"]
