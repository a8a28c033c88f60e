"""Exceptions raised while parsing, evaluating and hydrating scene programs.

Every error aborts the current run; nothing is recovered or partially
hydrated. `to_dict()` gives the JSON shape reported by the HTTP layer.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class SceneError(Exception):
  """Base class for every rigidscene failure."""

  code = "scene_error"

  def to_dict(self) -> Dict[str, Any]:
    return {"error": self.code, "message": str(self)}


class ParseError(SceneError):
  """Source text does not match the grammar."""

  code = "parse_error"

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None, context: str = ""):
    self.line = line
    self.column = column
    self.context = context
    super().__init__(message)

  def to_dict(self) -> Dict[str, Any]:
    data = super().to_dict()
    data.update({"line": self.line, "column": self.column, "context": self.context})
    return data


class GrammarError(SceneError):
  """Grammar text itself could not be compiled into a parser."""

  code = "grammar_error"


class StructuralError(SceneError):
  """Malformed AST node or unknown tag: the grammar and normalizer disagree."""

  code = "structural_error"


class EvaluationError(SceneError):
  code = "evaluation_error"


class UnknownShapeError(EvaluationError):
  code = "unknown_shape"

  def __init__(self, shape: str):
    self.shape = shape
    super().__init__(f"Unknown body shape: {shape}")


class FunctionNotFound(EvaluationError):
  """A call names neither a bound closure nor a core built-in."""

  code = "function_not_found"

  def __init__(self, fn_name: str, labels: Dict[str, Any]):
    self.fn_name = fn_name
    self.labels = dict(labels)
    super().__init__(f"Function not found: {fn_name}")

  def to_dict(self) -> Dict[str, Any]:
    data = super().to_dict()
    data["fn_name"] = self.fn_name
    data["labels"] = sorted(self.labels)
    return data


class NotCallable(EvaluationError):
  code = "not_callable"

  def __init__(self, fn_name: str, value: Any):
    self.fn_name = fn_name
    self.value = value
    super().__init__(f"Label {fn_name!r} is bound to {value!r}, which is not a function")


class DuplicateLabelError(EvaluationError):
  code = "duplicate_label"

  def __init__(self, label: str, kind: str):
    self.label = label
    self.kind = kind
    super().__init__(f"Label {label!r} is already used by another entity in {kind}")


class HydrationError(SceneError):
  code = "hydration_error"


class UnresolvedEndpointError(HydrationError):
  """Raised for a constraint endpoint missing from the body index (strict mode only)."""

  code = "unresolved_endpoint"

  def __init__(self, endpoint: str):
    self.endpoint = endpoint
    super().__init__(f"Constraint endpoint not found: {endpoint}")


__all__ = [
  "SceneError",
  "ParseError",
  "GrammarError",
  "StructuralError",
  "EvaluationError",
  "UnknownShapeError",
  "FunctionNotFound",
  "NotCallable",
  "DuplicateLabelError",
  "HydrationError",
  "UnresolvedEndpointError",
]
