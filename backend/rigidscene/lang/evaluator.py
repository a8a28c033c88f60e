"""Tree-walking evaluator for scene programs.

Every case takes an environment and a node and returns the pair
`(environment, value)`. Entities realized along the way are appended to the
returned environment's accumulators; nothing is accumulated globally.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from rigidscene.logging_utils import get_logger
from rigidscene.models.settings import settings

from .ast import (
  BodyNode, CallNode, CompositeNode, ConstraintNode, Expr, FnNode, LabelNode,
  ScopeNode, SymbolNode, VectorNode,
)
from .builtins import CORE
from .entities import Body, Composite, Constraint, Endpoint, Point, is_entity
from .environment import Environment, initial_environment
from .errors import FunctionNotFound, NotCallable, StructuralError
from .parser import parse_program
from .shapes import shape_params

logger = get_logger(__name__)

Result = Tuple[Environment, Any]


@dataclass(frozen=True)
class Closure:
  """A user function: its declared parameters and body.

  Called with the caller's environment, so everything in scope at the call
  site stays visible inside the body; parameters shadow it.
  """
  params: Tuple[str, ...]
  body: Expr

  def __call__(self, env: Environment, *args: Any) -> Result:
    return evaluate(env.bind_params(self.params, args), self.body)

  def __repr__(self) -> str:
    return f"<fn ({', '.join(self.params)})>"


def evaluate(env: Environment, expr: Expr) -> Result:
  """Evaluate `expr` in `env`, returning the updated environment and the value."""
  if isinstance(expr, SymbolNode):
    return env, _resolve_symbol(env, expr.name)
  if isinstance(expr, BodyNode):
    return _eval_body(env, expr)
  if isinstance(expr, ConstraintNode):
    return _eval_constraint(env, expr)
  if isinstance(expr, CompositeNode):
    return eval_composite(env, expr.statements)
  if isinstance(expr, ScopeNode):
    return _eval_scope(env, expr)
  if isinstance(expr, LabelNode):
    return _eval_label(env, expr)
  if isinstance(expr, FnNode):
    return env, Closure(params=tuple(expr.params), body=expr.body)
  if isinstance(expr, CallNode):
    return _eval_call(env, expr)
  if isinstance(expr, VectorNode):
    env, items = eval_seq(env, expr.items)
    return env, Point(x=items[0], y=items[1])
  if expr is None or isinstance(expr, (bool, int, float, str)):
    return env, expr
  raise StructuralError(f"Unexpected node {expr!r}")


def eval_seq(env: Environment, exprs: Iterable[Expr]) -> Tuple[Environment, List[Any]]:
  values: List[Any] = []
  for expr in exprs:
    env, value = evaluate(env, expr)
    values.append(value)
  return env, values


def eval_map(env: Environment, pairs: Iterable[Tuple[str, Expr]]) -> Tuple[Environment, Dict[str, Any]]:
  values: Dict[str, Any] = {}
  for key, expr in pairs:
    env, values[key] = evaluate(env, expr)
  return env, values


def eval_composite(env: Environment, statements: Iterable[Expr]) -> Result:
  """Evaluate statements in order; the value is that of the last one."""
  result = None
  for stmt in statements:
    env, result = evaluate(env, stmt)
  return env, result


def _resolve_symbol(env: Environment, name: str) -> Any:
  # unbound symbols stand for themselves (colors, flags, names)
  if name in env.labels:
    return env.labels[name]
  return name


def _eval_body(env: Environment, node: BodyNode) -> Result:
  params = shape_params(node.shape)
  env, args = eval_map(env, zip(params, node.args))
  env, attrs = eval_map(env, node.attrs)
  body = Body(shape=node.shape, params=args, props=attrs)
  return env.accumulate("bodies", body), body


def _eval_endpoint(env: Environment, node: Any) -> Tuple[Environment, Endpoint]:
  if isinstance(node, SymbolNode):
    bound = env.lookup(node.name)
    if isinstance(bound, Body):
      return env, Endpoint(label=bound.label, body_id=bound.id)
    # a symbol bound to a string names the body indirectly
    name = bound if isinstance(bound, str) else node.name
    known = env.find_body(name)
    return env, Endpoint(label=name, body_id=known.id if known else None)
  env, value = evaluate(env, node)
  if not isinstance(value, Body):
    raise StructuralError(f"Constraint endpoint must evaluate to a body, got {value!r}")
  return env, Endpoint(label=value.label, body_id=value.id)


def _eval_constraint(env: Environment, node: ConstraintNode) -> Result:
  env, source = _eval_endpoint(env, node.source)
  env, target = _eval_endpoint(env, node.target)
  env, attrs = eval_map(env, node.attrs)
  constraint = Constraint(edge=node.edge, source=source, target=target, props=attrs)
  return env.accumulate("constraints", constraint), constraint


def _eval_scope(env: Environment, node: ScopeNode) -> Result:
  env, attrs = eval_map(env, node.attrs)
  inner, _ = eval_composite(env.cleared(), node.body.statements)
  composite = inner.to_composite(props=attrs)
  return env.accumulate("composites", composite), composite


def _eval_label(env: Environment, node: LabelNode) -> Result:
  env, value = evaluate(env, node.expr)
  if is_entity(value):
    return env.relabel(value, node.name)
  return env.bind(node.name, value), value


def _eval_call(env: Environment, node: CallNode) -> Result:
  fn = env.lookup(node.name)
  if fn is None:
    fn = CORE.get(node.name)
  if fn is None:
    raise FunctionNotFound(node.name, env.labels)
  if not callable(fn):
    raise NotCallable(node.name, fn)

  env, args = eval_seq(env, node.args)
  logger.debug("call %s with %d argument(s)", node.name, len(args))
  fn_env, result = fn(env, *args)
  # only entities flow back to the caller, labels bound inside the call do not
  return env.merge_entities(fn_env), result


def evaluate_program(
  program: CompositeNode,
  *,
  labels: Optional[Dict[str, Any]] = None,
  duplicate_labels: Optional[str] = None,
) -> Composite:
  """Evaluate a normalized program into its root composite."""
  env = initial_environment(labels, duplicate_labels or settings.DUPLICATE_LABELS)
  env, _ = evaluate(env, program)
  logger.info(
    "evaluated program: %d bodies, %d constraints, %d composites",
    len(env.bodies), len(env.constraints), len(env.composites),
  )
  return env.to_composite()


def run_program(source: str, *, grammar: Optional[str] = None, duplicate_labels: Optional[str] = None) -> Composite:
  """Parse, normalize and evaluate `source`."""
  return evaluate_program(parse_program(source, grammar), duplicate_labels=duplicate_labels)


__all__ = [
  "Closure",
  "evaluate",
  "eval_seq",
  "eval_map",
  "eval_composite",
  "evaluate_program",
  "run_program",
]
