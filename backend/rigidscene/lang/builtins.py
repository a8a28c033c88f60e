"""Core built-in functions available to every program.

Each built-in has the closure calling convention: it receives the caller's
environment followed by the evaluated arguments and returns
`(environment, value)`.
"""
from __future__ import annotations

import math
from functools import reduce
from typing import Any, Callable, Dict, Tuple

from .environment import Environment
from .errors import EvaluationError, NotCallable

Builtin = Callable[..., Tuple[Environment, Any]]


def _numbers(op: str, args: Tuple[Any, ...]) -> list[float]:
  for arg in args:
    if isinstance(arg, bool) or not isinstance(arg, (int, float)):
      raise EvaluationError(f"'{op}' expects numbers, got {arg!r}")
  return list(args)


def _add(env: Environment, *args):
  return env, sum(_numbers("+", args))


def _sub(env: Environment, *args):
  nums = _numbers("-", args)
  if not nums:
    raise EvaluationError("'-' expects at least one argument")
  if len(nums) == 1:
    return env, -nums[0]
  return env, reduce(lambda a, b: a - b, nums)


def _mul(env: Environment, *args):
  return env, math.prod(_numbers("*", args))


def _div(env: Environment, *args):
  nums = _numbers("/", args)
  if not nums:
    raise EvaluationError("'/' expects at least one argument")
  if len(nums) == 1:
    nums = [1] + nums
  try:
    return env, reduce(lambda a, b: a / b, nums)
  except ZeroDivisionError as e:
    raise EvaluationError("Division by zero") from e


def _count(name: str, value: Any) -> int:
  """Number of iterations for `value`; a fractional count rounds up."""
  if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
    raise EvaluationError(f"'{name}' expects a count, got {value!r}")
  return max(0, math.ceil(value))


def _check_callable(name: str, f: Any) -> None:
  if not callable(f):
    raise NotCallable(name, f)


def repeat(env: Environment, n: Any, f: Any):
  """Invoke `f` `n` times, threading accumulated entities from call to call."""
  _check_callable("repeat", f)
  result = None
  for _ in range(_count("repeat", n)):
    fn_env, result = f(env)
    env = env.merge_entities(fn_env)
  return env, result


def grid(env: Environment, nx: Any, ny: Any, f: Any):
  """Invoke `f(x, y)` over an nx-by-ny grid in row-major order (y outer, x inner)."""
  _check_callable("grid", f)
  result = None
  for y in range(_count("grid", ny)):
    for x in range(_count("grid", nx)):
      fn_env, result = f(env, x, y)
      env = env.merge_entities(fn_env)
  return env, result


CORE: Dict[str, Builtin] = {
  "+": _add,
  "-": _sub,
  "*": _mul,
  "/": _div,
  "repeat": repeat,
  "grid": grid,
}


__all__ = ["CORE", "Builtin", "repeat", "grid"]
