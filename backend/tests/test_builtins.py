import pytest

from rigidscene.lang.builtins import CORE, grid, repeat
from rigidscene.lang.entities import Body
from rigidscene.lang.environment import Environment
from rigidscene.lang.errors import EvaluationError, NotCallable
from rigidscene.lang.evaluator import run_program


def _call(name, *args):
  env = Environment()
  out_env, value = CORE[name](env, *args)
  assert out_env is env
  return value


def test_arithmetic():
  assert _call("+", 1, 2, 3) == 6
  assert _call("+") == 0
  assert _call("-", 10, 3, 2) == 5
  assert _call("-", 4) == -4
  assert _call("*", 2, 3, 4) == 24
  assert _call("*") == 1
  assert _call("/", 12, 3) == 4
  assert _call("/", 4) == 0.25


def test_arithmetic_rejects_bad_operands():
  with pytest.raises(EvaluationError):
    _call("+", 1, "red")
  with pytest.raises(EvaluationError):
    _call("*", True, 2)
  with pytest.raises(EvaluationError):
    _call("/", 1, 0)
  with pytest.raises(EvaluationError):
    _call("-")


def _add_body(env, *args):
  body = Body(shape="circle", params={"x": 0, "y": 0, "radius": 1})
  return env.accumulate("bodies", body), body


def test_repeat_multiplies_entity_count():
  env, last = repeat(Environment(), 4, _add_body)
  assert len(env.bodies) == 4
  assert last is env.bodies[-1]
  assert len({b.id for b in env.bodies}) == 4


def test_repeat_zero_times():
  env, last = repeat(Environment(), 0, _add_body)
  assert env.bodies == ()
  assert last is None


def test_grid_visits_row_major():
  calls = []

  def record(env, x, y):
    calls.append((x, y))
    return _add_body(env)

  env, _ = grid(Environment(), 3, 2, record)
  assert calls == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]
  assert len(env.bodies) == 6


def test_builtins_require_callables_and_counts():
  with pytest.raises(NotCallable):
    repeat(Environment(), 2, "ball")
  with pytest.raises(NotCallable):
    grid(Environment(), 2, 2, 3)
  with pytest.raises(EvaluationError):
    repeat(Environment(), "many", _add_body)


def test_builtins_from_a_program():
  scene = run_program("(repeat 3 (=> circle 0 0 5)); (grid 2 2 (i, j => circle (* i 10) (* j 10) 1));")
  assert len(scene.bodies) == 7
  xs = [b.params["x"] for b in scene.bodies[3:]]
  ys = [b.params["y"] for b in scene.bodies[3:]]
  assert xs == [0, 10, 0, 10]
  assert ys == [0, 0, 10, 10]


def test_fractional_counts_round_up():
  env, _ = repeat(Environment(), 2.5, _add_body)
  assert len(env.bodies) == 3

  calls = []

  def record(env, x, y):
    calls.append((x, y))
    return env, None

  grid(Environment(), 1.5, 0.5, record)
  assert calls == [(0, 0), (1, 0)]


def test_negative_and_infinite_counts():
  env, _ = repeat(Environment(), -2, _add_body)
  assert env.bodies == ()
  with pytest.raises(EvaluationError):
    repeat(Environment(), float("inf"), _add_body)
