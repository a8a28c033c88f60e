import math

import pytest

from rigidscene.lang.errors import HydrationError, UnresolvedEndpointError
from rigidscene.lang.evaluator import run_program
from rigidscene.models.settings import settings
from rigidscene.sim.engine import MatterWorld
from rigidscene.sim.hydrator import CONSTRAINT_DEFAULTS, create_world


def _hydrate(source: str, **kwargs):
  engine = MatterWorld()
  scene = run_program(source, duplicate_labels=kwargs.pop("duplicate_labels", None))
  index = create_world(engine, engine.world, scene, **kwargs)
  return engine, index


def _by_label(engine, label):
  return next(b for b in engine.all_bodies() if b.label == label)


def test_two_bodies_and_a_rigid_constraint():
  engine, _ = _hydrate("a: rectangle 0 0 10 10; b: rectangle 50 0 10 10; a -- b;")
  assert len(engine.all_bodies()) == 2
  (constraint,) = engine.all_constraints()
  assert constraint.bodyA == _by_label(engine, "a").id
  assert constraint.bodyB == _by_label(engine, "b").id
  assert constraint.stiffness == 1
  assert constraint.length == pytest.approx(50)


def test_missing_endpoint_is_skipped():
  engine, _ = _hydrate("a: rectangle 0 0 10 10; a -- missing;")
  assert len(engine.all_bodies()) == 1
  assert engine.all_constraints() == []


def test_missing_endpoint_raises_in_strict_mode():
  with pytest.raises(UnresolvedEndpointError) as excinfo:
    _hydrate("a: rectangle 0 0 10 10; a -- missing;", strict=True)
  assert excinfo.value.endpoint == "missing"


def test_strict_mode_from_settings(monkeypatch):
  monkeypatch.setattr(settings, "STRICT_CONSTRAINTS", True)
  with pytest.raises(UnresolvedEndpointError):
    _hydrate("a: rectangle 0 0 10 10; missing -- a;")


def test_body_count_matches_evaluation_without_constraints():
  source = "(grid 3 3 (i, j => circle (* i 20) (* j 20) 5)); {rectangle 0 0 5 5; circle 1 1 1;} [x=5];"
  scene = run_program(source)
  engine = MatterWorld()
  create_world(engine, engine.world, scene)
  assert len(engine.all_bodies()) == len(scene.all_bodies()) == 11


def test_body_defaults_and_overrides():
  engine, _ = _hydrate("a: circle 0 0 5; b: circle 0 0 5 [restitution=0.5, friction=0, color=red, angle=90, isStatic];")
  a, b = _by_label(engine, "a"), _by_label(engine, "b")
  assert a.options["restitution"] == 0.9
  assert a.options["friction"] == 0.1
  assert "render" not in a.options
  assert b.options["restitution"] == 0.5
  assert b.options["friction"] == 0
  assert b.options["render"] == {"fillStyle": "red"}
  assert b.angle == pytest.approx(math.pi / 2)
  assert b.isStatic is True
  assert b.args == [0, 0, 5]


@pytest.mark.parametrize("edge,kind", [("--", "rigid"), ("%%", "spring"), ("-o-", "pin"), ("~~", "rope")])
def test_constraint_defaults_per_edge(edge, kind):
  engine, _ = _hydrate(f"a: circle 0 0 5; b: circle 40 0 5; a {edge} b [color=teal];")
  (constraint,) = engine.all_constraints()
  defaults = CONSTRAINT_DEFAULTS[kind]
  assert constraint.stiffness == defaults["stiffness"]
  assert constraint.damping == defaults.get("damping", 0.0)
  if "length" in defaults:
    assert constraint.length == 0
  assert constraint.options["render"] == {"strokeStyle": "teal"}


def test_constraint_overrides_and_vectors():
  engine, _ = _hydrate("a: circle 0 0 5; b: circle 40 0 5; a %% b [length=100, stiffness=0.5, pointA=[1 2]];")
  (constraint,) = engine.all_constraints()
  assert constraint.length == 100
  assert constraint.stiffness == 0.5
  assert (constraint.pointA.x, constraint.pointA.y) == (1, 2)


def test_constraints_land_in_their_composite():
  engine, index = _hydrate("{p: circle 0 0 1; q: circle 10 0 1; p -- q;} [x=100, y=50]; top: circle 0 0 1; top -- p;")
  (group,) = engine.world.composites
  assert len(group.constraints) == 1
  assert len(engine.world.constraints) == 1
  assert [(b.position.x, b.position.y) for b in group.bodies] == [(100, 50), (110, 50)]
  assert index.by_label["top"].id == engine.world.constraints[0].bodyA


def test_composite_transform_order():
  engine, _ = _hydrate("{circle 0 0 1; circle 10 0 1;} [x=100, angle=180, scale=2, label=pair];")
  (group,) = engine.world.composites
  assert [b.position.x for b in group.bodies] == pytest.approx([115, 95])
  assert all(b.angle == pytest.approx(math.pi) for b in group.bodies)
  assert group.label == "pair"
  assert group.options == {}


def test_forward_and_nested_references_resolve():
  engine, _ = _hydrate("a -- b; a: circle 0 0 1; {b: circle 5 5 1;};")
  (constraint,) = engine.all_constraints()
  assert constraint.bodyB == _by_label(engine, "b").id


def test_duplicate_labels_keep_first_body():
  engine, index = _hydrate("a: circle 0 0 1; a: circle 9 9 1; b: circle 5 5 1; a -- b;", duplicate_labels="first")
  first = engine.all_bodies()[0]
  assert index.by_label["a"] is first
  (constraint,) = engine.all_constraints()
  assert constraint.bodyA == first.id


def test_closure_props_are_stringified():
  engine, _ = _hydrate("f: (x => x); circle 0 0 1 [on-hit=f];")
  (body,) = engine.all_bodies()
  assert isinstance(body.options["on-hit"], str)


@pytest.mark.parametrize("source,attribute", [
  ("circle 0 0 5 [angle=steep];", "angle"),
  ("{circle 0 0 5;} [x=left];", "x"),
  ("{circle 0 0 5;} [angle=steep];", "angle"),
  ("{circle 0 0 5;} [scale=big];", "scale"),
])
def test_non_numeric_transform_is_hydration_error(source, attribute):
  with pytest.raises(HydrationError) as excinfo:
    _hydrate(source)
  assert f"'{attribute}'" in str(excinfo.value)
  assert excinfo.value.to_dict()["error"] == "hydration_error"
