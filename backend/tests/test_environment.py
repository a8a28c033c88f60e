import pytest

from rigidscene.lang.entities import Body, Composite
from rigidscene.lang.environment import Environment, initial_environment
from rigidscene.lang.errors import DuplicateLabelError


def _body(**kwargs) -> Body:
  return Body(shape="circle", params={"x": 0, "y": 0, "radius": 1}, **kwargs)


def test_lookup_and_bind_do_not_mutate():
  env = initial_environment({"k": 1})
  bound = env.bind("w", 2)
  assert env.lookup("w") is None
  assert bound.lookup("w") == 2
  assert bound.lookup("k") == 1


def test_bind_params_shadows_and_ignores_surplus():
  env = initial_environment({"x": 99, "y": 1})
  inner = env.bind_params(("x", "z"), (5, 6, 7))
  assert inner.lookup("x") == 5
  assert inner.lookup("z") == 6
  assert inner.lookup("y") == 1
  assert env.lookup("x") == 99

  partial = env.bind_params(("a", "b"), (1,))
  assert partial.lookup("a") == 1
  assert partial.lookup("b") is None


def test_accumulate_is_append_only_and_ordered():
  first, second = _body(), _body()
  env = Environment().accumulate("bodies", first).accumulate("bodies", second)
  assert env.bodies == (first, second)
  assert Environment().bodies == ()


def test_accumulate_rejects_unknown_kind():
  with pytest.raises(ValueError):
    Environment().accumulate("widgets", _body())


def test_cleared_keeps_labels():
  env = initial_environment({"k": 1}).accumulate("bodies", _body())
  cleared = env.cleared()
  assert cleared.bodies == ()
  assert cleared.lookup("k") == 1


def test_merge_entities_keeps_own_labels():
  outer = initial_environment({"k": 1})
  inner = outer.bind("tmp", 2).accumulate("bodies", _body())
  merged = outer.merge_entities(inner)
  assert len(merged.bodies) == 1
  assert merged.lookup("tmp") is None


def test_relabel_replaces_in_place_and_keeps_identity():
  a, b = _body(), _body()
  env = Environment().accumulate("bodies", a).accumulate("bodies", b)
  env, renamed = env.relabel(a, "left")
  assert renamed.id == a.id
  assert renamed.label == "left"
  assert env.bodies[0] is renamed
  assert env.bodies[1] is b
  assert env.find_body("left") is renamed


def test_relabel_composite():
  group = Composite()
  env, renamed = Environment().accumulate("composites", group).relabel(group, "g")
  assert env.composites[0].label == "g"
  assert renamed.id == group.id


def test_duplicate_label_rejected_by_default():
  a, b = _body(), _body()
  env = Environment().accumulate("bodies", a).accumulate("bodies", b)
  env, _ = env.relabel(a, "dup")
  with pytest.raises(DuplicateLabelError) as excinfo:
    env.relabel(b, "dup")
  assert excinfo.value.label == "dup"
  assert excinfo.value.to_dict()["error"] == "duplicate_label"


def test_duplicate_label_allowed_in_first_mode():
  a, b = _body(), _body()
  env = initial_environment(duplicate_labels="first").accumulate("bodies", a).accumulate("bodies", b)
  env, _ = env.relabel(a, "dup")
  env, _ = env.relabel(b, "dup")
  assert [body.label for body in env.bodies] == ["dup", "dup"]
  assert env.find_body("dup").id == a.id


def test_relabel_unknown_entity_binds_label():
  stray = _body()
  env, value = Environment().relabel(stray, "stray")
  assert value is stray
  assert env.lookup("stray") is stray
  assert env.bodies == ()


def test_to_composite_and_counts():
  env = Environment().accumulate("bodies", _body()).accumulate("composites", Composite())
  assert env.entity_count() == 2
  composite = env.to_composite(props={"x": 1}, label="root")
  assert composite.label == "root"
  assert composite.props == {"x": 1}
  assert len(composite.bodies) == 1
