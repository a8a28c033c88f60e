import pytest
from lark import Tree

from rigidscene.lang.errors import GrammarError, ParseError
from rigidscene.lang.grammar import PHYSICS_GRAMMAR
from rigidscene.lang.parser import build_parser, parse, parse_program


def test_parse_returns_composite_tree():
  tree = parse("a: rectangle 0 0 10 10; b: circle 50 0 5; a -- b;")
  assert isinstance(tree, Tree)
  assert tree.data == "composite"
  assert len(tree.children) == 3


def test_empty_program_is_empty_composite():
  program = parse_program("")
  assert program.statements == ()


def test_commas_are_whitespace():
  a = parse_program("rectangle 0, 0, 10, 10 [isStatic, color=red];")
  b = parse_program("rectangle 0 0 10 10 [isStatic color=red];")
  assert a == b


def test_unexpected_character_reports_position():
  with pytest.raises(ParseError) as excinfo:
    parse("a: rectangle 0 0 10 10 @;")
  err = excinfo.value
  assert err.line == 1
  assert isinstance(err.column, int) and err.column > 1
  payload = err.to_dict()
  assert payload["error"] == "parse_error"
  assert payload["line"] == 1


def test_invalid_grammar_raises_grammar_error():
  with pytest.raises(GrammarError):
    build_parser("composite: undefined_rule\n")


def test_parser_is_cached_per_grammar():
  assert build_parser(PHYSICS_GRAMMAR) is build_parser(PHYSICS_GRAMMAR)


def test_edited_grammar_adds_edge_syntax():
  grammar = PHYSICS_GRAMMAR.replace('rope: "~~"', 'rope: "~~" | "<~>"')
  program = parse_program("a: circle 0 0 5; b: circle 10 0 5; a <~> b;", grammar=grammar)
  assert program.statements[-1].edge == "rope"

  with pytest.raises(ParseError):
    parse_program("a <~> b;")
