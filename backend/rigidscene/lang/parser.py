"""Source text -> raw lark parse tree.

The parser is generated by lark from grammar text, so callers may swap in an
edited grammar as long as it keeps the rule names the normalizer expects.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from lark import Lark, Tree
from lark.exceptions import LarkError, UnexpectedInput

from .ast import CompositeNode
from .errors import GrammarError, ParseError
from .grammar import PHYSICS_GRAMMAR, START_RULE
from .normalizer import normalize


@lru_cache(maxsize=8)
def build_parser(grammar: str = PHYSICS_GRAMMAR) -> Lark:
  """Compile `grammar` into an Earley parser (cached per grammar text)."""
  try:
    return Lark(
      grammar,
      start=START_RULE,
      parser="earley",
      ambiguity="resolve",
      propagate_positions=True,
    )
  except LarkError as e:
    raise GrammarError(f"Invalid grammar: {e}") from e


def parse(source: str, grammar: Optional[str] = None) -> Tree:
  parser = build_parser(grammar or PHYSICS_GRAMMAR)
  try:
    return parser.parse(source)
  except UnexpectedInput as e:
    raise ParseError(
      f"Parse error at line {e.line}, column {e.column}",
      line=e.line,
      column=e.column,
      context=e.get_context(source),
    ) from e


def parse_program(source: str, grammar: Optional[str] = None) -> CompositeNode:
  """Parse and normalize `source` into the root composite node."""
  return normalize(parse(source, grammar))


__all__ = ["build_parser", "parse", "parse_program"]
