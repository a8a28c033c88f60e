"""Rewrite raw lark parse trees into the evaluator's AST.

The rewrite is pure and never looks at an environment. The only failures are
structural: a node whose children do not fit its tag, or a tag the evaluator
does not know. Both mean the grammar drifted away from this module.
"""
from __future__ import annotations

from typing import Any, List, NamedTuple, Sequence

from lark import Token, Transformer, Tree
from lark.exceptions import VisitError

from .ast import (
  EDGE_KINDS, BodyNode, CallNode, CompositeNode, ConstraintNode, FnNode,
  LabelNode, ScopeNode, SymbolNode, VectorNode,
)
from .errors import StructuralError


class _ShapeSpec(NamedTuple):
  name: str
  args: tuple


def _arity(tag: str, children: Sequence[Any], low: int, high: int | None = None) -> None:
  high = low if high is None else high
  if not (low <= len(children) <= high):
    expected = str(low) if low == high else f"{low}..{high}"
    raise StructuralError(f"'{tag}' node expects {expected} children, got {len(children)}")


def _symbol_name(tag: str, child: Any) -> str:
  if not isinstance(child, SymbolNode):
    raise StructuralError(f"'{tag}' node expects a symbol, got {child!r}")
  return child.name


def _optional_attrs(tag: str, children: Sequence[Any], index: int) -> tuple:
  if len(children) <= index:
    return ()
  attrs = children[index]
  if not isinstance(attrs, tuple):
    raise StructuralError(f"'{tag}' node expects attributes, got {attrs!r}")
  return attrs


class Normalizer(Transformer):
  """Bottom-up rewrite of each parse-tree tag into an AST value."""

  # --- terminals ---

  def number(self, children: List[Any]):
    _arity("number", children, 1)
    text = str(children[0])
    try:
      return float(text) if "." in text else int(text)
    except ValueError as e:
      raise StructuralError(f"Malformed number literal {text!r}") from e

  def symbol(self, children: List[Any]):
    _arity("symbol", children, 1)
    return SymbolNode(str(children[0]))

  # --- edges ---

  def rigid(self, children):
    return "rigid"

  def spring(self, children):
    return "spring"

  def pin(self, children):
    return "pin"

  def rope(self, children):
    return "rope"

  def edge(self, children: List[Any]):
    _arity("edge", children, 1)
    if children[0] not in EDGE_KINDS:
      raise StructuralError(f"Unknown edge kind {children[0]!r}")
    return children[0]

  # --- attributes and parameter lists ---

  def attr(self, children: List[Any]):
    _arity("attr", children, 2)
    return (_symbol_name("attr", children[0]), children[1])

  def flag(self, children: List[Any]):
    _arity("flag", children, 1)
    return (_symbol_name("flag", children[0]), True)

  def attrs(self, children: List[Any]):
    return tuple(children)

  def params(self, children: List[Any]):
    return tuple(_symbol_name("params", c) for c in children)

  def vector(self, children: List[Any]):
    _arity("vector", children, 2)
    return VectorNode(tuple(children))

  # --- entities ---

  def shape(self, children: List[Any]):
    if not children:
      raise StructuralError("'shape' node expects a shape name")
    head = children[0]
    if not isinstance(head, Token):
      raise StructuralError(f"'shape' node expects a shape name, got {head!r}")
    return _ShapeSpec(str(head), tuple(children[1:]))

  def body(self, children: List[Any]):
    _arity("body", children, 1, 2)
    head = children[0]
    if not isinstance(head, _ShapeSpec):
      raise StructuralError(f"'body' node expects a shape, got {head!r}")
    return BodyNode(shape=head.name, args=head.args, attrs=_optional_attrs("body", children, 1))

  def constraint(self, children: List[Any]):
    _arity("constraint", children, 3, 4)
    source, edge, target = children[:3]
    for end in (source, target):
      if not isinstance(end, (SymbolNode, BodyNode)):
        raise StructuralError(f"'constraint' endpoint must be a symbol or body, got {end!r}")
    if edge not in EDGE_KINDS:
      raise StructuralError(f"Unknown edge kind {edge!r}")
    return ConstraintNode(
      source=source,
      edge=edge,
      target=target,
      attrs=_optional_attrs("constraint", children, 3),
    )

  def composite(self, children: List[Any]):
    return CompositeNode(tuple(children))

  def scope(self, children: List[Any]):
    _arity("scope", children, 1, 2)
    if not isinstance(children[0], CompositeNode):
      raise StructuralError(f"'scope' node expects a composite, got {children[0]!r}")
    return ScopeNode(body=children[0], attrs=_optional_attrs("scope", children, 1))

  def label(self, children: List[Any]):
    _arity("label", children, 2)
    return LabelNode(name=_symbol_name("label", children[0]), expr=children[1])

  # --- functions ---

  def fn(self, children: List[Any]):
    _arity("fn", children, 2)
    params, body = children
    if not isinstance(params, tuple):
      raise StructuralError(f"'fn' node expects a parameter list, got {params!r}")
    return FnNode(params=params, body=body)

  def call(self, children: List[Any]):
    if not children:
      raise StructuralError("'call' node expects a function name")
    return CallNode(name=_symbol_name("call", children[0]), args=tuple(children[1:]))

  def __default__(self, data, children, meta):
    raise StructuralError(f"Unknown AST tag {data!r}")


def normalize(tree: Tree) -> CompositeNode:
  """Normalize a raw `composite` parse tree into a `CompositeNode`."""
  if not isinstance(tree, Tree) or tree.data != "composite":
    raise StructuralError(f"Program root must be a 'composite' node, got {tree!r}")
  try:
    return Normalizer().transform(tree)
  except VisitError as e:
    raise e.orig_exc from None


__all__ = ["Normalizer", "normalize"]
