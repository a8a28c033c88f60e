"""Normalized AST for scene programs.

The node set is closed: the evaluator dispatches on exactly these classes.
Terminals other than symbols are plain Python values (int, float, True).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union


@dataclass(frozen=True)
class SymbolNode:
  kind: ClassVar[str] = "symbol"
  name: str


@dataclass(frozen=True)
class VectorNode:
  kind: ClassVar[str] = "vector"
  items: Tuple["Expr", ...]


@dataclass(frozen=True)
class BodyNode:
  kind: ClassVar[str] = "body"
  shape: str
  args: Tuple["Expr", ...] = ()
  attrs: Tuple[Tuple[str, "Expr"], ...] = ()


@dataclass(frozen=True)
class ConstraintNode:
  kind: ClassVar[str] = "constraint"
  source: Union[SymbolNode, BodyNode]
  edge: str
  target: Union[SymbolNode, BodyNode]
  attrs: Tuple[Tuple[str, "Expr"], ...] = ()


@dataclass(frozen=True)
class CompositeNode:
  kind: ClassVar[str] = "composite"
  statements: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class ScopeNode:
  kind: ClassVar[str] = "scope"
  body: CompositeNode
  attrs: Tuple[Tuple[str, "Expr"], ...] = ()


@dataclass(frozen=True)
class LabelNode:
  kind: ClassVar[str] = "label"
  name: str
  expr: "Expr"


@dataclass(frozen=True)
class FnNode:
  kind: ClassVar[str] = "fn"
  params: Tuple[str, ...]
  body: "Expr"


@dataclass(frozen=True)
class CallNode:
  kind: ClassVar[str] = "call"
  name: str
  args: Tuple["Expr", ...] = ()


Node = Union[
  SymbolNode, VectorNode, BodyNode, ConstraintNode, CompositeNode,
  ScopeNode, LabelNode, FnNode, CallNode,
]
Expr = Union[Node, int, float, bool, str]

EDGE_KINDS = ("rigid", "spring", "pin", "rope")


__all__ = [
  "SymbolNode",
  "VectorNode",
  "BodyNode",
  "ConstraintNode",
  "CompositeNode",
  "ScopeNode",
  "LabelNode",
  "FnNode",
  "CallNode",
  "Node",
  "Expr",
  "EDGE_KINDS",
]
