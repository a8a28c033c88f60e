"""Scene language: grammar, parser, normalizer and evaluator.

Typical use:

    composite = run_program("a: rectangle 0 0 10 10; b: circle 50 0 5; a -- b;")
"""

from .ast import (
  BodyNode, CallNode, CompositeNode, ConstraintNode, FnNode, LabelNode,
  ScopeNode, SymbolNode, VectorNode,
)
from .builtins import CORE
from .entities import Body, Composite, Constraint, Endpoint, Point
from .environment import Environment, initial_environment
from .errors import (
  DuplicateLabelError, EvaluationError, FunctionNotFound, GrammarError,
  HydrationError, NotCallable, ParseError, SceneError, StructuralError,
  UnknownShapeError, UnresolvedEndpointError,
)
from .evaluator import Closure, evaluate, evaluate_program, run_program
from .grammar import PHYSICS_GRAMMAR
from .normalizer import normalize
from .parser import build_parser, parse, parse_program
from .shapes import BODY_SHAPES

__all__ = [
  # AST
  "BodyNode",
  "CallNode",
  "CompositeNode",
  "ConstraintNode",
  "FnNode",
  "LabelNode",
  "ScopeNode",
  "SymbolNode",
  "VectorNode",
  # Entities
  "Body",
  "Composite",
  "Constraint",
  "Endpoint",
  "Point",
  "Closure",
  # Environment / evaluation
  "Environment",
  "initial_environment",
  "evaluate",
  "evaluate_program",
  "run_program",
  "CORE",
  "BODY_SHAPES",
  # Parsing
  "PHYSICS_GRAMMAR",
  "build_parser",
  "parse",
  "parse_program",
  "normalize",
  # Errors
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
