"""Monkey: a lexer, Pratt parser and tree-walking evaluator."""

from .evaluator import eval_expr, eval_node
from .lexer import Lexer, tokenize
from .parser import ParseError, Parser, parse, parse_source
from .runner import run
from .runtime import new_enclosed_environment, new_environment
from .tree import to_source
from .types import Environment

__all__ = [
    "Environment",
    "Lexer",
    "ParseError",
    "Parser",
    "eval_expr",
    "eval_node",
    "new_enclosed_environment",
    "new_environment",
    "parse",
    "parse_source",
    "run",
    "to_source",
    "tokenize",
]
