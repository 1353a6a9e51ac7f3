from __future__ import annotations

import logging
from typing import Callable, List, Optional

from lark import Token

from .runtime import configure_limits, init_stdlib, lookup_builtin, new_environment, new_error
from .tree import Node, is_token, is_tree
from .types import FALSE, TRUE, Environment, MkInteger, MkString, MkValue

from .eval.blocks import eval_block, eval_if, eval_let, eval_program, eval_return
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_fn_literal
from .eval.helpers import EvalFunc
from .eval.literals import eval_array, eval_hash, eval_index

logger = logging.getLogger(__name__)

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment]=None) -> MkValue:
    init_stdlib()
    configure_limits()

    if env is None:
        env = new_environment()

    return eval_node(ast, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> MkValue:
    # expr_stmt only wraps its expression
    if is_tree(n) and n.data == 'expr_stmt':
        n = n.children[0]

    if is_token(n):
        return _eval_token(n, env)

    handler = _NODE_DISPATCH.get(n.data)
    if handler is None:
        # Only reachable with a tree the parser never builds.
        logger.debug("no evaluator for node %r", n.data)
        return new_error(f"unknown node: {n.data}")

    return handler(n.children, env, eval_node)

# ---------------- Tokens ----------------

def _eval_token(t: Token, env: Environment) -> MkValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler is not None:
        return handler(t, env)

    return new_error(f"unknown token: {t.type}")

def _eval_identifier(t: Token, env: Environment) -> MkValue:
    value = env.get(t.value)
    if value is not None:
        return value

    builtin = lookup_builtin(t.value)
    if builtin is not None:
        return builtin

    return new_error(f"identifier not found: {t.value}")

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[str, Callable[[List[Node], Environment, EvalFunc], MkValue]] = {
    'program': eval_program,
    'block': eval_block,
    'let_stmt': eval_let,
    'return_stmt': eval_return,
    'prefix': eval_prefix,
    'infix': eval_infix,
    'if_expr': eval_if,
    'fn_lit': eval_fn_literal,
    'call': eval_call,
    'array': eval_array,
    'hash': eval_hash,
    'index': eval_index,
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Environment], MkValue]] = {
    'IDENT': _eval_identifier,
    'INT': lambda t, _: MkInteger(int(t.value)),
    'STRING': lambda t, _: MkString(t.value),
    'TRUE': lambda _, __: TRUE,
    'FALSE': lambda _, __: FALSE,
}
