from __future__ import annotations

from typing import List, Optional

from ..tree import Node
from ..types import NULL, Environment, MkError, MkReturn, MkValue, is_error
from .helpers import EvalFunc, is_sentinel, is_truthy

def eval_program(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    """Run top-level statements; a return ends the program with its inner value."""
    result: MkValue = NULL

    for stmt in children:
        result = eval_func(stmt, env)

        match result:
            case MkReturn(value=value):
                return value
            case MkError():
                return result

    return result

def eval_block(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    """Like eval_program, but a return stays wrapped so enclosing calls see it."""
    result: MkValue = NULL

    for stmt in children:
        result = eval_func(stmt, env)

        if is_sentinel(result):
            return result

    return result

def eval_let(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    name, value_node = children
    value = eval_func(value_node, env)

    if is_error(value):
        return value

    env.set(str(name), value)
    return NULL

def eval_return(children: List[Optional[Node]], env: Environment, eval_func: EvalFunc) -> MkValue:
    value_node = children[0] if children else None
    if value_node is None:
        return MkReturn(NULL)

    value = eval_func(value_node, env)
    if is_error(value):
        return value

    return MkReturn(value)

def eval_if(children: List[Optional[Node]], env: Environment, eval_func: EvalFunc) -> MkValue:
    cond_node, consequence, alternative = children
    cond = eval_func(cond_node, env)

    if is_error(cond):
        return cond

    if is_truthy(cond):
        return eval_func(consequence, env)

    if alternative is not None:
        return eval_func(alternative, env)

    return NULL
