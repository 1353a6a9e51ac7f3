from __future__ import annotations

from typing import List

from ..runtime import Limits, new_enclosed_environment, new_error
from ..tree import Node, tree_children
from ..types import Environment, MkBuiltin, MkFn, MkReturn, MkValue, is_error, type_name
from .helpers import EvalFunc

_CALL_DEPTH = 0

def extract_param_names(params_node: Node) -> List[str]:
    return [str(p) for p in tree_children(params_node)]

def eval_fn_literal(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkFn:
    del eval_func
    params_node, body = children
    return MkFn(params=extract_param_names(params_node), body=body, env=env)

def eval_call(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    callee_node, args_node = children
    callee = eval_func(callee_node, env)

    if is_error(callee):
        return callee

    if not isinstance(callee, (MkFn, MkBuiltin)):
        return new_error(f"not a function: {type_name(callee)}")

    args = eval_expressions(tree_children(args_node), env, eval_func)
    if is_error(args):
        return args

    return apply_function(callee, args, eval_func)

def eval_expressions(nodes: List[Node], env: Environment, eval_func: EvalFunc) -> List[MkValue] | MkValue:
    """Evaluate left to right; the first error is returned in place of the list."""
    values: List[MkValue] = []

    for node in nodes:
        value = eval_func(node, env)
        if is_error(value):
            return value
        values.append(value)

    return values

def apply_function(fn: MkFn | MkBuiltin, args: List[MkValue], eval_func: EvalFunc) -> MkValue:
    if isinstance(fn, MkBuiltin):
        return fn.fn(args)

    if len(args) != len(fn.params):
        return new_error(f"wrong number of arguments: want={len(fn.params)}, got={len(args)}")

    global _CALL_DEPTH
    limit = Limits.max_call_depth

    if limit is not None and _CALL_DEPTH >= limit:
        return new_error(f"maximum call depth exceeded: {limit}")

    call_env = _extend_function_env(fn, args)
    _CALL_DEPTH += 1

    try:
        result = eval_func(fn.body, call_env)
    finally:
        _CALL_DEPTH -= 1

    return unwrap_return(result)

def _extend_function_env(fn: MkFn, args: List[MkValue]) -> Environment:
    call_env = new_enclosed_environment(fn.env)

    for name, value in zip(fn.params, args):
        call_env.set(name, value)

    return call_env

def unwrap_return(value: MkValue) -> MkValue:
    if isinstance(value, MkReturn):
        return value.value
    return value
