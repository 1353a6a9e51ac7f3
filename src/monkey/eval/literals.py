from __future__ import annotations

from typing import List

from ..runtime import new_error
from ..tree import Node, tree_children
from ..types import (
    NULL, Environment, HashPair, MkArray, MkHash, MkInteger, MkValue,
    is_error, is_hashable, type_name,
)
from .fn import eval_expressions
from .helpers import EvalFunc

def eval_array(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    elements = eval_expressions(children, env, eval_func)
    if is_error(elements):
        return elements

    return MkArray(elements)

def eval_hash(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    """Pairs are evaluated in source order; a repeated key keeps the later value."""
    result = MkHash()

    for pair in children:
        key_node, value_node = tree_children(pair)

        key = eval_func(key_node, env)
        if is_error(key):
            return key

        if not is_hashable(key):
            return new_error(f"unusable as hash key: {type_name(key)}")

        value = eval_func(value_node, env)
        if is_error(value):
            return value

        result.pairs[key.hash_key()] = HashPair(key=key, value=value)

    return result

def eval_index(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    collection_node, index_node = children

    collection = eval_func(collection_node, env)
    if is_error(collection):
        return collection

    index = eval_func(index_node, env)
    if is_error(index):
        return index

    return apply_index(collection, index)

def apply_index(collection: MkValue, index: MkValue) -> MkValue:
    match (collection, index):
        case (MkArray(elements=elements), MkInteger(value=i)):
            if i < 0 or i >= len(elements):
                return NULL
            return elements[i]
        case (MkHash(pairs=pairs), _):
            if not is_hashable(index):
                return new_error(f"unusable as hash key: {type_name(index)}")
            pair = pairs.get(index.hash_key())
            return pair.value if pair is not None else NULL

    return new_error(f"index operator not supported: {type_name(collection)}")
