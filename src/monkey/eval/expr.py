from __future__ import annotations

from typing import List

from lark import Token

from ..runtime import new_error
from ..tree import Node
from ..types import (
    Environment, MkInteger, MkString, MkValue, native_bool, type_name, is_error,
)
from .helpers import EvalFunc, is_truthy

INT64_MIN = -(2**63)
UINT64_RANGE = 2**64

def wrap_int64(n: int) -> int:
    """Two's complement wrap-around into signed 64-bit range."""
    return (n - INT64_MIN) % UINT64_RANGE + INT64_MIN

def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q

def eval_prefix(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    op, right_node = children
    right = eval_func(right_node, env)

    if is_error(right):
        return right

    return apply_prefix(str(op), right)

def apply_prefix(op: str, right: MkValue) -> MkValue:
    match op:
        case '!':
            return native_bool(not is_truthy(right))
        case '-':
            if not isinstance(right, MkInteger):
                return new_error(f"unknown operator: -{type_name(right)}")
            return MkInteger(wrap_int64(-right.value))
        case _:
            return new_error(f"unknown operator: {op}{type_name(right)}")

def eval_infix(children: List[Node], env: Environment, eval_func: EvalFunc) -> MkValue:
    left_node, op, right_node = children

    left = eval_func(left_node, env)
    if is_error(left):
        return left

    right = eval_func(right_node, env)
    if is_error(right):
        return right

    return apply_infix(op.value if isinstance(op, Token) else str(op), left, right)

def apply_infix(op: str, left: MkValue, right: MkValue) -> MkValue:
    match (left, right):
        case (MkInteger(value=a), MkInteger(value=b)):
            return _integer_infix(op, a, b)
        case (MkString(value=a), MkString(value=b)):
            return _string_infix(op, a, b)

    if type_name(left) != type_name(right):
        return new_error(f"type mismatch: {type_name(left)} {op} {type_name(right)}")

    # Booleans and null are interned, so identity is value equality.
    match op:
        case '==':
            return native_bool(left is right)
        case '!=':
            return native_bool(left is not right)

    return new_error(f"unknown operator: {type_name(left)} {op} {type_name(right)}")

def _integer_infix(op: str, a: int, b: int) -> MkValue:
    match op:
        case '+':
            return MkInteger(wrap_int64(a + b))
        case '-':
            return MkInteger(wrap_int64(a - b))
        case '*':
            return MkInteger(wrap_int64(a * b))
        case '/':
            if b == 0:
                return new_error("division by zero")
            return MkInteger(wrap_int64(trunc_div(a, b)))
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)

    return new_error(f"unknown operator: INTEGER {op} INTEGER")

def _string_infix(op: str, a: str, b: str) -> MkValue:
    match op:
        case '+':
            return MkString(a + b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)

    return new_error(f"unknown operator: STRING {op} STRING")
