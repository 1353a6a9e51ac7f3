from __future__ import annotations

from typing import Callable

from typing_extensions import TypeGuard

from ..types import Environment, MkBool, MkError, MkNull, MkReturn, MkValue
from ..tree import Node

EvalFunc = Callable[[Node, Environment], MkValue]

def is_truthy(val: MkValue) -> bool:
    match val:
        case MkBool(value=b):
            return b
        case MkNull():
            return False
        case _:
            return True

def is_sentinel(val: MkValue) -> TypeGuard[MkReturn | MkError]:
    """True for values that stop evaluation of the enclosing statement list."""
    return isinstance(val, (MkReturn, MkError))
