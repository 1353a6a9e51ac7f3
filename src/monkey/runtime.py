from __future__ import annotations

import importlib
import sys
from typing import Dict, List, Optional

from .types import BuiltinImpl, Environment, MkBuiltin, MkError, MkValue
from .utils import max_call_depth, recursion_limit

_STDLIB_INITIALIZED = False


class Builtins:
    """Fixed table consulted after the environment chain misses."""
    functions: Dict[str, MkBuiltin] = {}


class Limits:
    """Evaluation limits, read from the environment once per run or session."""
    max_call_depth: Optional[int] = None


def configure_limits() -> None:
    Limits.max_call_depth = max_call_depth()

    limit = recursion_limit()
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)


def init_stdlib() -> None:
    """Load stdlib module (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module(".stdlib", __package__)
    _STDLIB_INITIALIZED = True


def register_builtin(name: str):
    def dec(fn: BuiltinImpl):
        Builtins.functions[name] = MkBuiltin(name=name, fn=fn)
        return fn

    return dec


def lookup_builtin(name: str) -> Optional[MkBuiltin]:
    init_stdlib()
    return Builtins.functions.get(name)


def new_error(message: str) -> MkError:
    return MkError(message)


def expect_arity(args: List[MkValue], want: int) -> Optional[MkError]:
    if len(args) != want:
        return new_error(f"wrong number of arguments. got={len(args)}, want={want}")
    return None


def new_environment() -> Environment:
    return Environment()


def new_enclosed_environment(outer: Environment) -> Environment:
    return Environment(outer=outer)
