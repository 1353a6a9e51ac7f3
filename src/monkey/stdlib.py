"""Built-in functions (len, puts, etc.) registered via monkey.runtime."""

from __future__ import annotations

from typing import List

from .runtime import expect_arity, new_error, register_builtin
from .types import NULL, MkArray, MkInteger, MkString, MkValue, type_name


@register_builtin("len")
def builtin_len(args: List[MkValue]) -> MkValue:
    err = expect_arity(args, 1)
    if err is not None:
        return err

    match args[0]:
        case MkString(value=s):
            return MkInteger(len(s))
        case MkArray(elements=elements):
            return MkInteger(len(elements))
        case other:
            return new_error(f"argument to `len` not supported, got {type_name(other)}")


def _array_arg(name: str, args: List[MkValue], want: int):
    err = expect_arity(args, want)
    if err is not None:
        return err

    if not isinstance(args[0], MkArray):
        return new_error(f"argument to `{name}` must be ARRAY, got {type_name(args[0])}")

    return args[0]


@register_builtin("first")
def builtin_first(args: List[MkValue]) -> MkValue:
    arr = _array_arg("first", args, 1)
    if not isinstance(arr, MkArray):
        return arr

    return arr.elements[0] if arr.elements else NULL


@register_builtin("last")
def builtin_last(args: List[MkValue]) -> MkValue:
    arr = _array_arg("last", args, 1)
    if not isinstance(arr, MkArray):
        return arr

    return arr.elements[-1] if arr.elements else NULL


@register_builtin("rest")
def builtin_rest(args: List[MkValue]) -> MkValue:
    arr = _array_arg("rest", args, 1)
    if not isinstance(arr, MkArray):
        return arr

    if not arr.elements:
        return NULL

    return MkArray(list(arr.elements[1:]))


@register_builtin("push")
def builtin_push(args: List[MkValue]) -> MkValue:
    arr = _array_arg("push", args, 2)
    if not isinstance(arr, MkArray):
        return arr

    return MkArray(arr.elements + [args[1]])


@register_builtin("puts")
def builtin_puts(args: List[MkValue]) -> MkValue:
    for arg in args:
        print(arg.inspect())

    return NULL
