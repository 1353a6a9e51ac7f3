from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List, Optional, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import Node, to_source

# ---------- Hashing ----------

FNV64_OFFSET = 0xcbf29ce484222325
FNV64_PRIME = 0x100000001b3
UINT64_MASK = 0xFFFFFFFFFFFFFFFF

def fnv1a_64(data: bytes) -> int:
    h = FNV64_OFFSET
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & UINT64_MASK
    return h

@dataclass(frozen=True)
class HashKey:
    type: str
    digest: int

# ---------- Value Model ----------

@dataclass(frozen=True)
class MkInteger:
    TYPE: ClassVar[str] = "INTEGER"
    value: int
    def inspect(self) -> str:
        return str(self.value)
    def hash_key(self) -> HashKey:
        return HashKey(self.TYPE, self.value & UINT64_MASK)

@dataclass(frozen=True)
class MkBool:
    TYPE: ClassVar[str] = "BOOLEAN"
    value: bool
    def inspect(self) -> str:
        return "true" if self.value else "false"
    def hash_key(self) -> HashKey:
        return HashKey(self.TYPE, 1 if self.value else 0)

@dataclass(frozen=True)
class MkString:
    TYPE: ClassVar[str] = "STRING"
    value: str
    def inspect(self) -> str:
        return self.value
    def hash_key(self) -> HashKey:
        return HashKey(self.TYPE, fnv1a_64(self.value.encode("utf-8")))

@dataclass(frozen=True)
class MkNull:
    TYPE: ClassVar[str] = "NULL"
    def inspect(self) -> str:
        return "null"

@dataclass(frozen=True)
class MkReturn:
    """Control-flow sentinel; unwrapped at function and program boundaries."""
    TYPE: ClassVar[str] = "RETURN_VALUE"
    value: 'MkValue'
    def inspect(self) -> str:
        return self.value.inspect()

@dataclass(frozen=True)
class MkError:
    """First-class runtime error; propagates unchanged through evaluation."""
    TYPE: ClassVar[str] = "ERROR"
    message: str
    def inspect(self) -> str:
        return "ERROR: " + self.message

@dataclass(eq=False)
class MkFn:
    TYPE: ClassVar[str] = "FUNCTION"
    params: List[str]
    body: Node                # block tree
    env: 'Environment'        # closure environment, shared by reference
    def inspect(self) -> str:
        return f"fn({', '.join(self.params)}) {to_source(self.body)}"
    def __repr__(self) -> str:
        return f"<fn params={', '.join(self.params) or 'nullary'}>"

BuiltinImpl = Callable[[List['MkValue']], 'MkValue']

@dataclass(eq=False)
class MkBuiltin:
    TYPE: ClassVar[str] = "BUILTIN"
    name: str
    fn: BuiltinImpl
    def inspect(self) -> str:
        return "builtin function"

@dataclass(eq=False)
class MkArray:
    TYPE: ClassVar[str] = "ARRAY"
    elements: List['MkValue']
    def inspect(self) -> str:
        return "[" + ", ".join(el.inspect() for el in self.elements) + "]"

@dataclass(frozen=True)
class HashPair:
    key: 'MkValue'
    value: 'MkValue'

@dataclass(eq=False)
class MkHash:
    TYPE: ClassVar[str] = "HASH"
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)
    def inspect(self) -> str:
        items = []

        for pair in self.pairs.values():
            items.append(f"{pair.key.inspect()}: {pair.value.inspect()}")

        return "{" + ", ".join(items) + "}"

Hashable: TypeAlias = Union[MkInteger, MkBool, MkString]

MkValue: TypeAlias = (
    MkInteger
    | MkBool
    | MkString
    | MkNull
    | MkReturn
    | MkError
    | MkFn
    | MkBuiltin
    | MkArray
    | MkHash
)

# Interned singletons: Boolean and Null equality is identity.
TRUE = MkBool(True)
FALSE = MkBool(False)
NULL = MkNull()

def native_bool(value: bool) -> MkBool:
    return TRUE if value else FALSE

def is_hashable(value: MkValue) -> TypeGuard[Hashable]:
    return isinstance(value, (MkInteger, MkBool, MkString))

def is_error(value: object) -> TypeGuard[MkError]:
    return isinstance(value, MkError)

def type_name(value: MkValue) -> str:
    return value.TYPE

# ---------- Environment ----------

class Environment:
    """Chained scope. Lookups walk outward; `set` always binds locally."""

    def __init__(self, outer: Optional['Environment']=None):
        self.store: Dict[str, MkValue] = {}
        self.outer = outer

    def get(self, name: str) -> Optional[MkValue]:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer

        return None

    def set(self, name: str, value: MkValue) -> MkValue:
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        depth = 0
        env = self.outer

        while env is not None:
            depth += 1
            env = env.outer

        return f"<Environment names={sorted(self.store)} depth={depth}>"
