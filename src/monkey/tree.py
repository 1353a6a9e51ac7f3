"""AST node helpers and canonical source rendering.

The parser builds lark `Tree` nodes labelled by node kind, with lark `Token`
leaves for identifiers and literals:

    program      [stmt...]
    let_stmt     [IDENT, value]
    return_stmt  [value | None]
    expr_stmt    [expr]
    block        [stmt...]
    prefix       [op, right]
    infix        [left, op, right]
    if_expr      [condition, block, block | None]
    fn_lit       [params, block]
    params       [IDENT...]
    call         [callee, args]
    args         [expr...]
    array        [expr...]
    index        [collection, index]
    hash         [pair...]
    pair         [key, value]

Leaves are `Token('IDENT' | 'INT' | 'STRING' | 'TRUE' | 'FALSE', text)`.
"""
from __future__ import annotations

from typing import List, Optional, Union

from lark import Token, Transformer, Tree
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Union[Tree, Token]

LEAF_TYPES = frozenset({'IDENT', 'INT', 'STRING', 'TRUE', 'FALSE'})


def is_tree(node: object) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: object) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: object) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: object) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)


class SourceRenderer(Transformer):
    """Render a tree bottom-up into canonical, fully parenthesized source.

    Re-parsing the output of any expression yields a tree that renders to
    the same text.
    """

    def STRING(self, tok: Token) -> str:
        return f'"{tok}"'

    def program(self, children: List[str]) -> str:
        return "".join(children)

    def let_stmt(self, children: List[str]) -> str:
        name, value = children
        return f"let {name} = {value};"

    def return_stmt(self, children: List[Optional[str]]) -> str:
        value = children[0] if children else None
        if value is None:
            return "return;"
        return f"return {value};"

    def expr_stmt(self, children: List[str]) -> str:
        return children[0]

    def block(self, children: List[str]) -> str:
        if not children:
            return "{ }"
        return "{ " + " ".join(children) + " }"

    def prefix(self, children: List[str]) -> str:
        op, right = children
        return f"({op}{right})"

    def infix(self, children: List[str]) -> str:
        left, op, right = children
        return f"({left} {op} {right})"

    def if_expr(self, children: List[Optional[str]]) -> str:
        cond, consequence, alternative = children
        out = f"if ({cond}) {consequence}"
        if alternative is not None:
            out += f" else {alternative}"
        return out

    def params(self, children: List[str]) -> str:
        return ", ".join(children)

    def fn_lit(self, children: List[str]) -> str:
        params, body = children
        return f"fn({params}) {body}"

    def args(self, children: List[str]) -> str:
        return ", ".join(children)

    def call(self, children: List[str]) -> str:
        callee, args = children
        return f"{callee}({args})"

    def array(self, children: List[str]) -> str:
        return "[" + ", ".join(children) + "]"

    def index(self, children: List[str]) -> str:
        collection, idx = children
        return f"({collection}[{idx}])"

    def pair(self, children: List[str]) -> str:
        key, value = children
        return f"{key}: {value}"

    def hash(self, children: List[str]) -> str:
        return "{" + ", ".join(children) + "}"


_RENDERER = SourceRenderer()


def to_source(node: Node) -> str:
    """Canonical textual form of any AST node."""
    if is_token(node):
        if node.type == 'STRING':
            return _RENDERER.STRING(node)
        return str(node)

    return str(_RENDERER.transform(node))
