"""
Pratt Parser for Monkey

Consumes the token stream with two-token lookahead (cur, peek) and builds
lark Trees (see tree.py for node shapes).

Errors never abort the parse: each one is appended to `Parser.errors`, the
offending statement is dropped and parsing resumes after the next `;`.
"""

from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from lark import Token, Tree

from .lexer import tokenize
from .token_types import TT, Tok
from .tree import Node

INT64_MAX = 2**63 - 1

# ============================================================================
# Precedence
# ============================================================================

class Prec(IntEnum):
    """Binding power, lowest to highest"""

    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < >
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x)
    INDEX = 8        # a[i]


PRECEDENCES: Dict[TT, Prec] = {
    TT.EQ: Prec.EQUALS,
    TT.NOT_EQ: Prec.EQUALS,
    TT.LT: Prec.LESSGREATER,
    TT.GT: Prec.LESSGREATER,
    TT.PLUS: Prec.SUM,
    TT.MINUS: Prec.SUM,
    TT.SLASH: Prec.PRODUCT,
    TT.ASTERISK: Prec.PRODUCT,
    TT.LPAREN: Prec.CALL,
    TT.LBRACKET: Prec.INDEX,
}

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Raised by callers that refuse to evaluate a program with syntax errors"""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "parse failed")


class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. relational (<, >)
    3. additive (+, -)
    4. multiplicative (*, /)
    5. prefix (!, -)
    6. call (f(...))
    7. index (a[...])
    """

    def __init__(self, tokens: Iterable[Tok]):
        self._tokens: Iterator[Tok] = iter(tokens)
        self.errors: List[str] = []
        self._last_eof = Tok(TT.EOF, "")
        self.cur = self._pull()
        self.peek = self._pull()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def _pull(self) -> Tok:
        tok = next(self._tokens, None)
        if tok is None:
            return self._last_eof
        if tok.type == TT.EOF:
            self._last_eof = tok
        return tok

    def advance(self) -> None:
        """Shift peek into cur and read the next token"""
        self.cur = self.peek
        self.peek = self._pull()

    def cur_is(self, token_type: TT) -> bool:
        return self.cur.type == token_type

    def peek_is(self, token_type: TT) -> bool:
        return self.peek.type == token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if peek matches, otherwise record an error"""
        if self.peek_is(token_type):
            self.advance()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Prec:
        return PRECEDENCES.get(self.peek.type, Prec.LOWEST)

    def cur_precedence(self) -> Prec:
        return PRECEDENCES.get(self.cur.type, Prec.LOWEST)

    # ========================================================================
    # Errors
    # ========================================================================

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(
            f"expected next token to be {token_type}, got {self.peek.type} instead"
        )

    def no_prefix_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    def synchronize(self) -> None:
        """Skip to the next statement boundary after a failed statement"""
        while not self.cur_is(TT.SEMICOLON) and not self.cur_is(TT.EOF):
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Tree:
        """Parse entire program"""
        statements: List[Node] = []

        while not self.cur_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self.synchronize()
            self.advance()

        return Tree('program', statements)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Tree]:
        if self.cur_is(TT.LET):
            return self.parse_let_statement()
        if self.cur_is(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[Tree]:
        """let IDENT = expr [;]"""
        if not self.expect_peek(TT.IDENT):
            return None

        name = self._leaf(self.cur)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.advance()
        value = self.parse_expression(Prec.LOWEST)
        if value is None:
            return None

        if self.peek_is(TT.SEMICOLON):
            self.advance()

        return Tree('let_stmt', [name, value])

    def parse_return_statement(self) -> Optional[Tree]:
        """return [expr] [;]"""
        if self.peek_is(TT.SEMICOLON) or self.peek_is(TT.EOF) or self.peek_is(TT.RBRACE):
            if self.peek_is(TT.SEMICOLON):
                self.advance()
            return Tree('return_stmt', [None])

        self.advance()
        value = self.parse_expression(Prec.LOWEST)
        if value is None:
            return None

        if self.peek_is(TT.SEMICOLON):
            self.advance()

        return Tree('return_stmt', [value])

    def parse_expression_statement(self) -> Optional[Tree]:
        expr = self.parse_expression(Prec.LOWEST)
        if expr is None:
            return None

        if self.peek_is(TT.SEMICOLON):
            self.advance()

        return Tree('expr_stmt', [expr])

    def parse_block_statement(self) -> Optional[Tree]:
        """{ stmt* } with cur on the opening brace"""
        statements: List[Node] = []
        failed = False
        self.advance()

        while not self.cur_is(TT.RBRACE):
            if self.cur_is(TT.EOF):
                self.errors.append(
                    f"expected next token to be {TT.RBRACE}, got {TT.EOF} instead"
                )
                return None

            stmt = self.parse_statement()
            if stmt is None:
                failed = True
                self.synchronize()
                if self.cur_is(TT.EOF):
                    return None
            else:
                statements.append(stmt)
            self.advance()

        if failed:
            return None

        return Tree('block', statements)

    # ========================================================================
    # Expressions (Pratt)
    # ========================================================================

    def parse_expression(self, precedence: Prec) -> Optional[Node]:
        prefix = PREFIX_FNS.get(self.cur.type)
        if prefix is None:
            self.no_prefix_error(self.cur.type)
            return None

        left = prefix(self)

        while left is not None and not self.peek_is(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = INFIX_FNS.get(self.peek.type)
            if infix is None:
                return left

            self.advance()
            left = infix(self, left)

        return left

    # ---------------- Prefix handlers ----------------

    def parse_identifier(self) -> Node:
        return self._leaf(self.cur)

    def parse_integer_literal(self) -> Optional[Node]:
        if int(self.cur.literal) > INT64_MAX:
            self.errors.append(f'could not parse "{self.cur.literal}" as integer')
            return None
        return self._leaf(self.cur)

    def parse_string_literal(self) -> Node:
        return self._leaf(self.cur)

    def parse_boolean(self) -> Node:
        return self._leaf(self.cur)

    def parse_prefix_expression(self) -> Optional[Node]:
        op = self._leaf(self.cur)
        self.advance()

        right = self.parse_expression(Prec.PREFIX)
        if right is None:
            return None

        return Tree('prefix', [op, right])

    def parse_grouped_expression(self) -> Optional[Node]:
        self.advance()

        expr = self.parse_expression(Prec.LOWEST)
        if expr is None or not self.expect_peek(TT.RPAREN):
            return None

        return expr

    def parse_if_expression(self) -> Optional[Node]:
        """if (cond) { ... } [else { ... }]"""
        if not self.expect_peek(TT.LPAREN):
            return None

        self.advance()
        condition = self.parse_expression(Prec.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(TT.RPAREN):
            return None
        if not self.expect_peek(TT.LBRACE):
            return None

        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_is(TT.ELSE):
            self.advance()

            if not self.expect_peek(TT.LBRACE):
                return None

            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return Tree('if_expr', [condition, consequence, alternative])

    def parse_function_literal(self) -> Optional[Node]:
        """fn(a, b) { ... }"""
        if not self.expect_peek(TT.LPAREN):
            return None

        params = self.parse_function_parameters()
        if params is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None

        body = self.parse_block_statement()
        if body is None:
            return None

        return Tree('fn_lit', [Tree('params', params), body])

    def parse_function_parameters(self) -> Optional[List[Node]]:
        params: List[Node] = []

        if self.peek_is(TT.RPAREN):
            self.advance()
            return params

        if not self.expect_peek(TT.IDENT):
            return None
        params.append(self._leaf(self.cur))

        while self.peek_is(TT.COMMA):
            self.advance()
            if not self.expect_peek(TT.IDENT):
                return None
            params.append(self._leaf(self.cur))

        if not self.expect_peek(TT.RPAREN):
            return None

        return params

    def parse_array_literal(self) -> Optional[Node]:
        elements = self.parse_expression_list(TT.RBRACKET)
        if elements is None:
            return None
        return Tree('array', elements)

    def parse_hash_literal(self) -> Optional[Node]:
        """{k: v, ...} with pairs kept in source order"""
        pairs: List[Node] = []

        while not self.peek_is(TT.RBRACE):
            self.advance()
            key = self.parse_expression(Prec.LOWEST)
            if key is None:
                return None

            if not self.expect_peek(TT.COLON):
                return None

            self.advance()
            value = self.parse_expression(Prec.LOWEST)
            if value is None:
                return None

            pairs.append(Tree('pair', [key, value]))

            if not self.peek_is(TT.RBRACE) and not self.expect_peek(TT.COMMA):
                return None

        if not self.expect_peek(TT.RBRACE):
            return None

        return Tree('hash', pairs)

    # ---------------- Infix handlers ----------------

    def parse_infix_expression(self, left: Node) -> Optional[Node]:
        op = self._leaf(self.cur)
        precedence = self.cur_precedence()
        self.advance()

        right = self.parse_expression(precedence)
        if right is None:
            return None

        return Tree('infix', [left, op, right])

    def parse_call_expression(self, callee: Node) -> Optional[Node]:
        args = self.parse_expression_list(TT.RPAREN)
        if args is None:
            return None
        return Tree('call', [callee, Tree('args', args)])

    def parse_index_expression(self, collection: Node) -> Optional[Node]:
        self.advance()

        index = self.parse_expression(Prec.LOWEST)
        if index is None or not self.expect_peek(TT.RBRACKET):
            return None

        return Tree('index', [collection, index])

    # ---------------- Helpers ----------------

    def parse_expression_list(self, end: TT) -> Optional[List[Node]]:
        """Comma separated expressions up to `end`, with cur on the opener"""
        items: List[Node] = []

        if self.peek_is(end):
            self.advance()
            return items

        self.advance()
        item = self.parse_expression(Prec.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.peek_is(TT.COMMA):
            self.advance()
            self.advance()
            item = self.parse_expression(Prec.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None

        return items

    @staticmethod
    def _leaf(tok: Tok) -> Token:
        return Token(tok.type.name, tok.literal, line=tok.line, column=tok.column)


PrefixFn = Callable[[Parser], Optional[Node]]
InfixFn = Callable[[Parser, Node], Optional[Node]]

PREFIX_FNS: Dict[TT, PrefixFn] = {
    TT.IDENT: Parser.parse_identifier,
    TT.INT: Parser.parse_integer_literal,
    TT.STRING: Parser.parse_string_literal,
    TT.TRUE: Parser.parse_boolean,
    TT.FALSE: Parser.parse_boolean,
    TT.BANG: Parser.parse_prefix_expression,
    TT.MINUS: Parser.parse_prefix_expression,
    TT.LPAREN: Parser.parse_grouped_expression,
    TT.IF: Parser.parse_if_expression,
    TT.FUNCTION: Parser.parse_function_literal,
    TT.LBRACKET: Parser.parse_array_literal,
    TT.LBRACE: Parser.parse_hash_literal,
}

INFIX_FNS: Dict[TT, InfixFn] = {
    TT.PLUS: Parser.parse_infix_expression,
    TT.MINUS: Parser.parse_infix_expression,
    TT.SLASH: Parser.parse_infix_expression,
    TT.ASTERISK: Parser.parse_infix_expression,
    TT.EQ: Parser.parse_infix_expression,
    TT.NOT_EQ: Parser.parse_infix_expression,
    TT.LT: Parser.parse_infix_expression,
    TT.GT: Parser.parse_infix_expression,
    TT.LPAREN: Parser.parse_call_expression,
    TT.LBRACKET: Parser.parse_index_expression,
}

# ============================================================================
# Entry points
# ============================================================================

def parse(tokens: Iterable[Tok]) -> Tuple[Tree, List[str]]:
    """Parse a token stream; a non-empty error list means the tree is partial"""
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors


def parse_source(source: str) -> Tuple[Tree, List[str]]:
    return parse(tokenize(source))
