"""
Lexer for Monkey

Turns source text into a stream of tokens, one `next_token()` call at a time.

Features:
- Single-pass, pull-based tokenization
- Position tracking (line, column)
- Never raises: unknown input becomes an ILLEGAL token for the parser to report
"""

from typing import Callable, Iterator

from .token_types import TT, Tok

WHITESPACE = frozenset(' \t\r\n')

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """Monkey lexer. After end of input it keeps returning EOF tokens."""

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FUNCTION,
        'let': TT.LET,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'if': TT.IF,
        'else': TT.ELSE,
        'return': TT.RETURN,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NOT_EQ),

        # Single-character operators
        ('=', TT.ASSIGN),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('!', TT.BANG),
        ('*', TT.ASTERISK),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        (',', TT.COMMA),
        (';', TT.SEMICOLON),
        (':', TT.COLON),
        ('(', TT.LPAREN),
        (')', TT.RPAREN),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('[', TT.LBRACKET),
        (']', TT.RBRACKET),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        line, column = self.line, self.column

        if self.pos >= len(self.source):
            return Tok(TT.EOF, "", line, column)

        ch = self.peek()

        if ch == '"':
            return self.scan_string(line, column)

        if is_digit(ch):
            return self.scan_number(line, column)

        if is_letter(ch):
            return self.scan_identifier(line, column)

        return self.scan_operator(line, column)

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self, line: int, column: int) -> Tok:
        """Scan "..." literal; contents are copied as-is, with no escapes"""
        start = self.pos + 1
        end = self.source.find('"', start)

        if end < 0:
            text = self.advance(len(self.source) - self.pos)
            return Tok(TT.ILLEGAL, text, line, column)

        self.advance(end + 1 - self.pos)
        return Tok(TT.STRING, self.source[start:end], line, column)

    def scan_number(self, line: int, column: int) -> Tok:
        """Scan a run of decimal digits"""
        return Tok(TT.INT, self.advance_while(is_digit), line, column)

    def scan_identifier(self, line: int, column: int) -> Tok:
        """Scan identifier, then classify keywords"""
        word = self.advance_while(lambda ch: is_letter(ch) or is_digit(ch))
        return Tok(self.KEYWORDS.get(word, TT.IDENT), word, line, column)

    def scan_operator(self, line: int, column: int) -> Tok:
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return Tok(op_type, op_str, line, column)

        return Tok(TT.ILLEGAL, self.advance(), line, column)

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self) -> str:
        """Current character, or NUL at end of input"""
        return self.source[self.pos] if self.pos < len(self.source) else '\0'

    def advance(self, n: int = 1) -> str:
        """Consume up to n characters, keeping line and column current"""
        text = self.source[self.pos:self.pos + n]
        self.pos += len(text)

        newlines = text.count('\n')
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind('\n')
        else:
            self.column += len(text)

        return text

    def advance_while(self, pred: Callable[[str], bool]) -> str:
        start = self.pos
        while self.pos < len(self.source) and pred(self.source[self.pos]):
            self.advance()
        return self.source[start:self.pos]

    def skip_whitespace(self) -> None:
        self.advance_while(lambda ch: ch in WHITESPACE)


def is_letter(ch: str) -> bool:
    return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def tokenize(source: str) -> Iterator[Tok]:
    """Yield tokens for source, ending with (and including) the first EOF"""
    return iter(Lexer(source))


if __name__ == '__main__':
    test_source = '''
let fibonacci = fn(n) {
    if (n < 2) { return n; }
    fibonacci(n - 1) + fibonacci(n - 2)
};
puts(fibonacci(10));
'''

    for tok in tokenize(test_source):
        print(tok)
