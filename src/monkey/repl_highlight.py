"""Live syntax highlighting for the Monkey REPL.

Each line is re-scanned with the Monkey lexer and every token becomes a
prompt_toolkit fragment tagged with a `class:monkey.<group>` style class.
"""

from __future__ import annotations

from typing import Callable, Dict

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from .lexer import Lexer as MonkeyScanner
from .token_types import TT, Tok

MONKEY_STYLE = Style.from_dict({
    "monkey.keyword": "bold ansicyan",
    "monkey.boolean": "ansicyan",
    "monkey.number": "ansimagenta",
    "monkey.string": "ansigreen",
    "monkey.builtin": "bold ansiyellow",
    "monkey.illegal": "bold ansired",
})

_KEYWORDS = frozenset(MonkeyScanner.KEYWORDS.values()) - {TT.TRUE, TT.FALSE}

_LITERAL_GROUPS: Dict[TT, str] = {
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.INT: "number",
    TT.STRING: "string",
    TT.ILLEGAL: "illegal",
}

BUILTIN_NAMES = frozenset({"len", "first", "last", "rest", "push", "puts"})


def token_class(tok: Tok) -> str:
    """Style class for a token; identifiers and punctuation stay unstyled."""
    if tok.type in _KEYWORDS:
        group = "keyword"
    elif tok.type == TT.IDENT and tok.literal in BUILTIN_NAMES:
        group = "builtin"
    else:
        group = _LITERAL_GROUPS.get(tok.type, "")

    return f"class:monkey.{group}" if group else ""


def highlight_line(text: str) -> StyleAndTextTuples:
    fragments: StyleAndTextTuples = []
    pos = 0

    for tok in MonkeyScanner(text):
        if tok.type == TT.EOF:
            break

        start = tok.column - 1
        end = start + len(tok.literal)
        if tok.type == TT.STRING:
            end += 2  # quotes

        if start > pos:
            fragments.append(("", text[pos:start]))

        fragments.append((token_class(tok), text[start:end]))
        pos = end

    if pos < len(text):
        fragments.append(("", text[pos:]))

    return fragments


class MonkeyLexer(Lexer):
    """prompt_toolkit lexer backed by the Monkey scanner."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return []
            return highlight_line(lines[lineno])

        return get_line
