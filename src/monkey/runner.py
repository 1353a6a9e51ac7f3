from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

from lark import Tree

from .evaluator import eval_node
from .lexer import tokenize
from .parser import ParseError, parse
from .runtime import configure_limits, init_stdlib, new_environment
from .types import Environment, MkError, MkValue
from .utils import configure_logging

logger = logging.getLogger(__name__)

def parse_program(src: str) -> Tree:
    """Parse source text, raising ParseError with every syntax error found."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Tokens: %s", list(tokenize(src)))

    program, errors = parse(tokenize(src))

    if errors:
        logger.debug("Syntax errors: %s", errors)
        raise ParseError(errors)

    logger.debug("AST:\n%s", program.pretty())
    return program

def run(src: str, env: Optional[Environment]=None) -> MkValue:
    init_stdlib()
    configure_limits()

    if env is None:
        env = new_environment()

    return eval_node(parse_program(src), env)

def format_parse_errors(errors: List[str]) -> str:
    return "".join(f"\t{msg}\n" for msg in errors)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[List[str]]=None) -> int:
    debug = False
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--debug":
            debug = True
            continue

        if token in ("-h", "--help"):
            print("usage: monkey [--debug] [FILE | - | SOURCE]")
            return 0

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    configure_logging(debug)

    if arg is None and sys.stdin.isatty():
        from .repl import repl
        repl()
        return 0

    source = _load_source(arg)

    try:
        result = run(source)
    except ParseError as exc:
        sys.stderr.write(format_parse_errors(exc.errors))
        return 1

    print(result.inspect())
    return 1 if isinstance(result, MkError) else 0

if __name__ == "__main__":
    sys.exit(main())
