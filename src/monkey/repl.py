"""Read-eval-print loop for Monkey.

`start` drives a session over plain text streams, one line in and one
rendering out. `repl` is the interactive terminal front end built on
prompt_toolkit, with history, live highlighting and slash commands.
"""

from __future__ import annotations

import getpass
import re
import sys
from typing import Callable, Dict, Optional, TextIO, Tuple

from lark import Tree
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .evaluator import eval_node
from .lexer import tokenize
from .parser import parse
from .repl_highlight import MONKEY_STYLE, MonkeyLexer
from .runner import format_parse_errors
from .runtime import configure_limits, init_stdlib, new_environment
from .tree import tree_children, tree_label
from .types import NULL, Environment

PROMPT = ">> "

_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")


class Session:
    """One top-level Environment shared by every line of a REPL session."""

    def __init__(self, out: TextIO, env: Optional[Environment]=None):
        init_stdlib()
        configure_limits()
        self.out = out
        self.env: Environment = env if env is not None else new_environment()

    def eval_line(self, line: str) -> None:
        program, errors = parse(tokenize(line))

        if errors:
            self.out.write(format_parse_errors(errors))
            return

        evaluated = eval_node(program, self.env)
        if evaluated is NULL and not _echoes_result(program):
            return

        self.out.write(evaluated.inspect() + "\n")

    def reset(self) -> None:
        self.env = new_environment()
        self.out.write("Environment reset.\n")

    def show_bindings(self) -> None:
        for name in sorted(self.env.store):
            self.out.write(f"{name} = {self.env.store[name].inspect()}\n")


def _echoes_result(program: Tree) -> bool:
    """Empty lines and lines ending in a `let` print nothing."""
    statements = tree_children(program)
    return bool(statements) and tree_label(statements[-1]) != "let_stmt"


def start(stdin: TextIO, stdout: TextIO) -> None:
    session = Session(stdout)

    while True:
        stdout.write(PROMPT)
        stdout.flush()

        line = stdin.readline()
        if not line:
            return

        session.eval_line(line.rstrip("\n"))


# ---------------- Interactive front end ----------------

SlashHandler = Callable[[Session], None]

SLASH_COMMANDS: Dict[str, Tuple[str, SlashHandler]] = {
    "/clear": ("Clear the terminal screen", lambda _: clear()),
    "/env": ("List top-level bindings", Session.show_bindings),
    "/reset": ("Start over with an empty environment", Session.reset),
}


def run_slash_command(line: str, session: Session) -> bool:
    """Run `line` if it is a slash command; False means evaluate it as code."""
    name = line.strip()
    if not name.startswith("/"):
        return False

    entry = SLASH_COMMANDS.get(name)
    if entry is None:
        print(f"Unknown command: {name}", file=sys.stderr)
        return True

    _, handler = entry
    handler(session)
    return True


def normalize(text: str) -> str:
    """Drop zero-width and other invisible characters pasted into the prompt."""
    return _INVISIBLE_RE.sub("", text)


def greeting() -> str:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = "there"

    return (
        f"Hello {user}! This is the Monkey programming language!\n"
        "Feel free to type in commands"
    )


def repl() -> None:
    session = Session(sys.stdout)
    prompt: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MonkeyLexer(),
        style=MONKEY_STYLE,
        completer=WordCompleter(
            list(SLASH_COMMANDS),
            meta_dict={name: desc for name, (desc, _) in SLASH_COMMANDS.items()},
            sentence=True,
        ),
    )

    print(greeting())

    while True:
        try:
            text = normalize(prompt.prompt(PROMPT))
        except KeyboardInterrupt:
            continue
        except EOFError:
            return

        if not text.strip() or run_slash_command(text, session):
            continue

        session.eval_line(text)
