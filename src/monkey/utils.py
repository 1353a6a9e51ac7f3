from __future__ import annotations

import logging
import os as _os
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}


def debug_enabled() -> bool:
    """MONKEY_DEBUG turns on DEBUG logging for the runner and REPL."""
    return _os.environ.get("MONKEY_DEBUG", "").strip().lower() in _TRUTHY


def max_call_depth() -> Optional[int]:
    """Opt-in cap on nested calls from MONKEY_MAX_CALL_DEPTH.

    Unset, non-numeric or non-positive values mean no cap: deep recursion is
    then bounded only by the interpreter's own recursion limit.
    """
    raw = _os.environ.get("MONKEY_MAX_CALL_DEPTH")
    if raw is None:
        return None

    try:
        value = int(raw.strip())
    except ValueError:
        return None

    return value if value > 0 else None


DEFAULT_RECURSION_LIMIT = 30000


def recursion_limit() -> int:
    """Python recursion limit to evaluate Monkey programs under.

    MONKEY_RECURSION_LIMIT overrides DEFAULT_RECURSION_LIMIT. One Monkey call
    costs about a dozen interpreter frames, so the default allows recursion
    a couple of thousand calls deep.
    """
    raw = _os.environ.get("MONKEY_RECURSION_LIMIT")
    if raw is None:
        return DEFAULT_RECURSION_LIMIT

    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_RECURSION_LIMIT

    return value if value > 0 else DEFAULT_RECURSION_LIMIT


def configure_logging(debug: bool = False) -> None:
    if debug or debug_enabled():
        logging.basicConfig(level=logging.DEBUG)
