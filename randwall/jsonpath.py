"""Minimal JSONPath evaluator for extracting one value from a JSON document.

Supported syntax (a common subset of JSONPath)::

    $                     the whole document
    $.data.items          dotted property access
    $['data']["items"]    bracketed, quoted property access
    $.items[0]            list index
    $.items[-1]           list index from the end
    data.items[0].url     the leading "$" is optional

Wildcards, slices, unions and filter expressions are not supported.
"""

import re
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from .models import JSONPathError

__all__ = ["evaluate", "parse_path"]

Step = tuple[str, str | int]

_DOT_KEY = re.compile(r"\.([^.\[\]\s]+)")
_BARE_KEY = re.compile(r"([^.\[\]\s]+)")
_INDEX = re.compile(r"\[\s*(-?\d+)\s*\]")
_QUOTED_KEY = re.compile(r"""\[\s*(?:'((?:[^'\\]|\\.)*)'|"((?:[^"\\]|\\.)*)")\s*\]""")
_ESCAPE = re.compile(r"\\(.)")


@lru_cache(maxsize=128)
def parse_path(path: str) -> tuple[Step, ...]:
    """Split a path expression into ("key", name) and ("index", n) steps.

    Args:
        path: The path expression.

    Returns:
        The steps, in evaluation order.

    Raises:
        JSONPathError: If the expression is malformed.
    """
    expr = path.strip()
    steps: tuple[Step, ...] = ()
    if expr.startswith("$"):
        pos = 1
    elif match := _BARE_KEY.match(expr):
        steps = (("key", match.group(1)),)
        pos = match.end()
    else:
        msg = f"Malformed path '{path}': expected '$' or a property name"
        raise JSONPathError(msg)
    return steps + _parse_steps(path, expr, pos)


def _parse_steps(path: str, expr: str, pos: int) -> tuple[Step, ...]:
    steps: list[Step] = []
    while pos < len(expr):
        if match := _DOT_KEY.match(expr, pos):
            steps.append(("key", match.group(1)))
        elif match := _INDEX.match(expr, pos):
            steps.append(("index", int(match.group(1))))
        elif match := _QUOTED_KEY.match(expr, pos):
            raw = match.group(1) if match.group(1) is not None else match.group(2)
            steps.append(("key", _ESCAPE.sub(r"\1", raw)))
        else:
            msg = f"Malformed path '{path}' at position {pos}"
            raise JSONPathError(msg)
        pos = match.end()
    return tuple(steps)


def _render(steps: Sequence[Step]) -> str:
    """Format steps back into a canonical path, for error messages."""
    out = "$"
    for kind, token in steps:
        out += f"[{token}]" if kind == "index" else f".{token}"
    return out


def _is_list(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _step(current: Any, kind: str, token: str | int, where: str) -> Any:  # noqa: ANN401
    if isinstance(current, Mapping):
        key = str(token)
        if key not in current:
            msg = f"Unknown property '{key}' at {where}"
            raise JSONPathError(msg)
        return current[key]

    if _is_list(current):
        if kind == "key":
            if not str(token).lstrip("-").isdigit():
                msg = f"Cannot read property '{token}' of a list at {where}"
                raise JSONPathError(msg)
            token = int(token)
        index = int(token)
        if not -len(current) <= index < len(current):
            msg = f"Index {index} out of range (length {len(current)}) at {where}"
            raise JSONPathError(msg)
        return current[index]

    msg = f"Cannot access '{token}' on {type(current).__name__} at {where}"
    raise JSONPathError(msg)


def evaluate(document: Any, path: str) -> Any:  # noqa: ANN401
    """Return the value selected by `path` in `document`.

    The function holds no state: the same document and path always give
    the same result.

    Args:
        document: Parsed JSON (nested dicts, lists and scalars).
        path: The path expression.

    Returns:
        The selected value.

    Raises:
        JSONPathError: On malformed paths, unknown properties, out of range
            indexes and access into scalars.

    Eg:
        evaluate({"data": {"items": [{"url": "/a.png"}]}}, "$.data.items[0].url") == "/a.png"
    """
    steps = parse_path(path)
    current = document
    for position, (kind, token) in enumerate(steps):
        current = _step(current, kind, token, _render(steps[: position + 1]))
    return current
