"""
Resolution of tool-call arguments.

The generation engine does not always honour the declared argument
schema: the value may come under the declared key, under an alternate
field name, wrapped in a nested mapping, JSON-encoded in a string or as
a bare string. Resolution probes those shapes in a fixed order and tags
the result with the shape it matched.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

NESTED_KEYS = ("args", "arguments", "input", "parameters")


class ArgumentSource(str, Enum):
    PRIMARY = "primary"
    ALIAS = "alias"
    NESTED = "nested"
    ENCODED = "encoded"
    BARE = "bare"


@dataclass(frozen=True, slots=True)
class ResolvedArgument:
    value: str
    source: ArgumentSource


class ArgumentResolutionError(LookupError):
    def __init__(self, key: str, args: Any) -> None:
        super().__init__(f"could not resolve argument '{key}' from {args!r}")
        self.key = key
        self.args_payload = args


def resolve_argument(
    args: Any,
    key: str,
    aliases: Sequence[str] = (),
) -> ResolvedArgument:
    """Resolve ``key`` from a tool-call payload.

    Order: declared key, aliases, nested mappings, JSON-encoded string,
    bare string. Raises ArgumentResolutionError when nothing matches.
    """
    resolved = _resolve(args, key, aliases, depth=0)
    if resolved is None:
        raise ArgumentResolutionError(key, args)
    return resolved


def _resolve(
    args: Any,
    key: str,
    aliases: Sequence[str],
    depth: int,
) -> ResolvedArgument | None:
    if depth > 2:
        return None

    if isinstance(args, Mapping):
        value = _text(args.get(key))
        if value is not None:
            return ResolvedArgument(value, ArgumentSource.PRIMARY)

        for alias in aliases:
            value = _text(args.get(alias))
            if value is not None:
                return ResolvedArgument(value, ArgumentSource.ALIAS)

        for nested_key in NESTED_KEYS:
            nested = args.get(nested_key)
            if nested is None:
                continue
            inner = _resolve(nested, key, aliases, depth + 1)
            if inner is not None:
                return ResolvedArgument(inner.value, ArgumentSource.NESTED)
        return None

    if isinstance(args, str):
        stripped = args.strip()
        if not stripped:
            return None
        if stripped.startswith("{"):
            try:
                decoded = json.loads(stripped)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, Mapping):
                inner = _resolve(decoded, key, aliases, depth + 1)
                if inner is None:
                    return None
                return ResolvedArgument(inner.value, ArgumentSource.ENCODED)
        return ResolvedArgument(stripped, ArgumentSource.BARE)

    return None


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
