"""
JSON extraction from model replies.

A reply is read as plain JSON first, then from a fenced code block, then
from the first balanced object or array in the text. The helpers below
coerce the parsed payload into fixed schemas.
"""

import json
import math
import re
from typing import Any

FENCE = re.compile(r"```(?:\w*)\s*([\s\S]*?)\s*```")


def _loads(text: str) -> dict | list | None:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def _fenced(text: str) -> dict | list | None:
    for block in FENCE.findall(text):
        parsed = _loads(block)
        if parsed is not None:
            return parsed
    return None


def _balanced(text: str) -> dict | list | None:
    """First balanced ``{...}`` or ``[...]`` span that parses."""
    openers = sorted((pos, char) for char in "{[" if (pos := text.find(char)) != -1)
    for start, opener in openers:
        closer = "}" if opener == "{" else "]"
        depth = 0
        in_string = escaped = False
        for i in range(start, len(text)):
            char = text[i]
            if escaped:
                escaped = False
            elif in_string:
                if char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    parsed = _loads(text[start:i + 1])
                    if parsed is not None:
                        return parsed
                    break
    return None


def extract_json(text: str, expect_array: bool = False) -> dict | list | None:
    """
    Parse the JSON payload of a model reply.

    Returns the first candidate of the expected shape (array or object),
    else the first non-empty candidate of the other shape, else None.
    """
    if not text or not text.strip():
        return None

    fallback = None
    for strategy in (lambda t: _loads(t.strip()), _fenced, _balanced):
        result = strategy(text)
        if result is None:
            continue
        if isinstance(result, list) == expect_array and isinstance(result, (list, dict)):
            return result
        if fallback is None and result:
            fallback = result
    return fallback


# Normalization helpers


def pick(data: dict, snake: str, camel: str | None = None, default: Any = None) -> Any:
    """Read a key in snake_case, falling back to camelCase."""
    if snake in data and data[snake] is not None:
        return data[snake]
    if camel is not None and data.get(camel) is not None:
        return data[camel]
    return default


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def as_str_list(value: Any, limit: int | None = None) -> list[str]:
    """Coerce to a list of strings, dropping items of any other type."""
    if not isinstance(value, list):
        return []
    items = [item for item in value if isinstance(item, str)]
    return items[:limit] if limit is not None else items


def as_dict_list(value: Any, limit: int | None = None) -> list[dict]:
    """Coerce to a list of dicts, dropping items of any other type."""
    if not isinstance(value, list):
        return []
    items = [item for item in value if isinstance(item, dict)]
    return items[:limit] if limit is not None else items


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def as_int(value: Any, default: int | None = 0, low: int | None = None, high: int | None = None) -> int | None:
    """Coerce a number or numeric string to int and clamp it into [low, high]."""
    if isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        # json.loads accepts NaN and Infinity
        return default
    if isinstance(value, (int, float)):
        number = int(round(value))
    elif isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if not match:
            return default
        number = int(round(float(match.group())))
    else:
        return default

    if low is not None:
        number = max(low, number)
    if high is not None:
        number = min(high, number)
    return number


def as_bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def choice(value: Any, allowed: tuple[str, ...], default: str) -> str:
    """Return the value if it is one of the allowed strings, else the default."""
    if isinstance(value, str) and value in allowed:
        return value
    return default


def to_snake(key: str) -> str:
    """coreTech -> core_tech"""
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()
