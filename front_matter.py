from __future__ import annotations

from typing import Dict, List, Tuple, Union

AttributeValue = Union[str, List[str]]
Attributes = Dict[str, AttributeValue]

FENCE = "---"


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def _parse_inline_list(value: str) -> List[str]:
    inner = value.strip()[1:-1]
    items = [_unquote(part) for part in inner.split(",")]
    return [item for item in items if item]


def _parse_region(lines: List[str]) -> Attributes:
    attrs: Attributes = {}
    last_key: str | None = None
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("-"):
            if last_key is None:
                continue
            item = _unquote(line[1:])
            if not item:
                continue
            current = attrs.get(last_key)
            if isinstance(current, list):
                current.append(item)
            elif current:
                attrs[last_key] = [current, item]
            else:
                attrs[last_key] = [item]
            continue
        key, sep, value = line.partition(":")
        key = key.strip().lower()
        if not sep or not key:
            continue
        value = value.strip()
        if value.startswith("[") and value.endswith("]"):
            attrs[key] = _parse_inline_list(value)
        else:
            attrs[key] = _unquote(value)
        last_key = key
    return attrs


def split_front_matter(text: str) -> Tuple[Attributes, str]:
    """Separate a leading ``---`` fenced metadata header from the body.

    Returns ``(attributes, body)``. Without an opening and a closing fence the
    text comes back untouched with no attributes; malformed header lines are
    skipped.
    """
    if not text:
        return {}, text or ""
    source = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    lines = source.split("\n")
    if lines[0].strip() != FENCE:
        return {}, text
    for index in range(1, len(lines)):
        if lines[index].strip() == FENCE:
            attrs = _parse_region(lines[1:index])
            body = "\n".join(lines[index + 1 :]).lstrip("\n")
            return attrs, body
    return {}, text


def attribute_text(attrs: Attributes, *keys: str) -> str:
    """First non-empty value among ``keys``, lists joined with commas."""
    for key in keys:
        value = attrs.get(key)
        if isinstance(value, list):
            value = ", ".join(value)
        if value:
            return value
    return ""


def attribute_list(attrs: Attributes, *keys: str) -> List[str]:
    """First non-empty value among ``keys`` as a list; scalars split on commas."""
    for key in keys:
        value = attrs.get(key)
        if not value:
            continue
        if isinstance(value, list):
            return list(value)
        return [part.strip() for part in value.split(",") if part.strip()]
    return []
