from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from config import (
    QUOTE_LIMIT,
    QUOTE_MAX_LENGTH,
    QUOTE_MIN_LENGTH,
    QUOTE_PER_PAGE_LIMIT,
)

ELLIPSIS = "…"


@dataclass
class SourceDocument:
    url: str
    title: str = ""
    blocks: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Quote:
    text: str
    source_url: str
    source_title: str


def normalize_space(value: str) -> str:
    return " ".join((value or "").split())


def truncate_text(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, the last one being an ellipsis."""
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + ELLIPSIS


def select_quotes(
    documents: Iterable[SourceDocument],
    limit: int = QUOTE_LIMIT,
    per_page_limit: int = QUOTE_PER_PAGE_LIMIT,
    min_length: int = QUOTE_MIN_LENGTH,
    max_length: int = QUOTE_MAX_LENGTH,
) -> List[Quote]:
    selected: List[Quote] = []
    if limit <= 0 or per_page_limit <= 0 or max_length <= 0:
        return selected
    seen: set[str] = set()
    for doc in documents:
        taken = 0
        for block in doc.blocks:
            if len(selected) >= limit or taken >= per_page_limit:
                break
            text = normalize_space(block)
            if len(text) < min_length:
                continue
            text = truncate_text(text, max_length)
            if text in seen:
                continue
            seen.add(text)
            selected.append(Quote(text=text, source_url=doc.url, source_title=doc.title))
            taken += 1
        if len(selected) >= limit:
            break
    return selected


def format_quote_digest(quotes: Iterable[Quote]) -> str:
    """Render quotes as the digest handed to the text generator."""
    parts = []
    for quote in quotes:
        source = quote.source_title or quote.source_url
        if quote.source_title and quote.source_url:
            source = f"{quote.source_title} ({quote.source_url})"
        parts.append(f"> {quote.text}\n— {source}" if source else f"> {quote.text}")
    return "\n\n".join(parts)
