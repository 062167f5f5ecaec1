from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from config import BODY_MAX_CHARS, DEFAULT_TITLE, MAX_TAGS, TITLE_MAX_CHARS
from console_utils import log, preview
from front_matter import attribute_list, attribute_text, split_front_matter
from headings import insert_auto_headings
from quotes import Quote, SourceDocument, format_quote_digest, normalize_space, truncate_text

TAG_KEYS = ("tags", "tag", "categories")
THUMBNAIL_KEYS = ("thumbnail", "eyecatch", "cover", "image")


class DraftGenerationError(RuntimeError):
    """Raised when a required draft generation step fails."""


@dataclass
class DraftOverrides:
    title: str = ""
    tags: List[str] = field(default_factory=list)
    thumbnail: str = ""


@dataclass
class DraftArticle:
    title: str
    body: str
    raw_body: str
    tags: List[str] = field(default_factory=list)
    thumbnail_path: Optional[str] = None


def normalize_tags(tags: Iterable[str], limit: int = MAX_TAGS) -> List[str]:
    """Trim, drop leading ``#``, dedupe case-insensitively and clamp to ``limit``."""
    out: List[str] = []
    seen: set[str] = set()
    for raw in tags:
        tag = (raw or "").strip().lstrip("#").strip()
        if not tag:
            continue
        key = tag.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(tag)
        if len(out) >= limit:
            break
    return out


def resolve_title(
    override: str = "",
    attribute: str = "",
    generated: str = "",
    sources: Sequence[SourceDocument] = (),
) -> str:
    candidates = [override, attribute, generated]
    candidates.extend(doc.title for doc in sources)
    for candidate in candidates:
        title = normalize_space(candidate)
        if title:
            return title
    return DEFAULT_TITLE


def assemble_draft(
    text: str,
    *,
    overrides: DraftOverrides | None = None,
    generated_title: str = "",
    sources: Sequence[SourceDocument] = (),
    auto_heading: bool = True,
    title_max_chars: int = TITLE_MAX_CHARS,
    body_max_chars: int = BODY_MAX_CHARS,
) -> DraftArticle:
    overrides = overrides or DraftOverrides()
    attrs, body = split_front_matter(text or "")
    if attrs:
        log(f"INFO:FRONT_MATTER keys={sorted(attrs)}")

    title = resolve_title(
        overrides.title,
        attribute_text(attrs, "title"),
        generated_title,
        sources,
    )
    title = truncate_text(title, title_max_chars)

    tags = normalize_tags(overrides.tags or attribute_list(attrs, *TAG_KEYS))
    thumbnail = (overrides.thumbnail or attribute_text(attrs, *THUMBNAIL_KEYS)).strip() or None

    raw_body = body.strip()
    formatted = insert_auto_headings(raw_body) if auto_heading else raw_body
    formatted = truncate_text(formatted, body_max_chars)

    if not formatted.strip() and (tags or thumbnail):
        log("WARN:DRAFT_EMPTY_BODY dropping tags and thumbnail")
        tags, thumbnail = [], None

    log(
        f"STEP:DRAFT_ASSEMBLED title={preview(title)!r} chars={len(formatted)} "
        f"tags={len(tags)} thumbnail={bool(thumbnail)}"
    )
    return DraftArticle(
        title=title,
        body=formatted,
        raw_body=raw_body,
        tags=tags,
        thumbnail_path=thumbnail,
    )


def build_generation_prompt(instructions: str, quotes: Iterable[Quote]) -> str:
    """Append the quote digest to the generator instructions."""
    digest = format_quote_digest(quotes)
    if not digest:
        return instructions.strip()
    return f"{instructions.strip()}\n\nReferences:\n\n{digest}"


def run_generation(
    generate: Callable[[str], str],
    prompt: str,
    *,
    required: bool = False,
) -> Optional[str]:
    """Call the external text generator.

    A failure is fatal when ``required`` is set; otherwise it is logged and
    ``None`` comes back so the run can continue with the text it already has.
    """
    try:
        output = generate(prompt)
    except Exception as exc:
        if required:
            raise DraftGenerationError(f"draft generation failed: {exc}") from exc
        log(f"WARN:DRAFT_GENERATION_FAILED err={exc.__class__.__name__}: {exc}")
        return None
    if not (output or "").strip():
        if required:
            raise DraftGenerationError("draft generation returned empty output")
        log("WARN:DRAFT_GENERATION_EMPTY")
        return None
    log(f"STEP:DRAFT_GENERATED chars={len(output)}")
    return output
