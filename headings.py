from __future__ import annotations

import re
from typing import List

from config import (
    AUTO_HEADING_EVERY,
    AUTO_HEADING_H2_LABEL,
    AUTO_HEADING_H3_LABEL,
    AUTO_HEADING_MIN_PARAGRAPHS,
    AUTO_HEADING_SUB_EVERY,
    AUTO_HEADING_TARGET_CHARS,
)
from markdown_blocks import is_fence

HEADING_RE = re.compile(r"^[ \t]{0,3}#{2,3}[ \t]")
SENTENCE_RE = re.compile(
    r".+?(?:[.!?。！？]+[\"'”’」』)）\]]*\s*|\Z)",
    re.S,
)


def _prose_lines(body: str):
    """Yield the lines of ``body`` that sit outside fenced code."""
    in_code = False
    for line in body.split("\n"):
        if is_fence(line):
            in_code = not in_code
            continue
        if not in_code:
            yield line


def has_headings(body: str) -> bool:
    return any(HEADING_RE.match(line) for line in _prose_lines(body or ""))


def split_sentences(text: str) -> List[str]:
    return [s for s in SENTENCE_RE.findall(text) if s.strip()]


def _sentence_paragraphs(text: str, target_length: int) -> List[str]:
    paragraphs: List[str] = []
    buffer = ""
    for sentence in split_sentences(text):
        buffer += sentence
        if len(buffer.strip()) >= target_length:
            paragraphs.append(buffer.strip())
            buffer = ""
    if buffer.strip():
        paragraphs.append(buffer.strip())
    return paragraphs


def _blank_line_paragraphs(text: str) -> List[str]:
    # a fenced region stays inside one paragraph, blank lines included
    paragraphs: List[str] = []
    current: List[str] = []
    in_code = False
    for line in text.split("\n"):
        if is_fence(line):
            in_code = not in_code
        elif not in_code and not line.strip():
            if current:
                paragraphs.append("\n".join(current).strip())
                current = []
            continue
        current.append(line)
    if current:
        paragraphs.append("\n".join(current).strip())
    return [p for p in paragraphs if p]


def split_paragraphs(body: str, target_length: int = AUTO_HEADING_TARGET_CHARS) -> List[str]:
    """Blank-line paragraphs, or sentence groups when the body is one prose block."""
    text = (body or "").replace("\r\n", "\n").strip()
    if not text:
        return []
    paragraphs = _blank_line_paragraphs(text)
    if len(paragraphs) == 1 and not any(is_fence(line) for line in text.split("\n")):
        return _sentence_paragraphs(paragraphs[0], max(1, target_length))
    return paragraphs


def insert_auto_headings(
    body: str,
    *,
    min_paragraphs: int = AUTO_HEADING_MIN_PARAGRAPHS,
    every: int = AUTO_HEADING_EVERY,
    sub_every: int = AUTO_HEADING_SUB_EVERY,
    target_length: int = AUTO_HEADING_TARGET_CHARS,
    h2_label: str = AUTO_HEADING_H2_LABEL,
    h3_label: str = AUTO_HEADING_H3_LABEL,
) -> str:
    """Add numbered ``##``/``###`` headings to prose that has none.

    Paragraph ``i`` gets a level-2 heading when ``i % every == 0`` and otherwise a
    level-3 heading when ``i % sub_every == 0``. ``sub_every=0`` disables level 3.
    Bodies that already carry headings, or have fewer than ``min_paragraphs``
    paragraphs, are returned unchanged.
    """
    if not body or has_headings(body):
        return body
    paragraphs = split_paragraphs(body, target_length)
    if len(paragraphs) < max(1, min_paragraphs):
        return body

    every = max(1, every)
    sub_every = max(0, sub_every)
    h2_count = 0
    h3_count = 0
    out: List[str] = []
    for index, paragraph in enumerate(paragraphs):
        if index % every == 0:
            h2_count += 1
            out.append("## " + h2_label.format(n=h2_count))
        elif sub_every and index % sub_every == 0:
            h3_count += 1
            out.append("### " + h3_label.format(n=h3_count))
        out.append(paragraph)
    return "\n\n".join(out)
