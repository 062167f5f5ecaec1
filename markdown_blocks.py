from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class BlockKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    UNORDERED_ITEM = "unordered-item"
    ORDERED_ITEM = "ordered-item"
    QUOTE = "quote"
    CODE = "code"


CONTAINER_KINDS = frozenset(
    {BlockKind.UNORDERED_ITEM, BlockKind.ORDERED_ITEM, BlockKind.QUOTE}
)

CODE_FENCE = "```"
BOLD_MARKER = "**"
STRIKE_MARKER = "~~"

# Checked in this order; the first match wins.
_BLOCK_PATTERNS = (
    (BlockKind.HEADING_3, re.compile(r"^###\s+")),
    (BlockKind.HEADING_2, re.compile(r"^#{1,2}\s+")),
    (BlockKind.QUOTE, re.compile(r"^>\s?")),
    (BlockKind.ORDERED_ITEM, re.compile(r"^\d+[.)]\s+")),
    (BlockKind.UNORDERED_ITEM, re.compile(r"^[-*+]\s+")),
)


@dataclass(frozen=True)
class LineBlock:
    kind: BlockKind
    text: str
    # True when a blank separator line came right before this block
    after_blank: bool = False


@dataclass
class InlineState:
    bold: bool = False
    strike: bool = False


@dataclass(frozen=True)
class InlineSegment:
    text: str
    bold: bool = False
    strike: bool = False


def is_fence(line: str) -> bool:
    return line.strip().startswith(CODE_FENCE)


def classify_line(line: str) -> LineBlock:
    """Classify a single non-code line and strip its leading marker."""
    stripped = line.strip()
    for kind, pattern in _BLOCK_PATTERNS:
        match = pattern.match(stripped)
        if match:
            return LineBlock(kind, stripped[match.end():])
    return LineBlock(BlockKind.PARAGRAPH, stripped)


def classify_blocks(body: str) -> List[LineBlock]:
    """Partition ``body`` into typed line blocks.

    Fence lines toggle code mode and are not emitted; inside a code block every
    line is kept verbatim. Blank lines outside code only separate blocks.
    """
    blocks: List[LineBlock] = []
    in_code = False
    pending_blank = False
    text = (body or "").replace("\r\n", "\n").replace("\r", "\n")
    for line in text.split("\n"):
        if is_fence(line):
            in_code = not in_code
            continue
        if in_code:
            blocks.append(LineBlock(BlockKind.CODE, line, after_blank=pending_blank))
            pending_blank = False
            continue
        if not line.strip():
            pending_blank = bool(blocks)
            continue
        block = classify_line(line)
        if pending_blank:
            block = LineBlock(block.kind, block.text, after_blank=True)
            pending_blank = False
        blocks.append(block)
    return blocks


def segment_inline(line: str, state: Optional[InlineState] = None) -> List[InlineSegment]:
    """Split ``line`` into runs on ``**`` (bold) and ``~~`` (strike) toggles.

    Markers flip the running state rather than pairing up, so an unmatched marker
    leaves its style on to the end of the line. ``state`` is mutated in place.
    """
    state = state if state is not None else InlineState()
    segments: List[InlineSegment] = []
    buffer: List[str] = []

    def flush() -> None:
        if buffer:
            segments.append(InlineSegment("".join(buffer), state.bold, state.strike))
            buffer.clear()

    index = 0
    while index < len(line):
        if line.startswith(BOLD_MARKER, index):
            flush()
            state.bold = not state.bold
            index += len(BOLD_MARKER)
        elif line.startswith(STRIKE_MARKER, index):
            flush()
            state.strike = not state.strike
            index += len(STRIKE_MARKER)
        else:
            buffer.append(line[index])
            index += 1
    flush()
    return segments


def strip_inline_markers(line: str) -> str:
    return "".join(segment.text for segment in segment_inline(line))
