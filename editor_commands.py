from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from config import EDITOR_SHORTCUTS, INLINE_SHORTCUTS
from markdown_blocks import (
    CONTAINER_KINDS,
    BlockKind,
    InlineState,
    LineBlock,
    classify_blocks,
    segment_inline,
)

MOD = "Mod"
BOLD = "bold"
STRIKE = "strike"


@dataclass(frozen=True)
class BlockShortcut:
    kind: BlockKind


@dataclass(frozen=True)
class InlineToggle:
    style: str
    enabled: bool


@dataclass(frozen=True)
class TypeText:
    text: str


@dataclass(frozen=True)
class PressEnter:
    pass


EditorAction = Union[BlockShortcut, InlineToggle, TypeText, PressEnter]


def resolve_combo(combo: Sequence[str], platform: str | None = None) -> Tuple[str, ...]:
    """Replace the abstract ``Mod`` key with the platform's command modifier."""
    platform = platform or sys.platform
    modifier = "Meta" if platform == "darwin" else "Control"
    return tuple(modifier if key == MOD else key for key in combo)


def shortcut_for(action: EditorAction, platform: str | None = None) -> Tuple[str, ...]:
    if isinstance(action, BlockShortcut):
        return resolve_combo(EDITOR_SHORTCUTS[action.kind.value], platform)
    if isinstance(action, InlineToggle):
        return resolve_combo(INLINE_SHORTCUTS[action.style], platform)
    raise ValueError(f"no shortcut for {action!r}")


def _toggle_to(actions: List[EditorAction], running: InlineState, bold: bool, strike: bool) -> None:
    if running.bold != bold:
        actions.append(InlineToggle(BOLD, bold))
        running.bold = bold
    if running.strike != strike:
        actions.append(InlineToggle(STRIKE, strike))
        running.strike = strike


def _leaves_container(block: LineBlock, following: LineBlock | None) -> bool:
    if block.kind not in CONTAINER_KINDS or following is None:
        return False
    return following.kind != block.kind


def translate_blocks(blocks: Sequence[LineBlock]) -> List[EditorAction]:
    """Turn classified blocks into the ordered editor action stream."""
    actions: List[EditorAction] = []
    current = BlockKind.PARAGRAPH
    for index, block in enumerate(blocks):
        if block.after_blank:
            current = BlockKind.PARAGRAPH
        if block.kind != current:
            actions.append(BlockShortcut(block.kind))
            current = block.kind

        if block.kind == BlockKind.CODE:
            if block.text:
                actions.append(TypeText(block.text))
        else:
            running = InlineState()
            for segment in segment_inline(block.text):
                _toggle_to(actions, running, segment.bold, segment.strike)
                actions.append(TypeText(segment.text))
            _toggle_to(actions, running, False, False)

        actions.append(PressEnter())
        following = blocks[index + 1] if index + 1 < len(blocks) else None
        if _leaves_container(block, following):
            actions.append(PressEnter())
    return actions


def translate_markdown(body: str) -> List[EditorAction]:
    return translate_blocks(classify_blocks(body))


def visible_text(actions: Sequence[EditorAction]) -> str:
    """Text the editor surface should show once ``actions`` have run."""
    parts: List[str] = []
    for action in actions:
        if isinstance(action, TypeText):
            parts.append(action.text)
        elif isinstance(action, PressEnter):
            parts.append("\n")
    return "".join(parts)
