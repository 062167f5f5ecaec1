# run_note.py
# -*- coding: utf-8 -*-
"""Compose one Markdown-ish draft into the note.com editor."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable

from playwright.sync_api import sync_playwright

from config import CHROME_LANG, CHROME_PROFILE_DIR, CHROME_USER_DATA_DIR, NOTE_DRIVER
from console_utils import log
from draft import DraftOverrides, assemble_draft
from editor_commands import BlockShortcut, InlineToggle, PressEnter, TypeText, translate_markdown
from note_selenium import ComposeError, note_compose_article, start_profile
from page_drivers import make_page
from typist import FallbackUnavailable


def read_draft_text(path: Path) -> str:
    data = path.read_bytes()
    if data.startswith(b"\xef\xbb\xbf"):
        return data.decode("utf-8-sig")
    for enc in ("utf-8", "cp932", "latin1"):
        try:
            return data.decode(enc)
        except UnicodeDecodeError:
            continue
    return data.decode("latin1", errors="replace")


def split_tags(raw: str) -> list[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def describe_action(action) -> str:
    if isinstance(action, BlockShortcut):
        return f"block   {action.kind.value}"
    if isinstance(action, InlineToggle):
        return f"toggle  {action.style}={'on' if action.enabled else 'off'}"
    if isinstance(action, TypeText):
        return f"type    {action.text!r}"
    if isinstance(action, PressEnter):
        return "enter"
    return repr(action)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Type a draft into the note.com editor")
    parser.add_argument("draft", type=Path, help="Draft text file (optional --- front matter)")
    parser.add_argument("--title", default="", help="Override the draft title")
    parser.add_argument("--tags", default="", help="Comma-separated tags overriding front matter")
    parser.add_argument("--thumbnail", default="", help="Path to a cover image")
    parser.add_argument("--plain", action="store_true", help="Type literal text without shortcuts")
    parser.add_argument("--no-auto-headings", action="store_true", help="Keep the body as written")
    parser.add_argument("--driver", choices=("selenium", "playwright"), default=NOTE_DRIVER)
    parser.add_argument("--user-data-dir", default=CHROME_USER_DATA_DIR)
    parser.add_argument("--profile-dir", default=CHROME_PROFILE_DIR)
    parser.add_argument("--dry-run", action="store_true", help="Print editor actions instead of typing")
    return parser.parse_args(list(argv) if argv is not None else None)


def _compose_with_playwright(args: argparse.Namespace, draft) -> None:
    with sync_playwright() as p:
        context = p.chromium.launch_persistent_context(
            user_data_dir=args.user_data_dir,
            headless=False,
            args=["--disable-blink-features=AutomationControlled"],
            locale=CHROME_LANG,
        )
        try:
            page = context.pages[0] if context.pages else context.new_page()
            note_compose_article(make_page(page, "playwright"), draft, formatted=not args.plain)
        finally:
            context.close()


def _compose_with_selenium(args: argparse.Namespace, draft) -> None:
    driver = start_profile(args.user_data_dir, args.profile_dir)
    try:
        note_compose_article(make_page(driver, "selenium"), draft, formatted=not args.plain)
    finally:
        driver.quit()


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    overrides = DraftOverrides(
        title=args.title,
        tags=split_tags(args.tags),
        thumbnail=args.thumbnail,
    )
    draft = assemble_draft(
        read_draft_text(args.draft),
        overrides=overrides,
        auto_heading=not args.no_auto_headings,
    )

    if args.dry_run:
        print(f"title: {draft.title}")
        print(f"tags: {', '.join(draft.tags) or '-'}")
        print(f"thumbnail: {draft.thumbnail_path or '-'}")
        for action in translate_markdown(draft.body):
            print(describe_action(action))
        return 0

    try:
        if args.driver == "playwright":
            _compose_with_playwright(args, draft)
        else:
            _compose_with_selenium(args, draft)
    except (ComposeError, FallbackUnavailable) as exc:
        log(f"ERROR:COMPOSE_FAILED {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
