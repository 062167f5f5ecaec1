from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError
from selenium import webdriver
from selenium.common.exceptions import WebDriverException

try:
    import undetected_chromedriver as uc  # type: ignore
except Exception:  # pragma: no cover
    uc = None

from config import (
    BOT_CHALLENGE_MARKERS,
    CHROME_LANG,
    CHROME_PROFILE_DIR,
    CHROME_USER_DATA_DIR,
    CHROME_WINDOW,
    NOTE_EDITOR_URL,
    SEL_NOTE,
    SETTLE_AFTER_CLICK_S,
    WAIT_LONG,
    WAIT_SHORT,
)
from console_utils import log
from draft import DraftArticle
from locator import locate
from typist import FillResult, SyntheticTypist


class ComposeError(RuntimeError):
    """Composition of one draft cannot continue."""


class ComposerNotReady(ComposeError):
    pass


class TitleInputNotFound(ComposeError):
    pass


class BodyEditorNotFound(ComposeError):
    pass


class BotChallengeDetected(ComposeError):
    """A CAPTCHA or bot check is showing; it needs a human."""


@dataclass
class ComposeReport:
    title: FillResult
    body: FillResult
    tags: List[str] = field(default_factory=list)
    thumbnail_uploaded: bool = False


def note_chrome_arguments(user_data_dir: str, profile_dir: str | None, lang: str = CHROME_LANG) -> List[str]:
    """Chrome switches for a persisted note.com profile."""
    args = [f"--user-data-dir={user_data_dir}"]
    if profile_dir:
        args.append(f"--profile-directory={profile_dir}")
    args += [
        f"--lang={lang}",
        "--disable-notifications",
        "--disable-blink-features=AutomationControlled",
    ]
    return args


def start_profile(
    user_data_dir: str | None = None,
    profile_dir: str | None = None,
    window: Tuple[int, int, int, int] = CHROME_WINDOW,
) -> webdriver.Chrome:
    """Launch Chrome with a persisted profile to keep the note.com login.

    undetected-chromedriver is preferred when installed; stock Selenium Chrome
    is used otherwise.
    """
    args = note_chrome_arguments(user_data_dir or CHROME_USER_DATA_DIR, profile_dir or CHROME_PROFILE_DIR)
    if uc is not None:
        options = uc.ChromeOptions()
        launcher = uc.Chrome
    else:
        from selenium.webdriver.chrome.options import Options as ChromeOptions

        options = ChromeOptions()
        launcher = webdriver.Chrome
    for arg in args:
        options.add_argument(arg)
    driver = launcher(options=options)

    x, y, width, height = window
    driver.set_window_rect(x, y, width, height)
    log(f"STEP:START_CHROME profile ready lang={CHROME_LANG} driver={'uc' if uc is not None else 'selenium'}")
    return driver


def detect_bot_challenge(page) -> bool:
    try:
        text = page.page_text().lower()
    except (WebDriverException, PlaywrightError):
        return False
    return any(marker in text for marker in BOT_CHALLENGE_MARKERS)


def load_note_page(page, url: str, attempts: int = 3, sleep: Callable[[float], None] = time.sleep) -> None:
    last_exc: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            log(f"STEP:LOAD_NOTE attempt={attempt}/{attempts} url={url}")
            page.navigate(url)
            return
        except (WebDriverException, PlaywrightError) as exc:
            last_exc = exc
            msg = str(exc).lower()
            if "err_connection_refused" in msg or "err_connection_reset" in msg:
                log(f"WARN:CONNECTION_REFUSED attempt={attempt}/{attempts} retrying")
                if attempt < attempts:
                    sleep(0.8)
                    continue
            raise
    if last_exc:
        raise last_exc


def open_note_editor(
    page,
    url: str = NOTE_EDITOR_URL,
    timeout_ms: int = WAIT_LONG * 1000,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """Navigate to the editor if needed and wait for the composer surface."""
    current = page.current_url
    if current.startswith(url):
        log("STEP:OPEN_EDITOR already on editor, skipping load")
    else:
        load_note_page(page, url, sleep=sleep)

    ready = locate(page, SEL_NOTE["composer"], timeout_ms, clock=clock, sleep=sleep)
    if ready is None:
        if detect_bot_challenge(page):
            log("ERROR:BOT_CHALLENGE composer blocked by a human check")
            raise BotChallengeDetected("bot-detection challenge shown instead of the editor")
        raise ComposerNotReady(f"editor surface did not appear within {timeout_ms}ms")
    log(f"STEP:EDITOR_READY selector={ready.matched_selector!r}")
    ready.dispose()


def upload_thumbnail(page, typist: SyntheticTypist, path: str, timeout_ms: int = WAIT_SHORT * 1000) -> bool:
    image = Path(path).expanduser()
    if not image.is_file():
        log(f"WARN:THUMBNAIL_MISSING path={path}")
        return False
    button = typist.find(SEL_NOTE["thumbnail"], timeout_ms)
    if button is None:
        log("WARN:THUMBNAIL_CONTROL_NOT_FOUND")
        return False
    try:
        page.click_center(button.element)
        typist.pause(SETTLE_AFTER_CLICK_S)
    finally:
        button.dispose()

    # File inputs are usually hidden, so they are queried directly.
    attached = {}

    def _file_input_attached() -> bool:
        attached["element"] = page.query(SEL_NOTE["file_input"])
        return attached["element"] is not None

    if not typist.wait_for(_file_input_attached, timeout_ms):
        log("WARN:THUMBNAIL_FILE_INPUT_NOT_FOUND")
        return False
    file_input = attached["element"]
    try:
        page.upload_file(file_input, str(image.resolve()))
    finally:
        page.dispose(file_input)
    typist.pause(SETTLE_AFTER_CLICK_S)
    log(f"STEP:THUMBNAIL_UPLOADED file={image.name}")
    return True


def open_publish_settings(page, typist: SyntheticTypist, timeout_ms: int = WAIT_SHORT * 1000) -> bool:
    button = typist.find(SEL_NOTE["publish_settings"], timeout_ms)
    if button is None:
        log("WARN:PUBLISH_SETTINGS_NOT_FOUND")
        return False
    try:
        page.click_center(button.element)
        typist.pause(SETTLE_AFTER_CLICK_S)
    finally:
        button.dispose()
    return True


def compose_draft(
    page,
    draft: DraftArticle,
    *,
    formatted: bool = True,
    typist: Optional[SyntheticTypist] = None,
    open_settings_for_tags: bool = True,
) -> ComposeReport:
    """Type the draft's title, body, thumbnail and tags into the open editor."""
    typist = typist or SyntheticTypist(page)

    title_result = typist.fill_title(draft.title)
    if not title_result.found:
        raise TitleInputNotFound("title input not found")

    body_result = typist.fill_body(draft.body, formatted=formatted)
    if not body_result.found:
        raise BodyEditorNotFound("body editor not found")

    report = ComposeReport(title=title_result, body=body_result)
    if draft.thumbnail_path:
        report.thumbnail_uploaded = upload_thumbnail(page, typist, draft.thumbnail_path)
    if draft.tags:
        if open_settings_for_tags:
            open_publish_settings(page, typist)
        report.tags = typist.add_tags(draft.tags)
    log(
        f"STEP:COMPOSE_DONE title_fallback={title_result.used_fallback} "
        f"body_fallback={body_result.used_fallback} tags={len(report.tags)}"
    )
    return report


def note_compose_article(
    page,
    draft: DraftArticle,
    *,
    formatted: bool = True,
    url: str = NOTE_EDITOR_URL,
) -> ComposeReport:
    try:
        log("STEP:COMPOSE_START opening note editor")
        open_note_editor(page, url)
        log("STEP:COMPOSE_EDITOR_OPEN filling title and body")
        return compose_draft(page, draft, formatted=formatted)
    except Exception as e:
        log(f"WARN:COMPOSE_ATTEMPT_FAILED err={e.__class__.__name__}: {e}")
        raise
