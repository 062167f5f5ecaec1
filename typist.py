from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from config import (
    ACTION_DELAY_S,
    BODY_VERIFY_MIN_RATIO,
    CLICK_JITTER_PX,
    DELETE_KEY,
    ENTER_KEY,
    SEL_NOTE,
    SELECT_ALL_COMBO,
    SETTLE_AFTER_CLICK_S,
    SETTLE_AFTER_TAG_S,
    TYPE_CHUNK_DELAY_S,
    TYPE_CHUNK_SIZE,
    WAIT_MED,
    WAIT_SHORT,
)
from console_utils import log, preview
from draft import normalize_tags
from editor_commands import (
    EditorAction,
    PressEnter,
    TypeText,
    resolve_combo,
    shortcut_for,
    translate_markdown,
    visible_text,
)
from locator import LocatorResult, as_selector_list, locate, wait_until


class FallbackUnavailable(RuntimeError):
    """The programmatic fallback could not reach the target field."""


class FillPhase(str, Enum):
    LOCATE = "locate"
    TYPE = "type"
    VERIFY = "verify"
    FALLBACK = "fallback"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FillResult:
    name: str
    selector: Optional[str] = None
    phases: List[FillPhase] = field(default_factory=list)
    verified: bool = False
    used_fallback: bool = False

    @property
    def found(self) -> bool:
        return self.selector is not None

    @property
    def ok(self) -> bool:
        return bool(self.phases) and self.phases[-1] == FillPhase.DONE


def normalize_whitespace(text: str) -> str:
    return " ".join((text or "").split())


def title_matches(intended: str, actual: str) -> bool:
    return normalize_whitespace(intended) == normalize_whitespace(actual)


def body_matches(intended: str, actual: str, min_ratio: float = BODY_VERIFY_MIN_RATIO) -> bool:
    expected = len(normalize_whitespace(intended))
    if expected == 0:
        return True
    return len(normalize_whitespace(actual)) >= expected * min_ratio


class SyntheticTypist:
    """Drives typed input into the page and checks what actually landed.

    Every fill goes through locate, type, verify and, on a mismatch, a direct
    value assignment with input/change events.
    """

    def __init__(
        self,
        page,
        *,
        platform: str | None = None,
        chunk_size: int = TYPE_CHUNK_SIZE,
        chunk_delay_s: Sequence[float] = TYPE_CHUNK_DELAY_S,
        min_ratio: float = BODY_VERIFY_MIN_RATIO,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.page = page
        self.platform = platform
        self.chunk_size = max(1, chunk_size)
        self.chunk_delay_s = chunk_delay_s
        self.min_ratio = min_ratio
        self._sleep = sleep
        self._clock = clock

    def pause(self, bounds: Sequence[float]) -> None:
        low, high = bounds
        self._sleep(random.uniform(low, high))

    def find(self, selectors, timeout_ms: int) -> Optional[LocatorResult]:
        return locate(self.page, selectors, timeout_ms, clock=self._clock, sleep=self._sleep)

    def wait_for(self, predicate: Callable[[], bool], timeout_ms: int) -> bool:
        return wait_until(predicate, timeout_ms / 1000.0, clock=self._clock, sleep=self._sleep)

    def focus_and_clear(self, element) -> None:
        self.page.click_center(element, CLICK_JITTER_PX)
        self.pause(SETTLE_AFTER_CLICK_S)
        self.page.press_combo(resolve_combo(SELECT_ALL_COMBO, self.platform))
        self.page.press_combo((DELETE_KEY,))

    def type_chunked(self, text: str) -> None:
        for start in range(0, len(text), self.chunk_size):
            if start:
                self.pause(self.chunk_delay_s)
            self.page.type_text(text[start : start + self.chunk_size])

    def run_actions(self, actions: Iterable[EditorAction]) -> None:
        for action in actions:
            if isinstance(action, TypeText):
                self.type_chunked(action.text)
            elif isinstance(action, PressEnter):
                self.page.press_combo((ENTER_KEY,))
            else:
                self.page.press_combo(shortcut_for(action, self.platform))
                self.pause(ACTION_DELAY_S)

    def _apply_fallback(self, found: LocatorResult, selectors, value: str, timeout_ms: int) -> None:
        if self.page.assign_value(found.element, value):
            return
        log(f"WARN:FALLBACK_HANDLE_LOST selector={found.matched_selector!r} relocating")
        again = self.find(selectors, timeout_ms)
        if again is None:
            raise FallbackUnavailable(f"field vanished before fallback: {found.matched_selector}")
        try:
            if not self.page.assign_value(again.element, value):
                raise FallbackUnavailable(f"fallback assignment rejected: {again.matched_selector}")
        finally:
            again.dispose()

    def _fill(
        self,
        name: str,
        selectors,
        value: str,
        *,
        formatted: bool,
        timeout_ms: int,
    ) -> FillResult:
        result = FillResult(name=name, phases=[FillPhase.LOCATE])
        found = self.find(selectors, timeout_ms)
        if found is None:
            result.phases.append(FillPhase.FAILED)
            log(f"WARN:{name.upper()}_NOT_FOUND selectors={as_selector_list(selectors)}")
            return result
        result.selector = found.matched_selector
        try:
            self.focus_and_clear(found.element)
            result.phases.append(FillPhase.TYPE)
            if formatted:
                actions = translate_markdown(value)
                intended = visible_text(actions).rstrip("\n")
                log(f"STEP:{name.upper()}_TYPE_FORMATTED actions={len(actions)}")
                self.run_actions(actions)
            else:
                intended = value
                log(f"STEP:{name.upper()}_TYPE_PLAIN chars={len(value)}")
                self.type_chunked(value)

            result.phases.append(FillPhase.VERIFY)
            actual = self.page.read_text(found.element)
            if name == "title":
                matched = title_matches(intended, actual)
            else:
                matched = body_matches(intended, actual, self.min_ratio)
            if matched:
                result.verified = True
                result.phases.append(FillPhase.DONE)
                log(f"STEP:{name.upper()}_VERIFIED chars={len(actual)}")
                return result

            log(
                f"WARN:{name.upper()}_MISMATCH expected={preview(intended)!r} "
                f"actual={preview(actual)!r} using fallback"
            )
            result.phases.append(FillPhase.FALLBACK)
            result.used_fallback = True
            try:
                self._apply_fallback(found, selectors, intended, timeout_ms)
            except FallbackUnavailable:
                result.phases.append(FillPhase.FAILED)
                raise
            result.phases.append(FillPhase.DONE)
            log(f"STEP:{name.upper()}_FALLBACK_APPLIED chars={len(intended)}")
            return result
        finally:
            found.dispose()

    def fill_title(
        self,
        title: str,
        selectors=SEL_NOTE["title"],
        timeout_ms: int = WAIT_MED * 1000,
    ) -> FillResult:
        return self._fill("title", selectors, title, formatted=False, timeout_ms=timeout_ms)

    def fill_body(
        self,
        body: str,
        *,
        formatted: bool = True,
        selectors=SEL_NOTE["body"],
        timeout_ms: int = WAIT_MED * 1000,
    ) -> FillResult:
        return self._fill("body", selectors, body, formatted=formatted, timeout_ms=timeout_ms)

    def add_tags(
        self,
        tags: Iterable[str],
        selectors=SEL_NOTE["tags_input"],
        timeout_ms: int = WAIT_SHORT * 1000,
    ) -> List[str]:
        """Type each unique tag followed by Enter; returns the tags typed."""
        unique = normalize_tags(tags)
        if not unique:
            return []
        found = self.find(selectors, timeout_ms)
        if found is None:
            log("WARN:TAG_INPUT_NOT_FOUND")
            return []
        typed: List[str] = []
        try:
            self.page.click_center(found.element, CLICK_JITTER_PX)
            self.pause(SETTLE_AFTER_CLICK_S)
            for tag in unique:
                self.type_chunked(tag)
                self.page.press_combo((ENTER_KEY,))
                self.pause(SETTLE_AFTER_TAG_S)
                typed.append(tag)
                log(f"INFO:TAG_ADDED '{tag}'")
        finally:
            found.dispose()
        return typed
