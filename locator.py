from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence, Tuple

from config import LOCATOR_POLL_MS
from console_utils import log


class ElementSource(Protocol):
    """Anything that can resolve a selector and report an element's box."""

    def query(self, selector: str) -> Any: ...

    def bounding_box(self, element: Any) -> Optional[Tuple[float, float, float, float]]: ...

    def dispose(self, element: Any) -> None: ...


@dataclass
class LocatorResult:
    matched_selector: str
    element: Any
    page: ElementSource

    def dispose(self) -> None:
        if self.element is None:
            return
        try:
            self.page.dispose(self.element)
        finally:
            self.element = None


def as_selector_list(value) -> list[str]:
    if isinstance(value, (list, tuple, set)):
        return [v for v in value if v]
    if value:
        return [value]
    return []


def _is_rendered(box) -> bool:
    if not box:
        return False
    _, _, width, height = box
    return width > 0 and height > 0


def _attempt(page: ElementSource, selectors: Sequence[str]) -> Optional[LocatorResult]:
    for selector in selectors:
        element = page.query(selector)
        if element is None:
            continue
        if _is_rendered(page.bounding_box(element)):
            return LocatorResult(selector, element, page)
        page.dispose(element)
    return None


def locate(
    page: ElementSource,
    selectors: Iterable[str] | str,
    timeout_ms: int,
    *,
    poll_ms: int = LOCATOR_POLL_MS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[LocatorResult]:
    """Poll for the first visible element among ``selectors``.

    Candidates are tried in order on every poll; one qualifies once it exists and
    has a non-zero rendered width and height. Returns ``None`` after
    ``timeout_ms`` elapses. Driver faults propagate; a timeout never raises.
    The caller owns the returned handle and must ``dispose()`` it.
    """
    candidates = as_selector_list(selectors)
    if not candidates:
        return None
    poll_s = max(1, poll_ms) / 1000.0
    deadline = clock() + max(0, timeout_ms) / 1000.0
    attempts = 0
    while True:
        attempts += 1
        result = _attempt(page, candidates)
        if result is not None:
            if attempts > 1:
                log(f"INFO:LOCATE_MATCH selector={result.matched_selector!r} attempts={attempts}")
            return result
        remaining = deadline - clock()
        if remaining <= 0:
            log(f"WARN:LOCATE_TIMEOUT timeout_ms={timeout_ms} selectors={candidates}")
            return None
        sleep(min(poll_s, remaining))


def wait_until(
    predicate: Callable[[], bool],
    timeout_s: float,
    *,
    poll_s: float = LOCATOR_POLL_MS / 1000.0,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll ``predicate`` until it returns true or ``timeout_s`` elapses."""
    deadline = clock() + max(0.0, timeout_s)
    while True:
        if predicate():
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        sleep(min(poll_s, remaining))
