"""Page adapters exposing the small surface the locator and typist rely on.

Each adapter reports element presence and bounding boxes, disposes handles,
clicks, presses key combinations, types text and reads or assigns values. The
selector strings are passed through untouched.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any, Optional, Sequence, Tuple

from selenium import webdriver
from selenium.common.exceptions import StaleElementReferenceException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys

from config import NOTE_DRIVER

if TYPE_CHECKING:
    from playwright.sync_api import ElementHandle, Page

Box = Tuple[float, float, float, float]

MODIFIER_KEYS = ("Control", "Meta", "Alt", "Shift")

SELENIUM_KEYS = {
    "Control": Keys.CONTROL,
    "Meta": Keys.COMMAND,
    "Alt": Keys.ALT,
    "Shift": Keys.SHIFT,
    "Enter": Keys.ENTER,
    "Delete": Keys.DELETE,
    "Backspace": Keys.BACKSPACE,
    "Tab": Keys.TAB,
    "Escape": Keys.ESCAPE,
}

_READ_TEXT_BODY = """
if (!el) return '';
if (el.tagName === 'INPUT' || el.tagName === 'TEXTAREA') return el.value || '';
return el.innerText || el.textContent || '';
"""

_ASSIGN_VALUE_BODY = """
if (!el || !el.isConnected) return false;
if (el.tagName === 'INPUT' || el.tagName === 'TEXTAREA') {
    const proto = el.tagName === 'INPUT' ? HTMLInputElement.prototype : HTMLTextAreaElement.prototype;
    const desc = Object.getOwnPropertyDescriptor(proto, 'value');
    if (desc && desc.set) { desc.set.call(el, val); } else { el.value = val; }
} else if (el.isContentEditable) {
    el.innerHTML = '';
    for (const line of String(val).split('\\n')) {
        const p = document.createElement('p');
        if (line) { p.textContent = line; } else { p.appendChild(document.createElement('br')); }
        el.appendChild(p);
    }
} else {
    el.textContent = val;
}
el.dispatchEvent(new Event('input', {bubbles: true}));
el.dispatchEvent(new Event('change', {bubbles: true}));
return true;
"""

_PAGE_TEXT_JS = "return document.body && document.body.innerText ? document.body.innerText : '';"


def _split_combo(keys: Sequence[str]) -> Tuple[list, list]:
    modifiers = [k for k in keys if k in MODIFIER_KEYS]
    others = [k for k in keys if k not in MODIFIER_KEYS]
    return modifiers, others


class SeleniumPage:
    def __init__(self, driver: webdriver.Chrome):
        self.driver = driver

    @property
    def current_url(self) -> str:
        return self.driver.current_url or ""

    def navigate(self, url: str, timeout_s: int = 15) -> None:
        self.driver.set_page_load_timeout(timeout_s)
        self.driver.get(url)

    def query(self, selector: str):
        found = self.driver.find_elements(By.CSS_SELECTOR, selector)
        return found[0] if found else None

    def bounding_box(self, element) -> Optional[Box]:
        try:
            rect = element.rect
        except StaleElementReferenceException:
            return None
        return (rect["x"], rect["y"], rect["width"], rect["height"])

    def dispose(self, element) -> None:
        # WebElement references live on the driver session; nothing to release.
        return None

    def click_center(self, element, jitter_px: int = 0) -> None:
        dx = random.randint(-jitter_px, jitter_px) if jitter_px else 0
        dy = random.randint(-jitter_px, jitter_px) if jitter_px else 0
        try:
            self.driver.execute_script("arguments[0].scrollIntoView({block:'center'});", element)
            webdriver.ActionChains(self.driver).move_to_element_with_offset(element, dx, dy).click().perform()
        except StaleElementReferenceException:
            raise
        except WebDriverException:
            try:
                element.click()
            except WebDriverException:
                self.driver.execute_script("arguments[0].click();", element)

    def press_combo(self, keys: Sequence[str]) -> None:
        modifiers, others = _split_combo(keys)
        actions = webdriver.ActionChains(self.driver)
        for key in modifiers:
            actions.key_down(SELENIUM_KEYS[key])
        for key in others:
            actions.send_keys(SELENIUM_KEYS.get(key, key))
        for key in reversed(modifiers):
            actions.key_up(SELENIUM_KEYS[key])
        actions.perform()

    def type_text(self, text: str) -> None:
        if text:
            webdriver.ActionChains(self.driver).send_keys(text).perform()

    def read_text(self, element) -> str:
        try:
            value = self.driver.execute_script("const el = arguments[0];" + _READ_TEXT_BODY, element)
        except StaleElementReferenceException:
            return ""
        return value if isinstance(value, str) else ""

    def assign_value(self, element, value: str) -> bool:
        try:
            return bool(
                self.driver.execute_script(
                    "const el = arguments[0], val = arguments[1];" + _ASSIGN_VALUE_BODY,
                    element,
                    value,
                )
            )
        except StaleElementReferenceException:
            return False

    def upload_file(self, element, path: str) -> None:
        element.send_keys(str(path))

    def page_text(self) -> str:
        value = self.driver.execute_script(_PAGE_TEXT_JS)
        return value if isinstance(value, str) else ""


class PlaywrightPage:
    def __init__(self, page: "Page"):
        self.page = page

    @property
    def current_url(self) -> str:
        return self.page.url or ""

    def navigate(self, url: str, timeout_s: int = 15) -> None:
        self.page.goto(url, timeout=timeout_s * 1000, wait_until="domcontentloaded")

    def query(self, selector: str) -> Optional["ElementHandle"]:
        return self.page.query_selector(selector)

    def bounding_box(self, element: "ElementHandle") -> Optional[Box]:
        box = element.bounding_box()
        if not box:
            return None
        return (box["x"], box["y"], box["width"], box["height"])

    def dispose(self, element: "ElementHandle") -> None:
        element.dispose()

    def click_center(self, element: "ElementHandle", jitter_px: int = 0) -> None:
        element.scroll_into_view_if_needed()
        box = self.bounding_box(element)
        if box is None:
            element.click()
            return
        x, y, width, height = box
        dx = random.randint(-jitter_px, jitter_px) if jitter_px else 0
        dy = random.randint(-jitter_px, jitter_px) if jitter_px else 0
        self.page.mouse.click(x + width / 2 + dx, y + height / 2 + dy)

    def press_combo(self, keys: Sequence[str]) -> None:
        self.page.keyboard.press("+".join(keys))

    def type_text(self, text: str) -> None:
        if text:
            self.page.keyboard.type(text)

    def read_text(self, element: "ElementHandle") -> str:
        value = element.evaluate("(el) => {" + _READ_TEXT_BODY + "}")
        return value if isinstance(value, str) else ""

    def assign_value(self, element: "ElementHandle", value: str) -> bool:
        return bool(element.evaluate("(el, val) => {" + _ASSIGN_VALUE_BODY + "}", value))

    def upload_file(self, element: "ElementHandle", path: str) -> None:
        element.set_input_files(str(path))

    def page_text(self) -> str:
        value = self.page.evaluate("() => {" + _PAGE_TEXT_JS + "}")
        return value if isinstance(value, str) else ""


def make_page(handle: Any, kind: str = NOTE_DRIVER):
    """Wrap a Selenium driver or a Playwright page in the matching adapter."""
    if kind == "playwright":
        return PlaywrightPage(handle)
    if kind == "selenium":
        return SeleniumPage(handle)
    raise ValueError(f"unknown driver kind: {kind!r}")
