import pytest
from selenium.webdriver.common.keys import Keys

import page_drivers
from page_drivers import PlaywrightPage, SeleniumPage, _split_combo, make_page


class RecordingChains:
    """Collects the ActionChains calls a combo produces."""

    log = []

    def __init__(self, driver):
        self.steps = []

    def key_down(self, key):
        self.steps.append(("down", key))
        return self

    def key_up(self, key):
        self.steps.append(("up", key))
        return self

    def send_keys(self, *keys):
        self.steps.extend(("send", key) for key in keys)
        return self

    def perform(self):
        RecordingChains.log.append(list(self.steps))


class FakeKeyboard:
    def __init__(self):
        self.pressed = []

    def press(self, combo):
        self.pressed.append(combo)


class FakePlaywrightPage:
    def __init__(self):
        self.keyboard = FakeKeyboard()


@pytest.fixture
def chains(monkeypatch):
    RecordingChains.log = []
    monkeypatch.setattr(page_drivers.webdriver, "ActionChains", RecordingChains)
    return RecordingChains.log


def test_split_combo_keeps_order():
    assert _split_combo(("Control", "Shift", "x")) == (["Control", "Shift"], ["x"])
    assert _split_combo(("Enter",)) == ([], ["Enter"])


def test_selenium_combo_releases_modifiers_in_reverse(chains):
    SeleniumPage(driver=object()).press_combo(("Control", "Alt", "2"))
    assert chains == [
        [
            ("down", Keys.CONTROL),
            ("down", Keys.ALT),
            ("send", "2"),
            ("up", Keys.ALT),
            ("up", Keys.CONTROL),
        ]
    ]


def test_selenium_named_keys_are_translated(chains):
    page = SeleniumPage(driver=object())
    page.press_combo(("Delete",))
    page.press_combo(("Meta", "a"))
    assert chains[0] == [("send", Keys.DELETE)]
    assert chains[1] == [("down", Keys.COMMAND), ("send", "a"), ("up", Keys.COMMAND)]


def test_selenium_type_text_skips_empty(chains):
    page = SeleniumPage(driver=object())
    page.type_text("")
    page.type_text("abc")
    assert chains == [[("send", "abc")]]


def test_playwright_combo_is_joined():
    raw = FakePlaywrightPage()
    PlaywrightPage(raw).press_combo(("Control", "Shift", "x"))
    assert raw.keyboard.pressed == ["Control+Shift+x"]


def test_make_page_picks_adapter():
    assert isinstance(make_page(object(), "selenium"), SeleniumPage)
    assert isinstance(make_page(FakePlaywrightPage(), "playwright"), PlaywrightPage)
    with pytest.raises(ValueError):
        make_page(object(), "firefox")
