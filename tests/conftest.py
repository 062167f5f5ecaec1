import pytest


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeElement:
    def __init__(self, box=(10, 10, 200, 40), text="", accepts_input=True, detached=False):
        self.box = box
        self.text = text
        self.accepts_input = accepts_input
        self.detached = detached
        self.disposed = 0


class FakePage:
    """In-memory stand-in for a page adapter."""

    def __init__(self, clock=None, elements=None, reveal_at=None, body_text=""):
        self.clock = clock or FakeClock()
        self.elements = dict(elements or {})
        self.reveal_at = dict(reveal_at or {})
        self.body_text = body_text
        self.current_url = "about:blank"
        self.navigations = []
        self.events = []
        self.clicks = []
        self.uploads = []
        self.assigned = []
        self.focused = None

    def navigate(self, url, timeout_s=15):
        self.navigations.append(url)
        self.current_url = url

    def query(self, selector):
        if self.clock.now < self.reveal_at.get(selector, 0):
            return None
        return self.elements.get(selector)

    def bounding_box(self, element):
        return element.box

    def dispose(self, element):
        element.disposed += 1

    def click_center(self, element, jitter_px=0):
        self.clicks.append(element)
        self.focused = element

    def press_combo(self, keys):
        keys = tuple(keys)
        self.events.append(("combo", keys))
        target = self.focused
        if target is None or not target.accepts_input:
            return
        if keys == ("Delete",):
            target.text = ""
        elif keys == ("Enter",):
            target.text += "\n"

    def type_text(self, text):
        self.events.append(("type", text))
        if self.focused is not None and self.focused.accepts_input:
            self.focused.text += text

    def read_text(self, element):
        return element.text

    def assign_value(self, element, value):
        if element.detached:
            return False
        element.text = value
        self.assigned.append(value)
        return True

    def upload_file(self, element, path):
        self.uploads.append(path)

    def page_text(self):
        return self.body_text

    def typed(self):
        return [value for kind, value in self.events if kind == "type"]

    def combos(self):
        return [value for kind, value in self.events if kind == "combo"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_page(clock):
    def _make(**kwargs):
        return FakePage(clock=clock, **kwargs)

    return _make
