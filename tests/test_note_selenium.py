import pytest

import note_selenium
from config import NOTE_EDITOR_URL, SEL_NOTE
from conftest import FakeElement
from draft import DraftArticle
from note_selenium import (
    BodyEditorNotFound,
    BotChallengeDetected,
    ComposerNotReady,
    TitleInputNotFound,
    compose_draft,
    detect_bot_challenge,
    note_chrome_arguments,
    open_note_editor,
    upload_thumbnail,
)
from typist import SyntheticTypist


def _editor_page(make_page, **extra):
    elements = {
        SEL_NOTE["title"][0]: FakeElement(),
        SEL_NOTE["body"][0]: FakeElement(),
    }
    elements.update(extra)
    return make_page(elements=elements)


def _typist(page, clock):
    return SyntheticTypist(page, platform="linux", sleep=clock.sleep, clock=clock)


def _draft(**kwargs):
    values = dict(title="Hello", body="## Intro\ntext", raw_body="text")
    values.update(kwargs)
    return DraftArticle(**values)


def test_open_editor_navigates_and_waits(make_page, clock):
    page = make_page(elements={SEL_NOTE["composer"][0]: FakeElement()})
    open_note_editor(page, timeout_ms=1000, sleep=clock.sleep, clock=clock)
    assert page.navigations == [NOTE_EDITOR_URL]


def test_open_editor_skips_navigation_when_already_there(make_page, clock):
    page = make_page(elements={SEL_NOTE["composer"][1]: FakeElement()})
    page.current_url = NOTE_EDITOR_URL
    open_note_editor(page, timeout_ms=1000, sleep=clock.sleep, clock=clock)
    assert page.navigations == []


def test_open_editor_surfaces_bot_challenge(make_page, clock):
    page = make_page(body_text="Please complete the CAPTCHA to continue")
    with pytest.raises(BotChallengeDetected):
        open_note_editor(page, timeout_ms=500, sleep=clock.sleep, clock=clock)


def test_open_editor_not_ready(make_page, clock):
    page = make_page(body_text="Loading...")
    with pytest.raises(ComposerNotReady):
        open_note_editor(page, timeout_ms=500, sleep=clock.sleep, clock=clock)
    assert clock.now >= 0.5


def test_detect_bot_challenge(make_page):
    assert detect_bot_challenge(make_page(body_text="Verify you are human"))
    assert not detect_bot_challenge(make_page(body_text="記事を書く"))


def test_compose_fills_title_body_and_tags(make_page, clock):
    tags_input = FakeElement()
    settings = FakeElement()
    page = _editor_page(
        make_page,
        **{SEL_NOTE["tags_input"][0]: tags_input, SEL_NOTE["publish_settings"][0]: settings},
    )

    report = compose_draft(page, _draft(tags=["a", "b"]), typist=_typist(page, clock))

    assert report.title.verified and report.body.verified
    assert report.tags == ["a", "b"]
    assert settings in page.clicks
    assert page.elements[SEL_NOTE["title"][0]].text == "Hello"
    assert page.elements[SEL_NOTE["body"][0]].text == "Intro\ntext\n"


def test_missing_title_is_fatal(make_page, clock):
    page = make_page(elements={SEL_NOTE["body"][0]: FakeElement()})
    with pytest.raises(TitleInputNotFound):
        compose_draft(page, _draft(), typist=_typist(page, clock))


def test_missing_body_is_fatal(make_page, clock):
    page = make_page(elements={SEL_NOTE["title"][0]: FakeElement()})
    with pytest.raises(BodyEditorNotFound):
        compose_draft(page, _draft(), typist=_typist(page, clock))


def test_thumbnail_upload(make_page, clock, tmp_path):
    image = tmp_path / "cover.png"
    image.write_bytes(b"\x89PNG")
    page = _editor_page(
        make_page,
        **{
            SEL_NOTE["thumbnail"][0]: FakeElement(),
            SEL_NOTE["file_input"]: FakeElement(box=(0, 0, 0, 0)),
        },
    )

    report = compose_draft(page, _draft(thumbnail_path=str(image)), typist=_typist(page, clock))

    assert report.thumbnail_uploaded
    assert page.uploads == [str(image.resolve())]


def test_missing_thumbnail_file_is_skipped(make_page, clock, tmp_path):
    page = _editor_page(make_page, **{SEL_NOTE["thumbnail"][0]: FakeElement()})
    draft = _draft(thumbnail_path=str(tmp_path / "nope.png"))
    report = compose_draft(page, draft, typist=_typist(page, clock))
    assert not report.thumbnail_uploaded
    assert page.uploads == []


def test_thumbnail_waits_for_late_file_input(make_page, clock, tmp_path):
    image = tmp_path / "cover.png"
    image.write_bytes(b"\x89PNG")
    file_input = FakeElement(box=(0, 0, 0, 0))
    page = make_page(
        elements={SEL_NOTE["thumbnail"][0]: FakeElement(), SEL_NOTE["file_input"]: file_input},
        reveal_at={SEL_NOTE["file_input"]: 1.5},
    )

    assert upload_thumbnail(page, _typist(page, clock), str(image))
    assert clock.now >= 1.5
    assert page.uploads == [str(image.resolve())]
    assert file_input.disposed == 1


def test_thumbnail_gives_up_without_file_input(make_page, clock, tmp_path):
    image = tmp_path / "cover.png"
    image.write_bytes(b"\x89PNG")
    page = make_page(elements={SEL_NOTE["thumbnail"][0]: FakeElement()})

    assert not upload_thumbnail(page, _typist(page, clock), str(image), timeout_ms=800)
    assert clock.now >= 0.8
    assert page.uploads == []


def test_chrome_arguments_carry_profile_and_language():
    args = note_chrome_arguments("/tmp/profile", "Work", lang="ja-JP")
    assert args[:2] == ["--user-data-dir=/tmp/profile", "--profile-directory=Work"]
    assert "--lang=ja-JP" in args
    assert not any(a.startswith("--profile-directory") for a in note_chrome_arguments("/tmp/p", ""))


def test_start_profile_uses_stock_chrome_without_uc(monkeypatch):
    launched = {}

    class FakeChrome:
        def __init__(self, options):
            launched["args"] = list(options.arguments)

        def set_window_rect(self, x, y, width, height):
            launched["rect"] = (x, y, width, height)

    monkeypatch.setattr(note_selenium, "uc", None)
    monkeypatch.setattr(note_selenium.webdriver, "Chrome", FakeChrome)

    driver = note_selenium.start_profile("/tmp/profile", "Default", window=(1, 2, 800, 600))

    assert isinstance(driver, FakeChrome)
    assert "--lang=ja-JP" in launched["args"]
    assert "--profile-directory=Default" in launched["args"]
    assert launched["rect"] == (1, 2, 800, 600)
