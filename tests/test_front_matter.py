from front_matter import attribute_list, attribute_text, split_front_matter


def test_split_front_matter_inline_list():
    attrs, body = split_front_matter("---\ntitle: Hello\ntags: [a, b]\n---\nBody text")
    assert attrs == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "Body text"


def test_dash_items_extend_last_key():
    text = "---\ntitle: 'Quoted'\ntags:\n  - one\n  - \"two\"\n---\n\nBody"
    attrs, body = split_front_matter(text)
    assert attrs["title"] == "Quoted"
    assert attrs["tags"] == ["one", "two"]
    assert body == "Body"


def test_dash_item_keeps_existing_scalar():
    attrs, _ = split_front_matter("---\ntags: first\n- second\n---\nx")
    assert attrs["tags"] == ["first", "second"]


def test_comments_and_malformed_lines_are_skipped():
    text = "---\n- orphan\n# comment\nnot a pair\ntitle: Ok\n: empty key\n---\nBody"
    attrs, body = split_front_matter(text)
    assert attrs == {"title": "Ok"}
    assert body == "Body"


def test_no_opening_fence_returns_text_unchanged():
    text = "title: nope\n---\nBody"
    assert split_front_matter(text) == ({}, text)


def test_unclosed_fence_returns_text_unchanged():
    text = "---\ntitle: x\nBody without closing fence"
    assert split_front_matter(text) == ({}, text)


def test_crlf_and_bom_are_tolerated():
    attrs, body = split_front_matter("\ufeff---\r\ntitle: Win\r\n---\r\nLine")
    assert attrs == {"title": "Win"}
    assert body == "Line"


def test_attribute_helpers():
    attrs = {"categories": "a, b ,", "cover": "img.png", "tag": []}
    assert attribute_list(attrs, "tags", "tag", "categories") == ["a", "b"]
    assert attribute_text(attrs, "thumbnail", "cover") == "img.png"
    assert attribute_text(attrs, "missing") == ""
