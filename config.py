# note.com composer automation configuration

# Driver choice: "selenium" or "playwright"
NOTE_DRIVER = "selenium"

# Chrome profile paths (edit to match your machine)
CHROME_USER_DATA_DIR = r"D:\TOOL\Autopost social\profile note"
CHROME_PROFILE_DIR = "Default"  # e.g., "Default" or a custom profile folder name
CHROME_LANG = "ja-JP"  # note.com serves its editor UI in Japanese
CHROME_WINDOW = (40, 40, 1280, 900)  # x, y, width, height

NOTE_EDITOR_URL = "https://note.com/notes/new"

# Timing and behavior
WAIT_SHORT = 3
WAIT_MED = 12
WAIT_LONG = 30
LOCATOR_POLL_MS = 250
CLICK_JITTER_PX = 4
SETTLE_AFTER_CLICK_S = (0.15, 0.3)
SETTLE_AFTER_TAG_S = (0.3, 0.5)
TYPE_CHUNK_SIZE = 40
TYPE_CHUNK_DELAY_S = (0.04, 0.09)
ACTION_DELAY_S = (0.02, 0.05)

# Verification: body passes when the visible text is at least this share of the intended text
BODY_VERIFY_MIN_RATIO = 0.6

# Draft assembly
DEFAULT_TITLE = "Untitled"
TITLE_MAX_CHARS = 140
BODY_MAX_CHARS = 30000
MAX_TAGS = 10

# Quote selection
QUOTE_LIMIT = 6
QUOTE_PER_PAGE_LIMIT = 2
QUOTE_MIN_LENGTH = 40
QUOTE_MAX_LENGTH = 180

# Automatic headings
AUTO_HEADING_MIN_PARAGRAPHS = 3
AUTO_HEADING_EVERY = 2
AUTO_HEADING_SUB_EVERY = 1
AUTO_HEADING_TARGET_CHARS = 200
AUTO_HEADING_H2_LABEL = "Section {n}"
AUTO_HEADING_H3_LABEL = "Point {n}"

# Selectors (ordered candidates, first visible match wins)
SEL_NOTE = {
    "composer": (
        "div.ProseMirror[contenteditable='true']",
        "[data-testid='editor-body']",
        "main [contenteditable='true']",
    ),
    "title": (
        "textarea[placeholder='記事タイトル']",
        "textarea[data-testid='note-title']",
        "textarea[placeholder*='タイトル']",
        "h1[contenteditable='true']",
    ),
    "body": (
        "div.ProseMirror[contenteditable='true']",
        "[data-testid='editor-body'] [contenteditable='true']",
        "main [contenteditable='true'][role='textbox']",
    ),
    "thumbnail": (
        "button[aria-label='画像を追加']",
        "button[aria-label*='見出し画像']",
        "[data-testid='eyecatch-button']",
    ),
    "file_input": "input[type='file']",
    "publish_settings": (
        "button[data-testid='publish-settings']",
        "button.o-noteEditorHeader__publishButton",
        "header button[aria-label*='公開']",
    ),
    "tags_input": (
        "input[placeholder*='ハッシュタグ']",
        "input[data-testid='hashtag-input']",
        "input[placeholder*='hashtag' i]",
    ),
}

# Text that marks a bot-detection interstitial (surfaced, never solved)
BOT_CHALLENGE_MARKERS = (
    "captcha",
    "are you a robot",
    "verify you are human",
    "unusual traffic",
    "ロボットではありません",
)

# Editor keyboard shortcuts; "Mod" resolves to Meta on macOS and Control elsewhere
EDITOR_SHORTCUTS = {
    "paragraph": ("Mod", "Alt", "0"),
    "heading-2": ("Mod", "Alt", "2"),
    "heading-3": ("Mod", "Alt", "3"),
    "unordered-item": ("Mod", "Shift", "8"),
    "ordered-item": ("Mod", "Shift", "7"),
    "quote": ("Mod", "Shift", "9"),
    "code": ("Mod", "Alt", "c"),
}
INLINE_SHORTCUTS = {
    "bold": ("Mod", "b"),
    "strike": ("Mod", "Shift", "x"),
}
SELECT_ALL_COMBO = ("Mod", "a")
DELETE_KEY = "Delete"
ENTER_KEY = "Enter"
