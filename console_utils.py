# console_utils.py
import inspect
import os
import sys


def log(message: str) -> None:
    caller = inspect.currentframe().f_back  # type: ignore[union-attr]
    line = caller.f_lineno if caller else -1
    pid = os.getpid()
    formatted = f"[pid {pid:>6}] [line {line:04d}] {message}"
    encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
    try:
        sys.stdout.buffer.write((formatted + "\n").encode(encoding, errors="replace"))
        sys.stdout.flush()
    except Exception:
        print(formatted)


def preview(value: str, limit: int = 30) -> str:
    """Single-line, shortened form of ``value`` for log output."""
    text = " ".join((value or "").split())
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 3)] + "..."
