# src/sitecompile/core/classifier.py
from pathlib import Path

from sitecompile.config import (
    IMAGE_EXTENSIONS,
    MARKUP_EXTENSIONS,
    SCRIPT_EXTENSIONS,
    STYLESHEET_EXTENSIONS,
)
from sitecompile.models import FileTask, Strategy

_TABLE = (
    (IMAGE_EXTENSIONS, Strategy.IMAGE_PASSTHROUGH),
    (SCRIPT_EXTENSIONS, Strategy.SCRIPT),
    (STYLESHEET_EXTENSIONS, Strategy.STYLESHEET),
    (MARKUP_EXTENSIONS, Strategy.MARKUP),
)


def classify(path: Path) -> Strategy:
    """Picks a strategy from the lowercased extension. Unknown types are copied."""
    ext = Path(path).suffix.lower()
    for extensions, strategy in _TABLE:
        if ext in extensions:
            return strategy
    return Strategy.GENERIC_PASSTHROUGH


def make_task(path: Path) -> FileTask:
    return FileTask(source=Path(path), strategy=classify(path))
