# src/sitecompile/models.py
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Tuple

from sitecompile.config import DEFAULT_DIST, DEFAULT_SRC, ESBUILD_COMMAND


class Strategy(Enum):
    """How a source file is turned into its output artifact."""
    IMAGE_PASSTHROUGH = "image"
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    MARKUP = "markup"
    GENERIC_PASSTHROUGH = "passthrough"

    @property
    def is_passthrough(self) -> bool:
        return self in (Strategy.IMAGE_PASSTHROUGH, Strategy.GENERIC_PASSTHROUGH)


class EventKind(Enum):
    ADDED = "add"
    CHANGED = "change"
    REMOVED = "unlink"


@dataclass(frozen=True)
class BuildOptions:
    """Immutable run configuration, resolved once from the command line."""
    src: Path = Path(DEFAULT_SRC)
    dist: Path = Path(DEFAULT_DIST)
    bundle: bool = False
    external: Tuple[str, ...] = field(default_factory=tuple)
    clean: bool = False
    watch: bool = False
    verbose: bool = False
    exclude: Tuple[str, ...] = field(default_factory=tuple)
    esbuild: str = ESBUILD_COMMAND


@dataclass(frozen=True)
class FileTask:
    source: Path
    strategy: Strategy


@dataclass(frozen=True)
class WatchEvent:
    kind: EventKind
    path: Path


def output_path(src_root: Path, dist_root: Path, source: Path) -> Path:
    """Mirrors `source` from the source tree into the output tree."""
    source = Path(source)
    try:
        rel_path = source.relative_to(src_root)
    except ValueError:
        # Watcher paths may be absolute while the configured root is relative
        rel_path = source.resolve().relative_to(Path(src_root).resolve())
    return Path(dist_root) / rel_path
