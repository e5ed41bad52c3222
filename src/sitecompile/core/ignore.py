# src/sitecompile/core/ignore.py
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from sitecompile.errors import ConfigError


def load_exclude_spec(patterns: Optional[Iterable[str]] = None) -> pathspec.PathSpec:
    """
    Compiles --exclude patterns (gitignore syntax) into a PathSpec.
    An empty pattern list matches nothing.
    """
    lines = [p for p in (patterns or []) if p and p.strip()]
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        raise ConfigError(f"Invalid exclude pattern: {e}") from e


def is_excluded(rel_path: Path, spec: pathspec.PathSpec, is_directory: bool = False) -> bool:
    """Checks a path relative to the source root. Directories get a trailing slash so `dir/` rules apply."""
    path_str = Path(rel_path).as_posix()
    if is_directory and not path_str.endswith("/"):
        path_str += "/"
    return spec.match_file(path_str)
