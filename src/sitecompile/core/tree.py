# src/sitecompile/core/tree.py
import os
from pathlib import Path

from sitecompile.core.ignore import is_excluded, load_exclude_spec
from sitecompile.core.processor import process_file
from sitecompile.errors import FileIOError
from sitecompile.models import BuildOptions
from sitecompile.utils.console import Console


class TreeBuilder:
    """Mirrors the whole source tree into the output tree, one file at a time."""

    def __init__(self, options: BuildOptions, console: Console):
        self.options = options
        self.console = console
        self.exclude_spec = load_exclude_spec(options.exclude)

    def build(self) -> int:
        """
        Processes every regular file under the source root and returns how many
        were written. The first failure propagates and stops the traversal.
        """
        return self._walk(Path(self.options.src))

    def _walk(self, directory: Path) -> int:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise FileIOError(f"Cannot list {directory}: {e}", path=directory) from e

        count = 0
        for entry in entries:
            entry_path = Path(entry.path)
            rel_path = entry_path.relative_to(self.options.src)

            if entry.is_dir():
                if is_excluded(rel_path, self.exclude_spec, is_directory=True):
                    self.console.debug(f"Skipping directory {rel_path.as_posix()}")
                    continue
                count += self._walk(entry_path)
            elif entry.is_file():
                if is_excluded(rel_path, self.exclude_spec):
                    self.console.debug(f"Skipping {rel_path.as_posix()}")
                    continue
                process_file(entry_path, self.options, self.console)
                count += 1
        return count


def build_tree(options: BuildOptions, console: Console) -> int:
    return TreeBuilder(options, console).build()
