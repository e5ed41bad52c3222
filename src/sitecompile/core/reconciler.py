# src/sitecompile/core/reconciler.py
import queue
import shutil
import threading
from pathlib import Path

from sitecompile.config import WATCH_POLL_INTERVAL
from sitecompile.core.ignore import is_excluded, load_exclude_spec
from sitecompile.core.processor import process_file
from sitecompile.errors import ProcessError
from sitecompile.models import BuildOptions, EventKind, WatchEvent, output_path
from sitecompile.utils.console import Console


class Reconciler:
    """
    Applies watch events to the output tree without a full rebuild.

    Per-file failures are reported and swallowed: a bad file must not end
    the watch session.
    """

    def __init__(self, options: BuildOptions, console: Console):
        self.options = options
        self.console = console
        self.exclude_spec = load_exclude_spec(options.exclude)

    def handle(self, event: WatchEvent) -> bool:
        """Returns True when the event was applied successfully."""
        try:
            rel_path = output_path(self.options.src, self.options.dist, event.path).relative_to(self.options.dist)
        except ValueError:
            self.console.warn(f"Ignoring event outside the source tree: {event.path}")
            return False
        if is_excluded(rel_path, self.exclude_spec):
            self.console.debug(f"Ignoring excluded path {rel_path.as_posix()}")
            return True

        if event.kind is EventKind.REMOVED:
            return self._remove(event.path)

        action = "added" if event.kind is EventKind.ADDED else "changed"
        self.console.info(f"File {action}: {event.path}")
        try:
            process_file(event.path, self.options, self.console)
        except ProcessError as e:
            self.console.report(e)
            return False
        except OSError as e:
            self.console.error(f"Cannot process {event.path}: {e}")
            return False
        return True

    def _remove(self, source: Path) -> bool:
        """Deletes the mirrored file, or the whole mirrored directory when a source directory went away."""
        out = output_path(self.options.src, self.options.dist, source)
        try:
            if out.is_dir() and not out.is_symlink():
                shutil.rmtree(out)
            else:
                out.unlink(missing_ok=True)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.console.error(f"Cannot remove {out}: {e}")
            return False
        self.console.info(f"File removed: {out}")
        return True

    def run(self, events: "queue.Queue[WatchEvent]", stop: threading.Event) -> None:
        """Consumes events one at a time until `stop` is set."""
        while not stop.is_set():
            try:
                event = events.get(timeout=WATCH_POLL_INTERVAL)
            except queue.Empty:
                continue
            try:
                self.handle(event)
            finally:
                events.task_done()
