# src/sitecompile/core/watcher.py
import os
import queue
import threading
from pathlib import Path
from typing import Dict, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from sitecompile.config import WATCH_QUIET_PERIOD
from sitecompile.models import EventKind, WatchEvent


def coalesce(previous: Optional[EventKind], current: EventKind) -> EventKind:
    """Merges a new raw event into the one already pending for the same path."""
    if previous is None:
        return current
    if previous is EventKind.REMOVED and current is EventKind.ADDED:
        # Editors that save via delete + recreate
        return EventKind.CHANGED
    if previous is EventKind.ADDED and current is EventKind.CHANGED:
        return EventKind.ADDED
    return current


class DebouncedEventHandler(FileSystemEventHandler):
    """
    Collects raw watchdog events per path and only publishes them once no new
    event has arrived for `quiet_period` seconds, so files are not rebuilt
    mid-write. Published events go to `events` ordered by each path's last
    raw event.
    """

    def __init__(self, events: "queue.Queue[WatchEvent]", quiet_period: float = WATCH_QUIET_PERIOD):
        super().__init__()
        self.events = events
        self.quiet_period = quiet_period
        self._pending: Dict[str, EventKind] = {}
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(event.src_path, EventKind.ADDED)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(event.src_path, EventKind.CHANGED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        # A directory moved out of the tree only reports the directory itself
        self._record(event.src_path, EventKind.REMOVED)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._record(event.src_path, EventKind.REMOVED)
        if not event.is_directory:
            # Files inside a moved directory arrive as their own moves
            self._record(event.dest_path, EventKind.ADDED)

    def _record(self, raw_path, kind: EventKind) -> None:
        path = os.fsdecode(raw_path)
        with self._lock:
            # Re-inserting keeps a rebuild after the removal of its parent directory
            self._pending[path] = coalesce(self._pending.pop(path, None), kind)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.quiet_period, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Publishes everything pending right away."""
        with self._lock:
            pending, self._pending = self._pending, {}
            self._timer = None
        for path, kind in pending.items():
            self.events.put(WatchEvent(kind=kind, path=Path(path)))

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()


class SourceWatcher:
    """Watches the source root recursively and feeds debounced WatchEvents into a queue."""

    def __init__(self, root: Path, events: "queue.Queue[WatchEvent]", quiet_period: float = WATCH_QUIET_PERIOD):
        self.root = Path(root)
        self.handler = DebouncedEventHandler(events, quiet_period)
        self._observer = None

    def start(self) -> None:
        self._observer = Observer()
        self._observer.schedule(self.handler, str(self.root), recursive=True)
        self._observer.start()

    def stop(self) -> None:
        self.handler.cancel()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
