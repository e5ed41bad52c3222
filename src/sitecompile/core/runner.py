# src/sitecompile/core/runner.py
import os
import queue
import shutil
import stat
import threading
from typing import Callable, Optional

from sitecompile.core.ignore import load_exclude_spec
from sitecompile.core.reconciler import Reconciler
from sitecompile.core.tree import build_tree
from sitecompile.core.watcher import SourceWatcher
from sitecompile.errors import ConfigError, ProcessError
from sitecompile.models import BuildOptions
from sitecompile.utils.console import Console


class Runner:
    """Sequences clean, the initial full build and, optionally, watch mode."""

    def __init__(self, options: BuildOptions, console: Console, watcher_factory: Callable = SourceWatcher):
        self.options = options
        self.console = console
        self.watcher_factory = watcher_factory

    def check_source(self) -> None:
        src = self.options.src
        try:
            st = os.stat(src)
        except OSError as e:
            raise ConfigError(
                f'Source directory "{src}" does not exist.',
                hint="Check the path, and quote it if it contains spaces.",
                path=src,
            ) from e
        if not stat.S_ISDIR(st.st_mode):
            raise ConfigError(f'Source "{src}" is not a directory.', path=src)
        load_exclude_spec(self.options.exclude)

    def clean(self) -> None:
        """Removes the output root. Best-effort: failures are only reported."""
        dist = self.options.dist
        try:
            shutil.rmtree(dist)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.console.error(f"Cannot clean {dist}: {e}")
            return
        self.console.info(f"Cleaned output directory: {dist}")

    def build(self) -> bool:
        self.console.info(f"Compiling {self.options.src} to {self.options.dist}")
        try:
            count = build_tree(self.options, self.console)
        except ProcessError as e:
            self.console.report(e)
            self.console.error("Build failed.")
            return False
        self.console.success(f"Build finished: {count} file(s) written.")
        return True

    def watch(self, stop: Optional[threading.Event] = None) -> None:
        """Blocks, applying source changes, until interrupted or `stop` is set."""
        stop = stop or threading.Event()
        events: "queue.Queue" = queue.Queue()
        reconciler = Reconciler(self.options, self.console)
        watcher = self.watcher_factory(self.options.src, events)
        watcher.start()
        self.console.success("Watch ready. Press Ctrl+C to stop.")
        try:
            reconciler.run(events, stop)
        except KeyboardInterrupt:
            self.console.info("Stopping watcher.")
        finally:
            watcher.stop()

    def run(self) -> int:
        """Returns the process exit code."""
        try:
            self.check_source()
        except ConfigError as e:
            self.console.report(e)
            return 1

        if self.options.watch:
            self.console.info(f"Watch mode enabled. Watching {self.options.src}")
        if self.options.clean:
            self.clean()
        if not self.build():
            return 1
        if self.options.watch:
            self.watch()
        return 0
