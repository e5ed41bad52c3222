# src/sitecompile/utils/console.py
import sys


class Console:
    """Prefixed console output. Debug lines are only shown in verbose mode."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def info(self, msg: str) -> None:
        print(f"[INFO] {msg}", flush=True)

    def success(self, msg: str) -> None:
        print(f"[SUCCESS] {msg}", flush=True)

    def warn(self, msg: str) -> None:
        print(f"[WARN] {msg}", file=sys.stderr, flush=True)

    def error(self, msg: str) -> None:
        print(f"[ERROR] {msg}", file=sys.stderr, flush=True)

    def debug(self, msg: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {msg}", flush=True)

    def report(self, error: Exception) -> None:
        """Prints an error and, when it carries one, its remediation hint."""
        self.error(getattr(error, "message", str(error)))
        hint = getattr(error, "hint", None)
        if hint:
            self.info(hint)
