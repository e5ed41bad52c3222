# src/sitecompile/core/processor.py
import shutil
from pathlib import Path

from sitecompile.core.classifier import make_task
from sitecompile.core.transforms import bundle_script, minify_markup, minify_stylesheet
from sitecompile.errors import FileIOError, TransformError
from sitecompile.models import BuildOptions, Strategy, output_path
from sitecompile.utils.console import Console


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise TransformError(f"{path} is not valid UTF-8 text: {e}", path=path) from e
    except OSError as e:
        raise FileIOError(f"Cannot read {path}: {e}", path=path) from e


def _write_text(path: Path, content: str) -> None:
    try:
        # newline="" keeps the minifier's output byte-for-byte
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise FileIOError(f"Cannot write {path}: {e}", path=path) from e


def _copy(source: Path, out: Path) -> None:
    try:
        shutil.copyfile(source, out)
    except OSError as e:
        raise FileIOError(f"Cannot copy {source} to {out}: {e}", path=source) from e


def _ensure_parent(out: Path, source: Path) -> None:
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileIOError(f"Cannot create {out.parent}: {e}", path=source) from e


def process_file(source: Path, options: BuildOptions, console: Console) -> Path:
    """
    Builds the single output artifact for `source` and returns its path.
    Raises a ProcessError subclass on failure. Text assets are transformed
    before anything is created under the output root, so a rejected
    stylesheet leaves no trace there.
    """
    task = make_task(source)
    out = output_path(options.src, options.dist, task.source)
    rel_path = out.relative_to(options.dist).as_posix()
    console.debug(f"Processing {task.source} -> {out}")

    if task.strategy.is_passthrough:
        _ensure_parent(out, task.source)
        _copy(task.source, out)
        label = "Image copied" if task.strategy is Strategy.IMAGE_PASSTHROUGH else "File copied"

    elif task.strategy is Strategy.SCRIPT:
        _ensure_parent(out, task.source)
        bundle_script(task.source, out, options)
        label = "JS bundled" if options.bundle else "JS minified"

    elif task.strategy is Strategy.STYLESHEET:
        minified = minify_stylesheet(_read_text(task.source), path=task.source)
        _ensure_parent(out, task.source)
        _write_text(out, minified)
        label = "CSS minified"

    else:
        minified = minify_markup(_read_text(task.source), path=task.source)
        _ensure_parent(out, task.source)
        _write_text(out, minified)
        label = "HTML minified"

    console.debug(f"{label}: {rel_path}")
    return out
