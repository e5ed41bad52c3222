# src/sitecompile/core/transforms.py
"""
Thin wrappers around the external minifiers and the bundler.

Each function either returns the transformed result or raises a
ProcessError subclass; none of them decide where output goes.
"""
import re
import shlex
import subprocess
from pathlib import Path
from typing import Iterable, Iterator, List

import minify_html
import rcssmin
import tinycss2

from sitecompile.config import ESBUILD_ENV_VAR, ESBUILD_PLATFORM, ESBUILD_TARGET
from sitecompile.errors import TransformError, UnresolvedModuleError
from sitecompile.models import BuildOptions

UNRESOLVED_MARKER = "Could not resolve"

# At-rules whose block holds rules rather than declarations
_RULE_LIST_AT_RULES = {"media", "supports", "document", "layer", "container", "scope", "starting-style"}

_DOCTYPE_RE = re.compile(r"^\s*<!doctype\b[^>]*>", re.IGNORECASE)
SHORT_DOCTYPE = "<!doctype html>"

# `type` values a browser assumes anyway on script, style and link tags
_DEFAULT_TYPE_RE = re.compile(
    r"""(<(?:script|style|link)\b[^>]*?)\s+type\s*=\s*(["']?)"""
    r"""(?:text/javascript|application/javascript|text/css)\2(?=[\s/>])""",
    re.IGNORECASE,
)


# --- Scripts ---

def esbuild_command(entry: Path, outfile: Path, options: BuildOptions) -> List[str]:
    cmd = shlex.split(options.esbuild) + [
        str(entry),
        f"--outfile={outfile}",
        "--minify",
        f"--platform={ESBUILD_PLATFORM}",
        f"--target={ESBUILD_TARGET}",
        "--log-level=error",
        "--color=false",
    ]
    if options.bundle:
        cmd.append("--bundle")
        # esbuild rejects --external without --bundle
        cmd.extend(f"--external:{name}" for name in options.external)
    return cmd


def bundle_script(entry: Path, outfile: Path, options: BuildOptions) -> None:
    """Runs esbuild on one entry point; esbuild writes `outfile` itself."""
    cmd = esbuild_command(entry, outfile, options)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise TransformError(
            f"Bundler executable not found: {cmd[0]}",
            hint=f"Install esbuild (npm install -g esbuild) or point {ESBUILD_ENV_VAR} at it.",
            path=entry,
        ) from e
    except OSError as e:
        raise TransformError(
            f"Cannot run bundler {cmd[0]}: {e}",
            hint=f"Check that {cmd[0]} is an executable esbuild binary.",
            path=entry,
        ) from e

    if result.returncode == 0:
        return

    diagnostics = (result.stderr or result.stdout or "").strip()
    if UNRESOLVED_MARKER in diagnostics:
        raise UnresolvedModuleError(
            f"Module resolution failed in {entry}:\n{diagnostics}",
            hint=(
                "With --bundle, either install the missing dependencies or declare them "
                "external with --external module_name "
                "(e.g. --bundle --external jquery --external lodash)."
            ),
            path=entry,
        )
    raise TransformError(
        f"esbuild failed on {entry} (exit code {result.returncode}):\n{diagnostics}",
        path=entry,
    )


# --- Stylesheets ---

def _css_errors(nodes: Iterable) -> Iterator[str]:
    for node in nodes:
        if node.type == "error":
            yield f"{node.message} (line {node.source_line}, column {node.source_column})"
        elif node.type == "qualified-rule":
            yield from _css_errors(
                tinycss2.parse_blocks_contents(node.content, skip_comments=True, skip_whitespace=True)
            )
        elif node.type == "at-rule" and node.content is not None:
            keyword = node.lower_at_keyword
            if keyword in _RULE_LIST_AT_RULES or keyword.endswith("keyframes"):
                children = tinycss2.parse_rule_list(node.content, skip_comments=True, skip_whitespace=True)
            else:
                children = tinycss2.parse_blocks_contents(node.content, skip_comments=True, skip_whitespace=True)
            yield from _css_errors(children)


def stylesheet_errors(text: str) -> List[str]:
    """Returns the syntax errors found in a stylesheet (empty when valid)."""
    rules = tinycss2.parse_stylesheet(text, skip_comments=True, skip_whitespace=True)
    return list(_css_errors(rules))


def minify_stylesheet(text: str, path: Path = None) -> str:
    errors = stylesheet_errors(text)
    if errors:
        raise TransformError(", ".join(errors), path=path)
    return rcssmin.cssmin(text)


# --- Markup ---

def minify_markup(text: str, path: Path = None) -> str:
    """
    Collapses whitespace, strips comments, drops default/redundant attributes
    (including `type` on script/style), shortens the doctype and minifies
    embedded CSS and JS.
    """
    text = _DEFAULT_TYPE_RE.sub(r"\1", text)
    try:
        minified = minify_html.minify(text, minify_css=True, minify_js=True, keep_comments=False)
    except Exception as e:
        raise TransformError(f"HTML minification failed: {e}", path=path) from e
    # minify-html keeps legacy doctypes as written
    return _DOCTYPE_RE.sub(SHORT_DOCTYPE, minified, count=1)
