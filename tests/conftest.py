# tests/conftest.py
import re
import subprocess
import sys
from pathlib import Path

import pytest

# Make src/ importable without an editable install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sitecompile.models import BuildOptions
from sitecompile.utils.console import Console

_IMPORT_RE = re.compile(r"""(?:from\s+|require\()\s*["']([^"'./][^"']*)["']""")


class FakeEsbuild:
    """
    Stands in for `subprocess.run` when the transforms module calls esbuild.
    Bare imports fail to resolve when bundling unless declared external;
    otherwise the entry is "minified" by squeezing whitespace.
    """

    def __init__(self):
        self.calls = []

    def __call__(self, cmd, capture_output=False, text=False, **kwargs):
        self.calls.append(list(cmd))
        entry = Path(cmd[1])
        outfile = Path(next(a for a in cmd if a.startswith("--outfile=")).split("=", 1)[1])
        source = entry.read_text(encoding="utf-8")

        if "--bundle" in cmd:
            externals = {a.split(":", 1)[1] for a in cmd if a.startswith("--external:")}
            for module in _IMPORT_RE.findall(source):
                if module not in externals:
                    stderr = f'✘ [ERROR] Could not resolve "{module}"\n\n    {entry}:1:14:\n'
                    return subprocess.CompletedProcess(cmd, 1, "", stderr)

        if "SYNTAX ERROR" in source:
            return subprocess.CompletedProcess(cmd, 1, "", "✘ [ERROR] Expected \";\" but found \"ERROR\"\n")

        outfile.write_text(" ".join(source.split()), encoding="utf-8")
        return subprocess.CompletedProcess(cmd, 0, "", "")


@pytest.fixture
def fake_esbuild(monkeypatch):
    fake = FakeEsbuild()
    monkeypatch.setattr("sitecompile.core.transforms.subprocess.run", fake)
    return fake


@pytest.fixture
def console():
    return Console(verbose=True)


@pytest.fixture
def site(tmp_path):
    """
    A small site covering every strategy:
    markup, stylesheet, scripts, an image and an unknown file type, nested.
    """
    src = tmp_path / "src"
    (src / "css").mkdir(parents=True)
    (src / "js" / "lib").mkdir(parents=True)
    (src / "img").mkdir()
    (src / "docs").mkdir()

    (src / "index.html").write_text(
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        "    <!-- page header -->\n"
        "    <title>Home</title>\n"
        '    <link rel="stylesheet" href="css/site.css">\n'
        "  </head>\n"
        "  <body>\n"
        "    <p>Hello     world</p>\n"
        "  </body>\n"
        "</html>\n",
        encoding="utf-8",
    )
    (src / "css" / "site.css").write_text(
        "/* base styles */\n"
        "body {\n"
        "    color: #ff0000;\n"
        "    margin: 0 auto;\n"
        "}\n"
        "\n"
        "@media (max-width: 600px) {\n"
        "    body { margin: 0; }\n"
        "}\n",
        encoding="utf-8",
    )
    (src / "js" / "app.js").write_text(
        "function greet(name) {\n"
        "    return 'hello ' + name;\n"
        "}\n"
        "console.log(greet('world'));\n",
        encoding="utf-8",
    )
    (src / "js" / "lib" / "util.mjs").write_text("export const answer = 42;\n", encoding="utf-8")
    (src / "img" / "logo.PNG").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x01")
    (src / "docs" / "notes.txt").write_text("keep   this   spacing\n", encoding="utf-8")
    (src / "robots").write_bytes(b"User-agent: *\r\n")
    return src


@pytest.fixture
def options(site, tmp_path):
    return BuildOptions(src=site, dist=tmp_path / "dist")


def snapshot(root: Path) -> dict:
    """Relative POSIX path -> bytes for every file under root."""
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}
