import sys
import textwrap
from pathlib import Path

import pytest
import yaml

from deck_config import load_config

TEMPLATE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Slides</title>
</head>
<body>
<h1>Slides &ndash; all talks</h1>
<div id="slides-list">
  <ul>
    <li>stale entry</li>
  </ul>
</div>
</body>
</html>
"""

# Behaves like "pnpm build --base <path>": writes dist/ in the cwd.
# Folder names steer it: "fail" exits non-zero, "nodist" writes nothing,
# "thumb" also writes a thumbnail.
STUB_BUILD = textwrap.dedent(
    """
    import pathlib
    import sys

    base = sys.argv[sys.argv.index("--base") + 1]
    name = pathlib.Path.cwd().name.lower()
    if "fail" in name:
        print("stub build failed", file=sys.stderr)
        sys.exit(2)
    if "nodist" in name:
        sys.exit(0)
    dist = pathlib.Path("dist")
    dist.mkdir(exist_ok=True)
    (dist / "index.html").write_text(base, encoding="utf-8")
    (dist / "marker.txt").write_text("built", encoding="utf-8")
    if "thumb" in name:
        (dist / "thumbnail.png").write_bytes(b"png")
    """
)


@pytest.fixture
def stub_build(tmp_path) -> Path:
    path = tmp_path / "stub_build.py"
    path.write_text(STUB_BUILD, encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path, stub_build):
    """A site root with config.yml, an empty articles dir and an index template."""
    (tmp_path / "articles").mkdir()
    (tmp_path / "static").mkdir()
    (tmp_path / "static" / "index.html").write_text(TEMPLATE_HTML, encoding="utf-8")

    config = {"build_command": [sys.executable, str(stub_build)]}
    (tmp_path / "config.yml").write_text(yaml.safe_dump(config), encoding="utf-8")
    return tmp_path


@pytest.fixture
def cfg(site) -> dict:
    return load_config(site / "config.yml")


def make_article(site_root: Path, name: str, slides: str = "") -> Path:
    folder = site_root / "articles" / name
    folder.mkdir(parents=True)
    if slides:
        (folder / "slides.md").write_text(slides, encoding="utf-8")
    return folder
