#!/usr/bin/env python3
import os
import shlex
import sys
from pathlib import Path

import yaml           # pip install pyyaml

BASE_DIR = Path(__file__).parent

DEFAULT_BUILD_COMMAND = "pnpm build"


# -----------------------
# Config
# -----------------------

def get_config_path_from_args(argv=None) -> Path:
    """
    Determine which config file to use.

    - If a path is passed as first argument, use that.
    - Otherwise, assume config.yml next to the scripts.
    """
    args = sys.argv[1:] if argv is None else argv
    if args:
        return Path(args[0]).resolve()
    return (BASE_DIR / "config.yml").resolve()


def load_config(config_path: Path) -> dict:
    """Load YAML config, apply defaults and resolve paths against the config dir."""
    if not config_path.exists():
        print(f"Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    root = config_path.parent.resolve()

    # build_command can be a string or a list
    build_command = data.get("build_command", DEFAULT_BUILD_COMMAND)
    if isinstance(build_command, list):
        build_command = [str(x) for x in build_command]
    else:
        build_command = str(build_command)
        try:
            shlex.split(build_command)
        except ValueError as e:
            print(f"Invalid build_command in {config_path}: {e}", file=sys.stderr)
            sys.exit(1)

    static_dir = (root / data.get("static_dir", "static")).resolve()
    publish_subdir = str(data.get("publish_subdir", "articles")).strip("/")

    cfg = {
        "articles_dir": (root / data.get("articles_dir", "articles")).resolve(),
        "static_dir": static_dir,
        "publish_subdir": publish_subdir,
        "publish_root": static_dir / publish_subdir,
        "index_file": static_dir / data.get("index_file", "index.html"),
        "list_selector": data.get("list_selector", "#slides-list > ul"),
        "build_command": build_command,
        "base_config_filename": data.get("base_config_filename", "slidev.config.js"),
        "dist_dirname": data.get("dist_dirname", "dist"),
        "thumbnail_filename": data.get("thumbnail_filename", "thumbnail.png"),
        "show_summary": bool(data.get("show_summary", True)),
        # Server
        "host": data.get("host", "127.0.0.1"),
        "port": int(data.get("port", 3000)),
    }
    return cfg


def server_port(cfg: dict) -> int:
    """PORT from the environment wins over the configured port."""
    env_port = os.environ.get("PORT")
    if env_port:
        return int(env_port)
    return cfg["port"]
