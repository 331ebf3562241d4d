#!/usr/bin/env python3
import shlex
import shutil
import subprocess
import sys
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Tuple

BUILT = "built"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class BuildResult:
    """
    Outcome of one article in the build pass.

    stage is set only for failures:
      "config" - writing the base-path config file
      "build"  - the external build command
      "dist"   - the command succeeded but left no dist directory
      "copy"   - copying dist into the publish root
    """
    folder_name: str
    status: str
    stage: Optional[str] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status != FAILED


class BuildCommandError(subprocess.SubprocessError):
    def __init__(self, returncode: int):
        super().__init__(f"build command exited with status {returncode}")
        self.returncode = returncode


# -----------------------
# Skip gate
# -----------------------

def is_published(publish_root: Path, folder_name: str) -> bool:
    """An article counts as published as soon as its output directory exists."""
    return (publish_root / folder_name).is_dir()


def plan_builds(folders: List[Path], published: Callable[[str], bool]) -> Tuple[List[Path], List[Path]]:
    """
    Split folders into (pending, already published).

    The gate is checked for every folder before any build starts, so a
    build that writes into the publish root cannot change the plan.
    """
    pending, done = [], []
    for folder in folders:
        if published(folder.name):
            done.append(folder)
        else:
            pending.append(folder)
    return pending, done


# -----------------------
# Build steps
# -----------------------

def base_path(cfg: dict, folder_name: str) -> str:
    return f"/{cfg['publish_subdir']}/{folder_name}/"


def write_base_config(article_dir: Path, cfg: dict) -> Path:
    """Write the generated Slidev config that pins the deck's public base path."""
    config_path = article_dir / cfg["base_config_filename"]
    content = f"export default {{\n  base: '{base_path(cfg, article_dir.name)}'\n}}"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def build_command(cfg: dict, folder_name: str) -> List[str]:
    cmd = cfg["build_command"]
    args = list(cmd) if isinstance(cmd, list) else shlex.split(cmd)
    return args + ["--base", base_path(cfg, folder_name)]


def run_command(cmd: List[str], cwd: Path) -> int:
    """Run the build command in the article dir; output goes straight to our streams."""
    return subprocess.run(cmd, cwd=str(cwd), check=False).returncode


def copy_dist(dist_dir: Path, output_dir: Path):
    shutil.copytree(dist_dir, output_dir)


def build_article(article_dir: Path, cfg: dict, runner: Callable = run_command) -> BuildResult:
    """Write config, build and copy one article. Errors are caught and reported per article."""
    name = article_dir.name
    output_dir = cfg["publish_root"] / name
    dist_dir = article_dir / cfg["dist_dirname"]

    print(f"Building {name}...")
    stage = "config"
    try:
        write_base_config(article_dir, cfg)

        stage = "build"
        returncode = runner(build_command(cfg, name), article_dir)
        if returncode != 0:
            raise BuildCommandError(returncode)

        stage = "dist"
        if not dist_dir.is_dir():
            print(f"ERROR: {cfg['dist_dirname']} folder not found for {name}", file=sys.stderr)
            return BuildResult(name, FAILED, stage, f"{dist_dir} not found")

        stage = "copy"
        copy_dist(dist_dir, output_dir)
    except (OSError, subprocess.SubprocessError) as e:
        print(f"ERROR: Failed to build {name} ({stage}): {e}", file=sys.stderr)
        return BuildResult(name, FAILED, stage, str(e))

    print(f"Copied {name} to {output_dir}")
    return BuildResult(name, BUILT)


def build_all(
    folders: List[Path],
    cfg: dict,
    *,
    published: Optional[Callable[[str], bool]] = None,
    runner: Callable = run_command,
) -> List[BuildResult]:
    """
    Build every article folder that is not yet published, one at a time.

    Returns one BuildResult per folder, in the order the folders were given.
    """
    publish_root = cfg["publish_root"]
    publish_root.mkdir(parents=True, exist_ok=True)

    if published is None:
        published = partial(is_published, publish_root)

    pending, _ = plan_builds(folders, published)
    pending_names = {f.name for f in pending}

    results = []
    for folder in folders:
        if folder.name not in pending_names:
            print(f"{folder.name} already exists in {cfg['static_dir'].name}/{cfg['publish_subdir']}")
            results.append(BuildResult(folder.name, SKIPPED))
            continue
        results.append(build_article(folder, cfg, runner=runner))

    return results
