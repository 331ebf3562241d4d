#!/usr/bin/env python3
import re
import sys
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import List, Optional

import markdown       # pip install markdown
import yaml           # pip install pyyaml
from bs4 import BeautifulSoup  # pip install beautifulsoup4

NAME_SEPARATOR = "_"
SLIDES_FILENAME = "slides.md"

# Matches folder-name date tokens like "20240115"
DATE_TOKEN_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")

# Slidev headmatter: a YAML block fenced by "---" at the top of slides.md
HEADMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)


@dataclass(frozen=True)
class ParsedArticle:
    folder_name: str
    date: date
    raw_date: str
    display_name: str
    summary: str = ""

    @property
    def title(self) -> str:
        """display_name with the first letter of every word upper-cased."""
        return " ".join(w[:1].upper() + w[1:] for w in self.display_name.split(" "))


# -----------------------
# Folder names
# -----------------------

def parse_folder_name(name: str) -> Optional[ParsedArticle]:
    """
    Parse "YYYYMMDD_free_text" into a ParsedArticle.

    Returns None when there is no separator, the date token is not an
    8-digit calendar date, or the name part is empty.
    """
    if NAME_SEPARATOR not in name:
        return None

    raw_date, rest = name.split(NAME_SEPARATOR, 1)
    m = DATE_TOKEN_RE.match(raw_date)
    if not m:
        return None

    year, month, day = (int(g) for g in m.groups())
    try:
        parsed_date = date(year, month, day)
    except ValueError:
        return None

    display_name = rest.replace(NAME_SEPARATOR, " ").strip()
    if not display_name:
        return None

    return ParsedArticle(
        folder_name=name,
        date=parsed_date,
        raw_date=raw_date,
        display_name=display_name,
    )


def list_article_folders(articles_dir: Path) -> List[Path]:
    """Immediate subdirectories of articles_dir, sorted by name, hidden ones skipped."""
    folders = []
    for item in sorted(articles_dir.iterdir(), key=lambda p: p.name):
        if item.name.startswith("."):
            continue
        if not item.is_dir():
            continue
        folders.append(item)
    return folders


# -----------------------
# Slide headmatter
# -----------------------

def read_headmatter(slides_path: Path) -> dict:
    """Return the YAML headmatter of a Slidev slides.md, or {} if there is none."""
    if not slides_path.exists():
        return {}

    try:
        text = slides_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"WARNING: Could not read {slides_path}: {e}", file=sys.stderr)
        return {}

    m = HEADMATTER_RE.match(text)
    if not m:
        return {}

    try:
        data = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        print(f"WARNING: Could not parse headmatter in {slides_path}: {e}", file=sys.stderr)
        return {}

    return data if isinstance(data, dict) else {}


def extract_summary(article_dir: Path) -> str:
    """
    Plain-text summary from the "info" field of the article's headmatter.

    The field is Markdown in Slidev projects, so render it and keep the text.
    """
    info = read_headmatter(article_dir / SLIDES_FILENAME).get("info")
    if not info:
        return ""

    html_body = markdown.markdown(str(info))
    return BeautifulSoup(html_body, "html.parser").get_text(" ", strip=True)


def discover_articles(articles_dir: Path, *, with_summary: bool = True) -> List[ParsedArticle]:
    """
    Parse every article folder under articles_dir.

    Folders whose names cannot be parsed are left out. They are still
    built by the publish step, they just never reach the index.
    """
    articles = []

    for folder in list_article_folders(articles_dir):
        parsed = parse_folder_name(folder.name)
        if parsed is None:
            print(f"WARNING: Skipping {folder.name} in index (expected YYYYMMDD_name)", file=sys.stderr)
            continue

        if with_summary:
            parsed = replace(parsed, summary=extract_summary(folder))
        articles.append(parsed)

    return articles


# -----------------------
# Ordering
# -----------------------

def sort_key(article: ParsedArticle):
    # Newest first, then name A-Z ignoring case; folder name breaks any remaining tie
    return (-article.date.toordinal(), article.display_name.casefold(), article.folder_name)


def sort_articles(articles) -> List[ParsedArticle]:
    return sorted(articles, key=sort_key)
