#!/usr/bin/env python3
import html
from pathlib import Path
from typing import List
from urllib.parse import quote

from bs4 import BeautifulSoup  # pip install beautifulsoup4

from deck_articles import ParsedArticle, sort_articles


class TemplateError(Exception):
    """The index template does not contain exactly one list placeholder."""


# -----------------------
# Entries
# -----------------------

def article_url(article: ParsedArticle, cfg: dict) -> str:
    return f"/{cfg['publish_subdir']}/{quote(article.folder_name)}/"


def thumbnail_path(article: ParsedArticle, cfg: dict) -> Path:
    return cfg["publish_root"] / article.folder_name / cfg["thumbnail_filename"]


def render_entry(article: ParsedArticle, cfg: dict) -> str:
    """
    Render one <li> for the index list.

    The thumbnail is only linked if it exists in the published output,
    so decks built earlier in the same run pick theirs up.
    """
    date_str = article.date.strftime("%Y-%m-%d")
    title = html.escape(article.title)
    href = article_url(article, cfg)

    thumb_html = ""
    if thumbnail_path(article, cfg).exists():
        src = href + quote(cfg["thumbnail_filename"])
        thumb_html = f'<img class="slide-thumbnail" src="{src}" alt="{title}">'

    summary_html = ""
    if cfg.get("show_summary", True) and article.summary:
        summary_html = f'<p class="slide-summary">{html.escape(article.summary)}</p>'

    return (
        f'<li class="slide-item">'
        f'<a class="slide-link" href="{href}">{thumb_html}'
        f'<time class="slide-date" datetime="{date_str}">{date_str}</time>'
        f'<span class="slide-title">{title}</span></a>'
        f"{summary_html}</li>"
    )


def render_entries(articles: List[ParsedArticle], cfg: dict) -> List[str]:
    return [render_entry(a, cfg) for a in sort_articles(articles)]


# -----------------------
# Template splicing
# -----------------------

def splice_list(template_html: str, entries: List[str], selector: str) -> str:
    """Replace the children of the single element matching selector with entries."""
    soup = BeautifulSoup(template_html, "html.parser")

    matches = soup.select(selector)
    if len(matches) != 1:
        raise TemplateError(
            f"expected exactly one element matching {selector!r} in index template, found {len(matches)}"
        )

    target = matches[0]
    target.clear()

    fragment = BeautifulSoup("".join("\n" + e for e in entries) + "\n", "html.parser")
    for node in list(fragment.contents):
        target.append(node)

    return str(soup)


def write_index(articles: List[ParsedArticle], cfg: dict) -> Path:
    """Rewrite the index file in place with a freshly rendered article list."""
    index_path = cfg["index_file"]
    template_html = index_path.read_text(encoding="utf-8")

    page = splice_list(template_html, render_entries(articles, cfg), cfg["list_selector"])

    index_path.write_text(page, encoding="utf-8")
    print(f"Wrote {index_path}")
    return index_path
