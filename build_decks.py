#!/usr/bin/env python3
import sys
from collections import Counter

from deck_articles import discover_articles, list_article_folders
from deck_config import get_config_path_from_args, load_config
from deck_index import TemplateError, write_index
from deck_publish import run_command, build_all


def run(cfg: dict, *, published=None, runner=run_command):
    """
    One full pass: discover, build what is missing, then re-render the index.

    Returns the per-article build results. A failed article never stops the
    run; a missing articles dir or index file does.
    """
    articles_dir = cfg["articles_dir"]

    # Every folder is built, even ones the index cannot date
    folders = list_article_folders(articles_dir)
    articles = discover_articles(articles_dir, with_summary=cfg["show_summary"])

    results = build_all(folders, cfg, published=published, runner=runner)

    write_index(articles, cfg)

    counts = Counter(r.status for r in results)
    print(
        f"Build process completed. "
        f"{counts['built']} built, {counts['skipped']} skipped, {counts['failed']} failed."
    )
    for r in results:
        if not r.ok:
            print(f"  {r.folder_name}: failed at {r.stage}: {r.error}", file=sys.stderr)

    return results


def main(argv=None) -> int:
    cfg = load_config(get_config_path_from_args(argv))

    try:
        run(cfg)
    except TemplateError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
