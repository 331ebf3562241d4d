import pytest
from bs4 import BeautifulSoup

from build_decks import main, run
from conftest import make_article


def snapshot(root):
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def articles(site):
    make_article(site, "20240101_Alpha", slides="---\ninfo: First *talk*\n---\n")
    make_article(site, "20240201_Thumb_Talk")
    make_article(site, "20240301_Will_Fail")
    make_article(site, "scratch")


def test_full_run_builds_and_indexes(site, cfg, articles, capsys):
    results = run(cfg)

    statuses = {r.folder_name: r.status for r in results}
    assert statuses == {
        "20240101_Alpha": "built",
        "20240201_Thumb_Talk": "built",
        "20240301_Will_Fail": "failed",
        "scratch": "built",
    }

    soup = BeautifulSoup(cfg["index_file"].read_text(encoding="utf-8"), "html.parser")
    items = soup.select("#slides-list > ul > li")
    assert [li.select_one(".slide-title").get_text() for li in items] == ["Will Fail", "Thumb Talk", "Alpha"]
    # thumbnail written by this run's build is picked up
    assert items[1].select_one("img.slide-thumbnail") is not None
    assert items[2].select_one(".slide-summary").get_text() == "First talk"
    assert (cfg["publish_root"] / "scratch" / "marker.txt").exists()

    out = capsys.readouterr().out
    assert "Build process completed. 3 built, 0 skipped, 1 failed." in out


def test_second_run_changes_nothing(site, cfg, articles):
    run(cfg)
    first = snapshot(site / "static")

    results = run(cfg)

    assert snapshot(site / "static") == first
    assert {r.folder_name: r.status for r in results if r.status == "skipped"}.keys() == {
        "20240101_Alpha",
        "20240201_Thumb_Talk",
        "scratch",
    }


def test_main_returns_zero_despite_failed_articles(site, articles):
    assert main([str(site / "config.yml")]) == 0


def test_main_reports_bad_template(site, articles, capsys):
    (site / "static" / "index.html").write_text("<html><body></body></html>", encoding="utf-8")

    assert main([str(site / "config.yml")]) == 1
    assert "expected exactly one element" in capsys.readouterr().err


def test_main_exits_without_config(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.yml")])

    assert exc.value.code == 1
    assert "Config file not found" in capsys.readouterr().err


def test_missing_articles_dir_aborts(site, cfg):
    (site / "articles").rmdir()

    with pytest.raises(FileNotFoundError):
        run(cfg)


def test_unreadable_slides_do_not_stop_the_run(site, cfg):
    make_article(site, "20240101_Alpha")
    beta = make_article(site, "20240201_Beta")
    (beta / "slides.md").write_bytes(b"---\ninfo: caf\xe9\n---\n")

    results = run(cfg)

    assert [r.status for r in results] == ["built", "built"]
    assert (cfg["publish_root"] / "20240101_Alpha" / "marker.txt").exists()
    titles = [
        li.select_one(".slide-title").get_text()
        for li in BeautifulSoup(cfg["index_file"].read_text(encoding="utf-8"), "html.parser").select("li")
    ]
    assert titles == ["Beta", "Alpha"]
