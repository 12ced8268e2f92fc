import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
import requests

import main
from fake_wordpress import API, SITE, SOURCE, FakeWordPress, article_page

CONFIG = f"""\
WP_SITE_URL="{SITE}"
WP_API_BASE="{API}"
WP_USER="editor"
WP_APP_PASSWORD="secret"
AUTHOR_ID=3
CATEGORY_ID=12
"""


def test_defaults():
    args = main.parse_args([])
    assert args.url is None
    assert args.list == "posts.list"
    assert args.config == "wp-login.config"
    assert args.verbose is False


@pytest.mark.parametrize("argv", [["--bogus"], ["not-a-url"], ["-l"], ["-c"]])
def test_invalid_arguments_exit_non_zero(argv):
    with pytest.raises(SystemExit) as excinfo:
        main.parse_args(argv)
    assert excinfo.value.code != 0


def test_missing_config_exits_1(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main.main([f"{SOURCE}/a/"]) == 1
    with open(tmp_path / "error-log.txt", encoding="utf-8") as f:
        assert "Config file not found" in f.read()


def test_no_url_and_no_list_exits_1(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "wp-login.config").write_text(CONFIG, encoding="utf-8")
    assert main.main([]) == 1


def test_batch_run_prints_total(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "wp-login.config").write_text(CONFIG, encoding="utf-8")
    urls = [f"{SOURCE}/2024/03/first/", f"{SOURCE}/2024/03/second/"]
    (tmp_path / "posts.list").write_text("\n".join(urls) + "\n", encoding="utf-8")
    fw = FakeWordPress()
    for url in urls:
        fw.pages[url] = article_page()
    monkeypatch.setattr(requests, "Session", lambda: fw)

    assert main.main([]) == 0

    assert "Total posts created: 2" in capsys.readouterr().out
    assert len(fw.created_posts()) == 2
