import csv
import json
import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from syndicator.config import SyndicatorConfig
from syndicator.context import RunContext
from syndicator.syndication_tool import WordPressSyndicationTool, read_url_list
from syndicator.utils.reports import RunLog

from fake_wordpress import API, SITE, SOURCE, FakeWordPress, article_page

URL = f"{SOURCE}/2024/03/hello-fediverse/"
TAG_WIDGET = '<span class="tags-links"><a href="/tag/a/">Alpha</a><a href="/tag/b/">Beta</a></span>'


@pytest.fixture
def cfg():
    return SyndicatorConfig(
        WP_SITE_URL=SITE,
        WP_API_BASE=API,
        WP_USER="editor",
        WP_APP_PASSWORD="secret",
        AUTHOR_ID=3,
        CATEGORY_ID=12,
    )


@pytest.fixture
def fw():
    return FakeWordPress()


def _tool(cfg, fw, tmp_path):
    ctx = RunContext(log=RunLog(str(tmp_path)))
    return WordPressSyndicationTool(cfg, ctx=ctx, session=fw)


def test_full_pipeline_creates_draft(cfg, fw, tmp_path):
    image = "https://cdn.example/uploads/lead.jpg"
    fw.images[image] = (b"jpeg", "image/jpeg")
    fw.pages[URL] = article_page(og_image=image, body="<p>Hi</p>" + TAG_WIDGET)
    tool = _tool(cfg, fw, tmp_path)

    result = tool.syndicate_post(URL)

    assert result.status == "created"
    payload = fw.created_posts()[0]["payload"]
    assert payload["slug"] == "hello-fediverse"
    assert payload["status"] == "draft"
    assert payload["featured_media"] == fw.media[0]["id"]
    assert sorted(fw.tags[t] for t in payload["tags"]) == ["Alpha", "Beta"]
    assert "tags-links" not in payload["content"]
    assert tool.finish() == 1


def test_second_run_is_skipped_as_duplicate(cfg, fw, tmp_path):
    fw.pages[URL] = article_page()

    first = _tool(cfg, fw, tmp_path).syndicate_post(URL)
    second_tool = _tool(cfg, fw, tmp_path)
    second = second_tool.syndicate_post(URL)

    assert first.status == "created"
    assert second.status == "skipped-duplicate"
    assert len(fw.created_posts()) == 1
    assert second_tool.finish() == 0


def test_failed_image_download_still_creates_post(cfg, fw, tmp_path):
    image = "https://cdn.example/uploads/lead.jpg"
    fw.down_urls.add(image)
    fw.pages[URL] = article_page(og_image=image)
    tool = _tool(cfg, fw, tmp_path)

    result = tool.syndicate_post(URL)

    assert result.status == "created"
    assert "featured_media" not in fw.created_posts()[0]["payload"]
    assert tool.ctx.posts_created == 1


def test_partial_tag_failure_keeps_resolved_tags(cfg, fw, tmp_path):
    fw.failing_tags.add("Beta")
    fw.pages[URL] = article_page(body="<p>Hi</p>" + TAG_WIDGET)

    _tool(cfg, fw, tmp_path).syndicate_post(URL)

    payload = fw.created_posts()[0]["payload"]
    assert [fw.tags[t] for t in payload["tags"]] == ["Alpha"]


def test_page_without_content_gets_placeholders(cfg, fw, tmp_path):
    fw.pages[URL] = article_page(title=None, body=None)

    result = _tool(cfg, fw, tmp_path).syndicate_post(URL)

    payload = fw.created_posts()[0]["payload"]
    assert result.status == "created"
    assert payload["title"] == "Untitled Post"
    assert payload["content"] == "<p>No content found</p>"


def test_batch_with_shared_slug_creates_once(cfg, fw, tmp_path):
    other = f"{SOURCE}/2023/11/hello-fediverse/"
    fw.pages[URL] = article_page()
    fw.pages[other] = article_page(title="Another one")
    tool = _tool(cfg, fw, tmp_path)

    results = tool.syndicate_batch([URL, other])

    assert [r.status for r in results] == ["created", "skipped-duplicate"]
    assert tool.finish() == 1


def test_fetch_failure_does_not_stop_batch(cfg, fw, tmp_path):
    broken = f"{SOURCE}/2024/01/gone/"
    fw.status_overrides[broken] = 500
    fw.pages[URL] = article_page()
    tool = _tool(cfg, fw, tmp_path)

    results = tool.syndicate_batch([broken, URL])

    assert [r.status for r in results] == ["failed", "created"]
    assert results[0].slug == "gone"
    with open(tool.ctx.log.error_log, encoding="utf-8") as f:
        assert "Failed to fetch post" in f.read()
    assert tool.finish() == 1


def test_publish_failure_is_logged_not_raised(cfg, fw, tmp_path):
    fw.failing.add("posts")
    fw.pages[URL] = article_page()
    tool = _tool(cfg, fw, tmp_path)

    result = tool.syndicate_post(URL)

    assert result.status == "failed"
    with open(tool.ctx.log.post_log, encoding="utf-8") as f:
        assert f.read() == "Failed: Hello Fediverse\n"
    assert tool.finish() == 0
    assert not os.path.exists(tool.ctx.log.map_path)


def test_reports_written(cfg, fw, tmp_path):
    fw.pages[URL] = article_page()
    tool = _tool(cfg, fw, tmp_path)
    result = tool.syndicate_post(URL)
    tool.finish()

    with open(tool.ctx.log.results_log, encoding="utf-8") as f:
        records = [json.loads(line) for line in f]
    assert records[0]["status"] == "created"
    assert records[0]["source_url"] == URL

    with open(tool.ctx.log.map_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [["SourceURL", "Slug", "DraftURL"], [URL, "hello-fediverse", result.link]]


def test_read_url_list_skips_blanks_and_comments(tmp_path):
    path = tmp_path / "posts.list"
    path.write_text(f"\n{URL}\n  # later\n   \n  {SOURCE}/b/  \n", encoding="utf-8")
    assert read_url_list(str(path)) == [URL, f"{SOURCE}/b/"]


def test_malformed_anchor_does_not_stop_batch(cfg, fw, tmp_path):
    first = f"{SOURCE}/2024/03/first/"
    fw.pages[first] = article_page(body='<p><a href="http://[broken/">bad</a></p>')
    fw.pages[URL] = article_page()
    tool = _tool(cfg, fw, tmp_path)

    results = tool.syndicate_batch([first, URL])

    assert [r.status for r in results] == ["created", "created"]
    assert 'href="http://[broken/"' in fw.created_posts()[0]["payload"]["content"]
    assert tool.finish() == 2


def test_malformed_image_url_means_no_featured_image(cfg, fw, tmp_path):
    first = f"{SOURCE}/2024/03/first/"
    fw.pages[first] = article_page(og_image="http://[broken/lead.jpg")
    fw.pages[URL] = article_page()
    tool = _tool(cfg, fw, tmp_path)

    results = tool.syndicate_batch([first, URL])

    assert [r.status for r in results] == ["created", "created"]
    assert "featured_media" not in fw.created_posts()[0]["payload"]
    assert fw.media == []


def test_malformed_list_line_fails_only_that_url(cfg, fw, tmp_path):
    fw.pages[URL] = article_page()
    tool = _tool(cfg, fw, tmp_path)

    results = tool.syndicate_batch(["http://[oops/post", URL])

    assert [r.status for r in results] == ["failed", "created"]
    assert results[0].slug == "http://[oops/post"
    with open(tool.ctx.log.error_log, encoding="utf-8") as f:
        assert "Failed to fetch post: http://[oops/post" in f.read()
    assert tool.finish() == 1
