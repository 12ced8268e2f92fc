"""
HTML → :class:`SourcePost` extraction.

The source site is a WordPress theme with the usual ``entry-*`` markup, so
every field is located with a fixed list of selectors, first match wins:

* title: ``h1.entry-title`` → ``og:title`` → ``<title>`` → ``"Untitled Post"``
* body: inner HTML of ``div.entry-content`` → ``"<p>No content found</p>"``
* image: ``og:image`` → first ``<img>`` of the body → ``None``
* date: ``time.entry-date`` → ``article:published_time`` → ``pubdate`` →
  any ``<time datetime>`` → now
* slug: last URL path segment → normalized title

Before the body is serialized, the tag list widget is read into
``SourcePost.tags`` and removed together with the table of contents and
the share buttons, same-site links are rewritten when a target site is
given, and mis-encoded punctuation is repaired.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, Tag

from syndicator.context import RunContext
from syndicator.models import SourcePost
from syndicator.parsers.link_rewriter import rewrite_internal_links
from syndicator.parsers.text_repair import repair_mojibake
from syndicator.utils.errors import ExtractionError
from syndicator.utils.slugs import derive_slug
from syndicator.utils.tags import clean_tag_names

DEFAULT_TITLE = "Untitled Post"
DEFAULT_BODY = "<p>No content found</p>"
DEFAULT_AUTHOR = "We Distribute"

TITLE_SELECTOR = "h1.entry-title"
BODY_SELECTOR = "div.entry-content"
DATE_SELECTOR = "time.entry-date"
AUTHOR_SELECTOR = "span.author"

TOC_SELECTORS = "#ez-toc-container, .ez-toc-container, #toc_container, .lwptoc, .table-of-contents"
SHARE_SELECTORS = ".sharedaddy, .sd-sharing-enabled, .addtoany_share_save_container, .a2a_kit, .share-buttons"
TAG_WIDGET_SELECTORS = ".tags-links, .post-tags, .wp-block-post-terms"


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def extract_title(soup: BeautifulSoup) -> str:
    heading = soup.select_one(TITLE_SELECTOR)
    if heading is not None and heading.get_text().strip():
        return heading.get_text().strip()
    og_title = _meta_content(soup, property="og:title")
    if og_title:
        return og_title
    if soup.title is not None and soup.title.get_text().strip():
        return soup.title.get_text().strip()
    return DEFAULT_TITLE


def _absolute_url(page_url: str, src: Optional[str]) -> Optional[str]:
    if not src:
        return None
    try:
        return urljoin(page_url, src)
    except ValueError:
        return None


def extract_image_url(soup: BeautifulSoup, body: Optional[Tag], page_url: str) -> Optional[str]:
    """``og:image``, then the first body ``<img>``; malformed URLs are skipped."""
    og_image = _absolute_url(page_url, _meta_content(soup, property="og:image"))
    if og_image:
        return og_image
    if body is not None:
        img = body.find("img", src=True)
        if img is not None:
            return _absolute_url(page_url, img["src"].strip())
    return None


def extract_publish_date(soup: BeautifulSoup) -> datetime:
    entry_date = soup.select_one(DATE_SELECTOR)
    any_time = soup.find("time", attrs={"datetime": True})
    candidates = [
        entry_date.get("datetime") if entry_date is not None else None,
        _meta_content(soup, property="article:published_time"),
        _meta_content(soup, name="pubdate"),
        any_time.get("datetime") if any_time is not None else None,
    ]
    for candidate in candidates:
        parsed = _parse_datetime(candidate)
        if parsed is not None:
            return parsed
    return datetime.now(timezone.utc)


def extract_tags(body: Tag) -> List[str]:
    """Read tag names from the inline tag list widgets of ``body``."""
    names: List[str] = []
    for widget in body.select(TAG_WIDGET_SELECTORS):
        names.extend(a.get_text(" ", strip=True) for a in widget.find_all("a"))
    return clean_tag_names(names)


def remove_blocks(body: Tag, selectors: Iterable[str]) -> int:
    removed = 0
    for selector in selectors:
        for block in body.select(selector):
            # a block nested in one already removed is gone with it
            if block.decomposed:
                continue
            block.decompose()
            removed += 1
    return removed


def extract_post(
    html: str,
    url: str,
    *,
    ctx: Optional[RunContext] = None,
    target_site_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> SourcePost:
    """
    Parse a fetched article page into a :class:`SourcePost`.

    :param html: Page HTML.
    :param url: URL the page was fetched from.
    :param ctx: Run context for verbose and error logging.
    :param target_site_url: Base URL of the target site.  When given together
        with ``session``, links to other articles of the source site are
        rewritten to their target-site copies.
    :param session: HTTP session used for the link probes.
    :raises ExtractionError: if the document has no element tree at all.
    """
    ctx = ctx or RunContext()
    if not html or not html.strip():
        raise ExtractionError(f"Empty document for {url}")
    soup = BeautifulSoup(html, "html.parser")
    if soup.find() is None:
        raise ExtractionError(f"No HTML elements found for {url}")

    title = extract_title(soup)
    body = soup.select_one(BODY_SELECTOR)
    image_url = extract_image_url(soup, body, url)
    publish_date = extract_publish_date(soup)
    author_tag = soup.select_one(AUTHOR_SELECTOR)
    author = (author_tag.get_text().strip() if author_tag is not None else "") or DEFAULT_AUTHOR

    tags: List[str] = []
    body_html = ""
    if body is not None:
        tags = extract_tags(body)
        remove_blocks(body, (TAG_WIDGET_SELECTORS, TOC_SELECTORS, SHARE_SELECTORS))
        if target_site_url and session is not None:
            rewrite_internal_links(body, url, target_site_url, ctx, session)
        body_html = repair_mojibake(body.decode_contents())
    if not body_html.strip():
        body_html = DEFAULT_BODY

    slug = derive_slug(url, title)

    ctx.log_verbose(f"Extracted Title: {title}")
    ctx.log_verbose(f"Image URL: {image_url or 'No image found'}")
    ctx.log_verbose(f"Post Date: {publish_date.isoformat()}")
    ctx.log_verbose(f"Author: {author}")
    ctx.log_verbose(f"Tags: {', '.join(tags) if tags else 'none'}")
    ctx.log_verbose(f"Extracted slug: {slug}")

    return SourcePost(
        url=url,
        title=title,
        body_html=body_html,
        image_url=image_url,
        publish_date=publish_date,
        tags=tuple(tags),
        slug=slug,
        author=author,
    )
