"""
High-level orchestration of the article syndication.

This module defines a :class:`WordPressSyndicationTool` class that ties
together the fetcher, extractor and WordPress publisher into a complete
pipeline.  Each URL goes through the same sequence, strictly one after the
other::

    fetch → extract → duplicate check → media upload → tags → create draft

A fetch or extraction failure ends the URL; a duplicate ends it as
``skipped-duplicate``; media and tag failures only degrade the post.  No
state is shared between URLs except the :class:`RunContext` counter and the
append-only logs, so a failure on one URL never stops the next.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import requests

from syndicator.config import SyndicatorConfig
from syndicator.context import RunContext
from syndicator.extractors.article_extractor import extract_post
from syndicator.extractors.source_fetcher import fetch_html
from syndicator.models import PublishResult
from syndicator.publishers.wordpress_publisher import (
    create_post,
    post_exists,
    resolve_tags,
    upload_featured_image,
)
from syndicator.utils.errors import ExtractionError, FetchError, error_message
from syndicator.utils.reports import generate_syndication_map_csv
from syndicator.utils.slugs import slug_from_url


def read_url_list(path: str) -> List[str]:
    """Return the non-empty, non-comment lines of ``path`` in file order."""
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith("#")]


class WordPressSyndicationTool:
    """
    Copies source articles into WordPress as drafts.

    The tool owns the configuration, the HTTP session and the
    :class:`RunContext` of a run.  All outcomes are recorded through the
    context's :class:`~syndicator.utils.reports.RunLog`.
    """

    def __init__(
        self,
        config: SyndicatorConfig,
        *,
        ctx: Optional[RunContext] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.ctx = ctx or RunContext()
        self.session = session or requests.Session()
        self.results: List[PublishResult] = []

    def _record(self, result: PublishResult) -> PublishResult:
        self.results.append(result)
        self.ctx.log.append_result(result)
        return result

    def syndicate_post(self, url: str) -> PublishResult:
        """Run the whole pipeline for one source URL."""
        ctx = self.ctx
        fallback_slug = slug_from_url(url) or url

        ctx.log_verbose(f"Fetching post from URL: {url}")
        try:
            html = fetch_html(url, self.session)
        except FetchError as e:
            ctx.log_error(error_message("FETCH", str(e)))
            return self._record(PublishResult(slug=fallback_slug, status="failed", source_url=url))
        ctx.log_verbose(f"Fetched HTML content (truncated): {html[:200]}...")

        try:
            post = extract_post(
                html,
                url,
                ctx=ctx,
                target_site_url=self.config.site_url,
                session=self.session,
            )
        except ExtractionError as e:
            ctx.log_error(error_message("EXTRACT", str(e)))
            return self._record(PublishResult(slug=fallback_slug, status="failed", source_url=url))

        ctx.log_verbose(f"Processing post: {post.title}")
        if post_exists(self.config, post.slug, ctx, self.session):
            ctx.log_verbose(f"Skipping '{post.slug}': already exists on {self.config.site_url}")
            return self._record(
                PublishResult(
                    slug=post.slug,
                    status="skipped-duplicate",
                    source_url=url,
                    title=post.title,
                )
            )

        media = upload_featured_image(self.config, post.image_url, ctx, self.session)
        tags = resolve_tags(self.config, post.tags, ctx, self.session)
        result = create_post(
            self.config,
            post,
            media,
            [t.platform_tag_id for t in tags],
            ctx,
            self.session,
        )
        return self._record(result)

    def syndicate_batch(self, urls: Iterable[str]) -> List[PublishResult]:
        """Process ``urls`` one at a time, in order."""
        return [self.syndicate_post(url) for url in urls]

    def finish(self) -> int:
        """Write the end-of-run reports and return the created count."""
        if any(r.status == "created" for r in self.results):
            try:
                generate_syndication_map_csv(self.results, out_path=self.ctx.log.map_path)
            except OSError as e:
                self.ctx.log_error(f"Failed to write syndication map: {e}")
        return self.ctx.posts_created
