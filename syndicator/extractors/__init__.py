"""
Extractors for source articles.

This subpackage downloads a rendered article page and turns its HTML into
a :class:`syndicator.models.SourcePost`: title, cleaned body markup,
featured image, publish date, tags and slug.
"""

from .article_extractor import extract_post
from .source_fetcher import BROWSER_HEADERS, fetch_html

__all__ = ["BROWSER_HEADERS", "extract_post", "fetch_html"]
