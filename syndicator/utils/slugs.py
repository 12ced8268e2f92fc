from __future__ import annotations

import re
from typing import Optional
from urllib.parse import unquote, urlparse

DEFAULT_SLUG = "untitled-post"


def slugify_title(title: str) -> str:
    """Lower-case, turn whitespace runs into hyphens, drop non-word characters."""
    text = (title or "").strip().lower()
    text = re.sub(r"\s+", "-", text)
    return re.sub(r"[^\w-]", "", text)


def slug_from_url(url: str) -> Optional[str]:
    """Return the final non-empty segment of the URL path, if any."""
    try:
        path = urlparse(url or "").path
    except ValueError:
        return None
    segments = [s for s in path.split("/") if s.strip()]
    if not segments:
        return None
    segment = unquote(segments[-1]).strip()
    # a percent-encoded separator could survive decoding
    segment = segment.replace("/", "-").replace("\\", "-")
    return segment or None


def lands_on_slug(final_url: Optional[str], slug: str) -> bool:
    """Whether a request for ``slug`` ended on a URL that still names it."""
    if not final_url:
        return True
    return slug_from_url(final_url) == slug


def derive_slug(url: str, title: str) -> str:
    """Slug from the URL path, falling back to the normalized title."""
    return slug_from_url(url) or slugify_title(title) or DEFAULT_SLUG
