"""
WordPress REST API helper functions for article syndication.

This module implements the "resolve before create" sequence against the
``wp/v2`` REST API.  The API offers no atomic create-if-absent, so every
step is a plain request and the caller is expected to run them one URL at
a time:

1. :func:`post_exists` – public permalink probe, then an authenticated
   draft query by slug.
2. :func:`upload_featured_image` – download the image and re-upload it to
   ``/media``.
3. :func:`resolve_tags` – search each tag by name, create it when absent.
4. :func:`create_post` – submit the draft and record the outcome.

Steps 2 and 3 are best-effort: their failures are logged and degrade the
post (no featured image, fewer tags) instead of stopping it.

Usage example::

    cfg = load_config("wp-login.config")
    ctx = RunContext(verbose=True)
    session = requests.Session()
    if not post_exists(cfg, post.slug, ctx, session):
        media = upload_featured_image(cfg, post.image_url, ctx, session)
        tags = resolve_tags(cfg, post.tags, ctx, session)
        create_post(cfg, post, media, [t.platform_tag_id for t in tags], ctx, session)
"""

from __future__ import annotations

import json
from datetime import timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import unquote, urlparse

import requests

from syndicator.config import SyndicatorConfig
from syndicator.context import RunContext
from syndicator.extractors.source_fetcher import BROWSER_HEADERS
from syndicator.models import MediaReference, PublishResult, SourcePost, TagResolution
from syndicator.parsers.link_rewriter import target_url_for_slug
from syndicator.utils.errors import (
    PublishError,
    TaxonomyError,
    UploadError,
    VerificationError,
    error_message,
)
from syndicator.utils.slugs import lands_on_slug
from syndicator.utils.tags import find_exact_term

EXCERPT = "Syndicated post from We Distribute."
DEFAULT_IMAGE_NAME = "Untitled.jpeg"
DEFAULT_IMAGE_TYPE = "image/jpeg"


def _response_detail(exc: requests.RequestException) -> str:
    resp = getattr(exc, "response", None)
    if resp is None:
        return str(exc)
    try:
        message = resp.json().get("message")
    except (ValueError, AttributeError):
        message = None
    return f"HTTP {resp.status_code} {message or resp.text[:300]}"


###############################################################################
# Existence check
###############################################################################

def check_published(cfg: SyndicatorConfig, slug: str, session: requests.Session) -> bool:
    """
    Probe the public permalink of ``slug``.

    :return: ``True`` on a success status that still names ``slug``,
        ``False`` on 404 or a redirect to another post.
    :raises VerificationError: on any other status or a transport error.
    """
    url = target_url_for_slug(cfg.site_url, slug)
    try:
        resp = session.get(url, headers=BROWSER_HEADERS, allow_redirects=True)
    except requests.RequestException as e:
        raise VerificationError(f"{url} - {e}") from e
    if resp.status_code == 404:
        return False
    if 200 <= resp.status_code < 300:
        # a 404 guess redirect lands on some other post
        return lands_on_slug(resp.url, slug)
    raise VerificationError(f"{url} - HTTP {resp.status_code}")


def check_draft(cfg: SyndicatorConfig, slug: str, session: requests.Session) -> bool:
    """
    Look for a draft with exactly ``slug`` through the authenticated API.

    :raises VerificationError: if the query fails or returns something
        other than a list.
    """
    try:
        resp = session.get(
            f"{cfg.api_base}/posts",
            params={"slug": slug, "status": "draft"},
            auth=cfg.auth,
        )
        resp.raise_for_status()
        drafts = resp.json()
    except requests.RequestException as e:
        raise VerificationError(f"draft query for '{slug}' - {_response_detail(e)}") from e
    except ValueError as e:
        raise VerificationError(f"draft query for '{slug}' - invalid JSON: {e}") from e
    if not isinstance(drafts, list):
        raise VerificationError(f"draft query for '{slug}' - unexpected response {drafts!r:.200}")
    return any((d.get("slug") or slug) == slug for d in drafts if isinstance(d, dict))


def post_exists(cfg: SyndicatorConfig, slug: str, ctx: RunContext, session: requests.Session) -> bool:
    """
    Return whether a post with ``slug`` is already on the target site.

    An unverifiable public probe falls through to the draft query; an
    unverifiable draft query counts as "does not exist".
    """
    try:
        if check_published(cfg, slug, session):
            ctx.log_verbose(f"Published post found for slug '{slug}'")
            return True
    except VerificationError as e:
        ctx.log_error(error_message("VERIFY", str(e)))

    try:
        if check_draft(cfg, slug, session):
            ctx.log_verbose(f"Draft found for slug '{slug}'")
            return True
    except VerificationError as e:
        ctx.log_error(error_message("VERIFY", str(e)))
    return False


###############################################################################
# Media upload
###############################################################################

def image_filename(image_url: str) -> str:
    segments = [s for s in urlparse(image_url).path.split("/") if s]
    name = unquote(segments[-1]).strip() if segments else ""
    return name or DEFAULT_IMAGE_NAME


def download_image(image_url: str, session: requests.Session) -> Tuple[bytes, str, str]:
    """Fetch ``image_url`` and return ``(payload, filename, content_type)``."""
    try:
        resp = session.get(image_url)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise UploadError(f"download of {image_url} failed - {_response_detail(e)}") from e
    content_type = (resp.headers.get("Content-Type") or "").split(";")[0].strip()
    return resp.content, image_filename(image_url), content_type or DEFAULT_IMAGE_TYPE


def upload_media(cfg: SyndicatorConfig, image_url: str, ctx: RunContext, session: requests.Session) -> int:
    """
    Re-upload the image at ``image_url`` to the Media Library.

    :return: The attachment id assigned by WordPress.
    :raises UploadError: on download, network or authorization failures, or
        when the response has no ``source_url``.
    """
    ctx.log_verbose(f"Downloading image: {image_url}")
    payload, filename, content_type = download_image(image_url, session)

    ctx.log_verbose(f"Uploading image to: {cfg.site_url}")
    try:
        resp = session.post(
            f"{cfg.api_base}/media",
            files={"file": (filename, payload, content_type)},
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            auth=cfg.auth,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise UploadError(f"upload of {filename} failed - {_response_detail(e)}") from e
    except ValueError as e:
        raise UploadError(f"upload of {filename} returned invalid JSON: {e}") from e

    if not isinstance(data, dict) or not data.get("source_url"):
        raise UploadError("Image upload succeeded but no source URL returned.")
    try:
        media_id = int(data["id"])
    except (KeyError, TypeError, ValueError) as e:
        raise UploadError(f"upload of {filename} returned no usable id") from e
    ctx.log_verbose(f"Image uploaded successfully! URL: {data['source_url']}")
    return media_id


def upload_featured_image(
    cfg: SyndicatorConfig, image_url: Optional[str], ctx: RunContext, session: requests.Session
) -> MediaReference:
    """Best-effort featured image upload. Failures yield an empty reference."""
    if not image_url:
        return MediaReference(source_image_url=None, platform_media_id=None)
    try:
        media_id = upload_media(cfg, image_url, ctx, session)
    except UploadError as e:
        ctx.log_error(error_message("MEDIA_UPLOAD", str(e)))
        media_id = None
    return MediaReference(source_image_url=image_url, platform_media_id=media_id)


###############################################################################
# Taxonomy helpers
###############################################################################

def _term_exists_id(resp: Optional[requests.Response]) -> Optional[int]:
    """Existing term id from a ``term_exists`` error reply, if that is what it is."""
    if resp is None:
        return None
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict) or data.get("code") != "term_exists":
        return None
    term_id = (data.get("data") or {}).get("term_id")
    return int(term_id) if term_id is not None else None


def get_or_create_tag(cfg: SyndicatorConfig, name: str, session: requests.Session) -> int:
    """
    Return the id of the tag called ``name``, creating it when absent.

    :raises TaxonomyError: if the search or the creation fails.
    """
    base = f"{cfg.api_base}/tags"
    try:
        resp = session.get(base, params={"search": name}, auth=cfg.auth)
        resp.raise_for_status()
        existing = find_exact_term(resp.json(), name)
    except requests.RequestException as e:
        raise TaxonomyError(name, f"search failed - {_response_detail(e)}") from e
    except (ValueError, AttributeError) as e:
        raise TaxonomyError(name, f"search returned an unexpected payload: {e}") from e
    if existing is not None and existing.get("id") is not None:
        return int(existing["id"])

    try:
        resp = session.post(base, json={"name": name}, auth=cfg.auth)
        resp.raise_for_status()
        created = resp.json()
    except requests.RequestException as e:
        term_id = _term_exists_id(getattr(e, "response", None))
        if term_id is not None:
            return term_id
        raise TaxonomyError(name, f"creation failed - {_response_detail(e)}") from e
    except ValueError as e:
        raise TaxonomyError(name, f"creation returned invalid JSON: {e}") from e
    if not isinstance(created, dict) or created.get("id") is None:
        raise TaxonomyError(name, f"creation returned no id: {created!r:.200}")
    return int(created["id"])


def resolve_tags(
    cfg: SyndicatorConfig, names: Iterable[str], ctx: RunContext, session: requests.Session
) -> List[TagResolution]:
    """Resolve every tag independently; failed tags are left out."""
    resolved: List[TagResolution] = []
    for name in names:
        try:
            tag_id = get_or_create_tag(cfg, name, session)
        except TaxonomyError as e:
            ctx.log_error(error_message("TAXONOMY", str(e)))
            continue
        ctx.log_verbose(f"Tag '{name}' -> {tag_id}")
        resolved.append(TagResolution(name=name, platform_tag_id=tag_id))
    return resolved


###############################################################################
# Post creation
###############################################################################

def build_post_payload(
    cfg: SyndicatorConfig,
    post: SourcePost,
    featured_media_id: Optional[int],
    tag_ids: Sequence[int],
) -> Dict[str, Any]:
    """Assemble the ``POST /posts`` body for a syndicated draft."""
    body: Dict[str, Any] = {
        "title": post.title,
        "content": post.body_html,
        "status": "draft",
        "categories": [cfg.category_id],
        "tags": list(tag_ids),
        "author": cfg.author_id,
        "excerpt": EXCERPT,
        "slug": post.slug,
    }
    if featured_media_id is not None:
        body["featured_media"] = featured_media_id
    published = post.publish_date
    if published.tzinfo is not None:
        utc = published.astimezone(timezone.utc).replace(tzinfo=None)
        body["date_gmt"] = utc.isoformat(timespec="seconds")
    else:
        body["date"] = published.isoformat(timespec="seconds")
    return body


def submit_post(cfg: SyndicatorConfig, body: Dict[str, Any], session: requests.Session) -> Dict[str, Any]:
    """
    Send the draft to WordPress.

    :raises PublishError: on failure.
    """
    try:
        resp = session.post(f"{cfg.api_base}/posts", json=body, auth=cfg.auth)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise PublishError(_response_detail(e)) from e
    except ValueError as e:
        raise PublishError(f"invalid JSON in response: {e}") from e
    if not isinstance(data, dict):
        raise PublishError(f"unexpected response {data!r:.200}")
    return data


def create_post(
    cfg: SyndicatorConfig,
    post: SourcePost,
    media: MediaReference,
    tag_ids: Sequence[int],
    ctx: RunContext,
    session: requests.Session,
) -> PublishResult:
    """
    Create the draft and record the outcome in the post log.

    Never raises for request failures: they become a ``failed`` result and
    a ``Failed: {title}`` line.
    """
    body = build_post_payload(cfg, post, media.platform_media_id, tag_ids)
    ctx.log_verbose(f"Submitting new post: {post.title}")
    ctx.log_verbose(f"Post Data (Truncated): {json.dumps(body, indent=2)[:300]}...")
    try:
        data = submit_post(cfg, body, session)
    except PublishError as e:
        ctx.log_error(error_message("PUBLISH", f"{post.title} - {e}"))
        ctx.log.append_post_failure(post.title)
        return PublishResult(slug=post.slug, link=None, status="failed", source_url=post.url, title=post.title)

    link = data.get("link") or target_url_for_slug(cfg.site_url, post.slug)
    ctx.log.append_post_link(link)
    ctx.posts_created += 1
    ctx.report_ok(f"Post Created: {link}")
    return PublishResult(slug=post.slug, link=link, status="created", source_url=post.url, title=post.title)
