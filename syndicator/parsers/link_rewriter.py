"""
Rewriting of links between articles of the source site.

An article often links to other articles of the same site.  When those
articles were syndicated earlier they exist on the target site under the
same slug, so the link can point at the local copy instead.  Every
candidate is probed with a live request first; links whose copy does not
exist are left untouched.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import Tag

from syndicator.context import RunContext
from syndicator.utils.errors import error_message
from syndicator.utils.slugs import lands_on_slug, slug_from_url

_SKIPPED_SCHEMES = ("mailto:", "tel:", "javascript:")


def site_host(url: str) -> str:
    """Lower-cased host of ``url`` without a leading ``www.``."""
    try:
        host = (urlparse(url or "").hostname or "").lower()
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def target_url_for_slug(site_url: str, slug: str) -> str:
    return f"{site_url.rstrip('/')}/{slug}/"


def probe_url(url: str, session: requests.Session) -> requests.Response:
    """
    Request ``url`` and return the final response after redirects.

    HEAD is tried first; servers that refuse HEAD with 405 get a GET.
    """
    resp = session.head(url, allow_redirects=True)
    if resp.status_code == 405:
        resp = session.get(url, allow_redirects=True)
    return resp


def rewrite_internal_links(
    container: Tag,
    source_url: str,
    target_site_url: str,
    ctx: RunContext,
    session: requests.Session,
) -> int:
    """
    Point same-origin anchors inside ``container`` at the target site.

    :param container: Parsed article body, modified in place.
    :param source_url: URL the article was fetched from; its host is the
        source domain and relative links are resolved against it.
    :param target_site_url: Base URL of the target site.
    :param ctx: Run context used for logging.
    :param session: HTTP session used for the probes.
    :return: Number of anchors rewritten.
    """
    source_host = site_host(source_url)
    if not source_host or source_host == site_host(target_site_url):
        return 0

    probed: Dict[str, Optional[str]] = {}
    rewritten = 0
    for anchor in container.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.startswith("#") or href.lower().startswith(_SKIPPED_SCHEMES):
            continue

        if href not in probed:
            probed[href] = _resolve_target(href, source_url, source_host, target_site_url, ctx, session)
        new_href = probed[href]
        if new_href:
            anchor["href"] = new_href
            rewritten += 1
    return rewritten


def _resolve_target(
    href: str,
    source_url: str,
    source_host: str,
    target_site_url: str,
    ctx: RunContext,
    session: requests.Session,
) -> Optional[str]:
    try:
        absolute = urljoin(source_url, href)
        fragment = urlparse(absolute).fragment
    except ValueError as e:
        ctx.log_verbose(f"Skipping malformed link {href}: {e}")
        return None
    if site_host(absolute) != source_host:
        return None
    slug = slug_from_url(absolute)
    if not slug:
        return None

    target = target_url_for_slug(target_site_url, slug)
    try:
        resp = probe_url(target, session)
    except requests.RequestException as e:
        ctx.log_error(error_message("LINK_PROBE", f"{target} - {e}"))
        return None

    status = resp.status_code
    if 200 <= status < 300:
        # WordPress redirects an unknown slug to its closest guess
        if not lands_on_slug(resp.url, slug):
            ctx.log_verbose(f"Not rewriting {href}: {target} redirected to {resp.url}")
            return None
        ctx.log_verbose(f"Rewriting link {href} -> {target}")
        return f"{target}#{fragment}" if fragment else target
    if status != 404:
        ctx.log_error(error_message("LINK_PROBE", f"{target} - HTTP {status}"))
    return None
