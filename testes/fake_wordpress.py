"""
In-memory stand-in for a WordPress site and a source site.

``FakeWordPress`` exposes the ``get``/``head``/``post`` methods of a
``requests.Session`` and answers with real ``requests.Response`` objects,
keeping posts, tags and media in memory so repeated runs see each other's
writes.
"""

from __future__ import annotations

import html
import json
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib.parse import urlparse

import requests
from requests.structures import CaseInsensitiveDict

SITE = "https://target.example"
API = f"{SITE}/wp-json/wp/v2"
SOURCE = "https://wedistribute.org"


def make_response(
    url: str,
    status: int = 200,
    *,
    json_data: Any = None,
    text: Optional[str] = None,
    content: Optional[bytes] = None,
    headers: Optional[Dict[str, str]] = None,
    encoding: Optional[str] = "utf-8",
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = url
    resp.headers = CaseInsensitiveDict(headers or {})
    if json_data is not None:
        content = json.dumps(json_data).encode("utf-8")
        resp.headers.setdefault("Content-Type", "application/json")
    elif text is not None:
        content = text.encode("utf-8")
        resp.headers.setdefault("Content-Type", "text/html; charset=UTF-8")
    resp._content = content or b""
    resp.encoding = encoding
    return resp


def _check_url(url: str) -> None:
    """Reject URLs ``requests`` itself would refuse to send."""
    try:
        urlparse(url).hostname
    except ValueError as e:
        raise requests.exceptions.InvalidURL(f"Invalid URL {url!r}: {e}") from e


def article_page(
    *,
    title: Optional[str] = "Hello Fediverse",
    body: Optional[str] = "<p>Body text</p>",
    og_image: Optional[str] = None,
    date: Optional[str] = "2024-03-05T10:20:30+00:00",
    head_extra: str = "",
) -> str:
    head = [f"<title>{title} | We Distribute</title>" if title else ""]
    if og_image:
        head.append(f'<meta property="og:image" content="{og_image}">')
    head.append(head_extra)
    parts = ["<html><head>", *head, "</head><body><article>"]
    if title:
        parts.append(f'<h1 class="entry-title">{title}</h1>')
    if date:
        parts.append(f'<time class="entry-date published" datetime="{date}">March 5</time>')
    parts.append('<span class="author">Sean Tilley</span>')
    if body is not None:
        parts.append(f'<div class="entry-content">{body}</div>')
    parts.append("</article></body></html>")
    return "".join(parts)


class FakeWordPress:
    def __init__(self) -> None:
        self.pages: Dict[str, str] = {}
        self.images: Dict[str, Tuple[bytes, str]] = {}
        self.posts: List[Dict[str, Any]] = []
        self.tags: Dict[int, str] = {}
        self.media: List[Dict[str, Any]] = []
        self.calls: List[Tuple[str, str, Any]] = []
        self.failing: Set[str] = set()
        self.failing_tags: Set[str] = set()
        self.down_urls: Set[str] = set()
        self.status_overrides: Dict[str, int] = {}
        self.redirects: Dict[str, str] = {}
        self._next_id = 100

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    # state helpers ---------------------------------------------------------

    def add_published_post(self, slug: str) -> Dict[str, Any]:
        post = {"id": self._new_id(), "slug": slug, "status": "publish", "link": f"{SITE}/{slug}/"}
        self.posts.append(post)
        return post

    def add_tag(self, name: str) -> int:
        tag_id = self._new_id()
        self.tags[tag_id] = name
        return tag_id

    def created_posts(self) -> List[Dict[str, Any]]:
        return [p for p in self.posts if p.get("payload") is not None]

    def count(self, method: str, url: str) -> int:
        return sum(1 for m, u, _ in self.calls if m == method and u == url)

    # session interface -----------------------------------------------------

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> requests.Response:
        self.calls.append(("GET", url, params))
        _check_url(url)
        if url in self.down_urls:
            raise requests.ConnectionError(f"connection refused: {url}")
        if url in self.status_overrides:
            return make_response(url, self.status_overrides[url], text="")
        if url in self.pages:
            return make_response(url, text=self.pages[url])
        if url in self.images:
            payload, content_type = self.images[url]
            return make_response(url, content=payload, headers={"Content-Type": content_type})
        if url == f"{API}/posts":
            if "drafts" in self.failing:
                return make_response(url, 500, json_data={"code": "internal", "message": "boom"})
            found = [
                {"id": p["id"], "slug": p["slug"], "status": p["status"], "link": p["link"]}
                for p in self.posts
                if p["slug"] == params.get("slug") and p["status"] == params.get("status")
            ]
            return make_response(url, json_data=found)
        if url == f"{API}/tags":
            search = params.get("search", "")
            if search in self.failing_tags:
                return make_response(url, 500, json_data={"code": "internal", "message": "boom"})
            found = [
                {"id": tag_id, "name": html.escape(name, quote=False)}
                for tag_id, name in self.tags.items()
                if search.lower() in name.lower()
            ]
            return make_response(url, json_data=found)
        if url.startswith(f"{SITE}/"):
            return self._public(url)
        return make_response(url, 404, text="not found")

    def head(self, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append(("HEAD", url, None))
        _check_url(url)
        if url in self.down_urls:
            raise requests.ConnectionError(f"connection refused: {url}")
        if url in self.status_overrides:
            return make_response(url, self.status_overrides[url])
        if url.startswith(f"{SITE}/"):
            resp = self._public(url)
            resp._content = b""
            return resp
        return make_response(url, 404)

    def post(
        self,
        url: str,
        json: Any = None,
        files: Any = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> requests.Response:
        self.calls.append(("POST", url, json if json is not None else files))
        if url == f"{API}/media":
            if "media" in self.failing:
                return make_response(url, 401, json_data={"code": "rest_cannot_create", "message": "Sorry, you are not allowed"})
            filename, payload, content_type = files["file"]
            media = {"id": self._new_id(), "filename": filename, "content_type": content_type, "headers": headers}
            if "media_no_source" not in self.failing:
                media["source_url"] = f"{SITE}/wp-content/uploads/{filename}"
            self.media.append(media)
            return make_response(url, 201, json_data=media)
        if url == f"{API}/tags":
            name = json["name"]
            if name in self.failing_tags:
                return make_response(url, 500, json_data={"code": "internal", "message": "boom"})
            for tag_id, existing in self.tags.items():
                if existing == name:
                    return make_response(
                        url,
                        400,
                        json_data={"code": "term_exists", "message": "exists", "data": {"status": 400, "term_id": tag_id}},
                    )
            tag_id = self.add_tag(name)
            return make_response(url, 201, json_data={"id": tag_id, "name": name})
        if url == f"{API}/posts":
            if "posts" in self.failing:
                return make_response(url, 400, json_data={"code": "rest_invalid_param", "message": "Invalid parameter(s): date"})
            post_id = self._new_id()
            post = {
                "id": post_id,
                "slug": json["slug"],
                "status": json["status"],
                "link": f"{SITE}/?p={post_id}",
                "payload": json,
            }
            self.posts.append(post)
            return make_response(url, 201, json_data={k: v for k, v in post.items() if k != "payload"})
        return make_response(url, 404, json_data={"code": "rest_no_route"})

    def _public(self, url: str) -> requests.Response:
        url = self.redirects.get(url, url)
        segments = [s for s in urlparse(url).path.split("/") if s]
        slug = segments[-1] if segments else ""
        if any(p["slug"] == slug and p["status"] == "publish" for p in self.posts):
            return make_response(url, text="<html><body>published</body></html>")
        return make_response(url, 404, text="not found")
