import os
import sys

# Ensure project root is on sys.path for imports when running tests directly
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from syndicator.extractors.source_fetcher import BROWSER_HEADERS, fetch_html
from syndicator.utils.errors import FetchError

from fake_wordpress import SOURCE, FakeWordPress, make_response

URL = f"{SOURCE}/2024/03/hello/"


class _OnePageSession:
    def __init__(self, resp):
        self.resp = resp
        self.headers = None

    def get(self, url, headers=None, **kwargs):
        self.headers = headers
        return self.resp


def test_browser_headers_are_sent():
    session = _OnePageSession(make_response(URL, text="<p>ok</p>"))
    assert fetch_html(URL, session) == "<p>ok</p>"
    assert session.headers == BROWSER_HEADERS
    assert "text/html" in session.headers["Accept"]


def test_page_without_charset_is_read_as_utf8():
    # requests assumes ISO-8859-1 for text/* without a charset
    resp = make_response(
        URL,
        content="<p>It’s café</p>".encode("utf-8"),
        headers={"Content-Type": "text/html"},
        encoding="ISO-8859-1",
    )
    assert fetch_html(URL, _OnePageSession(resp)) == "<p>It’s café</p>"


def test_meta_charset_used_when_header_has_none():
    html = '<html><head><meta charset="windows-1252"></head><body><p>café “quoted”</p></body></html>'
    resp = make_response(URL, content=html.encode("cp1252"), headers={"Content-Type": "text/html"}, encoding="ISO-8859-1")
    assert "café “quoted”" in fetch_html(URL, _OnePageSession(resp))


def test_header_charset_wins():
    resp = make_response(
        URL,
        content="<p>café</p>".encode("latin-1"),
        headers={"Content-Type": "text/html; charset=ISO-8859-1"},
        encoding="ISO-8859-1",
    )
    assert fetch_html(URL, _OnePageSession(resp)) == "<p>café</p>"


def test_malformed_url_raises_fetch_error():
    with pytest.raises(FetchError) as excinfo:
        fetch_html("http://[oops/post", FakeWordPress())
    assert excinfo.value.url == "http://[oops/post"


def test_error_status_raises_fetch_error():
    fw = FakeWordPress()
    fw.status_overrides[URL] = 403
    with pytest.raises(FetchError):
        fetch_html(URL, fw)
