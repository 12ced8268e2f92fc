from __future__ import annotations

from typing import Dict, Optional

import requests
from bs4.dammit import EncodingDetector

from syndicator.utils.errors import FetchError

# Some source sites vary or block responses by client fingerprint.
BROWSER_HEADERS: Dict[str, str] = {
    "Accept": "text/html;q=1.0,*/*;q=0.8",
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
}


def decode_html(resp: requests.Response) -> str:
    """
    Decode a page body.

    A charset in the ``Content-Type`` header wins.  Without one, requests
    would fall back to ISO-8859-1, so the ``<meta charset>`` of the page is
    used instead, then UTF-8.
    """
    content_type = (resp.headers.get("Content-Type") or "").lower()
    if "charset=" in content_type:
        return resp.text
    declared = EncodingDetector.find_declared_encoding(resp.content, is_html=True)
    for encoding in (declared, "utf-8"):
        if not encoding:
            continue
        try:
            return resp.content.decode(encoding)
        except (LookupError, UnicodeDecodeError):
            continue
    return resp.content.decode(resp.apparent_encoding or "utf-8", errors="replace")


def fetch_html(url: str, session: Optional[requests.Session] = None) -> str:
    """
    Download the page at ``url`` and return its HTML text.

    :param url: Source article URL.
    :param session: Optional ``requests`` session, a module-level request is
        made when omitted.
    :return: The response body decoded as text.
    :raises FetchError: on malformed URLs, transport errors or non-success
        status codes.
    """
    http = session or requests
    try:
        resp = http.get(url, headers=BROWSER_HEADERS)
        resp.raise_for_status()
    except (requests.RequestException, ValueError) as e:
        raise FetchError(url, e) from e
    return decode_html(resp)
