from __future__ import annotations

from html import unescape
import re
from typing import Any, Dict, Iterable, List, Optional


def normalize_label(value: str) -> str:
    """Unescape HTML entities and collapse inner whitespace.

    Preserves original casing but trims leading/trailing spaces
    and converts sequences of whitespace to a single space.
    """
    if not value:
        return ""
    text = unescape(value).strip()
    return re.sub(r"\s+", " ", text)


def clean_tag_names(names: Iterable[str]) -> List[str]:
    """Normalize tag labels, dropping empty ones. Order and repeats are kept."""
    result: List[str] = []
    for name in names:
        label = normalize_label(name)
        if label:
            result.append(label)
    return result


def find_exact_term(terms: Iterable[Dict[str, Any]], name: str) -> Optional[Dict[str, Any]]:
    """
    Pick the term whose name equals ``name`` from a WordPress search result.

    The REST search is a substring match and returns names HTML-escaped
    (``&amp;``), so names are compared case-insensitively after
    normalization.
    """
    wanted = normalize_label(name).lower()
    for term in terms or []:
        if normalize_label(str(term.get("name") or "")).lower() == wanted:
            return term
    return None
