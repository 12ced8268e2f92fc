"""
Repair of double-encoded text.

Pages served without a charset are often decoded as Latin-1 or
Windows-1252 somewhere along the way, which turns every multi-byte UTF-8
punctuation mark into a short run of accented garbage (``â€™`` instead of
``’``).  :func:`repair_mojibake` replaces the common runs with the
characters they were meant to be.  It is a pure string transform.
"""

from __future__ import annotations

from typing import List, Tuple

# Longer runs come first; the bare "â€" entry catches a right double quote
# whose trailing 0x9D byte was dropped.
MOJIBAKE_REPLACEMENTS: List[Tuple[str, str]] = [
    ("â€™", "’"),  # right single quote
    ("â€˜", "‘"),  # left single quote
    ("â€œ", "“"),  # left double quote
    ("â€\u009d", "”"),  # right double quote
    ("â€“", "–"),  # en dash
    ("â€”", "—"),  # em dash
    ("â€¦", "…"),  # ellipsis
    ("â€¢", "•"),  # bullet
    ("â€", "”"),
    ("Â ", " "),  # non-breaking space
]


def repair_mojibake(text: str) -> str:
    """Replace known mis-encoded sequences in ``text``."""
    if not text:
        return text
    for bad, good in MOJIBAKE_REPLACEMENTS:
        text = text.replace(bad, good)
    return text
