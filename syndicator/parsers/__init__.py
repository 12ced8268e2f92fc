"""
HTML clean-up passes applied to an extracted article body.

* :mod:`syndicator.parsers.text_repair` – undo UTF-8 text that was decoded
  as Latin-1/Windows-1252
* :mod:`syndicator.parsers.link_rewriter` – point links to other articles of
  the source site at their syndicated copies on the target site
"""

from .link_rewriter import rewrite_internal_links
from .text_repair import MOJIBAKE_REPLACEMENTS, repair_mojibake

__all__ = ["MOJIBAKE_REPLACEMENTS", "repair_mojibake", "rewrite_internal_links"]
