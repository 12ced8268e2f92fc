"""
Utility helpers used by the syndication tool.

This subpackage exposes the error taxonomy, the run log writers and the
slug/tag normalization helpers.
"""

from .errors import ERRORS, SyndicationError
from .reports import RunLog, generate_syndication_map_csv

__all__ = ["ERRORS", "SyndicationError", "RunLog", "generate_syndication_map_csv"]
