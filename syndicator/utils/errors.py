"""
Error taxonomy for the syndication pipeline.

Every stage of the pipeline raises its own exception type so the
orchestrator can decide, per stage, whether a failure aborts the current
URL or merely degrades the resulting post.  Only :class:`ConfigError` is
fatal to a whole run.

The ``ERRORS`` dictionary maps stage codes to human readable messages used
as prefixes in the error log.  Codes not present in the dictionary fall
back to the code itself.
"""

from __future__ import annotations

from typing import Dict, Optional

ERRORS: Dict[str, str] = {
    "FETCH": "Failed to fetch post",
    "EXTRACT": "Post content not found",
    "VERIFY": "Could not verify whether the post already exists",
    "MEDIA_UPLOAD": "Failed to upload image",
    "TAXONOMY": "Failed to resolve tag",
    "PUBLISH": "Failed to create post",
    "LINK_PROBE": "Failed to probe link target",
    "CONFIG": "Error loading config file",
}


def error_message(code: str, detail: str = "") -> str:
    """Return the log line for ``code`` with an optional ``detail`` suffix."""
    message = ERRORS.get(code, code)
    return f"{message}: {detail}" if detail else message


class SyndicationError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(SyndicationError):
    """Missing or unreadable configuration. Fatal at startup."""


class FetchError(SyndicationError):
    """Transport failure or non-success status while fetching a source page."""

    def __init__(self, url: str, cause: Optional[BaseException] = None) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"{url} - {cause}" if cause is not None else url)


class ExtractionError(SyndicationError):
    """The fetched document has no parseable content."""


class VerificationError(SyndicationError):
    """An existence probe could not give a definitive answer."""


class UploadError(SyndicationError):
    """The featured image could not be downloaded or uploaded."""


class TaxonomyError(SyndicationError):
    """A single tag could not be found or created."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"'{name}': {message}")


class PublishError(SyndicationError):
    """The post creation request failed."""
