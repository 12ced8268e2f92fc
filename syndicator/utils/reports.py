"""
Append-only run logs and end-of-run reports.

A syndication run leaves the following files behind (relative to the
directory the :class:`RunLog` was created for):

``post-log.txt``
    One line per publish outcome: the created post's permalink or
    ``Failed: {title}``.
``error-log.txt``
    One ``[timestamp] message`` line per logged error.
``reports/syndication/results.jsonl``
    One JSON object per processed URL describing its :class:`PublishResult`.
``reports/syndication_map.csv``
    Source URL → created draft link, written by
    :func:`generate_syndication_map_csv` once the run is over.
"""

from __future__ import annotations

import csv
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from syndicator.models import PublishResult

POST_LOG_NAME = "post-log.txt"
ERROR_LOG_NAME = "error-log.txt"


def _append_line(path: str, line: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(line + "\n")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    _append_line(path, json.dumps(data, ensure_ascii=False))


class RunLog:
    """Owns the output files of a run."""

    def __init__(self, base_dir: str = ".") -> None:
        self.base_dir = base_dir
        self.post_log = os.path.join(base_dir, POST_LOG_NAME)
        self.error_log = os.path.join(base_dir, ERROR_LOG_NAME)
        self.report_dir = os.path.join(base_dir, "reports", "syndication")
        self.results_log = os.path.join(self.report_dir, "results.jsonl")
        self.map_path = os.path.join(base_dir, "reports", "syndication_map.csv")

    def append_error(self, message: str) -> str:
        timestamp = datetime.now(timezone.utc).isoformat()
        line = f"[{timestamp}] {message}"
        _append_line(self.error_log, line)
        return line

    def append_post_link(self, link: str) -> None:
        _append_line(self.post_log, link)

    def append_post_failure(self, title: str) -> None:
        _append_line(self.post_log, f"Failed: {title}")

    def append_result(self, result: PublishResult) -> None:
        _write_jsonl(self.results_log, result.model_dump(mode="json"))


def generate_syndication_map_csv(results: Iterable[PublishResult], *, out_path: str) -> str:
    """Write a CSV mapping source article URLs to their new draft links.

    Parameters
    ----------
    results:
        Publish results of a run.  Only ``created`` results with a link are
        written.
    out_path:
        Location of the CSV file.  The parent directory is created
        automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["SourceURL", "Slug", "DraftURL"])
        for result in results:
            if result.status != "created" or not result.link:
                continue
            writer.writerow([result.source_url, result.slug, result.link])
    return out_path
