from __future__ import annotations

import sys
from dataclasses import dataclass, field

from syndicator.utils.reports import RunLog


@dataclass
class RunContext:
    """
    Mutable state of one syndication run, passed explicitly to every stage.

    ``posts_created`` is the only counter that survives from one URL to the
    next; everything else about a URL lives in the records it produces.
    """

    verbose: bool = False
    posts_created: int = 0
    log: RunLog = field(default_factory=RunLog)

    def log_verbose(self, message: str) -> None:
        if self.verbose:
            print(message)

    def log_error(self, message: str) -> None:
        line = self.log.append_error(message)
        if self.verbose:
            print(line, file=sys.stderr)

    def report_ok(self, message: str) -> None:
        print(f"[OK] {message}")
