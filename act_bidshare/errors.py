"""
Error types raised by the bid adjuster.

ConfigError        - invalid client config, raised before any keyword is touched
KeywordSourceError - fetching or writing keyword data failed; aborts the run
"""
from __future__ import annotations

from typing import List, Optional


class ConfigError(ValueError):
    """Client configuration is missing or invalid."""

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        self.problems = list(problems or [])
        if self.problems:
            message = message + "\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class KeywordSourceError(RuntimeError):
    """The keyword data source failed to fetch or update keywords."""

    def __init__(self, message: str, request_id: Optional[str] = None):
        self.request_id = request_id
        super().__init__(message)
