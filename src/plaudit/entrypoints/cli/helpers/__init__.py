"""CLI helpers for PLAUDIT.

Display-safe database URLs, stderr status lines with ASCII fallbacks, the
``-L NAME=LEVEL`` parser and JSON output for command results.
"""

from .db_url import sanitize_url
from .messages import echo_json, error, success, warn

__all__ = ["echo_json", "error", "sanitize_url", "success", "warn"]
