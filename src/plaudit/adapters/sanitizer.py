"""Regex-based sanitizer for review comments.

Comments are shown to other users on tutor pages, so stored text must carry
no markup and no invisible control characters. Steps, in order:

1. trim surrounding whitespace
2. drop NUL and the other C0 control characters (except tab, LF, CR) and DEL
3. collapse every whitespace run (tabs and newlines included) to one space
4. strip anything that looks like an HTML tag
5. trim again

Length policy is the caller's: see `validate_create_review`.
"""

import re

from plaudit.interfaces import sanitizer

# pylint: disable=too-few-public-methods

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
WHITESPACE_PATTERN = re.compile(r"\s+")
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")


class RegexSanitizer(sanitizer.Sanitizer):
    """Sanitizer implementation using regular expressions."""

    def sanitize(self, text: str) -> str:
        cleaned = text.strip()
        cleaned = CONTROL_CHARS_PATTERN.sub("", cleaned)
        cleaned = WHITESPACE_PATTERN.sub(" ", cleaned)
        cleaned = HTML_TAG_PATTERN.sub("", cleaned)
        return cleaned.strip()
