"""
StrToFile Backend — Archive Entry Name Sanitizer
==================================================

What:  Turns an arbitrary record path into a relative ZIP entry name.
How:   A textual scrub: drop every literal "..", switch backslashes to forward
       slashes, collapse doubled separators, trim slashes and whitespace.
Who:   Called by the archive builder once per record.

Examples:
    "readme.txt"            → "readme.txt"
    "\\folder\\file.txt"    → "folder/file.txt"
    "a/../b.txt"            → "a/b.txt"
    "   " / "" / "//"       → "untitled.txt"

Limitation:
    ".." is removed as a substring, not resolved as a path segment, so this is
    not a canonicalizer. Extraction tools should still apply their own checks.
"""

import re
import string

FALLBACK_NAME = "untitled.txt"

_SEPARATOR_RUN = re.compile(r"/{2,}")


def sanitize(raw_name: str) -> str:
    """Return a safe relative entry name for `raw_name`, or "untitled.txt"."""
    if not raw_name or not raw_name.strip():
        return FALLBACK_NAME

    cleaned = raw_name.replace("..", "").replace("\\", "/")
    cleaned = _SEPARATOR_RUN.sub("/", cleaned)
    cleaned = cleaned.strip("/" + string.whitespace)

    if not cleaned.strip():
        return FALLBACK_NAME
    return cleaned
