"""
Template text helpers.
"""

import re

_WHITESPACE_RUN = re.compile(r"\s+")
_BETWEEN_TAGS = re.compile(r">\s+<")

def minify_template(text: str) -> str:
    """Collapse whitespace in a template before it is stored.

    Runs of whitespace become one space, whitespace between tags is removed
    and the ends are stripped. Applying it twice gives the same string.
    """
    if not text:
        return ""
    minified = _WHITESPACE_RUN.sub(" ", text)
    minified = _BETWEEN_TAGS.sub("><", minified)
    minified = minified.replace("\n", "").replace("\t", "")
    return minified.strip()

def template_preview(text: str, limit: int = 80) -> str:
    """Single-line excerpt for tables and listings."""
    flat = minify_template(text)
    if len(flat) <= limit:
        return flat
    return flat[: max(limit - 3, 0)].rstrip() + "..."
