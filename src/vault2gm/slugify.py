"""Text to URL-safe identifier normalization."""

from __future__ import annotations

import re

_STRIP_RE = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATOR_RE = re.compile(r"[\s_-]+", re.ASCII)
_EDGE_HYPHEN_RE = re.compile(r"^-+|-+$")


def slugify(text: str) -> str:
    """Normalize ``text`` into a slug.

    Lower-cases and trims the text, drops anything that is not an ASCII
    word character, whitespace or hyphen (accented letters included), then
    collapses separator runs into a single hyphen. The result is stable but
    not guaranteed unique; callers de-duplicate.

    >>> slugify("My Page!")
    'my-page'
    """
    slug = text.lower().strip()
    slug = _STRIP_RE.sub("", slug)
    slug = _SEPARATOR_RE.sub("-", slug)
    return _EDGE_HYPHEN_RE.sub("", slug)
