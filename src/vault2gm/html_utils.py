"""Shared HTML utilities for rendered vault pages."""

from __future__ import annotations

import re

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML post-processing (pip install beautifulsoup4)."
    ) from exc


PRESENTATIONAL_CLASSES: dict[str, str] = {
    "p": "gm-paragraph",
    "ul": "gm-list-bulleted",
    "ol": "gm-list-numbered",
    "pre": "gm-code-block",
    "a": "gm-link",
    "strong": "gm-bold",
    "b": "gm-bold",
    "em": "gm-italic",
    "i": "gm-italic",
    "u": "gm-underline",
    "s": "gm-strikethrough",
    "del": "gm-strikethrough",
    "strike": "gm-strikethrough",
    "blockquote": "gm-quote",
    "table": "gm-table",
    "hr": "gm-divider",
}
LIST_ITEM_CLASS = "gm-list-item"
INLINE_CODE_CLASS = "gm-code-inline"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_HTML_ESCAPE_RE = re.compile(r"[&<>\"']")


def escape_html(text: str) -> str:
    """Escape the five XSS-relevant characters."""
    return _HTML_ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group(0)], text)


def normalize_base_url(base_url: str | None) -> str:
    """Strip trailing slashes so that ``base + "/path"`` never doubles them."""
    return (base_url or "").strip().rstrip("/")


def has_scheme(url: str) -> bool:
    """Return True for URLs that carry a scheme (``https:``, ``data:``...)."""
    return bool(_SCHEME_RE.match(url))


def apply_presentational_classes(html: str) -> str:
    """Add the presentational class of each structural tag.

    Tags whose ``class`` attribute already contains the target class are left
    alone, so running the pass again yields byte-identical output.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(list(PRESENTATIONAL_CLASSES)):
        _add_class(tag, PRESENTATIONAL_CLASSES[tag.name])

    for code in soup.find_all("code"):
        if code.find_parent("pre") is None:
            _add_class(code, INLINE_CODE_CLASS)

    # Second pass, scoped to lists that already carry their class.
    for list_tag in soup.find_all(["ul", "ol"]):
        if not _has_class(list_tag, PRESENTATIONAL_CLASSES[list_tag.name]):
            continue
        for item in list_tag.find_all("li", recursive=False):
            _add_class(item, LIST_ITEM_CLASS)

    return str(soup)


def absolutize_urls(html: str, base_url: str | None) -> str:
    """Prefix root-relative ``href``/``src`` values with ``base_url``.

    Protocol-relative (``//host``) and already absolute URLs are untouched.
    """
    base = normalize_base_url(base_url)
    if not base:
        return html

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all("a", href=True):
        _absolutize_attr(tag, "href", base)
    for tag in soup.find_all("img", src=True):
        _absolutize_attr(tag, "src", base)
    return str(soup)


def _absolutize_attr(tag: Tag, attr: str, base: str) -> None:
    value = tag.get(attr)
    if isinstance(value, str) and value.startswith("/") and not value.startswith("//"):
        tag[attr] = base + value


def _has_class(tag: Tag, class_name: str) -> bool:
    return class_name in " ".join(tag.get("class", []))


def _add_class(tag: Tag, class_name: str) -> None:
    if _has_class(tag, class_name):
        return
    tag["class"] = [*tag.get("class", []), class_name]
