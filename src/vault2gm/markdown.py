"""Render vault markdown documents to HTML pages."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from vault2gm.html_utils import (
    INLINE_CODE_CLASS,
    LIST_ITEM_CLASS,
    PRESENTATIONAL_CLASSES,
    absolutize_urls,
    apply_presentational_classes,
    escape_html,
    has_scheme,
    normalize_base_url,
)
from vault2gm.parsers.base import split_cross_reference
from vault2gm.schemas import GalleryImage
from vault2gm.slugify import slugify

GALLERY_COLUMNS = 3

_URL_ATTRS = {"link_open": "href", "image": "src"}
_RAW_HTML_TOKENS = frozenset({"html_block", "html_inline"})

_PAGE_STYLE = """
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
      line-height: 1.6;
      max-width: 800px;
      margin: 0 auto;
      padding: 20px;
      background: #1e1e1e;
      color: #d4d4d4;
    }
    h1, h2, h3, h4, h5, h6 { color: #4ec9b0; margin-top: 1.5em; }
    a, .gm-link { color: #569cd6; }
    .gm-code-inline { background: #252526; padding: 2px 6px; border-radius: 3px; }
    .gm-code-block { background: #252526; padding: 15px; border-radius: 5px; overflow-x: auto; }
    .gm-quote { border-left: 4px solid #569cd6; padding-left: 15px; margin-left: 0; color: #858585; }
    .gm-table { border-collapse: collapse; width: 100%; margin: 1em 0; }
    .gm-table th, .gm-table td { border: 1px solid #3e3e3e; padding: 8px; text-align: left; }
    .gm-table th { background: #2d2d30; color: #4ec9b0; }
    .gm-divider { border: 0; border-top: 1px solid #3e3e3e; }
    .gm-gallery-row { display: flex; gap: 12px; margin-bottom: 12px; }
    .gm-gallery-cell { flex: 1 1 0; text-align: center; }
    .gm-gallery-cell img { max-width: 100%; border-radius: 4px; }
"""


def _cross_reference_rule(state: StateInline, silent: bool) -> bool:
    start = state.pos
    if not state.src.startswith("[[", start):
        return False
    end = state.src.find("]]", start + 2)
    if end < 0:
        return False
    content = state.src[start + 2 : end]
    if not content.strip() or "]" in content:
        return False

    if not silent:
        target, display = split_cross_reference(content)
        base = normalize_base_url((state.env or {}).get("base_url"))
        token = state.push("cross_reference", "a", 0)
        token.attrSet("href", f"{base}/pages/{slugify(target)}")
        token.content = display or target
        token.meta = {"target": target}
    state.pos = end + 2
    return True


def _render_cross_reference(self, tokens, idx, options, env) -> str:
    token = tokens[idx]
    return f"<a{self.renderAttrs(token)}>{escape_html(token.content)}</a>"


def cross_reference_plugin(md: MarkdownIt) -> None:
    """Turn ``[[target]]`` / ``[[target|Display]]`` into page links.

    Runs as an inline rule, so code spans and raw HTML are never rewritten.
    """
    md.inline.ruler.before("link", "cross_reference", _cross_reference_rule)
    md.add_render_rule("cross_reference", _render_cross_reference)


def _token_class(token: Token) -> str | None:
    if token.nesting == -1 or token.type == "fence":
        return None
    if token.type == "code_inline":
        return INLINE_CODE_CLASS
    if token.type == "code_block":
        return PRESENTATIONAL_CLASSES["pre"]
    if token.type == "list_item_open":
        return LIST_ITEM_CLASS
    return PRESENTATIONAL_CLASSES.get(token.tag)


def _decorate_token(token: Token, base: str) -> None:
    class_name = _token_class(token)
    if class_name and class_name not in str(token.attrGet("class") or ""):
        token.attrJoin("class", class_name)

    attr = _URL_ATTRS.get(token.type)
    value = token.attrGet(attr) if attr else None
    if base and isinstance(value, str) and value.startswith("/") and not value.startswith("//"):
        token.attrSet(attr, base + value)


def _presentation_rule(state: StateCore) -> None:
    base = normalize_base_url((state.env or {}).get("base_url"))
    for token in state.tokens:
        _decorate_token(token, base)
        for child in token.children or ():
            _decorate_token(child, base)


def _render_fence(self, tokens, idx, options, env) -> str:
    # The default fence renderer puts token attributes on <code>, not <pre>.
    html = self.fence(tokens, idx, options, env)
    prefix = "<pre>"
    if html.startswith(prefix):
        html = f'<pre class="{PRESENTATIONAL_CLASSES["pre"]}">' + html[len(prefix) :]
    return html


def presentation_plugin(md: MarkdownIt) -> None:
    """Add presentational classes and absolute URLs on the token stream.

    The base URL comes from ``env["base_url"]``.
    """
    md.core.ruler.push("presentation", _presentation_rule)
    md.add_render_rule("fence", _render_fence)


def _has_raw_html(tokens: list[Token]) -> bool:
    for token in tokens:
        if token.type in _RAW_HTML_TOKENS:
            return True
        if token.children and _has_raw_html(token.children):
            return True
    return False


class MarkdownRenderer:
    """Markdown to HTML for single pages, fragments and image galleries."""

    def __init__(self) -> None:
        self.md = MarkdownIt(
            "default",
            {"html": True, "linkify": True, "typographer": True},
        )
        self.md.use(cross_reference_plugin)
        self.md.use(presentation_plugin)

    def render(self, text: str, *, base_url: str | None = None) -> str:
        """Render a fragment.

        With ``base_url``, cross-references and root-relative links and images
        become absolute. Raw HTML in ``text`` gets the same treatment in a
        BeautifulSoup pass, which only runs when such HTML is present.
        """
        env: dict[str, Any] = {"base_url": base_url}
        tokens = self.md.parse(text, env)
        html = self.md.renderer.render(tokens, self.md.options, env)
        if _has_raw_html(tokens):
            html = absolutize_urls(apply_presentational_classes(html), base_url)
        return html

    def render_page(self, text: str, title: str, base_url: str | None = None) -> str:
        """Render ``text`` as a complete HTML document."""
        return _page_shell(title, self.render(text, base_url=base_url))

    def render_image_gallery(
        self,
        images: Iterable[GalleryImage | Mapping[str, str]],
        title: str,
        base_url: str | None = None,
    ) -> str:
        """Lay out images in rows of three, padding the last row with empty cells."""
        base = normalize_base_url(base_url)
        items = [GalleryImage.model_validate(image) for image in images]

        rows: list[str] = []
        for offset in range(0, len(items), GALLERY_COLUMNS):
            chunk = items[offset : offset + GALLERY_COLUMNS]
            cells = [_gallery_cell(image, base) for image in chunk]
            cells.extend(
                '<div class="gm-gallery-cell gm-gallery-empty"></div>'
                for _ in range(GALLERY_COLUMNS - len(chunk))
            )
            rows.append('<div class="gm-gallery-row">' + "".join(cells) + "</div>")

        content = f'<h1>{escape_html(title)}</h1>\n<div class="gm-gallery">\n' + "\n".join(rows) + "\n</div>"
        return _page_shell(title, content)


def _gallery_cell(image: GalleryImage, base: str) -> str:
    if has_scheme(image.path) or not base:
        src = image.path
    else:
        src = f"{base}/{image.path.lstrip('/')}"
    name = escape_html(image.name)
    return (
        '<div class="gm-gallery-cell">'
        f'<figure><img src="{escape_html(src)}" alt="{name}"><figcaption>{name}</figcaption></figure>'
        "</div>"
    )


def _page_shell(title: str, content: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{escape_html(title)}</title>\n"
        f"  <style>{_PAGE_STYLE}  </style>\n"
        "</head>\n"
        "<body>\n"
        f'<main class="gm-content">\n{content}\n</main>\n'
        "</body>\n"
        "</html>\n"
    )
