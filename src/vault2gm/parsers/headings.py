"""In-document extraction: parse a single session page instead of a folder tree.

Conventions for the heading-structured variant:

- ``#`` and ``##`` headings open categories (``##`` nests under the current ``#``).
- Cross-references below a heading become pages of the innermost category.
- ``Tables``, ``Quotes`` and ``Images`` headings tag their pages with a block type.
- Under ``Enemies``, deeper headings open nested sub-categories.
- Ignore headings (notes, recaps...) are skipped together with their content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from vault2gm.parsers.base import (
    ParseMode,
    TreeParser,
    find_title,
    iter_cross_references,
    strip_cross_references,
)
from vault2gm.schemas import Category, Page, Session
from vault2gm.slugify import slugify
from vault2gm.utils.logging_config import get_logger
from vault2gm.vault import Vault, VaultEntry

logger = get_logger(__name__)

FALLBACK_CATEGORY_NAME = "Pages"

BLOCK_TYPE_HEADINGS = {
    "tables": "table",
    "quotes": "quote",
    "images": "image",
}
NESTING_HEADINGS = frozenset({"enemies"})
DEFAULT_IGNORE_HEADINGS = frozenset(
    {"notes", "summary", "recap", "narrative", "session notes", "gm notes"}
)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
_FENCE_RE = re.compile(r"^\s*(```|~~~)")


@dataclass
class _Frame:
    level: int
    category: Category | None
    block_type: str | None = None
    nesting: bool = False

    @property
    def ignored(self) -> bool:
        return self.category is None


class _PageCollector:
    """First-wins slug de-duplication shared by both variants."""

    def __init__(self) -> None:
        self.seen: set[str] = set()

    def make_page(self, target: str, display: str, block_type: str | None) -> Page | None:
        slug = slugify(target)
        if not slug:
            logger.debug("Skipping cross-reference without a usable slug", extra={"target": target})
            return None
        if slug in self.seen:
            return None
        self.seen.add(slug)
        return Page(name=display, slug=slug, block_types=[block_type] if block_type else [])


def extract_flat(content: str, session_name: str) -> Session:
    """Collect every cross-reference of ``content`` into one ``Pages`` category."""
    session = Session(name=session_name)
    category = Category(name=FALLBACK_CATEGORY_NAME)
    collector = _PageCollector()

    for line in content.splitlines():
        for target, display in iter_cross_references(line):
            page = collector.make_page(target, display, None)
            if page is not None:
                category.add_page(page)

    if not category.is_empty():
        session.add_category(category)
    return session


def extract_structured(
    content: str,
    session_name: str,
    *,
    ignore_headings: Iterable[str] = DEFAULT_IGNORE_HEADINGS,
) -> Session:
    """Build categories from the heading structure of ``content``."""
    ignored_titles = {title.casefold() for title in ignore_headings}
    session = Session(name=session_name)
    collector = _PageCollector()
    stack: list[_Frame] = []
    fallback: Category | None = None
    in_fence = False

    for line in content.splitlines():
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            level = len(heading.group(1))
            title = strip_cross_references(heading.group(2)).strip()
            _open_heading(session, stack, level, title, ignored_titles)
            continue

        frame = _current_frame(stack)
        if frame is not None and frame.ignored:
            continue

        for target, display in iter_cross_references(line):
            block_type = frame.block_type if frame else None
            page = collector.make_page(target, display, block_type)
            if page is None:
                continue
            if frame is None:
                if fallback is None:
                    fallback = Category(name=FALLBACK_CATEGORY_NAME)
                    session.add_category(fallback)
                fallback.add_page(page)
            else:
                frame.category.add_page(page)

    return session


def _current_frame(stack: list[_Frame]) -> _Frame | None:
    return stack[-1] if stack else None


def _open_heading(
    session: Session,
    stack: list[_Frame],
    level: int,
    title: str,
    ignored_titles: set[str],
) -> None:
    while stack and stack[-1].level >= level:
        stack.pop()

    parent = _current_frame(stack)
    key = title.casefold()

    if (parent is not None and parent.ignored) or key in ignored_titles:
        stack.append(_Frame(level=level, category=None))
        return

    nested_under_parent = parent is not None and parent.nesting
    if level > 2 and not nested_under_parent:
        # Plain sub-heading: its links stay in the enclosing category.
        return

    category = Category(name=title)
    if parent is None:
        session.add_category(category)
    else:
        parent.category.add_category(category)

    stack.append(
        _Frame(
            level=level,
            category=category,
            block_type=BLOCK_TYPE_HEADINGS.get(key) or (parent.block_type if parent else None),
            nesting=key in NESTING_HEADINGS or nested_under_parent,
        )
    )


class HeadingTreeParser(TreeParser):
    """Parse the entry document's body.

    ``flat=True`` selects the degraded extraction that ignores headings and
    gathers every cross-reference into a single category.
    """

    def __init__(
        self,
        vault: Vault,
        *,
        flat: bool = False,
        ignore_headings: Iterable[str] = DEFAULT_IGNORE_HEADINGS,
    ) -> None:
        super().__init__(vault)
        self.flat = flat
        self.ignore_headings = frozenset(ignore_headings)

    @property
    def mode(self) -> ParseMode:  # type: ignore[override]
        return ParseMode.FLAT if self.flat else ParseMode.HEADINGS

    async def parse(self, entry: VaultEntry) -> Session:
        content = await self.vault.read_text(entry)
        if self.flat:
            return extract_flat(content, entry.basename)
        session_name = find_title(content) or entry.basename
        return extract_structured(content, session_name, ignore_headings=self.ignore_headings)
