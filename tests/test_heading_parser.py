"""Tests for in-document extraction (flat and heading-structured)."""

from __future__ import annotations

from pathlib import Path

import pytest

from vault2gm.parsers import HeadingTreeParser, ParseMode, create_parser
from vault2gm.parsers.headings import extract_flat, extract_structured
from vault2gm.vault import Vault


SESSION_DOCUMENT = """# Session 12

Recap of the road: [[Old Road]].

## Locations
- [[Town Hall]] and [[Docks|The Docks]]
- again [[Town Hall|Duplicate Name]]

## Tables
[[Random Encounters]]

## Enemies
[[Bandit Chief]]
### Goblins
[[Goblin Archer]]
#### Bosses
[[Goblin King]]
### Wolves
[[Dire Wolf]]

## Notes
[[Secret Plot]]
### Deeper notes
[[Hidden Thing]]

## Quotes
> "Run!" [[Famous Line]]

```markdown
## Not a heading
[[Code Sample]]
```

### Plain sub heading
[[After Sub Heading]]
"""


class TestExtractFlat:
    """Tests for the flat extraction variant."""

    def test_collects_every_reference_in_one_category(self) -> None:
        session = extract_flat("See [[A]] and [[B|Bee]].\n# Heading [[C]]", "Entry")

        assert session.name == "Entry"
        assert [category.name for category in session.categories] == ["Pages"]
        pages = session.categories[0].pages
        assert [(page.name, page.slug) for page in pages] == [("A", "a"), ("Bee", "b"), ("C", "c")]

    def test_deduplicates_by_slug_first_wins(self) -> None:
        session = extract_flat("[[A]] [[a|Other]]\n[[A]]", "Entry")

        pages = session.categories[0].pages
        assert len(pages) == 1
        assert pages[0].name == "A"

    def test_omits_category_without_references(self) -> None:
        assert extract_flat("# Nothing\n\nplain text", "Entry").categories == []

    def test_skips_references_with_empty_slug(self) -> None:
        session = extract_flat("[[!!!]] [[Real]]", "Entry")
        assert [page.slug for page in session.categories[0].pages] == ["real"]


class TestExtractStructured:
    """Tests for the heading-structured extraction variant."""

    @pytest.fixture
    def session(self):
        return extract_structured(SESSION_DOCUMENT, "Session 12")

    def test_top_level_heading_becomes_root_category(self, session) -> None:
        assert [category.name for category in session.categories] == ["Session 12"]
        root = session.categories[0]
        assert [page.slug for page in root.pages] == ["old-road"]

    def test_second_level_headings_nest_under_first_level(self, session) -> None:
        names = [category.name for category in session.categories[0].categories]
        assert names == ["Locations", "Tables", "Enemies", "Quotes"]

    def test_duplicate_references_keep_first_display_text(self, session) -> None:
        locations = session.categories[0].categories[0]
        assert [(page.name, page.slug) for page in locations.pages] == [
            ("Town Hall", "town-hall"),
            ("The Docks", "docks"),
        ]

    def test_keyword_headings_set_block_types(self, session) -> None:
        tables = session.categories[0].categories[1]
        quotes = session.categories[0].categories[3]
        assert tables.pages[0].block_types == ["table"]
        assert quotes.pages[0].block_types == ["quote"]
        assert session.categories[0].pages[0].block_types == []

    def test_enemies_heading_creates_nested_categories(self, session) -> None:
        enemies = session.categories[0].categories[2]
        assert [page.slug for page in enemies.pages] == ["bandit-chief"]
        assert [category.name for category in enemies.categories] == ["Goblins", "Wolves"]

        goblins, wolves = enemies.categories
        assert [page.slug for page in goblins.pages] == ["goblin-archer"]
        assert [category.name for category in goblins.categories] == ["Bosses"]
        assert [page.slug for page in goblins.categories[0].pages] == ["goblin-king"]
        assert [page.slug for page in wolves.pages] == ["dire-wolf"]

    def test_ignore_headings_skip_their_content(self, session) -> None:
        slugs = [page.slug for page in session.iter_pages()]
        assert "secret-plot" not in slugs
        assert "hidden-thing" not in slugs
        assert "Notes" not in [category.name for category in session.categories[0].categories]

    def test_plain_sub_heading_keeps_links_in_enclosing_category(self, session) -> None:
        quotes = session.categories[0].categories[3]
        assert [page.slug for page in quotes.pages] == ["famous-line", "after-sub-heading"]
        assert quotes.pages[1].block_types == ["quote"]

    def test_fenced_code_is_skipped(self, session) -> None:
        slugs = [page.slug for page in session.iter_pages()]
        assert "code-sample" not in slugs

    def test_links_before_any_heading_go_to_pages_category(self) -> None:
        session = extract_structured("[[Loose]]\n# Act One\n[[Inside]]", "Doc")
        assert [category.name for category in session.categories] == ["Pages", "Act One"]
        assert session.categories[0].pages[0].slug == "loose"

    def test_images_heading_and_inherited_block_type(self) -> None:
        session = extract_structured("## Images\n[[Map]]\n", "Doc")
        assert session.categories[0].pages[0].block_types == ["image"]

    def test_custom_ignore_headings(self) -> None:
        session = extract_structured(
            "## Spoilers\n[[Twist]]\n## Notes\n[[Kept]]",
            "Doc",
            ignore_headings={"spoilers"},
        )
        assert [category.name for category in session.categories] == ["Notes"]
        assert [page.slug for page in session.iter_pages()] == ["kept"]


class TestHeadingTreeParser:
    """Tests for HeadingTreeParser against a vault."""

    @pytest.mark.asyncio
    async def test_structured_mode_names_session_after_title(self, tmp_path: Path) -> None:
        (tmp_path / "Session.md").write_text(SESSION_DOCUMENT, encoding="utf-8")
        vault = Vault(tmp_path)

        parser = create_parser(ParseMode.HEADINGS, vault)
        session = await parser.parse(vault.entry("Session.md"))

        assert isinstance(parser, HeadingTreeParser)
        assert parser.mode is ParseMode.HEADINGS
        assert session.name == "Session 12"

    @pytest.mark.asyncio
    async def test_flat_mode_names_session_after_file(self, tmp_path: Path) -> None:
        (tmp_path / "Session.md").write_text(SESSION_DOCUMENT, encoding="utf-8")
        vault = Vault(tmp_path)

        parser = create_parser("flat", vault)
        session = await parser.parse(vault.entry("Session.md"))

        assert parser.mode is ParseMode.FLAT
        assert session.name == "Session"
        slugs = [page.slug for page in session.categories[0].pages]
        assert slugs[:3] == ["old-road", "town-hall", "docks"]
        assert "secret-plot" in slugs
