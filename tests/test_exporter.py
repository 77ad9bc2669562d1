"""Tests for the GM Vault JSON builder."""

from __future__ import annotations

from vault2gm.exporter import DEFAULT_BASE_URL, GMVaultJSONBuilder
from vault2gm.schemas import Category, Page, Session


def _session() -> Session:
    monsters = Category(name="Monsters", pages=[Page(name="Orc", slug="orc", block_types=["table"])])
    places = Category(
        name="Places",
        pages=[Page(name="Town Hall", slug="town-hall")],
        categories=[monsters, Category(name="Empty")],
    )
    return Session(name="Session", categories=[places])


class TestGMVaultJSONBuilder:
    """Tests for GMVaultJSONBuilder."""

    def test_builds_nested_structure(self) -> None:
        builder = GMVaultJSONBuilder("http://localhost:3000")

        assert builder.build_json(_session()) == {
            "categories": [
                {
                    "name": "Places",
                    "pages": [{"name": "Town Hall", "url": "http://localhost:3000/pages/town-hall"}],
                    "categories": [
                        {
                            "name": "Monsters",
                            "pages": [
                                {
                                    "name": "Orc",
                                    "url": "http://localhost:3000/pages/orc",
                                    "blockTypes": ["table"],
                                }
                            ],
                        },
                        {"name": "Empty"},
                    ],
                }
            ]
        }

    def test_empty_category_has_only_name(self) -> None:
        data = GMVaultJSONBuilder().build_json(Session(name="S", categories=[Category(name="Lonely")]))
        assert data["categories"][0] == {"name": "Lonely"}

    def test_page_without_block_types_has_no_key(self) -> None:
        data = GMVaultJSONBuilder().build_json(_session())
        assert "blockTypes" not in data["categories"][0]["pages"][0]

    def test_empty_session(self) -> None:
        assert GMVaultJSONBuilder().build_json(Session(name="S")) == {"categories": []}

    def test_default_base_url(self) -> None:
        assert GMVaultJSONBuilder().base_url == DEFAULT_BASE_URL == "http://localhost:3000"

    def test_set_base_url_applies_at_export_time(self) -> None:
        builder = GMVaultJSONBuilder()
        session = _session()
        builder.build_json(session)

        builder.set_base_url("https://abc.tunnel.example/")
        data = builder.build_json(session)

        assert data["categories"][0]["pages"][0]["url"] == "https://abc.tunnel.example/pages/town-hall"

    def test_malformed_page_passes_through(self) -> None:
        session = Session(name="S", categories=[Category(name="C", pages=[Page(name="", slug="")])])
        data = GMVaultJSONBuilder("http://h").build_json(session)
        assert data["categories"][0]["pages"] == [{"name": "", "url": "http://h/pages/"}]
