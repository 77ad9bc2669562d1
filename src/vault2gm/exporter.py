"""Convert a session tree into the GM Vault JSON contract."""

from __future__ import annotations

from typing import Any

from vault2gm.config import DEFAULT_PORT
from vault2gm.schemas import Category, Page, Session

DEFAULT_BASE_URL = f"http://localhost:{DEFAULT_PORT}"


class GMVaultJSONBuilder:
    """Serialize :class:`Session` trees, computing page URLs at export time.

    The base URL can be switched after construction (e.g. from the local
    listener to a tunnel address) without rebuilding any tree.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self.base_url = ""
        self.set_base_url(base_url)

    def set_base_url(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def build_json(self, session: Session) -> dict[str, Any]:
        return {"categories": [self._category_json(category) for category in session.categories]}

    def _category_json(self, category: Category) -> dict[str, Any]:
        data: dict[str, Any] = {"name": category.name}
        # Empty arrays are dropped, not emitted as [] or null.
        if category.pages:
            data["pages"] = [self._page_json(page) for page in category.pages]
        if category.categories:
            data["categories"] = [self._category_json(child) for child in category.categories]
        return data

    def _page_json(self, page: Page) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": page.name,
            "url": f"{self.base_url}/pages/{page.slug}",
        }
        if page.block_types:
            data["blockTypes"] = list(page.block_types)
        return data
