"""Session tree models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Page(BaseModel):
    """A leaf content reference."""

    name: str
    slug: str
    block_types: list[str] = Field(default_factory=list)

    def add_block_type(self, block_type: str) -> None:
        if block_type not in self.block_types:
            self.block_types.append(block_type)


class Category(BaseModel):
    """A named grouping of pages and nested categories."""

    name: str
    pages: list[Page] = Field(default_factory=list)
    categories: list["Category"] = Field(default_factory=list)

    def add_page(self, page: Page) -> None:
        self.pages.append(page)

    def add_category(self, category: "Category") -> None:
        self.categories.append(category)

    def is_empty(self) -> bool:
        """Return True when the category has neither pages nor subcategories."""
        return not self.pages and not self.categories


class Session(BaseModel):
    """Root of one export."""

    name: str
    categories: list[Category] = Field(default_factory=list)

    def add_category(self, category: Category) -> None:
        self.categories.append(category)

    def iter_pages(self):
        """Yield every page in the tree, depth first."""
        stack = list(reversed(self.categories))
        while stack:
            category = stack.pop()
            yield from category.pages
            stack.extend(reversed(category.categories))
