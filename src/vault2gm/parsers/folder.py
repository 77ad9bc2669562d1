"""Folder-hierarchy extraction: folders become categories, documents become pages."""

from __future__ import annotations

from vault2gm.exceptions import ReadFailureError
from vault2gm.parsers.base import ParseMode, TreeParser, find_title
from vault2gm.schemas import Category, Page, Session
from vault2gm.slugify import slugify
from vault2gm.utils.logging_config import get_logger
from vault2gm.vault import EntryKind, VaultEntry

logger = get_logger(__name__)


def _sort_key(entry: VaultEntry) -> tuple[str, str]:
    return (entry.name.casefold(), entry.name)


class FolderTreeParser(TreeParser):
    """Treat the entry document's parent folder as the export root."""

    mode = ParseMode.FOLDER

    async def parse(self, entry: VaultEntry) -> Session:
        root_name = await self._document_name(entry)
        root = Category(name=root_name)
        await self._scan_folder(self.vault.parent(entry), root, exclude=entry)

        session = Session(name=root_name)
        session.add_category(root)
        return session

    async def _scan_folder(
        self, folder: VaultEntry, category: Category, *, exclude: VaultEntry
    ) -> None:
        folders: list[VaultEntry] = []
        files: list[VaultEntry] = []
        try:
            children = self.vault.list_children(folder)
        except ReadFailureError as exc:
            logger.warning(
                "Skipping unreadable folder",
                extra={"path": folder.relpath, "error": str(exc)},
            )
            return

        for child in children:
            if child.kind is EntryKind.FOLDER:
                folders.append(child)
            elif child.is_markdown:
                files.append(child)

        for file in sorted(files, key=_sort_key):
            if file.path == exclude.path:
                continue
            name = await self._document_name(file)
            category.add_page(Page(name=name, slug=slugify(file.basename)))

        for sub_folder in sorted(folders, key=_sort_key):
            sub_category = Category(name=sub_folder.name)
            await self._scan_folder(sub_folder, sub_category, exclude=exclude)
            category.add_category(sub_category)

    async def _document_name(self, entry: VaultEntry) -> str:
        try:
            content = await self.vault.read_text(entry)
        except ReadFailureError as exc:
            logger.warning(
                "Falling back to file name for unreadable document",
                extra={"path": entry.relpath, "error": str(exc)},
            )
            return entry.basename
        return find_title(content) or entry.basename
