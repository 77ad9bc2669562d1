"""Tree extraction strategies."""

from __future__ import annotations

from vault2gm.parsers.base import ParseMode, TreeParser
from vault2gm.parsers.folder import FolderTreeParser
from vault2gm.parsers.headings import HeadingTreeParser
from vault2gm.vault import Vault


def create_parser(mode: ParseMode | str, vault: Vault) -> TreeParser:
    """Return the parser for ``mode``.

    Raises:
        ValueError: If ``mode`` is not a known :class:`ParseMode`.
    """
    mode = ParseMode(mode)
    if mode is ParseMode.FOLDER:
        return FolderTreeParser(vault)
    if mode is ParseMode.HEADINGS:
        return HeadingTreeParser(vault)
    return HeadingTreeParser(vault, flat=True)


__all__ = [
    "FolderTreeParser",
    "HeadingTreeParser",
    "ParseMode",
    "TreeParser",
    "create_parser",
]
