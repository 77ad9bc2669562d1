"""vault2gm: export a markdown vault as a GM Vault JSON tree and serve its pages."""

from vault2gm.controller import VaultController
from vault2gm.exceptions import (
    BindError,
    InvalidPathError,
    NotSelectedError,
    PageNotFoundError,
    ReadFailureError,
    SettingsError,
    Vault2gmError,
)
from vault2gm.exporter import GMVaultJSONBuilder
from vault2gm.markdown import MarkdownRenderer
from vault2gm.parsers import FolderTreeParser, HeadingTreeParser, ParseMode, create_parser
from vault2gm.schemas import Category, GalleryImage, Page, Session
from vault2gm.slugify import slugify
from vault2gm.vault import EntryKind, Vault, VaultEntry

__all__ = [
    "BindError",
    "Category",
    "EntryKind",
    "FolderTreeParser",
    "GMVaultJSONBuilder",
    "GalleryImage",
    "HeadingTreeParser",
    "InvalidPathError",
    "MarkdownRenderer",
    "NotSelectedError",
    "Page",
    "PageNotFoundError",
    "ParseMode",
    "ReadFailureError",
    "Session",
    "SettingsError",
    "Vault",
    "Vault2gmError",
    "VaultController",
    "VaultEntry",
    "create_parser",
    "slugify",
]
