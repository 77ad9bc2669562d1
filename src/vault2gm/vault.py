"""Filesystem access to a note vault."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from vault2gm.config import MARKDOWN_EXTENSIONS
from vault2gm.exceptions import InvalidPathError, ReadFailureError


class EntryKind(str, Enum):
    """Discriminator between folders and files."""

    FOLDER = "folder"
    FILE = "file"


@dataclass(frozen=True)
class VaultEntry:
    """A folder or file inside the vault.

    Attributes:
        kind: Whether the entry is a folder or a file.
        path: Absolute filesystem path.
        relpath: POSIX path relative to the vault root.
    """

    kind: EntryKind
    path: Path
    relpath: str

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def basename(self) -> str:
        """File name without extension (folder name for folders)."""
        if self.kind is EntryKind.FOLDER:
            return self.path.name
        return self.path.stem

    @property
    def extension(self) -> str:
        if self.kind is EntryKind.FOLDER:
            return ""
        return self.path.suffix.lstrip(".").lower()

    @property
    def is_markdown(self) -> bool:
        return self.kind is EntryKind.FILE and self.extension in MARKDOWN_EXTENSIONS


class Vault:
    """Read-only view of a folder of markdown notes."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser().resolve()
        if not self.root.is_dir():
            raise InvalidPathError(f"Vault root is not a directory: {self.root}")

    def resolve(self, path: Path | str) -> Path:
        """Resolve a vault-relative or absolute path, refusing paths outside the root."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.root / candidate
        resolved = candidate.resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise InvalidPathError(f"Path is outside the vault: {path}")
        return resolved

    def entry(self, path: Path | str) -> VaultEntry:
        resolved = self.resolve(path)
        if resolved.is_dir():
            kind = EntryKind.FOLDER
        elif resolved.is_file():
            kind = EntryKind.FILE
        else:
            raise InvalidPathError(f"No such file or folder in vault: {path}")
        return self._make_entry(resolved, kind)

    def markdown_entry(self, path: Path | str) -> VaultEntry:
        """Like :meth:`entry` but requires a markdown document."""
        entry = self.entry(path)
        if not entry.is_markdown:
            raise InvalidPathError(f"Not a markdown document: {path}")
        return entry

    def parent(self, entry: VaultEntry) -> VaultEntry:
        parent = entry.path.parent
        if parent != self.root and self.root not in parent.parents:
            parent = self.root
        return self._make_entry(parent, EntryKind.FOLDER)

    def list_children(self, folder: VaultEntry) -> list[VaultEntry]:
        """List visible children of ``folder`` tagged with their kind.

        Dot-prefixed names are skipped. Order is filesystem order; callers sort.
        """
        if folder.kind is not EntryKind.FOLDER:
            raise InvalidPathError(f"Not a folder: {folder.relpath}")
        try:
            children = list(folder.path.iterdir())
        except OSError as exc:
            raise ReadFailureError(f"Cannot list {folder.relpath or '/'}: {exc}") from exc

        entries: list[VaultEntry] = []
        for child in children:
            if child.name.startswith("."):
                continue
            if child.is_dir():
                entries.append(self._make_entry(child, EntryKind.FOLDER))
            elif child.is_file():
                entries.append(self._make_entry(child, EntryKind.FILE))
        return entries

    def markdown_files(self) -> list[VaultEntry]:
        """Return every markdown document in the vault, sorted by relative path."""
        files: list[VaultEntry] = []
        pending = [self._make_entry(self.root, EntryKind.FOLDER)]
        while pending:
            folder = pending.pop()
            for child in self.list_children(folder):
                if child.kind is EntryKind.FOLDER:
                    pending.append(child)
                elif child.is_markdown:
                    files.append(child)
        return sorted(files, key=lambda entry: entry.relpath)

    async def read_text(self, entry: VaultEntry, encoding: str = "utf-8") -> str:
        """Read a document without blocking the event loop.

        Raises:
            ReadFailureError: If the file cannot be read or decoded.
        """
        try:
            return await asyncio.to_thread(entry.path.read_text, encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadFailureError(f"Cannot read {entry.relpath}: {exc}") from exc

    def _make_entry(self, path: Path, kind: EntryKind) -> VaultEntry:
        relpath = "" if path == self.root else path.relative_to(self.root).as_posix()
        return VaultEntry(kind=kind, path=path, relpath=relpath)
