"""Shared pieces of the tree parsing strategies."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator

from vault2gm.schemas import Session
from vault2gm.vault import Vault, VaultEntry

CROSS_REFERENCE_RE = re.compile(r"\[\[([^\]]+)\]\]")
TOP_HEADING_RE = re.compile(r"^#\s+(.+?)\s*$")


class ParseMode(str, Enum):
    """Available tree extraction strategies."""

    FOLDER = "folder"
    HEADINGS = "headings"
    FLAT = "flat"


def split_cross_reference(content: str) -> tuple[str, str]:
    """Split the inside of ``[[...]]`` into ``(target, display)``."""
    if "|" in content:
        target, display = content.split("|", 1)
        return target.strip(), display.strip()
    return content.strip(), content.strip()


def iter_cross_references(line: str) -> Iterator[tuple[str, str]]:
    """Yield ``(target, display)`` for every cross-reference token in ``line``."""
    for match in CROSS_REFERENCE_RE.finditer(line):
        yield split_cross_reference(match.group(1))


def strip_cross_references(text: str) -> str:
    """Replace cross-reference tokens with their display text."""
    return CROSS_REFERENCE_RE.sub(lambda m: split_cross_reference(m.group(1))[1], text)


def find_title(content: str) -> str | None:
    """Return the first top-level ``# Title`` of a document, if any."""
    for line in content.splitlines():
        match = TOP_HEADING_RE.match(line)
        if match:
            title = strip_cross_references(match.group(1)).strip()
            if title:
                return title
    return None


class TreeParser(ABC):
    """Build a :class:`Session` from vault content starting at an entry document."""

    mode: ParseMode

    def __init__(self, vault: Vault) -> None:
        self.vault = vault

    @abstractmethod
    async def parse(self, entry: VaultEntry) -> Session:
        """Parse the tree rooted at ``entry``."""
