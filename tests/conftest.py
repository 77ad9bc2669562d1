"""Test setup for vault2gm."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from vault2gm.vault import Vault  # noqa: E402


SESSION_PAGE = """# Session One

Tonight the party visits [[Goblin Cave]] and meets [[Mayor|The Mayor]].
"""


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """A small vault with nested folders, hidden folders and non-markdown files."""
    root = tmp_path / "vault"
    write(root / "Session.md", SESSION_PAGE)
    write(root / "Goblin Cave.md", "# The Goblin Cave\n\nDamp and dark.\n")
    write(root / "alpha.md", "Just text, no heading.\n")
    write(root / "Zeta.md", "## Not top level\n\n# Zeta Title\n")
    write(root / "NPCs" / "Mayor.md", "# Mayor of [[Town|Townsfolk]]\n\nA nervous man.\n")
    write(root / ".obsidian" / "workspace.md", "# Hidden\n")
    write(root / "map.png", "not really a png")
    (root / "Empty").mkdir()
    return root


@pytest.fixture
def vault(vault_dir: Path) -> Vault:
    return Vault(vault_dir)
