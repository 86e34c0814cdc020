"""Root test configuration: shared note samples and an on-disk vault"""

from pathlib import Path

import pytest


NOTE_WITH_ID = """\
---
title: Linked
permalink: 0d6f7a8e-4a39-4c55-9c1e-2b7f2f6d9a10
---
# Linked

Body.
"""

NOTE_LEGACY = """\
---
title: Legacy
persistent_id: legacy-123
---
Old body.
"""

NOTE_PLAIN = "# Plain\n\nNo header here.\n"


@pytest.fixture(name="vault_dir")
def vault_dir_fixture(tmp_path) -> Path:
    """A vault named 'My Vault' holding three notes, one in a subfolder, plus host config to ignore."""
    root = tmp_path / "My Vault"
    (root / "projects").mkdir(parents=True)
    (root / ".obsidian").mkdir()
    (root / "linked.md").write_text(NOTE_WITH_ID, encoding="utf-8")
    (root / "projects" / "legacy.md").write_text(NOTE_LEGACY, encoding="utf-8")
    (root / "plain.md").write_text(NOTE_PLAIN, encoding="utf-8")
    (root / ".obsidian" / "hidden.md").write_text("---\npermalink: hidden\n---\n", encoding="utf-8")
    (root / "image.png").write_bytes(b"\x89PNG")
    return root
