"""Unit tests for vault/file_vault.py"""

import os

import pytest

from vaultlink.core.frontmatter import parse_frontmatter
from vaultlink.core.ids import extract_id
from vaultlink.core.lifecycle import ensure_persistent_id
from vaultlink.core.models import Document
from vaultlink.core.resolver import find_by_persistent_id
from vaultlink.crud.cache import init_db, make_engine
from vaultlink.errors import StorageError
from vaultlink.vault.file_vault import FileVault, discover_files


@pytest.fixture(name="cached_vault")
def cached_vault_fixture(vault_dir, tmp_path):
    engine = make_engine(tmp_path / "cache.db")
    init_db(engine)
    return FileVault(vault_dir, engine)


def test_name_is_directory_name(vault_dir):
    assert FileVault(vault_dir).name == "My Vault"


def test_list_documents_sorted_and_filtered(vault_dir):
    """Only .md files, sorted by relative path, dot-directories skipped."""
    docs = FileVault(vault_dir).list_documents()
    assert [d.path for d in docs] == ["linked.md", "plain.md", "projects/legacy.md"]


def test_discover_files_stable(vault_dir):
    assert discover_files(vault_dir) == discover_files(vault_dir)


def test_document_for(vault_dir):
    vault = FileVault(vault_dir)
    assert vault.document_for(vault_dir / "projects" / "legacy.md") == Document("projects/legacy.md")


def test_document_for_outside_vault(vault_dir, tmp_path):
    with pytest.raises(ValueError, match="not inside vault"):
        FileVault(vault_dir).document_for(tmp_path / "elsewhere.md")


@pytest.mark.asyncio
async def test_read_and_write(vault_dir):
    vault = FileVault(vault_dir)
    doc = Document("plain.md")
    await vault.write(doc, "new\r\ncontent\n")
    assert await vault.read(doc) == "new\r\ncontent\n"
    assert (vault_dir / "plain.md").read_bytes() == b"new\r\ncontent\n"


@pytest.mark.asyncio
async def test_read_missing_raises_storage_error(vault_dir):
    with pytest.raises(StorageError, match="read missing.md"):
        await FileVault(vault_dir).read(Document("missing.md"))


@pytest.mark.asyncio
async def test_write_into_missing_folder_raises_storage_error(vault_dir):
    with pytest.raises(StorageError):
        await FileVault(vault_dir).write(Document("nope/x.md"), "x")


def test_no_engine_means_no_cache(vault_dir):
    assert FileVault(vault_dir).get_cached_frontmatter(Document("linked.md")) is None


def test_refresh_index_counts(cached_vault, vault_dir):
    assert cached_vault.refresh_index() == {"indexed": 3, "unchanged": 0, "removed": 0}
    assert cached_vault.refresh_index() == {"indexed": 0, "unchanged": 3, "removed": 0}
    (vault_dir / "plain.md").unlink()
    assert cached_vault.refresh_index() == {"indexed": 0, "unchanged": 2, "removed": 1}


def test_cached_frontmatter_after_index(cached_vault):
    cached_vault.refresh_index()
    assert cached_vault.get_cached_frontmatter(Document("projects/legacy.md")) == {
        "title": "Legacy", "persistent_id": "legacy-123",
    }
    assert cached_vault.get_cached_frontmatter(Document("plain.md")) == {}


def test_stale_entry_treated_as_absent(cached_vault, vault_dir):
    cached_vault.refresh_index()
    path = vault_dir / "linked.md"
    path.write_text("---\npermalink: changed\n---\n")
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
    assert cached_vault.get_cached_frontmatter(Document("linked.md")) is None


@pytest.mark.asyncio
async def test_write_refreshes_cache(cached_vault):
    doc = Document("plain.md")
    await cached_vault.write(doc, "---\npermalink: fresh\n---\nBody\n")
    assert cached_vault.get_cached_frontmatter(doc) == {"permalink": "fresh"}


def test_refresh_index_requires_engine(vault_dir):
    with pytest.raises(RuntimeError):
        FileVault(vault_dir).refresh_index()


DATE_NOTE = "---\npermalink: 2024-01-01\ncreated: 2024-01-01 10:00:00\n---\nBody\n"


def test_cached_and_raw_ids_agree_for_date_values(cached_vault, vault_dir):
    """A YAML date under the id key is no id, whether read from the cache or the file."""
    (vault_dir / "dated.md").write_text(DATE_NOTE)
    cached_vault.refresh_index()
    doc = Document("dated.md")
    cached = cached_vault.get_cached_frontmatter(doc)
    assert cached is not None
    assert extract_id(cached, "permalink") == extract_id(parse_frontmatter(DATE_NOTE)[0], "permalink")
    assert extract_id(cached, "permalink") is None


@pytest.mark.asyncio
async def test_date_valued_id_resolves_same_with_and_without_cache(cached_vault, vault_dir):
    (vault_dir / "dated.md").write_text(DATE_NOTE)
    cached_vault.refresh_index()
    assert await find_by_persistent_id(cached_vault, "2024-01-01", "permalink") is None
    assert await find_by_persistent_id(FileVault(vault_dir), "2024-01-01", "permalink") is None


@pytest.mark.asyncio
async def test_date_valued_id_replaced_once_and_then_stable(cached_vault, vault_dir):
    (vault_dir / "dated.md").write_text(DATE_NOTE)
    cached_vault.refresh_index()
    doc = Document("dated.md")
    first = await ensure_persistent_id(cached_vault, doc, "permalink")
    assert first != "2024-01-01"
    assert await ensure_persistent_id(FileVault(vault_dir), doc, "permalink") == first
    assert await ensure_persistent_id(cached_vault, doc, "permalink") == first


@pytest.mark.asyncio
async def test_write_succeeds_when_cache_refresh_fails(vault_dir, tmp_path, caplog):
    """A broken cache database does not fail the write; the stale row reads as absent."""
    engine = make_engine(tmp_path / "broken.db")
    vault = FileVault(vault_dir, engine)
    doc = Document("plain.md")
    await vault.write(doc, "---\npermalink: fresh\n---\n")
    assert (vault_dir / "plain.md").read_text() == "---\npermalink: fresh\n---\n"
    assert "Could not refresh cache entry" in caplog.text
    assert vault.get_cached_frontmatter(doc) is None


@pytest.mark.asyncio
async def test_ensure_id_with_broken_cache(vault_dir, tmp_path):
    vault = FileVault(vault_dir, make_engine(tmp_path / "broken.db"))
    pid = await ensure_persistent_id(vault, Document("plain.md"), "permalink")
    assert parse_frontmatter((vault_dir / "plain.md").read_text())[0] == {"permalink": pid}
