"""Filesystem vault: markdown notes under a root directory, with an optional SQLite metadata cache"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from vaultlink.core.frontmatter import parse_frontmatter
from vaultlink.core.models import Document
from vaultlink.crud.cache import get_entry, prune_entries, upsert_entry
from vaultlink.errors import StorageError
from vaultlink.vault.store import DocumentStore


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md'}


def discover_files(root: Path) -> list[Path]:
    """Return .md files under root sorted by relative path, skipping dot-directories."""
    found = []
    for p in root.rglob('*'):
        rel = p.relative_to(root)
        if any(part.startswith('.') for part in rel.parts[:-1]):
            continue
        if p.is_file() and p.suffix.lower() in MD_EXTENSIONS:
            found.append(p)
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())


def _read_text(path: Path) -> str:
    with open(path, encoding='utf-8', newline='') as f:
        return f.read()


def _write_text(path: Path, content: str) -> None:
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)


class FileVault(DocumentStore):
    def __init__(self, root: Path, engine=None):
        self.root = Path(root).resolve()
        self.engine = engine

    @property
    def name(self) -> str:
        return self.root.name

    def path_of(self, doc: Document) -> Path:
        return self.root / doc.path

    def document_for(self, path: Path) -> Document:
        """Document for a filesystem path (absolute, or relative to the current directory)."""
        resolved = Path(path).resolve()
        try:
            rel = resolved.relative_to(self.root)
        except ValueError:
            raise ValueError(f"{path} is not inside vault {self.root}") from None
        return Document(rel.as_posix())

    def list_documents(self) -> list[Document]:
        return [Document(p.relative_to(self.root).as_posix()) for p in discover_files(self.root)]

    async def read(self, doc: Document) -> str:
        try:
            return await asyncio.to_thread(_read_text, self.path_of(doc))
        except OSError as e:
            raise StorageError(doc.path, "read", e) from e

    async def write(self, doc: Document, content: str) -> None:
        path = self.path_of(doc)
        try:
            await asyncio.to_thread(_write_text, path, content)
        except OSError as e:
            raise StorageError(doc.path, "write", e) from e
        if self.engine is not None:
            self._refresh_entry(doc, content)

    def _refresh_entry(self, doc: Document, content: str) -> None:
        """Update doc's cache row after a write.

        Failures are logged only: the old row's mtime no longer matches the file, so it reads as absent.
        """
        frontmatter, _ = parse_frontmatter(content)
        try:
            mtime_ns = self.path_of(doc).stat().st_mtime_ns
            with Session(self.engine) as session:
                upsert_entry(session, doc.path, mtime_ns, frontmatter)
                session.commit()
        except (OSError, SQLAlchemyError) as e:
            logger.warning("Could not refresh cache entry for %s: %s", doc.path, e)

    def get_cached_frontmatter(self, doc: Document) -> Optional[dict[str, Any]]:
        """Cached frontmatter when the cache row matches the file's current mtime."""
        if self.engine is None:
            return None
        try:
            mtime_ns = self.path_of(doc).stat().st_mtime_ns
        except OSError:
            return None
        try:
            with Session(self.engine) as session:
                row = get_entry(session, doc.path)
                if row is None or row.mtime_ns != mtime_ns:
                    return None
                return dict(row.frontmatter or {})
        except SQLAlchemyError as e:
            logger.warning("Cache lookup failed for %s: %s", doc.path, e)
            return None

    def refresh_index(self) -> dict[str, int]:
        """Re-parse notes whose cache row is missing or stale and drop rows for deleted notes.

        Returns counts keyed 'indexed', 'unchanged', 'removed'.
        """
        if self.engine is None:
            raise RuntimeError("FileVault has no cache engine")
        counts = {"indexed": 0, "unchanged": 0, "removed": 0}
        docs = self.list_documents()
        with Session(self.engine) as session:
            for doc in docs:
                path = self.path_of(doc)
                mtime_ns = path.stat().st_mtime_ns
                row = get_entry(session, doc.path)
                if row is not None and row.mtime_ns == mtime_ns:
                    counts["unchanged"] += 1
                    continue
                frontmatter, _ = parse_frontmatter(_read_text(path))
                upsert_entry(session, doc.path, mtime_ns, frontmatter)
                counts["indexed"] += 1
            counts["removed"] = prune_entries(session, (d.path for d in docs))
            session.commit()
        logger.debug("Index refreshed: %s", counts)
        return counts
