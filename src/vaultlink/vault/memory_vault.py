"""In-memory document store for tests and embedding"""

from dataclasses import dataclass, field
from typing import Any, Optional

from vaultlink.core.models import Document
from vaultlink.errors import StorageError
from vaultlink.vault.store import DocumentStore


@dataclass
class MemoryVault(DocumentStore):
    vault_name: str = "Memory Vault"
    _content: dict[str, str] = field(default_factory=dict)
    _cache: dict[str, dict[str, Any]] = field(default_factory=dict)
    fail_reads: set[str] = field(default_factory=set)
    fail_writes: set[str] = field(default_factory=set)
    reads: int = 0
    writes: int = 0

    @property
    def name(self) -> str:
        return self.vault_name

    def add(self, path: str, content: str, cached: Optional[dict[str, Any]] = None) -> Document:
        """Insert or replace a note; cached sets its metadata-cache entry (None clears it)."""
        self._content[path] = content
        if cached is None:
            self._cache.pop(path, None)
        else:
            self._cache[path] = dict(cached)
        return Document(path)

    def content(self, doc: Document) -> str:
        return self._content[doc.path]

    def list_documents(self) -> list[Document]:
        return [Document(p) for p in self._content]

    async def read(self, doc: Document) -> str:
        self.reads += 1
        if doc.path in self.fail_reads or doc.path not in self._content:
            raise StorageError(doc.path, "read")
        return self._content[doc.path]

    async def write(self, doc: Document, content: str) -> None:
        if doc.path in self.fail_writes:
            raise StorageError(doc.path, "write")
        self.writes += 1
        self._content[doc.path] = content

    def get_cached_frontmatter(self, doc: Document) -> Optional[dict[str, Any]]:
        cached = self._cache.get(doc.path)
        return dict(cached) if cached is not None else None
