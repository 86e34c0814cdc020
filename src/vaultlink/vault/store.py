"""Abstract document store: the collaborator that owns note content and the metadata cache"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from vaultlink.core.models import Document


class DocumentStore(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Vault name used in share URLs and deep-link checks."""
        raise NotImplementedError

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """All notes, in the same order on every call."""
        raise NotImplementedError

    @abstractmethod
    async def read(self, doc: Document) -> str:
        """Full current content. Raises StorageError."""
        raise NotImplementedError

    async def cached_read(self, doc: Document) -> str:
        """Content suitable for read-only scans; may be served from a cache."""
        return await self.read(doc)

    @abstractmethod
    async def write(self, doc: Document, content: str) -> None:
        """Replace the note's content. Raises StorageError."""
        raise NotImplementedError

    def get_cached_frontmatter(self, doc: Document) -> Optional[dict[str, Any]]:
        """Cached frontmatter view, or None when the store has no entry for doc."""
        return None
