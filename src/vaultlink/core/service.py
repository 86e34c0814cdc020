"""Coordinating service: copy-link and open-link operations over one vault"""

import logging
from typing import Mapping, Optional

from vaultlink.config import Settings
from vaultlink.core.frontmatter import parse_frontmatter
from vaultlink.core.ids import extract_id
from vaultlink.core.lifecycle import ensure_persistent_id
from vaultlink.core.links import build_share_url, validate_open_request
from vaultlink.core.models import Document, ProgressCallback
from vaultlink.core.resolver import find_by_persistent_id
from vaultlink.vault.store import DocumentStore


logger = logging.getLogger(__name__)


class PermalinkService:
    """Binds a document store to the settings that name the frontmatter key and share URL."""

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings

    @property
    def frontmatter_key(self) -> str:
        return self.settings.frontmatter_key

    async def copy_persistent_url(self, doc: Document) -> str:
        """Ensure doc has an id and return its shareable URL."""
        persistent_id = await ensure_persistent_id(self.store, doc, self.frontmatter_key)
        url = build_share_url(persistent_id, self.store.name, self.settings.public_share_url)
        logger.info("Persistent URL for %s: %s", doc.path, url)
        return url

    async def current_id(self, doc: Document) -> Optional[str]:
        """The note's id as stored now, without generating or writing anything."""
        cached = self.store.get_cached_frontmatter(doc)
        if cached is not None:
            return extract_id(cached, self.frontmatter_key)
        frontmatter, _ = parse_frontmatter(await self.store.read(doc))
        return extract_id(frontmatter, self.frontmatter_key)

    async def open_document(
        self,
        params: Mapping[str, object],
        on_progress: ProgressCallback = None,
        ) -> Optional[Document]:
        """Validate deep-link params, then resolve the id. Raises InputError before any scan."""
        request = validate_open_request(params, self.store.name)
        return await find_by_persistent_id(self.store, request.id, self.frontmatter_key, on_progress)
