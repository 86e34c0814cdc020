"""Ensure a note carries a persistent identifier in its frontmatter"""

import logging

from vaultlink.core.frontmatter import parse_frontmatter, serialize_frontmatter
from vaultlink.core.ids import extract_id, generate_id, has_canonical_id
from vaultlink.core.models import Document
from vaultlink.vault.store import DocumentStore


logger = logging.getLogger(__name__)


async def ensure_persistent_id(store: DocumentStore, doc: Document, canonical_key: str) -> str:
    """Return the note's persistent id, minting and writing one if needed.

    A cached canonical value short-circuits without touching the file. Otherwise the
    raw content is parsed; an id found under a legacy key is copied to the canonical
    key (the legacy key is left in place), and a missing id is generated. The note is
    rewritten only when its frontmatter changed. Raises StorageError on I/O failure.
    """
    cached = store.get_cached_frontmatter(doc)
    cached_id = extract_id(cached, canonical_key)
    if cached_id and has_canonical_id(cached, canonical_key):
        logger.debug("Cache hit for %s: %s", doc.path, cached_id)
        return cached_id

    frontmatter, body = parse_frontmatter(await store.read(doc))
    needs_write = False

    persistent_id = extract_id(frontmatter, canonical_key)
    if not persistent_id:
        persistent_id = generate_id()
        logger.debug("Generated id %s for %s", persistent_id, doc.path)
        needs_write = True

    if frontmatter.get(canonical_key) != persistent_id:
        frontmatter[canonical_key] = persistent_id
        needs_write = True

    if needs_write:
        await store.write(doc, serialize_frontmatter(frontmatter, body))
        logger.debug("Wrote %s=%s to %s", canonical_key, persistent_id, doc.path)

    return persistent_id
