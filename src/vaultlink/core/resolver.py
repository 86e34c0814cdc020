"""Locate the note carrying a given persistent identifier"""

import logging
import math
from typing import Optional

from vaultlink.core.frontmatter import parse_frontmatter
from vaultlink.core.ids import extract_id
from vaultlink.core.models import Document, ProgressCallback
from vaultlink.vault.store import DocumentStore


logger = logging.getLogger(__name__)


def progress_percentage(current: int, total: int) -> Optional[int]:
    """Whole-number percentage (half rounds up, capped at 100); None for an empty vault."""
    if not total:
        return None
    return min(100, math.floor(current / total * 100 + 0.5))


async def find_by_persistent_id(
    store: DocumentStore,
    target_id: str,
    canonical_key: str,
    on_progress: ProgressCallback = None,
    ) -> Optional[Document]:
    """Scan notes in vault order and return the first whose id equals target_id.

    Notes with a cache entry are matched from the cache only; notes without one are
    read and parsed. Notes are processed one at a time so on_progress(i, total) sees
    strictly increasing i. Returns None when nothing matches.
    """
    docs = store.list_documents()
    total = len(docs)

    for index, doc in enumerate(docs, start=1):
        if on_progress:
            on_progress(index, total)

        cached = store.get_cached_frontmatter(doc)
        if extract_id(cached, canonical_key) == target_id:
            logger.debug("Matched %s from cache after %d of %d", doc.path, index, total)
            return doc

        if cached is None:
            frontmatter, _ = parse_frontmatter(await store.cached_read(doc))
            if extract_id(frontmatter, canonical_key) == target_id:
                logger.debug("Matched %s from content after %d of %d", doc.path, index, total)
                return doc

    logger.debug("No note matches %s among %d notes", target_id, total)
    return None
