"""Persistent identifier generation and lookup across canonical and legacy frontmatter keys"""

import logging
import random
import uuid
from typing import Any, Mapping, Optional


logger = logging.getLogger(__name__)

# Older releases stored the identifier under these keys; checked after the canonical key, in order.
LEGACY_KEYS = ("persistent_id",)


def generate_id() -> str:
    """Return a random UUID4 string, from os.urandom when the platform provides it."""
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.warning("No strong random source available; falling back to a pseudo-random id")
        return pseudo_random_id()


def pseudo_random_id(rng: random.Random = None) -> str:
    """UUID4-shaped id from a non-cryptographic generator."""
    bits = (rng or random).getrandbits(128)
    return str(uuid.UUID(int=bits, version=4))


def keys_to_check(canonical_key: str) -> list[str]:
    """Canonical key first, then each legacy key not already present."""
    keys = [canonical_key]
    keys.extend(k for k in LEGACY_KEYS if k not in keys)
    return keys


def extract_id(frontmatter: Optional[Mapping[str, Any]], canonical_key: str) -> Optional[str]:
    """First non-blank string value found under the keys in priority order, trimmed."""
    if not frontmatter:
        return None
    for key in keys_to_check(canonical_key):
        value = frontmatter.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def has_canonical_id(frontmatter: Optional[Mapping[str, Any]], canonical_key: str) -> bool:
    """True when the canonical key itself holds a non-blank string."""
    if not frontmatter:
        return False
    value = frontmatter.get(canonical_key)
    return isinstance(value, str) and bool(value.strip())
