"""Shareable URL construction and open-document deep-link parsing"""

from typing import Mapping
from urllib.parse import parse_qs, quote, urlsplit

from vaultlink.core.models import OpenRequest
from vaultlink.errors import MissingIdError, UnsupportedLinkError, VaultMismatchError


SCHEME = "obsidian://"
ACTION = "open-document"


def _encode(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="-_.!~*'()")


def build_share_url(persistent_id: str, vault_name: str, public_share_url: str = "") -> str:
    """URL that resolves to the note from outside the vault.

    With no public base URL configured, a direct obsidian:// deep link; otherwise the
    base URL with vault and id appended to its query string.
    """
    query = f"vault={_encode(vault_name)}&id={_encode(persistent_id)}"
    base = (public_share_url or "").strip()
    if not base:
        return f"{SCHEME}{ACTION}?{query}"
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}"


def parse_deep_link(url: str) -> dict[str, str]:
    """Query parameters of a deep link or public share URL (first value per key).

    obsidian:// links must name the open-document action; raises UnsupportedLinkError otherwise.
    """
    parts = urlsplit(url.strip())
    if parts.scheme.lower() == SCHEME.rstrip(":/"):
        action = (parts.netloc + parts.path).strip("/")
        if action != ACTION:
            raise UnsupportedLinkError(action)
    query = parts.query
    return {k: v[0] for k, v in parse_qs(query, keep_blank_values=True).items()}


def validate_open_request(params: Mapping[str, object], vault_name: str) -> OpenRequest:
    """Check open-document parameters against the current vault.

    Raises MissingIdError when id is absent or blank, VaultMismatchError when a
    vault is named and differs from vault_name.
    """
    raw_id = params.get("id")
    persistent_id = raw_id.strip() if isinstance(raw_id, str) else ""
    raw_vault = params.get("vault")
    target_vault: str = raw_vault.strip() if isinstance(raw_vault, str) else ""

    if not persistent_id:
        raise MissingIdError()
    if target_vault and target_vault != vault_name:
        raise VaultMismatchError(target_vault)
    return OpenRequest(id=persistent_id, vault=target_vault or None)
