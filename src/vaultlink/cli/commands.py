"""CLI command implementations"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from vaultlink.config import (
    USER_FIELDS, Settings, cache_db_path, config_path, load_config, save_config, update_setting,
)
from vaultlink.core.links import parse_deep_link
from vaultlink.core.resolver import progress_percentage
from vaultlink.core.service import PermalinkService
from vaultlink.crud.cache import drop_db, init_db, make_engine
from vaultlink.errors import InputError, StorageError
from vaultlink.logging_config import configure_logging
from vaultlink.vault.file_vault import FileVault


logger = logging.getLogger(__name__)

VaultDir = Annotated[Path, typer.Option("--vault-dir", "-C", help="Vault root directory")]

SETTING_KEYS = {"frontmatterKey", "frontmatter_key", "publicShareUrl", "public_share_url"}

KEY_WARNING = "Changing this after generating links may break older permalinks until you copy them again."


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(vault_dir: Path, overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(vault_dir, overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _service(vault_dir: Path, settings: Settings) -> PermalinkService:
    """Service over the vault at vault_dir, using the metadata cache if it has been initialized."""
    if not vault_dir.is_dir():
        _fail(f"Vault directory not found: {vault_dir}")
    db = cache_db_path(settings, vault_dir)
    engine = None
    if db.exists():
        engine = make_engine(db)
        init_db(engine)
    return PermalinkService(FileVault(vault_dir, engine), settings)


class ProgressLine:
    """Single-line stderr progress display, redrawn in place."""

    def __init__(self, message: str):
        self.message = message
        self.shown = False

    def update(self, current: int, total: int) -> None:
        pct = progress_percentage(current, total)
        text = self.message if pct is None else f"{self.message} ({pct}%)"
        typer.echo(f"\r{text}", nl=False, err=True)
        self.shown = True

    def close(self) -> None:
        if self.shown:
            typer.echo("", err=True)


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging to stderr")] = False,
    ):
    """Stable, rename-proof links to markdown notes."""
    configure_logging(verbose)


def init_cmd(
    vault_dir: VaultDir = Path("."),
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate the metadata cache")] = False,
    ):
    """Create the config file and metadata cache for a vault."""
    settings = _settings(vault_dir)
    if not config_path(vault_dir).exists():
        save_config(settings, vault_dir)
    db = cache_db_path(settings, vault_dir)
    engine = make_engine(db)
    if reset:
        drop_db(engine)
        typer.echo("Existing cache cleared.")
    init_db(engine)
    typer.echo(f"Vault initialized at: {vault_dir.resolve()}")


def index_cmd(vault_dir: VaultDir = Path(".")):
    """Refresh the metadata cache from the notes on disk."""
    settings = _settings(vault_dir)
    db = cache_db_path(settings, vault_dir)
    if not db.exists():
        _fail("No metadata cache. Run 'vaultlink init' first.")
    engine = make_engine(db)
    init_db(engine)
    try:
        counts = FileVault(vault_dir, engine).refresh_index()
    except OSError as e:
        logger.exception("Index refresh failed")
        _fail("Index refresh failed", e)
    typer.echo(
        f"Index complete - "
        f"{counts['indexed']} indexed, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['removed']} removed"
    )


def copy_cmd(
    note: Annotated[Path, typer.Argument(help="Markdown note to link to")],
    vault_dir: VaultDir = Path("."),
    ):
    """Ensure the note has a persistent id and print its shareable URL."""
    settings = _settings(vault_dir)
    service = _service(vault_dir, settings)
    try:
        doc = service.store.document_for(note if note.is_absolute() else vault_dir / note)
    except ValueError as e:
        _fail(str(e))
    if doc.extension != "md":
        _fail(f"Not a markdown note: {note}")

    try:
        url = asyncio.run(service.copy_persistent_url(doc))
    except StorageError:
        logger.exception("Creating persistent URL for %s failed", doc.path)
        _fail("Unable to create persistent URL.")
    typer.echo(url)
    typer.echo("Persistent URL printed to stdout.", err=True)


def id_cmd(
    note: Annotated[Path, typer.Argument(help="Markdown note to inspect")],
    vault_dir: VaultDir = Path("."),
    ):
    """Print the note's persistent id without modifying it."""
    settings = _settings(vault_dir)
    service = _service(vault_dir, settings)
    try:
        doc = service.store.document_for(note if note.is_absolute() else vault_dir / note)
        persistent_id = asyncio.run(service.current_id(doc))
    except (ValueError, StorageError) as e:
        _fail(str(e))
    if not persistent_id:
        typer.echo("Note has no persistent ID.", err=True)
        raise typer.Exit(1)
    typer.echo(persistent_id)


def open_cmd(
    link: Annotated[Optional[str], typer.Argument(help="obsidian://open-document or share URL")] = None,
    id_: Annotated[Optional[str], typer.Option("--id", help="Persistent id to resolve")] = None,
    vault: Annotated[Optional[str], typer.Option("--vault", help="Vault the link targets")] = None,
    vault_dir: VaultDir = Path("."),
    ):
    """Resolve a persistent link and print the path of the matching note."""
    settings = _settings(vault_dir)
    service = _service(vault_dir, settings)

    try:
        params = parse_deep_link(link) if link else {}
    except InputError as e:
        _fail(str(e))
    if id_ is not None:
        params["id"] = id_
    if vault is not None:
        params["vault"] = vault

    progress = ProgressLine("Opening persistent link...")
    try:
        doc = asyncio.run(service.open_document(params, progress.update))
    except InputError as e:
        _fail(str(e))
    except StorageError:
        logger.exception("Resolving persistent link failed")
        progress.close()
        _fail("Failed to open persistent link.")
    progress.close()

    if doc is None:
        typer.echo("No note matches that persistent ID.", err=True)
        raise typer.Exit(1)
    typer.echo(doc.path)
    typer.echo(f"Opened {doc.basename}", err=True)


def config_show_cmd(vault_dir: VaultDir = Path(".")):
    """Show the settings exposed on the settings surface."""
    settings = _settings(vault_dir)
    for name in USER_FIELDS:
        alias = Settings.model_fields[name].alias
        typer.echo(f"{alias}: {getattr(settings, name)}")


def config_set_cmd(
    key: Annotated[str, typer.Argument(help="frontmatterKey or publicShareUrl")],
    value: Annotated[str, typer.Argument(help="New value; blank resets frontmatterKey to 'permalink'")],
    vault_dir: VaultDir = Path("."),
    ):
    """Change one setting and save it."""
    if key not in SETTING_KEYS:
        _fail(f"Unknown setting: {key}. Choose one of: frontmatterKey, publicShareUrl")
    try:
        settings = update_setting(vault_dir, key, value)
    except ValueError as e:
        _fail(str(e))
    typer.echo(f"frontmatterKey: {settings.frontmatter_key}")
    typer.echo(f"publicShareUrl: {settings.public_share_url}")
    if key in ("frontmatterKey", "frontmatter_key"):
        typer.echo(KEY_WARNING, err=True)
