"""Application configuration: settings schema, config.yaml loader, and the persisting setter"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


CONFIG_DIR = ".vaultlink"
CONFIG_FILE = "config.yaml"
DEFAULT_FRONTMATTER_KEY = "permalink"

# Fields exposed on the settings surface and written to config.yaml
USER_FIELDS = ("frontmatter_key", "public_share_url")


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    frontmatter_key:  str = Field(default=DEFAULT_FRONTMATTER_KEY, alias="frontmatterKey",
                                  description="Frontmatter field used to store the persistent identifier")
    public_share_url: str = Field(default="", alias="publicShareUrl",
                                  description="Optional redirect endpoint that receives vault and id in the query")
    cache_db:         str = Field(default="cache.db", description="Metadata cache file, relative to the config dir")

    @field_validator("frontmatter_key", mode="before")
    @classmethod
    def _default_blank_key(cls, v: Any) -> str:
        v = "" if v is None else str(v).strip()
        return v or DEFAULT_FRONTMATTER_KEY

    @field_validator("public_share_url", mode="before")
    @classmethod
    def _strip_url(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


def config_dir(vault_root: Path) -> Path:
    return Path(vault_root) / CONFIG_DIR


def config_path(vault_root: Path) -> Path:
    return config_dir(vault_root) / CONFIG_FILE


def cache_db_path(settings: Settings, vault_root: Path) -> Path:
    """Absolute location of the metadata cache database for a vault."""
    p = Path(settings.cache_db)
    return p if p.is_absolute() else config_dir(vault_root) / p


def _field_name(name: str) -> str:
    """Map an alias (frontmatterKey) or field name (frontmatter_key) to the field name."""
    for field_name, info in Settings.model_fields.items():
        if name in (field_name, info.alias):
            return field_name
    raise ValueError(f"Unknown setting: {name}")


def _read_persisted(vault_root: Path) -> dict[str, Any]:
    """Return the raw mapping stored in config.yaml, or {} when the file is absent."""
    path = config_path(vault_root)
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")
    return {_field_name(k): v for k, v in data.items()}


def load_config(vault_root: Path = Path("."), overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then VAULTLINK_<FIELD> env vars, then non-None CLI overrides."""
    data = _read_persisted(vault_root)

    for name in Settings.model_fields:
        if val := os.getenv(f"VAULTLINK_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e


def save_config(settings: Settings, vault_root: Path) -> Path:
    """Persist settings to config.yaml using the host's camelCase field names."""
    path = config_path(vault_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump(by_alias=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def update_setting(vault_root: Path, name: str, value: Any) -> Settings:
    """Apply one change to the persisted settings and write them back immediately.

    Only config.yaml is read here; env vars and CLI overrides never leak into the saved file.
    """
    data = _read_persisted(vault_root)
    data[_field_name(name)] = value
    try:
        settings = Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid value for {name}: {e}") from e
    save_config(settings, vault_root)
    return settings
