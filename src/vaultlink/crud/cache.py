"""Metadata cache persistence: engine setup, lookup, upsert, and pruning"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from sqlmodel import Session, SQLModel, create_engine, select

from vaultlink.crud.models import CachedNote


def make_engine(db_path: Path):
    """SQLite engine for the cache file; parent directories are created as needed."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False})


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)


def drop_db(engine) -> None:
    SQLModel.metadata.drop_all(engine)


def _json_safe(frontmatter: dict[str, Any]) -> dict[str, Any]:
    """Null out YAML scalars JSON can't hold (dates, timestamps).

    They are never valid ids, so extract_id skips them here exactly as it does on the raw parse.
    """
    return json.loads(json.dumps(frontmatter, default=lambda _: None, skipkeys=True))


def get_entry(session: Session, path: str) -> Optional[CachedNote]:
    """Return the cache row for path, or None."""
    return session.get(CachedNote, path)


def upsert_entry(session: Session, path: str, mtime_ns: int, frontmatter: dict[str, Any]) -> CachedNote:
    """Insert or refresh the row for path. Flushes; caller commits."""
    row = session.get(CachedNote, path) or CachedNote(path=path, mtime_ns=mtime_ns)
    row.mtime_ns = mtime_ns
    row.frontmatter = _json_safe(frontmatter)
    row.indexed_at = datetime.now()
    session.add(row)
    session.flush()
    return row


def prune_entries(session: Session, keep: Iterable[str]) -> int:
    """Delete rows whose path is not in keep. Returns the number removed."""
    keep = set(keep)
    removed = 0
    for row in session.exec(select(CachedNote)).all():
        if row.path not in keep:
            session.delete(row)
            removed += 1
    session.flush()
    return removed
