"""Database table definitions for the note metadata cache"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, DateTime, Text
from sqlmodel import Field, SQLModel


class CachedNote(SQLModel, table=True):
    """Parsed frontmatter of one note, valid while the file's mtime is unchanged"""
    __tablename__ = "cached_notes"
    path: str = Field(..., sa_column=Column(Text, primary_key=True))
    mtime_ns: int = Field(..., nullable=False)
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    indexed_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
