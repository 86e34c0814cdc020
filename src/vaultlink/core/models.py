"""Data models passed between the stores, the core operations, and the CLI"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Callable, Optional


ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class Document:
    """A note in the vault, identified by its vault-relative POSIX path."""
    path: str

    @property
    def basename(self) -> str:
        """File name without extension, as shown to the user."""
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".").lower()


@dataclass(frozen=True)
class OpenRequest:
    """Validated parameters of an open-document deep link."""
    id:    str
    vault: Optional[str] = None
