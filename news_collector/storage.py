"""
Raw document storage for downloaded feeds.

The fetcher writes one document per feed and the extractor reads it back,
both through the DocumentStore interface. FileDocumentStore keeps the
documents as flat files in a cache directory; MemoryDocumentStore keeps
them in a dict.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .errors import FatalSetupError


class DocumentStore(ABC):
    """Key-value store of raw feed documents keyed by source id."""

    def prepare(self) -> None:
        """Make the store ready for writes.

        Raises:
            FatalSetupError: If the underlying storage cannot be created
        """

    @abstractmethod
    def get(self, source_id: str) -> bytes | None:
        """Return the stored document, or None if nothing is stored."""
        raise NotImplementedError

    @abstractmethod
    def put(self, source_id: str, data: bytes) -> None:
        """Store a document, replacing whatever was stored before."""
        raise NotImplementedError

    def exists(self, source_id: str) -> bool:
        return self.get(source_id) is not None


class FileDocumentStore(DocumentStore):
    """Stores each document as `<root>/<source_id>`.

    Writes are plain overwrites. A crash in the middle of a write can leave a
    truncated file behind, which the extractor then reports as unparsable.

    Attributes:
        root: The cache directory
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def path_for(self, source_id: str) -> Path:
        return self.root / source_id

    def prepare(self) -> None:
        if self.root.is_dir():
            return
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FatalSetupError(f"Could not create the '{self.root}' folder: {exc}") from exc

    def get(self, source_id: str) -> bytes | None:
        path = self.path_for(source_id)
        if not path.is_file():
            return None
        return path.read_bytes()

    def put(self, source_id: str, data: bytes) -> None:
        self.prepare()
        self.path_for(source_id).write_bytes(data)

    def exists(self, source_id: str) -> bool:
        return self.path_for(source_id).is_file()


class MemoryDocumentStore(DocumentStore):
    """In-memory store, mostly useful for tests."""

    def __init__(self, documents: dict[str, bytes] | None = None):
        self.documents: dict[str, bytes] = dict(documents or {})

    def get(self, source_id: str) -> bytes | None:
        return self.documents.get(source_id)

    def put(self, source_id: str, data: bytes) -> None:
        self.documents[source_id] = data
