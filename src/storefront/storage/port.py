"""Object storage port: where uploaded files (payment slips) are kept."""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """The object store rejected or failed an upload."""


class ObjectStorage(ABC):
    @abstractmethod
    def upload(self, data: bytes, key: str, content_type: str) -> str:
        """Store ``data`` under ``key`` and return the URL it is served from."""
        ...
