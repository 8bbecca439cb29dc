# vaultsync/storage/base.py
"""
Base interface for vault storage providers.

All remote storage providers (OneDrive, and any registered at runtime) must implement this interface.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from vaultsync.monitoring.logger import log


@dataclass(frozen=True)
class StatResult:
    """Revision of an existing remote file."""
    rev: str


@dataclass(frozen=True)
class LoadResult:
    """Full content of a remote file and the revision it was read at."""
    data: bytes
    rev: str


@dataclass(frozen=True)
class SaveResult:
    """Revision produced by a successful write."""
    rev: str


@dataclass(frozen=True)
class DirectoryEntry:
    """Normalized listing record."""
    name: str
    path: str
    rev: Optional[str]
    is_directory: bool


class StorageProvider(ABC):
    """
    Abstract base class for vault storage providers.

    All I/O methods are async. Providers keep no state across calls except
    the enabled flag; revision checks are left to the remote store.
    """

    name: str = "base"

    def __init__(self):
        self.enabled = True
        self.provider_name = self.__class__.__name__

    @abstractmethod
    def path_for_name(self, file_name: str) -> str:
        """
        Map a vault file name to the provider path used by every other operation.
        """
        pass

    @abstractmethod
    async def stat(self, path: str) -> StatResult:
        """
        Get the current revision of a file.

        Raises:
            NotFoundError: If the provider reports the file as missing
            ProtocolViolationError: If the response carries no revision
        """
        pass

    @abstractmethod
    async def load(self, path: str) -> LoadResult:
        """
        Read file contents together with their revision.
        """
        pass

    @abstractmethod
    async def save(self, path: str, data: bytes, rev: Optional[str] = None) -> SaveResult:
        """
        Write file contents.

        Args:
            path: Provider path of the file
            data: Bytes to write
            rev: Expected current revision; omit to write unconditionally

        Raises:
            RevisionConflictError: If `rev` no longer matches the server
        """
        pass

    @abstractmethod
    async def list(self, directory: Optional[str] = None) -> List[DirectoryEntry]:
        """
        List immediate children of `directory` (provider root when omitted).
        """
        pass

    @abstractmethod
    async def remove(self, path: str) -> None:
        pass

    @abstractmethod
    async def mkdir(self, path: str) -> None:
        pass

    async def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        log("INFO", f"{self.name} provider {'enabled' if enabled else 'disabled'}", module="storage")
