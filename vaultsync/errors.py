# vaultsync/errors.py
"""
Error taxonomy for storage operations.

Every storage call either returns its result or raises exactly one of the
exceptions below. Nothing here is retried; the caller decides whether to
re-read, merge or force-overwrite.
"""
from typing import Optional


class StorageError(Exception):
    """Base class for all storage adapter errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class UnauthorizedError(StorageError):
    """Authorization could not be established; no request was sent."""


class NotFoundError(StorageError):
    """The provider reported the resource as missing."""

    def __init__(self, path: Optional[str] = None, message: str = "not found"):
        super().__init__(message, path=path)


class RevisionConflictError(StorageError):
    """A conditional write was rejected; `rev` is the server's current revision."""

    def __init__(self, path: Optional[str], rev: str):
        super().__init__(f"revision conflict, current revision {rev}", path=path)
        self.rev = rev


class ProtocolViolationError(StorageError):
    """The exchange succeeded but the response lacks a required field."""

    def __init__(self, message: str, path: Optional[str] = None, phase: Optional[str] = None):
        super().__init__(message, path=path)
        self.phase = phase


class TransportError(StorageError):
    """Network or HTTP failure below the storage protocol."""

    def __init__(self, message: str, path: Optional[str] = None, status: Optional[int] = None, phase: Optional[str] = None):
        super().__init__(message, path=path)
        self.status = status
        self.phase = phase
