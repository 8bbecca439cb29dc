"""
Vault storage providers.
"""
from vaultsync.storage.base import DirectoryEntry, LoadResult, SaveResult, StatResult, StorageProvider
from vaultsync.storage.onedrive import OneDriveStorage, OAuthConfig
from vaultsync.storage.registry import get_provider_by_name, list_providers, register_provider

__all__ = [
    "DirectoryEntry",
    "LoadResult",
    "SaveResult",
    "StatResult",
    "StorageProvider",
    "OneDriveStorage",
    "OAuthConfig",
    "get_provider_by_name",
    "list_providers",
    "register_provider",
]
