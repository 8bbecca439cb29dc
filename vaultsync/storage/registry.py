# vaultsync/storage/registry.py
"""
Provider registry for vault storage.

Factory functions to instantiate a storage provider by name with an
explicit authorization context and optional transport.
"""
from typing import Any, Dict, Optional
from vaultsync.storage.base import StorageProvider
from vaultsync.storage.onedrive import OneDriveStorage
from vaultsync.monitoring.logger import log


# Registry of available providers
PROVIDER_REGISTRY: Dict[str, type] = {
    "onedrive": OneDriveStorage,
}


def register_provider(name: str, provider_class: type) -> None:
    """
    Register a new storage provider.

    Args:
        name: Provider identifier (e.g., "webdav")
        provider_class: Class implementing StorageProvider

    Raises:
        ValueError: If provider_class doesn't implement StorageProvider
    """
    if not isinstance(provider_class, type) or not issubclass(provider_class, StorageProvider):
        raise ValueError(
            f"Provider class must inherit from StorageProvider, "
            f"got {provider_class}"
        )

    PROVIDER_REGISTRY[name.lower().strip()] = provider_class
    log("INFO", f"Registered storage provider: {name}", module="registry")


def get_provider_by_name(
    provider_name: str,
    auth: Any,
    transport: Optional[Any] = None,
) -> StorageProvider:
    """
    Get storage provider by name.

    Args:
        provider_name: Provider identifier (e.g., "onedrive")
        auth: Authorization context passed to the provider
        transport: Optional transport; the provider builds its own when omitted

    Returns:
        Initialized StorageProvider instance

    Raises:
        ValueError: If provider is unknown or cannot be initialized
    """
    provider_name = provider_name.lower().strip()

    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if not provider_class:
        raise ValueError(
            f"Unknown storage provider: '{provider_name}'. "
            f"Available providers: {list(PROVIDER_REGISTRY.keys())}"
        )

    try:
        provider = provider_class(auth, transport=transport)
    except Exception as exc:
        raise ValueError(
            f"Failed to initialize {provider_name} provider: {exc}"
        ) from exc
    log("INFO", f"Initialized {provider_name} provider", module="registry")
    return provider


def list_providers() -> list[str]:
    """
    List all registered provider names.
    """
    return list(PROVIDER_REGISTRY.keys())
