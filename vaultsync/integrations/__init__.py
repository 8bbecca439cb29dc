"""
Microsoft Graph integration: authorization, transport and payload models.
"""
from vaultsync.integrations.onedrive_client import GraphTransport, TokenAuth, TransportResponse, VaultAuth

__all__ = [
    "GraphTransport",
    "TokenAuth",
    "TransportResponse",
    "VaultAuth",
]
