"""
Logging, request context and alerting helpers.
"""
from vaultsync.monitoring.logger import log
from vaultsync.monitoring.context import set_request_context, get_request_context
from vaultsync.monitoring.errors import record_error

__all__ = [
    "log",
    "set_request_context",
    "get_request_context",
    "record_error",
]
