# vaultsync/monitoring/logger.py
"""
Structured JSON logger for the vault storage adapter.
"""
import logging
import json
from datetime import datetime, timezone
from vaultsync.config import settings

def get_request_context():
    # Import lazily to avoid import cycles
    from vaultsync.monitoring.context import get_request_context as _g
    return _g()

# Optional per-call fields copied from the record when present
_EXTRA_FIELDS = ("operation", "path", "rev", "elapsed_ms", "status", "phase", "function", "details")

class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "component": getattr(record, "component", None) or record.module,
            "request_id": getattr(record, "request_id", None),
            "provider": getattr(record, "provider", None),
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_record[name] = value
        return json.dumps(log_record, default=str)

logger = logging.getLogger("vaultsync")
logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
handler = logging.StreamHandler()
handler.setFormatter(JsonFormatter())
logger.handlers = [handler]

# Helper to log with context
def log(level: str, message: str, component: str = None, request_id: str = None, provider: str = None, **kwargs):
    # Map legacy 'module' kwarg to 'component' to avoid LogRecord collision
    if "module" in kwargs and not component:
        component = kwargs.pop("module")
    # Fill missing fields from contextvars
    ctx = get_request_context()
    if request_id is None:
        request_id = ctx.get("request_id")
    if provider is None:
        provider = ctx.get("provider")

    extra = {
        "request_id": request_id,
        "provider": provider,
        "component": component,
        **kwargs
    }
    logger.log(getattr(logging, level.upper(), logging.INFO), message, extra=extra)
