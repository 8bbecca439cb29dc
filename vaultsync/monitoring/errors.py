from vaultsync.monitoring.logger import log
from vaultsync.monitoring.alerts import send_alert


async def record_error(component: str, function: str, message: str, details: dict = None, request_id: str = None, severity: str = "ERROR", alert: bool = True, **fields):
    """Log an error and, for ERROR/CRITICAL, forward it to the alert webhook.

    Never raises: alert delivery problems are logged by `send_alert` itself.
    """
    log(severity, message, component=component, request_id=request_id, details=details, function=function, **fields)
    if alert and severity in ("ERROR", "CRITICAL"):
        await send_alert(message=message, context={"function": function, "details": details}, severity=severity, module=component, request_id=request_id)
