"""
Context helpers using contextvars for request/provider propagation.
"""
import contextvars

request_id_var = contextvars.ContextVar("request_id", default=None)
provider_var = contextvars.ContextVar("provider", default=None)

def set_request_context(request_id=None, provider=None):
    if request_id is not None:
        request_id_var.set(request_id)
    if provider is not None:
        provider_var.set(provider)

def get_request_context():
    return {
        "request_id": request_id_var.get(),
        "provider": provider_var.get(),
    }
