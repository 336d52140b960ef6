"""HTTP surface for Hookshot.

``create_app`` builds a FastAPI application with a single webhook endpoint.
``WebhookAdapter`` holds the request sequencing and can be driven by any
other HTTP engine.

Example:
    ```python
    import uvicorn
    from hookshot import Hook, HookRegistry
    from hookshot.api import create_app

    registry = HookRegistry()
    registry.register(Hook("*", "secret", print))
    uvicorn.run(create_app(registry), host="0.0.0.0", port=4567)
    ```
"""

from .adapter import WebhookAdapter, WebhookResponse
from .app import create_app

__all__ = [
    "WebhookAdapter",
    "WebhookResponse",
    "create_app",
]
