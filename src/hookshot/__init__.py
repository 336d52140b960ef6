"""Hookshot: webhook listener for source-control platforms.

Turns GitHub, GitLab and Docker Hub webhook requests into validated
``Delivery`` records and routes them to your callbacks.

Quick Start:
    import uvicorn
    from hookshot import Delivery, Hook, HookRegistry
    from hookshot.api import create_app

    def on_push(delivery: Delivery) -> None:
        print(delivery.event, delivery.parsed_payload["ref"])

    registry = HookRegistry()
    registry.register(Hook("push", "secret", on_push))
    registry.register(Hook("*", None, lambda d: print("received", d.event)))

    uvicorn.run(create_app(registry), host="0.0.0.0", port=4567)

Matching:
    - A delivery matches the hook registered for its normalized event name
      ("Push Hook" becomes "push_hook"), then the "*" wildcard hook.
    - Hooks with a secret only run for authentic deliveries: HMAC-SHA1 for
      GitHub, the x-gitlab-token header for GitLab.
"""

__version__ = "0.1.0"

# Construction
from .builder import (
    DEFAULT_DETECTORS,
    DeliveryBuilder,
    DetectedSource,
    DockerHubDetector,
    PendingDelivery,
    PlatformDetector,
    detect_github,
    detect_gitlab,
    normalize_event,
    resolve_content_encoding,
)

# Configuration
from .config import Settings

# Exceptions
from .exceptions import (
    ConfigurationError,
    HookshotError,
    InvalidPayloadError,
    RegistryFrozenError,
    UndeterminedSourceError,
)

# Logging
from .logging import (
    bind_context,
    configure_logging,
    delivery_context,
    get_logger,
    logger,
    unbind_context,
)

# Models
from .models import WILDCARD, ContentEncoding, Delivery, Hook, SourcePlatform

# Dispatch
from .registry import DispatchReport, Dispatcher, HookRegistry

# Authentication
from .signatures import (
    authenticate,
    compute_github_signature,
    verify_github_signature,
    verify_gitlab_token,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Settings",
    # Exceptions
    "HookshotError",
    "UndeterminedSourceError",
    "InvalidPayloadError",
    "RegistryFrozenError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "get_logger",
    "logger",
    "bind_context",
    "unbind_context",
    "delivery_context",
    # Models
    "Delivery",
    "Hook",
    "SourcePlatform",
    "ContentEncoding",
    "WILDCARD",
    # Construction
    "DeliveryBuilder",
    "PendingDelivery",
    "DetectedSource",
    "PlatformDetector",
    "DockerHubDetector",
    "DEFAULT_DETECTORS",
    "detect_github",
    "detect_gitlab",
    "normalize_event",
    "resolve_content_encoding",
    # Dispatch
    "HookRegistry",
    "Dispatcher",
    "DispatchReport",
    # Authentication
    "authenticate",
    "compute_github_signature",
    "verify_github_signature",
    "verify_gitlab_token",
]
