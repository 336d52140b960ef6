"""Data models for Hookshot.

Models:
    - Delivery: Immutable, normalized record of one inbound webhook
    - Hook: Event pattern, optional secret and callback

Supporting Types:
    - SourcePlatform: GitHub, GitLab or Docker Hub
    - ContentEncoding: JSON or form-urlencoded request body
"""

from .delivery import ContentEncoding, Delivery, SourcePlatform
from .hook import WILDCARD, Hook, HookCallback

__all__ = [
    "WILDCARD",
    "ContentEncoding",
    "Delivery",
    "Hook",
    "HookCallback",
    "SourcePlatform",
]
