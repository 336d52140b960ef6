"""Delivery model: one normalized inbound webhook notification."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SourcePlatform(str, Enum):
    """Platform a delivery was sent from."""

    GITHUB = "github"
    GITLAB = "gitlab"
    DOCKER_HUB = "docker_hub"


class ContentEncoding(str, Enum):
    """Serialization format of the request body."""

    JSON = "json"
    FORM_URLENCODED = "form_urlencoded"


class Delivery(BaseModel):
    """A fully constructed webhook delivery.

    Instances are immutable. The builder only hands one out once the body
    has been processed, so callbacks never see a half-built value.

    Attributes:
        source_platform: Platform that sent the notification.
        content_encoding: How the request body was serialized.
        id: Delivery GUID (GitHub only, from x-github-delivery).
        event: Normalized event name (lowercase, spaces as underscores).
        raw_payload: Payload text extracted from the body.
        parsed_payload: raw_payload deserialized as JSON, if enabled and valid.
        raw_request_body: Exact request body text, used for signature checks.
        signature: x-hub-signature (GitHub) or x-gitlab-token (GitLab).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_platform: SourcePlatform = Field(description="Platform that sent the delivery")
    content_encoding: ContentEncoding = Field(
        default=ContentEncoding.JSON,
        description="Serialization format of the request body",
    )
    id: str | None = Field(default=None, description="Delivery GUID (GitHub only)")
    event: str = Field(min_length=1, description="Normalized event name")
    raw_payload: str | None = Field(default=None, description="Payload text")
    parsed_payload: Any = Field(default=None, description="Payload parsed as JSON")
    raw_request_body: str | None = Field(default=None, description="Exact request body text")
    signature: str | None = Field(default=None, description="Signature or token header value")

    @property
    def has_body(self) -> bool:
        """Whether the request body was captured."""
        return self.raw_request_body is not None


__all__ = [
    "ContentEncoding",
    "Delivery",
    "SourcePlatform",
]
