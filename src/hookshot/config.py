"""Configuration management for Hookshot."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

if TYPE_CHECKING:
    from hookshot.builder import PlatformDetector

logger = logging.getLogger(__name__)

# Value of x-newrelic-id observed on Docker Hub deliveries. Docker Hub does not
# document it, so it stays overridable.
DOCKER_HUB_NEWRELIC_ID = "UQUFVFJUGwUJVlhaBgY="


class Settings(BaseSettings):
    """Hookshot configuration.

    Values are read from the environment with the ``HOOKSHOT_`` prefix,
    or from a ``.env`` file in the working directory.

    The core classes never read settings on their own; ``create_app``
    passes the relevant values down.

    Example:
        ```bash
        HOOKSHOT_LOG_LEVEL=DEBUG HOOKSHOT_ENDPOINT_PATH=/hooks python examples/simple.py
        ```
    """

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # Endpoint
    endpoint_path: str = Field(
        default="/",
        description="Path the webhook endpoint is mounted at",
    )

    # Delivery construction
    parse_payload: bool = Field(
        default=True,
        description="Deserialize the raw payload as JSON into parsed_payload",
    )
    docker_hub_newrelic_id: str | None = Field(
        default=DOCKER_HUB_NEWRELIC_ID,
        description=(
            "x-newrelic-id value identifying Docker Hub deliveries. "
            "Empty disables Docker Hub detection."
        ),
    )

    # Registry
    freeze_registry: bool = Field(
        default=True,
        description="Freeze the hook registry when the application starts",
    )

    model_config = {
        "env_prefix": "HOOKSHOT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("endpoint_path")
    @classmethod
    def _check_endpoint_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("endpoint_path must start with '/'")
        return value

    def build_detectors(self) -> list[PlatformDetector]:
        """Build the platform detector chain for these settings.

        Returns:
            GitHub and GitLab detectors, followed by the Docker Hub detector
            when a sentinel is configured.
        """
        from hookshot.builder import DockerHubDetector, detect_github, detect_gitlab

        detectors: list[PlatformDetector] = [detect_github, detect_gitlab]
        if self.docker_hub_newrelic_id:
            detectors.append(DockerHubDetector(self.docker_hub_newrelic_id))
        else:
            logger.debug("Docker Hub detection disabled")
        return detectors
