"""Two-phase construction of deliveries from raw requests.

Phase 1 (``DeliveryBuilder.from_headers``) looks only at headers: it detects
the sending platform, normalizes the event name and resolves the content
encoding. That is enough to decide whether any hook matches, so the body of
unmatched requests never has to be read.

Phase 2 (``PendingDelivery.complete``) takes the buffered body, extracts the
payload and returns the immutable ``Delivery``.

Example:
    ```python
    builder = DeliveryBuilder()
    pending = builder.from_headers({"X-GitHub-Event": "push"})
    delivery = pending.complete(b'{"ref": "refs/heads/main"}')
    ```
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Protocol
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field

from hookshot.config import DOCKER_HUB_NEWRELIC_ID
from hookshot.exceptions import InvalidPayloadError, UndeterminedSourceError
from hookshot.logging import get_logger
from hookshot.models import ContentEncoding, Delivery, SourcePlatform

logger = get_logger(__name__)

# Header names, lowercase
GITHUB_EVENT_HEADER = "x-github-event"
GITHUB_DELIVERY_HEADER = "x-github-delivery"
GITHUB_SIGNATURE_HEADER = "x-hub-signature"
GITLAB_EVENT_HEADER = "x-gitlab-event"
GITLAB_TOKEN_HEADER = "x-gitlab-token"
NEWRELIC_ID_HEADER = "x-newrelic-id"
CONTENT_TYPE_HEADER = "content-type"

DOCKER_HUB_EVENT = "docker_push"
FORM_PAYLOAD_FIELD = "payload"

_CONTENT_TYPES = {
    "application/json": ContentEncoding.JSON,
    "application/x-www-form-urlencoded": ContentEncoding.FORM_URLENCODED,
}

_SIGNATURE_HEADERS = {
    SourcePlatform.GITHUB: GITHUB_SIGNATURE_HEADER,
    SourcePlatform.GITLAB: GITLAB_TOKEN_HEADER,
}


class DetectedSource(BaseModel):
    """Platform and raw event name found by a detector."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    platform: SourcePlatform
    event: str = Field(min_length=1)


class PlatformDetector(Protocol):
    """Identifies the sending platform from lowercase-keyed headers.

    Returns None when the headers do not belong to this platform.
    """

    def __call__(self, headers: Mapping[str, str]) -> DetectedSource | None: ...


def detect_github(headers: Mapping[str, str]) -> DetectedSource | None:
    event = headers.get(GITHUB_EVENT_HEADER)
    if not event:
        return None
    return DetectedSource(platform=SourcePlatform.GITHUB, event=event)


def detect_gitlab(headers: Mapping[str, str]) -> DetectedSource | None:
    event = headers.get(GITLAB_EVENT_HEADER)
    if not event:
        return None
    return DetectedSource(platform=SourcePlatform.GITLAB, event=event)


class DockerHubDetector:
    """Detects Docker Hub by its x-newrelic-id header value.

    Docker Hub sends no event header of its own. The x-newrelic-id value is
    undocumented and may change, which is why the sentinel is a parameter.
    """

    def __init__(self, newrelic_id: str = DOCKER_HUB_NEWRELIC_ID) -> None:
        self.newrelic_id = newrelic_id

    def __call__(self, headers: Mapping[str, str]) -> DetectedSource | None:
        if headers.get(NEWRELIC_ID_HEADER) != self.newrelic_id:
            return None
        return DetectedSource(platform=SourcePlatform.DOCKER_HUB, event=DOCKER_HUB_EVENT)

    def __repr__(self) -> str:
        return f"DockerHubDetector(newrelic_id={self.newrelic_id!r})"


DEFAULT_DETECTORS: tuple[PlatformDetector, ...] = (
    detect_github,
    detect_gitlab,
    DockerHubDetector(),
)


def normalize_event(event: str) -> str:
    """Lowercase an event name and replace spaces with underscores.

    GitLab sends names such as "Push Hook", which become "push_hook".
    """
    return event.lower().replace(" ", "_")


def resolve_content_encoding(content_type: str | None) -> ContentEncoding:
    """Map a content-type header to a ContentEncoding.

    Unknown or missing content types fall back to JSON.
    """
    if content_type is None:
        return ContentEncoding.JSON
    media_type = content_type.split(";", 1)[0].strip().lower()
    return _CONTENT_TYPES.get(media_type, ContentEncoding.JSON)


def extract_payload(encoding: ContentEncoding, body: str) -> str | None:
    """Extract the payload text from a request body.

    JSON bodies are the payload. Form bodies carry it in the "payload" field;
    if that field is repeated the last value wins.
    """
    if encoding is ContentEncoding.JSON:
        return body
    fields = dict(parse_qsl(body, keep_blank_values=True))
    return fields.get(FORM_PAYLOAD_FIELD)


def parse_payload(raw_payload: str | None) -> Any | None:
    """Deserialize a payload as JSON, returning None if it is not valid JSON."""
    if raw_payload is None:
        return None
    try:
        return json.loads(raw_payload)
    except ValueError:
        logger.debug("Payload is not valid JSON, leaving it unparsed")
        return None


class PendingDelivery(BaseModel):
    """Header-only result of phase 1.

    Carries everything the dispatcher needs for matching. It is not a
    Delivery and cannot be passed to callbacks; call ``complete`` with the
    buffered body to obtain one.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_platform: SourcePlatform
    content_encoding: ContentEncoding
    id: str | None = None
    event: str = Field(min_length=1)
    signature: str | None = None

    def complete(self, body: bytes | str | None, parse: bool = True) -> Delivery:
        """Finish construction with the full request body.

        Args:
            body: Fully buffered request body, or None if there is none.
            parse: Whether to JSON-parse the payload into ``parsed_payload``.

        Returns:
            The immutable Delivery.

        Raises:
            InvalidPayloadError: If the body is not valid UTF-8.
        """
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidPayloadError(f"Request body is not valid UTF-8: {e}") from e

        raw_payload = extract_payload(self.content_encoding, body) if body is not None else None
        parsed_payload = parse_payload(raw_payload) if parse else None

        logger.debug(
            "Delivery completed",
            has_payload=raw_payload is not None,
            parsed=parsed_payload is not None,
        )

        return Delivery(
            source_platform=self.source_platform,
            content_encoding=self.content_encoding,
            id=self.id,
            event=self.event,
            raw_payload=raw_payload,
            parsed_payload=parsed_payload,
            raw_request_body=body,
            signature=self.signature,
        )


class DeliveryBuilder:
    """Builds deliveries from request headers and bodies.

    Args:
        detectors: Platform detectors tried in order, first match wins.
            Defaults to GitHub, GitLab, Docker Hub.
        parse: Whether to JSON-parse payloads into ``parsed_payload``.
    """

    def __init__(
        self,
        detectors: Sequence[PlatformDetector] | None = None,
        parse: bool = True,
    ) -> None:
        self.detectors: tuple[PlatformDetector, ...] = (
            tuple(detectors) if detectors is not None else DEFAULT_DETECTORS
        )
        self.parse = parse

    def detect(self, headers: Mapping[str, str]) -> DetectedSource:
        """Run the detector chain over lowercase-keyed headers.

        Raises:
            UndeterminedSourceError: If no detector recognizes the headers.
        """
        for detector in self.detectors:
            detected = detector(headers)
            if detected is not None:
                return detected
        raise UndeterminedSourceError()

    def from_headers(self, headers: Mapping[str, str]) -> PendingDelivery:
        """Phase 1: build a PendingDelivery from headers alone.

        Args:
            headers: Request headers. Names are matched case-insensitively.

        Returns:
            PendingDelivery ready for hook matching.

        Raises:
            UndeterminedSourceError: If the sending platform is unknown.
        """
        lowered = {name.lower(): value for name, value in headers.items()}
        detected = self.detect(lowered)
        platform = detected.platform

        signature_header = _SIGNATURE_HEADERS.get(platform)
        pending = PendingDelivery(
            source_platform=platform,
            content_encoding=resolve_content_encoding(lowered.get(CONTENT_TYPE_HEADER)),
            id=lowered.get(GITHUB_DELIVERY_HEADER) if platform is SourcePlatform.GITHUB else None,
            event=normalize_event(detected.event),
            signature=lowered.get(signature_header) if signature_header else None,
        )

        logger.debug(
            "Delivery source detected",
            source=platform.value,
            event_name=pending.event,
            content_encoding=pending.content_encoding.value,
        )
        return pending

    def complete(self, pending: PendingDelivery, body: bytes | str | None) -> Delivery:
        """Phase 2: complete a pending delivery using this builder's parse option."""
        return pending.complete(body, parse=self.parse)

    def build(self, headers: Mapping[str, str], body: bytes | str | None) -> Delivery:
        """Run both phases in one call."""
        return self.complete(self.from_headers(headers), body)
