"""Framework-neutral request handling.

``WebhookAdapter`` sequences the builder and dispatcher for one request and
maps the outcome to a status code and plain-text body. The FastAPI app in
``hookshot.api.app`` is a thin wrapper around it; other HTTP engines can
call ``handle`` directly.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping

from pydantic import BaseModel, ConfigDict

from hookshot.builder import DeliveryBuilder
from hookshot.exceptions import InvalidPayloadError, UndeterminedSourceError
from hookshot.logging import delivery_context, get_logger
from hookshot.registry import Dispatcher, HookRegistry

logger = get_logger(__name__)

INVALID_PAYLOAD = "Invalid payload"
NO_MATCHED_HOOK = "No matched hook configured"
OK = "OK"

BodyReader = Callable[[], Awaitable[bytes]]


class WebhookResponse(BaseModel):
    """Status code and plain-text body to send back."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status_code: int
    body: str

    @classmethod
    def accepted(cls, body: str) -> WebhookResponse:
        return cls(status_code=202, body=body)

    @classmethod
    def ok(cls) -> WebhookResponse:
        return cls(status_code=200, body=OK)


class WebhookAdapter:
    """Handles one webhook request at a time, safe to share across tasks.

    Args:
        registry: Hooks to dispatch to.
        builder: Delivery builder. Defaults to the standard detectors
            with payload parsing enabled.
    """

    def __init__(self, registry: HookRegistry, builder: DeliveryBuilder | None = None) -> None:
        self.builder = builder or DeliveryBuilder()
        self.dispatcher = Dispatcher(registry)

    async def handle(self, headers: Mapping[str, str], read_body: BodyReader) -> WebhookResponse:
        """Process a webhook request.

        Args:
            headers: Request headers.
            read_body: Returns the fully buffered body. Only awaited when at
                least one hook matches the event.

        Returns:
            202 "Invalid payload" if the source is unknown or the body is
            unusable, 202 "No matched hook configured" if nothing matches,
            otherwise 200 "OK" once every matched hook has been processed.
        """
        try:
            pending = self.builder.from_headers(headers)
        except UndeterminedSourceError as e:
            logger.info("Rejected delivery", reason=e.message)
            return WebhookResponse.accepted(INVALID_PAYLOAD)

        with delivery_context(
            event_name=pending.event,
            source=pending.source_platform.value,
            delivery_id=pending.id,
        ):
            hooks = self.dispatcher.match(pending.event)
            if not hooks:
                logger.info("No matched hook configured")
                return WebhookResponse.accepted(NO_MATCHED_HOOK)

            body = await read_body()
            try:
                delivery = self.builder.complete(pending, body)
            except InvalidPayloadError as e:
                logger.info("Rejected delivery", reason=e.message)
                return WebhookResponse.accepted(INVALID_PAYLOAD)

            await self.dispatcher.run(hooks, delivery)
            return WebhookResponse.ok()
