#!/usr/bin/env python3
"""Minimal webhook listener.

Registers a wildcard hook, a GitHub push hook and a GitLab push hook, all
with the secret "secret", then serves them on port 4567.

Requires the server extra:
    pip install "hookshot[server]"
    HOOKSHOT_LOG_FORMAT=text python examples/simple.py
"""

import uvicorn

from hookshot import Delivery, Hook, HookRegistry, SourcePlatform, get_logger
from hookshot.api import create_app

logger = get_logger("hookshot.example")


def on_any(delivery: Delivery) -> None:
    payload = delivery.parsed_payload
    if not isinstance(payload, dict):
        logger.info("Received delivery", event_name=delivery.event)
        return

    if delivery.source_platform is SourcePlatform.GITHUB:
        action = payload.get("action")
    else:
        action = payload.get("event_name")
    logger.info("Received action", event_name=delivery.event, action=action)


def on_github_push(delivery: Delivery) -> None:
    logger.info("Pushed!", delivery_id=delivery.id)


def on_gitlab_push(delivery: Delivery) -> None:
    logger.info("GitLab pushed")


def main() -> None:
    registry = HookRegistry()
    registry.register(Hook("*", "secret", on_any))
    registry.register(Hook("push", "secret", on_github_push))
    registry.register(Hook("push_hook", "secret", on_gitlab_push))

    app = create_app(registry)
    uvicorn.run(app, host="0.0.0.0", port=4567)


if __name__ == "__main__":
    main()
