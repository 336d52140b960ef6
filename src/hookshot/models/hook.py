"""Hook model: binds an event pattern and optional secret to a callback."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from hookshot.exceptions import ConfigurationError

from .delivery import Delivery

# Pattern matching every event, in addition to exact matches
WILDCARD = "*"

HookCallback = Callable[[Delivery], Any]


@dataclass(frozen=True)
class Hook:
    """An event-pattern-to-callback binding.

    The callback is held by reference. The registry hands out the same
    Hook object for every matching request, so callbacks may close over
    shared state such as queues or clients.

    Attributes:
        event_pattern: Normalized event name, or "*" for every event.
        secret: Shared secret. None disables authentication for this hook.
        callback: Called with the Delivery. May be a coroutine function.

    Example:
        ```python
        from hookshot import Hook

        hook = Hook("push", "secret", lambda delivery: print(delivery.event))
        ```
    """

    event_pattern: str
    secret: str | None
    callback: HookCallback = field(compare=False)

    def __post_init__(self) -> None:
        if not self.event_pattern:
            raise ConfigurationError("Hook event_pattern must not be empty")
        if not callable(self.callback):
            raise ConfigurationError(
                f"Hook callback for '{self.event_pattern}' is not callable"
            )

    @property
    def is_wildcard(self) -> bool:
        """Whether this hook matches every event."""
        return self.event_pattern == WILDCARD

    async def invoke(self, delivery: Delivery) -> None:
        """Run the callback, awaiting it if it returned an awaitable."""
        result = self.callback(delivery)
        if inspect.isawaitable(result):
            await result

    def __repr__(self) -> str:
        # The secret never appears in logs
        secret = "set" if self.secret is not None else "none"
        return f"Hook(event_pattern={self.event_pattern!r}, secret={secret})"
