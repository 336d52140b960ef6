"""Hook registry and dispatcher.

The registry maps an event pattern to a single hook. The dispatcher matches
an event against it (exact pattern first, then the "*" wildcard) and runs
the matched hooks that authenticate.

Example:
    ```python
    registry = HookRegistry()
    registry.register(Hook("push", "secret", on_push))
    registry.register(Hook("*", None, log_everything))

    dispatcher = Dispatcher(registry)
    hooks = dispatcher.match("push")  # [push hook, wildcard hook]
    report = await dispatcher.run(hooks, delivery)
    ```
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from hookshot.exceptions import RegistryFrozenError
from hookshot.logging import get_logger
from hookshot.models import WILDCARD, Hook
from hookshot.signatures import authenticate

if TYPE_CHECKING:
    from hookshot.models import Delivery

logger = get_logger(__name__)


class HookRegistry:
    """Mapping from event pattern to Hook.

    Registering a pattern twice replaces the earlier hook. Every mutation
    swaps in a new read-only snapshot, so concurrent readers always see a
    complete mapping without taking a lock. Once ``freeze`` is called the
    registry rejects further registrations.
    """

    def __init__(self) -> None:
        self._hooks: Mapping[str, Hook] = MappingProxyType({})
        self._frozen = False
        self._write_lock = threading.Lock()

    def register(self, hook: Hook) -> None:
        """Register a hook under its event pattern, replacing any existing one.

        Raises:
            RegistryFrozenError: If the registry has been frozen.
        """
        with self._write_lock:
            if self._frozen:
                raise RegistryFrozenError(hook.event_pattern)
            if hook.event_pattern in self._hooks:
                logger.info("Replacing registered hook", event_pattern=hook.event_pattern)
            self._hooks = MappingProxyType({**self._hooks, hook.event_pattern: hook})
        logger.debug("Hook registered", event_pattern=hook.event_pattern)

    def freeze(self) -> None:
        """Reject all further registrations."""
        with self._write_lock:
            self._frozen = True
        logger.debug("Hook registry frozen", hooks=len(self._hooks))

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, event_pattern: str) -> Hook | None:
        return self._hooks.get(event_pattern)

    def match(self, event: str) -> list[Hook]:
        """Find the hooks for a normalized event name.

        Returns:
            The exact-match hook (if any) followed by the wildcard hook
            (if any). An event named "*" yields the wildcard hook twice.
        """
        snapshot = self._hooks
        return [
            hook
            for hook in (snapshot.get(event), snapshot.get(WILDCARD))
            if hook is not None
        ]

    def __len__(self) -> int:
        return len(self._hooks)

    def __contains__(self, event_pattern: object) -> bool:
        return event_pattern in self._hooks

    def __iter__(self) -> Iterator[str]:
        return iter(self._hooks)


class DispatchReport(BaseModel):
    """Outcome of running the matched hooks for one delivery.

    Attributes:
        event: Normalized event name.
        matched: Hooks that matched the event.
        invoked: Callbacks that ran to completion.
        skipped: Hooks skipped because authentication failed.
        failed: Callbacks that raised an exception.
    """

    model_config = ConfigDict(extra="forbid")

    event: str
    matched: int = Field(default=0, ge=0)
    invoked: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)


class Dispatcher:
    """Runs matched hooks against a delivery.

    Hooks run one after another in match order. A hook whose authentication
    fails is filtered out before invocation; the others still run. A callback
    that raises is logged and counted, and never stops the remaining hooks.
    """

    def __init__(self, registry: HookRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> HookRegistry:
        return self._registry

    def match(self, event: str) -> list[Hook]:
        """Find the hooks for a normalized event name."""
        hooks = self._registry.match(event)
        logger.debug("Matched hooks", event_name=event, count=len(hooks))
        return hooks

    async def run(self, hooks: list[Hook], delivery: Delivery) -> DispatchReport:
        """Authenticate and invoke each hook in order.

        Args:
            hooks: Dispatch set from ``match``.
            delivery: Completed delivery passed to every callback.

        Returns:
            DispatchReport with per-outcome counts.
        """
        report = DispatchReport(event=delivery.event, matched=len(hooks))

        authenticated = [hook for hook in hooks if authenticate(hook, delivery)]
        report.skipped = len(hooks) - len(authenticated)
        if report.skipped:
            logger.info(
                "Skipped hooks that failed authentication",
                event_name=delivery.event,
                skipped=report.skipped,
            )

        for hook in authenticated:
            logger.debug("Running hook", event_pattern=hook.event_pattern)
            try:
                await hook.invoke(delivery)
            except Exception:
                report.failed += 1
                logger.exception("Hook callback failed", event_pattern=hook.event_pattern)
                continue
            report.invoked += 1

        logger.info(
            "Delivery dispatched",
            event_name=report.event,
            matched=report.matched,
            invoked=report.invoked,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    async def dispatch(self, delivery: Delivery) -> DispatchReport:
        """Match and run hooks for a delivery in one call."""
        return await self.run(self.match(delivery.event), delivery)
