"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from hookshot import Delivery, Hook, HookRegistry
from hookshot.signatures import compute_github_signature

# Add tests directory to path so helpers can be imported
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

SECRET = "secret"


class RecordingCallback:
    """Callback that records every delivery it receives."""

    def __init__(self) -> None:
        self.deliveries: list[Delivery] = []

    def __call__(self, delivery: Delivery) -> None:
        self.deliveries.append(delivery)

    @property
    def called(self) -> bool:
        return bool(self.deliveries)


def github_headers(body: bytes | str, event: str = "push", secret: str = SECRET) -> dict[str, str]:
    """Headers for a signed GitHub JSON delivery."""
    return {
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-Hub-Signature": compute_github_signature(body, secret),
        "Content-Type": "application/json",
    }


@pytest.fixture
def recorder() -> RecordingCallback:
    return RecordingCallback()


@pytest.fixture
def wildcard_recorder() -> RecordingCallback:
    return RecordingCallback()


@pytest.fixture
def registry(recorder: RecordingCallback, wildcard_recorder: RecordingCallback) -> HookRegistry:
    """Registry with a secret "push" hook and an open wildcard hook."""
    registry = HookRegistry()
    registry.register(Hook("push", SECRET, recorder))
    registry.register(Hook("*", None, wildcard_recorder))
    return registry
