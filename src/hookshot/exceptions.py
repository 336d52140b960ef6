"""Hookshot exception hierarchy.

Provides structured exceptions for error handling throughout the codebase.
All exceptions inherit from HookshotError for easy catching.
"""

from __future__ import annotations


class HookshotError(Exception):
    """Base exception for all Hookshot errors.

    All custom exceptions in Hookshot inherit from this class,
    allowing callers to catch all Hookshot-related errors with
    a single except clause.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
    """

    code: str = "hookshot_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class UndeterminedSourceError(HookshotError):
    """The sending platform could not be identified.

    Raised when the request headers match none of the registered
    platform detectors.
    """

    code: str = "undetermined_source"

    def __init__(self, message: str = "Could not determine delivery source") -> None:
        super().__init__(message)


class InvalidPayloadError(HookshotError):
    """The request body could not be used.

    Raised when the body cannot be decoded into text.
    """

    code: str = "invalid_payload"


class RegistryFrozenError(HookshotError):
    """Registration attempted on a frozen registry.

    Attributes:
        event_pattern: Pattern of the hook that was rejected.
    """

    code: str = "registry_frozen"

    def __init__(self, event_pattern: str) -> None:
        self.event_pattern = event_pattern
        super().__init__(f"Registry is frozen, cannot register hook for '{event_pattern}'")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "event_pattern": self.event_pattern,
                "message": self.message,
            }
        }


class ConfigurationError(HookshotError):
    """Configuration error.

    Raised when required configuration is missing or invalid.
    """

    code: str = "configuration_error"
