from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Dict


class ControllerConfigError(Exception):
    """Base controller config exception."""


class ReferenceUnresolvedError(ControllerConfigError):
    """Raised when the namespace of the tracked config map cannot be determined."""


class ObjectNotFoundError(ControllerConfigError):
    """Raised by object clients when the requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(f"{kind} '{name}' not found in namespace '{namespace}'")


class ObjectNotFoundAndCreateDisallowedError(ControllerConfigError):
    """Raised when an explicitly named config map is missing; no default is substituted."""


class CreateFailedError(ControllerConfigError):
    """Raised when the default config map cannot be created."""


class EnrichmentFailedError(ControllerConfigError):
    """Raised when the routing suffix cannot be probed or persisted."""


class RefetchFailedError(ControllerConfigError):
    """Raised when a config map re-read fails during event handling. Never escapes the filter."""


class DeadlineExceededError(ControllerConfigError):
    """Raised when an object store call does not complete within its deadline.

    ``pending`` is the future of the abandoned call, which may still complete.
    """

    def __init__(self, message: str, pending: Future[Any] | None = None) -> None:
        self.pending = pending
        super().__init__(message)


class ConfigValidationError(ControllerConfigError):
    """Raised when validation fails for one or more properties."""

    def __init__(
        self, errors: Dict[str, str], key: str | None = None, value: object | None = None
    ) -> None:
        self.errors = errors
        self.key = key
        self.value = value
        msg = f"Validation errors: {errors}"
        if key is not None and value is not None:
            msg += f" (key: {key}, value: {value})"
        super().__init__(msg)
