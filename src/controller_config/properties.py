from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from . import constants
from .exceptions import ConfigValidationError

logger = logging.getLogger("controller_config.properties")
logger.addHandler(logging.NullHandler())

__all__ = [
    "PropertySpec",
    "PropertyRegistry",
    "REGISTRY",
    "register_property",
    "builtin_registry",
]


@dataclass(frozen=True)
class PropertySpec:
    key: str
    default: Optional[str] = None
    validator: Optional[Callable[[str], bool]] = None

    def validate(self, value: str) -> None:
        if not isinstance(value, str):
            raise ConfigValidationError({self.key: f"Expected str, got {type(value)}."})
        if self.validator is None:
            return
        try:
            valid = self.validator(value)
        except Exception as e:
            raise ConfigValidationError(
                {self.key: f"Custom validator raised exception: {e}"}
            ) from e
        if not valid:
            raise ConfigValidationError({self.key: "Custom validator returned False."})


class PropertyRegistry:
    """Known config map properties. Unknown keys in a config map are tolerated."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._specs: Dict[str, PropertySpec] = {}

    def register(self, spec: PropertySpec, override: bool = False) -> None:
        with self._lock:
            if not override and spec.key in self._specs:
                logger.error("Register failed: %r already registered", spec.key)
                raise ValueError(f"Property '{spec.key}' already registered")
            self._specs[spec.key] = spec
            logger.debug("Registered property %r default=%r", spec.key, spec.default)

    def get(self, key: str) -> Optional[PropertySpec]:
        with self._lock:
            return self._specs.get(key)

    def default_for(self, key: str) -> str:
        """Return the registered default of ``key``; KeyError if it has none."""
        spec = self.get(key)
        if spec is None or spec.default is None:
            raise KeyError(f"Property '{key}' has no registered default")
        return spec.default

    def validate(self, data: Mapping[str, str]) -> None:
        """Run every registered check against the properties present in ``data``."""
        with self._lock:
            specs = list(self._specs.values())
        errors: Dict[str, str] = {}
        for spec in specs:
            if spec.key not in data:
                continue
            try:
                spec.validate(data[spec.key])
            except ConfigValidationError as exc:
                errors.update(exc.errors)
        if errors:
            logger.error("Config map validation failed: %s", errors)
            raise ConfigValidationError(errors)

    def clear(self) -> None:
        with self._lock:
            self._specs.clear()


def builtin_registry() -> PropertyRegistry:
    """Return a registry holding the properties the controller understands."""
    registry = PropertyRegistry()
    for key, default in (
        (constants.WORKSPACE_PVC_NAME, constants.DEFAULT_WORKSPACE_PVC_NAME),
        (constants.ROUTING_CLASS, constants.DEFAULT_ROUTING_CLASS),
        (constants.EXPERIMENTAL_FEATURES_ENABLED, constants.DEFAULT_EXPERIMENTAL_FEATURES_ENABLED),
        (constants.SIDECAR_PULL_POLICY, constants.DEFAULT_SIDECAR_PULL_POLICY),
        (constants.WORKSPACE_IDLE_TIMEOUT, constants.DEFAULT_WORKSPACE_IDLE_TIMEOUT),
        # presence-aware, no default
        (constants.WORKSPACE_PVC_STORAGE_CLASS_NAME, None),
        (constants.ROUTING_SUFFIX, None),
    ):
        registry.register(PropertySpec(key, default=default))
    return registry


REGISTRY = builtin_registry()


def register_property(
    key: str,
    *,
    default: Optional[str] = None,
    validator: Optional[Callable[[str], bool]] = None,
    override: bool = False,
) -> None:
    """Register a property, and optionally its check, on the process registry."""
    REGISTRY.register(
        PropertySpec(key=key, default=default, validator=validator),
        override=override,
    )
