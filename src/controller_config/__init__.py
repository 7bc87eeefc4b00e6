"""
controller_config: synchronized, in-memory view of the controller config map.

- Resolves which config map to track from the environment.
- Fetches or creates it at startup and records the cluster routing suffix.
- Keeps the cached copy current from watch events.
- Exposes typed accessors with static defaults.
"""

from __future__ import annotations

from controller_config.client import DeadlineClient, ObjectClient
from controller_config.config import ControllerConfig
from controller_config.events import ConfigMapEventFilter, EventKind, WatchEvent
from controller_config.exceptions import (
    ConfigValidationError,
    ControllerConfigError,
    CreateFailedError,
    DeadlineExceededError,
    EnrichmentFailedError,
    ObjectNotFoundAndCreateDisallowedError,
    ObjectNotFoundError,
    ReferenceUnresolvedError,
    RefetchFailedError,
)
from controller_config.objects import (
    ConfigMap,
    ObjectKey,
    ObjectMeta,
    PartialObjectMetadata,
    Route,
)
from controller_config.properties import PropertySpec, register_property
from controller_config.reference import ConfigReference, resolve_reference
from controller_config.sync import config_map_predicates, watch_controller_config

__all__ = [
    "ControllerConfig",
    "ConfigReference",
    "resolve_reference",
    "watch_controller_config",
    "config_map_predicates",
    "ConfigMapEventFilter",
    "EventKind",
    "WatchEvent",
    "ObjectClient",
    "DeadlineClient",
    "ConfigMap",
    "Route",
    "ObjectMeta",
    "ObjectKey",
    "PartialObjectMetadata",
    "PropertySpec",
    "register_property",
    "ControllerConfigError",
    "ReferenceUnresolvedError",
    "ObjectNotFoundError",
    "ObjectNotFoundAndCreateDisallowedError",
    "CreateFailedError",
    "EnrichmentFailedError",
    "RefetchFailedError",
    "DeadlineExceededError",
    "ConfigValidationError",
]
