from __future__ import annotations

import enum
import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Optional

from .client import ObjectClient
from .config import ControllerConfig
from .exceptions import RefetchFailedError
from .objects import CONFIG_MAP_KIND, ConfigMap, ObjectKey
from .reference import ConfigReference

logger = logging.getLogger("controller_config.events")
logger.addHandler(logging.NullHandler())


class EventKind(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    OTHER = "other"


@dataclass(frozen=True)
class WatchEvent:
    """A change notification from the watch subsystem.

    For updates ``obj`` is the new version of the object.
    """

    kind: EventKind
    obj: Any

    @property
    def key(self) -> Optional[ObjectKey]:
        """Identity of the payload, or None when it carries no usable metadata."""
        meta = getattr(self.obj, "metadata", None)
        name = getattr(meta, "name", None)
        namespace = getattr(meta, "namespace", None)
        if name is None or namespace is None:
            return None
        return ObjectKey(namespace, name)


class ConfigMapEventFilter:
    """
    Keeps a ControllerConfig in sync with watch events for the tracked config map.

    Calling the filter never asks for reconciliation: it always returns False,
    and errors are logged rather than raised. Deletion of the config map
    leaves the last known configuration in place. When the payload is not a
    ConfigMap the object is re-read through ``client``; a failed re-read is
    logged and the previous snapshot kept. With ``refetch_executor`` set,
    re-reads run there instead of on the delivering thread.

    Updates are applied one at a time. A re-read is discarded if another
    update was applied after it started, so an older copy never replaces a
    newer one.
    """

    def __init__(
        self,
        config: ControllerConfig,
        reference: ConfigReference,
        client: ObjectClient,
        *,
        refetch_executor: Optional[Executor] = None,
    ) -> None:
        self._config = config
        self._reference = reference
        self._client = client
        self._refetch_executor = refetch_executor
        self._apply_lock = threading.Lock()
        self._generation = 0

    def __call__(self, event: WatchEvent) -> bool:
        if event.kind in (EventKind.CREATED, EventKind.UPDATED):
            key = event.key
            if key is None:
                logger.debug(
                    "Ignoring %s event for %s without object metadata",
                    event.kind.value,
                    type(event.obj).__name__,
                )
            elif self._reference.matches(key):
                self._sync(event.obj)
        elif event.kind in (EventKind.DELETED, EventKind.OTHER):
            pass
        else:
            raise ValueError(f"Unknown event kind {event.kind!r}")
        return False

    def _sync(self, obj: Any) -> None:
        if isinstance(obj, ConfigMap):
            self._apply(obj)
            return
        logger.debug("Event payload for %s is %s; re-reading", self._reference.key, type(obj))
        if self._refetch_executor is not None:
            future = self._refetch_executor.submit(self.refresh)
            future.add_done_callback(self._log_refresh_failure)
        else:
            self.refresh()

    def _apply(self, config_map: ConfigMap, generation: Optional[int] = None) -> bool:
        with self._apply_lock:
            if generation is not None and generation != self._generation:
                logger.debug(
                    "Discarding re-read of %s; a newer configuration was applied meanwhile",
                    self._reference.key,
                )
                return False
            self._generation += 1
            try:
                self._config.update(config_map)
            except Exception as exc:
                logger.error("Error applying configuration from %s: %s", self._reference.key, exc)
                return False
        return True

    def _refetch(self) -> ConfigMap:
        ref = self._reference
        try:
            return self._client.get(CONFIG_MAP_KIND, ref.namespace, ref.name)
        except Exception as exc:
            raise RefetchFailedError(
                f"Cannot find the '{ref.name}' ConfigMap in namespace '{ref.namespace}'"
            ) from exc

    def refresh(self) -> bool:
        """Re-read the tracked config map and update the cache. Returns True if it was applied."""
        with self._apply_lock:
            generation = self._generation
        try:
            config_map = self._refetch()
        except RefetchFailedError as exc:
            logger.error("%s: %s; keeping previous configuration", exc, exc.__cause__)
            return False
        return self._apply(config_map, generation)

    def _log_refresh_failure(self, future: Future[bool]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Re-read of %s failed: %s", self._reference.key, exc)
