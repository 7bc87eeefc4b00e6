from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Iterator, Literal, Mapping, Optional

from . import constants
from .hooks import ConfigChange, Hook, HookBus
from .history import History
from .objects import ConfigMap, ObjectKey
from .properties import REGISTRY, PropertyRegistry
from .utils import EMPTY_DATA, _frozen_data

logger = logging.getLogger("controller_config.config")
logger.addHandler(logging.NullHandler())


class ControllerConfig:
    """
    In-memory view of the controller config map.

    The cached data is replaced wholesale by update(); readers take one
    reference per call and so always see a single complete snapshot. Before
    the first sync every accessor falls back to the default registered for
    its property.
    """

    def __init__(
        self,
        registry: Optional[PropertyRegistry] = None,
        *,
        hook_failure_mode: Literal["ignore", "log", "raise"] = "log",
        history: Optional[History] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._data: Mapping[str, str] = EMPTY_DATA
        self._source: Optional[ObjectKey] = None
        self._registry = registry if registry is not None else REGISTRY
        self._hooks = HookBus(hook_failure_mode)
        self._history = history if history is not None else History()

    @property
    def source(self) -> Optional[ObjectKey]:
        """Identity of the config map last synced, or None before the first sync."""
        return self._source

    @property
    def history(self) -> History:
        return self._history

    def is_synced(self) -> bool:
        return self._source is not None

    def update(self, config_map: ConfigMap) -> None:
        """Replace the cached snapshot with the data of ``config_map``.

        Subscribed hooks run after the swap, outside the lock.
        """
        meta = config_map.metadata
        logger.info(
            "Updating the configuration from config map '%s' in namespace '%s'",
            meta.name,
            meta.namespace,
        )
        data = _frozen_data(config_map.data)
        source = ObjectKey(meta.namespace, meta.name)
        with self._lock:
            previous = self._data
            self._data = data
            self._source = source
            entry = self._history.add_entry(
                meta.namespace, meta.name, meta.resource_version, tuple(data)
            )
        self._hooks.notify(ConfigChange(source=source, previous=previous, data=data, entry=entry))

    def setup_for_testing(self, config_map: ConfigMap) -> None:
        """Prime the cache directly, without any object store."""
        self.update(config_map)

    def snapshot(self) -> Mapping[str, str]:
        """Return the current data as a read-only mapping."""
        return self._data

    def register_post_update_hook(
        self, func: Hook, keys: Optional[Iterable[str]] = None
    ) -> Callable[[], None]:
        """
        Call ``func`` with a ConfigChange after every update, or only after
        updates that change one of ``keys``. Returns an unsubscribe callable.
        """
        with self._lock:
            return self._hooks.subscribe(func, keys)

    def get_property(self, name: str) -> Optional[str]:
        """Return the stored value, which may be empty, or None when the key is absent."""
        return self._data.get(name)

    def get_property_or_default(self, name: str, default: str) -> str:
        data = self._data
        if name in data:
            return data[name]
        return default

    def get_registered_property(self, name: str) -> str:
        """Return the stored value, or the default the property registry holds for ``name``."""
        return self.get_property_or_default(name, self._registry.default_for(name))

    def validate(self) -> None:
        """Run registered property checks against the current snapshot."""
        self._registry.validate(self._data)

    def get_workspace_pvc_name(self) -> str:
        return self.get_registered_property(constants.WORKSPACE_PVC_NAME)

    def get_default_routing_class(self) -> str:
        return self.get_registered_property(constants.ROUTING_CLASS)

    def get_experimental_features_enabled(self) -> bool:
        """
        Return True if experimental features should be enabled.

        Do not turn this on in production. Experimental features are not well
        tested and may be removed without announcement.
        """
        return self.get_registered_property(constants.EXPERIMENTAL_FEATURES_ENABLED) == "true"

    def get_pvc_storage_class_name(self) -> Optional[str]:
        return self.get_property(constants.WORKSPACE_PVC_STORAGE_CLASS_NAME)

    def get_sidecar_pull_policy(self) -> str:
        return self.get_registered_property(constants.SIDECAR_PULL_POLICY)

    def get_workspace_idle_timeout(self) -> str:
        return self.get_registered_property(constants.WORKSPACE_IDLE_TIMEOUT)

    def get_routing_suffix(self) -> Optional[str]:
        return self.get_property(constants.ROUTING_SUFFIX)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"<ControllerConfig source={self._source} keys={len(self._data)}>"
