from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Callable, Mapping, Optional

from .bootstrap import get_or_create
from .client import DeadlineClient, ObjectClient
from .config import ControllerConfig
from .constants import DEFAULT_CLIENT_TIMEOUT
from .events import ConfigMapEventFilter
from .reference import ConfigReference, resolve_reference
from .routing import fill_routing_suffix_if_necessary

logger = logging.getLogger("controller_config.sync")
logger.addHandler(logging.NullHandler())


def watch_controller_config(
    direct_client_factory: Callable[[], ObjectClient],
    is_openshift: Callable[[], bool],
    *,
    config: Optional[ControllerConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = DEFAULT_CLIENT_TIMEOUT,
) -> tuple[ControllerConfig, ConfigReference]:
    """
    Bootstrap the controller configuration before the watch is started.

    Resolves the config map reference, fetches or creates the config map
    through an uncached client, records the routing suffix when routes are
    available, and primes ``config``. Every store call is bounded by
    ``timeout`` seconds. All failures propagate and should abort startup.
    """
    reference = resolve_reference(environ)
    if config is None:
        config = ControllerConfig()

    client = DeadlineClient(direct_client_factory(), timeout)

    config_map = get_or_create(client, reference)
    if config_map.data is None:
        config_map.data = {}
    config_map = fill_routing_suffix_if_necessary(client, config_map, is_openshift)

    config.update(config_map)
    return config, reference


def config_map_predicates(
    config: ControllerConfig,
    reference: ConfigReference,
    client: ObjectClient,
    *,
    refetch_executor: Optional[Executor] = None,
    timeout: Optional[float] = DEFAULT_CLIENT_TIMEOUT,
) -> ConfigMapEventFilter:
    """Build the event filter the watch subsystem calls for every config map event."""
    return ConfigMapEventFilter(
        config,
        reference,
        DeadlineClient(client, timeout),
        refetch_executor=refetch_executor,
    )
