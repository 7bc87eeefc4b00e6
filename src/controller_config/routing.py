"""Discovery of the cluster routing suffix through a throwaway route."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from .client import ObjectClient
from .constants import ROUTING_SUFFIX, TEST_ROUTE_NAME, TEST_ROUTE_TARGET_KIND
from .exceptions import DeadlineExceededError, EnrichmentFailedError, ObjectNotFoundError
from .objects import ConfigMap, ObjectMeta, Route

logger = logging.getLogger("controller_config.routing")
logger.addHandler(logging.NullHandler())


def build_probe_route(namespace: str) -> Route:
    # Targets a service that never exists; only the admitted host matters
    return Route(
        metadata=ObjectMeta(name=TEST_ROUTE_NAME, namespace=namespace),
        target_kind=TEST_ROUTE_TARGET_KIND,
        target_name=TEST_ROUTE_NAME,
    )


def routing_suffix_from_host(host: str, namespace: str) -> str:
    """Strip the ``<route>-<namespace>.`` prefix the router puts in front of the suffix."""
    return host.removeprefix(f"{TEST_ROUTE_NAME}-{namespace}.")


def _delete_route(client: ObjectClient, route: Route) -> None:
    """Delete ``route`` by identity. A missing route is fine; other failures are logged."""
    namespace = route.metadata.namespace
    try:
        client.delete(route)
    except ObjectNotFoundError:
        logger.debug("No test route '%s' in namespace '%s'", TEST_ROUTE_NAME, namespace)
    except Exception as exc:
        logger.error(
            "Failed to delete test route '%s' in namespace '%s': %s",
            TEST_ROUTE_NAME,
            namespace,
            exc,
        )
    else:
        logger.debug("Deleted test route '%s' in namespace '%s'", TEST_ROUTE_NAME, namespace)


def _delete_when_created(client: ObjectClient, route: Route, pending: Future[Any]) -> None:
    # The abandoned create may still land after the deadline
    def _cleanup(done: Future[Any]) -> None:
        if done.cancelled() or done.exception() is not None:
            return
        logger.info(
            "Test route in namespace '%s' was created after its deadline; deleting",
            route.metadata.namespace,
        )
        _delete_route(client, done.result() or route)

    pending.add_done_callback(_cleanup)


@contextmanager
def probe_route(client: ObjectClient, namespace: str) -> Iterator[Route]:
    """
    Create the test route and delete it on exit, whatever happens in between.

    A route left over from an earlier run is removed first. If creation fails
    the route is still deleted by name, and a creation that outlives its
    deadline is deleted once it completes. Creation failure raises
    EnrichmentFailedError; deletion failure is logged only.
    """
    route = build_probe_route(namespace)
    _delete_route(client, route)
    try:
        created = client.create(route)
    except Exception as exc:
        logger.error("Failed to create test route in namespace '%s': %s", namespace, exc)
        if isinstance(exc, DeadlineExceededError) and exc.pending is not None:
            _delete_when_created(client, route, exc.pending)
        _delete_route(client, route)
        raise EnrichmentFailedError(
            f"cannot create test route '{TEST_ROUTE_NAME}' in namespace '{namespace}'"
        ) from exc
    if created is None:
        created = route
    try:
        yield created
    finally:
        _delete_route(client, created)


def fill_routing_suffix_if_necessary(
    client: ObjectClient,
    config_map: ConfigMap,
    is_openshift: Callable[[], bool],
) -> ConfigMap:
    """
    Record the cluster routing suffix in ``config_map`` when routes are available.

    Returns the config map as persisted, or ``config_map`` unchanged when
    nothing was derived. An empty route host leaves the property unset.
    """
    if not is_openshift():
        return config_map

    namespace = config_map.metadata.namespace
    with probe_route(client, namespace) as route:
        host = route.host
        if not host:
            logger.warning(
                "Test route in namespace '%s' was not assigned a host; routing suffix not set",
                namespace,
            )
            return config_map

        suffix = routing_suffix_from_host(host, namespace)
        data = dict(config_map.data or {})
        data[ROUTING_SUFFIX] = suffix
        config_map.data = data
        logger.info("Discovered routing suffix '%s'", suffix)

        try:
            updated = client.update(config_map)
        except Exception as exc:
            logger.error(
                "Failed to store routing suffix in config map '%s': %s",
                config_map.metadata.name,
                exc,
            )
            raise EnrichmentFailedError(
                f"cannot update the '{config_map.metadata.name}' ConfigMap "
                f"in namespace '{namespace}'"
            ) from exc
    return updated if updated is not None else config_map
