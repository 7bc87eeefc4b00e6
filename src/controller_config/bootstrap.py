from __future__ import annotations

import logging

from .client import ObjectClient
from .constants import controller_app_labels
from .exceptions import (
    CreateFailedError,
    ObjectNotFoundAndCreateDisallowedError,
    ObjectNotFoundError,
)
from .objects import CONFIG_MAP_KIND, ConfigMap, ObjectMeta
from .reference import ConfigReference

logger = logging.getLogger("controller_config.bootstrap")
logger.addHandler(logging.NullHandler())


def build_default_config_map(reference: ConfigReference) -> ConfigMap:
    return ConfigMap(
        metadata=ObjectMeta(
            name=reference.name,
            namespace=reference.namespace,
            labels=controller_app_labels(),
        ),
        data={},
    )


def get_or_create(client: ObjectClient, reference: ConfigReference) -> ConfigMap:
    """
    Return the tracked config map, creating a default one if allowed.

    ``client`` must read directly from the object store; a watch cache that
    has not warmed up yet would report a miss for an existing object.
    """
    logger.info(
        "Searching for config map '%s' in namespace '%s'", reference.name, reference.namespace
    )
    try:
        config_map = client.get(CONFIG_MAP_KIND, reference.namespace, reference.name)
    except ObjectNotFoundError:
        if reference.explicitly_named:
            raise ObjectNotFoundAndCreateDisallowedError(
                f"cannot find the '{reference.name}' ConfigMap "
                f"in namespace '{reference.namespace}'"
            ) from None
    else:
        logger.info(
            "  => found config map '%s' in namespace '%s'",
            config_map.metadata.name,
            config_map.metadata.namespace,
        )
        return config_map

    default = build_default_config_map(reference)
    try:
        created = client.create(default)
    except Exception as exc:
        logger.error(
            "Failed to create config map '%s' in namespace '%s': %s",
            reference.name,
            reference.namespace,
            exc,
        )
        raise CreateFailedError(
            f"cannot create the '{reference.name}' ConfigMap in namespace '{reference.namespace}'"
        ) from exc
    config_map = created if created is not None else default
    logger.info(
        "  => created config map '%s' in namespace '%s'",
        config_map.metadata.name,
        config_map.metadata.namespace,
    )
    return config_map
