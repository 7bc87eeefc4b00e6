from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import (
    CONFIG_MAP_NAME_ENV_VAR,
    CONFIG_MAP_NAMESPACE_ENV_VAR,
    DEFAULT_CONFIG_MAP_NAME,
)
from .exceptions import ReferenceUnresolvedError
from .objects import ObjectKey

logger = logging.getLogger("controller_config.reference")
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class ConfigReference:
    """Identity of the tracked config map.

    ``explicitly_named`` is True when either the name or the namespace came
    from the environment; in that mode a missing config map is an error
    rather than something to create.
    """

    namespace: str
    name: str
    explicitly_named: bool = False

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)

    def matches(self, key: ObjectKey) -> bool:
        return key.namespace == self.namespace and key.name == self.name


def _lookup(environ: Mapping[str, str], var: str) -> Optional[str]:
    value = environ.get(var)
    if value:
        return value
    return None


def resolve_reference(environ: Optional[Mapping[str, str]] = None) -> ConfigReference:
    """
    Resolve the tracked config map reference from the environment.

    An empty variable counts as unset. Raises ReferenceUnresolvedError when no
    namespace is available.
    """
    if environ is None:
        environ = os.environ

    name = _lookup(environ, CONFIG_MAP_NAME_ENV_VAR)
    namespace = _lookup(environ, CONFIG_MAP_NAMESPACE_ENV_VAR)
    explicitly_named = name is not None or namespace is not None

    if namespace is None:
        raise ReferenceUnresolvedError(
            "you should set the namespace of the controller config map through the "
            f"'{CONFIG_MAP_NAMESPACE_ENV_VAR}' environment variable"
        )

    reference = ConfigReference(
        namespace=namespace,
        name=name or DEFAULT_CONFIG_MAP_NAME,
        explicitly_named=explicitly_named,
    )
    logger.debug("Resolved config map reference %s explicit=%s", reference.key, explicitly_named)
    return reference
