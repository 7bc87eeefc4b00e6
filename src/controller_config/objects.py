"""Plain data model for the objects exchanged with the object store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional

CONFIG_MAP_KIND = "ConfigMap"
ROUTE_KIND = "Route"


class ObjectKey(NamedTuple):
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ObjectMeta:
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    resource_version: Optional[str] = None


@dataclass
class ConfigMap:
    metadata: ObjectMeta
    data: Optional[Dict[str, str]] = None

    kind = CONFIG_MAP_KIND

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.metadata.namespace, self.metadata.name)


@dataclass
class Route:
    metadata: ObjectMeta
    target_kind: str
    target_name: str
    # Assigned by the platform on admission
    host: str = ""

    kind = ROUTE_KIND

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.metadata.namespace, self.metadata.name)


@dataclass
class PartialObjectMetadata:
    """An object delivered with metadata only, e.g. by a metadata-only watch."""

    kind: str
    metadata: ObjectMeta

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.metadata.namespace, self.metadata.name)
