# python
import copy
import threading

import pytest

from controller_config.config import ControllerConfig
from controller_config.exceptions import ObjectNotFoundError
from controller_config.objects import ConfigMap, ObjectMeta, Route
from controller_config.properties import builtin_registry
from controller_config.reference import ConfigReference


class FakeObjectClient:
    """In-memory object store keyed by (kind, namespace, name).

    Routes are admitted with host ``<name>-<namespace>.<route_domain>`` unless
    ``route_domain`` is empty. ``fail`` maps an operation name to the
    exception it should raise.
    """

    def __init__(self, route_domain="apps.example.com"):
        self._lock = threading.Lock()
        self.objects = {}
        self.calls = []
        self.fail = {}
        self.route_domain = route_domain

    def _check(self, op, obj_kind):
        self.calls.append((op, obj_kind))
        exc = self.fail.get(op) or self.fail.get(f"{op}:{obj_kind}")
        if exc is not None:
            raise exc

    def get(self, kind, namespace, name):
        self._check("get", kind)
        with self._lock:
            try:
                return copy.deepcopy(self.objects[(kind, namespace, name)])
            except KeyError:
                raise ObjectNotFoundError(kind, namespace, name) from None

    def create(self, obj):
        self._check("create", obj.kind)
        key = (obj.kind, obj.metadata.namespace, obj.metadata.name)
        stored = copy.deepcopy(obj)
        if isinstance(stored, Route) and self.route_domain:
            stored.host = f"{obj.metadata.name}-{obj.metadata.namespace}.{self.route_domain}"
        with self._lock:
            if key in self.objects:
                raise RuntimeError(f"{key} already exists")
            stored.metadata.resource_version = "1"
            self.objects[key] = stored
        return copy.deepcopy(stored)

    def update(self, obj):
        self._check("update", obj.kind)
        key = (obj.kind, obj.metadata.namespace, obj.metadata.name)
        with self._lock:
            if key not in self.objects:
                raise ObjectNotFoundError(*key)
            stored = copy.deepcopy(obj)
            previous = self.objects[key].metadata.resource_version or "0"
            stored.metadata.resource_version = str(int(previous) + 1)
            self.objects[key] = stored
        return copy.deepcopy(stored)

    def delete(self, obj):
        self._check("delete", obj.kind)
        key = (obj.kind, obj.metadata.namespace, obj.metadata.name)
        with self._lock:
            if key not in self.objects:
                raise ObjectNotFoundError(*key)
            del self.objects[key]

    def put(self, obj):
        self.objects[(obj.kind, obj.metadata.namespace, obj.metadata.name)] = copy.deepcopy(obj)

    def count(self, op, kind):
        return self.calls.count((op, kind))


def make_config_map(data=None, name="devworkspace-controller-configmap", namespace="mynamespace"):
    return ConfigMap(metadata=ObjectMeta(name=name, namespace=namespace), data=data)


@pytest.fixture
def client():
    return FakeObjectClient()


@pytest.fixture
def reference():
    return ConfigReference(namespace="mynamespace", name="devworkspace-controller-configmap")


@pytest.fixture
def config():
    return ControllerConfig(registry=builtin_registry())


@pytest.fixture
def make_cm():
    return make_config_map
