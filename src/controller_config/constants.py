from __future__ import annotations

from typing import Dict

CONFIG_MAP_NAME_ENV_VAR = "CONTROLLER_CONFIG_MAP_NAME"
CONFIG_MAP_NAMESPACE_ENV_VAR = "CONTROLLER_CONFIG_MAP_NAMESPACE"

DEFAULT_CONFIG_MAP_NAME = "devworkspace-controller-configmap"

# Transient route used to discover the cluster routing suffix
TEST_ROUTE_NAME = "devworkspace-controller-test-route"
TEST_ROUTE_TARGET_KIND = "Service"

DEFAULT_CLIENT_TIMEOUT = 30.0

# Property keys
WORKSPACE_PVC_NAME = "devworkspace.pvc.name"
ROUTING_CLASS = "devworkspace.default_routing_class"
EXPERIMENTAL_FEATURES_ENABLED = "devworkspace.experimental_features_enabled"
WORKSPACE_PVC_STORAGE_CLASS_NAME = "devworkspace.pvc.storage_class.name"
SIDECAR_PULL_POLICY = "devworkspace.sidecar.image_pull_policy"
WORKSPACE_IDLE_TIMEOUT = "devworkspace.idle_timeout"
ROUTING_SUFFIX = "devworkspace.routing.cluster_host_suffix"

# Property defaults
DEFAULT_WORKSPACE_PVC_NAME = "claim-devworkspace"
DEFAULT_ROUTING_CLASS = "basic"
DEFAULT_EXPERIMENTAL_FEATURES_ENABLED = "false"
DEFAULT_SIDECAR_PULL_POLICY = "Always"
DEFAULT_WORKSPACE_IDLE_TIMEOUT = "15m"


def controller_app_labels() -> Dict[str, str]:
    """Labels applied to every object the controller creates."""
    return {
        "app.kubernetes.io/name": "devworkspace-controller",
        "app.kubernetes.io/part-of": "devworkspace-operator",
    }
