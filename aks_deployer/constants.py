# /*
# Copyright 2026 The aks-deployer Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Constants, component allow-list loading, and component_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# -- Resolved paths --
PACKAGE_DIR = Path(__file__).resolve().parent
MANIFESTS_DIR = PACKAGE_DIR / "manifests"


def load_components() -> dict:
    """Load the buildable component allow-list from components.yaml.

    Returns:
        Mapping of component name to its repository URL and make targets.
    """
    components_file = PACKAGE_DIR / "components.yaml"
    with open(components_file) as f:
        return yaml.safe_load(f)["components"]


COMPONENTS = load_components()


def component_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the COMPONENTS dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = COMPONENTS
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- Azure management plane --
MANAGEMENT_ENDPOINT = "https://management.azure.com"
MANAGEMENT_SCOPE = "https://management.azure.com/.default"
AKS_API_VERSION = "2022-04-02-preview"
AKS_CLUSTER_ID_FORMAT = (
    "/subscriptions/{subscription_id}/resourcegroups/{resource_group}"
    "/providers/Microsoft.ContainerService/managedClusters/{cluster_name}"
)
AKS_CUSTOM_FEATURES_HEADER = "AKSHTTPCustomFeatures"
AKS_CUSTOM_FEATURES = "Microsoft.ContainerService/EnableCloudControllerManager"
PROVISIONING_STATE_SUCCEEDED = "Succeeded"

# -- Credential polling --
KUBECONFIG_POLL_INTERVAL_SECONDS = 10
KUBECONFIG_POLL_TIMEOUT_SECONDS = 180

# -- Images --
CCM_COMPONENT = "cloud-provider-azure"
CCM_IMAGE_NAME = "azure-cloud-controller-manager"
CNM_IMAGE_NAME = "azure-cloud-node-manager"
CNM_IMAGE_SUFFIX = "-linux-amd64"
IMAGE_TAG_LENGTH = 7

# -- Template placeholders --
PH_CLUSTER_ID = "{AKS_CLUSTER_ID}"
PH_CLUSTER_NAME = "{CLUSTER_NAME}"
PH_LOCATION = "{AZURE_LOCATION}"
PH_CLIENT_ID = "{AZURE_CLIENT_ID}"
PH_CLIENT_SECRET = "{AZURE_CLIENT_SECRET}"
PH_KUBERNETES_VERSION = "{KUBERNETES_VERSION}"
PH_CUSTOM_CONFIG = "{CUSTOM_CONFIG}"
PH_CCM_IMAGE = "{CUSTOM_CCM_IMAGE}"
PH_CNM_IMAGE = "{CUSTOM_CNM_IMAGE}"
PLACEHOLDER_PATTERN = r"\{[A-Z][A-Z0-9_]*\}"
BARE_CUSTOM_CONFIG_PATTERN = r"(?<!\{)\bCUSTOM_CONFIG\b(?!\})"

# -- Defaults --
DEFAULT_LOCATION = "eastus"
DEFAULT_KUBERNETES_VERSION = "1.24.3"
DEFAULT_KUBECONFIG_DIR = "_kubeconfig"
DEFAULT_GIT_CLONE_DIR = "_git"
DEFAULT_CLUSTER_TEMPLATE = MANIFESTS_DIR / "cluster-template.json"
DEFAULT_CUSTOM_CONFIG_TEMPLATE = MANIFESTS_DIR / "custom-config-template.json"
KUBECONFIG_SUFFIX = ".kubeconfig"
