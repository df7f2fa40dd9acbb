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

"""Cluster template loading, placeholder substitution, and payload rendering."""

from __future__ import annotations

import base64
import re
from pathlib import Path

from aks_deployer.config import ProvisioningRequest
from aks_deployer.constants import (
    BARE_CUSTOM_CONFIG_PATTERN,
    PH_CCM_IMAGE,
    PH_CLIENT_ID,
    PH_CLIENT_SECRET,
    PH_CLUSTER_ID,
    PH_CLUSTER_NAME,
    PH_CNM_IMAGE,
    PH_CUSTOM_CONFIG,
    PH_KUBERNETES_VERSION,
    PH_LOCATION,
    PLACEHOLDER_PATTERN,
)


def load_template(path: Path) -> str:
    """Read a template file.

    Args:
        path: Template file on disk.

    Returns:
        The template text.

    Raises:
        RuntimeError: If the file cannot be read.
    """
    try:
        return Path(path).read_text()
    except OSError as err:
        raise RuntimeError(f"failed to read template file at {str(path)!r}: {err}") from err


def render_template(text: str, mapping: dict[str, str]) -> str:
    """Replace every occurrence of each mapping key with its value.

    Keys missing from the text are ignored and placeholders missing from the
    mapping are left as they are.
    """
    for placeholder, value in mapping.items():
        text = text.replace(placeholder, value)
    return text


def find_placeholders(text: str) -> set[str]:
    """Return the ``{UPPER_SNAKE}`` placeholders referenced by a template."""
    return set(re.findall(PLACEHOLDER_PATTERN, text))


def encode_custom_config(text: str) -> str:
    """Base64-encode a rendered custom configuration document."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _check_placeholders(name: str, text: str, mapping: dict[str, str]) -> None:
    missing = sorted(find_placeholders(text) - mapping.keys())
    if PH_CUSTOM_CONFIG in mapping and re.search(BARE_CUSTOM_CONFIG_PATTERN, text):
        missing.append("CUSTOM_CONFIG (use {CUSTOM_CONFIG})")
    if missing:
        raise ValueError(f"{name} has placeholders without values: {', '.join(missing)}")


def render_cluster_payload(
    request: ProvisioningRequest,
    cluster_template: str,
    custom_config_template: str,
) -> str:
    """Render the cluster-creation request body.

    The custom configuration is rendered with the image references,
    base64-encoded, and spliced into the cluster template at
    ``{CUSTOM_CONFIG}``.

    Args:
        request: Cluster identity, credentials, and images.
        cluster_template: Outer cluster template text.
        custom_config_template: Inner custom configuration template text.

    Returns:
        JSON request body for the managed cluster PUT.

    Raises:
        ValueError: If either template references a placeholder with no value.
    """
    custom_mapping = {
        PH_CCM_IMAGE: request.ccm_image,
        PH_CNM_IMAGE: request.cnm_image,
    }
    _check_placeholders("custom config template", custom_config_template, custom_mapping)
    custom_config = render_template(custom_config_template, custom_mapping)

    cluster_mapping = {
        PH_CLUSTER_ID: request.cluster_id,
        PH_CLUSTER_NAME: request.cluster_name,
        PH_LOCATION: request.location,
        PH_CLIENT_ID: request.client_id,
        PH_CLIENT_SECRET: request.client_secret,
        PH_KUBERNETES_VERSION: request.kubernetes_version,
        PH_CUSTOM_CONFIG: encode_custom_config(custom_config),
    }
    _check_placeholders("cluster template", cluster_template, cluster_mapping)
    return render_template(cluster_template, cluster_mapping)
