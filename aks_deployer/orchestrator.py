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

"""Orchestration functions that compose domain modules into workflows."""

from __future__ import annotations

from pathlib import Path

from azure.core.exceptions import AzureError, ClientAuthenticationError
from rich.panel import Panel

from aks_deployer import console
from aks_deployer.build import build_images
from aks_deployer.cluster import (
    create_managed_cluster,
    create_resource_group,
    delete_resource_group,
    fetch_kubeconfig,
    get_credential,
    get_management_token,
    is_cluster_up,
    write_kubeconfig,
)
from aks_deployer.config import (
    AzureConfig,
    BuildRequest,
    ServicePrincipalConfig,
    resolve_provisioning_request,
)
from aks_deployer.constants import DEFAULT_GIT_CLONE_DIR, DEFAULT_KUBECONFIG_DIR
from aks_deployer.render import load_template, render_cluster_payload
from aks_deployer.utils import require_command

# ============================================================================
# Internal helpers
# ============================================================================


def _check_prerequisites() -> None:
    """Check the CLI tools needed to build images."""
    console.print(Panel.fit("Checking prerequisites", style="bold blue"))
    for cmd in ("git", "make"):
        require_command(cmd)
    console.print("[green]\u2705 All required tools are available[/green]")


# ============================================================================
# Public API
# ============================================================================


def run_build(request: BuildRequest, clone_root: Path = Path(DEFAULT_GIT_CLONE_DIR)) -> str | None:
    """Validate a build request and build its images.

    Args:
        request: Component and source selection.
        clone_root: Parent directory for scratch clones.

    Returns:
        The image tag, or None if the component has no image targets.

    Raises:
        ValueError: If the request is invalid.
        RuntimeError: If a build step fails.
    """
    try:
        request.validate()
    except ValueError as err:
        raise ValueError(f"failed to verify build flags: {err}") from err
    _check_prerequisites()
    return build_images(request, clone_root)


def run_up(
    azure_cfg: AzureConfig,
    sp_cfg: ServicePrincipalConfig,
    *,
    registry: str,
    cluster_name: str,
    kubernetes_version: str,
    config_path: Path,
    custom_config_path: Path,
    image_tag: str | None = None,
    build_request: BuildRequest | None = None,
    kubeconfig_dir: Path = Path(DEFAULT_KUBECONFIG_DIR),
) -> Path:
    """Run the up workflow: build (optional) + resource group + cluster + kubeconfig.

    Already-created cloud resources are left in place when a later step fails;
    ``run_down`` removes them.

    Args:
        azure_cfg: Subscription, location, and resource group.
        sp_cfg: Service principal substituted into the cluster template.
        registry: Container registry holding the custom images.
        cluster_name: Managed cluster name.
        kubernetes_version: Kubernetes version of the cluster.
        config_path: Cluster template path.
        custom_config_path: Custom configuration template path.
        image_tag: Tag of prebuilt images, ignored when *build_request* is set.
        build_request: Images to build first, or None.
        kubeconfig_dir: Output directory for the kubeconfig.

    Returns:
        Path of the written kubeconfig.

    Raises:
        ValueError: If the inputs cannot produce a cluster request.
        RuntimeError: If any step fails.
    """
    if build_request is not None:
        image_tag = run_build(build_request)
        if image_tag is None:
            raise ValueError(f"component {build_request.component!r} produced no images to deploy")
    if not image_tag:
        raise ValueError("an image tag is required to render the custom configuration")

    request = resolve_provisioning_request(
        azure_cfg, sp_cfg, registry, cluster_name, kubernetes_version, image_tag,
    )
    payload = render_cluster_payload(
        request, load_template(config_path), load_template(custom_config_path),
    )

    console.print(Panel.fit("Provisioning AKS cluster", style="bold blue"))
    credential = get_credential()

    try:
        create_resource_group(credential, request.subscription_id, request.resource_group, request.location)
    except ClientAuthenticationError as err:
        raise RuntimeError(f"Authentication failure: {err}") from err
    except AzureError as err:
        raise RuntimeError(f"failed to create the resource group: {err}") from err

    token = get_management_token(credential)
    create_managed_cluster(request, payload, token)

    try:
        kubeconfig = fetch_kubeconfig(credential, request.subscription_id, request.resource_group, cluster_name)
        path = write_kubeconfig(kubeconfig, kubeconfig_dir, request.resource_group, cluster_name)
    except (RuntimeError, TimeoutError) as err:
        raise RuntimeError(f"failed to get AKS cluster kubeconfig: {err}") from err

    console.print(f"[green]\u2705 Cluster '{cluster_name}' is up, kubeconfig at {path}[/green]")
    return path


def run_down(azure_cfg: AzureConfig) -> None:
    """Run the down workflow: delete the resource group and wait.

    Args:
        azure_cfg: Subscription and resource group to delete.

    Raises:
        RuntimeError: If authentication or the deletion fails.
    """
    console.print(Panel.fit("Tearing down resource group", style="bold blue"))
    credential = get_credential()
    try:
        delete_resource_group(credential, azure_cfg.subscription_id, azure_cfg.resource_group)
    except ClientAuthenticationError as err:
        raise RuntimeError(f"Authentication failure: {err}") from err
    except AzureError as err:
        raise RuntimeError(f"failed to delete the resource group: {err}") from err


def run_status(azure_cfg: AzureConfig, cluster_name: str) -> bool:
    """Report whether the managed cluster is up.

    Args:
        azure_cfg: Subscription and resource group of the cluster.
        cluster_name: Managed cluster name.

    Returns:
        True if the cluster finished provisioning.
    """
    credential = get_credential()
    up = is_cluster_up(credential, azure_cfg.subscription_id, azure_cfg.resource_group, cluster_name)
    if up:
        console.print(f"[green]\u2705 Cluster '{cluster_name}' is up[/green]")
    else:
        console.print(f"[yellow]\u26a0\ufe0f  Cluster '{cluster_name}' is not up[/yellow]")
    return up
