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

"""Azure resource group, managed cluster, and kubeconfig operations."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import requests
from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError, ClientAuthenticationError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.mgmt.containerservice import ContainerServiceClient
from azure.mgmt.resource import ResourceManagementClient
from rich.panel import Panel
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

from aks_deployer import console, logger
from aks_deployer.config import ProvisioningRequest
from aks_deployer.constants import (
    AKS_CUSTOM_FEATURES,
    AKS_CUSTOM_FEATURES_HEADER,
    KUBECONFIG_POLL_INTERVAL_SECONDS,
    KUBECONFIG_POLL_TIMEOUT_SECONDS,
    KUBECONFIG_SUFFIX,
    MANAGEMENT_SCOPE,
    PROVISIONING_STATE_SUCCEEDED,
)


# ============================================================================
# Identity
# ============================================================================

def get_credential() -> DefaultAzureCredential:
    """Create the Azure credential used by every workflow.

    Raises:
        RuntimeError: If no credential source can be set up.
    """
    try:
        return DefaultAzureCredential()
    except (AzureError, ValueError) as err:
        raise RuntimeError(f"Authentication failure: {err}") from err


def get_management_token(credential: TokenCredential) -> str:
    """Fetch a bearer token for the Azure management plane.

    Args:
        credential: Azure token credential.

    Returns:
        The raw access token.

    Raises:
        RuntimeError: If the token cannot be obtained.
    """
    try:
        return credential.get_token(MANAGEMENT_SCOPE).token
    except ClientAuthenticationError as err:
        raise RuntimeError(f"Authentication failure: {err}") from err
    except AzureError as err:
        raise RuntimeError(f"failed to get token from credential: {err}") from err


# ============================================================================
# Resource groups
# ============================================================================

def create_resource_group(
    credential: TokenCredential,
    subscription_id: str,
    resource_group: str,
    location: str,
) -> str:
    """Create or update a resource group.

    Args:
        credential: Azure token credential.
        subscription_id: Subscription that owns the resource group.
        resource_group: Resource group name.
        location: Azure region of the resource group.

    Returns:
        The resource ID of the resource group.
    """
    client = ResourceManagementClient(credential, subscription_id)
    group = client.resource_groups.create_or_update(resource_group, {"location": location})
    console.print(f"[green]\u2705 Resource group {group.id} created[/green]")
    return group.id


def delete_resource_group(credential: TokenCredential, subscription_id: str, resource_group: str) -> None:
    """Delete a resource group and block until the deletion finishes.

    Args:
        credential: Azure token credential.
        subscription_id: Subscription that owns the resource group.
        resource_group: Resource group name.
    """
    console.print(f"[yellow]\u2139\ufe0f  Deleting resource group '{resource_group}'...[/yellow]")
    client = ResourceManagementClient(credential, subscription_id)
    poller = client.resource_groups.begin_delete(resource_group)
    poller.result()
    console.print(f"[green]\u2705 Resource group '{resource_group}' deleted[/green]")


# ============================================================================
# Managed cluster
# ============================================================================

def create_managed_cluster(request: ProvisioningRequest, payload: str, token: str) -> None:
    """Submit the managed cluster creation request.

    The request goes straight to the management REST API because the custom
    configuration feature is only reachable through a preview header.

    Args:
        request: Cluster identity used to build the request URL.
        payload: Rendered JSON request body.
        token: Management plane bearer token.

    Raises:
        RuntimeError: If the request fails or the API answers with an error status.
    """
    console.print(Panel.fit(f"Creating AKS cluster '{request.cluster_name}'", style="bold blue"))
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        AKS_CUSTOM_FEATURES_HEADER: AKS_CUSTOM_FEATURES,
    }
    try:
        resp = requests.put(request.url, data=payload.encode("utf-8"), headers=headers, timeout=None)
    except requests.RequestException as err:
        raise RuntimeError(f"failed to send request: {err}") from err

    if resp.status_code >= 400:
        raise RuntimeError(
            f"failed to create the AKS cluster: status {resp.status_code} {resp.reason}\n{resp.text}"
        )
    console.print(
        f"[green]\u2705 AKS cluster '{request.cluster_name}' in resource group "
        f"'{request.resource_group}' is created[/green]"
    )


def is_cluster_up(
    credential: TokenCredential,
    subscription_id: str,
    resource_group: str,
    cluster_name: str,
) -> bool:
    """Check whether the managed cluster exists and finished provisioning.

    Args:
        credential: Azure token credential.
        subscription_id: Subscription that owns the cluster.
        resource_group: Resource group of the cluster.
        cluster_name: Managed cluster name.

    Returns:
        True if the cluster provisioning state is Succeeded.
    """
    client = ContainerServiceClient(credential, subscription_id)
    try:
        cluster = client.managed_clusters.get(resource_group, cluster_name)
    except ResourceNotFoundError:
        return False
    logger.info("Cluster %s provisioning state: %s", cluster_name, cluster.provisioning_state)
    return cluster.provisioning_state == PROVISIONING_STATE_SUCCEEDED


# ============================================================================
# Kubeconfig
# ============================================================================

def fetch_kubeconfig(
    credential: TokenCredential,
    subscription_id: str,
    resource_group: str,
    cluster_name: str,
    interval: float = KUBECONFIG_POLL_INTERVAL_SECONDS,
    timeout: float = KUBECONFIG_POLL_TIMEOUT_SECONDS,
    client: ContainerServiceClient | None = None,
) -> bytes:
    """Poll the cluster admin credentials until they become available.

    The first request is sent immediately. Not-found answers are retried every
    *interval* seconds until *timeout*; any other error stops polling.

    Args:
        credential: Azure token credential.
        subscription_id: Subscription that owns the cluster.
        resource_group: Resource group of the cluster.
        cluster_name: Managed cluster name.
        interval: Seconds between attempts.
        timeout: Seconds before giving up.
        client: Container service client override, or None to create one.

    Returns:
        Raw bytes of the first kubeconfig returned.

    Raises:
        TimeoutError: If the credentials are still not found after *timeout*.
        RuntimeError: On any other error or an empty credential list.
    """
    if client is None:
        client = ContainerServiceClient(credential, subscription_id)
    max_attempts = int(timeout // interval) + 1 if interval > 0 else 1

    console.print(f"[yellow]\u2139\ufe0f  Waiting for cluster '{cluster_name}' credentials...[/yellow]")
    try:
        for attempt in Retrying(
            stop=stop_after_attempt(max_attempts) | stop_after_delay(timeout),
            wait=wait_fixed(interval),
            retry=retry_if_exception_type(ResourceNotFoundError),
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info("Cluster credentials not found yet, retrying")
                result = client.managed_clusters.list_cluster_admin_credentials(resource_group, cluster_name)
    except RetryError as err:
        raise TimeoutError(
            f"timed out after {timeout:g}s waiting for credentials of cluster {cluster_name!r}"
        ) from err
    except AzureError as err:
        raise RuntimeError(
            f"failed to list cluster admin credentials with resource group {resource_group!r}, "
            f"cluster {cluster_name!r}: {err}"
        ) from err

    kubeconfigs = result.kubeconfigs or []
    if not kubeconfigs:
        raise RuntimeError("failed to find a valid kubeconfig")
    return kubeconfigs[0].value


def kubeconfig_path(kubeconfig_dir: Path, resource_group: str, cluster_name: str) -> Path:
    """Return the deterministic kubeconfig path for a cluster."""
    return Path(kubeconfig_dir) / f"{resource_group}_{cluster_name}{KUBECONFIG_SUFFIX}"


def write_kubeconfig(data: bytes, kubeconfig_dir: Path, resource_group: str, cluster_name: str) -> Path:
    """Persist kubeconfig bytes verbatim.

    The bytes go to a temporary file that is renamed into place, so the
    destination is either complete or absent.

    Args:
        data: Raw kubeconfig bytes.
        kubeconfig_dir: Output directory, created if missing.
        resource_group: Resource group of the cluster.
        cluster_name: Managed cluster name.

    Returns:
        Path of the written kubeconfig.

    Raises:
        RuntimeError: If the file cannot be written.
    """
    dest = kubeconfig_path(kubeconfig_dir, resource_group, cluster_name)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, dest)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as err:
        raise RuntimeError(f"failed to write kubeconfig to {dest}: {err}") from err

    console.print(f"[green]  \u2713 Kubeconfig written to {dest}[/green]")
    return dest
