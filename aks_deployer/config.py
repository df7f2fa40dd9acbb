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

"""Configuration classes, request models, and flag validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from aks_deployer import console, logger
from aks_deployer.constants import (
    AKS_API_VERSION,
    AKS_CLUSTER_ID_FORMAT,
    CCM_IMAGE_NAME,
    CNM_IMAGE_NAME,
    CNM_IMAGE_SUFFIX,
    COMPONENTS,
    DEFAULT_LOCATION,
    MANAGEMENT_ENDPOINT,
)


# ============================================================================
# Configuration classes
# ============================================================================

class AzureConfig(BaseSettings):
    """Azure subscription and placement, auto-loaded from AZURE_* env vars.

    Attributes:
        subscription_id: Subscription that owns the resource group.
        location: Azure region for the resource group and the cluster.
        resource_group: Resource group that holds the cluster.
    """

    model_config = SettingsConfigDict(env_prefix="AZURE_", extra="ignore", populate_by_name=True)

    subscription_id: str = Field(min_length=1)
    location: str = DEFAULT_LOCATION
    resource_group: str = Field(
        min_length=1,
        validation_alias=AliasChoices("AZURE_RESOURCEGROUP", "AZURE_RESOURCE_GROUP", "resource_group"),
    )


class ServicePrincipalConfig(BaseSettings):
    """Service principal substituted into the cluster template.

    Attributes:
        client_id: Application (client) ID of the service principal.
        client_secret: Secret of the service principal.
    """

    model_config = SettingsConfigDict(env_prefix="AZURE_", extra="ignore")

    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1, repr=False)


class BuildConfig(BaseSettings):
    """Image build settings, auto-loaded from env vars.

    Attributes:
        image_registry: Registry the make targets push to (IMAGE_REGISTRY).
        cloud_provider_azure_path: Local cloud-provider-azure checkout
            (CLOUD_PROVIDER_AZURE_PATH), used when no path or tag is given.
    """

    model_config = SettingsConfigDict(extra="ignore")

    image_registry: str = ""
    cloud_provider_azure_path: str | None = None


# ============================================================================
# Requests
# ============================================================================

@dataclass(frozen=True)
class BuildRequest:
    """Which component to build and where its source comes from.

    Exactly one of ``source_path`` and ``source_tag`` must be set.

    Attributes:
        component: Component name, a key of the components allow-list.
        source_path: Local checkout to build from, or None.
        source_tag: Git tag to clone and build, or None.
    """

    component: str
    source_path: str | None = None
    source_tag: str | None = None

    def validate(self) -> None:
        """Check the component and the source selection.

        Raises:
            ValueError: If the component is unknown or the source is ambiguous.
        """
        if self.component not in COMPONENTS:
            raise ValueError(f"component {self.component!r} not supported")
        if bool(self.source_path) == bool(self.source_tag):
            raise ValueError("only one of target path and target tag should be set")


@dataclass(frozen=True)
class ProvisioningRequest:
    """Everything needed to render and submit one cluster-creation request."""

    cluster_name: str
    location: str
    resource_group: str
    subscription_id: str
    client_id: str
    client_secret: str
    kubernetes_version: str
    ccm_image: str
    cnm_image: str

    @property
    def cluster_id(self) -> str:
        return AKS_CLUSTER_ID_FORMAT.format(
            subscription_id=self.subscription_id,
            resource_group=self.resource_group,
            cluster_name=self.cluster_name,
        )

    @property
    def url(self) -> str:
        return f"{MANAGEMENT_ENDPOINT}{self.cluster_id}?api-version={AKS_API_VERSION}"


def image_references(registry: str, image_tag: str) -> tuple[str, str]:
    """Build the CCM and CNM image references for a tag.

    Args:
        registry: Container registry the images were pushed to.
        image_tag: Short commit hash the images are tagged with.

    Returns:
        Tuple of (ccm_image, cnm_image).
    """
    return (
        f"{registry}/{CCM_IMAGE_NAME}:{image_tag}",
        f"{registry}/{CNM_IMAGE_NAME}:{image_tag}{CNM_IMAGE_SUFFIX}",
    )


def resolve_provisioning_request(
    azure_cfg: AzureConfig,
    sp_cfg: ServicePrincipalConfig,
    registry: str,
    cluster_name: str,
    kubernetes_version: str,
    image_tag: str,
) -> ProvisioningRequest:
    """Merge configuration objects and CLI values into a ProvisioningRequest.

    Args:
        azure_cfg: Subscription, location, and resource group.
        sp_cfg: Service principal credentials for the cluster.
        registry: Container registry holding the custom images.
        cluster_name: Name of the managed cluster.
        kubernetes_version: Kubernetes version for the cluster.
        image_tag: Tag of the CCM/CNM images to deploy.

    Returns:
        The immutable request used by the provisioning workflow.
    """
    ccm_image, cnm_image = image_references(registry, image_tag)
    return ProvisioningRequest(
        cluster_name=cluster_name,
        location=azure_cfg.location,
        resource_group=azure_cfg.resource_group,
        subscription_id=azure_cfg.subscription_id,
        client_id=sp_cfg.client_id,
        client_secret=sp_cfg.client_secret,
        kubernetes_version=kubernetes_version,
        ccm_image=ccm_image,
        cnm_image=cnm_image,
    )


# ============================================================================
# Flag validation and display
# ============================================================================

def validate_up_flags(
    build: bool,
    ccm_image_tag: str | None,
    registry: str,
    config_path: Path,
    custom_config_path: Path,
) -> None:
    """Validate flag combinations for the up command.

    Args:
        build: Whether images are built before provisioning.
        ccm_image_tag: Explicit image tag, or None.
        registry: Container registry for the custom images.
        config_path: Cluster template path.
        custom_config_path: Custom configuration template path.

    Raises:
        typer.BadParameter: If the flags cannot produce a cluster request.
    """
    if not build and not ccm_image_tag:
        raise typer.BadParameter("--ccm-image-tag is required unless --build is set")
    if build and ccm_image_tag:
        logger.warning("--build is set; --ccm-image-tag %s will be replaced by the built tag", ccm_image_tag)
    if not registry:
        raise typer.BadParameter("IMAGE_REGISTRY must be set to reference custom images")
    for path in (config_path, custom_config_path):
        if not path.is_file():
            raise typer.BadParameter(f"template file {str(path)!r} does not exist")


def resolve_kubeconfig_path(explicit: str | None = None) -> Path:
    """Resolve the kubeconfig a test harness should use.

    Resolution priority: explicit flag > KUBECONFIG > ~/.kube/config.

    Args:
        explicit: Path passed on the command line, or None.

    Returns:
        Path to the kubeconfig file.
    """
    if explicit:
        return Path(explicit)
    env_path = os.environ.get("KUBECONFIG")
    if env_path:
        return Path(env_path)
    return Path.home() / ".kube" / "config"


def display_config(azure_cfg: AzureConfig, request: BuildRequest | None = None, **extra: object) -> None:
    """Print the configuration relevant to the requested action.

    Args:
        azure_cfg: Subscription, location, and resource group.
        request: Build request when images are built, or None.
        **extra: Additional labelled values to show.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print("[yellow]Azure:[/yellow]")
    console.print(f"  subscription_id : {azure_cfg.subscription_id}")
    console.print(f"  location        : {azure_cfg.location}")
    console.print(f"  resource_group  : {azure_cfg.resource_group}")

    if request is not None:
        console.print("[yellow]Build:[/yellow]")
        console.print(f"  target          : {request.component}")
        console.print(f"  source          : {request.source_path or f'tag {request.source_tag}'}")

    if extra:
        console.print("[yellow]Cluster:[/yellow]")
        for key, value in extra.items():
            console.print(f"  {key:<16}: {value}")
