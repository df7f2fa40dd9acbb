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

"""Up subcommand (resource group + AKS cluster + kubeconfig)."""

from __future__ import annotations

from pathlib import Path

import typer

from aks_deployer.commands.build_cmd import resolve_build_request
from aks_deployer.config import (
    AzureConfig,
    BuildConfig,
    ServicePrincipalConfig,
    display_config,
    validate_up_flags,
)
from aks_deployer.constants import (
    DEFAULT_CLUSTER_TEMPLATE,
    DEFAULT_CUSTOM_CONFIG_TEMPLATE,
    DEFAULT_KUBECONFIG_DIR,
    DEFAULT_KUBERNETES_VERSION,
)
from aks_deployer.orchestrator import run_up


def up(
    cluster_name: str = typer.Option(
        ..., "--cluster-name", "--clusterName", help="AKS cluster name"),
    location: str | None = typer.Option(
        None, "--location", help="Resource group and cluster location (overrides AZURE_LOCATION)"),
    config: Path = typer.Option(
        DEFAULT_CLUSTER_TEMPLATE, "--config", help="Cluster template file"),
    custom_config: Path = typer.Option(
        DEFAULT_CUSTOM_CONFIG_TEMPLATE, "--custom-config", "--customConfig",
        help="Custom configuration template file"),
    ccm_image_tag: str | None = typer.Option(
        None, "--ccm-image-tag", "--ccmImageTag", help="Tag of prebuilt CCM/CNM images"),
    k8s_version: str = typer.Option(
        DEFAULT_KUBERNETES_VERSION, "--k8s-version", help="Kubernetes version of the cluster"),
    kubeconfig_dir: Path = typer.Option(
        Path(DEFAULT_KUBECONFIG_DIR), "--kubeconfig-dir", help="Directory for the generated kubeconfig"),
    # Optional image build
    build: bool = typer.Option(
        False, "--build", help="Build and push images before creating the cluster"),
    target: str = typer.Option(
        "cloud-provider-azure", "--target", help="Component to build with --build"),
    target_path: str | None = typer.Option(
        None, "--target-path", "--targetPath", help="Local repo path for --build"),
    target_tag: str | None = typer.Option(
        None, "--target-tag", "--targetTag", help="Git tag for --build"),
) -> None:
    """Create the resource group and an AKS cluster with custom CCM images.

    Azure identity comes from AZURE_* environment variables; CLI flags
    override them.
    """
    azure_cfg = AzureConfig()
    if location is not None:
        azure_cfg = azure_cfg.model_copy(update={"location": location})
    sp_cfg = ServicePrincipalConfig()
    build_cfg = BuildConfig()

    validate_up_flags(
        build=build,
        ccm_image_tag=ccm_image_tag,
        registry=build_cfg.image_registry,
        config_path=config,
        custom_config_path=custom_config,
    )
    build_request = resolve_build_request(target, target_path, target_tag) if build else None

    display_config(
        azure_cfg,
        build_request,
        cluster_name=cluster_name,
        k8s_version=k8s_version,
        image_tag="(built)" if build else ccm_image_tag,
        registry=build_cfg.image_registry,
    )

    kubeconfig = run_up(
        azure_cfg,
        sp_cfg,
        registry=build_cfg.image_registry,
        cluster_name=cluster_name,
        kubernetes_version=k8s_version,
        config_path=config,
        custom_config_path=custom_config,
        image_tag=ccm_image_tag,
        build_request=build_request,
        kubeconfig_dir=kubeconfig_dir,
    )
    typer.echo(str(kubeconfig))
