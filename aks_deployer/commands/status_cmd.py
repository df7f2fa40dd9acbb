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

"""Status and kubeconfig subcommands."""

from __future__ import annotations

import typer

from aks_deployer.config import AzureConfig, resolve_kubeconfig_path
from aks_deployer.orchestrator import run_status


def status(
    cluster_name: str = typer.Option(..., "--cluster-name", "--clusterName", help="AKS cluster name"),
) -> None:
    """Exit 0 if the cluster is up, 1 otherwise."""
    if not run_status(AzureConfig(), cluster_name):
        raise typer.Exit(code=1)


def kubeconfig(
    path: str | None = typer.Option(None, "--kubeconfig", help="Explicit kubeconfig path"),
) -> None:
    """Print the kubeconfig path tests should use."""
    typer.echo(str(resolve_kubeconfig_path(path)))
