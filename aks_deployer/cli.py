#!/usr/bin/env python3
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

"""
cli.py - CLI for provisioning AKS clusters with custom cloud-controller-manager images.

Subcommands:
    build       Build and push custom component images
    up          Create the resource group, the AKS cluster, and its kubeconfig
    down        Delete the resource group
    status      Check whether the cluster finished provisioning
    kubeconfig  Print the kubeconfig path to use

Environment Variables:
    AZURE_SUBSCRIPTION_ID, AZURE_LOCATION, AZURE_RESOURCEGROUP,
    AZURE_CLIENT_ID, AZURE_CLIENT_SECRET, IMAGE_REGISTRY,
    CLOUD_PROVIDER_AZURE_PATH

Examples:
    # Build images from a local checkout
    aks-deployer build --target cloud-provider-azure --target-path ~/src/cloud-provider-azure

    # Build images from a release tag, then create the cluster with them
    aks-deployer up --cluster-name ccm-e2e --build --target-tag v1.24.0

    # Create the cluster with prebuilt images
    aks-deployer up --cluster-name ccm-e2e --ccm-image-tag 1a2b3c4

    # Tear everything down
    aks-deployer down

For detailed usage information, run: aks-deployer --help
"""

from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError, version

import typer

from aks_deployer import console
from aks_deployer.commands import build_cmd, down_cmd, status_cmd, up_cmd

DIST_NAME = "aks-deployer"

app = typer.Typer(
    help="Provision AKS clusters with custom cloud-controller-manager images.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        typer.echo(version(DIST_NAME))
    except PackageNotFoundError:
        typer.echo("unknown")
    raise typer.Exit()


@app.callback()
def _main_callback(
    _version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.command("build")(build_cmd.build)
app.command("up")(up_cmd.up)
app.command("down")(down_cmd.down)
app.command("status")(status_cmd.status)
app.command("kubeconfig")(status_cmd.kubeconfig)


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
