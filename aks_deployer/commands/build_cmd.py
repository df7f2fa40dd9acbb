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

"""Build subcommand (custom component images)."""

from __future__ import annotations

import typer

from aks_deployer.config import BuildConfig, BuildRequest
from aks_deployer.constants import CCM_COMPONENT
from aks_deployer.orchestrator import run_build


def resolve_build_request(target: str, target_path: str | None, target_tag: str | None) -> BuildRequest:
    """Build a BuildRequest from CLI values, falling back to CLOUD_PROVIDER_AZURE_PATH.

    The environment path is only used for cloud-provider-azure when neither a
    path nor a tag was given.

    Args:
        target: Component name.
        target_path: Local checkout from the CLI, or None.
        target_tag: Git tag from the CLI, or None.

    Returns:
        The unvalidated build request.
    """
    if target == CCM_COMPONENT and target_path is None and target_tag is None:
        target_path = BuildConfig().cloud_provider_azure_path
    return BuildRequest(component=target, source_path=target_path, source_tag=target_tag)


def build(
    target: str = typer.Option(
        ..., "--target", help="Component to build, e.g. cloud-provider-azure"),
    target_path: str | None = typer.Option(
        None, "--target-path", "--targetPath", help="Local repo path (not set with --target-tag)"),
    target_tag: str | None = typer.Option(
        None, "--target-tag", "--targetTag", help="Git tag of the component repo"),
) -> None:
    """Build and push custom images of a component."""
    request = resolve_build_request(target, target_path, target_tag)
    image_tag = run_build(request)
    if image_tag:
        typer.echo(image_tag)
