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

"""Custom controller-manager image builds from a local tree or a git tag."""

from __future__ import annotations

import shutil
from pathlib import Path

from rich.panel import Panel

from aks_deployer import console, logger
from aks_deployer.config import BuildRequest
from aks_deployer.constants import DEFAULT_GIT_CLONE_DIR, IMAGE_TAG_LENGTH, component_value
from aks_deployer.utils import capture_cmd, run_cmd


def clone_source(url: str, tag: str, dest: Path) -> Path:
    """Clone a repository into a scratch directory and check out a tag.

    Any previous clone at *dest* is removed first.

    Args:
        url: Git repository URL.
        tag: Tag to check out.
        dest: Scratch directory for the clone.

    Returns:
        The working tree path.

    Raises:
        RuntimeError: If cloning or checking out fails.
    """
    if dest.exists():
        logger.info("Removing previous clone at %s", dest)
        shutil.rmtree(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    console.print(f"[yellow]\u2139\ufe0f  Cloning {url} at tag {tag}...[/yellow]")
    try:
        run_cmd("git", "clone", url, str(dest))
    except RuntimeError as err:
        raise RuntimeError(f"failed to clone from URL {url!r}: {err}") from err
    try:
        run_cmd("git", "-C", str(dest), "checkout", f"tags/{tag}")
    except RuntimeError as err:
        raise RuntimeError(f"failed to check out tag {tag!r}: {err}") from err
    return dest


def make_images(path: Path, targets: list[str]) -> str:
    """Run the image make targets in a working tree and return the image tag.

    NOTE: the registry login (``docker login``) must already be done.

    Args:
        path: Working tree of the component.
        targets: Make targets to run, in order.

    Returns:
        Short hash of the checked-out commit, which the images are tagged with.

    Raises:
        RuntimeError: On the first failing command.
    """
    try:
        run_cmd("git", "-C", str(path), "show", "--stat")
    except RuntimeError as err:
        raise RuntimeError(f"failed to show commit: {err}") from err

    for target in targets:
        console.print(f"[yellow]\u2139\ufe0f  make {target}[/yellow]")
        try:
            run_cmd("make", "-C", str(path), target)
        except RuntimeError as err:
            raise RuntimeError(f"failed to make {target}: {err}") from err
        console.print(f"[green]  \u2713 {target}[/green]")

    try:
        return capture_cmd("git", "-C", str(path), "rev-parse", f"--short={IMAGE_TAG_LENGTH}", "HEAD")
    except RuntimeError as err:
        raise RuntimeError(f"failed to get image tag: {err}") from err


def build_images(request: BuildRequest, clone_root: Path = Path(DEFAULT_GIT_CLONE_DIR)) -> str | None:
    """Build and push the images of a component.

    Args:
        request: Component and source selection.
        clone_root: Parent directory for scratch clones.

    Returns:
        The image tag, or None if the component has no image targets.

    Raises:
        ValueError: If the request is invalid (before anything runs).
        RuntimeError: If resolving the source or any build step fails.
    """
    request.validate()

    console.print(Panel.fit(f"Building {request.component} images", style="bold blue"))
    targets = component_value(request.component, "targets", default=[])
    if not targets:
        logger.warning("Component %s has no image targets; nothing to build", request.component)
        return None

    if request.source_path:
        logger.info("Making %s images with path %s", request.component, request.source_path)
        try:
            image_tag = make_images(Path(request.source_path), targets)
        except RuntimeError as err:
            raise RuntimeError(
                f"failed to make {request.component} images with path {request.source_path!r}: {err}"
            ) from err
    else:
        logger.info("Making %s images with tag %s", request.component, request.source_tag)
        url = component_value(request.component, "repo")
        try:
            tree = clone_source(url, request.source_tag, clone_root / request.component)
            image_tag = make_images(tree, targets)
        except RuntimeError as err:
            raise RuntimeError(
                f"failed to make {request.component} images with tag {request.source_tag!r}: {err}"
            ) from err

    console.print(f"[green]\u2705 {request.component} images with tag '{image_tag}' are ready[/green]")
    return image_tag
