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

"""Shell invocation helpers for git and make."""

from __future__ import annotations

import sys

import sh

from aks_deployer import logger


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        RuntimeError: If the command is not found.
    """
    try:
        sh.which(cmd)
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"Required command '{cmd}' not found. Please install it first.") from err


def run_cmd(cmd: str, *args: str) -> None:
    """Run a command, streaming its output to the terminal.

    Args:
        cmd: Executable name (e.g. ``git``).
        *args: Arguments passed to the executable.

    Raises:
        RuntimeError: If the command is missing or exits non-zero.
    """
    logger.info("Running: %s %s", cmd, " ".join(args))
    try:
        sh.Command(cmd)(*args, _out=sys.stdout, _err=sys.stderr)
    except sh.CommandNotFound as err:
        raise RuntimeError(f"command '{cmd}' not found") from err
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"'{cmd} {' '.join(args)}' exited with status {err.exit_code}") from err


def capture_cmd(cmd: str, *args: str) -> str:
    """Run a command and return its stripped stdout.

    Args:
        cmd: Executable name (e.g. ``git``).
        *args: Arguments passed to the executable.

    Returns:
        Standard output with surrounding whitespace removed.

    Raises:
        RuntimeError: If the command is missing or exits non-zero.
    """
    try:
        output = sh.Command(cmd)(*args, _err=sys.stderr)
    except sh.CommandNotFound as err:
        raise RuntimeError(f"command '{cmd}' not found") from err
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"'{cmd} {' '.join(args)}' exited with status {err.exit_code}") from err
    return str(output).strip()
