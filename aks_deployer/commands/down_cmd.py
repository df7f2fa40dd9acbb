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

"""Down subcommand (resource group deletion)."""

from __future__ import annotations

from aks_deployer.config import AzureConfig, display_config
from aks_deployer.orchestrator import run_down


def down() -> None:
    """Delete the resource group and everything in it."""
    azure_cfg = AzureConfig()
    display_config(azure_cfg)
    run_down(azure_cfg)
