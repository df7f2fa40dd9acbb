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

"""Shared fixtures: environment, templates, and fake Azure clients."""

from __future__ import annotations

import typing as typ
from types import SimpleNamespace

import pytest

from aks_deployer import cluster

CLUSTER_TEMPLATE = """{
  "id": "{AKS_CLUSTER_ID}",
  "name": "{CLUSTER_NAME}",
  "location": "{AZURE_LOCATION}",
  "properties": {
    "kubernetesVersion": "{KUBERNETES_VERSION}",
    "servicePrincipalProfile": {"clientId": "{AZURE_CLIENT_ID}", "secret": "{AZURE_CLIENT_SECRET}"},
    "encodedCustomConfiguration": "{CUSTOM_CONFIG}"
  }
}
"""

CUSTOM_CONFIG_TEMPLATE = """{
  "components": [
    {"name": "cloud-controller-manager", "image": "{CUSTOM_CCM_IMAGE}"},
    {"name": "cloud-node-manager", "image": "{CUSTOM_CNM_IMAGE}"}
  ]
}
"""


@pytest.fixture
def azure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set the environment variables the Azure settings read."""
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub-123")
    monkeypatch.setenv("AZURE_LOCATION", "westus2")
    monkeypatch.setenv("AZURE_RESOURCEGROUP", "rg-e2e")
    monkeypatch.setenv("AZURE_CLIENT_ID", "client-abc")
    monkeypatch.setenv("AZURE_CLIENT_SECRET", "s3cret")
    monkeypatch.setenv("IMAGE_REGISTRY", "registry.example.io")


@pytest.fixture
def template_files(tmp_path):
    """Write the cluster and custom configuration templates to disk."""
    config = tmp_path / "cluster.json"
    custom = tmp_path / "custom.json"
    config.write_text(CLUSTER_TEMPLATE)
    custom.write_text(CUSTOM_CONFIG_TEMPLATE)
    return config, custom


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry sleeps instead of waiting."""
    sleeps: list[float] = []
    monkeypatch.setattr("time.sleep", sleeps.append)
    return sleeps


class FakeCredential:
    """Token credential that counts token requests."""

    def __init__(self) -> None:
        self.scopes: list[tuple[str, ...]] = []

    def get_token(self, *scopes: str, **_: typ.Any) -> SimpleNamespace:
        self.scopes.append(scopes)
        return SimpleNamespace(token="fake-token", expires_on=0)


class FakeResourceGroups:
    """Records resource group calls."""

    def __init__(self) -> None:
        self.created: list[tuple[str, dict]] = []
        self.deleted: list[str] = []

    def create_or_update(self, name: str, params: dict) -> SimpleNamespace:
        self.created.append((name, params))
        return SimpleNamespace(id=f"/subscriptions/sub-123/resourceGroups/{name}")

    def begin_delete(self, name: str) -> SimpleNamespace:
        self.deleted.append(name)
        return SimpleNamespace(result=lambda: None)


class FakeManagedClusters:
    """Returns a scripted sequence of credential results or errors."""

    def __init__(self, outcomes: list[typ.Any] | None = None, state: str = "Succeeded") -> None:
        self.outcomes = list(outcomes or [])
        self.calls = 0
        self.state = state

    def list_cluster_admin_credentials(self, resource_group: str, cluster_name: str) -> SimpleNamespace:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, resource_group: str, cluster_name: str) -> SimpleNamespace:
        return SimpleNamespace(provisioning_state=self.state)


def credential_result(*values: bytes) -> SimpleNamespace:
    """Build a CredentialResults-like object."""
    return SimpleNamespace(kubeconfigs=[SimpleNamespace(name="clusterAdmin", value=v) for v in values])


class FakeResponse:
    """Minimal requests.Response stand-in."""

    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        self.text = text


class FakeAzure:
    """Bundle of fakes patched into aks_deployer.cluster."""

    def __init__(self) -> None:
        self.credential = FakeCredential()
        self.resource_groups = FakeResourceGroups()
        self.managed_clusters = FakeManagedClusters()
        self.puts: list[dict[str, typ.Any]] = []
        self.put_response = FakeResponse()

    def put(self, url: str, **kwargs: typ.Any) -> FakeResponse:
        self.puts.append({"url": url, **kwargs})
        return self.put_response


@pytest.fixture
def fake_azure(monkeypatch: pytest.MonkeyPatch) -> FakeAzure:
    """Patch the Azure SDK clients and requests.put with fakes."""
    fake = FakeAzure()
    monkeypatch.setattr(cluster, "DefaultAzureCredential", lambda: fake.credential)
    monkeypatch.setattr(
        cluster, "ResourceManagementClient",
        lambda credential, subscription_id: SimpleNamespace(resource_groups=fake.resource_groups),
    )
    monkeypatch.setattr(
        cluster, "ContainerServiceClient",
        lambda credential, subscription_id: SimpleNamespace(managed_clusters=fake.managed_clusters),
    )
    monkeypatch.setattr(cluster.requests, "put", fake.put)
    return fake
