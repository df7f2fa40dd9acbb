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

"""Unit tests for template rendering and payload assembly."""

from __future__ import annotations

import base64
import json

import pytest
from conftest import CLUSTER_TEMPLATE, CUSTOM_CONFIG_TEMPLATE

from aks_deployer.config import ProvisioningRequest
from aks_deployer.render import (
    encode_custom_config,
    find_placeholders,
    load_template,
    render_cluster_payload,
    render_template,
)


@pytest.fixture
def request_() -> ProvisioningRequest:
    return ProvisioningRequest(
        cluster_name="ccm-e2e",
        location="westus2",
        resource_group="rg-e2e",
        subscription_id="sub-123",
        client_id="client-abc",
        client_secret="s3cret",
        kubernetes_version="1.24.3",
        ccm_image="registry.example.io/azure-cloud-controller-manager:1a2b3c4",
        cnm_image="registry.example.io/azure-cloud-node-manager:1a2b3c4-linux-amd64",
    )


class TestRenderTemplate:
    """Tests for literal placeholder substitution."""

    def test_replaces_every_occurrence(self) -> None:
        """Should replace all occurrences of a key."""
        result = render_template("{A}-{A}-{B}", {"{A}": "x", "{B}": "y"})

        assert result == "x-x-y"

    def test_ignores_keys_absent_from_template(self) -> None:
        """Should leave the text unchanged for unused keys."""
        assert render_template("plain {A}", {"{A}": "1", "{UNUSED}": "2"}) == "plain 1"

    def test_leaves_unmapped_placeholders_literal(self) -> None:
        """Should keep placeholders that have no value."""
        assert render_template("{A} {MISSING}", {"{A}": "1"}) == "1 {MISSING}"

    def test_is_pure(self) -> None:
        """Should give the same output for the same input without mutating the mapping."""
        mapping = {"{A}": "1"}

        first = render_template("{A}", mapping)
        second = render_template("{A}", mapping)

        assert first == second == "1"
        assert mapping == {"{A}": "1"}


class TestFindPlaceholders:
    """Tests for placeholder discovery."""

    def test_finds_upper_snake_tokens(self) -> None:
        """Should find braced upper-case tokens but not JSON braces."""
        assert find_placeholders(CUSTOM_CONFIG_TEMPLATE) == {"{CUSTOM_CCM_IMAGE}", "{CUSTOM_CNM_IMAGE}"}


class TestRenderClusterPayload:
    """Tests for the cluster-creation request body."""

    def test_substitutes_cluster_identity(self, request_: ProvisioningRequest) -> None:
        """Should fill identity, location, credentials, and version."""
        body = json.loads(render_cluster_payload(request_, CLUSTER_TEMPLATE, CUSTOM_CONFIG_TEMPLATE))

        assert body["id"] == (
            "/subscriptions/sub-123/resourcegroups/rg-e2e"
            "/providers/Microsoft.ContainerService/managedClusters/ccm-e2e"
        )
        assert body["name"] == "ccm-e2e"
        assert body["location"] == "westus2"
        assert body["properties"]["kubernetesVersion"] == "1.24.3"
        assert body["properties"]["servicePrincipalProfile"] == {"clientId": "client-abc", "secret": "s3cret"}

    def test_embeds_base64_custom_config(self, request_: ProvisioningRequest) -> None:
        """Should splice the encoded inner document verbatim at the placeholder."""
        inner = render_template(CUSTOM_CONFIG_TEMPLATE, {
            "{CUSTOM_CCM_IMAGE}": request_.ccm_image,
            "{CUSTOM_CNM_IMAGE}": request_.cnm_image,
        })

        body = json.loads(render_cluster_payload(request_, CLUSTER_TEMPLATE, CUSTOM_CONFIG_TEMPLATE))

        encoded = body["properties"]["encodedCustomConfiguration"]
        assert encoded == encode_custom_config(inner)
        decoded = json.loads(base64.b64decode(encoded))
        assert [c["image"] for c in decoded["components"]] == [request_.ccm_image, request_.cnm_image]

    def test_rejects_unknown_placeholder(self, request_: ProvisioningRequest) -> None:
        """Should fail loudly instead of sending a literal token."""
        template = CLUSTER_TEMPLATE.replace("{KUBERNETES_VERSION}", "{NODE_COUNT}")

        with pytest.raises(ValueError, match=r"\{NODE_COUNT\}"):
            render_cluster_payload(request_, template, CUSTOM_CONFIG_TEMPLATE)

    def test_rejects_unknown_inner_placeholder(self, request_: ProvisioningRequest) -> None:
        """Should check the custom configuration template too."""
        with pytest.raises(ValueError, match="custom config template"):
            render_cluster_payload(request_, CLUSTER_TEMPLATE, CUSTOM_CONFIG_TEMPLATE + "{EXTRA}")

    def test_rejects_bare_custom_config_token(self, request_: ProvisioningRequest) -> None:
        """Should refuse an unbraced CUSTOM_CONFIG token instead of sending it literally."""
        template = CLUSTER_TEMPLATE.replace("{CUSTOM_CONFIG}", "CUSTOM_CONFIG")

        with pytest.raises(ValueError, match=r"use \{CUSTOM_CONFIG\}"):
            render_cluster_payload(request_, template, CUSTOM_CONFIG_TEMPLATE)


class TestLoadTemplate:
    """Tests for reading template files."""

    def test_reads_file(self, tmp_path) -> None:
        """Should return the file text."""
        path = tmp_path / "t.json"
        path.write_text("{A}")

        assert load_template(path) == "{A}"

    def test_missing_file_names_path(self, tmp_path) -> None:
        """Should raise RuntimeError naming the path."""
        path = tmp_path / "missing.json"

        with pytest.raises(RuntimeError, match="missing.json"):
            load_template(path)
