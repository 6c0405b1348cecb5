# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
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

"""Integration tests for the Manifests API."""

import pytest

OSTREE_URL = "https://ostree.example.com/repo"

BLUEPRINT_TOML = """
name = "edge"

[[packages]]
name = "tmux"

[customizations]
hostname = "edge-node"
"""


def _body(**overrides):
    body = {
        "distribution": "fedora-38",
        "architecture": "x86_64",
        "image_type": "qcow2",
    }
    body.update(overrides)
    return body


class TestGenerateManifestAPI:
    """Integration tests for POST /api/v1/manifests."""

    def test_generate_qcow2(self, client, correlation_headers):
        """Test generating a qcow2 manifest with a JSON blueprint."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(blueprint={"name": "base", "packages": [{"name": "tmux"}]}),
            headers=correlation_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["correlation_id"] == "test-correlation-123"
        assert data["image_type"] == "qcow2"
        assert data["filename"] == "disk.qcow2"
        assert data["pipelines"] == ["build", "os", "image", "qcow2"]
        assert data["manifest"]["version"] == "2"
        assert data["warnings"] == []

    def test_generate_from_toml(self, client, correlation_headers):
        """Test that TOML blueprints are accepted."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(blueprint_toml=BLUEPRINT_TOML),
            headers=correlation_headers,
        )

        assert response.status_code == 200
        os_pipeline = response.json()["manifest"]["pipelines"][1]
        hostname = [s for s in os_pipeline["stages"] if s["type"] == "org.osbuild.hostname"]
        assert hostname[0]["options"] == {"hostname": "edge-node"}

    def test_deterministic_seed(self, client, correlation_headers):
        """Test that equal requests produce equal manifests."""
        first = client.post("/api/v1/manifests", json=_body(seed=3), headers=correlation_headers)
        second = client.post("/api/v1/manifests", json=_body(seed=3), headers=correlation_headers)

        assert first.json()["manifest"] == second.json()["manifest"]

    def test_request_repositories(self, client, correlation_headers):
        """Test that request repositories reach the package sources."""
        repositories = [{"id": "local", "baseurls": ["https://repo.example.com/local"]}]
        response = client.post(
            "/api/v1/manifests",
            json=_body(repositories=repositories),
            headers=correlation_headers,
        )

        assert response.status_code == 200
        items = response.json()["manifest"]["sources"]["org.osbuild.curl"]["items"]
        assert all(
            item["url"].startswith("https://repo.example.com/local/") for item in items.values()
        )

    def test_ostree_raw_image(self, client, correlation_headers):
        """Test an OSTree disk with the commit source."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(image_type="iot-raw-image", ostree={"url": OSTREE_URL}),
            headers=correlation_headers,
        )

        assert response.status_code == 200
        sources = response.json()["manifest"]["sources"]["org.osbuild.ostree"]["items"]
        assert list(sources) == ["fedora/38/x86_64/iot"]

    def test_alias(self, client, correlation_headers):
        """Test that aliases resolve to the canonical image type."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(image_type="fedora-iot-commit"),
            headers=correlation_headers,
        )

        assert response.status_code == 200
        assert response.json()["image_type"] == "iot-commit"

    def test_warning_returned(self, client, correlation_headers):
        """Test that warnings are part of a successful response."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(image_type="container", size=1024),
            headers=correlation_headers,
        )

        assert response.status_code == 200
        assert response.json()["warnings"] == ['image size is ignored for image type "container"']

    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"distribution": "fedora-1"}, "UNSUPPORTED_DISTRIBUTION"),
            ({"architecture": "mips"}, "UNSUPPORTED_ARCHITECTURE"),
            ({"architecture": "aarch64", "image_type": "vhd"}, "UNSUPPORTED_IMAGE_TYPE"),
        ],
    )
    def test_unknown_catalog_entry(self, client, correlation_headers, overrides, error):
        """Test 404 for unknown catalog entries."""
        response = client.post(
            "/api/v1/manifests", json=_body(**overrides), headers=correlation_headers
        )

        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["error"] == error
        assert detail["correlation_id"] == "test-correlation-123"

    def test_unsupported_customization(self, client, correlation_headers):
        """Test 400 for a customization the image type does not allow."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(
                image_type="iot-installer",
                ostree={"url": OSTREE_URL},
                blueprint={"customizations": {"hostname": "edge"}},
            ),
            headers=correlation_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "UNSUPPORTED_CUSTOMIZATION"

    def test_missing_ostree_url(self, client, correlation_headers):
        """Test 400 for an installer without a commit URL."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(image_type="iot-installer"),
            headers=correlation_headers,
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "INVALID_CUSTOMIZATION"
        assert "requires specifying a URL" in detail["message"]

    def test_invalid_mountpoint(self, client, correlation_headers):
        """Test 400 for a disallowed mountpoint."""
        blueprint = {"customizations": {"filesystem": [{"mountpoint": "/etc", "minsize": 1024}]}}
        response = client.post(
            "/api/v1/manifests", json=_body(blueprint=blueprint), headers=correlation_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_MOUNTPOINT"

    def test_invalid_blueprint(self, client, correlation_headers):
        """Test 400 for a malformed blueprint."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(blueprint={"packages": [{"version": "1.0"}]}),
            headers=correlation_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_BLUEPRINT"

    def test_invalid_toml(self, client, correlation_headers):
        """Test 400 for unparsable TOML."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(blueprint_toml="name = "),
            headers=correlation_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_BLUEPRINT"

    def test_both_blueprint_forms_rejected(self, client, correlation_headers):
        """Test schema validation of the blueprint source."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(blueprint={}, blueprint_toml=""),
            headers=correlation_headers,
        )

        assert response.status_code == 422

    def test_repository_without_source_rejected(self, client, correlation_headers):
        """Test schema validation of repositories."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(repositories=[{"id": "empty"}]),
            headers=correlation_headers,
        )

        assert response.status_code == 422

    def test_invalid_name_pattern(self, client, correlation_headers):
        """Test schema validation of catalog names."""
        response = client.post(
            "/api/v1/manifests",
            json=_body(distribution="../etc"),
            headers=correlation_headers,
        )

        assert response.status_code == 422
