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

"""Unit tests for Manifest value objects."""

import pytest

from core.manifest import CorrelationId, OSTreeSource, Stage


class TestCorrelationId:
    """Test cases for CorrelationId value object."""

    def test_valid_uuid(self):
        """Test that a UUID string is accepted."""
        value = "1b4e28ba-2fa1-4d3b-a3f5-ef19b5a7633b"
        assert str(CorrelationId(value)) == value

    def test_valid_free_form(self):
        """Test that dots, colons and underscores are accepted."""
        assert CorrelationId("req_1.retry:2").value == "req_1.retry:2"

    def test_empty(self):
        """Test that an empty ID raises ValueError."""
        with pytest.raises(ValueError, match="Correlation ID cannot be empty"):
            CorrelationId("")

    def test_too_long(self):
        """Test that overly long IDs raise ValueError."""
        with pytest.raises(ValueError, match="cannot exceed 128 characters"):
            CorrelationId("a" * 129)

    def test_max_length(self):
        """Test that the maximum length is accepted."""
        assert len(CorrelationId("a" * 128).value) == 128

    def test_invalid_characters(self):
        """Test that whitespace and slashes raise ValueError."""
        with pytest.raises(ValueError, match="Invalid correlation ID format"):
            CorrelationId("bad id/1")


class TestStage:
    """Test cases for Stage value object."""

    def test_minimal_serialization(self):
        """Test that empty sections are left out."""
        assert Stage(type="org.osbuild.selinux").to_dict() == {"type": "org.osbuild.selinux"}

    def test_full_serialization(self):
        """Test that every section is serialized."""
        stage = Stage(
            type="org.osbuild.copy",
            options={"paths": []},
            inputs={"tree": {}},
            devices={"disk": {}},
            mounts=[{"name": "root"}],
        )
        assert stage.to_dict() == {
            "type": "org.osbuild.copy",
            "inputs": {"tree": {}},
            "options": {"paths": []},
            "devices": {"disk": {}},
            "mounts": [{"name": "root"}],
        }


class TestOSTreeSource:
    """Test cases for OSTreeSource value object."""

    def test_serialization(self):
        """Test source serialization."""
        source = OSTreeSource(url="https://ostree", ref="fedora/38/x86_64/iot")
        assert source.to_dict() == {
            "remote": {"url": "https://ostree"},
            "ref": "fedora/38/x86_64/iot",
        }

    def test_contenturl(self):
        """Test that a content URL is added to the remote."""
        source = OSTreeSource(url="https://ostree", ref="r", contenturl="https://cdn")
        assert source.to_dict()["remote"] == {"url": "https://ostree", "contenturl": "https://cdn"}
