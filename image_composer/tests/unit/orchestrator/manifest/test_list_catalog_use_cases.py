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

"""Unit tests for the image catalog listing use cases."""

import pytest

from core.distro import UnsupportedArchitectureError, UnsupportedDistributionError, get_registry
from core.manifest import CorrelationId
from orchestrator.manifest.commands import (
    ListArchitecturesCommand,
    ListDistributionsCommand,
    ListImageTypesCommand,
)
from orchestrator.manifest.use_cases import (
    ListArchitecturesUseCase,
    ListDistributionsUseCase,
    ListImageTypesUseCase,
)

CORRELATION_ID = CorrelationId("corr-catalog-1")


class TestListDistributionsUseCase:
    """Test cases for ListDistributionsUseCase."""

    def test_lists_releases_sorted(self):
        """Test that every release is listed in name order."""
        result = ListDistributionsUseCase(get_registry()).execute(
            ListDistributionsCommand(correlation_id=CORRELATION_ID)
        )
        assert result.correlation_id == "corr-catalog-1"
        assert [d.name for d in result.distributions] == [
            "fedora-37",
            "fedora-38",
            "fedora-39",
            "fedora-40",
        ]

    def test_distribution_summary(self):
        """Test summary fields of a release."""
        result = ListDistributionsUseCase(get_registry()).execute(
            ListDistributionsCommand(correlation_id=CORRELATION_ID)
        )
        fedora_38 = result.distributions[1]
        assert fedora_38.product == "Fedora"
        assert fedora_38.releasever == "38"
        assert fedora_38.module_platform_id == "platform:f38"


class TestListArchitecturesUseCase:
    """Test cases for ListArchitecturesUseCase."""

    def test_lists_architectures_sorted(self):
        """Test architecture names of a release."""
        result = ListArchitecturesUseCase(get_registry()).execute(
            ListArchitecturesCommand(correlation_id=CORRELATION_ID, distribution="fedora-38")
        )
        assert result.distribution == "fedora-38"
        assert result.architectures == ["aarch64", "ppc64le", "s390x", "x86_64"]

    def test_unknown_distribution(self):
        """Test that unknown distributions are tagged with the correlation ID."""
        use_case = ListArchitecturesUseCase(get_registry())
        with pytest.raises(UnsupportedDistributionError, match="unknown distribution") as exc_info:
            use_case.execute(
                ListArchitecturesCommand(correlation_id=CORRELATION_ID, distribution="rhel-9")
            )
        assert exc_info.value.correlation_id == "corr-catalog-1"


class TestListImageTypesUseCase:
    """Test cases for ListImageTypesUseCase."""

    @staticmethod
    def _execute(distribution="fedora-38", architecture="x86_64"):
        return ListImageTypesUseCase(get_registry()).execute(
            ListImageTypesCommand(
                correlation_id=CORRELATION_ID,
                distribution=distribution,
                architecture=architecture,
            )
        )

    def test_lists_canonical_names_sorted(self):
        """Test that only canonical names are listed, sorted."""
        names = [image_type.name for image_type in self._execute().image_types]
        assert names == sorted(names)
        assert "fedora-iot-commit" not in names
        assert len(names) == 18

    def test_image_type_summary(self):
        """Test summary fields of an image type."""
        summaries = {image_type.name: image_type for image_type in self._execute().image_types}
        commit = summaries["iot-commit"]
        assert commit.aliases == ["fedora-iot-commit"]
        assert commit.rpm_ostree is True
        assert commit.boot_iso is False

        qcow2 = summaries["qcow2"]
        assert qcow2.filename == "disk.qcow2"
        assert qcow2.boot_mode == "hybrid"
        assert qcow2.default_size == 5 * 1024 * 1024 * 1024

        installer = summaries["iot-installer"]
        assert installer.boot_iso is True

    def test_architecture_restricts_types(self):
        """Test that x86_64-only types are missing on aarch64."""
        names = [image_type.name for image_type in self._execute(architecture="aarch64").image_types]
        assert "vhd" not in names
        assert "qcow2" in names

    def test_release_restricts_types(self):
        """Test that the simplified installer starts with fedora-38."""
        names = [image_type.name for image_type in self._execute("fedora-37").image_types]
        assert "iot-simplified-installer" not in names

    def test_unknown_architecture(self):
        """Test that unknown architectures are tagged with the correlation ID."""
        with pytest.raises(UnsupportedArchitectureError, match="invalid architecture") as exc_info:
            self._execute(architecture="mips")
        assert exc_info.value.correlation_id == "corr-catalog-1"
