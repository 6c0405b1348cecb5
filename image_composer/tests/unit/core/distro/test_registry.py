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

"""Unit tests for the image type registry."""

import pytest

from core.distro import (
    UnsupportedArchitectureError,
    UnsupportedDistributionError,
    UnsupportedImageTypeError,
    build_fedora_registry,
    get_registry,
)

EFI_TYPES_37 = [
    "ami",
    "container",
    "image-installer",
    "iot-commit",
    "iot-container",
    "iot-installer",
    "iot-qcow2-image",
    "iot-raw-image",
    "live-installer",
    "minimal-raw",
    "oci",
    "openstack",
    "qcow2",
]

X86_ONLY_TYPES = ["ova", "vhd", "vmdk", "wsl"]


class TestDistroRegistry:
    """Test cases for DistroRegistry lookups."""

    def test_list_distros(self, registry):
        """Test that every release is listed, sorted."""
        assert registry.list_distros() == ["fedora-37", "fedora-38", "fedora-39", "fedora-40"]

    def test_get_registry_is_shared(self):
        """Test that the process-wide registry is built once."""
        assert get_registry() is get_registry()

    def test_fresh_registry_matches(self, registry):
        """Test that building again yields the same catalog."""
        assert build_fedora_registry().list_distros() == registry.list_distros()

    def test_list_arches(self, registry):
        """Test architecture listing."""
        distro = registry.get_distro("fedora-38")
        assert distro.list_arches() == ["aarch64", "ppc64le", "s390x", "x86_64"]

    def test_distribution_details(self, registry):
        """Test distribution record."""
        distro = registry.get_distro("fedora-38")
        assert distro.product == "Fedora"
        assert distro.releasever == "38"
        assert distro.module_platform_id == "platform:f38"
        assert distro.runner == "org.osbuild.fedora38"

    def test_x86_64_image_types_37(self, registry):
        """Test the x86_64 catalog of a release without the simplified installer."""
        arch = registry.get_distro("fedora-37").get_arch("x86_64")
        assert arch.list_image_types() == sorted(EFI_TYPES_37 + X86_ONLY_TYPES)

    def test_x86_64_image_types_38(self, registry):
        """Test that the simplified installer appears in 38."""
        arch = registry.get_distro("fedora-38").get_arch("x86_64")
        assert arch.list_image_types() == sorted(
            EFI_TYPES_37 + X86_ONLY_TYPES + ["iot-simplified-installer"]
        )

    def test_aarch64_image_types(self, registry):
        """Test the aarch64 catalog."""
        arch = registry.get_distro("fedora-39").get_arch("aarch64")
        assert arch.list_image_types() == sorted(EFI_TYPES_37 + ["iot-simplified-installer"])

    @pytest.mark.parametrize("arch_name", ["ppc64le", "s390x"])
    def test_legacy_arch_image_types(self, registry, arch_name):
        """Test that POWER and Z only build qcow2 and container."""
        arch = registry.get_distro("fedora-40").get_arch(arch_name)
        assert arch.list_image_types() == ["container", "qcow2"]

    @pytest.mark.parametrize(
        "alias,name",
        [
            ("fedora-image-installer", "image-installer"),
            ("fedora-iot-commit", "iot-commit"),
            ("fedora-iot-container", "iot-container"),
            ("fedora-iot-installer", "iot-installer"),
        ],
    )
    def test_alias_lookup(self, registry, alias, name):
        """Test that aliases resolve to the canonical image type."""
        image_type = registry.get_image_type("fedora-38", "x86_64", alias)
        assert image_type.name == name
        assert image_type is registry.get_image_type("fedora-38", "x86_64", name)

    def test_aliases_not_listed(self, registry):
        """Test that aliases never appear in listings."""
        names = registry.get_distro("fedora-38").get_arch("x86_64").list_image_types()
        assert "fedora-iot-commit" not in names

    def test_unknown_distribution(self, registry):
        """Test unknown distribution lookups."""
        with pytest.raises(UnsupportedDistributionError, match="unknown distribution: fedora-1"):
            registry.get_image_type("fedora-1", "x86_64", "qcow2")

    def test_unknown_architecture(self, registry):
        """Test unknown architecture lookups."""
        with pytest.raises(
            UnsupportedArchitectureError,
            match="invalid architecture: riscv64 for distribution fedora-38",
        ):
            registry.get_image_type("fedora-38", "riscv64", "qcow2")

    def test_unknown_image_type(self, registry):
        """Test unknown image type lookups."""
        with pytest.raises(
            UnsupportedImageTypeError,
            match="invalid image type: ova for architecture aarch64",
        ):
            registry.get_image_type("fedora-38", "aarch64", "ova")

    def test_simplified_installer_missing_in_37(self, registry):
        """Test that the simplified installer is unknown before 38."""
        with pytest.raises(UnsupportedImageTypeError):
            registry.get_image_type("fedora-37", "x86_64", "iot-simplified-installer")
