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

"""Unit tests for Distro entities."""

import pytest

from core.blueprint import (
    Blueprint,
    Customizations,
    FilesystemCustomization,
    KernelCustomization,
)
from core.disk import GiB, MiB, MountpointError
from core.distro import (
    BootMode,
    ImageOptions,
    OstreeCustomizationConflictError,
    PipelineFamily,
    UnsupportedCustomizationError,
    get_registry,
)


class TestImageType:
    """Test cases for ImageType."""

    def test_metadata(self, registry):
        """Test image type metadata."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "qcow2")
        assert image_type.filename == "disk.qcow2"
        assert image_type.mime_type == "application/x-qemu-disk"
        assert image_type.family == PipelineFamily.DISK
        assert not image_type.rpm_ostree
        assert not image_type.boot_iso
        assert image_type.partition_table is not None
        assert repr(image_type) == "ImageType(fedora-38/x86_64/qcow2)"

    @pytest.mark.parametrize(
        "arch,type_name,mode",
        [
            ("x86_64", "qcow2", BootMode.HYBRID),
            ("aarch64", "qcow2", BootMode.UEFI),
            ("ppc64le", "qcow2", BootMode.LEGACY),
            ("s390x", "qcow2", BootMode.LEGACY),
            ("x86_64", "minimal-raw", BootMode.UEFI),
            ("x86_64", "container", BootMode.NONE),
        ],
    )
    def test_boot_mode_reduced_to_arch(self, registry, arch, type_name, mode):
        """Test that the boot mode is limited by firmware support."""
        assert registry.get_image_type("fedora-38", arch, type_name).boot_mode == mode

    def test_default_size(self, registry):
        """Test that zero selects the default size."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "qcow2")
        assert image_type.size(0) == 5 * GiB
        assert image_type.size(7 * GiB) == 7 * GiB

    def test_vhd_size_rounded(self, registry):
        """Test that VHD sizes are rounded up to the next MiB."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "vhd")
        assert image_type.size(4 * GiB + 1) == 4 * GiB + MiB
        assert image_type.size(4 * GiB) == 4 * GiB

    def test_unpartitioned_types(self, registry):
        """Test that container images carry no partition table."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "container")
        assert image_type.partition_table is None
        assert image_type.size(0) == 0

    def test_ostree_ref(self, registry):
        """Test default OSTree ref."""
        image_type = registry.get_image_type("fedora-39", "aarch64", "iot-commit")
        assert image_type.ostree_ref() == "fedora/39/aarch64/iot"
        assert registry.get_image_type("fedora-39", "aarch64", "qcow2").ostree_ref() == ""

    def test_kernel_options(self, registry):
        """Test kernel command line with blueprint additions."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "minimal-raw")
        blueprint = Blueprint(
            customizations=Customizations(kernel=KernelCustomization(append="debug"), fips=True)
        )
        assert image_type.kernel_options(Blueprint()) == "ro"
        assert image_type.kernel_options(blueprint) == "ro debug fips=1"

    def test_build_package_set(self, registry):
        """Test build root packages per architecture and family."""
        x86 = registry.get_image_type("fedora-38", "x86_64", "qcow2").build_package_set()
        aarch64 = registry.get_image_type("fedora-38", "aarch64", "qcow2").build_package_set()
        assert x86.include == aarch64.include + ("grub2-pc",)
        assert "dnf" in x86.include
        commit = registry.get_image_type("fedora-38", "aarch64", "iot-commit").build_package_set()
        assert "rpm-ostree" in commit.include
        assert "grub2-pc" not in commit.include
        s390 = registry.get_image_type("fedora-38", "s390x", "qcow2").build_package_set()
        assert "s390utils-base" in s390.include

    def test_payload_package_sets(self, registry):
        """Test payload package sets in pipeline order."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "image-installer")
        pipelines = [name for name, _ in image_type.payload_package_sets()]
        assert pipelines == ["anaconda-tree", "os"]
        anaconda = dict(image_type.payload_package_sets())["anaconda-tree"]
        assert "shim-x64" in anaconda.include

    def test_iot_disk_has_no_payload(self, registry):
        """Test that OSTree disks install nothing from packages."""
        image_type = registry.get_image_type("fedora-38", "x86_64", "iot-raw-image")
        assert image_type.payload_package_sets() == []


OSTREE_MOUNTPOINT_ERROR = "Custom mountpoints are not supported for ostree types"
IOT_DISK_ALLOWED = "(allowed: User, Group, Directories, Files, Services)"


def _fedora37_image_types():
    registry = get_registry()
    distro = registry.get_distro("fedora-37")
    for arch_name in distro.list_arches():
        for type_name in distro.get_arch(arch_name).list_image_types():
            yield arch_name, type_name


def _filesystem_blueprint(*mountpoints):
    return Blueprint(
        customizations=Customizations(
            filesystem=tuple(FilesystemCustomization(path, 1024) for path in mountpoints)
        )
    )


def _manifest(registry, arch, type_name, blueprint):
    image_type = registry.get_image_type("fedora-37", arch, type_name)
    return image_type.manifest(blueprint, ImageOptions())


def _expect_single_mountpoint_result(registry, arch, type_name, blueprint, error=None):
    """Check one of the single-mountpoint cases shared by every listed type."""
    if type_name in ("iot-commit", "iot-container"):
        with pytest.raises(OstreeCustomizationConflictError) as exc_info:
            _manifest(registry, arch, type_name, blueprint)
        assert exc_info.value.message == OSTREE_MOUNTPOINT_ERROR
    elif type_name in ("iot-raw-image", "iot-qcow2-image"):
        with pytest.raises(UnsupportedCustomizationError) as exc_info:
            _manifest(registry, arch, type_name, blueprint)
        assert exc_info.value.message == (
            f'unsupported blueprint customizations found for image type "{type_name}": '
            f"{IOT_DISK_ALLOWED}"
        )
    elif type_name in ("iot-installer", "iot-simplified-installer", "image-installer"):
        return
    elif type_name == "live-installer":
        with pytest.raises(UnsupportedCustomizationError) as exc_info:
            _manifest(registry, arch, type_name, blueprint)
        assert exc_info.value.message == (
            'unsupported blueprint customizations found for boot ISO image type '
            '"live-installer": (allowed: None)'
        )
    elif error is not None:
        with pytest.raises(MountpointError) as exc_info:
            _manifest(registry, arch, type_name, blueprint)
        assert exc_info.value.message == error
    else:
        manifest, _ = _manifest(registry, arch, type_name, blueprint)
        assert manifest.pipelines


def _expect_nested_mountpoint_result(registry, arch, type_name, blueprint, error=None):
    """Check the multi-mountpoint cases, which skip the OSTree and installer types."""
    if type_name.startswith("iot-") or type_name.startswith("image-"):
        return
    if type_name == "live-installer":
        with pytest.raises(UnsupportedCustomizationError, match=r"\(allowed: None\)"):
            _manifest(registry, arch, type_name, blueprint)
    elif error is not None:
        with pytest.raises(MountpointError) as exc_info:
            _manifest(registry, arch, type_name, blueprint)
        assert exc_info.value.message == error
    else:
        manifest, _ = _manifest(registry, arch, type_name, blueprint)
        assert manifest.pipelines


class TestImageTypeMountpoints:
    """Custom mountpoints across every Fedora 37 image type."""

    @pytest.mark.parametrize("arch,type_name", list(_fedora37_image_types()))
    def test_etc_not_supported(self, registry, arch, type_name):
        """Test that /etc is rejected as a custom mountpoint."""
        _expect_single_mountpoint_result(
            registry,
            arch,
            type_name,
            _filesystem_blueprint("/etc"),
            error='The following custom mountpoints are not supported ["/etc"]',
        )

    @pytest.mark.parametrize("arch,type_name", list(_fedora37_image_types()))
    def test_root_mountpoint(self, registry, arch, type_name):
        """Test that / may be customized."""
        _expect_single_mountpoint_result(registry, arch, type_name, _filesystem_blueprint("/"))

    @pytest.mark.parametrize("arch,type_name", list(_fedora37_image_types()))
    def test_small_usr_is_grown(self, registry, arch, type_name):
        """Test that a 1 KiB /usr request is accepted and grown."""
        _expect_single_mountpoint_result(registry, arch, type_name, _filesystem_blueprint("/usr"))

    @pytest.mark.parametrize("arch,type_name", list(_fedora37_image_types()))
    def test_sub_directories(self, registry, arch, type_name):
        """Test /var/log together with /var/log/audit."""
        _expect_nested_mountpoint_result(
            registry, arch, type_name, _filesystem_blueprint("/var/log", "/var/log/audit")
        )

    @pytest.mark.parametrize("arch,type_name", list(_fedora37_image_types()))
    def test_arbitrary_depth(self, registry, arch, type_name):
        """Test mountpoints nested four levels deep."""
        _expect_nested_mountpoint_result(
            registry,
            arch,
            type_name,
            _filesystem_blueprint("/var/a", "/var/a/b", "/var/a/b/c", "/var/a/b/c/d"),
        )

    @pytest.mark.parametrize("arch,type_name", list(_fedora37_image_types()))
    def test_dirty_mountpoints(self, registry, arch, type_name):
        """Test that every dirty mountpoint is listed in input order."""
        _expect_nested_mountpoint_result(
            registry,
            arch,
            type_name,
            _filesystem_blueprint("//", "/var//", "/var//log/audit/"),
            error=(
                'The following custom mountpoints are not supported '
                '["//" "/var//" "/var//log/audit/"]'
            ),
        )
