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

"""Value objects for the Distro domain.

All value objects are immutable and defined by their values, not identity.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Optional, Tuple

from core.blueprint.value_objects import CustomizationKind
from core.packagesets.value_objects import PackageSet


class BootMode(str, Enum):
    """Firmware the image boots with."""

    NONE = "none"
    LEGACY = "legacy"
    UEFI = "uefi"
    HYBRID = "hybrid"


class PipelineFamily(str, Enum):
    """Shape of the pipeline graph an image type produces."""

    DISK = "disk"
    CONTAINER = "container"
    OSTREE_COMMIT = "ostree-commit"
    OSTREE_CONTAINER = "ostree-container"
    OSTREE_DISK = "ostree-disk"
    IMAGE_INSTALLER = "image-installer"
    LIVE_INSTALLER = "live-installer"
    OSTREE_INSTALLER = "ostree-installer"
    OSTREE_SIMPLIFIED_INSTALLER = "ostree-simplified-installer"

    @property
    def rpm_ostree(self) -> bool:
        """Return True if the image carries or consumes an OSTree commit."""
        return self in (
            PipelineFamily.OSTREE_COMMIT,
            PipelineFamily.OSTREE_CONTAINER,
            PipelineFamily.OSTREE_DISK,
            PipelineFamily.OSTREE_INSTALLER,
            PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER,
        )

    @property
    def produces_commit(self) -> bool:
        """Return True if the image is itself an OSTree commit."""
        return self in (PipelineFamily.OSTREE_COMMIT, PipelineFamily.OSTREE_CONTAINER)

    @property
    def boot_iso(self) -> bool:
        """Return True if the image is a bootable installer ISO."""
        return self in (
            PipelineFamily.IMAGE_INSTALLER,
            PipelineFamily.LIVE_INSTALLER,
            PipelineFamily.OSTREE_INSTALLER,
            PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER,
        )

    @property
    def partitioned(self) -> bool:
        """Return True if the image contains a partition table."""
        return self in (
            PipelineFamily.DISK,
            PipelineFamily.OSTREE_DISK,
            PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER,
        )


@dataclass(frozen=True)
class OSTreeImageOptions:
    """Where an OSTree-based image gets its commit and which ref it uses.

    Attributes:
        ref: Ref to build or deploy; the image type default when empty.
        parent: Parent ref for a new commit.
        url: Repository URL of the commit.
        contenturl: Alternate URL for commit content.
    """

    ref: str = ""
    parent: str = ""
    url: str = ""
    contenturl: str = ""


@dataclass(frozen=True)
class ImageOptions:
    """Per-request image options.

    Attributes:
        size: Requested image size in bytes; zero selects the default.
        ostree: OSTree source options.
    """

    size: int = 0
    ostree: Optional[OSTreeImageOptions] = None

    def __post_init__(self) -> None:
        """Validate size."""
        if self.size < 0:
            raise ValueError("Image size cannot be negative")

    def ostree_url(self) -> str:
        """Return the OSTree commit URL, or an empty string."""
        if self.ostree is None:
            return ""
        return self.ostree.url


PackageSetFactory = Callable[[str, str], PackageSet]
"""Builds a package set from (architecture, releasever)."""


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class ImageTypeConfig:
    """Static description of one image type of the catalog.

    Attributes:
        name: Canonical image type name.
        filename: Name of the exported artifact.
        mime_type: MIME type of the artifact.
        family: Pipeline family.
        export: Format of the final pipeline (qcow2, vpc, xz, ...).
        arches: Architectures the type is available on.
        aliases: Alternate names resolving to this type.
        min_release: First release providing the type.
        boot_mode: Preferred boot mode, reduced by architecture support.
        default_size: Image size when none is requested.
        allowed_customizations: Allowed kinds in declared order; None
            means unrestricted.
        kernel_options: Default kernel command line.
        enabled_services: Units enabled by default.
        package_sets: Payload package sets keyed by pipeline name.
        ostree_ref_template: Default ref, formatted with releasever and
            arch.
        vhd_rounding: Round sizes up to the next MiB.
    """

    name: str
    filename: str
    mime_type: str
    family: PipelineFamily
    export: str
    arches: Tuple[str, ...]
    aliases: Tuple[str, ...] = ()
    min_release: int = 0
    boot_mode: BootMode = BootMode.NONE
    default_size: int = 0
    allowed_customizations: Optional[Tuple[CustomizationKind, ...]] = None
    kernel_options: str = ""
    enabled_services: Tuple[str, ...] = ()
    package_sets: Tuple[Tuple[str, PackageSetFactory], ...] = ()
    ostree_ref_template: str = ""
    vhd_rounding: bool = False

    NAME_PATTERN: ClassVar[str] = r"^[a-z0-9][a-z0-9-]*$"

    def __post_init__(self) -> None:
        """Validate catalog entry."""
        if not re.match(self.NAME_PATTERN, self.name):
            raise ValueError(f"Invalid image type name: {self.name!r}")
        if not self.arches:
            raise ValueError(f"Image type {self.name} has no architectures")
        if self.family.partitioned and self.default_size <= 0:
            raise ValueError(f"Image type {self.name} requires a default size")

    def available_for(self, release: int, arch: str) -> bool:
        """Return True if the type is built for the release and architecture."""
        return arch in self.arches and release >= self.min_release


@dataclass(frozen=True)
class ArchitectureConfig:
    """Static description of one architecture of the catalog.

    Attributes:
        name: Architecture name.
        legacy_boot: Firmware supports BIOS-style boot.
        uefi_boot: Firmware supports UEFI boot.
        build_packages: Extra packages of the build root.
    """

    name: str
    legacy_boot: bool
    uefi_boot: bool
    build_packages: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DistributionConfig:
    """Static description of one release of the catalog."""

    name: str
    product: str
    releasever: str
    module_platform_id: str
    runner: str

    @property
    def release(self) -> int:
        """Return the release number."""
        return int(self.releasever)
