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

"""Domain entities for the Distro module.

Distribution, Architecture and ImageType form the read-only catalog
tree. They are populated once by the registry and never mutated after.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from core.blueprint.entities import Blueprint
from core.blueprint.value_objects import CustomizationKind
from core.disk.entities import PartitionTable
from core.disk.value_objects import MiB
from core.distro.exceptions import (
    UnsupportedArchitectureError,
    UnsupportedImageTypeError,
)
from core.distro.value_objects import (
    ArchitectureConfig,
    BootMode,
    DistributionConfig,
    ImageOptions,
    ImageTypeConfig,
    PipelineFamily,
)
from core.packagesets.value_objects import PackageSet, Repository

logger = logging.getLogger(__name__)


class ImageType:
    """An image type of one architecture of one distribution."""

    def __init__(
        self,
        config: ImageTypeConfig,
        arch: "Architecture",
        partition_table: Optional[PartitionTable] = None,
    ):
        self._config = config
        self._arch = arch
        self._partition_table = partition_table

    @property
    def config(self) -> ImageTypeConfig:
        return self._config

    @property
    def arch(self) -> "Architecture":
        return self._arch

    @property
    def name(self) -> str:
        """Canonical name; aliases never leak through here."""
        return self._config.name

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self._config.aliases

    @property
    def filename(self) -> str:
        return self._config.filename

    @property
    def mime_type(self) -> str:
        return self._config.mime_type

    @property
    def family(self) -> PipelineFamily:
        return self._config.family

    @property
    def rpm_ostree(self) -> bool:
        return self._config.family.rpm_ostree

    @property
    def boot_iso(self) -> bool:
        return self._config.family.boot_iso

    @property
    def allowed_customizations(self) -> Optional[Tuple[CustomizationKind, ...]]:
        return self._config.allowed_customizations

    @property
    def boot_mode(self) -> BootMode:
        """Preferred boot mode reduced to what the architecture supports."""
        mode = self._config.boot_mode
        arch = self._arch.config
        if mode == BootMode.NONE:
            return mode
        if mode == BootMode.HYBRID:
            if arch.legacy_boot and arch.uefi_boot:
                return BootMode.HYBRID
            return BootMode.UEFI if arch.uefi_boot else BootMode.LEGACY
        if mode == BootMode.UEFI and not arch.uefi_boot:
            return BootMode.LEGACY
        if mode == BootMode.LEGACY and not arch.legacy_boot:
            return BootMode.UEFI
        return mode

    @property
    def partition_table(self) -> Optional[PartitionTable]:
        """Default partition table, or None for unpartitioned types."""
        return self._partition_table

    def size(self, requested: int) -> int:
        """Return the image size for a requested size in bytes.

        Zero selects the default size. VHD images are rounded up to the
        next MiB.
        """
        size = requested if requested else self._config.default_size
        if self._config.vhd_rounding and size % MiB:
            size = (size // MiB + 1) * MiB
        return size

    def ostree_ref(self) -> str:
        """Return the default OSTree ref of this image type."""
        if not self._config.ostree_ref_template:
            return ""
        return self._config.ostree_ref_template.format(
            releasever=self._arch.distribution.releasever,
            arch=self._arch.name,
        )

    def kernel_options(self, blueprint: Blueprint) -> str:
        """Return the default kernel command line plus blueprint additions."""
        customizations = blueprint.get_customizations()
        options = [self._config.kernel_options, customizations.kernel_append()]
        if customizations.fips:
            options.append("fips=1")
        return " ".join(option for option in options if option)

    def build_package_set(self) -> PackageSet:
        """Return the package set of the build root."""
        return self._arch.build_package_set(self.family)

    def payload_package_sets(self) -> List[Tuple[str, PackageSet]]:
        """Return payload package sets in pipeline order."""
        return [
            (pipeline, factory(self._arch.name, self._arch.distribution.releasever))
            for pipeline, factory in self._config.package_sets
        ]

    def manifest(
        self,
        blueprint: Blueprint,
        options: ImageOptions,
        repositories: Optional[Sequence[Repository]] = None,
        seed: int = 0,
        correlation_id: str = "",
    ):
        """Validate the blueprint and assemble the manifest of this image type.

        Args:
            blueprint: Requested content and customizations.
            options: Image size and OSTree options.
            repositories: Repositories bound to the package sets.
            seed: Seed of every generated identifier.
            correlation_id: Request correlation ID for error reporting.

        Returns:
            Tuple of (Manifest, warnings).

        Raises:
            DistroDomainError: If the blueprint or options are rejected.
            DiskDomainError: If custom mountpoints are rejected.
        """
        # pylint: disable=import-outside-toplevel,cyclic-import
        from core.distro.services import CustomizationValidator
        from core.manifest.services import ManifestBuilder

        validator = CustomizationValidator(self._arch.distribution.mountpoint_policy)
        warnings = validator.validate(self, blueprint, options, correlation_id)
        manifest = ManifestBuilder().build(
            self, blueprint, options, tuple(repositories or ()), seed, correlation_id
        )
        for warning in warnings:
            logger.warning("%s: %s", self.name, warning)
        return manifest, warnings

    def __repr__(self) -> str:
        return f"ImageType({self._arch.distribution.name}/{self._arch.name}/{self.name})"


class Architecture:
    """An architecture of one distribution and its image types."""

    def __init__(self, config: ArchitectureConfig, distribution: "Distribution"):
        self._config = config
        self._distribution = distribution
        self._image_types: Dict[str, ImageType] = {}
        self._aliases: Dict[str, str] = {}

    @property
    def config(self) -> ArchitectureConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def distribution(self) -> "Distribution":
        return self._distribution

    def add_image_type(self, image_type: ImageType) -> None:
        """Register an image type; only called while building the registry."""
        if image_type.name in self._image_types:
            raise ValueError(f"Duplicate image type {image_type.name} for {self.name}")
        self._image_types[image_type.name] = image_type
        for alias in image_type.aliases:
            if alias in self._aliases or alias in self._image_types:
                raise ValueError(f"Duplicate image type alias {alias} for {self.name}")
            self._aliases[alias] = image_type.name

    def list_image_types(self) -> List[str]:
        """Return canonical image type names, sorted."""
        return sorted(self._image_types)

    def get_image_type(self, name: str) -> ImageType:
        """Return an image type by canonical name or alias.

        Raises:
            UnsupportedImageTypeError: If nothing matches.
        """
        canonical = self._aliases.get(name, name)
        image_type = self._image_types.get(canonical)
        if image_type is None:
            raise UnsupportedImageTypeError(
                f"invalid image type: {name} for architecture {self.name}"
            )
        return image_type

    def aliases(self) -> Mapping[str, str]:
        """Return the alias to canonical name mapping."""
        return MappingProxyType(self._aliases)

    def build_package_set(self, family: PipelineFamily) -> PackageSet:
        """Return the build root package set for a pipeline family."""
        return self._distribution.build_package_set(self._config, family)


class Distribution:
    """A distribution release and its architectures."""

    def __init__(self, config: DistributionConfig, build_package_set_factory, mountpoint_policy):
        self._config = config
        self._build_package_set_factory = build_package_set_factory
        self._mountpoint_policy = mountpoint_policy
        self._arches: Dict[str, Architecture] = {}

    @property
    def config(self) -> DistributionConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def product(self) -> str:
        return self._config.product

    @property
    def releasever(self) -> str:
        return self._config.releasever

    @property
    def module_platform_id(self) -> str:
        return self._config.module_platform_id

    @property
    def runner(self) -> str:
        return self._config.runner

    @property
    def mountpoint_policy(self):
        return self._mountpoint_policy

    def add_arch(self, arch: Architecture) -> None:
        """Register an architecture; only called while building the registry."""
        if arch.name in self._arches:
            raise ValueError(f"Duplicate architecture {arch.name} for {self.name}")
        self._arches[arch.name] = arch

    def list_arches(self) -> List[str]:
        """Return architecture names, sorted."""
        return sorted(self._arches)

    def get_arch(self, name: str) -> Architecture:
        """Return an architecture by name.

        Raises:
            UnsupportedArchitectureError: If the architecture is not available.
        """
        arch = self._arches.get(name)
        if arch is None:
            raise UnsupportedArchitectureError(
                f"invalid architecture: {name} for distribution {self.name}"
            )
        return arch

    def build_package_set(self, arch: ArchitectureConfig, family: PipelineFamily) -> PackageSet:
        """Return the build root package set of an architecture and family."""
        return self._build_package_set_factory(arch, family)
