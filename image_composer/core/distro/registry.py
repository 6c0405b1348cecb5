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

"""Process-wide image type registry."""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Tuple

from core.distro import fedora
from core.distro.entities import Architecture, Distribution, ImageType
from core.distro.exceptions import UnsupportedDistributionError
from core.distro.value_objects import ImageTypeConfig

logger = logging.getLogger(__name__)


class DistroRegistry:
    """Read-only lookup of distributions, architectures and image types.

    The tree is built completely in the constructor and never changes
    afterwards, so one instance can be shared by concurrent requests.
    """

    def __init__(self, distributions: Iterable[Distribution]):
        distros: Dict[str, Distribution] = {}
        index: Dict[Tuple[str, str, str], ImageType] = {}
        for distribution in distributions:
            if distribution.name in distros:
                raise ValueError(f"Duplicate distribution {distribution.name}")
            distros[distribution.name] = distribution
            for arch_name in distribution.list_arches():
                arch = distribution.get_arch(arch_name)
                for type_name in arch.list_image_types():
                    image_type = arch.get_image_type(type_name)
                    index[(distribution.name, arch_name, type_name)] = image_type
                for alias, type_name in arch.aliases().items():
                    index[(distribution.name, arch_name, alias)] = arch.get_image_type(type_name)
        self._distros = MappingProxyType(distros)
        self._index = MappingProxyType(index)

    def list_distros(self) -> List[str]:
        """Return distribution names, sorted."""
        return sorted(self._distros)

    def get_distro(self, name: str) -> Distribution:
        """Return a distribution by name.

        Raises:
            UnsupportedDistributionError: If the distribution is unknown.
        """
        distribution = self._distros.get(name)
        if distribution is None:
            raise UnsupportedDistributionError(f"unknown distribution: {name}")
        return distribution

    def get_image_type(self, distro: str, arch: str, name: str) -> ImageType:
        """Return an image type by (distribution, architecture, name or alias).

        Raises:
            UnsupportedDistributionError: If the distribution is unknown.
            UnsupportedArchitectureError: If the architecture is unknown.
            UnsupportedImageTypeError: If the image type is unknown.
        """
        image_type = self._index.get((distro, arch, name))
        if image_type is not None:
            return image_type
        # Fall back to the tree to raise the most specific error.
        return self.get_distro(distro).get_arch(arch).get_image_type(name)


def _build_distribution(releasever: str, image_types: Iterable[ImageTypeConfig]) -> Distribution:
    config = fedora.distribution_config(releasever)
    distribution = Distribution(
        config, fedora.build_package_set, fedora.MOUNTPOINT_POLICY
    )
    for arch_config in fedora.ARCHITECTURES:
        arch = Architecture(arch_config, distribution)
        for type_config in image_types:
            if not type_config.available_for(config.release, arch_config.name):
                continue
            partition_table = None
            if type_config.family.partitioned:
                partition_table = fedora.default_partition_table(arch_config.name)
            arch.add_image_type(ImageType(type_config, arch, partition_table))
        distribution.add_arch(arch)
    return distribution


def build_fedora_registry() -> DistroRegistry:
    """Assemble the registry of every Fedora release of the catalog."""
    registry = DistroRegistry(
        _build_distribution(releasever, fedora.IMAGE_TYPES) for releasever in fedora.RELEASES
    )
    logger.info("Image type registry built: %s", ", ".join(registry.list_distros()))
    return registry


@lru_cache(maxsize=1)
def get_registry() -> DistroRegistry:
    """Return the process-wide registry, building it on first use."""
    return build_fedora_registry()
