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

"""Image catalog listing use cases."""

import logging

from core.distro import DistroDomainError, DistroRegistry

from orchestrator.manifest.commands import (
    ListArchitecturesCommand,
    ListDistributionsCommand,
    ListImageTypesCommand,
)
from orchestrator.manifest.dtos import (
    ArchitectureListResponse,
    DistributionListResponse,
    DistributionSummary,
    ImageTypeListResponse,
    ImageTypeSummary,
)

logger = logging.getLogger(__name__)


class ListDistributionsUseCase:  # pylint: disable=too-few-public-methods
    """Use case for listing the supported distributions."""

    def __init__(self, registry: DistroRegistry) -> None:
        self._registry = registry

    def execute(self, command: ListDistributionsCommand) -> DistributionListResponse:
        """Return every distribution of the registry, sorted by name."""
        distributions = []
        for name in self._registry.list_distros():
            distribution = self._registry.get_distro(name)
            distributions.append(
                DistributionSummary(
                    name=distribution.name,
                    product=distribution.product,
                    releasever=distribution.releasever,
                    module_platform_id=distribution.module_platform_id,
                )
            )
        return DistributionListResponse(
            correlation_id=str(command.correlation_id),
            distributions=distributions,
        )


class ListArchitecturesUseCase:  # pylint: disable=too-few-public-methods
    """Use case for listing the architectures of a distribution."""

    def __init__(self, registry: DistroRegistry) -> None:
        self._registry = registry

    def execute(self, command: ListArchitecturesCommand) -> ArchitectureListResponse:
        """Return architecture names of the distribution, sorted.

        Raises:
            UnsupportedDistributionError: If the distribution is unknown.
        """
        try:
            distribution = self._registry.get_distro(command.distribution)
        except DistroDomainError as exc:
            exc.correlation_id = str(command.correlation_id)
            raise
        return ArchitectureListResponse(
            correlation_id=str(command.correlation_id),
            distribution=distribution.name,
            architectures=distribution.list_arches(),
        )


class ListImageTypesUseCase:  # pylint: disable=too-few-public-methods
    """Use case for listing the image types of an architecture.

    Only canonical names are listed; aliases are reported per image type.
    """

    def __init__(self, registry: DistroRegistry) -> None:
        self._registry = registry

    def execute(self, command: ListImageTypesCommand) -> ImageTypeListResponse:
        """Return image type summaries sorted by name.

        Raises:
            UnsupportedDistributionError: If the distribution is unknown.
            UnsupportedArchitectureError: If the architecture is unknown.
        """
        try:
            arch = self._registry.get_distro(command.distribution).get_arch(command.architecture)
        except DistroDomainError as exc:
            exc.correlation_id = str(command.correlation_id)
            raise

        image_types = []
        for name in arch.list_image_types():
            image_type = arch.get_image_type(name)
            image_types.append(
                ImageTypeSummary(
                    name=image_type.name,
                    aliases=list(image_type.aliases),
                    filename=image_type.filename,
                    mime_type=image_type.mime_type,
                    boot_mode=image_type.boot_mode.value,
                    default_size=image_type.size(0),
                    rpm_ostree=image_type.rpm_ostree,
                    boot_iso=image_type.boot_iso,
                )
            )
        logger.debug(
            "Listed %d image types for %s/%s",
            len(image_types),
            command.distribution,
            command.architecture,
        )
        return ImageTypeListResponse(
            correlation_id=str(command.correlation_id),
            distribution=command.distribution,
            architecture=arch.name,
            image_types=image_types,
        )
