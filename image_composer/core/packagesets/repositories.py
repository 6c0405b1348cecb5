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

"""Repository interfaces for the Package Set module."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.packagesets.value_objects import PackageSet, PackageSpec, Repository


@dataclass(frozen=True)
class ResolveRequest:
    """One package-set chain to resolve.

    Attributes:
        arch: Target architecture.
        releasever: Distribution release.
        module_platform_id: Module platform of the release.
        chain: Package sets resolved in order, each on top of the previous.
        deadline: time.monotonic() value the resolver must finish by, if any.
    """

    arch: str
    releasever: str
    module_platform_id: str
    chain: Tuple[PackageSet, ...]
    deadline: Optional[float] = field(default=None, compare=False)


class PackageResolver(ABC):
    """Port to the external dependency solver."""

    @abstractmethod
    def resolve(self, request: ResolveRequest) -> List[PackageSpec]:
        """Resolve a package-set chain to concrete packages.

        Args:
            request: Chain with its target platform.

        Returns:
            Resolved packages in installation order.

        Raises:
            PackageResolutionError: If the solver fails.
            ResolutionCancelledError: If the solver call is cancelled.
        """
        ...


class RepositoryConfigRepository(ABC):
    """Source of default repositories per distribution and architecture."""

    @abstractmethod
    def get_repositories(self, distro: str, arch: str) -> List[Repository]:
        """Return the configured repositories.

        Args:
            distro: Distribution name.
            arch: Architecture name.

        Returns:
            Repositories, empty if none are configured.
        """
        ...
