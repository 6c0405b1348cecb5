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

"""Package Set domain module."""

from core.packagesets.entities import PackageSetChains
from core.packagesets.exceptions import (
    PackageResolutionError,
    PackageSetDomainError,
    ResolutionCancelledError,
)
from core.packagesets.repositories import (
    PackageResolver,
    RepositoryConfigRepository,
    ResolveRequest,
)
from core.packagesets.value_objects import PackageSet, PackageSpec, Repository

__all__ = [
    "PackageSetChains",
    "PackageResolutionError",
    "PackageSetDomainError",
    "ResolutionCancelledError",
    "PackageResolver",
    "RepositoryConfigRepository",
    "ResolveRequest",
    "PackageSet",
    "PackageSpec",
    "Repository",
]
