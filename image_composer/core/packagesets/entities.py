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

"""Domain entities for the Package Set module."""

from typing import Dict, Iterator, List, Tuple

from core.packagesets.value_objects import PackageSet, Repository


class PackageSetChains:
    """Ordered mapping of pipeline name to its package-set chain.

    Chains are built by appending package sets in pipeline-declaration
    order. Composition never deduplicates; the resolver owns that.
    """

    def __init__(self) -> None:
        """Initialize an empty mapping."""
        self._chains: Dict[str, List[PackageSet]] = {}

    def add(self, pipeline_name: str, package_set: PackageSet) -> None:
        """Append a package set to the chain of a pipeline."""
        self._chains.setdefault(pipeline_name, []).append(package_set)

    def chain(self, pipeline_name: str) -> List[PackageSet]:
        """Return a copy of the chain for a pipeline (empty if none)."""
        return list(self._chains.get(pipeline_name, []))

    def pipelines(self) -> List[str]:
        """Return pipeline names in insertion order."""
        return list(self._chains)

    def flatten(self, pipeline_name: str) -> PackageSet:
        """Concatenate a pipeline's chain into a single package set."""
        merged = PackageSet()
        for package_set in self._chains.get(pipeline_name, []):
            merged = merged.append(package_set)
        return merged

    def bind_repositories(self, repositories: Tuple[Repository, ...]) -> "PackageSetChains":
        """Return a copy whose sets carry the repositories serving each pipeline."""
        bound = PackageSetChains()
        for pipeline_name, chain in self._chains.items():
            pipeline_repos = tuple(
                repo for repo in repositories if repo.applies_to(pipeline_name)
            )
            for package_set in chain:
                bound.add(
                    pipeline_name,
                    package_set.with_repositories(
                        package_set.repositories + pipeline_repos
                    ),
                )
        return bound

    def to_dict(self) -> Dict[str, List[PackageSet]]:
        """Return a plain dictionary copy."""
        return {name: list(chain) for name, chain in self._chains.items()}

    def __iter__(self) -> Iterator[str]:
        return iter(self._chains)

    def __contains__(self, pipeline_name: object) -> bool:
        return pipeline_name in self._chains

    def __len__(self) -> int:
        return len(self._chains)
