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

""" This file contains an in-memory implementation of the package resolver.
    It is used in testing and development."""

import hashlib
from typing import FrozenSet, Iterable, List, Optional

from core.packagesets import (
    PackageResolutionError,
    PackageResolver,
    PackageSpec,
    Repository,
    ResolveRequest,
)

DEFAULT_MIRROR = "https://mirrors.example.com/fedora"


class InMemoryPackageResolver(PackageResolver):
    """Deterministic resolver that answers without a real depsolver.

    Every included spec resolves to exactly one package named after the
    spec, so equal requests always produce equal results. Package groups
    (``@group``) are skipped, excludes anywhere in the chain win over
    includes and duplicates are dropped.
    """

    def __init__(
        self,
        unavailable: Optional[Iterable[str]] = None,
        version: str = "1.0",
        mirror: str = DEFAULT_MIRROR,
    ) -> None:
        self._unavailable: FrozenSet[str] = frozenset(unavailable or ())
        self._version = version
        self._mirror = mirror.rstrip("/")
        self.requests: List[ResolveRequest] = []

    def resolve(self, request: ResolveRequest) -> List[PackageSpec]:
        self.requests.append(request)

        excluded = {spec for package_set in request.chain for spec in package_set.exclude}
        missing = sorted(
            spec
            for package_set in request.chain
            for spec in package_set.include
            if spec in self._unavailable
        )
        if missing:
            raise PackageResolutionError(f"no package matches: {', '.join(missing)}")

        specs: List[PackageSpec] = []
        seen = set()
        for package_set in request.chain:
            repository = self._first_repository(package_set.repositories)
            for spec in package_set.include:
                if spec.startswith("@") or spec in excluded or spec in seen:
                    continue
                seen.add(spec)
                specs.append(self._package_spec(spec, request, repository))
        return specs

    def _package_spec(
        self, name: str, request: ResolveRequest, repository: Optional[Repository]
    ) -> PackageSpec:
        release = f"1.fc{request.releasever}"
        nevra = f"{name}-{self._version}-{release}.{request.arch}"
        base_url = self._mirror
        if repository is not None and repository.baseurls:
            base_url = repository.baseurls[0].rstrip("/")
        digest = hashlib.sha256(nevra.encode("utf-8")).hexdigest()
        return PackageSpec(
            name=name,
            epoch=0,
            version=self._version,
            release=release,
            arch=request.arch,
            remote_location=f"{base_url}/Packages/{name[0].lower()}/{nevra}.rpm",
            checksum=f"sha256:{digest}",
            check_gpg=bool(repository and repository.check_gpg),
            ignore_ssl=bool(repository and repository.ignore_ssl),
        )

    @staticmethod
    def _first_repository(repositories: Iterable[Repository]) -> Optional[Repository]:
        for repository in repositories:
            return repository
        return None
