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

"""Value objects for the Package Set domain.

All value objects are immutable and defined by their values, not identity.
"""

import re
from dataclasses import dataclass, replace
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class Repository:
    """An RPM repository that package sets are resolved against.

    Attributes:
        id: Repository identifier, unique within one request.
        baseurls: Base URLs; mutually usable with metalink/mirrorlist.
        metalink: Metalink URL.
        mirrorlist: Mirrorlist URL.
        gpg_keys: ASCII-armoured keys or key URLs.
        check_gpg: Verify package signatures.
        check_repo_gpg: Verify repository metadata signatures.
        ignore_ssl: Skip TLS verification.
        package_sets: Pipelines this repository is restricted to;
            empty means every pipeline.
    """

    id: str
    baseurls: Tuple[str, ...] = ()
    metalink: Optional[str] = None
    mirrorlist: Optional[str] = None
    gpg_keys: Tuple[str, ...] = ()
    check_gpg: bool = False
    check_repo_gpg: bool = False
    ignore_ssl: bool = False
    package_sets: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate repository source."""
        if not self.id or not self.id.strip():
            raise ValueError("Repository id cannot be empty")
        if not (self.baseurls or self.metalink or self.mirrorlist):
            raise ValueError(
                f"Repository {self.id} requires a baseurl, metalink or mirrorlist"
            )

    def applies_to(self, pipeline_name: str) -> bool:
        """Return True if the repository serves the given pipeline."""
        return not self.package_sets or pipeline_name in self.package_sets

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Repository":
        """Build a repository from its API or configuration file form.

        Accepts ``baseurl`` as a string or a list, and ``gpgkey`` or
        ``gpgkeys``.
        """
        baseurls = data.get("baseurls", data.get("baseurl", ()))
        if isinstance(baseurls, str):
            baseurls = (baseurls,)
        gpg_keys = data.get("gpgkeys", data.get("gpgkey", ()))
        if isinstance(gpg_keys, str):
            gpg_keys = (gpg_keys,)
        return cls(
            id=data.get("id") or data.get("name", ""),
            baseurls=tuple(baseurls or ()),
            metalink=data.get("metalink") or None,
            mirrorlist=data.get("mirrorlist") or None,
            gpg_keys=tuple(gpg_keys or ()),
            check_gpg=bool(data.get("check_gpg", data.get("gpgcheck", False))),
            check_repo_gpg=bool(data.get("check_repo_gpg", data.get("repo_gpgcheck", False))),
            ignore_ssl=bool(data.get("ignore_ssl", False)),
            package_sets=tuple(data.get("package_sets", ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the depsolver request format."""
        repo: Dict[str, Any] = {"id": self.id}
        if self.baseurls:
            repo["baseurl"] = list(self.baseurls)
        if self.metalink:
            repo["metalink"] = self.metalink
        if self.mirrorlist:
            repo["mirrorlist"] = self.mirrorlist
        if self.gpg_keys:
            repo["gpgkeys"] = list(self.gpg_keys)
        repo["gpgcheck"] = self.check_gpg
        repo["repo_gpgcheck"] = self.check_repo_gpg
        repo["sslverify"] = not self.ignore_ssl
        return repo


@dataclass(frozen=True)
class PackageSet:
    """Include and exclude rules for one step of a package-set chain.

    Attributes:
        include: Package specs to install.
        exclude: Package specs to keep out of the transaction.
        repositories: Repositories this set is resolved against.
    """

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()
    repositories: Tuple[Repository, ...] = ()

    def append(self, other: "PackageSet") -> "PackageSet":
        """Concatenate another set onto this one, keeping order and duplicates."""
        repositories = self.repositories + tuple(
            repo for repo in other.repositories if repo not in self.repositories
        )
        return PackageSet(
            include=self.include + other.include,
            exclude=self.exclude + other.exclude,
            repositories=repositories,
        )

    def with_repositories(self, repositories: Tuple[Repository, ...]) -> "PackageSet":
        """Return a copy bound to the given repositories."""
        return replace(self, repositories=tuple(repositories))

    def is_empty(self) -> bool:
        """Return True if nothing is included."""
        return not self.include

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging and API responses."""
        return {
            "include": list(self.include),
            "exclude": list(self.exclude),
            "repositories": [repo.id for repo in self.repositories],
        }


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class PackageSpec:
    """A concrete package returned by the resolver.

    Attributes:
        name: Package name.
        epoch: Epoch, 0 when unset.
        version: Upstream version.
        release: Distribution release.
        arch: Package architecture.
        remote_location: URL the RPM is downloaded from.
        checksum: <algorithm>:<hex digest>.
        check_gpg: Verify the signature when installing.
        ignore_ssl: Skip TLS verification when downloading.
    """

    name: str
    epoch: int
    version: str
    release: str
    arch: str
    remote_location: str
    checksum: str
    check_gpg: bool = False
    ignore_ssl: bool = False

    CHECKSUM_PATTERN: ClassVar[str] = r"^(sha1|sha256|sha384|sha512):[0-9a-f]+$"

    def __post_init__(self) -> None:
        """Validate checksum format."""
        if not self.name:
            raise ValueError("Package spec name cannot be empty")
        if not re.match(self.CHECKSUM_PATTERN, self.checksum):
            raise ValueError(
                f"Invalid checksum for package {self.name}: {self.checksum}"
            )

    def nevra(self) -> str:
        """Return name-[epoch:]version-release.arch."""
        evr = f"{self.version}-{self.release}"
        if self.epoch:
            evr = f"{self.epoch}:{evr}"
        return f"{self.name}-{evr}.{self.arch}"

    def __str__(self) -> str:
        """Return string representation."""
        return self.nevra()
