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

"""Package resolver backed by the osbuild-depsolve-dnf helper.

The helper reads one JSON request on stdin and writes one JSON document
on stdout: the resolved packages on success, or an error object with
``kind`` and ``reason`` when it exits non-zero.
"""

import json
import logging
import subprocess
import time
from typing import Any, Dict, List, Mapping

from api.logging_utils import log_secure_info

from core.packagesets import (
    PackageResolutionError,
    PackageResolver,
    PackageSpec,
    Repository,
    ResolutionCancelledError,
    ResolveRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "/usr/libexec/osbuild-depsolve-dnf"
DEFAULT_TIMEOUT_SECONDS = 300.0


class DnfJsonResolver(PackageResolver):
    """Resolve package-set chains by running the depsolve helper.

    Each set of the chain becomes one transaction; the helper resolves
    every transaction on top of the previous ones.
    """

    def __init__(
        self,
        command: str = DEFAULT_COMMAND,
        cache_dir: str = "",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize resolver.

        Args:
            command: Path of the depsolve helper.
            cache_dir: Repository metadata cache directory.
            timeout_seconds: Per-call timeout of the helper process.
        """
        self._command = command
        self._cache_dir = cache_dir
        self._timeout_seconds = timeout_seconds

    def build_request(self, request: ResolveRequest) -> Dict[str, Any]:
        """Return the helper's JSON request for a chain."""
        repositories: Dict[str, Repository] = {}
        transactions = []
        for package_set in request.chain:
            for repository in package_set.repositories:
                repositories.setdefault(repository.id, repository)
            transactions.append(
                {
                    "package-specs": list(package_set.include),
                    "exclude-specs": list(package_set.exclude),
                    "repo-ids": [repository.id for repository in package_set.repositories],
                    "install_weak_deps": True,
                }
            )
        return {
            "command": "depsolve",
            "arch": request.arch,
            "module_platform_id": request.module_platform_id,
            "releasever": request.releasever,
            "cachedir": self._cache_dir,
            "arguments": {
                "repos": [repository.to_dict() for repository in repositories.values()],
                "transactions": transactions,
            },
        }

    def _call_timeout(self, request: ResolveRequest) -> float:
        """Return the helper timeout, capped by the request deadline.

        Raises:
            ResolutionCancelledError: If the deadline has already passed.
        """
        if request.deadline is None:
            return self._timeout_seconds
        remaining = request.deadline - time.monotonic()
        if remaining <= 0:
            raise ResolutionCancelledError("depsolve skipped: resolution deadline passed")
        return min(self._timeout_seconds, remaining)

    def resolve(self, request: ResolveRequest) -> List[PackageSpec]:
        """Run the helper for one chain.

        The helper is killed once the request deadline passes, so an
        abandoned resolution does not leave it running.

        Raises:
            ResolutionCancelledError: If the helper exceeds its timeout.
            PackageResolutionError: If the helper cannot be run, fails, or
                returns malformed output.
        """
        timeout = self._call_timeout(request)
        payload = self.build_request(request)
        log_secure_info(
            "debug",
            f"Running depsolve: arch={request.arch}, releasever={request.releasever}, "
            f"transactions={len(payload['arguments']['transactions'])}",
        )
        try:
            result = subprocess.run(
                [self._command],
                input=json.dumps(payload),
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
                shell=False,
            )
        except subprocess.TimeoutExpired as exc:
            log_secure_info("error", f"Depsolve timed out after {timeout:g}s")
            raise ResolutionCancelledError(f"depsolve timed out after {timeout:g} seconds") from exc
        except OSError as exc:
            raise PackageResolutionError(
                f"failed to run {self._command}: {exc}", cause=exc
            ) from exc

        if result.returncode != 0:
            raise PackageResolutionError(self._error_message(result))

        try:
            output = json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise PackageResolutionError(
                f"invalid JSON from depsolve: {exc}", cause=exc
            ) from exc

        repositories = {
            repository.id: repository
            for package_set in request.chain
            for repository in package_set.repositories
        }
        return self._parse_packages(output, repositories)

    @staticmethod
    def _error_message(result: subprocess.CompletedProcess) -> str:
        try:
            error = json.loads(result.stdout)
            return f"depsolve failed: {error['kind']}: {error['reason']}"
        except (json.JSONDecodeError, KeyError, TypeError):
            stderr = (result.stderr or "").strip()
            return f"depsolve exited with code {result.returncode}: {stderr}"

    @staticmethod
    def _parse_packages(
        output: Mapping[str, Any], repositories: Mapping[str, Repository]
    ) -> List[PackageSpec]:
        packages = output.get("packages") if isinstance(output, Mapping) else None
        if not isinstance(packages, list):
            raise PackageResolutionError("depsolve output has no package list")

        specs = []
        for package in packages:
            try:
                repository = repositories.get(package.get("repo_id", ""))
                specs.append(
                    PackageSpec(
                        name=package["name"],
                        epoch=int(package.get("epoch") or 0),
                        version=package["version"],
                        release=package["release"],
                        arch=package["arch"],
                        remote_location=package["remote_location"],
                        checksum=package["checksum"],
                        check_gpg=bool(package.get("check_gpg", repository and repository.check_gpg)),
                        ignore_ssl=bool(repository and repository.ignore_ssl),
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise PackageResolutionError(
                    f"malformed package in depsolve output: {exc}", cause=exc
                ) from exc
        logger.debug("Depsolve returned %d packages", len(specs))
        return specs
