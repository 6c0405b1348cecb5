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

"""GenerateManifest use case implementation."""

import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, List, Sequence, Tuple

from api.logging_utils import (
    create_compose_log_file,
    log_secure_info,
    remove_compose_logger,
)

from core.disk import DiskDomainError
from core.distro import DistroDomainError, DistroRegistry, ImageType
from core.manifest import Manifest
from core.packagesets import (
    PackageResolutionError,
    PackageResolver,
    PackageSetDomainError,
    PackageSpec,
    Repository,
    RepositoryConfigRepository,
    ResolutionCancelledError,
    ResolveRequest,
)

from orchestrator.manifest.commands import GenerateManifestCommand
from orchestrator.manifest.dtos import ManifestResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300.0
DEFAULT_POLL_INTERVAL_SECONDS = 0.1
DEFAULT_MAX_WORKERS = 4


class GenerateManifestUseCase:
    """Use case for generating a fully resolved image manifest.

    This use case orchestrates manifest generation with the following guarantees:
    - Catalog lookup: distribution, architecture and image type (or alias) must exist
    - Blueprint validation: customizations are checked before any pipeline is built
    - Repository selection: request repositories win over configured defaults
    - Bounded resolution: every package-set chain is resolved under one deadline
    - Cancellation: a set cancel event abandons resolution promptly. Queued
      resolver calls are dropped; calls already running are not interrupted
      and finish by the request deadline they were given
    - Determinism: the same inputs and seed serialize to the same manifest

    Attributes:
        registry: Image type registry.
        resolver: Package resolver port.
        repository_config: Source of default repositories.
        timeout_seconds: Deadline for resolving every chain.
        poll_interval: How often the cancel event is checked while waiting.
        max_workers: Resolver calls running at the same time.
    """

    def __init__(
        self,
        registry: DistroRegistry,
        resolver: PackageResolver,
        repository_config: RepositoryConfigRepository,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:  # pylint: disable=too-many-arguments,too-many-positional-arguments
        """Initialize use case with registry, resolver and repository dependencies.

        Args:
            registry: Image type registry.
            resolver: Package resolver implementation.
            repository_config: Default repository source.
            timeout_seconds: Resolution deadline in seconds.
            poll_interval: Cancel-event polling interval in seconds.
            max_workers: Size of the resolver thread pool.
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self._registry = registry
        self._resolver = resolver
        self._repository_config = repository_config
        self._timeout_seconds = timeout_seconds
        self._poll_interval = poll_interval
        self._max_workers = max_workers

    def execute(self, command: GenerateManifestCommand) -> ManifestResponse:
        """Generate the manifest.

        Args:
            command: GenerateManifest command with the image request.

        Returns:
            ManifestResponse DTO with the serialized manifest.

        Raises:
            UnsupportedDistributionError: If the distribution is unknown.
            UnsupportedArchitectureError: If the architecture is unknown.
            UnsupportedImageTypeError: If the image type is unknown.
            DistroDomainError: If the blueprint or options are rejected.
            DiskDomainError: If custom mountpoints are rejected.
            PackageResolutionError: If the resolver fails.
            ResolutionCancelledError: If resolution times out or is cancelled.
        """
        correlation_id = str(command.correlation_id)
        create_compose_log_file(correlation_id)
        try:
            log_secure_info(
                "info",
                f"Manifest requested: distro={command.distribution}, "
                f"arch={command.architecture}, image_type={command.image_type}",
                correlation_id,
                compose_id=correlation_id,
            )
            image_type = self._get_image_type(command)
            repositories = self._select_repositories(command)
            manifest, warnings = self._build_manifest(command, image_type, repositories)
            package_specs = self._resolve(command, image_type, manifest)
            serialized = manifest.serialize(package_specs)

            log_secure_info(
                "info",
                f"Manifest generated: image_type={image_type.name}, "
                f"pipelines={','.join(manifest.pipeline_names())}, "
                f"packages={sum(len(specs) for specs in package_specs.values())}, "
                f"warnings={len(warnings)}",
                correlation_id,
                compose_id=correlation_id,
                end_section=True,
            )
            return self._to_response(command, image_type, manifest, serialized, warnings)
        finally:
            remove_compose_logger(correlation_id)

    def _get_image_type(self, command: GenerateManifestCommand) -> ImageType:
        """Look up the image type, tagging lookup errors with the correlation ID."""
        try:
            return self._registry.get_image_type(
                command.distribution, command.architecture, command.image_type
            )
        except DistroDomainError as exc:
            exc.correlation_id = str(command.correlation_id)
            log_secure_info(
                "warning",
                f"Image type lookup failed: {exc.message}",
                str(command.correlation_id),
                compose_id=str(command.correlation_id),
                end_section=True,
            )
            raise

    def _select_repositories(self, command: GenerateManifestCommand) -> Tuple[Repository, ...]:
        """Return request repositories, or the configured defaults."""
        if command.repositories:
            return tuple(command.repositories)
        repositories = tuple(
            self._repository_config.get_repositories(command.distribution, command.architecture)
        )
        if not repositories:
            logger.warning(
                "No repositories configured for %s/%s",
                command.distribution,
                command.architecture,
            )
        return repositories

    def _build_manifest(
        self,
        command: GenerateManifestCommand,
        image_type: ImageType,
        repositories: Sequence[Repository],
    ) -> Tuple[Manifest, List[str]]:
        """Validate the blueprint and assemble the unresolved manifest."""
        correlation_id = str(command.correlation_id)
        try:
            return image_type.manifest(
                command.blueprint,
                command.options,
                repositories,
                command.seed,
                correlation_id,
            )
        except (DistroDomainError, DiskDomainError) as exc:
            log_secure_info(
                "warning",
                f"Manifest rejected: image_type={image_type.name}, reason={exc.message}",
                correlation_id,
                compose_id=correlation_id,
                end_section=True,
            )
            raise

    def _resolve(
        self,
        command: GenerateManifestCommand,
        image_type: ImageType,
        manifest: Manifest,
    ) -> Dict[str, List[PackageSpec]]:
        """Resolve every package-set chain of the manifest under one deadline.

        Raises:
            PackageResolutionError: If any resolver call fails.
            ResolutionCancelledError: On timeout or cancellation.
        """
        correlation_id = str(command.correlation_id)
        distribution = image_type.arch.distribution
        chains = manifest.get_package_set_chains()
        if not chains:
            return {}

        deadline = time.monotonic() + self._timeout_seconds
        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(chains)),
            thread_name_prefix="resolver",
        )
        futures: Dict[Future, str] = {}
        try:
            for pipeline_name, chain in chains.items():
                request = ResolveRequest(
                    arch=image_type.arch.name,
                    releasever=distribution.releasever,
                    module_platform_id=distribution.module_platform_id,
                    chain=tuple(chain),
                    deadline=deadline,
                )
                futures[executor.submit(self._resolver.resolve, request)] = pipeline_name

            results: Dict[str, List[PackageSpec]] = {}
            pending = set(futures)
            while pending:
                self._check_cancelled(command, deadline)
                remaining = deadline - time.monotonic()
                done, pending = wait(
                    pending,
                    timeout=max(0.0, min(self._poll_interval, remaining)),
                    return_when=FIRST_COMPLETED,
                )
                for future in done:
                    pipeline_name = futures[future]
                    results[pipeline_name] = self._future_result(
                        future, pipeline_name, correlation_id
                    )
            return results
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _check_cancelled(self, command: GenerateManifestCommand, deadline: float) -> None:
        """Raise ResolutionCancelledError if cancelled or past the deadline."""
        correlation_id = str(command.correlation_id)
        if command.cancel_event is not None and command.cancel_event.is_set():
            log_secure_info(
                "warning",
                "Package resolution cancelled",
                correlation_id,
                compose_id=correlation_id,
                end_section=True,
            )
            raise ResolutionCancelledError("package resolution was cancelled", correlation_id)
        if time.monotonic() >= deadline:
            log_secure_info(
                "warning",
                f"Package resolution timed out after {self._timeout_seconds}s",
                correlation_id,
                compose_id=correlation_id,
                end_section=True,
            )
            raise ResolutionCancelledError(
                f"package resolution timed out after {self._timeout_seconds} seconds",
                correlation_id,
            )

    @staticmethod
    def _future_result(future: Future, pipeline_name: str, correlation_id: str) -> List[PackageSpec]:
        """Return a resolver result, normalizing its failure to a domain error."""
        try:
            return list(future.result())
        except PackageSetDomainError as exc:
            exc.correlation_id = correlation_id
            log_secure_info(
                "error",
                f"Package resolution failed: pipeline={pipeline_name}, reason={exc.message}",
                correlation_id,
                compose_id=correlation_id,
                end_section=True,
            )
            raise
        except Exception as exc:  # pylint: disable=broad-except
            log_secure_info(
                "error",
                f"Package resolver raised unexpectedly: pipeline={pipeline_name}",
                correlation_id,
                compose_id=correlation_id,
                exc_info=True,
                end_section=True,
            )
            raise PackageResolutionError(
                f"failed to resolve package set of pipeline {pipeline_name}: {exc}",
                correlation_id,
                cause=exc,
            ) from exc

    @staticmethod
    def _to_response(
        command: GenerateManifestCommand,
        image_type: ImageType,
        manifest: Manifest,
        serialized: dict,
        warnings: List[str],
    ) -> ManifestResponse:
        """Map the serialized manifest to the response DTO."""
        return ManifestResponse(
            correlation_id=str(command.correlation_id),
            distribution=command.distribution,
            architecture=image_type.arch.name,
            image_type=image_type.name,
            filename=image_type.filename,
            mime_type=image_type.mime_type,
            manifest=serialized,
            pipelines=manifest.pipeline_names(),
            warnings=list(warnings),
        )
