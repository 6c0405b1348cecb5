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

"""Dependency Injector containers for the Image Composer API."""
# pylint: disable=c-extension-no-member

import logging
import os

from dependency_injector import containers, providers

from common.config import ImageComposerConfig, load_config
from core.distro import get_registry
from infra.id_generator import UUIDv4Generator
from infra.repositories import FileRepositoryConfigStore, InMemoryRepositoryConfigStore
from infra.resolvers import DnfJsonResolver, InMemoryPackageResolver
from orchestrator.manifest.use_cases import (
    GenerateManifestUseCase,
    ListArchitecturesUseCase,
    ListDistributionsUseCase,
    ListImageTypesUseCase,
)

logger = logging.getLogger(__name__)


def _load_config() -> ImageComposerConfig:
    """Load configuration, falling back to defaults.

    Returns:
        ImageComposerConfig from IMAGE_COMPOSER_CONFIG_PATH, or the defaults
        if the file is missing or invalid.
    """
    try:
        return load_config()
    except (FileNotFoundError, ValueError) as exc:
        logger.warning("Using default configuration: %s", exc)
        return ImageComposerConfig()


def _create_resolver(config: ImageComposerConfig):
    """Factory function to create the package resolver based on configuration.

    Returns:
        DnfJsonResolver or InMemoryPackageResolver based on config.
    """
    if config.resolver.backend == "memory":
        return InMemoryPackageResolver()
    return DnfJsonResolver(
        command=config.resolver.command,
        cache_dir=config.resolver.cache_dir,
        timeout_seconds=config.resolver.timeout_seconds,
    )


def _timeout_seconds(config: ImageComposerConfig) -> float:
    return config.resolver.timeout_seconds


def _repositories_dir(config: ImageComposerConfig) -> str:
    return config.repositories.config_dir


_WIRED_MODULES = [
    "api.dependencies",
    "api.distributions.routes",
    "api.distributions.dependencies",
    "api.manifests.routes",
    "api.manifests.dependencies",
]


class DevContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Development profile container.

    Uses the in-memory package resolver and repository store for fast
    development and testing. No depsolve helper or repository files required.

    Activated when ENV=dev (default).
    """

    wiring_config = containers.WiringConfiguration(modules=_WIRED_MODULES)

    config = providers.Singleton(_load_config)
    uuid_generator = providers.Singleton(UUIDv4Generator)

    # --- Catalog ---
    registry = providers.Singleton(get_registry)

    # --- Resolution ---
    package_resolver = providers.Singleton(InMemoryPackageResolver)
    repository_config = providers.Singleton(InMemoryRepositoryConfigStore)

    # --- Use cases ---
    generate_manifest_use_case = providers.Factory(
        GenerateManifestUseCase,
        registry=registry,
        resolver=package_resolver,
        repository_config=repository_config,
        timeout_seconds=providers.Callable(_timeout_seconds, config),
    )

    list_distributions_use_case = providers.Factory(
        ListDistributionsUseCase,
        registry=registry,
    )

    list_architectures_use_case = providers.Factory(
        ListArchitecturesUseCase,
        registry=registry,
    )

    list_image_types_use_case = providers.Factory(
        ListImageTypesUseCase,
        registry=registry,
    )


class ProdContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Production profile container.

    Resolves packages through the configured backend (osbuild-depsolve-dnf
    by default) and reads default repositories from the configured
    directory.

    Activated when ENV=prod.
    """

    wiring_config = containers.WiringConfiguration(modules=_WIRED_MODULES)

    config = providers.Singleton(_load_config)
    uuid_generator = providers.Singleton(UUIDv4Generator)

    # --- Catalog ---
    registry = providers.Singleton(get_registry)

    # --- Resolution ---
    package_resolver = providers.Singleton(_create_resolver, config=config)
    repository_config = providers.Singleton(
        FileRepositoryConfigStore,
        config_dir=providers.Callable(_repositories_dir, config),
    )

    # --- Use cases ---
    generate_manifest_use_case = providers.Factory(
        GenerateManifestUseCase,
        registry=registry,
        resolver=package_resolver,
        repository_config=repository_config,
        timeout_seconds=providers.Callable(_timeout_seconds, config),
    )

    list_distributions_use_case = providers.Factory(
        ListDistributionsUseCase,
        registry=registry,
    )

    list_architectures_use_case = providers.Factory(
        ListArchitecturesUseCase,
        registry=registry,
    )

    list_image_types_use_case = providers.Factory(
        ListImageTypesUseCase,
        registry=registry,
    )


def get_container_class():
    """Select container class based on ENV environment variable.

    Returns:
        DevContainer if ENV=dev (default)
        ProdContainer if ENV=prod

    Usage:
        # Set environment variable before running
        ENV=prod uvicorn main:app

        # Or set in code before importing
        os.environ['ENV'] = 'prod'
    """
    env = os.getenv("ENV", "dev").lower()

    if env == "prod":
        return ProdContainer

    return DevContainer


Container = get_container_class()

# Singleton container instance shared across app and dependencies
container = Container()

__all__ = ["Container", "container", "get_container_class"]
