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

"""Configuration loader for Image Composer."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import configparser

RESOLVER_BACKENDS = ("memory", "dnf-json")

DEFAULT_CONFIG_PATH = "/etc/image-composer/image_composer.ini"
DEFAULT_RESOLVER_COMMAND = "/usr/libexec/osbuild-depsolve-dnf"
DEFAULT_CACHE_DIR = "/var/cache/image-composer/rpmmd"
DEFAULT_REPOSITORIES_DIR = "/etc/image-composer/repositories"
DEFAULT_TIMEOUT_SECONDS = 300.0


@dataclass
class ResolverConfig:
    """Package resolver configuration."""
    backend: str = "memory"
    command: str = DEFAULT_RESOLVER_COMMAND
    cache_dir: str = DEFAULT_CACHE_DIR
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass
class RepositoriesConfig:
    """Default repository configuration."""
    config_dir: str = DEFAULT_REPOSITORIES_DIR


@dataclass
class ImageComposerConfig:
    """Image Composer configuration."""
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    repositories: RepositoriesConfig = field(default_factory=RepositoriesConfig)


def load_config(config_path: Optional[str] = None) -> ImageComposerConfig:
    """Load Image Composer configuration from INI file.

    Args:
        config_path: Path to configuration file. If None, uses IMAGE_COMPOSER_CONFIG_PATH
                    environment variable or default path.

    Returns:
        ImageComposerConfig instance.

    Raises:
        FileNotFoundError: If config file not found.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = os.getenv("IMAGE_COMPOSER_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    parser = configparser.ConfigParser()
    parser.read(config_file)

    if not parser.sections():
        raise ValueError(f"Empty configuration file: {config_file}")

    resolver_section = "resolver"
    backend = parser.get(resolver_section, "backend", fallback="memory")
    if backend not in RESOLVER_BACKENDS:
        raise ValueError(
            f"Unknown resolver backend '{backend}', expected one of {', '.join(RESOLVER_BACKENDS)}"
        )

    timeout_seconds = DEFAULT_TIMEOUT_SECONDS
    if parser.has_option(resolver_section, "timeout_seconds"):
        timeout_seconds = parser.getfloat(resolver_section, "timeout_seconds")
    if timeout_seconds <= 0:
        raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

    resolver = ResolverConfig(
        backend=backend,
        command=parser.get(resolver_section, "command", fallback=DEFAULT_RESOLVER_COMMAND),
        cache_dir=parser.get(resolver_section, "cache_dir", fallback=DEFAULT_CACHE_DIR),
        timeout_seconds=timeout_seconds,
    )

    repositories = RepositoriesConfig(
        config_dir=parser.get("repositories", "config_dir", fallback=DEFAULT_REPOSITORIES_DIR),
    )

    return ImageComposerConfig(
        resolver=resolver,
        repositories=repositories,
    )
