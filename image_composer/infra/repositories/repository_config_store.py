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

"""Default repository configuration sources.

Repository files are named after the distribution (``fedora-38.json``)
and map each architecture to a list of repositories::

    {
      "x86_64": [
        {"id": "fedora", "metalink": "https://...", "check_gpg": true}
      ]
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from core.packagesets import Repository, RepositoryConfigRepository

logger = logging.getLogger(__name__)


class FileRepositoryConfigStore(RepositoryConfigRepository):
    """Reads default repositories from JSON files in a directory."""

    def __init__(self, config_dir: str) -> None:
        """Initialize store with its directory.

        Args:
            config_dir: Directory holding ``<distro>.json`` files.
        """
        self._config_dir = Path(config_dir)

    def get_repositories(self, distro: str, arch: str) -> List[Repository]:
        """Return the repositories configured for a distribution and arch.

        Raises:
            ValueError: If the distribution file is malformed.
        """
        config_file = self._config_dir / f"{Path(distro).name}.json"
        if not config_file.is_file():
            logger.debug("No repository file for %s in %s", distro, self._config_dir)
            return []

        try:
            with open(config_file, "r", encoding="utf-8") as repo_file:
                data = json.load(repo_file)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in repository file {config_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError(f"Repository file {config_file} must map architectures to lists")

        try:
            return [Repository.from_dict(entry) for entry in data.get(arch, [])]
        except (AttributeError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid repository in {config_file}: {exc}") from exc

    def is_available(self) -> bool:
        """Check if the repository directory exists."""
        return self._config_dir.is_dir()


class InMemoryRepositoryConfigStore(RepositoryConfigRepository):
    def __init__(
        self, repositories: Optional[Mapping[str, Mapping[str, Sequence[Repository]]]] = None
    ) -> None:
        self._repositories: Dict[str, Dict[str, List[Repository]]] = {
            distro: {arch: list(repos) for arch, repos in arches.items()}
            for distro, arches in (repositories or {}).items()
        }

    def add(self, distro: str, arch: str, repository: Repository) -> None:
        self._repositories.setdefault(distro, {}).setdefault(arch, []).append(repository)

    def get_repositories(self, distro: str, arch: str) -> List[Repository]:
        return list(self._repositories.get(distro, {}).get(arch, []))
