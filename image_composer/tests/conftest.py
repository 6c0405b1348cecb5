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

"""Shared pytest fixtures for Image Composer tests."""

# pylint: disable=redefined-outer-name

import pytest

from core.blueprint import Blueprint
from core.distro import DistroRegistry, ImageOptions, OSTreeImageOptions, get_registry
from core.manifest import CorrelationId
from core.packagesets import Repository

OSTREE_URL = "https://ostree.example.com/repo"


@pytest.fixture(autouse=True)
def compose_log_dir(tmp_path, monkeypatch):
    """Route per-compose log files to a temporary directory."""
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("IMAGE_COMPOSER_LOG_DIR", str(log_dir))
    return log_dir


@pytest.fixture
def registry() -> DistroRegistry:
    """Process-wide image type registry."""
    return get_registry()


@pytest.fixture
def correlation_id() -> CorrelationId:
    """Fixed correlation ID for tests."""
    return CorrelationId("test-correlation-123")


@pytest.fixture
def empty_blueprint() -> Blueprint:
    """Blueprint without packages or customizations."""
    return Blueprint()


@pytest.fixture
def ostree_options() -> ImageOptions:
    """Image options pointing at an OSTree commit repository."""
    return ImageOptions(ostree=OSTreeImageOptions(url=OSTREE_URL))


@pytest.fixture
def fedora_repository() -> Repository:
    """A GPG-checked repository serving every pipeline."""
    return Repository(
        id="fedora",
        baseurls=("https://mirror.example.com/fedora/38/x86_64/os",),
        check_gpg=True,
    )
