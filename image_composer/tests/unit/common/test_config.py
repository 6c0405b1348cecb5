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

"""Unit tests for the configuration loader."""

import pytest

from common.config import (
    DEFAULT_REPOSITORIES_DIR,
    DEFAULT_RESOLVER_COMMAND,
    ImageComposerConfig,
    load_config,
)


def _write(tmp_path, content):
    config_file = tmp_path / "image_composer.ini"
    config_file.write_text(content, encoding="utf-8")
    return str(config_file)


class TestLoadConfig:
    """Test cases for load_config."""

    def test_full_config(self, tmp_path):
        """Test that every option is read."""
        path = _write(
            tmp_path,
            "[resolver]\n"
            "backend = dnf-json\n"
            "command = /opt/depsolve\n"
            "cache_dir = /tmp/rpmmd\n"
            "timeout_seconds = 42.5\n"
            "\n"
            "[repositories]\n"
            "config_dir = /srv/repos\n",
        )

        config = load_config(path)

        assert config.resolver.backend == "dnf-json"
        assert config.resolver.command == "/opt/depsolve"
        assert config.resolver.cache_dir == "/tmp/rpmmd"
        assert config.resolver.timeout_seconds == 42.5
        assert config.repositories.config_dir == "/srv/repos"

    def test_defaults_for_missing_options(self, tmp_path):
        """Test fallbacks when only a section header is present."""
        config = load_config(_write(tmp_path, "[resolver]\n"))

        assert config.resolver.backend == "memory"
        assert config.resolver.command == DEFAULT_RESOLVER_COMMAND
        assert config.repositories.config_dir == DEFAULT_REPOSITORIES_DIR

    def test_path_from_environment(self, tmp_path, monkeypatch):
        """Test that IMAGE_COMPOSER_CONFIG_PATH is honoured."""
        path = _write(tmp_path, "[repositories]\nconfig_dir = /from/env\n")
        monkeypatch.setenv("IMAGE_COMPOSER_CONFIG_PATH", path)

        assert load_config().repositories.config_dir == "/from/env"

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(str(tmp_path / "absent.ini"))

    def test_empty_file(self, tmp_path):
        """Test that a file without sections is rejected."""
        with pytest.raises(ValueError, match="Empty configuration file"):
            load_config(_write(tmp_path, ""))

    def test_unknown_backend(self, tmp_path):
        """Test that unknown resolver backends are rejected."""
        with pytest.raises(ValueError, match="Unknown resolver backend 'yum'"):
            load_config(_write(tmp_path, "[resolver]\nbackend = yum\n"))

    @pytest.mark.parametrize("timeout", ["0", "-5"])
    def test_non_positive_timeout(self, tmp_path, timeout):
        """Test that the resolution deadline must be positive."""
        with pytest.raises(ValueError, match="timeout_seconds must be positive"):
            load_config(_write(tmp_path, f"[resolver]\ntimeout_seconds = {timeout}\n"))


class TestImageComposerConfig:  # pylint: disable=too-few-public-methods
    """Test cases for the default configuration."""

    def test_defaults(self):
        """Test that the defaults select the in-memory resolver."""
        config = ImageComposerConfig()
        assert config.resolver.backend == "memory"
        assert config.resolver.timeout_seconds == 300.0
