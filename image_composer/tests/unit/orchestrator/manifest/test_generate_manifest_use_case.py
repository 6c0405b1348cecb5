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

"""Unit tests for GenerateManifestUseCase."""

# pylint: disable=redefined-outer-name,protected-access

import threading
import time

import pytest

from core.blueprint import Blueprint, Customizations, FilesystemCustomization, Package
from core.disk import MountpointError
from core.distro import (
    ImageOptions,
    OSTreeImageOptions,
    UnsupportedArchitectureError,
    UnsupportedCustomizationError,
    UnsupportedDistributionError,
    UnsupportedImageTypeError,
    get_registry,
)
from core.manifest import CorrelationId
from core.packagesets import (
    PackageResolutionError,
    PackageResolver,
    Repository,
    ResolutionCancelledError,
)
from infra.repositories import InMemoryRepositoryConfigStore
from infra.resolvers import InMemoryPackageResolver
from orchestrator.manifest.commands import GenerateManifestCommand
from orchestrator.manifest.use_cases import GenerateManifestUseCase

CONFIGURED_REPO = Repository(id="configured", baseurls=("https://configured.example.com/os",))
REQUEST_REPO = Repository(id="request", baseurls=("https://request.example.com/os",))


class BlockingResolver(PackageResolver):
    """Resolver that blocks until released."""

    def __init__(self):
        self.release = threading.Event()

    def resolve(self, request):
        self.release.wait(timeout=5)
        return []


class RaisingResolver(PackageResolver):
    """Resolver that raises the given exception."""

    def __init__(self, exc):
        self.exc = exc

    def resolve(self, request):
        raise self.exc


def _command(**overrides):
    values = {
        "correlation_id": CorrelationId("corr-generate-1"),
        "distribution": "fedora-38",
        "architecture": "x86_64",
        "image_type": "qcow2",
        "blueprint": Blueprint(),
        "options": ImageOptions(),
    }
    values.update(overrides)
    return GenerateManifestCommand(**values)


@pytest.fixture
def resolver():
    """In-memory resolver recording its requests."""
    return InMemoryPackageResolver()


@pytest.fixture
def repository_config():
    """Repository store with one configured repository for fedora-38/x86_64."""
    return InMemoryRepositoryConfigStore({"fedora-38": {"x86_64": [CONFIGURED_REPO]}})


@pytest.fixture
def use_case(resolver, repository_config):
    """Use case wired with in-memory adapters."""
    return GenerateManifestUseCase(
        registry=get_registry(),
        resolver=resolver,
        repository_config=repository_config,
        timeout_seconds=5,
        poll_interval=0.01,
    )


class TestGenerateManifestSuccess:
    """Successful manifest generation."""

    def test_returns_serialized_manifest(self, use_case):
        """Test response fields of a qcow2 manifest."""
        result = use_case.execute(_command())

        assert result.correlation_id == "corr-generate-1"
        assert result.distribution == "fedora-38"
        assert result.architecture == "x86_64"
        assert result.image_type == "qcow2"
        assert result.filename == "disk.qcow2"
        assert result.pipelines == ["build", "os", "image", "qcow2"]
        assert result.warnings == []
        assert result.manifest["version"] == "2"
        assert result.manifest["sources"]["org.osbuild.curl"]["items"]

    def test_every_rpm_stage_filled(self, use_case):
        """Test that rpm stages reference resolved packages."""
        result = use_case.execute(_command(blueprint=Blueprint(packages=(Package("tmux"),))))
        curl_items = result.manifest["sources"]["org.osbuild.curl"]["items"]
        for pipeline in result.manifest["pipelines"]:
            for stage in pipeline["stages"]:
                if stage["type"] == "org.osbuild.rpm":
                    references = stage["inputs"]["packages"]["references"]
                    assert references
                    assert all(ref["id"] in curl_items for ref in references)

    def test_alias_resolves_to_canonical_name(self, use_case):
        """Test that an alias lookup reports the canonical name."""
        command = _command(
            image_type="fedora-iot-commit",
            options=ImageOptions(ostree=OSTreeImageOptions(url="https://ostree.example.com")),
        )
        result = use_case.execute(command)
        assert result.image_type == "iot-commit"

    def test_warnings_are_returned(self, use_case):
        """Test that validator warnings reach the response."""
        result = use_case.execute(_command(image_type="container", options=ImageOptions(size=1024)))
        assert result.warnings == ['image size is ignored for image type "container"']

    def test_same_seed_same_manifest(self, use_case):
        """Test determinism for equal inputs."""
        first = use_case.execute(_command(seed=7))
        second = use_case.execute(_command(seed=7))
        assert first.manifest == second.manifest

    def test_compose_log_written(self, use_case, compose_log_dir):
        """Test that the request is logged to its compose log file."""
        use_case.execute(_command())
        log_file = compose_log_dir / "corr-generate-1.log"
        assert log_file.is_file()
        assert "Manifest generated" in log_file.read_text(encoding="utf-8")


class TestRepositorySelection:
    """Request and configured repository selection."""

    def test_configured_repositories_by_default(self, use_case, resolver):
        """Test that configured repositories are used when the request has none."""
        use_case.execute(_command())
        for request in resolver.requests:
            assert request.chain[0].repositories == (CONFIGURED_REPO,)

    def test_request_repositories_win(self, use_case, resolver):
        """Test that request repositories replace the configured ones."""
        use_case.execute(_command(repositories=(REQUEST_REPO,)))
        for request in resolver.requests:
            assert request.chain[0].repositories == (REQUEST_REPO,)

    def test_resolve_request_platform(self, use_case, resolver):
        """Test the platform fields passed to the resolver."""
        use_case.execute(_command())
        assert {request.releasever for request in resolver.requests} == {"38"}
        assert {request.module_platform_id for request in resolver.requests} == {"platform:f38"}
        assert len(resolver.requests) == 2

    def test_resolve_requests_carry_deadline(self, use_case, resolver):
        """Test that every resolver call gets the shared resolution deadline."""
        before = time.monotonic()
        use_case.execute(_command())
        deadlines = {request.deadline for request in resolver.requests}
        assert len(deadlines) == 1
        deadline = deadlines.pop()
        assert before + 5 <= deadline <= time.monotonic() + 5


class TestGenerateManifestLookupErrors:
    """Catalog lookup failures."""

    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"distribution": "fedora-1"}, UnsupportedDistributionError),
            ({"architecture": "mips"}, UnsupportedArchitectureError),
            ({"image_type": "floppy"}, UnsupportedImageTypeError),
        ],
    )
    def test_lookup_error_carries_correlation_id(self, use_case, overrides, error):
        """Test that lookup errors are tagged with the correlation ID."""
        with pytest.raises(error) as exc_info:
            use_case.execute(_command(**overrides))
        assert exc_info.value.correlation_id == "corr-generate-1"

    def test_nothing_resolved_on_lookup_error(self, use_case, resolver):
        """Test that the resolver is not called for unknown image types."""
        with pytest.raises(UnsupportedImageTypeError):
            use_case.execute(_command(image_type="floppy"))
        assert resolver.requests == []


class TestGenerateManifestValidationErrors:
    """Blueprint validation failures."""

    def test_unsupported_customization(self, use_case, resolver):
        """Test that disallowed customizations are rejected before resolution."""
        blueprint = Blueprint(customizations=Customizations(hostname="edge"))
        with pytest.raises(UnsupportedCustomizationError):
            use_case.execute(
                _command(
                    image_type="iot-installer",
                    blueprint=blueprint,
                    options=ImageOptions(ostree=OSTreeImageOptions(url="https://ostree.example.com")),
                )
            )
        assert resolver.requests == []

    def test_invalid_mountpoint(self, use_case):
        """Test that a disallowed mountpoint is rejected."""
        blueprint = Blueprint(
            customizations=Customizations(
                filesystem=(FilesystemCustomization("/etc", 1024 * 1024 * 1024),)
            )
        )
        with pytest.raises(MountpointError):
            use_case.execute(_command(blueprint=blueprint))


class TestGenerateManifestResolution:
    """Resolver failures, deadline and cancellation."""

    def test_resolver_domain_error_propagates(self, repository_config):
        """Test that resolver domain errors are re-raised with the correlation ID."""
        use_case = GenerateManifestUseCase(
            registry=get_registry(),
            resolver=InMemoryPackageResolver(unavailable=["qemu-guest-agent"]),
            repository_config=repository_config,
        )
        with pytest.raises(PackageResolutionError, match="qemu-guest-agent") as exc_info:
            use_case.execute(_command())
        assert exc_info.value.correlation_id == "corr-generate-1"

    def test_unexpected_error_is_wrapped(self, repository_config):
        """Test that unexpected resolver errors become PackageResolutionError."""
        boom = RuntimeError("boom")
        use_case = GenerateManifestUseCase(
            registry=get_registry(),
            resolver=RaisingResolver(boom),
            repository_config=repository_config,
        )
        with pytest.raises(PackageResolutionError, match="boom") as exc_info:
            use_case.execute(_command())
        assert exc_info.value.cause is boom
        assert exc_info.value.__cause__ is boom

    def test_timeout(self, repository_config):
        """Test that a slow resolver hits the deadline."""
        resolver = BlockingResolver()
        use_case = GenerateManifestUseCase(
            registry=get_registry(),
            resolver=resolver,
            repository_config=repository_config,
            timeout_seconds=0.1,
            poll_interval=0.01,
        )
        try:
            with pytest.raises(ResolutionCancelledError, match="timed out") as exc_info:
                use_case.execute(_command())
            assert exc_info.value.correlation_id == "corr-generate-1"
        finally:
            resolver.release.set()

    def test_cancel_event(self, repository_config):
        """Test that a set cancel event abandons resolution."""
        resolver = BlockingResolver()
        use_case = GenerateManifestUseCase(
            registry=get_registry(),
            resolver=resolver,
            repository_config=repository_config,
            poll_interval=0.01,
        )
        cancel_event = threading.Event()
        cancel_event.set()
        try:
            with pytest.raises(ResolutionCancelledError, match="cancelled"):
                use_case.execute(_command(cancel_event=cancel_event))
        finally:
            resolver.release.set()

    @pytest.mark.parametrize("timeout", [0, -1])
    def test_non_positive_timeout_rejected(self, resolver, repository_config, timeout):
        """Test constructor validation of the deadline."""
        with pytest.raises(ValueError, match="timeout_seconds must be positive"):
            GenerateManifestUseCase(
                registry=get_registry(),
                resolver=resolver,
                repository_config=repository_config,
                timeout_seconds=timeout,
            )
