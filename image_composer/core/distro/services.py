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

"""Domain services for the Distro module."""

import logging
import re
from typing import TYPE_CHECKING, List

from core.blueprint.entities import Blueprint, Customizations
from core.disk.services import check_mountpoints
from core.disk.value_objects import DEFAULT_MOUNTPOINT_POLICY, MountpointPolicy, is_clean_mountpoint
from core.distro.exceptions import (
    InvalidCustomizationError,
    InvalidOSTreeOptionsError,
    MissingOstreeURLError,
    OstreeCustomizationConflictError,
    UnsupportedCustomizationError,
)
from core.distro.value_objects import ImageOptions, PipelineFamily

if TYPE_CHECKING:
    from core.distro.entities import ImageType

logger = logging.getLogger(__name__)

OSTREE_REF_PATTERN = re.compile(r"^(?:[\w\d][-._\w\d]*/)*[\w\d][-._\w\d]*$")
FILE_MODE_PATTERN = re.compile(r"^0?[0-7]{3,4}$")

# Families whose OS tree is pulled from an existing commit.
_COMMIT_PAYLOAD_FAMILIES = (
    PipelineFamily.OSTREE_DISK,
    PipelineFamily.OSTREE_INSTALLER,
    PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER,
)


class CustomizationValidator:
    """Checks a blueprint and image options against an image type.

    Checks run in a fixed order and the first failure is raised, so a
    request breaking several rules always reports the same error.
    """

    def __init__(self, mountpoint_policy: MountpointPolicy = DEFAULT_MOUNTPOINT_POLICY):
        """Initialize validator with the distribution mountpoint policy."""
        self._mountpoint_policy = mountpoint_policy

    def validate(
        self,
        image_type: "ImageType",
        blueprint: Blueprint,
        options: ImageOptions,
        correlation_id: str = "",
    ) -> List[str]:
        """Validate a request.

        Args:
            image_type: Target image type.
            blueprint: Requested content and customizations.
            options: Image options.
            correlation_id: Request correlation ID for error reporting.

        Returns:
            Warnings about parts of the request that will be ignored.

        Raises:
            InvalidOSTreeOptionsError: If OSTree options are malformed.
            MissingOstreeURLError: If a commit URL is required but missing.
            UnsupportedCustomizationError: If a customization is not allowed.
            OstreeCustomizationConflictError: If a customization cannot
                apply to an OSTree commit.
            InvalidCustomizationError: If a customization is malformed.
            DirtyMountpointError: If a mountpoint is not clean.
            UnsupportedMountpointError: If a mountpoint is not allowed.
        """
        customizations = blueprint.get_customizations()
        name = image_type.name
        family = image_type.family

        self._check_ostree_options(options, correlation_id)

        if family.boot_iso and family.rpm_ostree and not options.ostree_url():
            raise MissingOstreeURLError(
                f'boot ISO image type "{name}" requires specifying a URL from which '
                "to retrieve the OSTree commit",
                correlation_id,
            )

        self._check_allowed(image_type, customizations, correlation_id)

        if family == PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER:
            self._check_simplified_installer(name, customizations, correlation_id)

        if family.produces_commit and customizations.kernel_append():
            raise OstreeCustomizationConflictError(
                "kernel boot parameter customizations are not supported for ostree types",
                correlation_id,
            )

        if family.produces_commit and customizations.filesystem:
            raise OstreeCustomizationConflictError(
                "Custom mountpoints are not supported for ostree types",
                correlation_id,
            )

        check_mountpoints(customizations.filesystem, self._mountpoint_policy)

        if family == PipelineFamily.OSTREE_DISK and not options.ostree_url():
            raise MissingOstreeURLError(
                f'image type "{name}" requires specifying a URL from which '
                "to retrieve the OSTree commit",
                correlation_id,
            )

        self._check_directories_and_files(customizations, correlation_id)
        self._check_services(customizations, correlation_id)

        warnings = []
        if family in _COMMIT_PAYLOAD_FAMILIES and blueprint.get_package_specs():
            warnings.append(
                f'blueprint packages are ignored for image type "{name}": '
                "the OS tree comes from the OSTree commit"
            )
        if options.size and not family.partitioned:
            warnings.append(f'image size is ignored for image type "{name}"')
        return warnings

    @staticmethod
    def _check_ostree_options(options: ImageOptions, correlation_id: str) -> None:
        ostree = options.ostree
        if ostree is None:
            return
        for label, ref in (("ref", ostree.ref), ("parent", ostree.parent)):
            if ref and not OSTREE_REF_PATTERN.match(ref):
                raise InvalidOSTreeOptionsError(
                    f"Invalid ostree {label} {ref!r}", correlation_id
                )
        if ostree.parent and not ostree.url:
            raise InvalidOSTreeOptionsError(
                "ostree parent ref specified, but no URL to retrieve it",
                correlation_id,
            )

    @staticmethod
    def _check_allowed(
        image_type: "ImageType", customizations: Customizations, correlation_id: str
    ) -> None:
        allowed = image_type.allowed_customizations
        if allowed is None:
            return
        disallowed = [kind for kind in customizations.present_kinds() if kind not in allowed]
        if disallowed:
            logger.debug(
                "Rejected customizations for %s: %s",
                image_type.name,
                ", ".join(kind.value for kind in disallowed),
            )
            raise UnsupportedCustomizationError(
                image_type.name,
                disallowed,
                allowed,
                boot_iso=image_type.boot_iso,
                correlation_id=correlation_id,
            )

    @staticmethod
    def _check_simplified_installer(
        name: str, customizations: Customizations, correlation_id: str
    ) -> None:
        if not customizations.installation_device:
            raise InvalidCustomizationError(
                f'boot ISO image type "{name}" requires specifying an installation '
                "device to install to",
                correlation_id,
            )
        fdo = customizations.fdo
        if fdo is None:
            return
        if not fdo.manufacturing_server_url:
            raise InvalidCustomizationError(
                f'boot ISO image type "{name}" requires specifying '
                "FDO.ManufacturingServerURL configuration to install to when using FDO",
                correlation_id,
            )
        if fdo.diun_options() != 1:
            raise InvalidCustomizationError(
                f'boot ISO image type "{name}" requires specifying one of '
                "[FDO.DiunPubKeyHash,FDO.DiunPubKeyInsecure,FDO.DiunPubKeyRootCerts] "
                "configuration to install to when using FDO",
                correlation_id,
            )

    @staticmethod
    def _check_directories_and_files(
        customizations: Customizations, correlation_id: str
    ) -> None:
        dir_paths = [directory.path for directory in customizations.directories]
        file_paths = [file.path for file in customizations.files]

        for path in dir_paths + file_paths:
            if not is_clean_mountpoint(path) or path == "/":
                raise InvalidCustomizationError(
                    f"path {path!r} must be an absolute path in canonical form",
                    correlation_id,
                )

        for kind, paths in (("directory", dir_paths), ("file", file_paths)):
            seen = set()
            for path in paths:
                if path in seen:
                    raise InvalidCustomizationError(
                        f"duplicate {kind} customization for path {path!r}",
                        correlation_id,
                    )
                seen.add(path)

        both = sorted(set(dir_paths) & set(file_paths))
        if both:
            raise InvalidCustomizationError(
                f"path {both[0]!r} cannot be both a file and a directory",
                correlation_id,
            )

        for path in file_paths:
            for parent in file_paths:
                if path.startswith(parent + "/"):
                    raise InvalidCustomizationError(
                        f"file {path!r} cannot be created under file {parent!r}",
                        correlation_id,
                    )

        modes = [d.mode for d in customizations.directories] + [
            f.mode for f in customizations.files
        ]
        for mode in modes:
            if mode is not None and not FILE_MODE_PATTERN.match(mode):
                raise InvalidCustomizationError(
                    f"mode {mode!r} must be an octal number", correlation_id
                )

    @staticmethod
    def _check_services(customizations: Customizations, correlation_id: str) -> None:
        services = customizations.services
        if services is None:
            return
        conflicting = sorted(set(services.enabled) & set(services.disabled))
        if conflicting:
            raise InvalidCustomizationError(
                "services cannot be both enabled and disabled: " + ", ".join(conflicting),
                correlation_id,
            )
