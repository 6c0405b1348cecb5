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

"""Distro domain exceptions."""

from typing import Sequence

from core.blueprint.value_objects import CustomizationKind


class DistroDomainError(Exception):
    """Base exception for distro domain errors."""

    def __init__(self, message: str, correlation_id: str = ""):
        """Initialize domain error.

        Args:
            message: Error message.
            correlation_id: Request correlation ID for tracing.
        """
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class UnsupportedDistributionError(DistroDomainError):
    """Raised when a distribution name is not in the registry."""


class UnsupportedArchitectureError(DistroDomainError):
    """Raised when an architecture is not available for a distribution."""


class UnsupportedImageTypeError(DistroDomainError):
    """Raised when neither an image type name nor alias matches."""


class UnsupportedCustomizationError(DistroDomainError):
    """Raised when a blueprint uses customizations an image type forbids."""

    def __init__(
        self,
        image_type: str,
        disallowed: Sequence[CustomizationKind],
        allowed: Sequence[CustomizationKind],
        boot_iso: bool = False,
        correlation_id: str = "",
    ):
        self.image_type = image_type
        self.disallowed = list(disallowed)
        self.allowed = list(allowed)
        allowed_names = ", ".join(kind.value for kind in self.allowed) or "None"
        kind = "boot ISO image type" if boot_iso else "image type"
        super().__init__(
            f'unsupported blueprint customizations found for {kind} "{image_type}": '
            f"(allowed: {allowed_names})",
            correlation_id,
        )


class OstreeCustomizationConflictError(DistroDomainError):
    """Raised when a customization cannot apply to an OSTree commit."""


class MissingOstreeURLError(DistroDomainError):
    """Raised when an image type needs an OSTree commit URL and none is given."""


class InvalidOSTreeOptionsError(DistroDomainError):
    """Raised when OSTree image options are malformed."""


class InvalidCustomizationError(DistroDomainError):
    """Raised when a customization is structurally invalid."""
