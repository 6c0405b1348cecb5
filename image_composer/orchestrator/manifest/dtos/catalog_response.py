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

"""Image catalog response DTOs."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class DistributionSummary:
    """One supported distribution."""

    name: str
    product: str
    releasever: str
    module_platform_id: str


@dataclass(frozen=True)
class DistributionListResponse:
    """Response DTO listing the supported distributions."""

    correlation_id: str
    distributions: List[DistributionSummary]


@dataclass(frozen=True)
class ArchitectureListResponse:
    """Response DTO listing the architectures of a distribution."""

    correlation_id: str
    distribution: str
    architectures: List[str]


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class ImageTypeSummary:
    """One image type of an architecture.

    Attributes:
        name: Canonical image type name.
        aliases: Alternative names accepted on lookup.
        filename: Name of the exported image file.
        mime_type: MIME type of the exported image.
        boot_mode: Boot mode on this architecture.
        default_size: Image size used when none is requested, 0 if unsized.
        rpm_ostree: Whether the image is built from an OSTree commit.
        boot_iso: Whether the image is a bootable installer ISO.
    """

    name: str
    aliases: List[str]
    filename: str
    mime_type: str
    boot_mode: str
    default_size: int
    rpm_ostree: bool
    boot_iso: bool


@dataclass(frozen=True)
class ImageTypeListResponse:
    """Response DTO listing the image types of an architecture."""

    correlation_id: str
    distribution: str
    architecture: str
    image_types: List[ImageTypeSummary]
