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

"""Distro domain module.

This module contains the image type catalog, its registry and the
customization rules of each image type.
"""

from core.distro.entities import Architecture, Distribution, ImageType
from core.distro.exceptions import (
    DistroDomainError,
    InvalidCustomizationError,
    InvalidOSTreeOptionsError,
    MissingOstreeURLError,
    OstreeCustomizationConflictError,
    UnsupportedArchitectureError,
    UnsupportedCustomizationError,
    UnsupportedDistributionError,
    UnsupportedImageTypeError,
)
from core.distro.registry import DistroRegistry, build_fedora_registry, get_registry
from core.distro.services import CustomizationValidator
from core.distro.value_objects import (
    ArchitectureConfig,
    BootMode,
    DistributionConfig,
    ImageOptions,
    ImageTypeConfig,
    OSTreeImageOptions,
    PipelineFamily,
)

__all__ = [
    "Architecture",
    "Distribution",
    "ImageType",
    "DistroDomainError",
    "InvalidCustomizationError",
    "InvalidOSTreeOptionsError",
    "MissingOstreeURLError",
    "OstreeCustomizationConflictError",
    "UnsupportedArchitectureError",
    "UnsupportedCustomizationError",
    "UnsupportedDistributionError",
    "UnsupportedImageTypeError",
    "DistroRegistry",
    "build_fedora_registry",
    "get_registry",
    "CustomizationValidator",
    "ArchitectureConfig",
    "BootMode",
    "DistributionConfig",
    "ImageOptions",
    "ImageTypeConfig",
    "OSTreeImageOptions",
    "PipelineFamily",
]
