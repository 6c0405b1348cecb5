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

"""Blueprint domain module.

This module contains the user-facing description of image content.
"""

from core.blueprint.entities import Blueprint, Customizations
from core.blueprint.exceptions import BlueprintDomainError, InvalidBlueprintError
from core.blueprint.value_objects import (
    CustomizationKind,
    DirectoryCustomization,
    FDOCustomization,
    FileCustomization,
    FilesystemCustomization,
    FirewallCustomization,
    GroupCustomization,
    IgnitionCustomization,
    InstallerCustomization,
    KernelCustomization,
    LocaleCustomization,
    OpenSCAPCustomization,
    Package,
    ServicesCustomization,
    SSHKeyCustomization,
    TimezoneCustomization,
    UserCustomization,
    parse_data_size,
)

__all__ = [
    "Blueprint",
    "Customizations",
    "BlueprintDomainError",
    "InvalidBlueprintError",
    "CustomizationKind",
    "DirectoryCustomization",
    "FDOCustomization",
    "FileCustomization",
    "FilesystemCustomization",
    "FirewallCustomization",
    "GroupCustomization",
    "IgnitionCustomization",
    "InstallerCustomization",
    "KernelCustomization",
    "LocaleCustomization",
    "OpenSCAPCustomization",
    "Package",
    "ServicesCustomization",
    "SSHKeyCustomization",
    "TimezoneCustomization",
    "UserCustomization",
    "parse_data_size",
]
