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

"""Disk domain module."""

from core.disk.entities import PartitionTable
from core.disk.exceptions import (
    DirtyMountpointError,
    DiskDomainError,
    InsufficientPartitionSizeError,
    MountpointError,
    UnsupportedMountpointError,
)
from core.disk.services import REQUIRED_SIZES, PartitionPlanner, check_mountpoints
from core.disk.value_objects import (
    DEFAULT_MOUNTPOINT_POLICY,
    GiB,
    KiB,
    MiB,
    Filesystem,
    MountpointPolicy,
    Partition,
    PartitionTableType,
    PartitionTypes,
    is_clean_mountpoint,
)

__all__ = [
    "PartitionTable",
    "DirtyMountpointError",
    "DiskDomainError",
    "InsufficientPartitionSizeError",
    "MountpointError",
    "UnsupportedMountpointError",
    "REQUIRED_SIZES",
    "PartitionPlanner",
    "check_mountpoints",
    "DEFAULT_MOUNTPOINT_POLICY",
    "GiB",
    "KiB",
    "MiB",
    "Filesystem",
    "MountpointPolicy",
    "Partition",
    "PartitionTableType",
    "PartitionTypes",
    "is_clean_mountpoint",
]
