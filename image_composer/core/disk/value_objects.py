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

"""Value objects for the Disk domain.

All value objects are immutable and defined by their values, not identity.
"""

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

KiB = 1024
MiB = 1024 * KiB
GiB = 1024 * MiB


class PartitionTableType(str, Enum):
    """Partition table label type."""

    GPT = "gpt"
    DOS = "dos"


class PartitionTypes:
    """Partition type identifiers used by the default tables."""

    BIOS_BOOT = "21686148-6449-6E6F-744E-656564454649"
    EFI_SYSTEM = "C12A7328-F81F-11D2-BA4B-00A0C93EC93B"
    FILESYSTEM_DATA = "0FC63DAF-8483-4772-8E79-3D69D8477DE4"
    DOS_PREP_BOOT = "41"
    DOS_LINUX = "83"
    DOS_EXTENDED = "05"


def is_clean_mountpoint(path: str) -> bool:
    """Return True if the path is absolute and already normalized.

    Any doubled separator, trailing separator (other than / itself)
    or ./.. segment makes a path dirty.
    """
    if not path.startswith("/") or "//" in path:
        return False
    return posixpath.normpath(path) == path


@dataclass(frozen=True)
class MountpointPolicy:
    """Mountpoints a distribution accepts as filesystem customizations.

    Attributes:
        exact: Paths allowed only as-is.
        prefixes: Paths allowed as-is and at any depth below.
        denied: Paths rejected as-is and at any depth below.
    """

    exact: Tuple[str, ...]
    prefixes: Tuple[str, ...]
    denied: Tuple[str, ...] = ()

    @staticmethod
    def _under(path: str, prefix: str) -> bool:
        return path == prefix or path.startswith(prefix + "/")

    def allows(self, path: str) -> bool:
        """Return True if the (clean) path may be customized."""
        if any(self._under(path, denied) for denied in self.denied):
            return False
        if path in self.exact:
            return True
        return any(self._under(path, prefix) for prefix in self.prefixes)


DEFAULT_MOUNTPOINT_POLICY = MountpointPolicy(
    exact=("/", "/boot"),
    prefixes=("/var", "/opt", "/srv", "/usr", "/app", "/data", "/home", "/tmp"),
    denied=("/var/run", "/var/lock"),
)


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class Filesystem:
    """A filesystem placed on a partition.

    Attributes:
        type: Filesystem type (ext4, xfs, vfat).
        mountpoint: Where the filesystem is mounted.
        uuid: Filesystem UUID; empty until planned.
        label: Optional filesystem label.
        fstab_options: Mount options written to fstab.
        fstab_freq: fstab dump frequency.
        fstab_passno: fstab fsck order.
    """

    type: str
    mountpoint: str
    uuid: str = ""
    label: str = ""
    fstab_options: str = "defaults"
    fstab_freq: int = 0
    fstab_passno: int = 0

    SUPPORTED_TYPES: ClassVar[Tuple[str, ...]] = ("ext4", "xfs", "vfat")

    def __post_init__(self) -> None:
        """Validate filesystem type."""
        if self.type not in self.SUPPORTED_TYPES:
            raise ValueError(f"Unsupported filesystem type: {self.type}")


@dataclass(frozen=True)
class Partition:
    """A partition of a disk image.

    Attributes:
        size: Size in bytes.
        type: Partition type GUID (gpt) or id (dos).
        start: Offset in bytes; zero until planned.
        uuid: Partition UUID (gpt only); empty until planned.
        bootable: Bootable flag (dos only).
        filesystem: Filesystem on the partition, if any.
    """

    size: int
    type: str
    start: int = 0
    uuid: str = ""
    bootable: bool = False
    filesystem: Optional[Filesystem] = None

    def __post_init__(self) -> None:
        """Validate partition size."""
        if self.size <= 0:
            raise ValueError("Partition size must be positive")

    @property
    def mountpoint(self) -> Optional[str]:
        """Return the mountpoint of the filesystem, if any."""
        if self.filesystem is None:
            return None
        return self.filesystem.mountpoint
