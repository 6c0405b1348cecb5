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

"""Value objects for the Blueprint domain.

All value objects are immutable and defined by their values, not identity.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple, Union


class CustomizationKind(str, Enum):
    """Blueprint customization classes an image type can allow.

    The value is the name used in user-facing allow-list messages.
    """

    HOSTNAME = "Hostname"
    KERNEL = "Kernel"
    SSH_KEY = "SSHKey"
    USER = "User"
    GROUP = "Group"
    TIMEZONE = "Timezone"
    LOCALE = "Locale"
    FIREWALL = "Firewall"
    SERVICES = "Services"
    FILESYSTEM = "Filesystem"
    INSTALLATION_DEVICE = "InstallationDevice"
    FDO = "FDO"
    OPENSCAP = "OpenSCAP"
    IGNITION = "Ignition"
    DIRECTORIES = "Directories"
    FILES = "Files"
    FIPS = "FIPS"
    INSTALLER = "Installer"


_SIZE_UNITS: Dict[str, int] = {
    "b": 1,
    "kb": 1000,
    "kib": 1024,
    "mb": 1000 ** 2,
    "mib": 1024 ** 2,
    "gb": 1000 ** 3,
    "gib": 1024 ** 3,
    "tb": 1000 ** 4,
    "tib": 1024 ** 4,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([A-Za-z]*)\s*$")


def parse_data_size(value: Union[int, str]) -> int:
    """Convert a blueprint size to bytes.

    Accepts plain integers (bytes) or strings such as ``"2 GiB"`` or
    ``"500 MB"``.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid data size: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Data size cannot be negative: {value}")
        return value

    match = _SIZE_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Invalid data size: {value!r}")
    number, unit = match.groups()
    multiplier = _SIZE_UNITS.get(unit.lower() or "b")
    if multiplier is None:
        raise ValueError(f"Unknown data size unit {unit!r} in {value!r}")
    return int(number) * multiplier


@dataclass(frozen=True)
class Package:
    """A package requested by name with an optional version glob.

    Attributes:
        name: Package name.
        version: Version glob; ``"*"`` or empty means any version.
    """

    name: str
    version: str = ""

    def __post_init__(self) -> None:
        """Validate package name."""
        if not self.name or not self.name.strip():
            raise ValueError("Package name cannot be empty")

    def to_spec(self) -> str:
        """Return the dnf package specification string."""
        if self.version and self.version != "*":
            return f"{self.name}-{self.version}"
        return self.name

    def __str__(self) -> str:
        """Return string representation."""
        return self.to_spec()


@dataclass(frozen=True)
class FilesystemCustomization:
    """A custom mountpoint with its minimum size in bytes.

    The mountpoint is deliberately not validated here: the mountpoint
    policy check reports every bad path of a blueprint in one error.
    """

    mountpoint: str
    min_size: int

    def __post_init__(self) -> None:
        """Validate minimum size."""
        if self.min_size < 0:
            raise ValueError(
                f"Minimum size of mountpoint {self.mountpoint} cannot be negative"
            )


@dataclass(frozen=True)
class KernelCustomization:
    """Kernel package name and extra boot parameters."""

    name: str = ""
    append: str = ""


@dataclass(frozen=True)
class SSHKeyCustomization:
    """Authorized key for an existing user."""

    user: str
    key: str


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class UserCustomization:
    """A user account to create in the image."""

    name: str
    description: Optional[str] = None
    password: Optional[str] = None
    key: Optional[str] = None
    home: Optional[str] = None
    shell: Optional[str] = None
    groups: Tuple[str, ...] = ()
    uid: Optional[int] = None
    gid: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate user name."""
        if not self.name or not self.name.strip():
            raise ValueError("User name cannot be empty")


@dataclass(frozen=True)
class GroupCustomization:
    """A group to create in the image."""

    name: str
    gid: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate group name."""
        if not self.name or not self.name.strip():
            raise ValueError("Group name cannot be empty")


@dataclass(frozen=True)
class TimezoneCustomization:
    """Timezone and NTP servers."""

    timezone: Optional[str] = None
    ntp_servers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LocaleCustomization:
    """System languages and keyboard layout."""

    languages: Tuple[str, ...] = ()
    keyboard: Optional[str] = None


@dataclass(frozen=True)
class FirewallCustomization:
    """Firewall ports and services."""

    ports: Tuple[str, ...] = ()
    enabled_services: Tuple[str, ...] = ()
    disabled_services: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ServicesCustomization:
    """Systemd units to enable, disable or mask."""

    enabled: Tuple[str, ...] = ()
    disabled: Tuple[str, ...] = ()
    masked: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        """Return True if no unit is listed."""
        return not (self.enabled or self.disabled or self.masked)


@dataclass(frozen=True)
class FDOCustomization:
    """FIDO Device Onboarding settings for simplified installers."""

    manufacturing_server_url: str = ""
    diun_pub_key_insecure: bool = False
    diun_pub_key_hash: str = ""
    diun_pub_key_root_certs: str = ""

    def diun_options(self) -> int:
        """Return how many DIUN key options are set."""
        return sum(
            1
            for option in (
                self.diun_pub_key_insecure,
                self.diun_pub_key_hash,
                self.diun_pub_key_root_certs,
            )
            if option
        )


@dataclass(frozen=True)
class IgnitionCustomization:
    """Ignition provisioning, either embedded or fetched on first boot."""

    embedded_config: str = ""
    firstboot_url: str = ""


@dataclass(frozen=True)
class OpenSCAPCustomization:
    """OpenSCAP remediation profile."""

    profile_id: str
    datastream: str = ""


@dataclass(frozen=True)
class InstallerCustomization:
    """Anaconda installer behaviour."""

    unattended: bool = False
    sudo_nopasswd: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DirectoryCustomization:
    """A directory to create in the image tree."""

    path: str
    user: Optional[str] = None
    group: Optional[str] = None
    mode: Optional[str] = None
    ensure_parents: bool = False


@dataclass(frozen=True)
class FileCustomization:
    """A file to create in the image tree."""

    path: str
    user: Optional[str] = None
    group: Optional[str] = None
    mode: Optional[str] = None
    data: Optional[str] = None

    MAX_DATA_LENGTH: ClassVar[int] = 512 * 1024

    def __post_init__(self) -> None:
        """Validate file content size."""
        if self.data is not None and len(self.data) > self.MAX_DATA_LENGTH:
            raise ValueError(
                f"File {self.path} data cannot exceed {self.MAX_DATA_LENGTH} characters"
            )
