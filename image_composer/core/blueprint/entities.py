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

"""Domain entities for the Blueprint module."""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.blueprint.exceptions import InvalidBlueprintError
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


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class Customizations:
    """Optional image customizations requested by a blueprint.

    A field left at its default means the customization is absent.
    """

    hostname: Optional[str] = None
    kernel: Optional[KernelCustomization] = None
    ssh_keys: Tuple[SSHKeyCustomization, ...] = ()
    users: Tuple[UserCustomization, ...] = ()
    groups: Tuple[GroupCustomization, ...] = ()
    timezone: Optional[TimezoneCustomization] = None
    locale: Optional[LocaleCustomization] = None
    firewall: Optional[FirewallCustomization] = None
    services: Optional[ServicesCustomization] = None
    filesystem: Tuple[FilesystemCustomization, ...] = ()
    installation_device: str = ""
    fdo: Optional[FDOCustomization] = None
    openscap: Optional[OpenSCAPCustomization] = None
    ignition: Optional[IgnitionCustomization] = None
    directories: Tuple[DirectoryCustomization, ...] = ()
    files: Tuple[FileCustomization, ...] = ()
    fips: Optional[bool] = None
    installer: Optional[InstallerCustomization] = None

    def present_kinds(self) -> List[CustomizationKind]:
        """Return the customization kinds set in this blueprint.

        Kinds are returned in CustomizationKind declaration order.
        """
        present = {
            CustomizationKind.HOSTNAME: self.hostname is not None,
            CustomizationKind.KERNEL: self.kernel is not None,
            CustomizationKind.SSH_KEY: bool(self.ssh_keys),
            CustomizationKind.USER: bool(self.users),
            CustomizationKind.GROUP: bool(self.groups),
            CustomizationKind.TIMEZONE: self.timezone is not None,
            CustomizationKind.LOCALE: self.locale is not None,
            CustomizationKind.FIREWALL: self.firewall is not None,
            CustomizationKind.SERVICES: self.services is not None,
            CustomizationKind.FILESYSTEM: bool(self.filesystem),
            CustomizationKind.INSTALLATION_DEVICE: bool(self.installation_device),
            CustomizationKind.FDO: self.fdo is not None,
            CustomizationKind.OPENSCAP: self.openscap is not None,
            CustomizationKind.IGNITION: self.ignition is not None,
            CustomizationKind.DIRECTORIES: bool(self.directories),
            CustomizationKind.FILES: bool(self.files),
            CustomizationKind.FIPS: self.fips is not None,
            CustomizationKind.INSTALLER: self.installer is not None,
        }
        return [kind for kind in CustomizationKind if present[kind]]

    def kernel_append(self) -> str:
        """Return the extra kernel command line, or an empty string."""
        if self.kernel is None:
            return ""
        return self.kernel.append

    def kernel_name(self) -> str:
        """Return the requested kernel package, or an empty string."""
        if self.kernel is None:
            return ""
        return self.kernel.name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Customizations":
        """Build customizations from the blueprint ``customizations`` table.

        Raises:
            InvalidBlueprintError: If a section is malformed.
        """
        try:
            return cls._from_dict(data)
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise InvalidBlueprintError(f"Invalid blueprint customizations: {exc}") from exc

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any]) -> "Customizations":
        kernel = None
        if data.get("kernel") is not None:
            kernel = KernelCustomization(
                name=data["kernel"].get("name", ""),
                append=data["kernel"].get("append", ""),
            )

        timezone = None
        if data.get("timezone") is not None:
            timezone = TimezoneCustomization(
                timezone=data["timezone"].get("timezone"),
                ntp_servers=tuple(data["timezone"].get("ntpservers", ())),
            )

        locale = None
        if data.get("locale") is not None:
            locale = LocaleCustomization(
                languages=tuple(data["locale"].get("languages", ())),
                keyboard=data["locale"].get("keyboard"),
            )

        firewall = None
        if data.get("firewall") is not None:
            fw_services = data["firewall"].get("services") or {}
            firewall = FirewallCustomization(
                ports=tuple(data["firewall"].get("ports", ())),
                enabled_services=tuple(fw_services.get("enabled", ())),
                disabled_services=tuple(fw_services.get("disabled", ())),
            )

        services = None
        if data.get("services") is not None:
            services = ServicesCustomization(
                enabled=tuple(data["services"].get("enabled", ())),
                disabled=tuple(data["services"].get("disabled", ())),
                masked=tuple(data["services"].get("masked", ())),
            )

        fdo = None
        if data.get("fdo") is not None:
            fdo = FDOCustomization(
                manufacturing_server_url=data["fdo"].get("manufacturing_server_url", ""),
                diun_pub_key_insecure=bool(data["fdo"].get("diun_pub_key_insecure", False)),
                diun_pub_key_hash=data["fdo"].get("diun_pub_key_hash", ""),
                diun_pub_key_root_certs=data["fdo"].get("diun_pub_key_root_certs", ""),
            )

        openscap = None
        if data.get("openscap") is not None:
            openscap = OpenSCAPCustomization(
                profile_id=data["openscap"]["profile_id"],
                datastream=data["openscap"].get("datastream", ""),
            )

        ignition = None
        if data.get("ignition") is not None:
            ignition = IgnitionCustomization(
                embedded_config=(data["ignition"].get("embedded") or {}).get("config", ""),
                firstboot_url=(data["ignition"].get("firstboot") or {}).get("url", ""),
            )

        installer = None
        if data.get("installer") is not None:
            installer = InstallerCustomization(
                unattended=bool(data["installer"].get("unattended", False)),
                sudo_nopasswd=tuple(data["installer"].get("sudo-nopasswd", ())),
            )

        return cls(
            hostname=data.get("hostname"),
            kernel=kernel,
            ssh_keys=tuple(
                SSHKeyCustomization(user=key["user"], key=key["key"])
                for key in data.get("sshkey", ())
            ),
            users=tuple(
                UserCustomization(
                    name=user["name"],
                    description=user.get("description"),
                    password=user.get("password"),
                    key=user.get("key"),
                    home=user.get("home"),
                    shell=user.get("shell"),
                    groups=tuple(user.get("groups", ())),
                    uid=user.get("uid"),
                    gid=user.get("gid"),
                )
                for user in data.get("user", ())
            ),
            groups=tuple(
                GroupCustomization(name=group["name"], gid=group.get("gid"))
                for group in data.get("group", ())
            ),
            timezone=timezone,
            locale=locale,
            firewall=firewall,
            services=services,
            filesystem=tuple(
                FilesystemCustomization(
                    mountpoint=fs["mountpoint"],
                    min_size=parse_data_size(fs.get("minsize", 0)),
                )
                for fs in data.get("filesystem", ())
            ),
            installation_device=data.get("installation_device", ""),
            fdo=fdo,
            openscap=openscap,
            ignition=ignition,
            directories=tuple(
                DirectoryCustomization(
                    path=directory["path"],
                    user=directory.get("user"),
                    group=directory.get("group"),
                    mode=directory.get("mode"),
                    ensure_parents=bool(directory.get("ensure_parents", False)),
                )
                for directory in data.get("directories", ())
            ),
            files=tuple(
                FileCustomization(
                    path=file["path"],
                    user=file.get("user"),
                    group=file.get("group"),
                    mode=file.get("mode"),
                    data=file.get("data"),
                )
                for file in data.get("files", ())
            ),
            fips=data.get("fips"),
            installer=installer,
        )


@dataclass(frozen=True)
class Blueprint:
    """User description of the desired image content.

    Attributes:
        name: Blueprint name.
        description: Free-form description.
        version: Blueprint version string.
        packages: Packages to add to the OS payload.
        modules: Module streams, treated like packages.
        groups: Package groups (installed as ``@group``).
        customizations: Optional customizations.
    """

    name: str = ""
    description: str = ""
    version: str = ""
    packages: Tuple[Package, ...] = ()
    modules: Tuple[Package, ...] = ()
    groups: Tuple[str, ...] = ()
    customizations: Optional[Customizations] = None

    def get_customizations(self) -> Customizations:
        """Return customizations, or an empty set if none were given."""
        if self.customizations is None:
            return Customizations()
        return self.customizations

    def get_package_specs(self) -> List[str]:
        """Return package, module and group specs in blueprint order."""
        specs = [package.to_spec() for package in self.packages]
        specs.extend(module.to_spec() for module in self.modules)
        specs.extend(f"@{group}" for group in self.groups)
        kernel_name = self.get_customizations().kernel_name()
        if kernel_name:
            specs.append(kernel_name)
        return specs

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Blueprint":
        """Build a blueprint from its TOML/JSON representation.

        Raises:
            InvalidBlueprintError: If the document is malformed.
        """
        if not isinstance(data, Mapping):
            raise InvalidBlueprintError("Blueprint must be a mapping")

        try:
            packages = tuple(
                Package(name=pkg["name"], version=pkg.get("version", ""))
                for pkg in data.get("packages", ())
            )
            modules = tuple(
                Package(name=mod["name"], version=mod.get("version", ""))
                for mod in data.get("modules", ())
            )
            groups = tuple(group["name"] for group in data.get("groups", ()))
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise InvalidBlueprintError(f"Invalid blueprint packages: {exc}") from exc

        customizations = None
        if data.get("customizations") is not None:
            customizations = Customizations.from_dict(data["customizations"])

        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            version=str(data.get("version", "")),
            packages=packages,
            modules=modules,
            groups=groups,
            customizations=customizations,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the non-customization part for logging and responses."""
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "packages": [package.to_spec() for package in self.packages],
            "modules": [module.to_spec() for module in self.modules],
            "groups": list(self.groups),
            "customizations": [
                kind.value for kind in self.get_customizations().present_kinds()
            ],
        }


__all__ = ["Blueprint", "Customizations"]
