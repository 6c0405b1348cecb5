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

"""Fedora image type catalog.

The catalog is plain data: release, architecture and image type records
plus the package sets and partition tables they reference. The registry
turns it into the Distribution/Architecture/ImageType tree at startup.
"""

# Package set factories share one signature; most ignore some arguments.
# pylint: disable=unused-argument

from typing import Dict, Tuple

from core.blueprint.value_objects import CustomizationKind
from core.disk.entities import PartitionTable
from core.disk.value_objects import (
    DEFAULT_MOUNTPOINT_POLICY,
    GiB,
    MiB,
    Filesystem,
    MountpointPolicy,
    Partition,
    PartitionTableType,
    PartitionTypes,
)
from core.distro.value_objects import (
    ArchitectureConfig,
    BootMode,
    DistributionConfig,
    ImageTypeConfig,
    PipelineFamily,
)
from core.packagesets.value_objects import PackageSet

X86_64 = "x86_64"
AARCH64 = "aarch64"
PPC64LE = "ppc64le"
S390X = "s390x"

ALL_ARCHES = (X86_64, AARCH64, PPC64LE, S390X)
EFI_ARCHES = (X86_64, AARCH64)

RELEASES = ("37", "38", "39", "40")

MOUNTPOINT_POLICY: MountpointPolicy = DEFAULT_MOUNTPOINT_POLICY

IOT_REF = "fedora/{releasever}/{arch}/iot"

CLOUD_KERNEL_OPTIONS = "ro no_timer_check console=ttyS0,115200n8 biosdevname=0 net.ifnames=0"
IOT_KERNEL_OPTIONS = "modprobe.blacklist=vc4"

CLOUD_SERVICES = (
    "cloud-init.service",
    "cloud-config.service",
    "cloud-final.service",
    "cloud-init-local.service",
)

ARCHITECTURES: Tuple[ArchitectureConfig, ...] = (
    ArchitectureConfig(name=AARCH64, legacy_boot=False, uefi_boot=True),
    ArchitectureConfig(
        name=PPC64LE,
        legacy_boot=True,
        uefi_boot=False,
        build_packages=("grub2-ppc64le", "grub2-ppc64le-modules"),
    ),
    ArchitectureConfig(
        name=S390X, legacy_boot=True, uefi_boot=False, build_packages=("s390utils-base",)
    ),
    ArchitectureConfig(
        name=X86_64, legacy_boot=True, uefi_boot=True, build_packages=("grub2-pc",)
    ),
)


def distribution_config(releasever: str) -> DistributionConfig:
    """Return the record of a Fedora release."""
    return DistributionConfig(
        name=f"fedora-{releasever}",
        product="Fedora",
        releasever=releasever,
        module_platform_id=f"platform:f{releasever}",
        runner=f"org.osbuild.fedora{releasever}",
    )


# Package sets

BUILD_PACKAGES = (
    "dnf",
    "dosfstools",
    "e2fsprogs",
    "policycoreutils",
    "qemu-img",
    "selinux-policy-targeted",
    "systemd",
    "tar",
    "xz",
)

_BUILD_FAMILY_PACKAGES: Dict[PipelineFamily, Tuple[str, ...]] = {
    PipelineFamily.OSTREE_COMMIT: ("rpm-ostree",),
    PipelineFamily.OSTREE_CONTAINER: ("rpm-ostree",),
    PipelineFamily.OSTREE_DISK: ("rpm-ostree",),
    PipelineFamily.IMAGE_INSTALLER: ("isomd5sum", "lorax-templates-generic", "squashfs-tools", "xorriso"),
    PipelineFamily.LIVE_INSTALLER: ("isomd5sum", "lorax-templates-generic", "squashfs-tools", "xorriso"),
    PipelineFamily.OSTREE_INSTALLER: (
        "isomd5sum",
        "lorax-templates-generic",
        "rpm-ostree",
        "squashfs-tools",
        "xorriso",
    ),
    PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER: (
        "isomd5sum",
        "lorax-templates-generic",
        "rpm-ostree",
        "squashfs-tools",
        "xorriso",
    ),
}


def build_package_set(arch: ArchitectureConfig, family: PipelineFamily) -> PackageSet:
    """Packages of the build root for an architecture and pipeline family."""
    return PackageSet(
        include=BUILD_PACKAGES + arch.build_packages + _BUILD_FAMILY_PACKAGES.get(family, ())
    )


_CLOUD_EXCLUDE = (
    "dracut-config-rescue",
    "firewalld",
    "geolite2-city",
    "geolite2-country",
    "plymouth",
    "zram-generator-defaults",
)


def cloud_base_package_set(arch: str, releasever: str) -> PackageSet:
    """Base OS packages shared by the cloud disk images."""
    return PackageSet(
        include=(
            "@Fedora Cloud Server",
            "chrony",
            "langpacks-en",
            "selinux-policy-targeted",
            "systemd-udev",
        ),
        exclude=_CLOUD_EXCLUDE,
    )


def qcow2_package_set(arch: str, releasever: str) -> PackageSet:
    return cloud_base_package_set(arch, releasever).append(
        PackageSet(include=("qemu-guest-agent",))
    )


def openstack_package_set(arch: str, releasever: str) -> PackageSet:
    return cloud_base_package_set(arch, releasever).append(
        PackageSet(include=("qemu-guest-agent", "spice-vdagent", "xen-libs"))
    )


def oci_package_set(arch: str, releasever: str) -> PackageSet:
    return cloud_base_package_set(arch, releasever).append(
        PackageSet(include=("iscsi-initiator-utils",))
    )


def ami_package_set(arch: str, releasever: str) -> PackageSet:
    return cloud_base_package_set(arch, releasever)


def vhd_package_set(arch: str, releasever: str) -> PackageSet:
    return cloud_base_package_set(arch, releasever).append(
        PackageSet(include=("WALinuxAgent",))
    )


def vmdk_package_set(arch: str, releasever: str) -> PackageSet:
    return cloud_base_package_set(arch, releasever).append(
        PackageSet(include=("open-vm-tools",), exclude=("cloud-utils-growpart",))
    )


def minimal_raw_package_set(arch: str, releasever: str) -> PackageSet:
    return PackageSet(
        include=(
            "@core",
            "initial-setup",
            "libxkbcommon",
            "NetworkManager-wifi",
            "brcmfmac-firmware",
        ),
        exclude=("dracut-config-rescue",),
    )


def container_package_set(arch: str, releasever: str) -> PackageSet:
    return PackageSet(
        include=(
            "bash",
            "coreutils",
            "dnf",
            "fedora-release-container",
            "glibc-minimal-langpack",
            "rootfiles",
            "rpm",
            "sudo",
            "tar",
            "util-linux-core",
            "vim-minimal",
        ),
        exclude=(
            "crypto-policies-scripts",
            "dbus-broker",
            "dosfstools",
            "e2fsprogs",
            "grubby",
            "kernel",
            "kernel-core",
            "langpacks-en",
            "nano",
            "sssd-client",
            "systemd",
            "xkeyboard-config",
        ),
    )


def wsl_package_set(arch: str, releasever: str) -> PackageSet:
    return container_package_set(arch, releasever).append(
        PackageSet(include=("passwd", "shadow-utils"))
    )


def iot_commit_package_set(arch: str, releasever: str) -> PackageSet:
    """OS tree committed by the IoT edition."""
    package_set = PackageSet(
        include=(
            "fedora-release-iot",
            "glibc",
            "glibc-minimal-langpack",
            "nss-altfiles",
            "dracut-config-generic",
            "dracut-network",
            "polkit",
            "lvm2",
            "cryptsetup",
            "e2fsprogs",
            "xfsprogs",
            "dosfstools",
            "NetworkManager",
            "NetworkManager-wifi",
            "firewalld",
            "openssh-server",
            "sudo",
            "greenboot",
            "greenboot-default-health-checks",
            "ignition",
            "podman",
            "container-selinux",
            "skopeo",
            "clevis",
            "clevis-dracut",
            "clevis-luks",
            "clevis-pin-tpm2",
            "rpm-ostree",
            "fwupd",
            "usbguard",
        ),
    )
    if arch == X86_64:
        return package_set.append(
            PackageSet(include=("grub2-efi-x64", "efibootmgr", "shim-x64", "microcode_ctl"))
        )
    if arch == AARCH64:
        return package_set.append(
            PackageSet(
                include=(
                    "grub2-efi-aa64",
                    "efibootmgr",
                    "shim-aa64",
                    "uboot-images-armv8",
                    "bcm283x-firmware",
                    "arm-image-installer",
                )
            )
        )
    return package_set


def container_tree_package_set(arch: str, releasever: str) -> PackageSet:
    """Web server image serving the committed repository."""
    return PackageSet(
        include=("fedora-release-container", "glibc-minimal-langpack", "nginx"),
        exclude=("kernel", "systemd"),
    )


def anaconda_package_set(arch: str, releasever: str) -> PackageSet:
    """Installer environment of the boot ISOs."""
    package_set = PackageSet(
        include=(
            "anaconda",
            "anaconda-dracut",
            "anaconda-install-env-deps",
            "anaconda-widgets",
            "dracut-config-generic",
            "dracut-network",
            "efibootmgr",
            "glibc-all-langpacks",
            "grub2-tools",
            "grub2-tools-minimal",
            "kernel",
            "kernel-modules",
            "kernel-modules-extra",
            "linux-firmware",
            "lorax-templates-generic",
            "NetworkManager",
            "plymouth",
            "rng-tools",
            "rpm-ostree",
            "selinux-policy-targeted",
            "systemd",
            "xorg-x11-server-Xorg",
        ),
        exclude=("dracut-config-rescue",),
    )
    if arch == X86_64:
        return package_set.append(
            PackageSet(
                include=(
                    "biosdevname",
                    "grub2-efi-x64-cdboot",
                    "grub2-pc-modules",
                    "shim-x64",
                    "syslinux",
                    "syslinux-nonlinux",
                )
            )
        )
    if arch == AARCH64:
        return package_set.append(PackageSet(include=("grub2-efi-aa64-cdboot", "shim-aa64")))
    return package_set


def image_installer_os_package_set(arch: str, releasever: str) -> PackageSet:
    """Payload installed by the image installer."""
    return PackageSet(
        include=("@core", "fedora-release", "kernel", "selinux-policy-targeted"),
        exclude=("dracut-config-rescue",),
    )


def live_installer_package_set(arch: str, releasever: str) -> PackageSet:
    """Live workstation environment with the installer."""
    return anaconda_package_set(arch, releasever).append(
        PackageSet(
            include=(
                "@workstation-product-environment",
                "anaconda-live",
                "dracut-live",
                "livesys-scripts",
            ),
            exclude=(
                "@dial-up",
                "@input-methods",
                "@standard",
                "device-mapper-multipath",
                "fcoe-utils",
                "gfs2-utils",
            ),
        )
    )


def coreos_installer_package_set(arch: str, releasever: str) -> PackageSet:
    """Installer environment of the simplified installer."""
    package_set = PackageSet(
        include=(
            "coreos-installer",
            "coreos-installer-dracut",
            "coreutils",
            "dracut-network",
            "fdo-init",
            "fdo-client",
            "fdo-owner-cli",
            "ignition",
            "kernel",
            "lvm2",
            "policycoreutils",
            "rpm-ostree",
            "systemd",
            "xz",
        ),
    )
    if arch == X86_64:
        return package_set.append(PackageSet(include=("grub2-efi-x64", "shim-x64", "microcode_ctl")))
    if arch == AARCH64:
        return package_set.append(PackageSet(include=("grub2-efi-aa64", "shim-aa64")))
    return package_set


# Partition tables

def _esp() -> Partition:
    return Partition(
        size=200 * MiB,
        type=PartitionTypes.EFI_SYSTEM,
        filesystem=Filesystem(
            type="vfat",
            mountpoint="/boot/efi",
            label="EFI-SYSTEM",
            fstab_options="defaults,uid=0,gid=0,umask=077,shortname=winnt",
            fstab_passno=2,
        ),
    )


def _boot(part_type: str, bootable: bool = False) -> Partition:
    return Partition(
        size=500 * MiB,
        type=part_type,
        bootable=bootable,
        filesystem=Filesystem(type="ext4", mountpoint="/boot", label="boot", fstab_passno=1),
    )


def _root(part_type: str) -> Partition:
    return Partition(
        size=2 * GiB,
        type=part_type,
        filesystem=Filesystem(type="ext4", mountpoint="/", label="root", fstab_passno=1),
    )


def default_partition_table(arch: str) -> PartitionTable:
    """Default partition table of the disk images of an architecture."""
    if arch == X86_64:
        return PartitionTable(
            type=PartitionTableType.GPT,
            partitions=(
                Partition(size=MiB, type=PartitionTypes.BIOS_BOOT, bootable=True),
                _esp(),
                _boot(PartitionTypes.FILESYSTEM_DATA),
                _root(PartitionTypes.FILESYSTEM_DATA),
            ),
        )
    if arch == AARCH64:
        return PartitionTable(
            type=PartitionTableType.GPT,
            partitions=(
                _esp(),
                _boot(PartitionTypes.FILESYSTEM_DATA),
                _root(PartitionTypes.FILESYSTEM_DATA),
            ),
        )
    if arch == PPC64LE:
        return PartitionTable(
            type=PartitionTableType.DOS,
            partitions=(
                Partition(size=4 * MiB, type=PartitionTypes.DOS_PREP_BOOT, bootable=True),
                _boot(PartitionTypes.DOS_LINUX),
                _root(PartitionTypes.DOS_LINUX),
            ),
        )
    if arch == S390X:
        return PartitionTable(
            type=PartitionTableType.DOS,
            partitions=(
                _boot(PartitionTypes.DOS_LINUX, bootable=True),
                _root(PartitionTypes.DOS_LINUX),
            ),
        )
    raise ValueError(f"No default partition table for architecture {arch}")


# Image types

_INSTALLER_ALLOWED = (CustomizationKind.USER, CustomizationKind.GROUP)

_IOT_DISK_ALLOWED = (
    CustomizationKind.USER,
    CustomizationKind.GROUP,
    CustomizationKind.DIRECTORIES,
    CustomizationKind.FILES,
    CustomizationKind.SERVICES,
)

_SIMPLIFIED_INSTALLER_ALLOWED = (
    CustomizationKind.INSTALLATION_DEVICE,
    CustomizationKind.FDO,
    CustomizationKind.IGNITION,
    CustomizationKind.KERNEL,
    CustomizationKind.USER,
    CustomizationKind.GROUP,
    CustomizationKind.FIPS,
)

IMAGE_TYPES: Tuple[ImageTypeConfig, ...] = (
    ImageTypeConfig(
        name="ami",
        filename="image.raw",
        mime_type="application/octet-stream",
        family=PipelineFamily.DISK,
        export="raw",
        arches=EFI_ARCHES,
        boot_mode=BootMode.HYBRID,
        default_size=6 * GiB,
        kernel_options=CLOUD_KERNEL_OPTIONS,
        enabled_services=CLOUD_SERVICES,
        package_sets=(("os", ami_package_set),),
    ),
    ImageTypeConfig(
        name="container",
        filename="container.tar",
        mime_type="application/x-tar",
        family=PipelineFamily.CONTAINER,
        export="container",
        arches=ALL_ARCHES,
        package_sets=(("os", container_package_set),),
    ),
    ImageTypeConfig(
        name="image-installer",
        filename="installer.iso",
        mime_type="application/x-iso9660-image",
        family=PipelineFamily.IMAGE_INSTALLER,
        export="bootiso",
        arches=EFI_ARCHES,
        aliases=("fedora-image-installer",),
        boot_mode=BootMode.HYBRID,
        allowed_customizations=_INSTALLER_ALLOWED,
        package_sets=(
            ("anaconda-tree", anaconda_package_set),
            ("os", image_installer_os_package_set),
        ),
    ),
    ImageTypeConfig(
        name="iot-commit",
        filename="commit.tar",
        mime_type="application/x-tar",
        family=PipelineFamily.OSTREE_COMMIT,
        export="commit-archive",
        arches=EFI_ARCHES,
        aliases=("fedora-iot-commit",),
        enabled_services=("NetworkManager.service", "firewalld.service", "sshd.service"),
        package_sets=(("os", iot_commit_package_set),),
        ostree_ref_template=IOT_REF,
    ),
    ImageTypeConfig(
        name="iot-container",
        filename="container.tar",
        mime_type="application/x-tar",
        family=PipelineFamily.OSTREE_CONTAINER,
        export="container",
        arches=EFI_ARCHES,
        aliases=("fedora-iot-container",),
        enabled_services=("NetworkManager.service", "firewalld.service", "sshd.service"),
        package_sets=(
            ("os", iot_commit_package_set),
            ("container-tree", container_tree_package_set),
        ),
        ostree_ref_template=IOT_REF,
    ),
    ImageTypeConfig(
        name="iot-installer",
        filename="installer.iso",
        mime_type="application/x-iso9660-image",
        family=PipelineFamily.OSTREE_INSTALLER,
        export="bootiso",
        arches=EFI_ARCHES,
        aliases=("fedora-iot-installer",),
        boot_mode=BootMode.HYBRID,
        allowed_customizations=_INSTALLER_ALLOWED,
        package_sets=(("anaconda-tree", anaconda_package_set),),
        ostree_ref_template=IOT_REF,
    ),
    ImageTypeConfig(
        name="iot-qcow2-image",
        filename="image.qcow2",
        mime_type="application/x-qemu-disk",
        family=PipelineFamily.OSTREE_DISK,
        export="qcow2",
        arches=EFI_ARCHES,
        boot_mode=BootMode.UEFI,
        default_size=10 * GiB,
        allowed_customizations=_IOT_DISK_ALLOWED,
        kernel_options=IOT_KERNEL_OPTIONS,
        ostree_ref_template=IOT_REF,
    ),
    ImageTypeConfig(
        name="iot-raw-image",
        filename="image.raw.xz",
        mime_type="application/xz",
        family=PipelineFamily.OSTREE_DISK,
        export="xz",
        arches=EFI_ARCHES,
        boot_mode=BootMode.UEFI,
        default_size=4 * GiB,
        allowed_customizations=_IOT_DISK_ALLOWED,
        kernel_options=IOT_KERNEL_OPTIONS,
        ostree_ref_template=IOT_REF,
    ),
    ImageTypeConfig(
        name="iot-simplified-installer",
        filename="simplified-installer.iso",
        mime_type="application/x-iso9660-image",
        family=PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER,
        export="bootiso",
        arches=EFI_ARCHES,
        min_release=38,
        boot_mode=BootMode.UEFI,
        default_size=10 * GiB,
        allowed_customizations=_SIMPLIFIED_INSTALLER_ALLOWED,
        kernel_options=IOT_KERNEL_OPTIONS,
        package_sets=(("coi-tree", coreos_installer_package_set),),
        ostree_ref_template=IOT_REF,
    ),
    ImageTypeConfig(
        name="live-installer",
        filename="live-installer.iso",
        mime_type="application/x-iso9660-image",
        family=PipelineFamily.LIVE_INSTALLER,
        export="bootiso",
        arches=EFI_ARCHES,
        boot_mode=BootMode.HYBRID,
        allowed_customizations=(),
        package_sets=(("anaconda-tree", live_installer_package_set),),
    ),
    ImageTypeConfig(
        name="minimal-raw",
        filename="raw.img.xz",
        mime_type="application/xz",
        family=PipelineFamily.DISK,
        export="xz",
        arches=EFI_ARCHES,
        boot_mode=BootMode.UEFI,
        default_size=4 * GiB,
        kernel_options="ro",
        enabled_services=(
            "NetworkManager.service",
            "initial-setup.service",
            "sshd.service",
        ),
        package_sets=(("os", minimal_raw_package_set),),
    ),
    ImageTypeConfig(
        name="oci",
        filename="disk.qcow2",
        mime_type="application/x-qemu-disk",
        family=PipelineFamily.DISK,
        export="qcow2",
        arches=EFI_ARCHES,
        boot_mode=BootMode.HYBRID,
        default_size=5 * GiB,
        kernel_options=CLOUD_KERNEL_OPTIONS,
        enabled_services=CLOUD_SERVICES,
        package_sets=(("os", oci_package_set),),
    ),
    ImageTypeConfig(
        name="openstack",
        filename="disk.qcow2",
        mime_type="application/x-qemu-disk",
        family=PipelineFamily.DISK,
        export="qcow2",
        arches=EFI_ARCHES,
        boot_mode=BootMode.HYBRID,
        default_size=5 * GiB,
        kernel_options=CLOUD_KERNEL_OPTIONS,
        enabled_services=CLOUD_SERVICES,
        package_sets=(("os", openstack_package_set),),
    ),
    ImageTypeConfig(
        name="ova",
        filename="image.ova",
        mime_type="application/ovf",
        family=PipelineFamily.DISK,
        export="ova",
        arches=(X86_64,),
        boot_mode=BootMode.HYBRID,
        default_size=4 * GiB,
        kernel_options="ro net.ifnames=0",
        enabled_services=CLOUD_SERVICES + ("vmtoolsd.service",),
        package_sets=(("os", vmdk_package_set),),
    ),
    ImageTypeConfig(
        name="qcow2",
        filename="disk.qcow2",
        mime_type="application/x-qemu-disk",
        family=PipelineFamily.DISK,
        export="qcow2",
        arches=ALL_ARCHES,
        boot_mode=BootMode.HYBRID,
        default_size=5 * GiB,
        kernel_options=CLOUD_KERNEL_OPTIONS,
        enabled_services=CLOUD_SERVICES,
        package_sets=(("os", qcow2_package_set),),
    ),
    ImageTypeConfig(
        name="vhd",
        filename="disk.vhd",
        mime_type="application/x-vhd",
        family=PipelineFamily.DISK,
        export="vpc",
        arches=(X86_64,),
        boot_mode=BootMode.HYBRID,
        default_size=4 * GiB,
        kernel_options=CLOUD_KERNEL_OPTIONS,
        enabled_services=CLOUD_SERVICES + ("waagent.service",),
        package_sets=(("os", vhd_package_set),),
        vhd_rounding=True,
    ),
    ImageTypeConfig(
        name="vmdk",
        filename="disk.vmdk",
        mime_type="application/x-vmdk",
        family=PipelineFamily.DISK,
        export="vmdk",
        arches=(X86_64,),
        boot_mode=BootMode.HYBRID,
        default_size=4 * GiB,
        kernel_options="ro net.ifnames=0",
        enabled_services=CLOUD_SERVICES + ("vmtoolsd.service",),
        package_sets=(("os", vmdk_package_set),),
    ),
    ImageTypeConfig(
        name="wsl",
        filename="wsl.tar",
        mime_type="application/x-tar",
        family=PipelineFamily.CONTAINER,
        export="archive",
        arches=(X86_64,),
        package_sets=(("os", wsl_package_set),),
    ),
)
