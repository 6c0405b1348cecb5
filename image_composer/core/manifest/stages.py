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

"""Constructors for the osbuild stages used by the pipelines."""

from typing import Any, Dict, List, Optional, Sequence

from core.blueprint.entities import Customizations
from core.disk.entities import PartitionTable
from core.distro.value_objects import BootMode
from core.manifest.value_objects import RPM_STAGE, Stage
from core.packagesets.value_objects import Repository

SELINUX_FILE_CONTEXTS = "etc/selinux/targeted/contexts/files/file_contexts"

# osbuild names the vfat stages and mounts "fat".
_FS_MODULE = {"vfat": "fat"}


def tree_input(pipeline: str) -> Dict[str, Any]:
    """Input taking the tree of another pipeline."""
    return {
        "tree": {
            "type": "org.osbuild.tree",
            "origin": "org.osbuild.pipeline",
            "references": [f"name:{pipeline}"],
        }
    }


def file_input(pipeline: str, filename: str, name: str = "image") -> Dict[str, Any]:
    """Input taking a single file produced by another pipeline."""
    return {
        name: {
            "type": "org.osbuild.files",
            "origin": "org.osbuild.pipeline",
            "references": {f"name:{pipeline}": {"file": filename}},
        }
    }


def rpm_stage(repositories: Sequence[Repository] = ()) -> Stage:
    """Install packages; the package list is filled at serialization."""
    gpg_keys: List[str] = []
    for repo in repositories:
        for key in repo.gpg_keys:
            if key not in gpg_keys:
                gpg_keys.append(key)
    options: Dict[str, Any] = {}
    if gpg_keys:
        options["gpgkeys"] = gpg_keys
    return Stage(type=RPM_STAGE, options=options)


def selinux_stage(labels: Optional[Dict[str, str]] = None) -> Stage:
    options: Dict[str, Any] = {"file_contexts": SELINUX_FILE_CONTEXTS}
    if labels:
        options["labels"] = labels
    return Stage(type="org.osbuild.selinux", options=options)


def build_root_stages(repositories: Sequence[Repository]) -> List[Stage]:
    return [
        rpm_stage(repositories),
        selinux_stage({"/usr/bin/cp": "system_u:object_r:install_exec_t:s0"}),
    ]


def kernel_cmdline_stage(root_fs_uuid: str, kernel_options: str) -> Stage:
    return Stage(
        type="org.osbuild.kernel-cmdline",
        options={"root_fs_uuid": root_fs_uuid, "kernel_opts": kernel_options},
    )


def customization_stages(customizations: Customizations) -> List[Stage]:
    """Stages applying blueprint customizations to an OS tree."""
    stages: List[Stage] = []

    locale = customizations.locale
    language = locale.languages[0] if locale and locale.languages else "C.UTF-8"
    stages.append(Stage(type="org.osbuild.locale", options={"language": language}))
    if locale and locale.keyboard:
        stages.append(Stage(type="org.osbuild.keymap", options={"keymap": locale.keyboard}))

    if customizations.hostname:
        stages.append(
            Stage(type="org.osbuild.hostname", options={"hostname": customizations.hostname})
        )

    timezone = customizations.timezone
    zone = timezone.timezone if timezone and timezone.timezone else "UTC"
    stages.append(Stage(type="org.osbuild.timezone", options={"zone": zone}))
    if timezone and timezone.ntp_servers:
        stages.append(
            Stage(
                type="org.osbuild.chrony",
                options={"servers": [{"hostname": s, "iburst": True} for s in timezone.ntp_servers]},
            )
        )

    if customizations.groups:
        stages.append(groups_stage(customizations))
    if customizations.users or customizations.ssh_keys:
        stages.append(users_stage(customizations))

    firewall = customizations.firewall
    if firewall is not None:
        options: Dict[str, Any] = {}
        if firewall.ports:
            options["ports"] = list(firewall.ports)
        if firewall.enabled_services:
            options["enabled_services"] = list(firewall.enabled_services)
        if firewall.disabled_services:
            options["disabled_services"] = list(firewall.disabled_services)
        stages.append(Stage(type="org.osbuild.firewall", options=options))

    stages.extend(directory_and_file_stages(customizations))

    if customizations.openscap is not None:
        options = {"profile_id": customizations.openscap.profile_id}
        if customizations.openscap.datastream:
            options["datastream"] = customizations.openscap.datastream
        stages.append(
            Stage(type="org.osbuild.oscap.remediation", options={"config": options})
        )
    return stages


def groups_stage(customizations: Customizations) -> Stage:
    groups: Dict[str, Any] = {}
    for group in customizations.groups:
        groups[group.name] = {} if group.gid is None else {"gid": group.gid}
    return Stage(type="org.osbuild.groups", options={"groups": groups})


def users_stage(customizations: Customizations) -> Stage:
    users: Dict[str, Any] = {}
    for user in customizations.users:
        entry: Dict[str, Any] = {}
        for key in ("description", "password", "key", "home", "shell", "uid", "gid"):
            value = getattr(user, key)
            if value is not None:
                entry[key] = value
        if user.groups:
            entry["groups"] = list(user.groups)
        users[user.name] = entry
    for ssh_key in customizations.ssh_keys:
        users.setdefault(ssh_key.user, {})["key"] = ssh_key.key
    return Stage(type="org.osbuild.users", options={"users": users})


def systemd_stage(
    enabled: Sequence[str], disabled: Sequence[str] = (), masked: Sequence[str] = ()
) -> Optional[Stage]:
    """Enable, disable and mask units; None when nothing is listed."""
    options: Dict[str, Any] = {}
    if enabled:
        options["enabled_services"] = list(enabled)
    if disabled:
        options["disabled_services"] = list(disabled)
    if masked:
        options["masked_services"] = list(masked)
    if not options:
        return None
    return Stage(type="org.osbuild.systemd", options=options)


def directory_and_file_stages(customizations: Customizations) -> List[Stage]:
    stages: List[Stage] = []
    if customizations.directories:
        paths = []
        for directory in customizations.directories:
            entry: Dict[str, Any] = {"path": directory.path}
            if directory.mode is not None:
                entry["mode"] = int(directory.mode, 8)
            if directory.ensure_parents:
                entry["parents"] = True
                entry["exist_ok"] = True
            paths.append(entry)
        stages.append(Stage(type="org.osbuild.mkdir", options={"paths": paths}))
    if customizations.files:
        stages.append(
            Stage(
                type="org.osbuild.inline-files",
                options={
                    "files": [
                        {"path": file.path, "data": file.data or ""}
                        for file in customizations.files
                    ]
                },
            )
        )
    ownership: Dict[str, Any] = {}
    for item in list(customizations.directories) + list(customizations.files):
        if item.user is not None or item.group is not None:
            owner: Dict[str, Any] = {}
            if item.user is not None:
                owner["user"] = item.user
            if item.group is not None:
                owner["group"] = item.group
            ownership[item.path] = owner
    modes = {
        file.path: {"mode": file.mode}
        for file in customizations.files
        if file.mode is not None
    }
    if ownership:
        stages.append(Stage(type="org.osbuild.chown", options={"items": ownership}))
    if modes:
        stages.append(Stage(type="org.osbuild.chmod", options={"items": modes}))
    return stages


def fstab_stage(table: PartitionTable) -> Stage:
    filesystems = []
    for partition in table.partitions:
        filesystem = partition.filesystem
        if filesystem is None:
            continue
        filesystems.append(
            {
                "uuid": filesystem.uuid,
                "vfs_type": filesystem.type,
                "path": filesystem.mountpoint,
                "options": filesystem.fstab_options,
                "freq": filesystem.fstab_freq,
                "passno": filesystem.fstab_passno,
            }
        )
    return Stage(type="org.osbuild.fstab", options={"filesystems": filesystems})


def _filesystem_uuid(table: PartitionTable, mountpoint: str) -> str:
    index = table.find_mountpoint(mountpoint)
    if index is None:
        return ""
    return table.partitions[index].filesystem.uuid


def bootloader_stages(
    table: PartitionTable, arch: str, boot_mode: BootMode, kernel_options: str, product: str
) -> List[Stage]:
    """Bootloader configuration of an OS tree."""
    if arch == "s390x":
        return [
            Stage(
                type="org.osbuild.zipl",
                options={"timeout": 0},
            )
        ]
    options: Dict[str, Any] = {
        "root_fs_uuid": _filesystem_uuid(table, "/"),
        "kernel_opts": kernel_options,
    }
    boot_uuid = _filesystem_uuid(table, "/boot")
    if boot_uuid:
        options["boot_fs_uuid"] = boot_uuid
    if boot_mode in (BootMode.UEFI, BootMode.HYBRID):
        options["uefi"] = {"vendor": product.lower(), "unified": True}
    if boot_mode in (BootMode.LEGACY, BootMode.HYBRID):
        options["legacy"] = "powerpc-ieee1275" if arch == "ppc64le" else "i386-pc"
    return [Stage(type="org.osbuild.grub2", options=options)]


def image_stages(
    table: PartitionTable, filename: str, arch: str, boot_mode: BootMode, tree: str = "os"
) -> List[Stage]:
    """Create a disk image file, partition it and fill its filesystems."""
    device = {
        "device": {
            "type": "org.osbuild.loopback",
            "options": {"filename": filename, "size": table.size // 512, "lock": True},
        }
    }
    stages = [
        Stage(type="org.osbuild.truncate", options={"filename": filename, "size": str(table.size)}),
        Stage(
            type="org.osbuild.sfdisk",
            options={
                "label": table.type.value,
                "uuid": table.uuid,
                "partitions": [
                    _sfdisk_partition(partition) for partition in table.partitions
                ],
            },
            devices=device,
        ),
    ]
    mounts = []
    root_mount = "part0"
    for index, partition in enumerate(table.partitions):
        filesystem = partition.filesystem
        if filesystem is None:
            continue
        part_device = {
            "device": {
                "type": "org.osbuild.loopback",
                "options": {
                    "filename": filename,
                    "start": partition.start // 512,
                    "size": partition.size // 512,
                },
            }
        }
        fs_module = _FS_MODULE.get(filesystem.type, filesystem.type)
        options: Dict[str, Any] = {"uuid": filesystem.uuid}
        if filesystem.label:
            options["label"] = filesystem.label
        stages.append(
            Stage(type=f"org.osbuild.mkfs.{fs_module}", options=options, devices=part_device)
        )
        mounts.append(
            {
                "name": f"part{index}",
                "type": f"org.osbuild.{fs_module}",
                "source": f"part{index}",
                "target": filesystem.mountpoint,
            }
        )
        if filesystem.mountpoint == "/":
            root_mount = f"part{index}"

    # Parents are mounted before children.
    mounts.sort(key=lambda mount: len(mount["target"]))
    stages.append(
        Stage(
            type="org.osbuild.copy",
            options={"paths": [{"from": "input://root-tree/", "to": f"mount://{root_mount}/"}]},
            inputs={"root-tree": tree_input(tree)["tree"]},
            mounts=mounts,
        )
    )
    if arch == "x86_64" and boot_mode in (BootMode.LEGACY, BootMode.HYBRID):
        stages.append(
            Stage(
                type="org.osbuild.grub2.inst",
                options={"filename": filename, "platform": "i386-pc", "location": 2048},
            )
        )
    return stages


def _sfdisk_partition(partition) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "start": partition.start // 512,
        "size": partition.size // 512,
        "type": partition.type,
    }
    if partition.uuid:
        entry["uuid"] = partition.uuid
    if partition.bootable:
        entry["bootable"] = True
    return entry


def qemu_stage(pipeline: str, source: str, filename: str, fmt: str) -> Stage:
    """Convert a raw image with qemu-img."""
    format_options: Dict[str, Any] = {"type": fmt}
    if fmt == "qcow2":
        format_options["compat"] = "1.1"
    elif fmt == "vpc":
        format_options["force_size"] = True
    elif fmt == "vmdk":
        format_options["subformat"] = "streamOptimized"
    return Stage(
        type="org.osbuild.qemu",
        options={"filename": filename, "format": format_options},
        inputs=file_input(pipeline, source),
    )


def xz_stage(pipeline: str, source: str, filename: str) -> Stage:
    return Stage(
        type="org.osbuild.xz",
        options={"filename": filename},
        inputs=file_input(pipeline, source, name="file"),
    )


def tar_stage(pipeline: str, filename: str) -> Stage:
    return Stage(
        type="org.osbuild.tar",
        options={"filename": filename},
        inputs=tree_input(pipeline),
    )


def oci_archive_stage(pipeline: str, filename: str, arch: str, cmd: Sequence[str]) -> Stage:
    return Stage(
        type="org.osbuild.oci-archive",
        options={"architecture": arch, "filename": filename, "config": {"Cmd": list(cmd)}},
        inputs={"base": tree_input(pipeline)["tree"]},
    )


def ostree_pull_stage(repo: str, ref: str, source_pipeline: Optional[str] = None) -> Stage:
    """Pull a commit, either from another pipeline or from the sources."""
    if source_pipeline is not None:
        commits = {
            "type": "org.osbuild.ostree",
            "origin": "org.osbuild.pipeline",
            "references": {f"name:{source_pipeline}": {"ref": ref}},
        }
    else:
        commits = {
            "type": "org.osbuild.ostree",
            "origin": "org.osbuild.source",
            "references": {ref: {"ref": ref}},
        }
    return Stage(type="org.osbuild.ostree.pull", options={"repo": repo}, inputs={"commits": commits})
