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

"""Domain services for the Manifest module.

ManifestBuilder dispatches on the pipeline family of an image type. Each
family assembles its own ordered pipelines from shared helpers.
"""

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple

from core.blueprint.entities import Blueprint, Customizations
from core.disk.entities import PartitionTable
from core.disk.exceptions import DiskDomainError
from core.disk.services import PartitionPlanner
from core.distro.value_objects import BootMode, ImageOptions, PipelineFamily
from core.manifest import stages as st
from core.manifest.entities import Manifest, Pipeline
from core.manifest.value_objects import OSTreeSource, Stage
from core.packagesets.entities import PackageSetChains
from core.packagesets.value_objects import PackageSet, Repository

if TYPE_CHECKING:
    from core.distro.entities import ImageType

logger = logging.getLogger(__name__)

OSTREE_OSNAME = "fedora-iot"
OSTREE_REMOTE = "fedora-iot"

# Pipeline receiving blueprint packages, by family.
_BLUEPRINT_PIPELINE: Dict[PipelineFamily, str] = {
    PipelineFamily.DISK: "os",
    PipelineFamily.CONTAINER: "os",
    PipelineFamily.OSTREE_COMMIT: "os",
    PipelineFamily.OSTREE_CONTAINER: "os",
    PipelineFamily.IMAGE_INSTALLER: "os",
    PipelineFamily.LIVE_INSTALLER: "anaconda-tree",
}

_EFI_ARCH_NAMES = {"x86_64": "X64", "aarch64": "AA64"}


@dataclass(frozen=True)
class _BuildContext:
    """Inputs shared by the pipeline assemblers of one build."""

    image_type: "ImageType"
    blueprint: Blueprint
    customizations: Customizations
    options: ImageOptions
    repositories: Tuple[Repository, ...]
    chains: PackageSetChains
    partition_table: Optional[PartitionTable]

    @property
    def arch(self) -> str:
        return self.image_type.arch.name

    @property
    def distribution(self):
        return self.image_type.arch.distribution

    def repositories_for(self, pipeline: str) -> Tuple[Repository, ...]:
        return tuple(repo for repo in self.repositories if repo.applies_to(pipeline))

    def ostree_ref(self) -> str:
        ostree = self.options.ostree
        if ostree is not None and ostree.ref:
            return ostree.ref
        return self.image_type.ostree_ref()

    def iso_label(self) -> str:
        distribution = self.distribution
        return f"{distribution.product}-{distribution.releasever}-BaseOS-{self.arch}"


class ManifestBuilder:
    """Assembles the manifest of an image type from a validated request."""

    def __init__(self, planner: Optional[PartitionPlanner] = None):
        """Initialize builder with the partition planner to use."""
        self._planner = planner if planner is not None else PartitionPlanner()
        self._assemblers: Dict[
            PipelineFamily, Callable[[_BuildContext], Tuple[List[Pipeline], List[OSTreeSource]]]
        ] = {
            PipelineFamily.DISK: self._disk,
            PipelineFamily.CONTAINER: self._container,
            PipelineFamily.OSTREE_COMMIT: self._ostree_commit,
            PipelineFamily.OSTREE_CONTAINER: self._ostree_container,
            PipelineFamily.OSTREE_DISK: self._ostree_disk,
            PipelineFamily.IMAGE_INSTALLER: self._image_installer,
            PipelineFamily.LIVE_INSTALLER: self._live_installer,
            PipelineFamily.OSTREE_INSTALLER: self._ostree_installer,
            PipelineFamily.OSTREE_SIMPLIFIED_INSTALLER: self._ostree_simplified_installer,
        }

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def build(
        self,
        image_type: "ImageType",
        blueprint: Blueprint,
        options: ImageOptions,
        repositories: Sequence[Repository] = (),
        seed: int = 0,
        correlation_id: str = "",
    ) -> Manifest:
        """Build the manifest of a validated request.

        Args:
            image_type: Target image type.
            blueprint: Requested content and customizations.
            options: Image options.
            repositories: Repositories bound to the package sets.
            seed: Seed of every generated identifier.
            correlation_id: Request correlation ID for error reporting.

        Returns:
            The assembled Manifest.

        Raises:
            DiskDomainError: If the partition table cannot be planned.
        """
        rng = random.Random(seed)
        customizations = blueprint.get_customizations()

        partition_table = None
        if image_type.family.partitioned:
            try:
                partition_table = self._planner.plan(
                    image_type.partition_table,
                    customizations.filesystem,
                    image_type.size(options.size),
                    rng=rng,
                    strict_size=bool(options.size),
                )
            except DiskDomainError as exc:
                exc.correlation_id = correlation_id
                raise

        context = _BuildContext(
            image_type=image_type,
            blueprint=blueprint,
            customizations=customizations,
            options=options,
            repositories=tuple(repositories),
            chains=self._package_set_chains(image_type, blueprint, tuple(repositories)),
            partition_table=partition_table,
        )
        pipelines, ostree_sources = self._assemblers[image_type.family](context)
        manifest = Manifest(pipelines=tuple(pipelines), ostree_sources=tuple(ostree_sources))
        logger.info(
            "Manifest assembled: image_type=%s, arch=%s, pipelines=%s, correlation_id=%s",
            image_type.name,
            image_type.arch.name,
            ",".join(manifest.pipeline_names()),
            correlation_id,
        )
        return manifest

    @staticmethod
    def _package_set_chains(
        image_type: "ImageType", blueprint: Blueprint, repositories: Tuple[Repository, ...]
    ) -> PackageSetChains:
        chains = PackageSetChains()
        chains.add("build", image_type.build_package_set())
        for pipeline, package_set in image_type.payload_package_sets():
            chains.add(pipeline, package_set)
        target = _BLUEPRINT_PIPELINE.get(image_type.family)
        if target is not None:
            chains.add(target, PackageSet(include=tuple(blueprint.get_package_specs())))
        return chains.bind_repositories(repositories)

    # Shared pipelines

    @staticmethod
    def _pipeline(context: _BuildContext, name: str, stages: List[Stage]) -> Pipeline:
        return Pipeline(
            name=name,
            stages=tuple(stages),
            build="build",
            package_set_chain=tuple(context.chains.chain(name)),
        )

    @staticmethod
    def _build_pipeline(context: _BuildContext) -> Pipeline:
        return Pipeline(
            name="build",
            stages=tuple(st.build_root_stages(context.repositories_for("build"))),
            runner=context.distribution.runner,
            package_set_chain=tuple(context.chains.chain("build")),
        )

    def _os_pipeline(self, context: _BuildContext, ostree: bool = False) -> Pipeline:
        image_type = context.image_type
        customizations = context.customizations
        table = context.partition_table
        kernel_options = image_type.kernel_options(context.blueprint)

        stages = [st.rpm_stage(context.repositories_for("os"))]
        if table is not None:
            root_index = table.find_mountpoint("/")
            stages.append(
                st.kernel_cmdline_stage(
                    table.partitions[root_index].filesystem.uuid, kernel_options
                )
            )
        stages.extend(st.customization_stages(customizations))
        systemd = self._systemd_stage(context)
        if systemd is not None:
            stages.append(systemd)
        if table is not None:
            stages.append(st.fstab_stage(table))
            stages.extend(
                st.bootloader_stages(
                    table,
                    context.arch,
                    image_type.boot_mode,
                    kernel_options,
                    context.distribution.product,
                )
            )
        stages.append(st.selinux_stage())
        if ostree:
            stages.append(
                Stage(
                    type="org.osbuild.ostree.preptree",
                    options={"etc_group_members": ["wheel", "docker"]},
                )
            )
        return self._pipeline(context, "os", stages)

    @staticmethod
    def _systemd_stage(context: _BuildContext) -> Optional[Stage]:
        services = context.customizations.services
        enabled = list(context.image_type.config.enabled_services)
        disabled: List[str] = []
        masked: List[str] = []
        if services is not None:
            enabled.extend(unit for unit in services.enabled if unit not in enabled)
            disabled = [unit for unit in services.disabled if unit not in enabled]
            masked = list(services.masked)
        return st.systemd_stage(enabled, disabled, masked)

    @staticmethod
    def _image_pipeline(context: _BuildContext, filename: str, tree: str) -> Pipeline:
        return Pipeline(
            name="image",
            stages=tuple(
                st.image_stages(
                    context.partition_table,
                    filename,
                    context.arch,
                    context.image_type.boot_mode,
                    tree=tree,
                )
            ),
            build="build",
        )

    @staticmethod
    def _export_pipelines(context: _BuildContext, source: str, source_file: str) -> List[Pipeline]:
        export = context.image_type.config.export
        filename = context.image_type.filename
        if export in ("qcow2", "vpc", "vmdk"):
            return [
                Pipeline(
                    name=export,
                    stages=(st.qemu_stage(source, source_file, filename, export),),
                    build="build",
                )
            ]
        if export == "xz":
            return [
                Pipeline(
                    name="xz",
                    stages=(st.xz_stage(source, source_file, filename),),
                    build="build",
                )
            ]
        if export == "ova":
            return [
                Pipeline(
                    name="vmdk",
                    stages=(st.qemu_stage(source, source_file, "image.vmdk", "vmdk"),),
                    build="build",
                ),
                Pipeline(
                    name="ovf",
                    stages=(
                        Stage(
                            type="org.osbuild.copy",
                            options={
                                "paths": [{"from": "input://file/image.vmdk", "to": "tree:///"}]
                            },
                            inputs=st.file_input("vmdk", "image.vmdk", name="file"),
                        ),
                        Stage(type="org.osbuild.ovf", options={"vmdk": "image.vmdk"}),
                    ),
                    build="build",
                ),
                Pipeline(
                    name="archive",
                    stages=(
                        Stage(
                            type="org.osbuild.tar",
                            options={
                                "filename": filename,
                                "format": "ustar",
                                "paths": ["image.ovf", "image.mf", "image.vmdk"],
                            },
                            inputs=st.tree_input("ovf"),
                        ),
                    ),
                    build="build",
                ),
            ]
        return []

    def _ostree_deployment_pipeline(self, context: _BuildContext) -> Pipeline:
        ref = context.ostree_ref()
        deployment = {"osname": OSTREE_OSNAME, "ref": ref}
        ostree = context.options.ostree
        remote_url = ostree.contenturl or ostree.url

        stages = [
            Stage(type="org.osbuild.ostree.init-fs"),
            st.ostree_pull_stage("/ostree/repo", ref),
            Stage(type="org.osbuild.ostree.os-init", options={"osname": OSTREE_OSNAME}),
            Stage(
                type="org.osbuild.ostree.config",
                options={
                    "repo": "/ostree/repo",
                    "config": {"sysroot": {"readonly": True, "bootloader": "none"}},
                },
            ),
            Stage(type="org.osbuild.mkdir", options={"paths": [{"path": "/boot/efi", "mode": 0o700}]}),
            Stage(
                type="org.osbuild.ostree.deploy",
                options={
                    "osname": OSTREE_OSNAME,
                    "ref": ref,
                    "remote": OSTREE_REMOTE,
                    "mounts": ["/boot", "/boot/efi"],
                    "rootfs": {"label": "root"},
                    "kernel_opts": context.image_type.kernel_options(context.blueprint).split(),
                },
            ),
            Stage(
                type="org.osbuild.ostree.remotes",
                options={
                    "repo": "/ostree/repo",
                    "remotes": [{"name": OSTREE_REMOTE, "url": remote_url}],
                },
            ),
            Stage(type="org.osbuild.ostree.fillvar", options={"deployment": deployment}),
        ]
        customizations = context.customizations
        if customizations.groups:
            stages.append(st.groups_stage(customizations))
        if customizations.users:
            stages.append(st.users_stage(customizations))
        stages.extend(st.directory_and_file_stages(customizations))
        systemd = self._systemd_stage(context)
        if systemd is not None:
            stages.append(systemd)
        stages.append(st.fstab_stage(context.partition_table))
        stages.extend(
            st.bootloader_stages(
                context.partition_table,
                context.arch,
                BootMode.UEFI,
                "",
                context.distribution.product,
            )
        )
        stages.append(Stage(type="org.osbuild.ostree.selinux", options={"deployment": deployment}))
        return Pipeline(name="ostree-deployment", stages=tuple(stages), build="build")

    @staticmethod
    def _commit_source(context: _BuildContext) -> OSTreeSource:
        ostree = context.options.ostree
        return OSTreeSource(url=ostree.url, ref=context.ostree_ref(), contenturl=ostree.contenturl)

    # Installer pipelines

    def _anaconda_pipeline(self, context: _BuildContext, live: bool = False) -> Pipeline:
        distribution = context.distribution
        stages = [
            st.rpm_stage(context.repositories_for("anaconda-tree")),
            Stage(
                type="org.osbuild.buildstamp",
                options={
                    "arch": context.arch,
                    "product": distribution.product,
                    "version": distribution.releasever,
                    "final": True,
                    "variant": "",
                    "bugurl": "",
                },
            ),
            Stage(type="org.osbuild.locale", options={"language": "en_US.UTF-8"}),
        ]
        if live:
            stages.append(
                Stage(type="org.osbuild.systemd", options={"enabled_services": ["livesys.service"]})
            )
        else:
            stages.append(
                Stage(
                    type="org.osbuild.users",
                    options={
                        "users": {
                            "root": {"password": ""},
                            "install": {
                                "uid": 0,
                                "gid": 0,
                                "home": "/root",
                                "shell": "/usr/libexec/anaconda/run-anaconda",
                                "password": "",
                            },
                        }
                    },
                )
            )
            stages.append(
                Stage(
                    type="org.osbuild.anaconda",
                    options={"kickstart-modules": ["org.fedoraproject.Anaconda.Modules.Users"]},
                )
            )
        stages.extend(
            [
                Stage(
                    type="org.osbuild.lorax-script",
                    options={
                        "path": "99-generic/runtime-postinstall.tmpl",
                        "basearch": context.arch,
                    },
                ),
                Stage(
                    type="org.osbuild.dracut",
                    options={
                        "modules": ["anaconda", "dmsquash-live", "livenet", "qemu", "rdma"],
                    },
                ),
                st.selinux_stage(),
            ]
        )
        return self._pipeline(context, "anaconda-tree", stages)

    @staticmethod
    def _efiboot_pipeline(context: _BuildContext, kernel_options: Sequence[str]) -> Pipeline:
        distribution = context.distribution
        return Pipeline(
            name="efiboot-tree",
            stages=(
                Stage(
                    type="org.osbuild.grub2.iso",
                    options={
                        "product": {
                            "name": distribution.product,
                            "version": distribution.releasever,
                        },
                        "kernel": {"dir": "/images/pxeboot", "opts": list(kernel_options)},
                        "isolabel": context.iso_label(),
                        "architectures": [_EFI_ARCH_NAMES.get(context.arch, context.arch.upper())],
                        "vendor": distribution.product.lower(),
                    },
                ),
            ),
            build="build",
        )

    @staticmethod
    def _kickstart_users(customizations: Customizations) -> Dict[str, Dict]:
        options: Dict[str, Dict] = {}
        if customizations.users:
            options["users"] = st.users_stage(customizations).options["users"]
        if customizations.groups:
            options["groups"] = st.groups_stage(customizations).options["groups"]
        return options

    def _bootiso_tree_pipeline(
        self, context: _BuildContext, squashfs_tree: str, extra: Sequence[Stage]
    ) -> Pipeline:
        stages = [
            Stage(
                type="org.osbuild.squashfs",
                options={"filename": "images/install.img", "compression": {"method": "lz4"}},
                inputs=st.tree_input(squashfs_tree),
            ),
            Stage(
                type="org.osbuild.copy",
                options={
                    "paths": [{"from": "input://tree/EFI", "to": "tree:///EFI"}],
                },
                inputs=st.tree_input("efiboot-tree"),
            ),
            Stage(
                type="org.osbuild.discinfo",
                options={
                    "basearch": context.arch,
                    "release": f"{context.distribution.product} {context.distribution.releasever}",
                },
            ),
        ]
        stages.extend(extra)
        return Pipeline(name="bootiso-tree", stages=tuple(stages), build="build")

    @staticmethod
    def _bootiso_pipeline(context: _BuildContext) -> Pipeline:
        options = {
            "filename": context.image_type.filename,
            "volid": context.iso_label(),
            "efi": "images/efiboot.img",
        }
        if context.arch == "x86_64":
            options["isohybridmbr"] = "/usr/share/syslinux/isohdpfx.bin"
        return Pipeline(
            name="bootiso",
            stages=(
                Stage(
                    type="org.osbuild.xorrisofs",
                    options=options,
                    inputs=st.tree_input("bootiso-tree"),
                ),
                Stage(
                    type="org.osbuild.implantisomd5",
                    options={"filename": context.image_type.filename},
                ),
            ),
            build="build",
        )

    @staticmethod
    def _installer_kernel_options(context: _BuildContext) -> List[str]:
        label = context.iso_label()
        return [f"inst.stage2=hd:LABEL={label}", f"inst.ks=hd:LABEL={label}:/osbuild.ks"]

    # Family assemblers

    def _disk(self, context: _BuildContext) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        export = context.image_type.config.export
        image_file = context.image_type.filename if export == "raw" else "disk.raw"
        pipelines = [
            self._build_pipeline(context),
            self._os_pipeline(context),
            self._image_pipeline(context, image_file, tree="os"),
        ]
        pipelines.extend(self._export_pipelines(context, "image", image_file))
        return pipelines, []

    def _container(self, context: _BuildContext) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        filename = context.image_type.filename
        if context.image_type.config.export == "archive":
            export = Pipeline(name="archive", stages=(st.tar_stage("os", filename),), build="build")
        else:
            export = Pipeline(
                name="container",
                stages=(st.oci_archive_stage("os", filename, context.arch, ["/bin/bash"]),),
                build="build",
            )
        return [self._build_pipeline(context), self._os_pipeline(context), export], []

    def _commit_pipeline(self, context: _BuildContext) -> Tuple[Pipeline, List[OSTreeSource]]:
        ostree = context.options.ostree
        options = {
            "ref": context.ostree_ref(),
            "os_version": context.distribution.releasever,
        }
        stages = [Stage(type="org.osbuild.ostree.init", options={"path": "/repo"})]
        sources: List[OSTreeSource] = []
        if ostree is not None and ostree.parent and ostree.url:
            options["parent"] = ostree.parent
            stages.append(st.ostree_pull_stage("/repo", ostree.parent))
            sources.append(OSTreeSource(url=ostree.url, ref=ostree.parent))
        stages.append(
            Stage(type="org.osbuild.ostree.commit", options=options, inputs=st.tree_input("os"))
        )
        return Pipeline(name="ostree-commit", stages=tuple(stages), build="build"), sources

    def _ostree_commit(self, context: _BuildContext) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        commit, sources = self._commit_pipeline(context)
        archive = Pipeline(
            name="commit-archive",
            stages=(st.tar_stage("ostree-commit", context.image_type.filename),),
            build="build",
        )
        return [
            self._build_pipeline(context),
            self._os_pipeline(context, ostree=True),
            commit,
            archive,
        ], sources

    def _ostree_container(
        self, context: _BuildContext
    ) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        commit, sources = self._commit_pipeline(context)
        repo = "/usr/share/nginx/html/repo"
        container_tree = self._pipeline(
            context,
            "container-tree",
            [
                st.rpm_stage(context.repositories_for("container-tree")),
                st.selinux_stage(),
                Stage(type="org.osbuild.ostree.init", options={"path": repo}),
                st.ostree_pull_stage(repo, context.ostree_ref(), source_pipeline="ostree-commit"),
                Stage(
                    type="org.osbuild.nginxconf",
                    options={"path": "/etc/nginx.conf", "config": {"listen": "8080"}},
                ),
            ],
        )
        container = Pipeline(
            name="container",
            stages=(
                st.oci_archive_stage(
                    "container-tree",
                    context.image_type.filename,
                    context.arch,
                    ["nginx", "-c", "/etc/nginx.conf"],
                ),
            ),
            build="build",
        )
        return [
            self._build_pipeline(context),
            self._os_pipeline(context, ostree=True),
            commit,
            container_tree,
            container,
        ], sources

    def _ostree_disk(self, context: _BuildContext) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        pipelines = [
            self._build_pipeline(context),
            self._ostree_deployment_pipeline(context),
            self._image_pipeline(context, "image.raw", tree="ostree-deployment"),
        ]
        pipelines.extend(self._export_pipelines(context, "image", "image.raw"))
        return pipelines, [self._commit_source(context)]

    def _image_installer(
        self, context: _BuildContext
    ) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        kickstart = {"path": "/osbuild.ks", "liveimg": {"url": "file:///run/install/repo/liveimg.tar.gz"}}
        kickstart.update(self._kickstart_users(context.customizations))
        extra = [
            Stage(
                type="org.osbuild.tar",
                options={"filename": "liveimg.tar.gz"},
                inputs=st.tree_input("os"),
            ),
            Stage(type="org.osbuild.kickstart", options=kickstart),
        ]
        return [
            self._build_pipeline(context),
            self._anaconda_pipeline(context),
            self._os_pipeline(context),
            self._efiboot_pipeline(context, self._installer_kernel_options(context)),
            self._bootiso_tree_pipeline(context, "anaconda-tree", extra),
            self._bootiso_pipeline(context),
        ], []

    def _live_installer(self, context: _BuildContext) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        kernel_options = [f"root=live:CDLABEL={context.iso_label()}", "rd.live.image", "quiet", "rhgb"]
        return [
            self._build_pipeline(context),
            self._anaconda_pipeline(context, live=True),
            self._efiboot_pipeline(context, kernel_options),
            self._bootiso_tree_pipeline(context, "anaconda-tree", []),
            self._bootiso_pipeline(context),
        ], []

    def _ostree_installer(
        self, context: _BuildContext
    ) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        ref = context.ostree_ref()
        kickstart = {
            "path": "/osbuild.ks",
            "ostree": {
                "osname": OSTREE_OSNAME,
                "url": "file:///ostree/repo",
                "ref": ref,
                "remote": OSTREE_REMOTE,
                "gpg": False,
            },
        }
        kickstart.update(self._kickstart_users(context.customizations))
        extra = [
            Stage(type="org.osbuild.ostree.init", options={"path": "/ostree/repo"}),
            st.ostree_pull_stage("/ostree/repo", ref),
            Stage(type="org.osbuild.kickstart", options=kickstart),
        ]
        return [
            self._build_pipeline(context),
            self._anaconda_pipeline(context),
            self._efiboot_pipeline(context, self._installer_kernel_options(context)),
            self._bootiso_tree_pipeline(context, "anaconda-tree", extra),
            self._bootiso_pipeline(context),
        ], [self._commit_source(context)]

    def _ostree_simplified_installer(
        self, context: _BuildContext
    ) -> Tuple[List[Pipeline], List[OSTreeSource]]:
        customizations = context.customizations
        raw_file = "image.raw"
        xz_file = "image.raw.xz"

        coi_tree = self._pipeline(
            context,
            "coi-tree",
            [
                st.rpm_stage(context.repositories_for("coi-tree")),
                Stage(type="org.osbuild.locale", options={"language": "en_US.UTF-8"}),
                Stage(
                    type="org.osbuild.systemd",
                    options={"enabled_services": ["coreos-installer.service"]},
                ),
                Stage(
                    type="org.osbuild.dracut",
                    options={"modules": ["coreos-installer", "fdo", "ignition"]},
                ),
                st.selinux_stage(),
            ],
        )

        kernel_options = [
            "rd.neednet=1",
            "coreos.inst.crypt_root=1",
            "coreos.inst.isoroot=" + context.iso_label(),
            "coreos.inst.install_dev=" + customizations.installation_device,
            "coreos.inst.image_file=/run/media/iso/" + xz_file,
            "coreos.inst.insecure",
        ]
        fdo = customizations.fdo
        if fdo is not None:
            kernel_options.append("fdo.manufacturing_server_url=" + fdo.manufacturing_server_url)
            if fdo.diun_pub_key_insecure:
                kernel_options.append("fdo.diun_pub_key_insecure=true")
            if fdo.diun_pub_key_hash:
                kernel_options.append("fdo.diun_pub_key_hash=" + fdo.diun_pub_key_hash)
            if fdo.diun_pub_key_root_certs:
                kernel_options.append("fdo.diun_pub_key_root_certs=/fdo_diun_pub_key_root_certs.pem")
        ignition = customizations.ignition
        if ignition is not None and ignition.firstboot_url:
            kernel_options.append("ignition.config.url=" + ignition.firstboot_url)
        kernel_options.extend(context.image_type.kernel_options(context.blueprint).split())

        extra = [
            Stage(
                type="org.osbuild.copy",
                options={"paths": [{"from": f"input://file/{xz_file}", "to": f"tree:///{xz_file}"}]},
                inputs=st.file_input("xz", xz_file, name="file"),
            )
        ]
        if ignition is not None and ignition.embedded_config:
            extra.append(
                Stage(
                    type="org.osbuild.inline-files",
                    options={"files": [{"path": "/ignition_config", "data": ignition.embedded_config}]},
                )
            )

        pipelines = [
            self._build_pipeline(context),
            self._ostree_deployment_pipeline(context),
            self._image_pipeline(context, raw_file, tree="ostree-deployment"),
            Pipeline(name="xz", stages=(st.xz_stage("image", raw_file, xz_file),), build="build"),
            coi_tree,
            self._efiboot_pipeline(context, kernel_options),
            self._bootiso_tree_pipeline(context, "coi-tree", extra),
            self._bootiso_pipeline(context),
        ]
        return pipelines, [self._commit_source(context)]
