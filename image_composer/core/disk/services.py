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

"""Domain services for the Disk module."""

import logging
import random
import uuid
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence

from core.blueprint.value_objects import FilesystemCustomization
from core.disk.entities import PartitionTable
from core.disk.exceptions import (
    DirtyMountpointError,
    InsufficientPartitionSizeError,
    UnsupportedMountpointError,
)
from core.disk.value_objects import (
    DEFAULT_MOUNTPOINT_POLICY,
    GiB,
    MiB,
    Filesystem,
    MountpointPolicy,
    Partition,
    PartitionTableType,
    PartitionTypes,
    is_clean_mountpoint,
)

logger = logging.getLogger(__name__)

REQUIRED_SIZES: Mapping[str, int] = {"/": 1 * GiB, "/usr": 2 * GiB}

# First partition starts at 1 MiB; GPT keeps a backup header at the end.
_HEADER_SIZE = MiB
_GPT_FOOTER_SIZE = MiB

# A DOS label has four primary slots. Past that, the last slot becomes an
# extended partition and every logical partition in it is preceded by an
# extended boot record.
_DOS_PRIMARY_SLOTS = 4
_EBR_SIZE = MiB


def _unique(paths: Sequence[str]) -> List[str]:
    seen = set()
    result = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result


def _align_up(value: int, alignment: int = MiB) -> int:
    return ((value + alignment - 1) // alignment) * alignment


def check_mountpoints(
    customizations: Sequence[FilesystemCustomization],
    policy: MountpointPolicy = DEFAULT_MOUNTPOINT_POLICY,
) -> None:
    """Check custom mountpoints against a policy.

    Dirty paths are reported before unsupported ones. Each error lists
    every offending path in input order, without duplicates.

    Raises:
        DirtyMountpointError: If any path is relative or not normalized.
        UnsupportedMountpointError: If any path is outside the policy.
    """
    mountpoints = [fs.mountpoint for fs in customizations]

    dirty = _unique([path for path in mountpoints if not is_clean_mountpoint(path)])
    if dirty:
        raise DirtyMountpointError(dirty)

    unsupported = _unique([path for path in mountpoints if not policy.allows(path)])
    if unsupported:
        raise UnsupportedMountpointError(unsupported)


class PartitionPlanner:
    """Merges filesystem customizations into a default partition table."""

    def __init__(self, policy: MountpointPolicy = DEFAULT_MOUNTPOINT_POLICY):
        """Initialize planner with the mountpoint policy to enforce."""
        self._policy = policy

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def plan(
        self,
        base_table: PartitionTable,
        customizations: Sequence[FilesystemCustomization],
        image_size: int,
        required_sizes: Optional[Mapping[str, int]] = None,
        rng: Optional[random.Random] = None,
        strict_size: bool = False,
    ) -> PartitionTable:
        """Plan the final partition table of a disk image.

        Args:
            base_table: Default table of the image type and architecture.
            customizations: Requested mountpoints and minimum sizes.
            image_size: Target image size in bytes.
            required_sizes: Minimum size per mountpoint; defaults to
                REQUIRED_SIZES.
            rng: Random source for identifiers.
            strict_size: Reject, rather than grow, an image size that
                cannot hold the partitions.

        Returns:
            A new PartitionTable with offsets, sizes and identifiers set.

        Raises:
            DirtyMountpointError: If a mountpoint is not clean.
            UnsupportedMountpointError: If a mountpoint is not allowed.
            InsufficientPartitionSizeError: If strict_size is set and
                image_size is too small.
        """
        check_mountpoints(customizations, self._policy)

        required = dict(REQUIRED_SIZES if required_sizes is None else required_sizes)
        rng = rng if rng is not None else random.Random(0)

        requested: Dict[str, int] = {}
        for fs in customizations:
            requested[fs.mountpoint] = max(requested.get(fs.mountpoint, 0), fs.min_size)

        partitions = self._grow_existing(base_table, requested, required)
        partitions = self._add_new(base_table, partitions, requested, required)

        logical = self._logical_count(base_table.type, partitions)
        footer = _GPT_FOOTER_SIZE if base_table.type == PartitionTableType.GPT else 0
        needed = _HEADER_SIZE + sum(p.size for p in partitions) + logical * _EBR_SIZE + footer

        total = _align_up(image_size)
        if total < needed:
            if strict_size:
                raise InsufficientPartitionSizeError(needed, image_size)
            logger.debug("Growing image from %d to %d bytes", total, needed)
            total = needed
        elif total > needed:
            root_index = self._root_index(partitions)
            root = partitions[root_index]
            partitions[root_index] = replace(root, size=root.size + total - needed)

        if logical:
            partitions = self._nest_logical(partitions, logical)
        return self._assign_layout(base_table.type, partitions, total, rng)

    @staticmethod
    def _logical_count(table_type: PartitionTableType, partitions: List[Partition]) -> int:
        """Return how many trailing partitions must be logical ones."""
        if table_type != PartitionTableType.DOS or len(partitions) <= _DOS_PRIMARY_SLOTS:
            return 0
        return len(partitions) - (_DOS_PRIMARY_SLOTS - 1)

    @staticmethod
    def _nest_logical(partitions: List[Partition], logical: int) -> List[Partition]:
        primaries = partitions[:-logical]
        logicals = partitions[-logical:]
        extended = Partition(
            size=sum(p.size for p in logicals) + logical * _EBR_SIZE,
            type=PartitionTypes.DOS_EXTENDED,
        )
        logger.debug("Placing %d partitions in an extended partition", logical)
        return primaries + [extended] + logicals

    @staticmethod
    def _root_index(partitions: List[Partition]) -> int:
        for index, partition in enumerate(partitions):
            if partition.mountpoint == "/":
                return index
        raise ValueError("Partition table has no root partition")

    @staticmethod
    def _grow_existing(
        base_table: PartitionTable,
        requested: Dict[str, int],
        required: Mapping[str, int],
    ) -> List[Partition]:
        partitions = []
        for partition in base_table.partitions:
            mountpoint = partition.mountpoint
            if mountpoint is not None:
                size = max(
                    partition.size,
                    requested.get(mountpoint, 0),
                    required.get(mountpoint, 0),
                )
                partition = replace(partition, size=_align_up(size))
            partitions.append(partition)
        return partitions

    def _add_new(
        self,
        base_table: PartitionTable,
        partitions: List[Partition],
        requested: Dict[str, int],
        required: Mapping[str, int],
    ) -> List[Partition]:
        existing = set(base_table.mountpoints())
        insert_at = self._root_index(partitions)
        part_type = (
            PartitionTypes.FILESYSTEM_DATA
            if base_table.type == PartitionTableType.GPT
            else PartitionTypes.DOS_LINUX
        )
        for mountpoint, size in requested.items():
            if mountpoint in existing:
                continue
            size = max(size, required.get(mountpoint, 0), MiB)
            partitions.insert(
                insert_at,
                Partition(
                    size=_align_up(size),
                    type=part_type,
                    filesystem=Filesystem(type="ext4", mountpoint=mountpoint),
                ),
            )
            insert_at += 1
        return partitions

    @staticmethod
    def _assign_layout(
        table_type: PartitionTableType,
        partitions: List[Partition],
        total: int,
        rng: random.Random,
    ) -> PartitionTable:
        if table_type == PartitionTableType.GPT:
            table_uuid = _random_uuid(rng)
        else:
            table_uuid = f"0x{rng.getrandbits(32):08x}"

        laid_out = []
        start = _HEADER_SIZE
        in_extended = False
        for partition in partitions:
            if partition.type == PartitionTypes.DOS_EXTENDED:
                laid_out.append(replace(partition, start=start))
                start += _EBR_SIZE
                in_extended = True
                continue
            part_uuid = _random_uuid(rng) if table_type == PartitionTableType.GPT else ""
            filesystem = partition.filesystem
            if filesystem is not None:
                if filesystem.type == "vfat":
                    fs_uuid = f"{rng.getrandbits(16):04X}-{rng.getrandbits(16):04X}"
                else:
                    fs_uuid = _random_uuid(rng)
                filesystem = replace(filesystem, uuid=fs_uuid)
            laid_out.append(
                replace(partition, start=start, uuid=part_uuid, filesystem=filesystem)
            )
            start += partition.size
            if in_extended:
                start += _EBR_SIZE

        return PartitionTable(
            type=table_type, partitions=tuple(laid_out), uuid=table_uuid, size=total
        )


def _random_uuid(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
