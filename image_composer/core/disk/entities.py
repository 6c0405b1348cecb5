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

"""Domain entities for the Disk module."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from core.disk.value_objects import Partition, PartitionTableType


@dataclass(frozen=True)
class PartitionTable:
    """A partition table with its partitions in on-disk order.

    Attributes:
        type: Partition table label type.
        partitions: Partitions in on-disk order.
        uuid: Table identifier; empty until planned.
        size: Total image size in bytes; zero until planned.
    """

    type: PartitionTableType
    partitions: Tuple[Partition, ...]
    uuid: str = ""
    size: int = 0

    def find_mountpoint(self, mountpoint: str) -> Optional[int]:
        """Return the index of the partition mounted at mountpoint."""
        for index, partition in enumerate(self.partitions):
            if partition.mountpoint == mountpoint:
                return index
        return None

    def mountpoints(self) -> List[str]:
        """Return mountpoints in partition order."""
        return [
            partition.mountpoint
            for partition in self.partitions
            if partition.mountpoint is not None
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the layout consumed by the image pipelines."""
        partitions = []
        for partition in self.partitions:
            entry: Dict[str, Any] = {
                "start": partition.start,
                "size": partition.size,
                "type": partition.type,
            }
            if partition.uuid:
                entry["uuid"] = partition.uuid
            if partition.bootable:
                entry["bootable"] = True
            if partition.filesystem is not None:
                filesystem = partition.filesystem
                entry["filesystem"] = {
                    "type": filesystem.type,
                    "uuid": filesystem.uuid,
                    "label": filesystem.label,
                    "mountpoint": filesystem.mountpoint,
                    "fstab_options": filesystem.fstab_options,
                }
            partitions.append(entry)
        return {
            "label": self.type.value,
            "uuid": self.uuid,
            "size": self.size,
            "partitions": partitions,
        }
