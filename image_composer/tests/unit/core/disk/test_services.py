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

"""Unit tests for Disk domain services."""

import random
import re

import pytest

from core.blueprint import FilesystemCustomization
from core.disk import (
    DirtyMountpointError,
    GiB,
    InsufficientPartitionSizeError,
    MiB,
    PartitionPlanner,
    PartitionTableType,
    PartitionTypes,
    UnsupportedMountpointError,
    check_mountpoints,
)
from core.distro.fedora import default_partition_table


def _fs(*mountpoints, size=0):
    return [FilesystemCustomization(mountpoint, size) for mountpoint in mountpoints]


class TestCheckMountpoints:
    """Test cases for custom mountpoint checks."""

    def test_allowed(self):
        """Test that allowed clean mountpoints pass."""
        check_mountpoints(_fs("/", "/var", "/var/log/audit", "/opt", "/home"))

    def test_dirty_mountpoints_listed_in_order(self):
        """Test that every dirty path is listed in input order."""
        with pytest.raises(DirtyMountpointError) as exc_info:
            check_mountpoints(_fs("//", "/var//", "/var//log/audit/"))
        assert exc_info.value.message == (
            'The following custom mountpoints are not supported ["//" "/var//" "/var//log/audit/"]'
        )

    def test_dirty_reported_before_unsupported(self):
        """Test that dirty paths win over unsupported ones."""
        with pytest.raises(DirtyMountpointError) as exc_info:
            check_mountpoints(_fs("/etc", "/var//"))
        assert exc_info.value.paths == ["/var//"]

    def test_unsupported_without_duplicates(self):
        """Test that unsupported paths are listed once each."""
        with pytest.raises(UnsupportedMountpointError) as exc_info:
            check_mountpoints(_fs("/etc", "/var", "/etc", "/boot/efi"))
        assert exc_info.value.paths == ["/etc", "/boot/efi"]
        assert exc_info.value.message == (
            'The following custom mountpoints are not supported ["/etc" "/boot/efi"]'
        )


class TestPartitionPlanner:
    """Test cases for PartitionPlanner."""

    @pytest.fixture
    def planner(self):
        """Planner with the default policy."""
        return PartitionPlanner()

    @pytest.fixture
    def x86_table(self):
        """Default x86_64 partition table."""
        return default_partition_table("x86_64")

    def test_root_fills_image(self, planner, x86_table):
        """Test that the root partition absorbs the free space."""
        table = planner.plan(x86_table, [], 5 * GiB)
        assert table.size == 5 * GiB
        root = table.partitions[table.find_mountpoint("/")]
        used = sum(partition.size for partition in table.partitions)
        # 1 MiB header plus 1 MiB GPT footer
        assert used == 5 * GiB - 2 * MiB
        assert root.start + root.size == 5 * GiB - MiB

    def test_partitions_are_contiguous(self, planner, x86_table):
        """Test partition offsets."""
        table = planner.plan(x86_table, [], 5 * GiB)
        start = MiB
        for partition in table.partitions:
            assert partition.start == start
            start += partition.size

    def test_new_mountpoint_inserted_before_root(self, planner, x86_table):
        """Test that new mountpoints get their own partition before root."""
        table = planner.plan(x86_table, _fs("/var", size=3 * GiB), 10 * GiB)
        assert table.mountpoints() == ["/boot/efi", "/boot", "/var", "/"]
        var = table.partitions[table.find_mountpoint("/var")]
        assert var.size == 3 * GiB
        assert var.type == PartitionTypes.FILESYSTEM_DATA
        assert var.filesystem.type == "ext4"

    def test_usr_gets_required_size(self, planner, x86_table):
        """Test that /usr is never smaller than its required size."""
        table = planner.plan(x86_table, _fs("/usr"), 10 * GiB)
        usr = table.partitions[table.find_mountpoint("/usr")]
        assert usr.size == 2 * GiB

    def test_existing_mountpoint_grows(self, planner, x86_table):
        """Test that a customization grows an existing partition."""
        table = planner.plan(x86_table, _fs("/boot", size=GiB), 10 * GiB)
        boot = table.partitions[table.find_mountpoint("/boot")]
        assert boot.size == GiB
        assert len(table.partitions) == 4

    def test_sizes_aligned_to_mib(self, planner, x86_table):
        """Test that requested sizes are rounded up to MiB."""
        table = planner.plan(x86_table, _fs("/data", size=MiB + 1), 10 * GiB)
        data = table.partitions[table.find_mountpoint("/data")]
        assert data.size == 2 * MiB

    def test_small_image_grows(self, planner, x86_table):
        """Test that a too small default size grows to fit."""
        table = planner.plan(x86_table, _fs("/var", size=20 * GiB), 5 * GiB)
        assert table.size > 20 * GiB

    def test_strict_size_rejects_small_image(self, planner, x86_table):
        """Test that an explicit size too small for the table is rejected."""
        with pytest.raises(InsufficientPartitionSizeError) as exc_info:
            planner.plan(x86_table, _fs("/var", size=20 * GiB), 5 * GiB, strict_size=True)
        assert exc_info.value.available == 5 * GiB
        assert exc_info.value.required > 20 * GiB

    def test_rejects_bad_mountpoints(self, planner, x86_table):
        """Test that the planner enforces the mountpoint policy."""
        with pytest.raises(UnsupportedMountpointError):
            planner.plan(x86_table, _fs("/etc"), 5 * GiB)

    def test_deterministic_identifiers(self, planner, x86_table):
        """Test that equal seeds give equal identifiers."""
        first = planner.plan(x86_table, [], 5 * GiB, rng=random.Random(7))
        second = planner.plan(x86_table, [], 5 * GiB, rng=random.Random(7))
        third = planner.plan(x86_table, [], 5 * GiB, rng=random.Random(8))
        assert first == second
        assert first.uuid != third.uuid

    def test_gpt_identifiers(self, planner, x86_table):
        """Test GPT table, partition and filesystem identifier formats."""
        table = planner.plan(x86_table, [], 5 * GiB)
        uuid_pattern = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")
        assert uuid_pattern.match(table.uuid)
        assert all(uuid_pattern.match(partition.uuid) for partition in table.partitions)
        esp = table.partitions[table.find_mountpoint("/boot/efi")]
        assert re.match(r"^[0-9A-F]{4}-[0-9A-F]{4}$", esp.filesystem.uuid)

    def test_dos_identifiers(self, planner):
        """Test DOS table identifier format."""
        table = planner.plan(default_partition_table("ppc64le"), [], 5 * GiB)
        assert table.type == PartitionTableType.DOS
        assert re.match(r"^0x[0-9a-f]{8}$", table.uuid)
        assert all(partition.uuid == "" for partition in table.partitions)
        assert table.partitions[0].bootable

    def test_base_table_untouched(self, planner, x86_table):
        """Test that planning does not modify the default table."""
        planner.plan(x86_table, _fs("/var"), 5 * GiB)
        assert x86_table.mountpoints() == ["/boot/efi", "/boot", "/"]
        assert x86_table.uuid == ""

    def test_to_dict(self, planner, x86_table):
        """Test table serialization."""
        data = planner.plan(x86_table, [], 5 * GiB).to_dict()
        assert data["label"] == "gpt"
        assert data["size"] == 5 * GiB
        assert len(data["partitions"]) == 4
        assert data["partitions"][0]["bootable"] is True
        assert data["partitions"][1]["filesystem"]["mountpoint"] == "/boot/efi"

    @pytest.mark.parametrize("arch", ["ppc64le", "s390x"])
    def test_dos_extended_partition_past_four_slots(self, planner, arch):
        """Test that a DOS table never holds more than four primary partitions."""
        nested = _fs("/var/a", "/var/a/b", "/var/a/b/c", "/var/a/b/c/d", size=1024)
        table = planner.plan(default_partition_table(arch), nested, 10 * GiB)

        types = [partition.type for partition in table.partitions]
        assert types.count(PartitionTypes.DOS_EXTENDED) == 1
        extended_index = types.index(PartitionTypes.DOS_EXTENDED)
        assert extended_index == 3
        assert table.mountpoints()[-1] == "/"
        assert "/var/a/b/c/d" in table.mountpoints()

        extended = table.partitions[extended_index]
        assert extended.filesystem is None
        assert extended.start + extended.size == table.size

        previous_end = extended.start
        for logical in table.partitions[extended_index + 1:]:
            # Room for the extended boot record in front of every logical partition
            assert logical.start >= previous_end + MiB
            previous_end = logical.start + logical.size
        assert previous_end <= extended.start + extended.size

    def test_dos_four_partitions_stay_primary(self, planner):
        """Test that no extended partition is added while four slots suffice."""
        table = planner.plan(default_partition_table("ppc64le"), _fs("/var"), 10 * GiB)
        assert len(table.partitions) == 4
        assert PartitionTypes.DOS_EXTENDED not in [p.type for p in table.partitions]

    def test_dos_extended_fills_image(self, planner):
        """Test that the grown root keeps the extended partition inside the image."""
        nested = _fs("/var/a", "/var/a/b", "/var/a/b/c", "/var/a/b/c/d", size=1024)
        table = planner.plan(default_partition_table("s390x"), nested, 5 * GiB)
        assert table.size == 5 * GiB
        root = table.partitions[table.find_mountpoint("/")]
        assert root.start + root.size == 5 * GiB
