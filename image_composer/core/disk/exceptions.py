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

"""Disk domain exceptions."""

import json
from typing import Sequence


def _quote_paths(paths: Sequence[str]) -> str:
    return "[" + " ".join(json.dumps(path) for path in paths) + "]"


class DiskDomainError(Exception):
    """Base exception for disk layout errors."""

    def __init__(self, message: str, correlation_id: str = ""):
        """Initialize domain error.

        Args:
            message: Error message.
            correlation_id: Request correlation ID for tracing.
        """
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class MountpointError(DiskDomainError):
    """Base for errors listing offending custom mountpoints."""

    def __init__(self, paths: Sequence[str], correlation_id: str = ""):
        self.paths = list(paths)
        super().__init__(
            f"The following custom mountpoints are not supported {_quote_paths(self.paths)}",
            correlation_id,
        )


class DirtyMountpointError(MountpointError):
    """Raised when mountpoints are relative or not in normalized form."""


class UnsupportedMountpointError(MountpointError):
    """Raised when mountpoints fall outside the allowed path space."""


class InsufficientPartitionSizeError(DiskDomainError):
    """Raised when an explicit image size cannot hold the partition table."""

    def __init__(self, required: int, available: int, correlation_id: str = ""):
        self.required = required
        self.available = available
        super().__init__(
            f"Requested image size {available} bytes is not large enough for the "
            f"partition table, which requires {required} bytes",
            correlation_id,
        )
