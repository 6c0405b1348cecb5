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

"""Image catalog listing command DTOs."""

from dataclasses import dataclass

from core.manifest import CorrelationId


@dataclass(frozen=True)
class ListDistributionsCommand:
    """Command to list the supported distributions."""

    correlation_id: CorrelationId


@dataclass(frozen=True)
class ListArchitecturesCommand:
    """Command to list the architectures of a distribution."""

    correlation_id: CorrelationId
    distribution: str


@dataclass(frozen=True)
class ListImageTypesCommand:
    """Command to list the image types of a distribution and architecture."""

    correlation_id: CorrelationId
    distribution: str
    architecture: str
