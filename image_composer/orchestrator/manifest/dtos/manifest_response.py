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

"""Manifest response DTO."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class ManifestResponse:
    """Response DTO for a generated manifest.

    Attributes:
        correlation_id: Correlation identifier.
        distribution: Distribution name.
        architecture: Target architecture.
        image_type: Canonical image type name.
        filename: Name of the exported image file.
        mime_type: MIME type of the exported image.
        manifest: Serialized manifest, ready for the image builder.
        pipelines: Pipeline names in build order.
        warnings: Non-fatal validation findings.
    """

    correlation_id: str
    distribution: str
    architecture: str
    image_type: str
    filename: str
    mime_type: str
    manifest: Dict[str, Any]
    pipelines: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
