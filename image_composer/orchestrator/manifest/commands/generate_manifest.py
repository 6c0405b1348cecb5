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

"""GenerateManifest command DTO."""

import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from core.blueprint import Blueprint
from core.distro import ImageOptions
from core.manifest import CorrelationId
from core.packagesets import Repository


@dataclass(frozen=True)
# pylint: disable=too-many-instance-attributes
class GenerateManifestCommand:
    """Command to generate a resolved manifest for one image type.

    Immutable command object representing the intent to build the
    manifest of an image type of a distribution and architecture.

    Attributes:
        correlation_id: Request correlation identifier for tracing.
        distribution: Distribution name (e.g. fedora-38).
        architecture: Target architecture (e.g. x86_64).
        image_type: Image type name or alias.
        blueprint: Requested content and customizations.
        options: Image size and OSTree options.
        repositories: Repositories to resolve against; the configured
            defaults are used when empty.
        seed: Seed of every generated identifier in the manifest.
        cancel_event: Set by the caller to abandon package resolution.
    """

    correlation_id: CorrelationId
    distribution: str
    architecture: str
    image_type: str
    blueprint: Blueprint
    options: ImageOptions
    repositories: Tuple[Repository, ...] = ()
    seed: int = 0
    cancel_event: Optional[threading.Event] = None
