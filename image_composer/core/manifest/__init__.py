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

"""Manifest domain module."""

from core.manifest.entities import MANIFEST_VERSION, Manifest, Pipeline
from core.manifest.exceptions import ManifestDomainError, MissingPackageSpecsError
from core.manifest.repositories import UUIDGenerator
from core.manifest.services import ManifestBuilder
from core.manifest.value_objects import RPM_STAGE, CorrelationId, OSTreeSource, Stage

__all__ = [
    "MANIFEST_VERSION",
    "Manifest",
    "Pipeline",
    "ManifestDomainError",
    "MissingPackageSpecsError",
    "UUIDGenerator",
    "ManifestBuilder",
    "RPM_STAGE",
    "CorrelationId",
    "OSTreeSource",
    "Stage",
]
