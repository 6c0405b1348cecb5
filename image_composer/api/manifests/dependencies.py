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

"""FastAPI dependency providers for the Manifests API."""

from api.dependencies import _get_container
from orchestrator.manifest.use_cases import GenerateManifestUseCase


def get_generate_manifest_use_case() -> GenerateManifestUseCase:
    """Provide generate-manifest use case."""
    return _get_container().generate_manifest_use_case()
