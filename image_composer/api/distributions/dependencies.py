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

"""FastAPI dependency providers for the Distributions API."""

from api.dependencies import _get_container
from orchestrator.manifest.use_cases import (
    ListArchitecturesUseCase,
    ListDistributionsUseCase,
    ListImageTypesUseCase,
)


def get_list_distributions_use_case() -> ListDistributionsUseCase:
    """Provide list-distributions use case."""
    return _get_container().list_distributions_use_case()


def get_list_architectures_use_case() -> ListArchitecturesUseCase:
    """Provide list-architectures use case."""
    return _get_container().list_architectures_use_case()


def get_list_image_types_use_case() -> ListImageTypesUseCase:
    """Provide list-image-types use case."""
    return _get_container().list_image_types_use_case()
