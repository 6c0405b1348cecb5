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

"""FastAPI routes for the distribution and image type catalog."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_correlation_id
from api.distributions.dependencies import (
    get_list_architectures_use_case,
    get_list_distributions_use_case,
    get_list_image_types_use_case,
)
from api.distributions.schemas import (
    ArchitectureListResponse,
    CatalogErrorResponse,
    DistributionListResponse,
    DistributionSchema,
    ImageTypeListResponse,
    ImageTypeSchema,
)
from api.logging_utils import log_secure_info
from core.distro import (
    UnsupportedArchitectureError,
    UnsupportedDistributionError,
)
from core.manifest import CorrelationId
from orchestrator.manifest.commands import (
    ListArchitecturesCommand,
    ListDistributionsCommand,
    ListImageTypesCommand,
)
from orchestrator.manifest.use_cases import (
    ListArchitecturesUseCase,
    ListDistributionsUseCase,
    ListImageTypesUseCase,
)

router = APIRouter(prefix="/distributions", tags=["Distributions"])


def _build_error_response(
    error_code: str,
    message: str,
    correlation_id: str,
) -> CatalogErrorResponse:
    return CatalogErrorResponse(
        error=error_code,
        message=message,
        correlation_id=correlation_id,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


def _not_found(error_code: str, exc, correlation_id: CorrelationId) -> HTTPException:
    log_secure_info(
        "warning",
        f"Catalog lookup failed: reason={error_code.lower()}, status=404",
        str(correlation_id),
    )
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=_build_error_response(error_code, exc.message, correlation_id.value).model_dump(),
    )


@router.get(
    "",
    response_model=DistributionListResponse,
    status_code=status.HTTP_200_OK,
    summary="List distributions",
    description="List every supported distribution release",
)
def list_distributions(
    use_case: ListDistributionsUseCase = Depends(get_list_distributions_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> DistributionListResponse:
    """Return the supported distributions, sorted by name."""
    result = use_case.execute(ListDistributionsCommand(correlation_id=correlation_id))
    return DistributionListResponse(
        correlation_id=result.correlation_id,
        distributions=[
            DistributionSchema(
                name=distribution.name,
                product=distribution.product,
                releasever=distribution.releasever,
                module_platform_id=distribution.module_platform_id,
            )
            for distribution in result.distributions
        ],
    )


@router.get(
    "/{distribution}/architectures",
    response_model=ArchitectureListResponse,
    status_code=status.HTTP_200_OK,
    summary="List architectures",
    description="List the architectures of a distribution",
    responses={
        404: {"description": "Unknown distribution", "model": CatalogErrorResponse},
    },
)
def list_architectures(
    distribution: str,
    use_case: ListArchitecturesUseCase = Depends(get_list_architectures_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> ArchitectureListResponse:
    """Return the architectures of a distribution, sorted."""
    try:
        result = use_case.execute(
            ListArchitecturesCommand(correlation_id=correlation_id, distribution=distribution)
        )
    except UnsupportedDistributionError as exc:
        raise _not_found("UNSUPPORTED_DISTRIBUTION", exc, correlation_id) from exc

    return ArchitectureListResponse(
        correlation_id=result.correlation_id,
        distribution=result.distribution,
        architectures=result.architectures,
    )


@router.get(
    "/{distribution}/architectures/{architecture}/image-types",
    response_model=ImageTypeListResponse,
    status_code=status.HTTP_200_OK,
    summary="List image types",
    description="List the image types buildable for a distribution and architecture",
    responses={
        404: {"description": "Unknown distribution or architecture", "model": CatalogErrorResponse},
    },
)
def list_image_types(
    distribution: str,
    architecture: str,
    use_case: ListImageTypesUseCase = Depends(get_list_image_types_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> ImageTypeListResponse:
    """Return the image types of an architecture, sorted by canonical name."""
    try:
        result = use_case.execute(
            ListImageTypesCommand(
                correlation_id=correlation_id,
                distribution=distribution,
                architecture=architecture,
            )
        )
    except UnsupportedDistributionError as exc:
        raise _not_found("UNSUPPORTED_DISTRIBUTION", exc, correlation_id) from exc
    except UnsupportedArchitectureError as exc:
        raise _not_found("UNSUPPORTED_ARCHITECTURE", exc, correlation_id) from exc

    return ImageTypeListResponse(
        correlation_id=result.correlation_id,
        distribution=result.distribution,
        architecture=result.architecture,
        image_types=[
            ImageTypeSchema(
                name=image_type.name,
                aliases=image_type.aliases,
                filename=image_type.filename,
                mime_type=image_type.mime_type,
                boot_mode=image_type.boot_mode,
                default_size=image_type.default_size,
                rpm_ostree=image_type.rpm_ostree,
                boot_iso=image_type.boot_iso,
            )
            for image_type in result.image_types
        ],
    )
