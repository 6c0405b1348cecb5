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

"""FastAPI routes for manifest generation."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_correlation_id
from api.logging_utils import log_secure_info
from api.manifests.dependencies import get_generate_manifest_use_case
from api.manifests.schemas import (
    GenerateManifestRequest,
    GenerateManifestResponse,
    ManifestErrorResponse,
)
from core.blueprint import Blueprint, BlueprintDomainError
from core.disk import DiskDomainError, InsufficientPartitionSizeError, MountpointError
from core.distro import (
    DistroDomainError,
    ImageOptions,
    OSTreeImageOptions,
    UnsupportedArchitectureError,
    UnsupportedCustomizationError,
    UnsupportedDistributionError,
    UnsupportedImageTypeError,
)
from core.manifest import CorrelationId
from core.packagesets import PackageResolutionError, Repository, ResolutionCancelledError
from infra.blueprint_loader import loads_blueprint
from orchestrator.manifest.commands import GenerateManifestCommand
from orchestrator.manifest.use_cases import GenerateManifestUseCase

router = APIRouter(prefix="/manifests", tags=["Manifests"])

_NOT_FOUND_CODES = (
    (UnsupportedDistributionError, "UNSUPPORTED_DISTRIBUTION"),
    (UnsupportedArchitectureError, "UNSUPPORTED_ARCHITECTURE"),
    (UnsupportedImageTypeError, "UNSUPPORTED_IMAGE_TYPE"),
)


def _build_error_response(
    error_code: str,
    message: str,
    correlation_id: str,
) -> ManifestErrorResponse:
    return ManifestErrorResponse(
        error=error_code,
        message=message,
        correlation_id=correlation_id,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


def _http_error(
    status_code: int, error_code: str, message: str, correlation_id: CorrelationId
) -> HTTPException:
    log_secure_info(
        "warning" if status_code < 500 else "error",
        f"Generate manifest failed: reason={error_code.lower()}, status={status_code}",
        str(correlation_id),
    )
    return HTTPException(
        status_code=status_code,
        detail=_build_error_response(error_code, message, correlation_id.value).model_dump(),
    )


def _to_command(
    request_body: GenerateManifestRequest, correlation_id: CorrelationId
) -> GenerateManifestCommand:
    """Map the request body to a command.

    Raises:
        BlueprintDomainError: If the blueprint is malformed.
        ValueError: If a repository or option is invalid.
    """
    if request_body.blueprint_toml is not None:
        blueprint = loads_blueprint(request_body.blueprint_toml, "toml")
    elif request_body.blueprint is not None:
        blueprint = Blueprint.from_dict(request_body.blueprint)
    else:
        blueprint = Blueprint()

    ostree = None
    if request_body.ostree is not None:
        ostree = OSTreeImageOptions(
            ref=request_body.ostree.ref,
            parent=request_body.ostree.parent,
            url=request_body.ostree.url,
            contenturl=request_body.ostree.contenturl,
        )

    repositories = tuple(
        Repository(
            id=repo.id,
            baseurls=tuple(repo.baseurls),
            metalink=repo.metalink,
            mirrorlist=repo.mirrorlist,
            gpg_keys=tuple(repo.gpg_keys),
            check_gpg=repo.check_gpg,
            check_repo_gpg=repo.check_repo_gpg,
            ignore_ssl=repo.ignore_ssl,
            package_sets=tuple(repo.package_sets),
        )
        for repo in request_body.repositories
    )

    return GenerateManifestCommand(
        correlation_id=correlation_id,
        distribution=request_body.distribution,
        architecture=request_body.architecture,
        image_type=request_body.image_type,
        blueprint=blueprint,
        options=ImageOptions(size=request_body.size, ostree=ostree),
        repositories=repositories,
        seed=request_body.seed,
    )


@router.post(
    "",
    response_model=GenerateManifestResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate manifest",
    description="Validate a blueprint and generate the resolved manifest of an image type",
    responses={
        200: {"description": "Manifest generated", "model": GenerateManifestResponse},
        400: {"description": "Invalid blueprint or options", "model": ManifestErrorResponse},
        404: {"description": "Unknown catalog entry", "model": ManifestErrorResponse},
        502: {"description": "Package resolution failed", "model": ManifestErrorResponse},
        504: {"description": "Package resolution timed out", "model": ManifestErrorResponse},
    },
)
def generate_manifest(  # pylint: disable=too-many-return-statements
    request_body: GenerateManifestRequest,
    use_case: GenerateManifestUseCase = Depends(get_generate_manifest_use_case),
    correlation_id: CorrelationId = Depends(get_correlation_id),
) -> GenerateManifestResponse:
    """Generate the manifest of an image type.

    Runs synchronously: the response carries the full manifest once every
    package set has been resolved.
    """
    log_secure_info(
        "info",
        f"Generate manifest request: distro={request_body.distribution}, "
        f"arch={request_body.architecture}, image_type={request_body.image_type}",
        str(correlation_id),
    )

    try:
        command = _to_command(request_body, correlation_id)
    except BlueprintDomainError as exc:
        raise _http_error(
            status.HTTP_400_BAD_REQUEST, "INVALID_BLUEPRINT", exc.message, correlation_id
        ) from exc
    except ValueError as exc:
        raise _http_error(
            status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", str(exc), correlation_id
        ) from exc

    try:
        result = use_case.execute(command)
    except DistroDomainError as exc:
        for error_type, error_code in _NOT_FOUND_CODES:
            if isinstance(exc, error_type):
                raise _http_error(
                    status.HTTP_404_NOT_FOUND, error_code, exc.message, correlation_id
                ) from exc
        error_code = (
            "UNSUPPORTED_CUSTOMIZATION"
            if isinstance(exc, UnsupportedCustomizationError)
            else "INVALID_CUSTOMIZATION"
        )
        raise _http_error(
            status.HTTP_400_BAD_REQUEST, error_code, exc.message, correlation_id
        ) from exc
    except MountpointError as exc:
        raise _http_error(
            status.HTTP_400_BAD_REQUEST, "INVALID_MOUNTPOINT", exc.message, correlation_id
        ) from exc
    except InsufficientPartitionSizeError as exc:
        raise _http_error(
            status.HTTP_400_BAD_REQUEST, "INSUFFICIENT_IMAGE_SIZE", exc.message, correlation_id
        ) from exc
    except DiskDomainError as exc:
        raise _http_error(
            status.HTTP_400_BAD_REQUEST, "INVALID_PARTITIONING", exc.message, correlation_id
        ) from exc
    except ResolutionCancelledError as exc:
        raise _http_error(
            status.HTTP_504_GATEWAY_TIMEOUT, "RESOLUTION_CANCELLED", exc.message, correlation_id
        ) from exc
    except PackageResolutionError as exc:
        raise _http_error(
            status.HTTP_502_BAD_GATEWAY, "PACKAGE_RESOLUTION_FAILED", exc.message, correlation_id
        ) from exc

    log_secure_info(
        "info",
        f"Generate manifest success: image_type={result.image_type}, "
        f"pipelines={len(result.pipelines)}, warnings={len(result.warnings)}, status=200",
        str(correlation_id),
    )

    return GenerateManifestResponse(
        correlation_id=result.correlation_id,
        distribution=result.distribution,
        architecture=result.architecture,
        image_type=result.image_type,
        filename=result.filename,
        mime_type=result.mime_type,
        pipelines=result.pipelines,
        warnings=result.warnings,
        manifest=result.manifest,
    )
