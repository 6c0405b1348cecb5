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

"""Pydantic schemas for Manifests API requests and responses."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

_NAME_PATTERN = "^[A-Za-z0-9][A-Za-z0-9._-]*$"


class RepositorySchema(BaseModel):
    """An RPM repository to resolve packages against."""

    id: str = Field(..., min_length=1, max_length=255, description="Repository identifier")
    baseurls: List[str] = Field(default_factory=list, description="Base URLs")
    metalink: Optional[str] = Field(default=None, description="Metalink URL")
    mirrorlist: Optional[str] = Field(default=None, description="Mirrorlist URL")
    gpg_keys: List[str] = Field(default_factory=list, description="GPG keys or key URLs")
    check_gpg: bool = Field(default=False, description="Verify package signatures")
    check_repo_gpg: bool = Field(default=False, description="Verify metadata signatures")
    ignore_ssl: bool = Field(default=False, description="Skip TLS verification")
    package_sets: List[str] = Field(
        default_factory=list,
        description="Pipelines this repository is restricted to; empty means all",
    )

    @model_validator(mode="after")
    def validate_source(self) -> "RepositorySchema":
        """Require at least one repository source."""
        if not (self.baseurls or self.metalink or self.mirrorlist):
            raise ValueError("repository requires baseurls, metalink or mirrorlist")
        return self


class OSTreeOptionsSchema(BaseModel):
    """OSTree source options."""

    ref: str = Field(default="", max_length=255, description="Ref to build or deploy")
    parent: str = Field(default="", max_length=255, description="Parent ref of a new commit")
    url: str = Field(default="", max_length=2048, description="Repository URL of the commit")
    contenturl: str = Field(default="", max_length=2048, description="Alternate content URL")


class GenerateManifestRequest(BaseModel):
    """Request model for manifest generation.

    The blueprint is given either as a JSON object or as TOML text.
    """

    distribution: str = Field(
        ..., min_length=1, max_length=64, pattern=_NAME_PATTERN, description="Distribution name"
    )
    architecture: str = Field(
        ..., min_length=1, max_length=32, pattern=_NAME_PATTERN, description="Target architecture"
    )
    image_type: str = Field(
        ..., min_length=1, max_length=64, pattern=_NAME_PATTERN, description="Image type or alias"
    )
    blueprint: Optional[Dict[str, Any]] = Field(default=None, description="Blueprint as JSON")
    blueprint_toml: Optional[str] = Field(
        default=None, max_length=1024 * 1024, description="Blueprint as TOML text"
    )
    size: int = Field(default=0, ge=0, description="Image size in bytes; 0 selects the default")
    ostree: Optional[OSTreeOptionsSchema] = Field(default=None, description="OSTree options")
    repositories: List[RepositorySchema] = Field(
        default_factory=list,
        description="Repositories; the configured defaults are used when empty",
    )
    seed: int = Field(default=0, ge=0, description="Seed of generated identifiers")

    @model_validator(mode="after")
    def validate_blueprint_source(self) -> "GenerateManifestRequest":
        """Reject requests giving the blueprint twice."""
        if self.blueprint is not None and self.blueprint_toml is not None:
            raise ValueError("blueprint and blueprint_toml are mutually exclusive")
        return self


class GenerateManifestResponse(BaseModel):
    """Response model for a generated manifest."""

    correlation_id: str = Field(..., description="Correlation identifier")
    distribution: str = Field(..., description="Distribution name")
    architecture: str = Field(..., description="Target architecture")
    image_type: str = Field(..., description="Canonical image type name")
    filename: str = Field(..., description="Exported image file name")
    mime_type: str = Field(..., description="MIME type of the exported image")
    pipelines: List[str] = Field(..., description="Pipeline names in build order")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal findings")
    manifest: Dict[str, Any] = Field(..., description="Manifest for the image builder")


class ManifestErrorResponse(BaseModel):
    """Standard error response body for manifest operations."""

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    correlation_id: str = Field(..., description="Request correlation ID")
    timestamp: str = Field(..., description="Error timestamp (ISO 8601)")
