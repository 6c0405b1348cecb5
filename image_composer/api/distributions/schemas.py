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

"""Pydantic schemas for Distributions API responses."""

from typing import List

from pydantic import BaseModel, Field


class DistributionSchema(BaseModel):
    """One supported distribution."""

    name: str = Field(..., description="Distribution name (e.g. fedora-38)")
    product: str = Field(..., description="Product name")
    releasever: str = Field(..., description="Release version")
    module_platform_id: str = Field(..., description="Module platform ID")


class DistributionListResponse(BaseModel):
    """Response model listing distributions."""

    correlation_id: str = Field(..., description="Correlation identifier")
    distributions: List[DistributionSchema] = Field(..., description="Supported distributions")


class ArchitectureListResponse(BaseModel):
    """Response model listing the architectures of a distribution."""

    correlation_id: str = Field(..., description="Correlation identifier")
    distribution: str = Field(..., description="Distribution name")
    architectures: List[str] = Field(..., description="Architecture names, sorted")


class ImageTypeSchema(BaseModel):
    """One image type of an architecture."""

    name: str = Field(..., description="Canonical image type name")
    aliases: List[str] = Field(default_factory=list, description="Accepted alternative names")
    filename: str = Field(..., description="Exported image file name")
    mime_type: str = Field(..., description="MIME type of the exported image")
    boot_mode: str = Field(..., description="Boot mode on this architecture")
    default_size: int = Field(..., description="Default image size in bytes, 0 if unsized")
    rpm_ostree: bool = Field(..., description="Built from an OSTree commit")
    boot_iso: bool = Field(..., description="Bootable installer ISO")


class ImageTypeListResponse(BaseModel):
    """Response model listing image types."""

    correlation_id: str = Field(..., description="Correlation identifier")
    distribution: str = Field(..., description="Distribution name")
    architecture: str = Field(..., description="Architecture name")
    image_types: List[ImageTypeSchema] = Field(..., description="Image types, sorted by name")


class CatalogErrorResponse(BaseModel):
    """Standard error response body for catalog operations."""

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    correlation_id: str = Field(..., description="Request correlation ID")
    timestamp: str = Field(..., description="Error timestamp (ISO 8601)")
