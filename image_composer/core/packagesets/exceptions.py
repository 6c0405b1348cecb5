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

"""Package Set domain exceptions."""

from typing import Optional


class PackageSetDomainError(Exception):
    """Base exception for package set errors."""

    def __init__(self, message: str, correlation_id: str = ""):
        """Initialize domain error.

        Args:
            message: Error message.
            correlation_id: Request correlation ID for tracing.
        """
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class PackageResolutionError(PackageSetDomainError):
    """Raised when the dependency solver fails.

    The underlying transport or process error is kept as cause and
    chained as __cause__.
    """

    def __init__(self, message: str, correlation_id: str = "", cause: Optional[Exception] = None):
        super().__init__(message, correlation_id)
        self.cause = cause


class ResolutionCancelledError(PackageSetDomainError):
    """Raised when resolution is cancelled or exceeds its deadline."""
