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

"""Common dependencies for API endpoints.

This module provides the FastAPI dependencies shared by every API
module: container access and request correlation IDs.
"""

import logging
from typing import Annotated

from fastapi import Header

from core.manifest import CorrelationId

logger = logging.getLogger(__name__)


def _get_container():
    """Lazy import of container to avoid circular imports."""
    from container import container  # pylint: disable=import-outside-toplevel
    return container


def get_correlation_id(
    x_correlation_id: Annotated[str, Header(
        alias="X-Correlation-Id",
        description="Request tracing ID",
    )] = None,
) -> CorrelationId:
    """Return provided correlation ID or generate one."""
    generator = _get_container().uuid_generator()
    if x_correlation_id:
        try:
            return CorrelationId(x_correlation_id)
        except ValueError:
            logger.warning("Ignoring malformed X-Correlation-Id header")

    generated_id = generator.generate()
    return CorrelationId(str(generated_id))
