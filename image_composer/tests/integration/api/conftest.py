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

"""Shared fixtures for API integration tests."""

import os
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="function")
def client() -> TestClient:
    """Create test client backed by the development container."""
    os.environ["ENV"] = "dev"
    return TestClient(app)


@pytest.fixture
def correlation_headers() -> Dict[str, str]:
    """Headers carrying a fixed correlation ID."""
    return {"X-Correlation-Id": "test-correlation-123"}
