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

"""Unit tests for infrastructure ID generators."""

import uuid

from core.manifest import CorrelationId
from infra.id_generator import UUIDv4Generator


class TestUUIDv4Generator:
    """Tests covering UUIDv4Generator."""

    def test_generate_returns_uuid_instance(self) -> None:
        """Ensure generator returns a UUID4 instance."""
        generator = UUIDv4Generator()

        value = generator.generate()

        assert isinstance(value, uuid.UUID)
        assert value.version == 4

    def test_generate_is_unique(self) -> None:
        """Generator should yield unique IDs over multiple invocations."""
        generator = UUIDv4Generator()

        generated = {generator.generate() for _ in range(50)}

        assert len(generated) == 50

    def test_generated_value_is_valid_correlation_id(self) -> None:
        """Generated IDs should be accepted as correlation IDs."""
        value = str(UUIDv4Generator().generate())

        assert CorrelationId(value).value == value
