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

"""Value objects for the Manifest domain.

All value objects are immutable and defined by their values, not identity.
"""

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional

RPM_STAGE = "org.osbuild.rpm"


@dataclass(frozen=True)
class Stage:
    """One osbuild stage of a pipeline.

    Attributes:
        type: Stage identifier, e.g. org.osbuild.rpm.
        options: Stage options.
        inputs: Named inputs, e.g. a tree from another pipeline.
        devices: Named devices the stage operates on.
        mounts: Mounts set up before the stage runs.
    """

    type: str
    options: Mapping[str, Any] = field(default_factory=dict)
    inputs: Mapping[str, Any] = field(default_factory=dict)
    devices: Mapping[str, Any] = field(default_factory=dict)
    mounts: Optional[list] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize, leaving out empty sections."""
        stage: Dict[str, Any] = {"type": self.type}
        if self.inputs:
            stage["inputs"] = dict(self.inputs)
        if self.options:
            stage["options"] = dict(self.options)
        if self.devices:
            stage["devices"] = dict(self.devices)
        if self.mounts:
            stage["mounts"] = list(self.mounts)
        return stage


@dataclass(frozen=True)
class OSTreeSource:
    """An OSTree commit fetched by the build.

    Attributes:
        url: Repository URL.
        ref: Ref to pull.
        contenturl: Alternate content URL.
    """

    url: str
    ref: str
    contenturl: str = ""

    def to_dict(self) -> Dict[str, Any]:
        remote: Dict[str, Any] = {"url": self.url}
        if self.contenturl:
            remote["contenturl"] = self.contenturl
        return {"remote": remote, "ref": self.ref}


@dataclass(frozen=True)
class CorrelationId:
    """Request tracing identifier carried through logs and errors.

    Attributes:
        value: Client supplied or generated identifier.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 128
    PATTERN: ClassVar[str] = r"^[A-Za-z0-9._:-]+$"

    def __post_init__(self) -> None:
        """Validate correlation ID format."""
        if not self.value:
            raise ValueError("Correlation ID cannot be empty")
        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(
                f"Correlation ID length cannot exceed {self.MAX_LENGTH} characters"
            )
        if not re.match(self.PATTERN, self.value):
            raise ValueError(f"Invalid correlation ID format: {self.value}")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value
