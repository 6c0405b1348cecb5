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

"""Blueprint file loading.

Blueprints are written in TOML as used by image builder tooling, or in
the equivalent JSON form.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

import toml

from core.blueprint import Blueprint, InvalidBlueprintError

logger = logging.getLogger(__name__)

BLUEPRINT_FORMATS = ("toml", "json")


def loads_blueprint(content: str, fmt: str = "toml") -> Blueprint:
    """Parse a blueprint document.

    Args:
        content: Document text.
        fmt: ``toml`` or ``json``.

    Returns:
        The parsed Blueprint.

    Raises:
        InvalidBlueprintError: If the document cannot be parsed or is not a
            valid blueprint.
        ValueError: If the format is unknown.
    """
    if fmt not in BLUEPRINT_FORMATS:
        raise ValueError(f"Unknown blueprint format '{fmt}', expected one of {BLUEPRINT_FORMATS}")

    try:
        if fmt == "toml":
            data: Mapping[str, Any] = toml.loads(content)
        else:
            data = json.loads(content)
    except (toml.TomlDecodeError, json.JSONDecodeError) as exc:
        raise InvalidBlueprintError(f"Invalid {fmt.upper()} blueprint: {exc}") from exc

    return Blueprint.from_dict(data)


def load_blueprint(path: Union[str, Path]) -> Blueprint:
    """Load a blueprint file, choosing the format from its extension.

    ``.json`` files are read as JSON, everything else as TOML.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidBlueprintError: If the file is not a valid blueprint.
    """
    blueprint_file = Path(path)
    if not blueprint_file.is_file():
        raise FileNotFoundError(f"Blueprint file not found: {blueprint_file}")

    fmt = "json" if blueprint_file.suffix.lower() == ".json" else "toml"
    with open(blueprint_file, "r", encoding="utf-8") as handle:
        content = handle.read()

    blueprint = loads_blueprint(content, fmt)
    logger.debug("Loaded %s blueprint '%s' from %s", fmt, blueprint.name, blueprint_file)
    return blueprint
