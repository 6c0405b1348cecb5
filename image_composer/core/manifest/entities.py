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

"""Domain entities for the Manifest module."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.manifest.exceptions import MissingPackageSpecsError
from core.manifest.value_objects import RPM_STAGE, OSTreeSource, Stage
from core.packagesets.value_objects import PackageSet, PackageSpec

MANIFEST_VERSION = "2"


@dataclass(frozen=True)
class Pipeline:
    """A named, ordered list of stages building one tree.

    Attributes:
        name: Pipeline name, unique within a manifest.
        stages: Stages in execution order.
        build: Name of the pipeline providing the build root.
        runner: osbuild runner of the build root.
        package_set_chain: Package sets installed by the rpm stage.
    """

    name: str
    stages: Tuple[Stage, ...]
    build: Optional[str] = None
    runner: Optional[str] = None
    package_set_chain: Tuple[PackageSet, ...] = ()

    def to_dict(self, package_specs: Sequence[PackageSpec] = ()) -> Dict[str, Any]:
        """Serialize, filling rpm stages with the resolved packages."""
        pipeline: Dict[str, Any] = {"name": self.name}
        if self.build:
            pipeline["build"] = f"name:{self.build}"
        if self.runner:
            pipeline["runner"] = self.runner
        pipeline["stages"] = [
            self._stage_dict(stage, package_specs) for stage in self.stages
        ]
        return pipeline

    @staticmethod
    def _stage_dict(stage: Stage, package_specs: Sequence[PackageSpec]) -> Dict[str, Any]:
        stage_dict = stage.to_dict()
        if stage.type != RPM_STAGE:
            return stage_dict
        references = []
        for spec in package_specs:
            reference: Dict[str, Any] = {"id": spec.checksum}
            if spec.check_gpg:
                reference["options"] = {"metadata": {"rpm.check_gpg": True}}
            references.append(reference)
        stage_dict["inputs"] = {
            "packages": {
                "type": "org.osbuild.files",
                "origin": "org.osbuild.source",
                "references": references,
            }
        }
        return stage_dict


@dataclass(frozen=True)
class Manifest:
    """An ordered set of pipelines and the sources they fetch.

    Attributes:
        pipelines: Pipelines in execution order.
        ostree_sources: OSTree commits pulled by the pipelines.
    """

    pipelines: Tuple[Pipeline, ...]
    ostree_sources: Tuple[OSTreeSource, ...] = ()

    def pipeline_names(self) -> List[str]:
        """Return pipeline names in order."""
        return [pipeline.name for pipeline in self.pipelines]

    def get_pipeline(self, name: str) -> Pipeline:
        """Return a pipeline by name.

        Raises:
            KeyError: If no pipeline has that name.
        """
        for pipeline in self.pipelines:
            if pipeline.name == name:
                return pipeline
        raise KeyError(name)

    def get_package_set_chains(self) -> Dict[str, List[PackageSet]]:
        """Return package-set chains keyed by pipeline name, build included."""
        return {
            pipeline.name: list(pipeline.package_set_chain)
            for pipeline in self.pipelines
            if pipeline.package_set_chain
        }

    def serialize(self, package_specs: Mapping[str, Sequence[PackageSpec]]) -> Dict[str, Any]:
        """Serialize with resolved packages.

        Args:
            package_specs: Resolved packages keyed by pipeline name.

        Returns:
            The manifest in osbuild's version 2 format.

        Raises:
            MissingPackageSpecsError: If a pipeline with a package-set
                chain has no resolved packages.
        """
        missing = [
            pipeline.name
            for pipeline in self.pipelines
            if pipeline.package_set_chain and pipeline.name not in package_specs
        ]
        if missing:
            raise MissingPackageSpecsError(missing)

        pipelines = []
        curl_items: Dict[str, Any] = {}
        for pipeline in self.pipelines:
            specs = package_specs.get(pipeline.name, ())
            pipelines.append(pipeline.to_dict(specs))
            for spec in specs:
                item: Dict[str, Any] = {"url": spec.remote_location}
                if spec.ignore_ssl:
                    item["insecure"] = True
                curl_items[spec.checksum] = item

        sources: Dict[str, Any] = {}
        if curl_items:
            sources["org.osbuild.curl"] = {"items": curl_items}
        if self.ostree_sources:
            sources["org.osbuild.ostree"] = {
                "items": {source.ref: source.to_dict() for source in self.ostree_sources}
            }

        return {"version": MANIFEST_VERSION, "pipelines": pipelines, "sources": sources}

    def to_json(self, package_specs: Mapping[str, Sequence[PackageSpec]]) -> str:
        """Serialize to JSON with sorted keys, stable for equal inputs."""
        return json.dumps(self.serialize(package_specs), indent=2, sort_keys=True)
