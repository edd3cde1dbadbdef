# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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

"""
Generation of the Dockerfile for a release from the project's docker configuration.
"""
import os
from typing import List, Optional, Union
from jinja2 import Template
from ..MODELS.docker_config import DockerConfig
from ..MODELS.descriptor_spec import DescriptorSpec
from ..exceptions import DescriptorWriteError

BUILD_PATH = os.path.join("_build", "dockrel")
DOCKERFILE = os.path.join(BUILD_PATH, "Dockerfile")

MAINTAINER_KEYWORD = "MAINTAINER"
ENTRYPOINT_KEYWORD = "ENTRYPOINT"

# One section per line, blank lines for absent sections
DOCKERFILE_TEMPLATE = """{{ spec.base_image }}
{{ spec.maintainer }}
{{ spec.pre_copy }}
{{ spec.copy_instruction }}
{{ spec.post_copy }}
{{ spec.entrypoint }}
"""

_template = Template(DOCKERFILE_TEMPLATE, keep_trailing_newline=True)


def build_from(image: str, version: Optional[str] = None) -> str:
    """
    Builds the base image line.

    :param image: Base image name.
    :param version: Base image version, appended as the tag when given.
    :return: The FROM instruction.
    """
    if version is None:
        return f"FROM {image}"
    return f"FROM {image}:{version}"


def build_maintainer(maintainer: Optional[str] = None) -> str:
    """
    Builds the maintainer line. A value that already starts with the
    MAINTAINER keyword is taken as a complete instruction and kept as is.
    """
    if maintainer is None:
        return ""
    if maintainer.startswith(MAINTAINER_KEYWORD):
        return maintainer
    return f"{MAINTAINER_KEYWORD} {maintainer}"


def _quote_all(values: List[str]) -> str:
    return ", ".join(f'"{value}"' for value in values)


def build_entrypoint(entrypoint: Optional[Union[str, List[str]]],
                     project: str,
                     args: Optional[Union[str, List[str]]] = None) -> str:
    """
    Builds the entrypoint line.

    Without a configured entrypoint, the release's boot script
    `/rel/<project>/bin/<project>` is used, followed by the entrypoint args.
    A configured entrypoint that already starts with the ENTRYPOINT keyword
    is kept as is, anything else gets the keyword prepended. A list
    entrypoint is rendered in exec form.

    :param entrypoint: Configured entrypoint, if any.
    :param project: Release name.
    :param args: Arguments for the default entrypoint; a bare string is a single argument.
    :return: The ENTRYPOINT instruction.
    """
    if entrypoint is None:
        command = [f"/rel/{project}/bin/{project}"]
        if args is not None:
            if isinstance(args, str):
                args = [args]
            command.extend(args)
        return f"{ENTRYPOINT_KEYWORD} [{_quote_all(command)}]"

    if isinstance(entrypoint, list):
        return f"{ENTRYPOINT_KEYWORD} [{_quote_all(entrypoint)}]"

    if entrypoint.startswith(ENTRYPOINT_KEYWORD):
        return entrypoint
    return f"{ENTRYPOINT_KEYWORD} {entrypoint}"


def new_spec(config: DockerConfig, project_name: str) -> DescriptorSpec:
    """
    Normalizes the configuration into the Dockerfile sections for a release.
    """
    if not project_name:
        raise ValueError("Project name must not be empty")

    return DescriptorSpec(
        base_image=build_from(config.image, config.version),
        maintainer=build_maintainer(config.maintainer),
        pre_copy=config.pre_copy or "",
        copy_instruction=config.copy_rel,
        post_copy=config.post_copy or "",
        entrypoint=build_entrypoint(config.entrypoint, project_name, config.entrypoint_args),
    )


def to_dockerfile(spec: DescriptorSpec) -> str:
    return _template.render(spec=spec)


def render(config: DockerConfig, project_name: str) -> str:
    """
    Renders the Dockerfile text for a release.

    :param config: Docker options of the project.
    :param project_name: Name of the release.
    :return: The Dockerfile content, newline terminated.
    """
    return to_dockerfile(new_spec(config, project_name))


class DockerfileBuilder:
    """
    Writes generated Dockerfiles into the build-context directory of a project.
    """
    def __init__(self, base_dir: str = "."):
        """
        Initializes the DockerfileBuilder.

        :param base_dir: The project root the build directory is resolved against.
        """
        self.base_dir = base_dir

    @property
    def build_path(self) -> str:
        return os.path.join(self.base_dir, BUILD_PATH)

    @property
    def dockerfile_path(self) -> str:
        return os.path.join(self.base_dir, DOCKERFILE)

    def write(self, content: str) -> str:
        """
        Writes the Dockerfile, creating the build directory when missing and
        replacing any previous Dockerfile. The write is not atomic.

        :param content: Rendered Dockerfile text.
        :return: Path of the written Dockerfile.
        :raises DescriptorWriteError: If the directory or the file cannot be written.
        """
        try:
            os.makedirs(self.build_path, exist_ok=True)
        except OSError as e:
            raise DescriptorWriteError(self.build_path, e.errno, e.strerror or str(e)) from e

        path = self.dockerfile_path
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
        except OSError as e:
            raise DescriptorWriteError(path, e.errno, e.strerror or str(e)) from e

        print(f"[dockrel] Dockerfile written to {path}")
        return path

    def build(self, config: DockerConfig, project_name: str) -> str:
        """
        Renders the Dockerfile for a release and writes it.

        :return: Path of the written Dockerfile.
        """
        return self.write(render(config, project_name))
