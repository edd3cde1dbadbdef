"""
Models for the project configuration consumed by the Dockerfile builder and the build runner.
"""
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_IMAGE = "centos"
DEFAULT_COPY_REL = "COPY rel /rel"
DEFAULT_BUILD_TOOL = "docker"


def _number_as_string(value):
    # YAML reads `version: 18` as an int and `version: 3.10` as the float 3.1
    if isinstance(value, float):
        raise ValueError(f"version {value!r} was read as a number, quote it (e.g. \"3.10\")")
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class DockerConfig(BaseModel):
    """
    Options controlling the generated Dockerfile.
    Every option is optional; absent ones fall back to the defaults below.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    image: str = DEFAULT_IMAGE
    version: Optional[str] = None
    maintainer: Optional[str] = None
    copy_rel: str = DEFAULT_COPY_REL
    pre_copy: Optional[str] = None
    post_copy: Optional[str] = None
    entrypoint: Optional[Union[str, List[str]]] = None
    entrypoint_args: Optional[Union[str, List[str]]] = None

    coerce_version = field_validator("version", mode="before")(_number_as_string)


class ReleaseConfig(BaseModel):
    """
    A release to dockerize: its name, whether docker support is enabled,
    how to tag the image and the Dockerfile options.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    version: Optional[str] = None
    docker: bool = False
    tag: Optional[str] = None
    build_tool: str = DEFAULT_BUILD_TOOL
    dockerfile: DockerConfig = Field(default_factory=DockerConfig)

    coerce_version = field_validator("version", mode="before")(_number_as_string)

    @property
    def image_tag(self) -> str:
        """
        The tag passed to the build tool: the configured one, else
        `<name>:<version>`, else the bare release name.
        """
        if self.tag:
            return self.tag
        if self.version:
            return f"{self.name}:{self.version}"
        return self.name
