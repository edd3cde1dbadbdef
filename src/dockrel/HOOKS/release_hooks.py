"""
Hooks called by a release packaging pipeline around packaging.
"""
from typing import IO, Optional

from ..BUILDERS.dockerfile_builder import DockerfileBuilder
from ..MODELS.docker_config import ReleaseConfig
from ..RUNNERS.build_runner import BuildRunner


class DockerReleaseHooks:
    """
    Generates the Dockerfile before the release is assembled and builds the
    image once it is packaged. Both hooks do nothing unless `docker` is enabled.
    """
    def __init__(self, base_dir: str = ".", output: Optional[IO[str]] = None):
        """
        :param base_dir: Project root.
        :param output: Stream the build output is relayed to.
        """
        self.base_dir = base_dir
        self.output = output

    def before_release(self, release: ReleaseConfig) -> Optional[str]:
        """
        :return: Path of the written Dockerfile, or None when docker is disabled.
        """
        if not release.docker:
            return None
        return DockerfileBuilder(self.base_dir).build(release.dockerfile, release.name)

    def after_package(self, release: ReleaseConfig) -> Optional[int]:
        """
        :return: Exit status of the build, or None when docker is disabled.
        """
        if not release.docker:
            return None
        runner = BuildRunner(self.base_dir, release.build_tool, self.output)
        return runner.build(release.image_tag)
