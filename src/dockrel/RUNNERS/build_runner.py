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
Execution of the container build tool against the generated Dockerfile.
"""
import subprocess
from typing import IO, Iterator, List, Optional

from ..BUILDERS.dockerfile_builder import DOCKERFILE
from ..MODELS.docker_config import DEFAULT_BUILD_TOOL
from ..exceptions import BuildFailedError, BuildSpawnError
from .output_relay import ExitStatus, OutputChunk, OutputRelay, ProcessEvent, iter_chunks


class BuildRunner:
    """
    Runs `<build-tool> build` for a project and relays its output.
    """
    def __init__(self,
                 base_dir: str = ".",
                 build_tool: str = DEFAULT_BUILD_TOOL,
                 output: Optional[IO[str]] = None):
        """
        Initializes the build runner.

        Args:
            base_dir (str): Project root, used as the build context.
            build_tool (str): Executable of the build tool (docker, podman, ...).
            output (Optional[IO[str]]): Stream the build output is relayed to. Defaults to stdout.
        """
        self.base_dir = base_dir
        self.build_tool = build_tool
        self.relay = OutputRelay(output)

    def command(self, tag: str) -> List[str]:
        """
        Builds the command line for a tag. The tag is passed through unvalidated.
        """
        return [self.build_tool, "build", "-f", DOCKERFILE, "-t", tag, "."]

    @staticmethod
    def _events(process: subprocess.Popen) -> Iterator[ProcessEvent]:
        for chunk in iter_chunks(process.stdout):
            yield OutputChunk(chunk)
        yield ExitStatus(process.wait())

    def build(self, tag: str) -> int:
        """
        Builds the image and blocks until the build tool exits. There is no timeout.

        Args:
            tag (str): Image tag to build.

        Returns:
            int: The exit status of the build tool, always 0.

        Raises:
            BuildSpawnError: If the build tool cannot be started.
            BuildFailedError: If the build tool exits with a non-zero status.
        """
        command = self.command(tag)
        print(f"[dockrel] Running: {' '.join(command)}")

        try:
            process = subprocess.Popen(
                command,
                cwd=self.base_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                shell=False
            )
        except OSError as e:
            raise BuildSpawnError(command, e.strerror or str(e)) from e

        try:
            exit_code = self.relay.relay(self._events(process))
        except BaseException:
            process.kill()
            process.wait()
            raise
        finally:
            process.stdout.close()

        if exit_code != 0:
            raise BuildFailedError(tag, exit_code)
        return exit_code
