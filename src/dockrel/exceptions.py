"""Exception hierarchy for dockrel."""

from typing import List, Optional


class DockrelError(Exception):
    """Base exception for all dockrel errors."""

    pass


class ConfigError(DockrelError):
    """The project configuration is missing, malformed or incomplete."""

    pass


class DescriptorWriteError(DockrelError):
    """
    The build-context directory or the Dockerfile could not be written.

    Carries the platform error number of the underlying OSError.
    """

    def __init__(self, path: str, errno: Optional[int], reason: str):
        self.path = path
        self.errno = errno
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class BuildSpawnError(DockrelError):
    """The build tool could not be started."""

    def __init__(self, command: List[str], reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Cannot start '{command[0]}': {reason}")


class BuildFailedError(DockrelError):
    """The build tool exited with a non-zero status."""

    def __init__(self, tag: str, exit_code: int):
        self.tag = tag
        self.exit_code = exit_code
        super().__init__(f"Build of {tag} failed with exit code {exit_code}")
