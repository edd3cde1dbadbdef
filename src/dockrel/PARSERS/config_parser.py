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
Parser for the dockrel.yml project file.
"""
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import dotenv_values
from pydantic import ValidationError

from ..MODELS.docker_config import ReleaseConfig
from ..UTILS.string_interpolation import EnvironmentInterpolator
from ..exceptions import ConfigError

DEFAULT_CONFIG_FILE = "dockrel.yml"


class ConfigParser:
    """
    Loads a ReleaseConfig from YAML, interpolating ${VAR} references first.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        :param context: Variables for interpolation. Defaults to the process
            environment overlaid on the `.env` file next to the parsed file.
        """
        self.context = context

    def _context_for(self, config_path: str) -> Dict[str, str]:
        if self.context is not None:
            return self.context
        env_file = os.path.join(os.path.dirname(os.path.abspath(config_path)), ".env")
        context = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
        context.update(os.environ)
        return context

    def parse(self, config_path: str = DEFAULT_CONFIG_FILE) -> ReleaseConfig:
        """
        Parses a project file from a path.

        :param config_path: Path to the project file.
        :return: Parsed configuration.
        :raises ConfigError: If the file is missing or invalid.
        """
        try:
            with open(config_path, 'r', encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e.strerror or e}") from e
        return self.parse_from_string(content, self._context_for(config_path))

    def parse_from_string(self, content: str, context: Optional[Dict[str, str]] = None) -> ReleaseConfig:
        """
        Parses a project file from a string.

        ${VAR} references are interpolated in the parsed string values, so
        comments are left alone. A value that interpolates to an empty string
        is treated as absent, like an empty YAML value.

        :param content: YAML content.
        :param context: Variables for interpolation, defaults to the parser's context or the environment.
        :return: Parsed configuration.
        :raises ConfigError: If a variable is unset, the YAML is malformed or does not match the schema.
        """
        if context is None:
            context = self.context if self.context is not None else dict(os.environ)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Project file must be a mapping")

        try:
            data = self._interpolate_values(data, context)
        except KeyError as e:
            raise ConfigError(f"Variable {e.args[0]} is not set") from e

        # `dockerfile:` with no options
        if data.get("dockerfile") is None:
            data.pop("dockerfile", None)

        try:
            return ReleaseConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    def _interpolate_values(self, value: Any, context: Dict[str, str]) -> Any:
        if isinstance(value, dict):
            return {k: self._interpolate_values(v, context) for k, v in value.items()}
        if isinstance(value, list):
            return [self._interpolate_values(v, context) for v in value]
        if isinstance(value, str):
            interpolated = EnvironmentInterpolator.interpolate(value, context)
            if value and not interpolated:
                return None
            return interpolated
        return value
