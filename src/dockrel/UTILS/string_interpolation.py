"""
Interpolation of ${VAR} references in the project file.
"""
import re
from typing import Dict

# ${VAR}, ${VAR:-default} or ${VAR:+value}
_PATTERN = re.compile(r'\$\{([^}:]+)(?::(-|\+)([^}]*))?\}')


class EnvironmentInterpolator:
    """
    Replaces ${VAR}, ${VAR:-default} and ${VAR:+value} with values from a context.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str]) -> str:
        """
        Interpolates variables in the template string.

        :param template: Text containing ${VAR} placeholders.
        :param context: Variable values.
        :return: The interpolated text.
        :raises KeyError: If a plain ${VAR} is not in the context.
        """
        def replace(match):
            name, modifier, alt_value = match.groups()
            value = context.get(name)

            if modifier == '-':
                return value if value else alt_value
            if modifier == '+':
                return alt_value if value else ''
            if value is None:
                raise KeyError(name)
            return value

        return _PATTERN.sub(replace, template)
