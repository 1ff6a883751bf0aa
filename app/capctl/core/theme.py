"""Colour theme for capctl output.

The bundled ``data/theme.toml`` defines every colour; a user
``theme.toml`` in the config directory may override any subset of keys.
"""

import functools
import logging
import re
import tomllib
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from capctl.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")

# Extra style attributes layered on top of a colour
_EMPHASIS = {"error": "bold", "package": "bold"}


class ThemeColors(BaseModel):
    """Hex colours (#RGB or #RRGGBB) for each output style."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    package: str = "#5fa8ff"
    version: str = "#8a8f98"
    latest: str = "#03b971"
    outdated: str = "#f5b332"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"expected a #RGB or #RRGGBB colour, got {value!r}"
            raise ValueError(msg)
        return value.strip()

    def to_rich(self) -> Theme:
        """Build the Rich theme, including the derived header and dim styles."""
        styles = {
            name: f"{_EMPHASIS[name]} {color}" if name in _EMPHASIS else color
            for name, color in self.model_dump().items()
        }
        styles["bold_header"] = f"bold {self.header}"
        styles["dim"] = self.muted
        return Theme(styles)


def get_bundled_theme_path() -> Path:
    """Return the path of the theme shipped with the package."""
    return Path(str(resources.files("capctl.data").joinpath("theme.toml")))


def read_colors(path: Path) -> dict[str, str]:
    """Read the ``[colors]`` table of a theme file.

    A missing or unreadable file yields an empty mapping; problems other
    than absence are logged.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge the bundled and user colours.

    Falls back to the built-in defaults when the merged colours do not
    validate.
    """
    colors = {**read_colors(get_bundled_theme_path()), **read_colors(get_user_theme_path())}
    try:
        return ThemeColors.model_validate(colors)
    except ValidationError as e:
        logger.warning("Invalid theme colours, using defaults: %s", e)
        return ThemeColors()


@functools.cache
def get_theme() -> Theme:
    """Return the Rich theme, loaded once per process."""
    return load_theme().to_rich()
