from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from byteweaver.config import ImageMode
from byteweaver.exceptions import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_FILE = find_dotenv(usecwd=True)

CONFIG_ENV_VAR = "BYTEWEAVER_CONFIG"
LOG_FILE_ENV_VAR = "BYTEWEAVER_LOG_FILE"

_PATTERN_FIELDS = ("exclude", "include")


def split_patterns(value: Any) -> list[str]:  # noqa: ANN401
    """Flatten pattern input into a clean list.

    Accepts a single comma separated string, or a list of such strings.
    Whitespace around each pattern is stripped and empty entries are dropped.

    Args:
        value: the raw pattern input (None, str or list of str)

    Returns:
        list[str]: the patterns in input order
    """
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    out: list[str] = []
    for item in items:
        out.extend(p.strip() for p in str(item).split(",") if p.strip())
    return out


class AssemblyOptions(BaseModel):
    """Fully resolved options for one pipeline run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    recursive: bool = Field(default=False, description="Descend into subdirectories.")
    exclude: list[str] = Field(default_factory=list, description="Exclude patterns.")
    include: list[str] = Field(default_factory=list, description="Include patterns.")
    minify: bool = Field(default=False, description="Minify each file and the whole output.")
    header: str = Field(default="", description="Text placed before the content.")
    footer: str = Field(default="", description="Text placed after the content.")
    template: Path | None = Field(default=None, description="Template file with a {{content}} marker.")
    image_mode: ImageMode = Field(default=ImageMode.HTML, description="Image rendering.")
    debug: bool = Field(default=False, description="Verbose logging.")

    @field_validator("exclude", "include", mode="before")
    @classmethod
    def _split(cls, value: Any) -> list[str]:  # noqa: ANN401
        return split_patterns(value)

    @field_validator("template", mode="before")
    @classmethod
    def _empty_template_is_none(cls, value: Any) -> Any:  # noqa: ANN401
        if value == "":
            return None
        return value


def load_options_file(path: Path) -> dict[str, Any]:
    """Load assembly options from a YAML file.

    Keys may use dashes or underscores (``image-mode`` or ``image_mode``).

    Args:
        path (Path): the YAML file to read

    Raises:
        ConfigError: if the file cannot be read, is not valid YAML, or is not a mapping

    Returns:
        dict[str, Any]: the raw option values, not yet validated
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(message=f"Cannot read options file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in options file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(message=f"Options file {path} must contain a mapping")
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def resolve_options(options: AssemblyOptions | Mapping[str, Any] | None) -> AssemblyOptions:
    """Turn caller-supplied options into a fully populated AssemblyOptions.

    Raises:
        ConfigError: if the options do not validate
    """
    if isinstance(options, AssemblyOptions):
        return options
    try:
        return AssemblyOptions.model_validate(dict(options or {}))
    except ValidationError as e:
        raise ConfigError(message=f"Invalid options: {e}") from e


def load_environment() -> None:
    """Load the nearest ``.env`` file without overriding the real environment."""
    if ENV_FILE:
        load_dotenv(ENV_FILE, override=False)


class Settings(BaseModel):
    """Command-line settings for a byteweaver run.

    Option fields left to ``None`` were not given on the command line and fall
    back to the options file, then to the AssemblyOptions defaults.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    directory: Path = Field(..., description="Directory to concatenate.")
    output: Path = Field(..., description="Output file.")
    config: Path | None = Field(default=None, description="YAML options file.")
    log_file: str = Field(default="", description="Log file path.")
    debug: bool = Field(default=False, description="Verbose logging.")

    recursive: bool | None = Field(default=None, description="Search subdirectories.")
    exclude: list[str] = Field(default_factory=list, description="Exclude patterns.")
    include: list[str] = Field(default_factory=list, description="Include patterns.")
    minify: bool | None = Field(default=None, description="Minify the output.")
    template: Path | None = Field(default=None, description="Template file.")
    header: str | None = Field(default=None, description="Header text.")
    footer: str | None = Field(default=None, description="Footer text.")
    image_mode: ImageMode | None = Field(default=None, description="Image rendering.")

    @field_validator("exclude", "include", mode="before")
    @classmethod
    def _split(cls, value: Any) -> list[str]:  # noqa: ANN401
        return split_patterns(value)

    @field_validator("config", "template", mode="before")
    @classmethod
    def _empty_path_is_none(cls, value: Any) -> Any:  # noqa: ANN401
        if value == "":
            return None
        return value

    def config_file(self) -> Path | None:
        """Options file to load: ``--config``, else ``$BYTEWEAVER_CONFIG``."""
        if self.config is not None:
            return self.config
        env_value = os.environ.get(CONFIG_ENV_VAR, "")
        return Path(env_value) if env_value else None

    def assembly_options(self) -> AssemblyOptions:
        """Merge the options file and the command-line values.

        Command-line scalars override the file; pattern lists are concatenated,
        file patterns first.

        Raises:
            ConfigError: if the options file is invalid or the merged options do not validate
        """
        config_file = self.config_file()
        data = load_options_file(config_file) if config_file else {}
        for name in _PATTERN_FIELDS:
            data[name] = [*split_patterns(data.get(name)), *getattr(self, name)]
        for name in ("recursive", "minify", "template", "header", "footer", "image_mode"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.debug:
            data["debug"] = True
        return resolve_options(data)
