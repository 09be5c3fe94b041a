"""Converter configuration.

Configuration is layered: built-in defaults, then a JSON config file
(``converter.config.json`` in the working directory unless another path is
given), then ``GODOT_LLMS_*`` environment variables (a ``.env`` file is
honoured), then explicit overrides from the CLI.

The JSON file uses the camelCase keys of the original converter
(``godotDocsPath``, ``excludedDirectories``, ``autoUpdate``...); snake_case
keys are accepted as well.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, PositiveInt
from pydantic.alias_generators import to_camel

from godot_llms.schemas import LanguageFilter

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("converter.config.json")

# Environment variable -> config field
ENV_OVERRIDES = {
    "GODOT_LLMS_LANGUAGE": "language",
    "GODOT_LLMS_CONCURRENCY": "concurrency",
    "GODOT_LLMS_DOCS_PATH": "godot_docs_path",
    "GODOT_LLMS_OUTPUT": "output_file",
    "GODOT_LLMS_PANDOC": "pandoc_path",
}


class GitConfig(BaseModel):
    """Where the documentation repository comes from."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enabled: bool = True
    repository: str = "https://github.com/godotengine/godot-docs.git"
    branch: str = "master"
    auto_update: bool = True


class ConverterConfig(BaseModel):
    """Effective configuration for one conversion run."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    excluded_directories: List[str] = Field(
        default_factory=lambda: ["about", "community", "contributing", "tutorials"],
        description="Top-level documentation directories to skip"
    )
    godot_docs_path: Path = Field(default=Path("./godot-docs"))
    output_file: Path = Field(default=Path("./llms.md"))
    concurrency: PositiveInt = Field(default=5, description="Documents converted at once")
    language: LanguageFilter = LanguageFilter.BOTH
    git: GitConfig = Field(default_factory=GitConfig)
    pandoc_path: str = Field(default="pandoc", description="pandoc executable")
    include_header: bool = Field(default=False, description="Prepend a provenance header to the output")

    def merged(self, overrides: Dict[str, Any]) -> "ConverterConfig":
        """Return a copy with ``overrides`` applied; ``git`` merges field-wise."""
        data = self.model_dump()
        for key, value in _normalize_keys(overrides).items():
            if key == "git" and isinstance(value, dict):
                data["git"] = {**data["git"], **_normalize_keys(value, GitConfig)}
            else:
                data[key] = value
        return ConverterConfig.model_validate(data)


def _normalize_keys(raw: Dict[str, Any], model: type = ConverterConfig) -> Dict[str, Any]:
    """Map camelCase aliases to field names, leaving unknown keys for validation."""
    aliases = {field.alias: name for name, field in model.model_fields.items() if field.alias}
    return {aliases.get(key, key): value for key, value in raw.items()}


def load_config_file(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Read a JSON config file.

    A missing default file is not an error. A missing explicit file, or a
    file that is not a JSON object, raises ``ValueError``.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_FILE

    if not path.exists():
        if config_path:
            raise ValueError(f"Config file not found: {path}")
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    logger.info(f"Loaded configuration from {path}")
    return data


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect ``GODOT_LLMS_*`` overrides from the environment."""
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = dict(os.environ)

    overrides = {}
    for variable, field in ENV_OVERRIDES.items():
        value = environ.get(variable)
        if value:
            overrides[field] = value
    return overrides


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> ConverterConfig:
    """
    Build the effective configuration.

    Args:
        config_path: Explicit JSON config file (default: ./converter.config.json if present)
        overrides: Values that take precedence over everything else (CLI flags)
        environ: Environment mapping (default: os.environ after loading .env)

    Returns:
        Validated ConverterConfig
    """
    config = ConverterConfig()
    config = config.merged(load_config_file(config_path))
    config = config.merged(env_overrides(environ))
    if overrides:
        config = config.merged({k: v for k, v in overrides.items() if v is not None})
    return config
