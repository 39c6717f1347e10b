"""
Runtime configuration loading.

Values are layered, lowest precedence first:

  1. PipelineConfig defaults
  2. YAML config file (--config FILE)
  3. Environment variables (a .env file in the working directory is loaded too)
  4. Command line arguments

Binary names follow the same layering, and each resolved name remembers
where it came from so a missing executable can be reported helpfully.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from pdfiron.infra.errors import InvalidConfiguration
from .schemas import BinaryName, BinaryNames, PipelineConfig


# Environment variable -> PipelineConfig field
ENV_FIELDS = {
    'PDFIRON_COLOR_MODE': 'color_mode',
    'PDFIRON_RESOLUTION': 'resolution',
    'PDFIRON_LANGUAGE': 'language',
    'PDFIRON_WORKERS': 'workers',
    'PDFIRON_TESSERACT_THREADS': 'tesseract_threads',
    'PDFIRON_DEBUG': 'verbose',
}

TRUTHY = ("true", "1", "yes")


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML config file into a plain dict."""
    path = Path(os.path.expandvars(str(path))).expanduser()
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise InvalidConfiguration(f"Couldn't read config file {path}, {e}") from e
    except yaml.YAMLError as e:
        raise InvalidConfiguration(f"Config file {path} isn't valid YAML, {e}") from e

    if not isinstance(data, dict):
        raise InvalidConfiguration(f"Config file {path} must contain a mapping")
    return data


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    if environ is None:
        environ = os.environ

    values = {}
    for var, field in ENV_FIELDS.items():
        raw = environ.get(var)
        if raw is None or raw == '':
            continue
        if field == 'verbose':
            values[field] = raw.lower() in TRUTHY
        else:
            values[field] = raw
    return values


def resolve_binary_names(
    arguments: Optional[Mapping[str, Optional[str]]] = None,
    file_values: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BinaryNames:
    """
    Work out the executable name of every tool.

    Args:
        arguments: tool -> name given on the command line (None if not given)
        file_values: tool -> name from the config file's `binaries` section
        environ: environment to read PDFIRON_<TOOL>_BINARY from
    """
    if environ is None:
        environ = os.environ
    arguments = arguments or {}
    file_values = file_values or {}

    resolved = {}
    for tool in BinaryNames.tools():
        binary = BinaryName(tool=tool, name=tool)
        if file_values.get(tool):
            binary = BinaryName(tool=tool, name=str(file_values[tool]), source="config")

        env_value = environ.get(binary.env)
        if env_value:
            binary = BinaryName(tool=tool, name=env_value, source="env")

        if arguments.get(tool):
            binary = BinaryName(tool=tool, name=arguments[tool], source="argument")

        resolved[tool] = binary
    return BinaryNames(**resolved)


def format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def build_config(values: Mapping[str, Any]) -> PipelineConfig:
    """Validate raw values into a PipelineConfig, mapping failures to InvalidConfiguration."""
    try:
        return PipelineConfig.model_validate(dict(values))
    except ValidationError as e:
        raise InvalidConfiguration(
            f"Invalid configuration: {format_validation_error(e)}"
        ) from e


def load_pipeline_config(
    overrides: Optional[Mapping[str, Any]] = None,
    binaries: Optional[Mapping[str, Optional[str]]] = None,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> PipelineConfig:
    """
    Build the run configuration from every source.

    Args:
        overrides: field -> value from the command line; None values are ignored
        binaries: tool -> executable name from the command line
        config_file: optional YAML file
        environ: environment mapping (defaults to os.environ)
        use_dotenv: whether to load a .env file into the environment first
    """
    if use_dotenv and environ is None:
        load_dotenv(find_dotenv(usecwd=True))

    values: Dict[str, Any] = {}
    file_binaries: Dict[str, str] = {}

    if config_file is not None:
        file_values = load_config_file(config_file)
        file_binaries = file_values.pop('binaries', None) or {}
        if not isinstance(file_binaries, dict):
            raise InvalidConfiguration("The binaries section of the config file must be a mapping")
        values.update(file_values)

    values.update(env_overrides(environ))

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    values['binaries'] = resolve_binary_names(binaries, file_binaries, environ)
    return build_config(values)
