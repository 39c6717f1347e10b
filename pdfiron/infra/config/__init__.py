from .schemas import (
    BinaryName,
    BinaryNames,
    ColorMode,
    PipelineConfig,
    DEFAULT_RESOLUTION,
    DEFAULT_LANGUAGE,
    UNPAPER_FILTERS,
)
from .runtime import (
    build_config,
    load_config_file,
    load_pipeline_config,
    resolve_binary_names,
)

__all__ = [
    "BinaryName",
    "BinaryNames",
    "ColorMode",
    "PipelineConfig",
    "DEFAULT_RESOLUTION",
    "DEFAULT_LANGUAGE",
    "UNPAPER_FILTERS",
    "build_config",
    "load_config_file",
    "load_pipeline_config",
    "resolve_binary_names",
]
