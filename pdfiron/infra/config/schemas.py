"""
Configuration schemas for pdfiron.

A PipelineConfig is built once per run (see runtime.py) and is frozen from
then on; stages only ever read it.
"""

import os
import re
import shlex
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_RESOLUTION = 300
DEFAULT_LANGUAGE = "eng"
DEFAULT_TESSERACT_THREADS = 2

# Filters unpaper can switch off with --no-<name>
UNPAPER_FILTERS = (
    "blackfilter",
    "noisefilter",
    "blurfilter",
    "grayfilter",
    "mask-scan",
    "mask-center",
    "deskew",
    "wipe",
    "border",
    "border-scan",
    "border-align",
)


def default_workers() -> int:
    return max(1, os.cpu_count() or 1)


class ColorMode(str, Enum):
    """Color mode of the rasterized pages (and therefore of the output)."""
    GRAYSCALE = "grayscale"
    BITONAL = "bitonal"
    TRUECOLOR = "truecolor"

    @property
    def extension(self) -> str:
        """Portable anymap flavour convert writes for this mode."""
        return {
            ColorMode.GRAYSCALE: "pgm",
            ColorMode.BITONAL: "pbm",
            ColorMode.TRUECOLOR: "ppm",
        }[self]


class BinaryName(BaseModel):
    """Name used to launch one external tool and where that name came from."""
    tool: str = Field(..., description="Canonical tool name (convert, unpaper, ...)")
    name: str = Field(..., description="Executable looked up on PATH")
    source: str = Field("default", description="default, config, env or argument")

    model_config = {"frozen": True}

    @property
    def arg(self) -> str:
        return f"{self.tool}-binary"

    @property
    def env(self) -> str:
        return f"PDFIRON_{self.tool.upper()}_BINARY"

    @field_validator('source')
    @classmethod
    def validate_source(cls, v: str) -> str:
        if v not in ("default", "config", "env", "argument"):
            raise ValueError(f"Unknown binary name source: {v}")
        return v


def _binary(tool: str) -> BinaryName:
    return BinaryName(tool=tool, name=tool)


class BinaryNames(BaseModel):
    convert: BinaryName = Field(default_factory=lambda: _binary("convert"))
    unpaper: BinaryName = Field(default_factory=lambda: _binary("unpaper"))
    tesseract: BinaryName = Field(default_factory=lambda: _binary("tesseract"))
    pdfunite: BinaryName = Field(default_factory=lambda: _binary("pdfunite"))
    pdfinfo: BinaryName = Field(default_factory=lambda: _binary("pdfinfo"))

    model_config = {"frozen": True}

    @classmethod
    def tools(cls) -> List[str]:
        return list(cls.model_fields.keys())


class PipelineConfig(BaseModel):
    """Everything a run needs to know besides the input and output paths."""

    color_mode: ColorMode = Field(
        default=ColorMode.BITONAL,
        description="Color mode of the rasterized pages"
    )
    resolution: int = Field(
        default=DEFAULT_RESOLUTION,
        description="Rasterization density in pixels per inch"
    )
    convert_options: Optional[str] = Field(
        default=None,
        description="Extra arguments for convert during rasterization"
    )

    layout: Optional[str] = Field(default=None, description="unpaper --layout value")
    output_pages: Optional[int] = Field(
        default=None, ge=1, le=2,
        description="unpaper --output-pages value"
    )
    unpaper_options: Optional[str] = Field(default=None, description="Extra arguments for unpaper")
    unpaper_disable_filters: List[str] = Field(
        default_factory=list,
        description="unpaper filters to switch off"
    )

    language: str = Field(default=DEFAULT_LANGUAGE, description="Tesseract language code")
    tesseract_options: Optional[str] = Field(default=None, description="Extra arguments for tesseract")
    tesseract_threads: int = Field(
        default=DEFAULT_TESSERACT_THREADS, ge=1,
        description="Parallel tesseract processes"
    )

    workers: int = Field(
        default_factory=default_workers, ge=1,
        description="Parallel processes for convert and unpaper"
    )

    disable_unpaper: bool = False
    disable_tesseract: bool = False
    step: bool = Field(default=False, description="Pause after each stage")
    verbose: bool = False
    show_progress: bool = True

    binaries: BinaryNames = Field(default_factory=BinaryNames)

    model_config = {
        "frozen": True,
        "extra": "forbid"
    }

    @field_validator('resolution', mode='before')
    @classmethod
    def validate_resolution(cls, v):
        if v is None:
            return DEFAULT_RESOLUTION
        if isinstance(v, bool):
            raise ValueError("Invalid resolution argument, has to be positive int")
        text = str(v).strip()
        if not re.fullmatch(r"[0-9]+", text) or int(text) <= 0:
            raise ValueError(
                f"Invalid resolution argument {v!r}, has to be positive int"
            )
        return int(text)

    @field_validator('convert_options', 'unpaper_options', 'tesseract_options')
    @classmethod
    def validate_options(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v.strip() == '':
            return None
        shlex.split(v)
        return v

    @field_validator('unpaper_disable_filters')
    @classmethod
    def validate_filters(cls, v: List[str]) -> List[str]:
        unknown = [f for f in v if f not in UNPAPER_FILTERS]
        if unknown:
            raise ValueError(
                f"Unknown unpaper filter(s): {', '.join(unknown)}. "
                f"Known filters: {', '.join(UNPAPER_FILTERS)}"
            )
        return v

    @field_validator('language')
    @classmethod
    def validate_language(cls, v: str) -> str:
        if not v or v.strip() == '':
            return DEFAULT_LANGUAGE
        return v.strip()

    @property
    def convert_args(self) -> List[str]:
        return shlex.split(self.convert_options) if self.convert_options else []

    @property
    def unpaper_args(self) -> List[str]:
        return shlex.split(self.unpaper_options) if self.unpaper_options else []

    @property
    def tesseract_args(self) -> List[str]:
        return shlex.split(self.tesseract_options) if self.tesseract_options else []

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.verbose else "INFO"
