from pathlib import Path
from typing import List, Optional, Sequence, Union

from pdfiron.infra.config.schemas import ColorMode


def color_mode_args(color_mode: ColorMode) -> List[str]:
    """convert flags that produce the requested color mode."""
    if color_mode == ColorMode.GRAYSCALE:
        return ["-colorspace", "gray", "-depth", "8", "-background", "white", "-alpha", "Off"]
    if color_mode == ColorMode.TRUECOLOR:
        return ["-depth", "8", "-background", "white", "-alpha", "Off"]
    return ["-type", "Bilevel"]


def density_args(resolution: int) -> List[str]:
    return ["-density", f"{resolution}x{resolution}"]


def build_convert_args(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    resolution: int,
    color_mode: Optional[ColorMode] = None,
    settings: Sequence[str] = (),
    extra: Sequence[str] = ()
) -> List[str]:
    """
    Argument vector for one convert call.

    Order: units, color flags, density, fixed settings, user options,
    input, output. Color flags are left out when color_mode is None.
    """
    args = ["-units", "PixelsPerInch"]
    if color_mode is not None:
        args.extend(color_mode_args(color_mode))
    args.extend(density_args(resolution))
    args.extend(settings)
    args.extend(extra)
    args.append(str(input_path))
    args.append(str(output_path))
    return args
