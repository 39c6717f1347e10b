from .command import build_convert_args, color_mode_args, density_args

__all__ = ["build_convert_args", "color_mode_args", "density_args"]
