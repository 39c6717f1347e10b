from .command import build_unpaper_args, output_paths

__all__ = ["build_unpaper_args", "output_paths"]
