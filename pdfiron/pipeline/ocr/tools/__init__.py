from .command import build_tesseract_args

__all__ = ["build_tesseract_args"]
