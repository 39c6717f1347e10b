from pathlib import Path
from typing import List, Sequence, Union


def build_tesseract_args(
    input_path: Union[str, Path],
    output_pdf: Path,
    language: str = "eng",
    extra: Sequence[str] = ()
) -> List[str]:
    """
    Argument vector for one tesseract call producing a searchable PDF.

    tesseract takes an output base name and appends .pdf itself, so the
    suffix of output_pdf is stripped.
    """
    output_base = output_pdf.with_suffix("") if output_pdf.suffix == ".pdf" else output_pdf
    args = ["-l", language]
    args.extend(extra)
    args.extend([str(input_path), str(output_base), "pdf"])
    return args
