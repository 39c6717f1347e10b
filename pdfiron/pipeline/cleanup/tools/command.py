from pathlib import Path
from typing import List, Optional, Sequence, Union


def output_paths(output: Path, output_pages: Optional[int]) -> List[Path]:
    """
    Files unpaper writes for one input sheet.

    With two output pages per sheet the sheet's output name gets a _1/_2
    suffix before the extension (b_a_0003.pgm -> b_a_0003_1.pgm, b_a_0003_2.pgm).
    """
    if not output_pages or output_pages == 1:
        return [output]

    stem, _, extension = output.name.partition(".")
    return [
        output.with_name(f"{stem}_{page}.{extension}" if extension else f"{stem}_{page}")
        for page in range(1, output_pages + 1)
    ]


def build_unpaper_args(
    input_path: Union[str, Path],
    outputs: Sequence[Union[str, Path]],
    layout: Optional[str] = None,
    output_pages: Optional[int] = None,
    disable_filters: Sequence[str] = (),
    extra: Sequence[str] = ()
) -> List[str]:
    args = ["--overwrite"]
    if layout:
        args.extend(["--layout", layout])
    if output_pages:
        args.extend(["--output-pages", str(output_pages)])
    args.extend(f"--no-{name}" for name in disable_filters)
    args.extend(extra)
    args.append(str(input_path))
    args.extend(str(path) for path in outputs)
    return args
