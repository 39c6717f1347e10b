"""
PDF helpers backed by poppler's command line tools.
"""

import re
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from pdfiron.infra.commands import run_command
from pdfiron.infra.config.schemas import BinaryName
from pdfiron.infra.errors import ExecutableNotFound, PageCountUnavailable

if TYPE_CHECKING:
    from pdfiron.infra.pipeline.logger import PipelineLogger


PAGES_PATTERN = re.compile(r"Pages:\s*([0-9]+)")


def parse_page_count(report: str) -> int:
    """
    Extract the page count from a pdfinfo report.

    Raises:
        PageCountUnavailable: no "Pages: N" line, or N is zero
    """
    match = PAGES_PATTERN.search(report)
    if not match:
        raise PageCountUnavailable("Couldn't find number of pages in pdfinfo output")

    pages = int(match.group(1))
    if pages == 0:
        raise PageCountUnavailable("pdfinfo reports a document without pages")
    return pages


def count_pdf_pages(
    pdf_path: Path,
    binary: Union[str, BinaryName] = "pdfinfo",
    logger: Optional['PipelineLogger'] = None,
) -> int:
    """
    Determine the number of pages of a PDF file using pdfinfo.

    A missing pdfinfo binary is reported as PageCountUnavailable with the
    ExecutableNotFound as its cause; any other launch or exit failure
    propagates unchanged.
    """
    try:
        result = run_command(binary, [pdf_path], logger=logger)
    except ExecutableNotFound as e:
        raise PageCountUnavailable("Couldn't determine the number of pages", cause=e) from e

    return parse_page_count(result.stdout)
