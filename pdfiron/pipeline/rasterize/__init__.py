from pathlib import Path
from typing import List

from pdfiron.infra.pdf import count_pdf_pages
from pdfiron.infra.pipeline.base_stage import BaseStage
from pdfiron.infra.pipeline.storage.workspace import StagePrefix
from pdfiron.utils.parallel import WorkItem

from .tools import build_convert_args


def page_identifier(page_index: int) -> str:
    # Zero padded so that sorting filenames keeps page order
    return f"{page_index:04d}"


class RasterizeStage(BaseStage):
    """
    Render every page of input.pdf to an image with convert.

    One convert call per page (input.pdf[N]), written as a_NNNN.<ext> where
    the extension follows the configured color mode.
    """
    name = "rasterize"
    state = "rasterizing"
    description = "Extracting images from input PDF"
    output_prefix = StagePrefix.RASTERIZED

    def page_count(self) -> int:
        return count_pdf_pages(
            self.workspace.source_document,
            binary=self.config.binaries.pdfinfo,
            logger=self.logger
        )

    def work_items(self) -> List[WorkItem]:
        pages = self.page_count()
        self.logger.info(f"Input document has {pages} pages")

        source = self.workspace.source_document
        extension = self.config.color_mode.extension
        return [
            WorkItem(
                input=Path(f"{source}[{page}]"),
                output=self.workspace.build_path(
                    self.output_prefix, page_identifier(page), extension
                ),
            )
            for page in range(pages)
        ]

    def process(self, item: WorkItem) -> None:
        args = build_convert_args(
            item.input,
            item.output,
            resolution=self.config.resolution,
            color_mode=self.config.color_mode,
            extra=self.config.convert_args,
        )
        self.logger.debug(f"Going to convert {item.input.name}")
        self.run_tool(self.config.binaries.convert, args)
        self.logger.debug(f"{item.input.name} was converted to {item.output.name}")
