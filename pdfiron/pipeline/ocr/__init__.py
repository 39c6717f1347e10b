from typing import List

from pdfiron.infra.pipeline.base_stage import BaseStage
from pdfiron.infra.pipeline.storage.workspace import StagePrefix, stem_of
from pdfiron.utils.parallel import WorkItem

from .tools import build_tesseract_args


class OcrStage(BaseStage):
    """
    Run Tesseract on each prepared TIFF, producing one searchable PDF per page.

    Reads c_* files and writes d_<stem>.pdf. Tesseract needs much more
    memory per process than convert, so it has its own worker count
    (tesseract_threads).
    """
    name = "ocr"
    state = "recognizing"
    description = "OCR"
    input_prefix = StagePrefix.NORMALIZED
    output_prefix = StagePrefix.RECOGNIZED

    def is_enabled(self) -> bool:
        return not self.config.disable_tesseract

    @property
    def max_workers(self) -> int:
        return self.config.tesseract_threads

    def work_items(self) -> List[WorkItem]:
        return [
            WorkItem(
                input=input_path,
                output=self.workspace.build_path(self.output_prefix, stem_of(input_path), "pdf"),
            )
            for input_path in self.workspace.files_with_prefix(self.input_prefix)
        ]

    def process(self, item: WorkItem) -> None:
        args = build_tesseract_args(
            item.input,
            item.output,
            language=self.config.language,
            extra=self.config.tesseract_args,
        )
        self.logger.debug(f"Going to execute OCR on {item.input.name}")
        self.run_tool(self.config.binaries.tesseract, args)
        self.logger.debug(f"OCR result of {item.input.name} was written to {item.output.name}")
