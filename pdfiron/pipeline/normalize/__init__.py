from typing import List

from pdfiron.infra.pipeline.base_stage import BaseStage
from pdfiron.infra.pipeline.storage.workspace import StagePrefix, stem_of
from pdfiron.pipeline.rasterize.tools import build_convert_args
from pdfiron.utils.parallel import WorkItem


# Tesseract gets 8 bit TIFFs whatever color mode the output uses
NORMALIZE_SETTINGS = ["-depth", "8", "-alpha", "Off"]

# convert expands the frame number, so one image gives c_<stem>_000.tiff
FRAME_PATTERN = "%03d"


class NormalizeStage(BaseStage):
    """
    Convert the page images into TIFFs for Tesseract.

    Reads b_* files (a_* when cleanup is disabled) and writes
    c_<stem>_NNN.tiff. User convert options are not applied here.
    """
    name = "normalize"
    state = "normalizing"
    description = "Converting images for Tesseract input"
    output_prefix = StagePrefix.NORMALIZED

    def is_enabled(self) -> bool:
        return not self.config.disable_tesseract

    @property
    def input_prefix(self) -> StagePrefix:
        if self.config.disable_unpaper:
            return StagePrefix.RASTERIZED
        return StagePrefix.CLEANED

    def work_items(self) -> List[WorkItem]:
        return [
            WorkItem(
                input=input_path,
                output=self.workspace.build_path(
                    self.output_prefix, f"{stem_of(input_path)}_{FRAME_PATTERN}", "tiff"
                ),
            )
            for input_path in self.workspace.files_with_prefix(self.input_prefix)
        ]

    def process(self, item: WorkItem) -> None:
        args = build_convert_args(
            item.input,
            item.output,
            resolution=self.config.resolution,
            settings=NORMALIZE_SETTINGS,
        )
        self.logger.debug(f"Going to convert {item.input.name} for OCR")
        self.run_tool(self.config.binaries.convert, args)
