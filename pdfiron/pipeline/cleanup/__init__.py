from typing import List

from pdfiron.infra.pipeline.base_stage import BaseStage
from pdfiron.infra.pipeline.storage.workspace import StagePrefix, stem_of
from pdfiron.utils.parallel import WorkItem

from .tools import build_unpaper_args, output_paths


class CleanupStage(BaseStage):
    """
    Clean up the rasterized pages with unpaper (deskew, noise, borders).

    Reads a_* images and writes b_<stem>.<ext>; skipped when unpaper is
    disabled, in which case later stages read the a_* files directly.
    """
    name = "cleanup"
    state = "cleaning"
    description = "Cleaning up pages with unpaper"
    input_prefix = StagePrefix.RASTERIZED
    output_prefix = StagePrefix.CLEANED

    def is_enabled(self) -> bool:
        return not self.config.disable_unpaper

    def work_items(self) -> List[WorkItem]:
        items = []
        for input_path in self.workspace.files_with_prefix(self.input_prefix):
            extension = input_path.name.partition(".")[2] or None
            items.append(WorkItem(
                input=input_path,
                output=self.workspace.build_path(
                    self.output_prefix, stem_of(input_path), extension
                ),
            ))
        return items

    def process(self, item: WorkItem) -> None:
        args = build_unpaper_args(
            item.input,
            output_paths(item.output, self.config.output_pages),
            layout=self.config.layout,
            output_pages=self.config.output_pages,
            disable_filters=self.config.unpaper_disable_filters,
            extra=self.config.unpaper_args,
        )
        self.logger.debug(f"Going to clean {item.input.name}")
        self.run_tool(self.config.binaries.unpaper, args)
        self.logger.debug(f"{item.input.name} was cleaned to {item.output.name}")
