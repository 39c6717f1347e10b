from pathlib import Path
from typing import Any, Dict, List

from pdfiron.infra.errors import WorkspaceIOFailure
from pdfiron.infra.pipeline.base_stage import BaseStage
from pdfiron.infra.pipeline.storage.workspace import StagePrefix


class MergeStage(BaseStage):
    """
    Combine the per-page PDFs into the output document with pdfunite.

    pdfunite concatenates in argument order, so the d_* files are sorted by
    path first; zero padded page numbers make that page order.
    """
    name = "merge"
    state = "merging"
    description = "Combine PDF"
    input_prefix = StagePrefix.RECOGNIZED

    def is_enabled(self) -> bool:
        return not self.config.disable_tesseract

    def inputs(self) -> List[Path]:
        return sorted(self.workspace.files_with_prefix(self.input_prefix))

    def run(self) -> Dict[str, Any]:
        inputs = self.inputs()
        if not inputs:
            raise WorkspaceIOFailure(
                f"No recognized pages ({self.input_prefix}*) found in {self.workspace.root}"
            )

        output = self.workspace.output_path
        self.logger.info(f"Combining {len(inputs)} pages into {output}", items=len(inputs))
        self.run_tool(self.config.binaries.pdfunite, [*inputs, output])

        return {
            "status": "success",
            "items": len(inputs),
            "output": str(output),
        }
