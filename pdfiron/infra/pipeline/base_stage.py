from typing import Any, Dict, List, Sequence, Union

from pdfiron.infra.commands import CommandResult, run_command
from pdfiron.infra.config.schemas import BinaryName, PipelineConfig
from pdfiron.infra.pipeline.logger import PipelineLogger
from pdfiron.infra.pipeline.storage.workspace import Workspace
from pdfiron.utils.parallel import WorkItem, WorkerPool


class BaseStage:
    """
    One step of the pipeline, bound to one external tool.

    Per-page stages implement work_items() and process(); the default run()
    feeds them through a WorkerPool. Stages never call each other: a stage
    finds its input in the workspace by filename prefix.
    """
    name: str = None
    state: str = None
    description: str = ""

    def __init__(self, workspace: Workspace, config: PipelineConfig):
        self.workspace = workspace
        self.config = config

    @property
    def logger(self) -> PipelineLogger:
        """Get logger from the workspace (single source of truth)."""
        return self.workspace.logger(self.name)

    @property
    def max_workers(self) -> int:
        return self.config.workers

    def is_enabled(self) -> bool:
        return True

    def work_items(self) -> List[WorkItem]:
        raise NotImplementedError(f"{self.__class__.__name__} must implement work_items()")

    def process(self, item: WorkItem) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} must implement process()")

    def run_tool(
        self,
        binary: Union[str, BinaryName],
        args: Sequence[Any]
    ) -> CommandResult:
        return run_command(binary, args, logger=self.logger)

    def run(self) -> Dict[str, Any]:
        items = self.work_items()

        pool = WorkerPool(
            max_workers=self.max_workers,
            logger=self.logger,
            description=self.description or self.name,
            show_progress=self.config.show_progress,
        )
        pool.run(items, self.process)

        return {
            "status": "success",
            "items": len(items),
        }
