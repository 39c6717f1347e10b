import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pdfiron.infra.config.schemas import PipelineConfig
from pdfiron.infra.pipeline.base_stage import BaseStage
from pdfiron.infra.pipeline.registry import get_stages
from pdfiron.infra.pipeline.storage.workspace import Workspace


class PipelineState(str, Enum):
    PENDING = "pending"
    RASTERIZING = "rasterizing"
    CLEANING = "cleaning"
    NORMALIZING = "normalizing"
    RECOGNIZING = "recognizing"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


def run_stage(stage: BaseStage) -> Dict[str, Any]:
    """
    Run a single stage with start/completion logging.

    Errors propagate unchanged so the caller sees which tool failed.
    """
    if not stage.name:
        raise ValueError(f"{stage.__class__.__name__}.name is not set")

    logger = stage.logger
    logger.info(f"Starting stage: {stage.name}")

    start_time = time.time()
    try:
        stats = stage.run()
    except Exception as e:
        logger.debug(f"Stage failed: {stage.name}", error=str(e))
        raise
    elapsed_time = time.time() - start_time

    stats = dict(stats or {})
    stats["time_seconds"] = elapsed_time
    logger.info(
        f"Stage complete: {stage.name}",
        items=stats.get("items"),
        duration_seconds=round(elapsed_time, 3)
    )
    return stats


class Pipeline:
    """
    Runs the stages in fixed order: rasterize, cleanup, normalize, ocr, merge.

    Disabled stages are skipped; the first failing stage moves the pipeline
    to FAILED and its exception is re-raised as is. With config.step set the
    pipeline waits for a line on stdin after every stage.
    """

    def __init__(
        self,
        workspace: Workspace,
        config: PipelineConfig,
        stages: Optional[List[BaseStage]] = None,
        prompt: Callable[[str], str] = input
    ):
        self.workspace = workspace
        self.config = config
        self.stages = stages if stages is not None else get_stages(workspace, config)
        self.prompt = prompt

        self.state = PipelineState.PENDING
        self.history: List[PipelineState] = []

    @property
    def logger(self):
        return self.workspace.logger("pipeline")

    def _transition(self, state: PipelineState) -> None:
        self.logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def wait(self, stage: BaseStage) -> None:
        """Block until the user acknowledges, so intermediate files can be inspected."""
        try:
            self.prompt(
                f"Finished {stage.name}. Intermediate files are in {self.workspace.root}. "
                f"Press Enter to continue..."
            )
        except EOFError:
            pass

    def run(self) -> Dict[str, Any]:
        results = {}

        for stage in self.stages:
            if not stage.is_enabled():
                self.logger.debug(f"Skipping disabled stage: {stage.name}")
                continue

            self._transition(PipelineState(stage.state))
            try:
                results[stage.name] = run_stage(stage)
            except Exception:
                self._transition(PipelineState.FAILED)
                raise

            if self.config.step:
                self.wait(stage)

        if self.config.disable_tesseract:
            self.logger.warning("OCR is disabled, no output document was written")

        self._transition(PipelineState.DONE)
        return results


def run_pipeline(
    workspace: Workspace,
    config: PipelineConfig,
    prompt: Callable[[str], str] = input
) -> Dict[str, Any]:
    return Pipeline(workspace, config, prompt=prompt).run()
