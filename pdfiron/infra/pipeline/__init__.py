# Stage, runner and registry modules import utils.parallel, which imports
# this package; they are imported from their own modules, not re-exported here.
from pdfiron.infra.pipeline.logger import PipelineLogger, create_logger
from pdfiron.infra.pipeline.storage import Workspace, StagePrefix

__all__ = [
    "PipelineLogger",
    "create_logger",
    "Workspace",
    "StagePrefix",
]
