from pdfiron.infra.pipeline.storage.workspace import (
    Workspace,
    StagePrefix,
    START_PDF,
    OUTPUT_SUFFIX,
    stem_of,
)

__all__ = [
    "Workspace",
    "StagePrefix",
    "START_PDF",
    "OUTPUT_SUFFIX",
    "stem_of",
]
