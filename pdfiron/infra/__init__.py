from pdfiron.infra.errors import (
    PdfIronError,
    InvalidInput,
    WorkspaceIOFailure,
    InvalidConfiguration,
    ExecutableNotFound,
    ExternalToolFailed,
    SpawnFailed,
    PageCountUnavailable,
)

__all__ = [
    "PdfIronError",
    "InvalidInput",
    "WorkspaceIOFailure",
    "InvalidConfiguration",
    "ExecutableNotFound",
    "ExternalToolFailed",
    "SpawnFailed",
    "PageCountUnavailable",
]
