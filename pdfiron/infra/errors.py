"""
Errors raised while ironing a document.

Every failure that ends a run is a PdfIronError subclass. The message of each
error is a single line meant for the person at the terminal; structured
attributes carry the details for callers (and tests) that need them.
"""

from typing import Optional


class PdfIronError(Exception):
    """Base class for all errors that terminate a run."""


class InvalidInput(PdfIronError):
    """The source document is missing or isn't a PDF."""

    NOT_FOUND = "not_found"
    NOT_PDF = "not_pdf"

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        if reason == self.NOT_FOUND:
            message = f"Given input file {path} doesn't exist"
        else:
            message = f"Given input file {path} isn't a PDF file"
        super().__init__(message)


class WorkspaceIOFailure(PdfIronError):
    """Creating, filling or removing the temporary workspace failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}, {cause}"
        super().__init__(message)


class InvalidConfiguration(PdfIronError):
    """A configuration value was rejected before anything ran."""


class ExecutableNotFound(PdfIronError):
    """
    A tool wasn't found on the search path.

    The message depends on where the binary name came from: a name the user
    supplied gets pointed back at the option/variable used to set it, the
    default name gets install instructions plus the ways to override it.
    """

    def __init__(
        self,
        binary: str,
        tool: Optional[str] = None,
        arg: Optional[str] = None,
        env: Optional[str] = None,
        source: str = "default",
    ):
        self.binary = binary
        self.tool = tool or binary
        self.arg = arg
        self.env = env
        self.source = source
        super().__init__(self._message())

    def _message(self) -> str:
        if self.source == "argument":
            return (
                f"Couldn't find {self.tool} on your system under the name {self.binary} "
                f"as specified by you with the --{self.arg} argument."
            )
        if self.source == "config":
            return (
                f"Couldn't find {self.tool} on your system under the name {self.binary} "
                f"as specified in the binaries section of your config file."
            )
        if self.source == "env":
            return (
                f"Couldn't find {self.tool} on your system under the name {self.binary} "
                f"as specified by you with the {self.env} environment variable."
            )
        if self.arg and self.env:
            return (
                f"Couldn't find {self.tool} on your system, please make sure {self.tool} "
                f"is installed. You can use the --{self.arg} argument or the environment "
                f"variable {self.env} to set an alternative binary name."
            )
        return f"Couldn't find {self.binary} on your system, please make sure it is installed."


class ExternalToolFailed(PdfIronError):
    """A tool ran but exited with a non-zero status."""

    def __init__(self, binary: str, returncode: int, stdout: str = "", stderr: str = ""):
        self.binary = binary
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = " ".join(part.strip() for part in (stdout, stderr) if part and part.strip())
        message = f"Execution of {binary} failed (exit code {returncode})"
        if detail:
            message = f"{message}: {' '.join(detail.split())}"
        super().__init__(message)


class SpawnFailed(PdfIronError):
    """The operating system refused to start a tool for a reason other than not-found."""

    def __init__(self, binary: str, cause: BaseException):
        self.binary = binary
        self.cause = cause
        super().__init__(f"Failed to call {binary}, {cause}")


class PageCountUnavailable(PdfIronError):
    """The number of pages in the source document couldn't be determined."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
