import os
import shutil
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from pdfiron.infra.errors import InvalidInput, WorkspaceIOFailure
from pdfiron.infra.pipeline.logger import PipelineLogger, create_logger


# Name of the copied source document inside the workspace
START_PDF = "input.pdf"

# Appended to the source stem to build the default output name
OUTPUT_SUFFIX = "-ironed"

TEMP_PREFIX = "pdfiron-"


class StagePrefix(str, Enum):
    """
    Filename prefix of the files each stage leaves in the workspace.

    The prefixes are the only contract between stages: a stage finds its
    input by listing the files carrying the previous stage's prefix.
    """
    RASTERIZED = "a_"
    CLEANED = "b_"
    NORMALIZED = "c_"
    RECOGNIZED = "d_"

    def __str__(self) -> str:
        return self.value


def stem_of(path: Union[str, Path]) -> str:
    """Filename up to the first dot (a_0001.pgm -> a_0001)."""
    return Path(path).name.split(".", 1)[0]


class Workspace:
    """Private scratch directory for one run.

    Holds a copy of the source document (input.pdf) and every staged file.
    Use Workspace.create() to build one and dispose() (or a with-block) to
    remove it again; the directory is removed exactly once.
    """
    def __init__(
        self,
        input_path: Path,
        root: Path,
        output: Optional[Path] = None,
        log_dir: Optional[Path] = None,
        log_level: str = "INFO",
        console_output: bool = True,
    ):
        self.input_path = input_path
        self.root = root
        self.output = output
        self.log_dir = log_dir
        self.log_level = log_level
        self.console_output = console_output

        self._lock = threading.Lock()
        self._loggers: Dict[str, PipelineLogger] = {}
        self._disposed = False

    @classmethod
    def create(
        cls,
        source: Union[str, Path],
        output: Optional[Union[str, Path]] = None,
        log_dir: Optional[Union[str, Path]] = None,
        **kwargs
    ) -> "Workspace":
        """
        Validate the source document and set up a fresh workspace for it.

        The source path is shell-expanded (~ and $VARS) and made absolute.
        Nothing is created on disk unless the source is an existing PDF, and
        the temp directory is removed again if any later step fails.

        Raises:
            InvalidInput: source is missing or not a .pdf file
            WorkspaceIOFailure: log directory, temp directory or copy failed
        """
        input_path = cls.expand_path(source)
        cls.validate_input_file(input_path)
        log_dir = cls.prepare_log_dir(log_dir)

        try:
            root = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        except OSError as e:
            raise WorkspaceIOFailure("Couldn't create temp folder", e) from e

        try:
            destination = root / START_PDF
            try:
                shutil.copyfile(input_path, destination)
            except OSError as e:
                raise WorkspaceIOFailure(f"Couldn't copy input file to {destination}", e) from e

            workspace = cls(
                input_path,
                root,
                output=Path(output) if output is not None else None,
                log_dir=log_dir,
                **kwargs
            )
            workspace.logger("workspace").debug(
                f"Copied {input_path} to {destination}"
            )
        except BaseException:
            shutil.rmtree(root, ignore_errors=True)
            raise
        return workspace

    @staticmethod
    def prepare_log_dir(log_dir: Optional[Union[str, Path]]) -> Optional[Path]:
        """Create the JSON log directory (if any) so logging can't fail mid-run."""
        if log_dir is None:
            return None
        path = Path(os.path.expandvars(os.path.expanduser(str(log_dir))))
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceIOFailure(f"Couldn't create log directory {path}", e) from e
        return path

    @staticmethod
    def expand_path(path: Union[str, Path]) -> Path:
        """Expand ~ and environment variables and normalize to an absolute path."""
        expanded = os.path.expandvars(os.path.expanduser(str(path)))
        return Path(os.path.abspath(expanded))

    @staticmethod
    def validate_input_file(path: Path) -> None:
        if not path.exists():
            raise InvalidInput(path, InvalidInput.NOT_FOUND)
        if not path.is_file() or path.suffix.lower() != ".pdf":
            raise InvalidInput(path, InvalidInput.NOT_PDF)

    @property
    def run_id(self) -> str:
        return self.root.name

    @property
    def source_document(self) -> Path:
        return self.root / START_PDF

    @property
    def output_path(self) -> Path:
        return self.resolve_output_path(self.output)

    def resolve_output_path(self, explicit: Optional[Path] = None) -> Path:
        """Explicit path if given, else <stem>-ironed.<ext> next to the source."""
        if explicit is not None:
            return explicit

        name_parts = self.input_path.name.split(".", 1)
        name = f"{name_parts[0]}{OUTPUT_SUFFIX}"
        if len(name_parts) > 1:
            name = f"{name}.{name_parts[1]}"
        return self.input_path.parent / name

    def path_for(self, name: str) -> Path:
        return self.root / name

    def build_path(
        self,
        prefix: Union[StagePrefix, str],
        identifier: str,
        extension: Optional[str] = None
    ) -> Path:
        filename = f"{prefix}{identifier}"
        if extension:
            filename = f"{filename}.{extension}"
        return self.path_for(filename)

    def files_with_prefix(self, prefix: Union[StagePrefix, str]) -> List[Path]:
        """
        All files in the workspace whose name starts with prefix.

        Directory order, not sorted: callers that care about order sort.
        """
        prefix = str(prefix)
        try:
            with os.scandir(self.root) as entries:
                return [
                    Path(entry.path)
                    for entry in entries
                    if entry.is_file() and entry.name.startswith(prefix)
                ]
        except OSError as e:
            raise WorkspaceIOFailure(f"Couldn't list workspace {self.root}", e) from e

    def logger(self, stage: str) -> PipelineLogger:
        """Get logger instance for a stage, creating lazily."""
        with self._lock:
            if stage not in self._loggers:
                self._loggers[stage] = create_logger(
                    self.run_id,
                    stage,
                    log_dir=self.log_dir,
                    level=self.log_level,
                    console_output=self.console_output,
                )
            return self._loggers[stage]

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Remove the workspace directory. Safe to call more than once."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True

        try:
            shutil.rmtree(self.root)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise WorkspaceIOFailure(f"Couldn't remove temp folder {self.root}", e) from e
        finally:
            for logger in self._loggers.values():
                logger.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.dispose()
        except WorkspaceIOFailure:
            # Don't mask the error that ended the run
            if exc_type is None:
                raise
        return False
