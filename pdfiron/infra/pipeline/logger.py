import itertools
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# Extra fields copied from a record into the JSON line when present
CONTEXT_FIELDS = (
    'run_id',
    'stage',
    'page',
    'binary',
    'items',
    'workers',
    'duration_seconds',
    'error',
)

# Suffix keeping logging.Logger names unique per PipelineLogger instance
_instance_ids = itertools.count()


class FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit for real-time log visibility."""
    def emit(self, record):
        super().emit(record)
        self.flush()


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """LEVEL: [stage] message"""

    def format(self, record: logging.LogRecord) -> str:
        stage = getattr(record, 'stage', None)
        if stage:
            return f"{record.levelname}: [{stage}] {record.getMessage()}"
        return f"{record.levelname}: {record.getMessage()}"


class PipelineLogger:
    """Logger for one stage of one run.

    Console output goes to stderr. When a log directory is given, every
    message is also appended as a JSON line to {log_dir}/{stage}.jsonl.
    Handlers are created lazily on first log message to avoid creating
    empty log files when nothing is logged.
    """
    def __init__(
        self,
        run_id: str,
        stage: str,
        log_dir: Optional[Path] = None,
        console_output: bool = True,
        json_output: Optional[bool] = None,
        level: str = "INFO",
        filename: str = None,
        stream=None
    ):
        self.run_id = run_id
        self.stage = stage
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.console_output = console_output
        self.json_output = self.log_dir is not None if json_output is None else json_output
        self.level = level
        self.filename = filename or f"{stage}.jsonl"
        self.stream = stream

        if self.json_output and self.log_dir is None:
            raise ValueError("json_output requires a log_dir")

        self._logger = None
        self._initialized = False
        self.log_file = None

    def _ensure_initialized(self):
        """Initialize logger and handlers on first use."""
        if self._initialized:
            return

        logger_name = f"pdfiron.{self.run_id}.{self.stage}.{next(_instance_ids)}"
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(getattr(logging, self.level.upper()))
        self._logger.propagate = False

        if self.console_output:
            console_handler = logging.StreamHandler(self.stream or sys.stderr)
            console_handler.setFormatter(ConsoleFormatter())
            self._logger.addHandler(console_handler)

        if self.json_output:
            # Create log directory only when we actually need to write
            self.log_dir.mkdir(parents=True, exist_ok=True)
            json_file = self.log_dir / self.filename
            json_handler = FlushingFileHandler(json_file, mode='a')
            json_handler.setFormatter(JSONFormatter())
            self._logger.addHandler(json_handler)
            self.log_file = json_file

        self._initialized = True

    @property
    def logger(self):
        """Get the underlying logger, initializing if needed."""
        self._ensure_initialized()
        return self._logger

    def is_enabled_for(self, level: str) -> bool:
        return self.logger.isEnabledFor(getattr(logging, level.upper()))

    def _log(self, level: str, message: str, **kwargs):
        # Extract reserved logging parameters
        reserved_params = {}
        for param in ['exc_info', 'stack_info', 'stacklevel', 'extra']:
            if param in kwargs:
                reserved_params[param] = kwargs.pop(param)

        extra = {
            'run_id': self.run_id,
            'stage': self.stage,
            **kwargs
        }
        if 'extra' in reserved_params:
            extra.update(reserved_params.pop('extra'))

        self.logger.log(
            getattr(logging, level.upper()),
            message,
            extra=extra,
            **reserved_params
        )

    def debug(self, message: str, **kwargs):
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log('ERROR', message, **kwargs)

    def close(self):
        # Only close if we actually initialized handlers
        if self._initialized and self._logger:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_logger(run_id: str, stage: str, **kwargs) -> PipelineLogger:
    return PipelineLogger(run_id, stage, **kwargs)
