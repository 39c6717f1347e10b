"""Rich-based progress bar for worker pools.

Transient: the bar disappears once the pool finishes, leaving only the
completion line from the stage logger.
"""

import sys

from rich.console import Console
from rich.progress import (
    Progress,
    BarColumn,
    TextColumn,
    TaskProgressColumn,
    TimeRemainingColumn,
)


class RichProgressBar:
    def __init__(self, total: int, prefix: str = "", width: int = 40, unit: str = "items"):
        self.total = total
        self.prefix = prefix
        self.unit = unit

        self._progress = Progress(
            TextColumn(f"{prefix}{{task.description}}"),
            BarColumn(bar_width=width),
            TaskProgressColumn(),
            TextColumn("•"),
            TextColumn("{task.fields[rate]}", justify="right"),
            TextColumn("•"),
            TimeRemainingColumn(),
            console=Console(file=sys.stderr),
            transient=True,
        )

        self._task_id = None
        self._started = False

    def __enter__(self):
        self._progress.__enter__()
        self._task_id = self._progress.add_task(
            "",
            total=self.total,
            rate="",
        )
        self._started = True
        return self

    def __exit__(self, *args):
        self._started = False
        return self._progress.__exit__(*args)

    def update(self, current: int):
        if not self._started:
            return

        elapsed = self._progress.tasks[self._task_id].elapsed or 0.01
        rate = f"{current / elapsed:.1f} {self.unit}/sec"

        self._progress.update(
            self._task_id,
            completed=current,
            rate=rate,
        )

    @staticmethod
    def is_supported() -> bool:
        """Only draw bars on an interactive terminal."""
        return Console(file=sys.stderr).is_terminal
