#!/usr/bin/env python3
"""
Bounded worker pool shared by all per-page stages.

Every stage that fans out over pages (rasterize, cleanup, normalize, OCR)
hands a list of WorkItems and a task function to WorkerPool.run(). The pool
starts exactly max_workers threads; each one repeatedly pops an item from a
shared list (under a lock that covers only the pop) and runs the task on it,
outside the lock, so external tools run concurrently.

Failure policy:
- The first exception raised by a task (by time) is the one re-raised.
- After a failure no worker takes a new item, but tasks already running
  are never interrupted; run() returns only after every worker finished.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pdfiron.infra.pipeline.logger import PipelineLogger
from pdfiron.infra.pipeline.rich_progress import RichProgressBar


@dataclass(frozen=True)
class WorkItem:
    """One unit of per-page work: read input, write output."""
    input: Path
    output: Path


class WorkerPool:
    """
    Drain a list of work items with a fixed number of threads.

    Usage:
        pool = WorkerPool(max_workers=4, logger=logger, description="convert")
        pool.run(items, lambda item: run_command("convert", [item.input, item.output]))
    """

    def __init__(
        self,
        max_workers: int,
        logger: Optional[PipelineLogger] = None,
        description: str = "Processing",
        show_progress: bool = False
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")

        self.max_workers = max_workers
        self.logger = logger
        self.description = description
        self.show_progress = show_progress

        self._lock = threading.Lock()
        self._queue: List[WorkItem] = []
        self._error: Optional[BaseException] = None
        self._failed = threading.Event()

        # Thread-safe stats
        self.stats = {
            "attempted": 0,
            "succeeded": 0,
            "failed": 0,
        }

    def run(
        self,
        items: Sequence[WorkItem],
        task: Callable[[WorkItem], None]
    ) -> None:
        """
        Apply task to every item, max_workers at a time.

        Raises:
            The first exception raised by task, after all workers stopped.
        """
        self._queue = list(items)
        self._error = None
        self._failed.clear()
        self.stats = {"attempted": 0, "succeeded": 0, "failed": 0}
        total = len(self._queue)

        if total == 0:
            if self.logger:
                self.logger.info(f"{self.description}: No items to process")
            return

        if self.logger:
            self.logger.info(
                f"{self.description}: {total} items, {self.max_workers} workers",
                items=total,
                workers=self.max_workers
            )

        progress = None
        if self.show_progress and RichProgressBar.is_supported():
            progress = RichProgressBar(total=total, prefix="   ", unit="pages")

        start_time = time.time()
        if progress:
            with progress:
                self._start_workers(task, progress)
        else:
            self._start_workers(task, None)
        elapsed_time = time.time() - start_time

        if self._error is not None:
            if self.logger:
                self.logger.debug(
                    f"{self.description} failed: {self._error}",
                    error=str(self._error)
                )
            raise self._error

        if self.logger:
            self.logger.info(
                f"{self.description} complete: {self.stats['succeeded']} items",
                items=self.stats['succeeded'],
                duration_seconds=round(elapsed_time, 3)
            )

    def _start_workers(self, task, progress) -> None:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self._worker, task, progress)
                for _ in range(self.max_workers)
            ]
        # Executor exit joins all workers; _worker never raises
        for future in futures:
            future.result()

    def _next_item(self) -> Optional[WorkItem]:
        with self._lock:
            if self._failed.is_set() or not self._queue:
                return None
            self.stats["attempted"] += 1
            return self._queue.pop()

    def _worker(self, task, progress) -> None:
        while True:
            item = self._next_item()
            if item is None:
                return

            try:
                task(item)
            except Exception as e:
                with self._lock:
                    self.stats["failed"] += 1
                    if self._error is None:
                        self._error = e
                    self._failed.set()
                if self.logger:
                    self.logger.debug(f"Failed on {item.input.name}: {e}", error=str(e))
                return

            with self._lock:
                self.stats["succeeded"] += 1
                done = self.stats["succeeded"]
            if progress:
                progress.update(done)


def run_pool(
    items: Sequence[WorkItem],
    worker_count: int,
    task: Callable[[WorkItem], None],
    logger: Optional[PipelineLogger] = None,
    description: str = "Processing",
    show_progress: bool = False,
) -> None:
    """Convenience wrapper: WorkerPool(...).run(items, task)."""
    WorkerPool(
        max_workers=worker_count,
        logger=logger,
        description=description,
        show_progress=show_progress,
    ).run(items, task)
