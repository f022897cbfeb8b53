"""Rich-based progress reporter for terminal output."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from cipherswap.core.ports import ProgressCallback


class RichProgressReporter:
    """Progress reporter using Rich for terminal display.

    Shows one bar per file being decrypted, with throughput and ETA.

    Example:
        with RichProgressReporter() as reporter:
            decrypter.decrypt(path, size, progress=reporter)
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the progress display.

        Args:
            console: Optional Rich console to render on (stderr by default).
        """
        self._progress = Progress(
            TextColumn("[bold green]decrypt[/] {task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console or Console(stderr=True),
            transient=True,
        )
        self._tasks: dict[str, TaskID] = {}
        self._started = False

    def __enter__(self) -> RichProgressReporter:
        """Start the progress display."""
        self._progress.start()
        self._started = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop the progress display."""
        self._progress.stop()
        self._started = False

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a decryption task.

        Args:
            name: Task key, usually the file path. Only its final component
                is shown next to the bar.
            total: Total ciphertext bytes.

        Returns:
            A callback to update progress.
        """
        if not self._started:
            self._progress.start()
            self._started = True

        task_id = self._progress.add_task(Path(name).name, total=total or None)
        self._tasks[name] = task_id

        def callback(processed: int, _total: int) -> None:
            self._progress.update(task_id, completed=processed)

        return callback

    def finish_task(self, name: str) -> None:
        """Mark a task as complete and stop tracking it.

        Args:
            name: The task name.
        """
        task_id = self._tasks.pop(name, None)
        if task_id is None:
            return
        task = self._progress.tasks[task_id]
        if task.total is not None:
            self._progress.update(task_id, completed=task.total)
