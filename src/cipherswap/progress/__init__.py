"""Progress reporting adapters."""

from cipherswap.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]
