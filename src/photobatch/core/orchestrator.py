"""Run orchestration: enumerate, process sequentially, summarize."""

import time
from enum import Enum
from typing import List, Optional

from .error_handling import BatchOperationContextManager
from .exceptions import RunInterrupted
from .logging_config import get_logger
from .models import ItemOutcome, PipelineConfig, RunSummary, WorkItem
from .progress import StatusLine
from .protocols import LoggerProtocol, WorkEnumerator
from .stages import StageExecutor


class RunState(str, Enum):
    """States of a batch run."""

    INIT = "init"
    ENUMERATING = "enumerating"
    PROCESSING = "processing"
    FINALIZING = "finalizing"
    DONE = "done"
    INTERRUPTED = "interrupted"


class RunOrchestrator:
    """Main orchestrator for a batch run."""

    def __init__(
        self,
        enumerator: WorkEnumerator,
        executor: StageExecutor,
        status: Optional[StatusLine] = None,
        logger: Optional[LoggerProtocol] = None,
        operation_name: str = "Batch run",
    ):
        self._enumerator = enumerator
        self._executor = executor
        self._status = status or StatusLine(enabled=False)
        self._logger = logger or get_logger("orchestrator")
        self._operation_name = operation_name
        self.state = RunState.INIT
        self.items: List[WorkItem] = []
        self.current_index = 0

    def run(self, config: PipelineConfig) -> RunSummary:
        """
        Process every work item once, in order.

        Per-item failures are recorded and never stop the run. Enumeration
        errors (PreconditionError) propagate before any item is touched.

        Raises:
            PreconditionError: The work source is missing or unreadable.
            RunInterrupted: The user cancelled the run, enumeration included.
        """
        start_time = time.time()
        total = 0

        try:
            self.state = RunState.ENUMERATING
            self.items = self._enumerator.enumerate(config)
            total = len(self.items)
            summary = RunSummary(total=total)

            self.state = RunState.PROCESSING
            if not self.items:
                self._logger.info("No items found to process")

            with BatchOperationContextManager(self._operation_name, logger=self._logger) as batch:
                for index, item in enumerate(self.items, start=1):
                    self.current_index = index
                    self._status.update(index, total, item.identifier)

                    outcome = self._executor.run(item, config)

                    if outcome is ItemOutcome.SUCCESS:
                        summary.processed += 1
                    elif outcome is ItemOutcome.SKIPPED:
                        summary.skipped += 1
                    else:
                        summary.failed.append(item.identifier)
                        batch.add_error(item.error or "Unknown error", item.identifier)
        except KeyboardInterrupt as e:
            where = (
                "during enumeration"
                if self.state is RunState.ENUMERATING
                else f"at item {self.current_index}/{total}"
            )
            self.state = RunState.INTERRUPTED
            self._status.finish(f"Interrupted {where}")
            self._logger.warning(f"{self._operation_name} interrupted by user {where}")
            raise RunInterrupted(f"interrupted {where}") from e

        self.state = RunState.FINALIZING
        self._log_final_statistics(summary, time.time() - start_time)
        self._status.finish(
            f"Done: {summary.processed} processed, {summary.skipped} skipped, "
            f"{summary.failed_count} failed"
        )
        self.state = RunState.DONE
        return summary

    def _log_final_statistics(self, summary: RunSummary, total_time: float) -> None:
        overall_rate = summary.total / total_time if total_time > 0 else 0

        self._logger.info("=" * 80)
        self._logger.info(f"{self._operation_name.upper()} COMPLETED")
        self._logger.info("=" * 80)
        self._logger.info(f"Total execution time: {total_time:.1f}s")
        self._logger.info(f"Overall rate: {overall_rate:.1f} items/sec")
        self._logger.info(f"Items: {summary.total}")
        self._logger.info(f"Processed: {summary.processed}")
        self._logger.info(f"Skipped: {summary.skipped}")
        self._logger.info(f"Failed: {summary.failed_count}")
        for identifier in summary.failed:
            self._logger.info(f"  failed: {identifier}")
        self._logger.info("=" * 80)
