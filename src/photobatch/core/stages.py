"""Per-item stage chain with idempotent skips and short-circuit on failure."""

from typing import List, Optional, Sequence

from .exceptions import StageError
from .logging_config import get_logger
from .models import ItemOutcome, PipelineConfig, WorkItem
from .protocols import ItemFinalizer, LoggerProtocol, Stage


class StageExecutor:
    """
    Runs an ordered chain of stages against one work item.

    Inactive stages are bypassed silently, stages whose idempotency check
    passes are recorded in ``item.skipped_stages``, and the first failing
    stage stops the chain. The finalizer runs afterwards for every outcome.
    """

    def __init__(
        self,
        stages: Sequence[Stage],
        finalizer: Optional[ItemFinalizer] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        self._stages = list(stages)
        self._finalizer = finalizer
        self._logger = logger or get_logger("stages")

    @property
    def stages(self) -> List[Stage]:
        return list(self._stages)

    def active_stages(self, config: PipelineConfig) -> List[Stage]:
        return [stage for stage in self._stages if stage.applies(config)]

    def run(self, item: WorkItem, config: PipelineConfig) -> ItemOutcome:
        """Process one item and return its terminal outcome."""
        failure: Optional[StageError] = None

        for stage in self.active_stages(config):
            try:
                if stage.skip_if(item, config):
                    item.skipped_stages.append(stage.name)
                    self._logger.debug(f"[{item.identifier}] {stage.name}: already satisfied, skipped")
                    continue
                self._logger.debug(f"[{item.identifier}] {stage.name}: running")
                stage.execute(item, config)
            except StageError as e:
                failure = e
            except Exception as e:  # noqa: BLE001
                failure = StageError(f"unexpected {type(e).__name__}: {e}")
                failure.__cause__ = e

            if failure is not None:
                failure.stage = failure.stage or stage.name
                failure.item = failure.item or item.identifier
                break
            item.executed_stages.append(stage.name)

        if failure is not None:
            item.mark(ItemOutcome.FAILED, f"{failure.stage}: {failure}")
            self._logger.warning(f"[{item.identifier}] {failure.stage} failed: {failure}")
        elif item.executed_stages:
            item.mark(ItemOutcome.SUCCESS)
        else:
            item.mark(ItemOutcome.SKIPPED)

        if self._finalizer is not None:
            try:
                self._finalizer.finalize(item, config)
            except StageError as e:
                # The item's outcome stands; the leftover file is only reported.
                self._logger.warning(f"[{item.identifier}] cleanup failed: {e}")

        return item.outcome
