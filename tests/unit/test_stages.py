"""Unit tests for the per-item stage chain."""

from pathlib import Path
from typing import List

import pytest

from photobatch.core.exceptions import StageError
from photobatch.core.models import ItemOutcome, PipelineConfig, WorkItem
from photobatch.core.protocols import ItemFinalizer, Stage
from photobatch.core.stages import StageExecutor
from photobatch.testing import FakeLogger


class RecordingStage(Stage):
    """Stage whose activity, skip check and failure are scripted."""

    def __init__(self, name, calls, active=True, skip=False, error=None):
        self.name = name
        self._calls = calls
        self._active = active
        self._skip = skip
        self._error = error

    def applies(self, config):
        return self._active

    def skip_if(self, item, config):
        self._calls.append(f"check:{self.name}")
        return self._skip

    def execute(self, item, config):
        self._calls.append(f"execute:{self.name}")
        if self._error is not None:
            raise self._error


class RecordingFinalizer(ItemFinalizer):
    def __init__(self, error=None):
        self.seen: List[ItemOutcome] = []
        self._error = error

    def finalize(self, item, config):
        self.seen.append(item.outcome)
        if self._error is not None:
            raise self._error


@pytest.fixture
def item() -> WorkItem:
    return WorkItem(identifier="a.jpg", source=Path("a.jpg"))


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()


class TestStageExecutor:
    """Tests for StageExecutor.run."""

    def test_all_stages_succeed(self, item, config):
        calls = []
        executor = StageExecutor(
            [RecordingStage("one", calls), RecordingStage("two", calls)], logger=FakeLogger()
        )

        outcome = executor.run(item, config)

        assert outcome is ItemOutcome.SUCCESS
        assert item.executed_stages == ["one", "two"]
        assert calls == ["check:one", "execute:one", "check:two", "execute:two"]

    def test_inactive_stage_bypassed_silently(self, item, config):
        calls = []
        executor = StageExecutor(
            [RecordingStage("off", calls, active=False), RecordingStage("on", calls)],
            logger=FakeLogger(),
        )

        executor.run(item, config)

        assert "check:off" not in calls
        assert item.skipped_stages == []
        assert item.executed_stages == ["on"]

    def test_skipped_stage_never_executes(self, item, config):
        calls = []
        executor = StageExecutor(
            [RecordingStage("done", calls, skip=True), RecordingStage("todo", calls)],
            logger=FakeLogger(),
        )

        outcome = executor.run(item, config)

        assert "execute:done" not in calls
        assert item.skipped_stages == ["done"]
        assert outcome is ItemOutcome.SUCCESS

    def test_all_stages_skipped_is_skipped_outcome(self, item, config):
        calls = []
        executor = StageExecutor(
            [RecordingStage("a", calls, skip=True), RecordingStage("b", calls, skip=True)],
            logger=FakeLogger(),
        )

        assert executor.run(item, config) is ItemOutcome.SKIPPED

    def test_no_active_stages_is_skipped_outcome(self, item, config):
        executor = StageExecutor([RecordingStage("a", [], active=False)], logger=FakeLogger())
        assert executor.run(item, config) is ItemOutcome.SKIPPED

    def test_failure_short_circuits(self, item, config):
        calls = []
        logger = FakeLogger()
        executor = StageExecutor(
            [
                RecordingStage("one", calls),
                RecordingStage("two", calls, error=StageError("conversion failed")),
                RecordingStage("three", calls),
            ],
            logger=logger,
        )

        outcome = executor.run(item, config)

        assert outcome is ItemOutcome.FAILED
        assert "check:three" not in calls
        assert item.executed_stages == ["one"]
        assert item.error == "two: conversion failed"
        assert any("two failed" in m for m in logger.messages("WARNING"))

    def test_unexpected_exception_is_item_failure(self, item, config):
        executor = StageExecutor(
            [RecordingStage("one", [], error=KeyError("oops"))], logger=FakeLogger()
        )

        assert executor.run(item, config) is ItemOutcome.FAILED
        assert "KeyError" in item.error

    def test_failing_skip_check_is_item_failure(self, item, config):
        class BrokenCheck(RecordingStage):
            def skip_if(self, item, config):
                raise StageError("head_object denied")

        calls = []
        executor = StageExecutor([BrokenCheck("upload", calls)], logger=FakeLogger())

        assert executor.run(item, config) is ItemOutcome.FAILED
        assert calls == []

    def test_keyboard_interrupt_propagates(self, item, config):
        executor = StageExecutor(
            [RecordingStage("one", [], error=KeyboardInterrupt())], logger=FakeLogger()
        )
        with pytest.raises(KeyboardInterrupt):
            executor.run(item, config)

    @pytest.mark.parametrize(
        "stage_kwargs, expected",
        [
            ({}, ItemOutcome.SUCCESS),
            ({"skip": True}, ItemOutcome.SKIPPED),
            ({"error": StageError("x")}, ItemOutcome.FAILED),
        ],
    )
    def test_finalizer_runs_for_every_outcome(self, item, config, stage_kwargs, expected):
        finalizer = RecordingFinalizer()
        executor = StageExecutor(
            [RecordingStage("one", [], **stage_kwargs)], finalizer=finalizer, logger=FakeLogger()
        )

        executor.run(item, config)

        assert finalizer.seen == [expected]

    def test_finalizer_error_keeps_outcome(self, item, config):
        logger = FakeLogger()
        executor = StageExecutor(
            [RecordingStage("one", [])],
            finalizer=RecordingFinalizer(error=StageError("permission denied")),
            logger=logger,
        )

        assert executor.run(item, config) is ItemOutcome.SUCCESS
        assert any("cleanup failed" in m for m in logger.messages("WARNING"))

    def test_active_stages(self, config):
        executor = StageExecutor(
            [RecordingStage("a", [], active=False), RecordingStage("b", [])], logger=FakeLogger()
        )
        assert [stage.name for stage in executor.active_stages(config)] == ["b"]
