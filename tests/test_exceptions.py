import pytest

from photobatch.core.exceptions import (
    ConfigurationError,
    PhotoBatchError,
    PreconditionError,
    RunInterrupted,
    StageError,
    UsageError,
)


@pytest.mark.parametrize(
    "error_class, exit_code",
    [
        (UsageError, 1),
        (ConfigurationError, 1),
        (StageError, 1),
        (PreconditionError, 2),
        (RunInterrupted, 130),
    ],
)
def test_exit_codes(error_class, exit_code) -> None:
    assert error_class("x").exit_code == exit_code


def test_all_errors_share_base() -> None:
    for error_class in (UsageError, PreconditionError, StageError, RunInterrupted):
        assert issubclass(error_class, PhotoBatchError)


def test_configuration_error_is_usage_error() -> None:
    assert issubclass(ConfigurationError, UsageError)


def test_stage_error_carries_context() -> None:
    error = StageError("boom", stage="export", item="a.jpg")
    assert str(error) == "boom"
    assert error.stage == "export"
    assert error.item == "a.jpg"
