"""Unit tests for the console logging setup."""

import pytest
import structlog

from winccoa_marketplace.utils.logger import configure_logging


@pytest.mark.parametrize(
    "debug,debug_emitted",
    [
        pytest.param(False, False, id="info_level_by_default"),
        pytest.param(True, True, id="debug_level_when_requested"),
    ],
)
def test_configure_logging_levels(debug: bool, debug_emitted: bool, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that events go to stderr and debug events only appear in debug mode."""
    configure_logging(debug)
    logger = structlog.get_logger("winccoa_marketplace.test")

    logger.debug("Command output", stdout="ok")
    logger.info("Cloning repository", url="https://github.com/winccoa/dashboard.git")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Cloning repository" in captured.err
    assert "url=https://github.com/winccoa/dashboard.git" in captured.err
    assert ("Command output" in captured.err) is debug_emitted
