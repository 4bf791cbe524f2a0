"""Tests for client log management."""

from loguru import logger

from calnex.util import (
    clear_log,
    format_error_response,
    get_log_filename,
    shutdown_client_log,
    start_client_log,
)


def test_client_log_written(client_log):
    logger.debug("probe type for channel {} is {}", "1", "ntp")
    assert get_log_filename() == str(client_log)
    shutdown_client_log()  # flushes the queue
    text = client_log.read_text()
    assert "Client log started" in text
    assert "probe type for channel 1 is ntp" in text


def test_log_level_filters(tmp_path):
    log_path = tmp_path / "info.log"
    start_client_log(log_to_file=True, log_path=str(log_path), log_level="INFO")
    logger.debug("hidden")
    logger.warning("shown")
    shutdown_client_log()
    text = log_path.read_text()
    assert "shown" in text
    assert "hidden" not in text


def test_clear_prev(tmp_path):
    log_path = tmp_path / "client.log"
    log_path.write_text("old run\n")
    start_client_log(log_to_file=True, log_path=str(log_path), clear_prev=True)
    shutdown_client_log()
    assert "old run" not in log_path.read_text()


def test_clear_log_missing_file(tmp_path):
    clear_log(str(tmp_path / "missing.log"))


def test_format_error_response():
    try:
        raise RuntimeError("device went away")
    except RuntimeError:
        err = format_error_response()
    assert "RuntimeError: device went away" in err


def test_log_filename_only_while_file_logging(tmp_path):
    start_client_log(log_to_file=True, log_path=str(tmp_path / "a.log"))
    assert get_log_filename() == str(tmp_path / "a.log")
    start_client_log(log_to_file=False)
    assert get_log_filename() == ""
    start_client_log(log_to_file=True, log_path=str(tmp_path / "b.log"))
    shutdown_client_log()
    assert get_log_filename() == ""
