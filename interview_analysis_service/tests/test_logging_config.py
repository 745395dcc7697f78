import logging
import sys
from logging.handlers import TimedRotatingFileHandler

import pytest

from logging_config import API_LOGGERS, AWS_LOGGERS, configure_logging

@pytest.fixture(autouse=True)
def reset_loggers():
    root = logging.getLogger()
    root_level = root.level
    yield
    root.setLevel(root_level)
    closed = set()
    for name in API_LOGGERS + AWS_LOGGERS:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            if id(handler) not in closed:
                handler.close()
                closed.add(id(handler))
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

def file_handlers(name: str):
    return [h for h in logging.getLogger(name).handlers if isinstance(h, TimedRotatingFileHandler)]

def test_configure_logging_attaches_rotating_files(tmp_path):
    configure_logging("INFO", tmp_path, True)

    api_handlers = file_handlers("routers")
    assert len(api_handlers) == 1
    assert api_handlers[0].backupCount == 30
    assert api_handlers[0].baseFilename == str(tmp_path / "api.log")
    assert file_handlers("main") == api_handlers

    aws_handlers = file_handlers("storage")
    assert len(aws_handlers) == 1
    assert aws_handlers[0].backupCount == 7
    assert aws_handlers[0].baseFilename == str(tmp_path / "aws.log")
    assert file_handlers("analysis_jobs") == aws_handlers

    assert logging.getLogger("storage").level == logging.DEBUG
    assert logging.getLogger().level == logging.INFO
    assert (tmp_path / "api.log").exists()
    assert (tmp_path / "aws.log").exists()

def test_aws_debug_records_stay_out_of_stdout(tmp_path):
    configure_logging("info", tmp_path, True)

    storage_logger = logging.getLogger("storage")
    assert storage_logger.propagate is False
    consoles = [h for h in storage_logger.handlers if type(h) is logging.StreamHandler]
    assert len(consoles) == 1
    assert consoles[0].stream is sys.stdout
    assert consoles[0].level == logging.INFO

    storage_logger.debug("head_object videos/a.webm")
    for handler in file_handlers("storage"):
        handler.flush()
    assert "[AWS] DEBUG - storage - head_object videos/a.webm" in (tmp_path / "aws.log").read_text(encoding="utf-8")

def test_configure_logging_is_idempotent(tmp_path):
    configure_logging("INFO", tmp_path, True)
    configure_logging("INFO", tmp_path / "second", True)

    assert len(file_handlers("routers")) == 1
    assert len(file_handlers("aws_clients")) == 1
    assert not (tmp_path / "second").exists() or not any((tmp_path / "second").iterdir())

def test_configure_logging_without_files(tmp_path):
    configure_logging("WARNING", tmp_path / "logs", False)

    for name in API_LOGGERS + AWS_LOGGERS:
        assert logging.getLogger(name).handlers == []
    assert logging.getLogger("storage").propagate is True
    assert logging.getLogger().level == logging.WARNING
    assert not (tmp_path / "logs").exists()
