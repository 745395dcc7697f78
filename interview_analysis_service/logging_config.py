import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
AWS_LOG_FORMAT = "%(asctime)s [AWS] %(levelname)s - %(name)s - %(message)s"

API_LOGGERS = ("main", "routers")
AWS_LOGGERS = ("aws_clients", "storage", "analysis_jobs")

logging.basicConfig(
    level=LOG_LEVEL,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

def get_logger(name: str):
    return logging.getLogger(name)

def _rotating_handler(path: Path, fmt: str, backup_count: int) -> TimedRotatingFileHandler:
    handler = TimedRotatingFileHandler(path, when="midnight", backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt))
    return handler

def _console_handler(level: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler

def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers)

def _has_console_handler(logger: logging.Logger) -> bool:
    return any(type(h) is logging.StreamHandler for h in logger.handlers)

def configure_logging(level: str = "INFO", log_dir: Path = Path("logs"), file_logging: bool = True) -> None:
    level = level.upper()
    logging.getLogger().setLevel(level)
    if not file_logging:
        return

    log_dir.mkdir(parents=True, exist_ok=True)

    api_loggers = [logging.getLogger(name) for name in API_LOGGERS]
    pending = [logger for logger in api_loggers if not _has_file_handler(logger)]
    if pending:
        api_handler = _rotating_handler(log_dir / "api.log", LOG_FORMAT, backup_count=30)
        for logger in pending:
            logger.addHandler(api_handler)

    # AWS loggers keep DEBUG for aws.log only; stdout stays at the configured level.
    aws_loggers = [logging.getLogger(name) for name in AWS_LOGGERS]
    for logger in aws_loggers:
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

    pending = [logger for logger in aws_loggers if not _has_file_handler(logger)]
    if pending:
        aws_handler = _rotating_handler(log_dir / "aws.log", AWS_LOG_FORMAT, backup_count=7)
        for logger in pending:
            logger.addHandler(aws_handler)

    pending = [logger for logger in aws_loggers if not _has_console_handler(logger)]
    if pending:
        console_handler = _console_handler(level)
        for logger in pending:
            logger.addHandler(console_handler)
