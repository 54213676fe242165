import logging
import logging.config
import os

LOG_DIR = "logs"
LOG_FILE = "stockmodeler.log"

# Third-party loggers that are chatty at DEBUG
QUIET_LOGGERS = ("yfinance", "urllib3", "peewee", "multipart")


def build_logging_config(log_dir: str = LOG_DIR, console_level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": console_level,
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": os.path.join(log_dir, LOG_FILE),
                "maxBytes": 5_242_880,
                "backupCount": 3,
                "formatter": "standard",
                "level": "DEBUG",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {
            "level": "DEBUG",
            "handlers": ["console", "file"],
        },
    }


def setup_logging(log_dir: str = LOG_DIR, console_level: str = "INFO"):
    os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_dir, console_level))
