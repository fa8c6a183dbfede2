import logging
import logging.config
import os
from datetime import datetime
from app.core.config import settings

LOG_FORMATS = {
    "default": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
    "access": "%(asctime)s - %(message)s",
}

# channel -> (level, formatter)
FILE_CHANNELS = {
    "app": (settings.LOG_LEVEL, "detailed"),
    "error": ("ERROR", "detailed"),
    "access": ("INFO", "access"),
    "audit": ("INFO", "access"),
    "ai": ("INFO", "detailed"),
}

def _rotating_handler(log_dir: str, channel: str, stamp: str) -> dict:
    level, formatter = FILE_CHANNELS[channel]
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(log_dir, channel, f"{channel}-{stamp}.log"),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 10,
        "encoding": "utf-8",
    }

def build_logging_config(log_dir: str) -> dict:
    """dictConfig for the console plus one rotating file per channel, one file per day."""
    stamp = datetime.now().strftime("%Y-%m-%d")

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    }
    for channel in FILE_CHANNELS:
        handlers[f"{channel}_file"] = _rotating_handler(log_dir, channel, stamp)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in LOG_FORMATS.items()
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "level": settings.LOG_LEVEL,
                "handlers": ["console", "app_file", "error_file"],
                "propagate": False,
            },
            # login, imports, cascades and approvals
            "app.audit": {
                "level": "INFO",
                "handlers": ["audit_file", "console"],
                "propagate": False,
            },
            "app.ai": {
                "level": "INFO",
                "handlers": ["ai_file", "console", "error_file"],
                "propagate": False,
            },
            "access": {"level": "INFO", "handlers": ["access_file"], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["access_file"], "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING", "handlers": ["app_file"], "propagate": False},
        },
    }

def setup_logging():
    """Setup application logging configuration"""
    log_dir = settings.LOG_DIR
    for channel in FILE_CHANNELS:
        os.makedirs(os.path.join(log_dir, channel), exist_ok=True)

    logging.config.dictConfig(build_logging_config(log_dir))

    logger = logging.getLogger(__name__)
    logger.info("📊 KPI Dashboard - Logging configured")
    logger.info(f"📝 Log level: {settings.LOG_LEVEL}, directory: ./{log_dir}/")
