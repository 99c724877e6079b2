import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

import structlog

from artifetch.internal.constants import ENV_LOG_FILE, ENV_LOG_LEVEL


def _configure_structlog():
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _foreign_pre_chain():
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def setup_logging(
    log_level_name: str = "WARNING",
    log_file_path: Optional[Path] = None,
    console_output: bool = True,
):
    """
    Configure logging for artifetch.
    - Uses structlog on top of the stdlib logging machinery.
    - Console output goes to stderr so stdout stays reserved for the artifact path.
    - Writes JSON logs to a rotating file if log_file_path (or ARTIFETCH_LOG_FILE)
      is set and its name ends with '.json'; plain text otherwise.
    - Log level can be set with ARTIFETCH_LOG_LEVEL or the function argument.

    Safe to call more than once; each call replaces the previous handlers.
    """
    effective_log_level_name = os.environ.get(ENV_LOG_LEVEL, log_level_name).upper()
    log_level = getattr(logging, effective_log_level_name, logging.WARNING)

    if log_file_path is None and os.environ.get(ENV_LOG_FILE):
        log_file_path = Path(os.environ[ENV_LOG_FILE])

    handlers = []

    if log_file_path:
        log_file_path = Path(log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=5,
        )
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer()
            if log_file_path.name.endswith(".json")
            else structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=_foreign_pre_chain(),
        ))
        handlers.append(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
            foreign_pre_chain=_foreign_pre_chain(),
        ))
        handlers.append(console_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    # Mute noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _configure_structlog()

    logging.basicConfig(
        level=log_level,
        handlers=handlers,
        force=True,
    )


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name)


# Library default: route through stdlib and stay silent until setup_logging
# attaches handlers. Stdout is reserved for the CLI's artifact path.
logging.getLogger("artifetch").addHandler(logging.NullHandler())
if not structlog.is_configured():
    _configure_structlog()
