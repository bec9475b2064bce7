import logging
import sys
from datetime import datetime
from typing import Optional

import structlog

from config import LoggingConfig

# Set once the handlers and structlog pipeline are installed
_is_configured = False


def setup_logging(logging_config: Optional[LoggingConfig] = None):
    """
    Install console (and optional per-run file) handlers plus the structlog pipeline.
    Later calls are no-ops.
    """
    global _is_configured
    if _is_configured:
        return

    logging_config = logging_config or LoggingConfig()

    # Unknown level names fall back to INFO
    log_level = logging_config.log_level.upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s')

    handlers = []

    # Console
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    # One timestamped file per run, next to the configured path
    if logging_config.log_file_path:
        log_path = logging_config.log_file_path
        log_dir = log_path.parent
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        new_log_file = log_dir / f"{log_path.stem}_{timestamp}{log_path.suffix}"

        file_handler = logging.FileHandler(new_log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # force=True drops handlers installed earlier, pytest included
    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)

    # structlog events end up as stdlib records on the handlers above
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=False, key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _is_configured = True


def get_structured_logger(name: str) -> structlog.BoundLogger:
    """structlog logger routed through the stdlib handlers set up by ``setup_logging``."""
    return structlog.get_logger(name)


def bind_context(logger: structlog.BoundLogger, **context) -> structlog.BoundLogger:
    """Return ``logger`` with ``context`` (e.g. ``file_name=...``) attached to every event."""
    return logger.bind(**context)
