"""Structured logging configuration for Spring Actuator Exporter"""
import logging
import os
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, StackInfoRenderer, TimeStamper
from structlog.stdlib import LoggerFactory

from .config import Config


def setup_structured_logging(config: Config) -> None:
    """Setup structured logging with JSON format for production and console for development"""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    # Use JSON renderer for production, console for development
    is_development = os.getenv("ENVIRONMENT", "production").lower() == "development"
    if is_development:
        processors.append(ConsoleRenderer())
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, config.log_level.upper())
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(config.log_file))
        file_handler.setLevel(level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True
    )

    # Set specific logger levels to reduce noise
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_server_startup(logger: structlog.stdlib.BoundLogger, config: Config) -> None:
    """Log server startup with configuration details"""
    logger.info(
        "Starting Server",
        service_name=config.service_name,
        service_version=config.service_version,
        listen_address=config.listen_address,
        telemetry_path=config.telemetry_path,
        scrape_uri=config.scrape_uri,
        scrape_timeout_seconds=config.scrape_timeout,
        fail_on_malformed_json=config.fail_on_malformed_json,
        event_type="server_startup"
    )


def log_scrape(logger: structlog.stdlib.BoundLogger, url: str, scrape_time: float,
               metrics_count: int = 0, error: Optional[Exception] = None) -> None:
    """Log the outcome of one upstream scrape"""
    if error is None:
        logger.debug(
            "Scrape of Spring Actuator completed",
            url=url,
            metrics_count=metrics_count,
            scrape_time_seconds=round(scrape_time, 3),
            event_type="scrape_complete"
        )
    else:
        logger.error(
            "Can't scrape Spring Actuator",
            url=url,
            error=str(error),
            error_type=type(error).__name__,
            scrape_time_seconds=round(scrape_time, 3),
            event_type="scrape_failed"
        )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
