import logging

import structlog

from .schemas import RequestConfig


def setup_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog through stdlib logging; JSON lines when ``json_logs`` is set."""

    logging.basicConfig(level=level, format="%(message)s")
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def request_logger(logger: structlog.stdlib.BoundLogger, config: RequestConfig) -> structlog.stdlib.BoundLogger:
    # the typed URL, not the effective one; query values may carry secrets
    return logger.bind(method=config.method.value, url=config.url)
