import logging
import sys
import time

from fastapi import Request, Response

access_logger = logging.getLogger("icangrow.access")

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the application."""
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s - %(asctime)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # Override any existing configuration
    )

    # Our access log replaces uvicorn's
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Args:
        name: The name of the logger (e.g., __name__)

    Returns:
        A logger that propagates to the root handler set by configure_logging.
    """
    return logging.getLogger(name)


def access_log(combined: bool = False):
    """
    Build an HTTP middleware writing one access-log line per request.

    Args:
        combined: Also log client address and user agent (production format).
            The short format is used in development.
    """
    async def log_requests(request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        if combined:
            access_logger.info(
                "%s %s %s %s %.1fms \"%s\"",
                request.client.host if request.client else "-",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                request.headers.get("user-agent", "-"),
            )
        else:
            access_logger.info(
                "%s %s %s %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
        return response

    return log_requests
