"""
Observability hooks for outgoing API calls.

Adds correlation IDs and structured logging context to requests.
"""

import time
import uuid
import logging
import httpx

# Configure structured logger
logger = logging.getLogger("backoffice.http")


def configure_logging(level: str = "INFO") -> None:
    """Configure the root `backoffice` logger once."""
    root = logging.getLogger("backoffice")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(level.upper())


async def on_request(request: httpx.Request) -> None:
    # 1. Generate or reuse Correlation ID
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
    request.headers["X-Correlation-ID"] = correlation_id

    # 2. Start Timer
    request.extensions["started_at"] = time.time()


async def on_response(response: httpx.Response) -> None:
    request = response.request
    started_at = request.extensions.get("started_at", time.time())
    process_time = (time.time() - started_at) * 1000  # ms

    log_data = {
        "correlation_id": request.headers.get("X-Correlation-ID"),
        "method": request.method,
        "path": request.url.path,
        "status_code": response.status_code,
        "duration_ms": round(process_time, 2),
    }

    # Log level based on status
    if response.status_code >= 500:
        logger.error("API Call Failed", extra=log_data)
    elif response.status_code >= 400:
        logger.warning("API Call Error", extra=log_data)
    else:
        logger.info("API Call", extra=log_data)


EVENT_HOOKS = {"request": [on_request], "response": [on_response]}
