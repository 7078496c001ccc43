"""
Sends an assembled request and normalizes the outcome into an ``ApiResponse``.

``execute`` never raises for transport problems: DNS failures, refused
connections, timeouts, bad URLs and protocol errors all come back as a
``status == 0`` response whose body is the error message.
"""

import inspect
import time
from typing import Any, Callable, Optional

import httpx

from .assembler import build_body, build_effective_headers, build_effective_url
from .config import Settings, get_settings
from .logging_setup import get_logger, request_logger
from .schemas import ApiResponse, RequestConfig

logger = get_logger(__name__)

NETWORK_ERROR = "Network Error"

# Called with (config, response) after a successful call. May return an awaitable.
PostExecuteHook = Callable[[RequestConfig, ApiResponse], Any]


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.perf_counter() - start) * 1000))


def _error_message(exc: Exception) -> str:
    return str(exc) or "An error occurred"


def network_error(message: str, elapsed: int) -> ApiResponse:
    return ApiResponse(
        status=0,
        status_text=NETWORK_ERROR,
        headers={},
        body=message,
        time=elapsed,
        size=0,
    )


async def _run_hook(hook: PostExecuteHook, config: RequestConfig, response: ApiResponse, log) -> None:
    try:
        result = hook(config, response)
        if inspect.isawaitable(result):
            await result
    except Exception:
        log.exception("Post-execute hook failed", status=response.status)


async def execute(
    config: RequestConfig,
    *,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    on_success: Optional[PostExecuteHook] = None,
) -> Optional[ApiResponse]:
    """Send ``config`` and return the normalized response.

    Returns None without touching the network when the URL is empty.
    A fresh client is used per call, so concurrent calls share nothing.
    """
    if not config.url:
        return None

    settings = settings or get_settings()
    log = request_logger(logger, config)
    start = time.perf_counter()

    try:
        url = build_effective_url(config)
        headers = build_effective_headers(config)
        content = build_body(config)

        async with httpx.AsyncClient(
            timeout=settings.request_timeout,
            follow_redirects=settings.follow_redirects,
            verify=settings.verify_ssl,
            transport=transport,
        ) as client:
            r = await client.request(
                method=config.method.value,
                url=url,
                headers=headers,
                content=content,
            )
            body = r.text
    except Exception as exc:
        elapsed = _elapsed_ms(start)
        log.warning("Request failed", error=repr(exc), duration_ms=elapsed)
        return network_error(_error_message(exc), elapsed)

    response = ApiResponse(
        status=r.status_code,
        status_text=r.reason_phrase,
        headers=dict(r.headers),
        body=body,
        time=_elapsed_ms(start),
        size=len(body.encode("utf-8")),
    )
    log.debug("Request completed", status=response.status, duration_ms=response.time, size=response.size)

    if on_success is not None:
        await _run_hook(on_success, config, response, log)

    return response
