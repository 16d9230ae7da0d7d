"""Request logging and rate limiting middleware."""

import logging
import time

from fastapi import FastAPI, Request

from marketplace.core.config import RateLimitSettings
from marketplace.core.rate_limit import RateLimiter, RateLimitRule

from .envelope import error_response

logger = logging.getLogger(__name__)


def install_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def install_rate_limiting(app: FastAPI, limiter: RateLimiter, settings: RateLimitSettings) -> None:
    if not settings.enabled:
        return

    api_rule = RateLimitRule("api", settings.api_limit, settings.api_window_seconds)
    auth_rule = RateLimitRule("auth", settings.auth_limit, settings.auth_window_seconds)
    auth_paths = {path.rstrip("/") for path in settings.auth_paths}

    @app.middleware("http")
    async def limit_requests(request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        decision = limiter.hit(api_rule, client)
        if decision.allowed and request.url.path.rstrip("/") in auth_paths:
            auth_decision = limiter.hit(auth_rule, client)
            if not auth_decision.allowed:
                decision = auth_decision

        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
        }
        if not decision.allowed:
            logger.warning("Rate limit exceeded for %s on %s", client, request.url.path)
            headers["Retry-After"] = str(decision.retry_after)
            return error_response(429, "Too many requests, please try again later", headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response


__all__ = ["install_rate_limiting", "install_request_logging"]
