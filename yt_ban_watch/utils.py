"""Helper utilities.

This module centralises common helper functions such as creating a
configured HTTP session and applying retry policies to network calls.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import requests
from requests import Response
from tenacity import (after_log, retry, retry_if_exception_type,
                      stop_after_attempt, wait_exponential)

from . import config


logger = logging.getLogger(__name__)


def get_http_session(
    user_agent: Optional[str] = None,
    accept_language: Optional[str] = None,
) -> requests.Session:
    """Return a new HTTP session with the configured identity headers.

    The session sends the configured User-Agent and a Japanese-first
    Accept-Language so the listing site serves the pages the parsers
    expect.  Caller is responsible for closing the session.
    """
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": user_agent or config.USER_AGENT,
            "Accept-Language": accept_language or config.ACCEPT_LANGUAGE,
        }
    )
    # Respect environment proxies if configured (requests does this by default)
    return session


class HTTPError(Exception):
    """Raised when an HTTP request returns a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body


def _raise_for_status(resp: Response, url: str) -> None:
    if resp.ok:
        return
    raise HTTPError(
        f"HTTP {resp.status_code} for {url}",
        status_code=resp.status_code,
        url=url,
        body=resp.text,
    )


def retryable_request(method: Callable[[requests.Session, str, Dict[str, Any]], Response]) -> Callable[..., Response]:
    """Decorator factory to apply retry logic to HTTP calls.

    The decorated function must accept a `requests.Session` as its first
    argument, followed by URL and optional kwargs, and return a
    `requests.Response`.  Network errors and non-2xx statuses raise;
    they are retried up to HTTP_MAX_ATTEMPTS times in total (default 1,
    i.e. no retry) with exponential back-off between 1 and 10 seconds.
    """

    @retry(
        reraise=True,
        stop=stop_after_attempt(config.HTTP_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=(
            retry_if_exception_type(requests.RequestException)
            | retry_if_exception_type(HTTPError)
        ),
        after=after_log(logger, logging.WARNING),
    )
    def wrapper(session: requests.Session, url: str, **kwargs: Any) -> Response:
        response = method(session, url, **kwargs)
        _raise_for_status(response, url)
        return response

    return wrapper


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["get_http_session", "retryable_request", "HTTPError", "utc_now_iso"]
