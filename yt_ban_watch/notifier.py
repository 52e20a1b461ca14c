"""Discord webhook notifier.

Posts one embed per banned channel to a Discord channel via webhook.
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import DISCORD_WEBHOOK_URL, HTTP_TIMEOUT_SECONDS
from .scraper import ChannelBanInfo
from .utils import HTTPError, get_http_session, retryable_request, utc_now_iso

logger = logging.getLogger(__name__)

WEBHOOK_USERNAME = "Yutura BAN Watch"
EMBED_DESCRIPTION = "ユーチュラのチャンネル詳細でBANが確認されました。"


class WebhookError(HTTPError):
    """Raised when Discord rejects a webhook post."""


@retryable_request
def _post(session: requests.Session, url: str, **kwargs) -> requests.Response:
    return session.post(url, **kwargs)


def _field(name: str, value: str, inline: bool) -> dict:
    return {"name": name, "value": value, "inline": inline}


def build_embed(info: ChannelBanInfo, timestamp: Optional[str] = None) -> dict:
    fields = [
        _field("BAN日", info.ban_date, True) if info.ban_date else None,
        _field("YouTube", info.youtube_url, False) if info.youtube_url else None,
        _field("ユーチュラ", info.page_url, False),
    ]
    return {
        "title": f"BAN検知：{info.title or '不明'}",
        "url": info.page_url,
        "description": EMBED_DESCRIPTION,
        "fields": [f for f in fields if f is not None],
        "timestamp": timestamp or utc_now_iso(),
    }


def notify(
    embed: dict,
    webhook_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> None:
    """Send a single embed; raises WebhookError if Discord answers non-2xx."""
    if webhook_url is None:
        webhook_url = DISCORD_WEBHOOK_URL
    if not webhook_url:
        raise WebhookError("Discord webhook URL is not configured.")

    close_session = False
    if session is None:
        session = get_http_session()
        close_session = True

    try:
        payload = {"username": WEBHOOK_USERNAME, "embeds": [embed]}
        logger.info("Sending ban notification: %s", embed.get("title"))
        try:
            _post(session, webhook_url, json=payload, timeout=HTTP_TIMEOUT_SECONDS)
        except HTTPError as exc:
            raise WebhookError(
                f"Discord webhook error {exc.status_code}: {exc.body}",
                status_code=exc.status_code,
                url=webhook_url,
                body=exc.body,
            ) from exc
    finally:
        if close_session:
            session.close()


__all__ = ["build_embed", "notify", "WebhookError", "WEBHOOK_USERNAME"]
