from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from . import config
from .utils import get_http_session, retryable_request

logger = logging.getLogger(__name__)

# Listing hrefs look like "/channel/12345/" (relative, trailing slash optional).
_CHANNEL_HREF_RE = re.compile(r"/channel/\d+/?")
# Channel id inside a detail page URL; the trailing slash is required.
_CHANNEL_ID_RE = re.compile(r"/channel/(\d+)/")
_JP_DATE_RE = re.compile(r"(\d{4})年(\d{1,2})月(\d{1,2})日")
# No DOTALL: a suffix followed by a line break is left alone.
_TITLE_SUFFIX_RE = re.compile(r"｜[^\n\r\u2028\u2029]*\Z")

SUSPENDED_MARKER = "このチャンネルは現在停止されています"
BAN_NEWS_MARKER = "BANされました"
YOUTUBE_URL_PREFIX = "https://www.youtube.com"


@dataclass
class ChannelBanInfo:
    page_url: str
    channel_id: Optional[str] = None
    title: Optional[str] = None
    youtube_url: Optional[str] = None
    suspended: bool = False
    ban_news_found: bool = False
    ban_date: Optional[str] = None  # YYYY-MM-DD

    @property
    def is_banned(self) -> bool:
        return self.suspended or self.ban_news_found


@retryable_request
def _get(session: requests.Session, url: str, **kwargs: dict) -> requests.Response:
    """Thin wrapper around session.get with retry policy from utils.retryable_request."""
    return session.get(url, **kwargs)


def fetch_page(url: str, session: Optional[requests.Session] = None) -> str:
    """GET a page and return its body; raises utils.HTTPError on non-2xx."""
    close_session = False
    if session is None:
        session = get_http_session()
        close_session = True
    try:
        logger.debug("GET %s", url)
        resp = _get(session, url, timeout=config.HTTP_TIMEOUT_SECONDS)
        return resp.text
    finally:
        if close_session:
            session.close()


def banned_page_urls(base_url: str, banned_path: str, pages: int) -> List[str]:
    """Listing URLs: page 1 is the bare path, page N is <path><N>/."""
    urls = []
    for i in range(pages):
        suffix = "" if i == 0 else f"{i + 1}/"
        urls.append(urljoin(base_url, f"{banned_path}{suffix}"))
    return urls


def channel_id_from_url(url: str) -> Optional[str]:
    if not url:
        return None
    m = _CHANNEL_ID_RE.search(url)
    return m.group(1) if m else None


def extract_channel_links(html: str, base_url: str) -> List[str]:
    """Absolute channel detail URLs linked from a banned listing page, first-seen order."""
    soup = BeautifulSoup(html, "html.parser")
    links: dict[str, None] = {}
    for a in soup.find_all("a"):
        href = a.get("href") or ""
        if _CHANNEL_HREF_RE.fullmatch(href):
            links[urljoin(base_url, href)] = None
    return list(links)


def _jp_date_to_iso(text: str) -> Optional[str]:
    m = _JP_DATE_RE.search(text)
    if not m:
        return None
    year, month, day = m.groups()
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def _page_title(soup: BeautifulSoup) -> Optional[str]:
    h1 = soup.find("h1")
    title = h1.get_text().strip() if h1 else ""
    if not title:
        title_el = soup.find("title")
        if title_el:
            title = _TITLE_SUFFIX_RE.sub("", title_el.get_text()).strip()
    return title or None


def parse_ban_info(html: str, page_url: str) -> ChannelBanInfo:
    """
    Read the ban evidence off a channel detail page.

    Nothing here is validated: the page belongs to a third party, so a
    missing marker just leaves the corresponding field None/False.
    """
    soup = BeautifulSoup(html, "html.parser")
    info = ChannelBanInfo(
        page_url=page_url,
        channel_id=channel_id_from_url(page_url),
        title=_page_title(soup),
    )

    # Walk every element in document order; the ban news date is taken from
    # the last matching element that carries one.
    for el in soup.find_all(True):
        text = el.get_text()
        if not info.suspended and SUSPENDED_MARKER in text:
            info.suspended = True
        if BAN_NEWS_MARKER in text:
            info.ban_news_found = True
            date = _jp_date_to_iso(text.strip())
            if date:
                info.ban_date = date

    yt = soup.select_one(f'a[href^="{YOUTUBE_URL_PREFIX}"]')
    if yt:
        info.youtube_url = yt.get("href")

    logger.debug(
        "Parsed %s: id=%s suspended=%s ban_news=%s ban_date=%s",
        page_url, info.channel_id, info.suspended, info.ban_news_found, info.ban_date,
    )
    return info


__all__ = [
    "ChannelBanInfo",
    "fetch_page",
    "banned_page_urls",
    "channel_id_from_url",
    "extract_channel_links",
    "parse_ban_info",
]
