from __future__ import annotations

import logging
import sys
import time
from typing import List, Optional

import requests

from . import config, notifier, scraper, state
from .utils import get_http_session, utc_now_iso

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def collect_channel_urls(session: requests.Session) -> List[str]:
    """Fetch every listing page and gather the channel URLs they link to.

    Listing fetch errors are not caught here; they abort the run.
    """
    page_urls = scraper.banned_page_urls(config.BASE_URL, config.BANNED_PATH, config.PAGES)
    found: dict[str, None] = {}
    for page_url in page_urls:
        html = scraper.fetch_page(page_url, session=session)
        links = scraper.extract_channel_links(html, config.BASE_URL)
        logger.info("Listing %s: %d channel link(s)", page_url, len(links))
        for link in links:
            found[link] = None
        time.sleep(config.LISTING_DELAY_SECONDS)
    return list(found)


def select_targets(channel_urls: List[str], notified: state.NotificationState) -> List[str]:
    """Drop URLs without a channel id and channels that were already notified."""
    targets = []
    for url in channel_urls:
        channel_id = scraper.channel_id_from_url(url)
        if channel_id and not notified.has_notified(channel_id):
            targets.append(url)
    return targets


def _check_channel(url: str, session: requests.Session) -> Optional[scraper.ChannelBanInfo]:
    """Fetch and parse one channel page; post a notification if it is banned.

    Returns the parsed info when a notification was sent, None otherwise.
    """
    html = scraper.fetch_page(url, session=session)
    info = scraper.parse_ban_info(html, url)
    if not info.is_banned:
        logger.debug("No ban evidence on %s", url)
        return None

    embed = notifier.build_embed(info)
    if config.DRY_RUN:
        logger.info("DRY_RUN: would notify %s: %s", url, embed)
        return None
    notifier.notify(embed, webhook_url=config.DISCORD_WEBHOOK_URL, session=session)
    return info


def scan_once(session: Optional[requests.Session] = None) -> int:
    """Perform one scrape-and-notify pass. Returns the number of notifications sent."""
    close_session = False
    if session is None:
        session = get_http_session()
        close_session = True

    try:
        notified = state.load_state(config.STATE_PATH)
        logger.info(
            "Starting ban scan of %s%s (%d page(s)); %d channel(s) already notified.",
            config.BASE_URL, config.BANNED_PATH, config.PAGES, len(notified.notified_channel_ids),
        )

        channel_urls = collect_channel_urls(session)
        targets = select_targets(channel_urls, notified)
        logger.info("%d channel(s) listed, %d new candidate(s).", len(channel_urls), len(targets))

        sent = failed = 0
        for url in targets:
            try:
                info = _check_channel(url, session)
            except Exception as exc:
                failed += 1
                logger.error("Error on %s: %s", url, exc)
                time.sleep(config.ERROR_DELAY_SECONDS)
                continue

            if info is not None:
                sent += 1
                if info.channel_id:
                    notified.record(info.channel_id, utc_now_iso())
                    state.save_state(notified, config.STATE_PATH)
            time.sleep(config.DETAIL_DELAY_SECONDS)

        logger.info(
            "Ban scan finished: %d candidate(s), %d notification(s), %d failure(s).",
            len(targets), sent, failed,
        )
        return sent
    finally:
        if close_session:
            session.close()


def main() -> None:
    """Validate configuration and run a single scan; exits 1 on failure."""
    setup_logging()
    try:
        config.validate()
    except config.ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    try:
        scan_once()
    except Exception:
        logger.exception("Ban scan aborted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
