"""
Banned YouTube channel watcher.

This package contains modules for scraping the yutura.net banned-channel
listing, reading ban evidence off channel pages, notifying Discord and
remembering which channels were already announced.  See README.md for
details.
"""

__all__ = [
    "config",
    "state",
    "notifier",
    "scraper",
    "main",
    "utils",
]
