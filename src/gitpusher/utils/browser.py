"""
Open URLs in the operator's default browser.
"""

from __future__ import annotations

import logging
import webbrowser

logger = logging.getLogger(__name__)


def open_url(url: str) -> bool:
    """
    Open a URL in the default browser.

    Uses the platform opener (open on macOS, start on Windows, xdg-open or a
    known browser on Linux). Nothing happens when no browser can be found.

    Returns:
        True if a browser was launched
    """
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning(f"Could not open {url}: {e}")
        return False

    if not opened:
        logger.warning(f"No browser available to open {url}")
    return opened
