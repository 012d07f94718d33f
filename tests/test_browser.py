"""
Tests for opening URLs in the browser.
"""

import webbrowser
from unittest.mock import patch

from gitpusher.utils.browser import open_url

URL = "https://gitlab.com/team/app/-/merge_requests/7"


class TestOpenUrl:
    """Tests for open_url."""

    def test_opens_default_browser(self):
        with patch("gitpusher.utils.browser.webbrowser.open", return_value=True) as mock_open:
            assert open_url(URL) is True

        mock_open.assert_called_once_with(URL)

    def test_no_browser_available(self):
        with patch("gitpusher.utils.browser.webbrowser.open", return_value=False):
            assert open_url(URL) is False

    def test_browser_error(self):
        with patch(
            "gitpusher.utils.browser.webbrowser.open",
            side_effect=webbrowser.Error("could not locate runnable browser"),
        ):
            assert open_url(URL) is False
