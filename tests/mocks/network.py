"""
Mock network operations for testing.

This module provides mock HTTP responses and a mock `requests.get`
replacement so install-script downloads run without network access.
"""

from typing import Dict, List, Optional, Tuple

import requests


class MockResponse:
    """Mock HTTP response."""

    def __init__(self, content: bytes, status_code: int = 200, url: str = ""):
        """
        Initialize mock response.

        Args:
            content: Response body content
            status_code: HTTP status code (default: 200)
            url: URL the response was served for
        """
        self.content = content
        self.status_code = status_code
        self.url = url
        self.ok = 200 <= status_code < 300

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8")

    def raise_for_status(self):
        """
        Raise exception for bad status codes.

        Raises:
            requests.HTTPError: If status code indicates error (400-599)
        """
        if 400 <= self.status_code < 600:
            raise requests.HTTPError(f"HTTP {self.status_code} for {self.url}")


class MockDownloader:
    """
    Mock `requests.get` for install scripts.

    Unregistered URLs serve a tiny script that names its URL, so a
    recorded command's stdin shows which installer it ran.
    """

    def __init__(self):
        """Initialize mock downloader with empty response map."""
        self.mock_responses: Dict[str, Tuple[bytes, int]] = {}
        self.unreachable: List[str] = []
        self.request_history: List[str] = []

    def add_mock_response(self, url: str, content: bytes, status_code: int = 200):
        """
        Add mock response for URL.

        Args:
            url: URL to mock
            content: Response content
            status_code: HTTP status code (default: 200)
        """
        self.mock_responses[url] = (content, status_code)

    def make_unreachable(self, url: str):
        """Make requests for url raise a connection error."""
        self.unreachable.append(url)

    def get(
        self,
        url: str,
        timeout: Optional[float] = None,
        allow_redirects: bool = True,
        **kwargs,
    ) -> MockResponse:
        """
        Mock HTTP GET request.

        Args:
            url: URL to request
            timeout: Request timeout (ignored in mock)
            allow_redirects: Ignored in mock

        Returns:
            MockResponse object

        Raises:
            requests.ConnectionError: If url was made unreachable
        """
        self.request_history.append(url)

        if url in self.unreachable:
            raise requests.ConnectionError(f"Failed to connect to {url}")

        if url in self.mock_responses:
            content, status_code = self.mock_responses[url]
            return MockResponse(content, status_code, url)

        return MockResponse(script_body(url).encode("utf-8"), 200, url)


def script_body(url: str) -> str:
    """Body served for an unregistered install script URL."""
    return f"#!/bin/sh\n# installer from {url}\nexit 0\n"
