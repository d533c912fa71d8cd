"""External tool fetching."""

from chartpub.tools.chart_releaser import ensure_chart_releaser
from chartpub.tools.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "ensure_chart_releaser",
]
