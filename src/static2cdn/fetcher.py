"""HTTP page fetching for the crawler."""

import logging
from dataclasses import dataclass
from typing import Optional

import requests
import urllib3

from .config import MAX_REDIRECTS, REQUEST_TIMEOUT, USER_AGENT
from .errors import TransportError

logger = logging.getLogger(__name__)

ACCEPT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
}


@dataclass
class FetchResult:
    """Body and status of one page request."""

    body: bytes
    status_code: int
    encoding: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300 and bool(self.body)

    @property
    def text(self) -> str:
        try:
            return self.body.decode(self.encoding or 'utf-8', errors='replace')
        except LookupError:
            # unknown charset announced by the server
            return self.body.decode('utf-8', errors='replace')


class HttpFetcher:
    """Fetches pages with a browser user agent, bounded redirects and a fixed timeout."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT, max_redirects: int = MAX_REDIRECTS,
                 user_agent: str = USER_AGENT, verify_tls: bool = True,
                 session: Optional[requests.Session] = None):
        """
        Initialize the fetcher.

        Args:
            timeout: Seconds per request
            max_redirects: Redirect hops followed before giving up
            user_agent: User-Agent header sent with every request
            verify_tls: Set False to accept self-signed staging certificates
            session: Optional preconfigured session
        """
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.session = session or requests.Session()
        self.session.max_redirects = max_redirects
        self.session.headers.update({'User-Agent': user_agent, **ACCEPT_HEADERS})
        if not verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def fetch(self, url: str) -> FetchResult:
        """
        Fetch a URL.

        Non-2xx responses are logged and come back with an empty body.
        Timeouts, connection failures and redirect loops raise TransportError.
        """
        try:
            response = self.session.get(url, timeout=self.timeout, verify=self.verify_tls,
                                        allow_redirects=True)
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning("Error fetching URL %s: HTTP status %d", url, response.status_code)
            return FetchResult(b'', response.status_code)

        return FetchResult(response.content, response.status_code,
                           response.encoding or response.apparent_encoding)
