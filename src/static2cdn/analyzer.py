"""
Crawl a storefront and collect every static and media asset it references.

An analysis scans the deployed static directory for important libraries,
crawls same-host pages depth-first under a page budget, then folds in the
important URL list and returns the sorted asset paths.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Set
from urllib.parse import urlsplit

from .config import AnalyzerConfig
from .errors import ConfigurationError, TransportError
from .extractor import extract_assets, extract_links
from .fetcher import FetchResult, HttpFetcher
from .libraries import LibraryScanner, merge_important_urls
from .progress import INITIAL_EVENT, ProgressEmitter, ProgressEvent, ProgressReporter
from .urls import normalize_base_url, origin_of

logger = logging.getLogger(__name__)

CRAWL_START_PERCENT = 25
CRAWL_END_PERCENT = 90
IMAGE_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'svg', 'webp'}
FONT_EXTENSIONS = {'woff', 'woff2', 'ttf', 'eot', 'otf'}
NO_RESULTS_MESSAGE = 'No suitable URLs found to analyze.'


class Fetcher(Protocol):
    def fetch(self, url: str) -> FetchResult:
        ...


@dataclass
class CrawlSession:
    """State of one analysis run. Built per call, never shared."""

    base_url: str
    page_budget: int
    visited: Set[str] = field(default_factory=set)
    frontier: List[str] = field(default_factory=list)
    assets: Set[str] = field(default_factory=set)
    pages_visited: int = 0

    @property
    def base_origin(self) -> str:
        return origin_of(self.base_url)

    @property
    def budget_spent(self) -> bool:
        return self.pages_visited >= self.page_budget

    def mark_visited(self, url: str) -> bool:
        """Record a visit; False if the URL was already visited."""
        if url in self.visited:
            return False
        self.visited.add(url)
        self.pages_visited += 1
        return True

    @property
    def crawl_percent(self) -> float:
        span = CRAWL_END_PERCENT - CRAWL_START_PERCENT
        return min(CRAWL_END_PERCENT, CRAWL_START_PERCENT + self.pages_visited / self.page_budget * span)


@dataclass
class AnalysisReport:
    """What the analysis entry point hands back to its caller."""

    success: bool
    message: str
    urls: List[str]
    stats: Dict[str, int]
    progress: ProgressEvent
    pages_visited: int = 0

    def as_dict(self) -> Dict[str, object]:
        return {
            'success': self.success,
            'message': self.message,
            'urls': self.urls,
            'stats': self.stats,
            'progress': {
                'status': self.progress.status,
                'percent': self.progress.percent,
                'detail': self.progress.detail,
            },
        }


def categorize_urls(urls: Iterable[str]) -> Dict[str, int]:
    """Count assets per type from their final path extension."""
    stats = {'js': 0, 'css': 0, 'images': 0, 'fonts': 0, 'other': 0}
    total = 0
    for url in urls:
        total += 1
        extension = PurePosixPath(urlsplit(url).path).suffix.lower().lstrip('.')
        if extension == 'js':
            stats['js'] += 1
        elif extension == 'css':
            stats['css'] += 1
        elif extension in IMAGE_EXTENSIONS:
            stats['images'] += 1
        elif extension in FONT_EXTENSIONS:
            stats['fonts'] += 1
        else:
            stats['other'] += 1
    stats['total'] = total
    return stats


class AssetAnalyzer:
    """Discovers static and media asset URLs of a storefront."""

    def __init__(self, config: Optional[AnalyzerConfig] = None, fetcher: Optional[Fetcher] = None,
                 scanner: Optional[LibraryScanner] = None, reporter: Optional[ProgressReporter] = None,
                 should_stop: Optional[Callable[[], bool]] = None):
        """
        Initialize the analyzer.

        Args:
            config: Store settings; defaults to AnalyzerConfig()
            fetcher: Object with fetch(url) -> FetchResult; defaults to HttpFetcher
            scanner: Library scanner for the static directory
            reporter: Receives a ProgressEvent at each milestone
            should_stop: Checked between pages; returning True ends the crawl early
        """
        self.config = config or AnalyzerConfig()
        self.fetcher = fetcher or HttpFetcher(
            timeout=self.config.timeout,
            max_redirects=self.config.max_redirects,
            user_agent=self.config.user_agent,
            verify_tls=self.config.verify_tls,
        )
        self.scanner = scanner or LibraryScanner()
        self.reporter = reporter
        self.should_stop = should_stop

    def new_session(self, start_url: Optional[str] = None, max_pages: Optional[int] = None) -> CrawlSession:
        """Validate inputs and build a fresh session; nothing is fetched yet."""
        if not self.config.enabled:
            raise ConfigurationError('CDN integration is disabled.')

        base_url = start_url or self.config.default_store_url
        if not base_url:
            raise ConfigurationError('Store URL is required.')

        budget = self.config.max_pages if max_pages is None else max_pages
        if not isinstance(budget, int) or budget < 1:
            raise ConfigurationError(f"max_pages must be a positive integer, got {budget!r}")

        return CrawlSession(base_url=normalize_base_url(base_url), page_budget=budget)

    def analyze(self, start_url: Optional[str] = None, max_pages: Optional[int] = None) -> List[str]:
        """Run a full analysis and return the sorted asset paths. Raises on failure."""
        session = self.discover(self.new_session(start_url, max_pages))
        return sorted(session.assets)

    def discover(self, session: CrawlSession, emitter: Optional[ProgressEmitter] = None) -> CrawlSession:
        """Scan libraries, crawl and merge into the given session."""
        emitter = emitter or ProgressEmitter(self.reporter)

        logger.info("Starting advanced URL analysis from: %s", session.base_url)
        emitter.emit('Starting analysis', 5, f"Preparing to analyze {session.base_url}")

        emitter.emit('Scanning JavaScript libraries', 10, 'Searching for important JavaScript libraries...')
        libraries = self.scanner.scan(self.config.static_dir)
        if libraries:
            logger.info("Found %d important JavaScript libraries", len(libraries))
            emitter.emit('JavaScript libraries found', 20,
                         f"Found {len(libraries)} important JavaScript libraries")
            session.assets.update(libraries)
        else:
            logger.warning("No important JavaScript libraries found")
            emitter.emit('JavaScript libraries scan', 20, 'No important JavaScript libraries found')

        emitter.emit('Crawling pages', CRAWL_START_PERCENT, 'Starting with the homepage...')
        self.crawl(session, emitter)
        emitter.emit('Crawling complete', CRAWL_END_PERCENT,
                     f"Visited {session.pages_visited} pages, found {len(session.assets)} unique assets")
        logger.info("Crawl complete. Visited %d pages, found %d unique static/media assets.",
                    session.pages_visited, len(session.assets))

        session.assets = merge_important_urls(session.assets, self.config.important_urls)
        emitter.emit('Analysis complete', 100, f"Found {len(session.assets)} unique static and media URLs")
        return session

    def _stop_requested(self, deadline: Optional[float]) -> bool:
        if self.should_stop is not None and self.should_stop():
            logger.warning("Crawl cancelled by caller")
            return True
        if deadline is not None and time.monotonic() >= deadline:
            logger.warning("Crawl time limit of %ss reached", self.config.time_limit)
            return True
        return False

    def crawl(self, session: CrawlSession, emitter: ProgressEmitter):
        """
        Depth-first crawl from the session's base URL.

        Links are pushed in reverse so a page's first link is explored to
        full depth before its second one.
        """
        deadline = None
        if self.config.time_limit:
            deadline = time.monotonic() + self.config.time_limit

        session.frontier.append(session.base_url)
        while session.frontier and not session.budget_spent:
            if self._stop_requested(deadline):
                break
            url = session.frontier.pop()
            if not session.mark_visited(url):
                continue
            links = self.crawl_page(session, url, emitter)
            session.frontier.extend(link for link in reversed(links) if link not in session.visited)

    def crawl_page(self, session: CrawlSession, url: str, emitter: ProgressEmitter) -> List[str]:
        """Fetch one visited page, collect its assets and return its same-host links."""
        logger.debug("Crawling page: %s", url)
        percent = session.crawl_percent
        emitter.emit('Crawling', percent,
                     f"Crawling page {session.pages_visited} of {session.page_budget}: {url}")

        try:
            result = self.fetcher.fetch(url)
        except TransportError as e:
            logger.warning("Failed to fetch content from %s: %s", url, e.reason)
            return []
        if not result.ok:
            logger.warning("Failed to fetch content from: %s", url)
            return []

        text = result.text
        new_assets = extract_assets(text, session.base_origin, url) - session.assets
        session.assets.update(new_assets)
        emitter.emit('Processing', percent, f"Found {len(new_assets)} new assets on page {url}")

        return extract_links(text, url, session.base_origin)

    def run(self, store_url: Optional[str], max_pages: Optional[int] = None) -> AnalysisReport:
        """
        Analysis entry point for callers that want a report instead of exceptions.

        Configuration problems are reported before any work starts. Any
        other failure ends the run with an 'Error' event at 100% and no URLs.
        """
        try:
            session = self.new_session(store_url, max_pages)
        except ConfigurationError as e:
            return AnalysisReport(False, str(e), [], categorize_urls([]), INITIAL_EVENT)

        emitter = ProgressEmitter(self.reporter)
        emitter.emit('Starting', 0, 'Initializing analysis...')
        try:
            self.discover(session, emitter)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Error during asset analysis of %s", session.base_url)
            event = emitter.emit('Error', 100, str(e) or e.__class__.__name__)
            return AnalysisReport(False, event.detail, [], categorize_urls([]), event, session.pages_visited)

        urls = sorted(session.assets)
        if not urls:
            logger.warning("No URLs found in advanced analysis")
            event = emitter.emit('Complete', 100, NO_RESULTS_MESSAGE)
            return AnalysisReport(False, NO_RESULTS_MESSAGE, [], categorize_urls([]), event,
                                  session.pages_visited)

        message = f"Analysis complete! Found {len(urls)} unique static and media URLs."
        logger.info("Advanced analysis complete, found %d URLs", len(urls))
        event = emitter.emit('Complete', 100, message)
        return AnalysisReport(True, message, urls, categorize_urls(urls), event, session.pages_visited)
