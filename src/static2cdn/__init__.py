"""static2cdn - discover the static and media assets a storefront serves."""

from .analyzer import AnalysisReport, AssetAnalyzer, CrawlSession, categorize_urls
from .config import AnalyzerConfig
from .errors import AnalysisError, ConfigurationError, TransportError
from .extractor import extract_assets, extract_links
from .fetcher import FetchResult, HttpFetcher
from .libraries import LibraryScanner
from .progress import ProgressEvent
from .uploader import DirectoryUploader, UploadResults, upload_assets

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "AnalysisReport",
    "AnalyzerConfig",
    "AssetAnalyzer",
    "ConfigurationError",
    "CrawlSession",
    "DirectoryUploader",
    "FetchResult",
    "HttpFetcher",
    "LibraryScanner",
    "ProgressEvent",
    "TransportError",
    "UploadResults",
    "categorize_urls",
    "extract_assets",
    "extract_links",
    "upload_assets",
]
