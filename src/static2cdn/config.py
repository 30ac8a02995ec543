"""Configuration objects and constants for the asset analyzer."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .libraries import IMPORTANT_STATIC_URLS

DEFAULT_MAX_PAGES = 5
REQUEST_TIMEOUT = 30
MAX_REDIRECTS = 5
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'


@dataclass
class AnalyzerConfig:
    """Settings shared by every analysis run of one store."""

    static_dir: Optional[Path] = None
    media_dir: Optional[Path] = None
    default_store_url: Optional[str] = None
    max_pages: int = DEFAULT_MAX_PAGES
    timeout: float = REQUEST_TIMEOUT
    max_redirects: int = MAX_REDIRECTS
    user_agent: str = USER_AGENT
    verify_tls: bool = True
    time_limit: Optional[float] = None
    enabled: bool = True
    important_urls: Tuple[str, ...] = IMPORTANT_STATIC_URLS
