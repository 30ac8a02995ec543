"""URL normalization shared by the asset and link extractors."""

from typing import Optional
from urllib.parse import urldefrag, urljoin, urlsplit

ASSET_ROOTS = ('/static/', '/media/')
NON_NAVIGABLE_SCHEMES = ('javascript:', 'mailto:', 'tel:', 'data:')
WEB_SCHEMES = ('http', 'https')
UNSAFE_PATH_CHARS = set(' \t\r\n<>"\'`{}\\')


def is_asset_path(path: str) -> bool:
    """Check if a path lives under one of the asset roots (case-sensitive)."""
    return path.startswith(ASSET_ROOTS)


def origin_of(url: str) -> str:
    """Return scheme://host[:port] of a URL."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def normalize_base_url(url: str) -> str:
    """Make sure a store URL ends with a slash."""
    url = url.strip()
    if not url.endswith('/'):
        url += '/'
    return url


def is_same_host(url: str, base_origin: str) -> bool:
    """Check if URL points at the same host as the crawl origin."""
    return urlsplit(url).hostname == urlsplit(base_origin).hostname


def to_asset_path(reference: str, base_origin: str, page_url: Optional[str] = None) -> Optional[str]:
    """
    Turn a raw asset reference into a /static/ or /media/ path.

    Absolute URLs lose their origin whatever the host is, so a store that
    rewrites assets onto a CDN host still yields recognizable paths. Query
    strings and fragments are dropped. Returns None for anything that is not
    an asset path.
    """
    ref = reference.strip().strip('\'"').strip()
    if not ref or ref.lower().startswith('data:'):
        return None

    if ref.startswith('//'):
        ref = f"{urlsplit(base_origin).scheme or 'https'}:{ref}"

    try:
        parts = urlsplit(ref)
        if parts.scheme:
            if parts.scheme.lower() not in WEB_SCHEMES:
                return None
            path = parts.path
        elif ref.startswith('/'):
            path = parts.path
        else:
            path = urlsplit(urljoin(page_url or base_origin, ref)).path
    except ValueError:
        # malformed netloc such as an unbalanced IPv6 bracket
        return None

    if not path or UNSAFE_PATH_CHARS.intersection(path):
        return None
    return path if is_asset_path(path) else None


def to_link(reference: str, page_url: str, base_origin: str) -> Optional[str]:
    """
    Resolve an anchor href into a crawlable same-host URL.

    Returns None for fragment-only and non-navigable references, links to
    other hosts and links into the asset roots.
    """
    href = reference.strip()
    if not href or href.startswith('#'):
        return None
    if href.lower().startswith(NON_NAVIGABLE_SCHEMES):
        return None

    try:
        absolute, _ = urldefrag(urljoin(page_url, href))
        parts = urlsplit(absolute)
    except ValueError:
        return None
    if parts.scheme.lower() not in WEB_SCHEMES:
        return None
    if not is_same_host(absolute, base_origin):
        return None
    if is_asset_path(parts.path or '/'):
        return None
    return absolute
