"""
Pattern-based extraction of asset references and navigation links.

Asset discovery runs a table of independent regex rules over raw page or
stylesheet text. Each rule yields raw references which are normalized onto
/static/ or /media/ paths; anything else is dropped. Rules never raise on
malformed markup, a rule that finds nothing simply contributes nothing.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple

from bs4 import BeautifulSoup

from .urls import to_asset_path, to_link

FONT_EXT = r'(?:woff2|woff|ttf|eot|otf)'
IMAGE_EXT = r'(?:png|jpg|jpeg|gif|svg|webp)'
ASSET_EXT = r'(?:js|css|png|jpg|jpeg|gif|svg|webp|woff2|woff|ttf|eot|otf)'
TOKEN = r'[^\'"\s()<>]'
QUERY = r'(?:\?[^\'"]*)?'
VENDOR_FONT_DIRS = r'(?:font-awesome/fonts|simple-line-icons/fonts|icon-fonts/font)'
CANONICAL_FRONTEND_PREFIX = '/static/frontend/'


@dataclass(frozen=True)
class ExtractionRule:
    """
    One entry of the extraction table.

    Args:
        name: Identifier used in logs and tests
        pattern: Regex run over the whole text
        group: Capture group holding the raw reference
        inner: Optional regex run over each whole match (block rules); its
            first group holds the raw references
        transform: Optional callable turning a match into raw references
    """

    name: str
    pattern: re.Pattern
    group: int = 1
    inner: Optional[re.Pattern] = None
    transform: Optional[Callable[[re.Match], Iterable[str]]] = None

    def references(self, text: str) -> Iterator[str]:
        """Yield raw references found by this rule, before normalization."""
        for match in self.pattern.finditer(text):
            if self.inner is not None:
                for inner in self.inner.finditer(match.group(0)):
                    yield inner.group(1)
            elif self.transform is not None:
                yield from self.transform(match)
            else:
                yield match.group(self.group)

    def extract(self, text: str, base_origin: str, page_url: Optional[str] = None) -> Set[str]:
        """Return the asset paths this rule finds in text."""
        assets = set()
        for raw in self.references(text):
            path = to_asset_path(raw, base_origin, page_url)
            if path:
                assets.add(path)
        return assets


def _srcset_candidates(match: re.Match) -> Iterator[str]:
    for candidate in match.group(1).split(','):
        parts = candidate.split()
        if parts:
            yield parts[0]


def _vendor_font(match: re.Match) -> Iterator[str]:
    token = match.group(0)
    if '/static/' in token:
        yield token
    else:
        yield CANONICAL_FRONTEND_PREFIX + match.group(2)


def _rule(name: str, pattern: str, group: int = 1, flags: int = re.IGNORECASE,
          inner: Optional[str] = None, transform=None) -> ExtractionRule:
    return ExtractionRule(
        name=name,
        pattern=re.compile(pattern, flags),
        group=group,
        inner=re.compile(inner, re.IGNORECASE) if inner else None,
        transform=transform,
    )


TAG_RULES: Tuple[ExtractionRule, ...] = (
    _rule('link-stylesheet', rf'<link[^>]*href=[\'"]([^\'"]+\.css{QUERY})[\'"][^>]*>'),
    _rule('script-src', rf'<script[^>]*src=[\'"]([^\'"]+\.js{QUERY})[\'"][^>]*>'),
    _rule('script-requiremodule', r'<script[^>]*data-requiremodule=[\'"]([^\'"]+)[\'"][^>]*>'),
    _rule('img-src', rf'<img[^>]*src=[\'"]([^\'"]+\.{IMAGE_EXT}{QUERY})[\'"][^>]*>'),
    _rule('srcset', r'<(?:img|source)\b[^>]*\bsrcset=[\'"]([^\'"]+)[\'"]', transform=_srcset_candidates),
    _rule('inline-background',
          r'style=[\'"][^"\']*background(?:-image)?:\s*url\([\'"]?([^\'")\s]+)[\'"]?\)'),
    _rule('media-nested-source',
          r'<(?:video|audio)[^>]*>.*?<source[^>]*src=[\'"]([^\'"]+)[\'"].*?</(?:video|audio)>',
          flags=re.IGNORECASE | re.DOTALL),
    _rule('media-src', r'<(?:source|video|audio)\b[^>]*?\bsrc=[\'"]([^\'"]+)[\'"]'),
    _rule('object-embed', r'<(?:object|embed)[^>]*(?:data|src)=[\'"]([^\'"]+)[\'"][^>]*>'),
    _rule('data-attribute', rf'\sdata-[^=\s>]*=[\'"]([^\'"]+\.{ASSET_EXT}{QUERY})[\'"]'),
    _rule('any-svg', rf'<[^>]*?(?:href|src)=[\'"]([^\'"]+\.svg{QUERY})[\'"][^>]*>'),
    _rule('preload', r'<link[^>]*rel=[\'"]preload[\'"][^>]*href=[\'"]([^\'"]+)[\'"][^>]*>'),
    _rule('preload-href-first', r'<link[^>]*href=[\'"]([^\'"]+)[\'"][^>]*rel=[\'"]preload[\'"][^>]*>'),
)

STYLESHEET_RULES: Tuple[ExtractionRule, ...] = (
    _rule('css-import', r'@import\s+(?:url\(\s*)?[\'"]([^\'"]+)[\'"]'),
    _rule('font-face-block', r'@font-face\s*\{[^}]*\}', group=0,
          inner=r'url\(\s*[\'"]?([^\'")\s]+)[\'"]?\s*\)'),
    _rule('font-local-fallback',
          rf'src\s*:\s*local\([^)]+\)\s*,\s*url\(\s*[\'"]?([^\'")\s]+\.{FONT_EXT}(?:\?[^\'")\s]*)?)[\'"]?\s*\)',
          flags=re.IGNORECASE | re.DOTALL),
    _rule('css-font-url', rf'url\(\s*[\'"]?([^\'")\s]+\.{FONT_EXT}(?:\?[^\'")\s]*)?)[\'"]?\s*\)'),
    _rule('css-url', r'url\(\s*[\'"]?([^\'")\s]+)[\'"]?\s*\)'),
    _rule('vendor-icon-font', rf'(?<![^\'"\s()<>])({TOKEN}*?)({VENDOR_FONT_DIRS}/{TOKEN}+?\.{FONT_EXT})\b',
          group=0, transform=_vendor_font),
)

BUILD_RULES: Tuple[ExtractionRule, ...] = (
    _rule('merged-cache', r'/static/_cache/merged/[^"\')+\s]+', group=0),
    _rule('minified-cache', r'/static/_cache/minified/[^"\')+\s]+', group=0),
    _rule('text-plugin', r'text!([\'"]?)([^\'"!\s]+)', group=2),
    _rule('quoted-static', r'[\'"](/static/[^\'"\s<>]+)[\'"]'),
    _rule('adminhtml', rf'/static/adminhtml/{TOKEN}+', group=0),
    _rule('bundle-code', rf'/static/(?:version\d+/)?(?:frontend|adminhtml)/{TOKEN}+?\.(?:css|js)\b', group=0),
    _rule('bundle-font', rf'/static/(?:version\d+/)?(?:frontend|adminhtml)/{TOKEN}+?\.{FONT_EXT}\b', group=0),
    _rule('bundle-font-dir',
          rf'/static/(?:version\d+/)?(?:frontend|adminhtml)/{TOKEN}+?/fonts/{TOKEN}+?\.{FONT_EXT}\b', group=0),
    _rule('quoted-asset-literal', rf'"([^"\s<>]+\.{ASSET_EXT})"'),
    _rule('library-modules',
          rf'/static/frontend/[^/\'"\s]+/[^/\'"\s]+/[^/\'"\s]+/'
          rf'(?:mage/utils/|jquery/ui-modules/|Magento_Ui/js/){TOKEN}+?\.js\b',
          group=0),
    _rule('library-minified', rf'/static/frontend/[^/\'"\s]+/[^/\'"\s]+/[^/\'"\s]+/{TOKEN}+?\.min\.js\b', group=0),
    _rule('library-fonts',
          rf'/static/frontend/[^/\'"\s]+/[^/\'"\s]+/[^/\'"\s]+/(?:css/)?fonts/{TOKEN}+?\.{FONT_EXT}\b',
          group=0),
)

INLINE_DATA_RULES: Tuple[ExtractionRule, ...] = (
    _rule('json-blob', r'\{[^}]+\}', group=0, flags=re.MULTILINE,
          inner=r'"(/(?:static|media)/[^"\s<>]+)"'),
)

RULES: Tuple[ExtractionRule, ...] = TAG_RULES + STYLESHEET_RULES + BUILD_RULES + INLINE_DATA_RULES


def extract_assets(text: str, base_origin: str, page_url: Optional[str] = None,
                   rules: Iterable[ExtractionRule] = RULES) -> Set[str]:
    """Return every /static/ or /media/ path referenced by page or stylesheet text."""
    assets: Set[str] = set()
    if not text:
        return assets
    for rule in rules:
        assets.update(rule.extract(text, base_origin, page_url))
    return assets


def extract_links(text: str, page_url: str, base_origin: str) -> List[str]:
    """
    Return same-host page links found in anchors, in document order.

    Links into /static/ or /media/, other hosts, fragment-only references and
    javascript:, mailto: or tel: hrefs are left out.
    """
    links: List[str] = []
    if not text:
        return links
    seen: Set[str] = set()
    soup = BeautifulSoup(text, 'html.parser')
    for anchor in soup.find_all('a', href=True):
        link = to_link(anchor['href'], page_url, base_origin)
        if link and link not in seen:
            seen.add(link)
            links.append(link)
    return links
