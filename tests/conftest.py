"""Shared fixtures: an in-memory fetcher and a deployed static tree."""

from pathlib import Path

import pytest

from static2cdn.errors import TransportError
from static2cdn.fetcher import FetchResult

FIXTURES = Path(__file__).parent / "fixtures"
STORE_URL = "https://shop.example/"

HOME_ASSETS = {
    "/static/version1700000000/frontend/Acme/shop/en_US/css/styles-m.css",
    "/static/_cache/merged/0f3a9c.min.css",
    "/static/version1700000000/frontend/Acme/shop/en_US/requirejs/require.js",
    "/static/frontend/Acme/shop/en_US/fonts/opensans.woff2",
    "/static/frontend/Acme/shop/en_US/images/cdn.png",
    "/static/frontend/Acme/shop/en_US/images/icon.svg",
    "/media/logo/stores/1/logo.png",
    "/media/wysiwyg/banner.webp",
    "/media/catalog/product/a/b/ab.jpg",
    "/media/catalog/product/small.jpg",
    "/media/catalog/product/large.jpg",
    "/media/video/intro.mp4",
}

# What LibraryScanner finds in the static_root fixture
EXPECTED_SCAN = [
    "/static/adminhtml/Magento/backend/en_US/mage/requirejs/mixins.js",
    "/static/frontend/Acme/shop/en_US/fonts/icons.woff2",
    "/static/frontend/Acme/shop/en_US/jquery.min.js",
    "/static/frontend/Acme/shop/en_US/mage/utils/main.js",
    "/static/frontend/Acme/shop/en_US/requirejs-config.js",
]


class FakeFetcher:
    """Serves pages from a dict and remembers every URL it was asked for."""

    def __init__(self, pages, failures=()):
        self.pages = pages
        self.failures = set(failures)
        self.fetched = []

    def fetch(self, url):
        self.fetched.append(url)
        if url in self.failures:
            raise TransportError(url, "connection refused")
        body = self.pages.get(url)
        if body is None:
            return FetchResult(b"", 404)
        return FetchResult(body.encode("utf-8"), 200, "utf-8")


@pytest.fixture
def home_html():
    return (FIXTURES / "home.html").read_text(encoding="utf-8")


@pytest.fixture
def fake_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def static_root(tmp_path):
    """A pub/static tree with one frontend and one adminhtml theme."""
    root = tmp_path / "static"
    files = [
        "frontend/Acme/shop/en_US/mage/utils/main.js",
        "frontend/Acme/shop/en_US/mage/utils/README.txt",
        "frontend/Acme/shop/en_US/fonts/icons.woff2",
        "frontend/Acme/shop/en_US/jquery.min.js",
        "frontend/Acme/shop/en_US/requirejs-config.js",
        "frontend/Acme/shop/en_US/css/styles.css",
        "adminhtml/Magento/backend/en_US/mage/requirejs/mixins.js",
        "frontend/Acme/shop/stray-file.txt",
    ]
    for name in files:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("/* {} */".format(name), encoding="utf-8")
    return root
