"""Tests for the deployed library scan and the important URL merge."""

from conftest import EXPECTED_SCAN
from static2cdn.libraries import LibraryScanner, important_pattern_regex, merge_important_urls


def test_scan_finds_libraries(static_root):
    """Important directories and root patterns are collected, sorted and deduplicated."""
    assert LibraryScanner().scan(static_root) == EXPECTED_SCAN


def test_theme_paths(static_root):
    """Only area/vendor/theme/locale directories count as theme roots."""
    paths = LibraryScanner().theme_paths(static_root)
    assert [p.relative_to(static_root).as_posix() for p in paths] == [
        "frontend/Acme/shop/en_US",
        "adminhtml/Magento/backend/en_US",
    ]


def test_scan_without_static_dir(tmp_path):
    """A missing or unset static directory yields nothing."""
    scanner = LibraryScanner()
    assert scanner.scan(None) == []
    assert scanner.scan(tmp_path / "does-not-exist") == []
    assert scanner.scan(tmp_path) == []


def test_scan_soft_fails_on_os_error(static_root, monkeypatch):
    """Filesystem errors are logged and produce an empty list."""
    scanner = LibraryScanner()

    def unreadable(_root):
        raise PermissionError("permission denied")

    monkeypatch.setattr(scanner, "theme_paths", unreadable)
    assert scanner.scan(static_root) == []


def test_custom_directories_and_patterns(static_root):
    """Scanner lists can be narrowed."""
    scanner = LibraryScanner(directories=["fonts"], patterns=[])
    assert scanner.scan(static_root) == ["/static/frontend/Acme/shop/en_US/fonts/icons.woff2"]


def test_important_pattern_regex():
    """A wildcard spans one or more characters, case-insensitively."""
    regex = important_pattern_regex("/static/frontend/*/*/*/jquery.js")
    assert regex.search("/static/frontend/Magento/luma/en_US/jquery.js")
    assert regex.search("/STATIC/frontend/Magento/luma/en_US/JQUERY.js")
    assert not regex.search("/static/frontend//luma/en_US/jquery.js")


def test_merge_wildcards_only_confirm_found_assets():
    """Wildcard entries never invent URLs."""
    assets = {"/static/frontend/A/b/en_US/fonts/x.woff2", "/media/logo.png"}
    merged = merge_important_urls(assets, ["/static/frontend/*/*/*/fonts/*.woff2",
                                           "/static/frontend/*/*/*/knockout.js"])
    assert merged == assets


def test_merge_adds_literal_entries():
    """Literal entries are included even when no page referenced them."""
    merged = merge_important_urls(set(), ["/static/frontend/A/b/en_US/mage/bootstrap.js"])
    assert merged == {"/static/frontend/A/b/en_US/mage/bootstrap.js"}


def test_merge_does_not_mutate_input():
    """The caller's set is left alone."""
    assets = {"/static/a.js"}
    merge_important_urls(assets, ["/static/b.js"])
    assert assets == {"/static/a.js"}
