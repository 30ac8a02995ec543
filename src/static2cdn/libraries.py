"""Filesystem scan of deployed theme directories for important shared libraries."""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Set

logger = logging.getLogger(__name__)

THEME_AREAS = ('frontend', 'adminhtml')
LIBRARY_EXTENSIONS = {'.js', '.woff', '.woff2', '.ttf', '.eot', '.otf', '.svg'}

# Relative to a theme/locale root, e.g. pub/static/frontend/Magento/luma/en_US
IMPORTANT_DIRECTORIES = (
    'mage/requirejs',
    'mage/utils',
    'mage/translate',
    'jquery',
    'jquery/ui-modules',
    'jquery-ui-modules',
    'underscore',
    'knockoutjs',
    'Magento_Ui/js/lib',
    'Magento_Ui/js/core',
    'Magento_Ui/js/form',
    'Magento_Ui/js/grid',
    'Magento_Ui/js/modal',
    'Magento_Theme',
    'Magento_Catalog/js',
    'Magento_Checkout/js',
    'Magento_Customer/js',
    'Magento_Search/js',
    'fonts',
    'font-awesome/fonts',
    'simple-line-icons/fonts',
    'icon-fonts/font',
    'css/fonts',
)

IMPORTANT_PATTERNS = (
    '*.min.js',
    'bundle*.js',
    'requirejs-config.js',
    'mage/requirejs/mixins.js',
    'mage/bootstrap.js',
    '*.woff',
    '*.woff2',
    '*.ttf',
    '*.eot',
    '*.otf',
    'knockout.js',
    'jquery*.js',
    'require.js',
)

# Checked against discovered URLs after the crawl. Entries without a
# wildcard are added to the result as they are.
IMPORTANT_STATIC_URLS = (
    '/static/frontend/*/*/*/mage/requirejs/mixins.js',
    '/static/frontend/*/*/*/requirejs/require.js',
    '/static/frontend/*/*/*/mage/utils/*.js',
    '/static/frontend/*/*/*/jquery.js',
    '/static/frontend/*/*/*/jquery-ui.js',
    '/static/frontend/*/*/*/jquery/*.js',
    '/static/frontend/*/*/*/jquery/ui-modules/*.js',
    '/static/frontend/*/*/*/knockout.js',
    '/static/frontend/*/*/*/mage/translate.js',
    '/static/frontend/*/*/*/mage/menu.js',
    '/static/frontend/*/*/*/mage/tabs.js',
    '/static/frontend/*/*/*/Magento_Ui/js/lib/*.js',
    '/static/frontend/*/*/*/Magento_Ui/js/core/*.js',
    '/static/frontend/*/*/*/Magento_Ui/js/form/*.js',
    '/static/frontend/*/*/*/Magento_Ui/js/modal/*.js',
    '/static/frontend/*/*/*/Magento_Checkout/js/view/*.js',
    '/static/frontend/*/*/*/Magento_Catalog/js/*.js',
    '/static/frontend/*/*/*/fonts/*.woff2',
    '/static/frontend/*/*/*/fonts/*.woff',
    '/static/frontend/*/*/*/fonts/*.ttf',
    '/static/frontend/*/*/*/fonts/*.eot',
    '/static/frontend/*/*/*/fonts/*.otf',
    '/static/frontend/*/*/*/css/fonts/*.woff2',
    '/static/frontend/*/*/*/css/fonts/*.woff',
    '/static/frontend/*/*/*/css/fonts/*.ttf',
    '/static/frontend/*/*/*/css/fonts/*.eot',
    '/static/frontend/*/*/*/css/fonts/*.otf',
)


def important_pattern_regex(pattern: str) -> re.Pattern:
    """Compile an important URL pattern; '*' stands for one or more characters."""
    return re.compile('.+'.join(re.escape(part) for part in pattern.split('*')), re.IGNORECASE)


def merge_important_urls(assets: Set[str], important_urls: Iterable[str]) -> Set[str]:
    """
    Fold the important URL list into a set of discovered assets.

    Wildcard patterns only confirm assets that were already found. Literal
    entries are added even if no page referenced them.
    """
    merged = set(assets)
    for pattern in important_urls:
        if '*' in pattern:
            regex = important_pattern_regex(pattern)
            merged.update(asset for asset in assets if regex.search(asset))
        else:
            merged.add(pattern)
    return merged


def _subdirectories(path: Path) -> List[Path]:
    return sorted(child for child in path.glob('*') if child.is_dir())


def _to_static_url(path: Path, static_root: Path) -> str:
    return '/static/' + path.relative_to(static_root).as_posix()


class LibraryScanner:
    """Finds important JS libraries and icon fonts in the deployed static directory."""

    def __init__(self, directories: Iterable[str] = IMPORTANT_DIRECTORIES,
                 patterns: Iterable[str] = IMPORTANT_PATTERNS):
        """
        Initialize the scanner.

        Args:
            directories: Directories, relative to each theme root, walked recursively
            patterns: Glob patterns evaluated directly under each theme root
        """
        self.directories = tuple(directories)
        self.patterns = tuple(patterns)

    def theme_paths(self, static_root: Path) -> List[Path]:
        """Return every area/vendor/theme/locale directory under the static root."""
        theme_paths = []
        for area in THEME_AREAS:
            area_path = static_root / area
            if not area_path.is_dir():
                continue
            for vendor in _subdirectories(area_path):
                for theme in _subdirectories(vendor):
                    theme_paths.extend(_subdirectories(theme))
        logger.debug("Found %d theme paths for scanning", len(theme_paths))
        return theme_paths

    def scan_directory(self, directory: Path, static_root: Path) -> Set[str]:
        """Collect library files below a directory as /static/ URLs."""
        found = set()
        for root, _, files in os.walk(directory, onerror=self._raise):
            for name in files:
                path = Path(root) / name
                if path.suffix in LIBRARY_EXTENSIONS:
                    found.add(_to_static_url(path, static_root))
        return found

    @staticmethod
    def _raise(error: OSError):
        raise error

    def scan(self, static_root: Optional[Path]) -> List[str]:
        """
        Scan the static root for important library files.

        Never raises: an unreadable tree is logged and yields an empty list so
        the crawl can go on with network-discovered assets only.
        """
        if static_root is None:
            logger.info("No static directory configured, skipping library scan")
            return []

        static_root = Path(static_root)
        found: Set[str] = set()
        try:
            logger.info("Starting JavaScript libraries scan from: %s", static_root)
            for theme_path in self.theme_paths(static_root):
                for directory in self.directories:
                    full_path = theme_path / directory
                    logger.debug("Checking directory: %s", full_path)
                    if full_path.is_dir():
                        found.update(self.scan_directory(full_path, static_root))

                for pattern in self.patterns:
                    for match in theme_path.glob(pattern):
                        if match.is_file():
                            found.add(_to_static_url(match, static_root))
        except OSError as e:
            logger.error("Error scanning JavaScript libraries: %s", e)
            return []

        logger.info("Found %d important JavaScript libraries and files", len(found))
        return sorted(found)
