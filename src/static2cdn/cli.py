"""Command-line entry point for static2cdn."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .analyzer import AssetAnalyzer
from .config import DEFAULT_MAX_PAGES, MAX_REDIRECTS, REQUEST_TIMEOUT, AnalyzerConfig
from .progress import LoggingReporter, ProgressEvent
from .uploader import DirectoryUploader, upload_assets

logger = logging.getLogger("static2cdn.cli")


class PrintReporter:
    """Prints one line per progress event."""

    def report(self, event: ProgressEvent) -> None:
        print(f"[{event.percent:3d}%] {event.status}: {event.detail}", file=sys.stderr)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a storefront and list the /static/ and /media/ assets it references.",
    )
    parser.add_argument("url", help="Store base URL to start crawling from")
    parser.add_argument(
        "--max-pages",
        type=int,
        default=DEFAULT_MAX_PAGES,
        help=f"Maximum number of pages to crawl (default: {DEFAULT_MAX_PAGES})",
    )
    parser.add_argument(
        "--static-dir",
        type=Path,
        default=None,
        help="Deployed static directory (e.g. pub/static) scanned for important libraries",
    )
    parser.add_argument(
        "--media-dir",
        type=Path,
        default=None,
        help="Media directory used when mirroring /media/ assets",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT,
        help="HTTP timeout per page in seconds",
    )
    parser.add_argument(
        "--max-redirects",
        type=int,
        default=MAX_REDIRECTS,
        help="Redirect hops followed per page",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Stop crawling new pages after this many seconds",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Do not verify TLS certificates (self-signed staging hosts)",
    )
    parser.add_argument(
        "--mirror-to",
        type=Path,
        default=None,
        help="Copy every discovered asset found locally into this directory",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)
    if args.max_pages < 1:
        parser.error("--max-pages must be a positive integer")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    config = AnalyzerConfig(
        static_dir=args.static_dir.resolve() if args.static_dir else None,
        media_dir=args.media_dir.resolve() if args.media_dir else None,
        max_pages=args.max_pages,
        timeout=args.timeout,
        max_redirects=args.max_redirects,
        verify_tls=not args.insecure,
        time_limit=args.time_limit,
    )
    analyzer = AssetAnalyzer(config, reporter=LoggingReporter() if args.json else PrintReporter())
    report = analyzer.run(args.url, args.max_pages)

    upload_results = None
    if report.success and args.mirror_to:
        upload_results = upload_assets(report.urls, config.static_dir, config.media_dir,
                                       DirectoryUploader(args.mirror_to))
        logger.debug("Upload details: %s", upload_results.details)

    if args.json:
        output = report.as_dict()
        if upload_results is not None:
            output["upload"] = vars(upload_results)
        print(json.dumps(output, indent=2))
    else:
        print(f"\n{report.message}")
        if report.success:
            print(f"  Pages crawled: {report.pages_visited}")
            for category in ("js", "css", "images", "fonts", "other", "total"):
                print(f"  {category}: {report.stats[category]}")
            print()
            for url in report.urls:
                print(url)
        if upload_results is not None:
            print(f"\n{upload_results.message}")

    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())
