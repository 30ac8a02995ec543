"""Hand discovered assets to an upload collaborator, one file at a time."""

import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

VERSION_SEGMENT = re.compile(r'^version\d+/')

Upload = Callable[[Path, str], bool]


@dataclass
class UploadResults:
    """Summary of an upload batch."""

    total: int = 0
    success: int = 0
    failed: int = 0
    details: List[Dict[str, object]] = field(default_factory=list)

    def record(self, url: str, success: bool, message: str):
        if success:
            self.success += 1
        else:
            self.failed += 1
        self.details.append({'url': url, 'success': success, 'message': message})

    @property
    def message(self) -> str:
        if self.failed:
            return (f"Upload completed with issues: {self.success} successful, "
                    f"{self.failed} failed, {self.total} total.")
        return f"All {self.success} files were successfully uploaded."


def plan_upload(url: str, static_dir: Optional[Path],
                media_dir: Optional[Path]) -> Optional[Tuple[Path, str]]:
    """
    Map an asset URL onto (local path, remote path).

    Returns None when the URL is under neither root or the matching
    directory is not configured. A leading versionNNN/ segment of static
    URLs is dropped since deployed files live without it.
    """
    if url.startswith('/static/') and static_dir is not None:
        remote_path = VERSION_SEGMENT.sub('', url[len('/static/'):])
        return Path(static_dir) / remote_path, remote_path
    if url.startswith('/media/') and media_dir is not None:
        remote_path = url[len('/media/'):]
        return Path(media_dir) / remote_path, remote_path
    return None


def upload_assets(urls: Iterable[str], static_dir: Optional[Path], media_dir: Optional[Path],
                  upload: Upload) -> UploadResults:
    """Upload every asset that exists locally; failures are recorded, never raised."""
    urls = list(urls)
    results = UploadResults(total=len(urls))

    for url in urls:
        planned = plan_upload(url, static_dir, media_dir)
        if planned is None:
            results.record(url, False, 'Unsupported URL format.')
            continue

        local_path, remote_path = planned
        logger.debug("Local path: %s, remote path: %s", local_path, remote_path)
        if not local_path.is_file():
            logger.error("File not found: %s", local_path)
            results.record(url, False, f"File not found: {local_path}")
            continue

        try:
            uploaded = upload(local_path, remote_path)
        except Exception as e:  # pylint: disable=broad-except
            logger.error("Exception processing URL %s: %s", url, e)
            results.record(url, False, str(e))
            continue

        if uploaded:
            logger.info("Successfully uploaded %s", url)
            results.record(url, True, 'Successfully uploaded')
        else:
            logger.error("Failed to upload %s", url)
            results.record(url, False, 'Failed to upload')

    return results


class DirectoryUploader:
    """Upload collaborator that copies files into a local directory tree."""

    def __init__(self, target_root: Path):
        self.target_root = Path(target_root)

    def __call__(self, local_path: Path, remote_path: str) -> bool:
        destination = self.target_root / remote_path
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, destination)
        except OSError as e:
            logger.warning("Could not copy %s to %s: %s", local_path, destination, e)
            return False
        return True
