"""Tests for the upload step."""

from pathlib import Path

from static2cdn.uploader import DirectoryUploader, UploadResults, plan_upload, upload_assets


def test_plan_upload(tmp_path):
    """URLs map onto files below the matching directory."""
    static_dir = tmp_path / "static"
    media_dir = tmp_path / "media"

    assert plan_upload("/static/version1700000000/frontend/A/b/en_US/x.js", static_dir, media_dir) == (
        static_dir / "frontend/A/b/en_US/x.js", "frontend/A/b/en_US/x.js")
    assert plan_upload("/media/logo/a.png", static_dir, media_dir) == (media_dir / "logo/a.png", "logo/a.png")
    assert plan_upload("/media/logo/a.png", static_dir, None) is None
    assert plan_upload("/other/a.png", static_dir, media_dir) is None


def test_upload_assets(tmp_path):
    """Every outcome is recorded and nothing raises."""
    static_dir = tmp_path / "static"
    (static_dir / "frontend").mkdir(parents=True)
    (static_dir / "frontend" / "ok.js").write_text("ok", encoding="utf-8")
    (static_dir / "frontend" / "rejected.js").write_text("no", encoding="utf-8")
    (static_dir / "frontend" / "boom.js").write_text("boom", encoding="utf-8")

    uploaded = []

    def upload(local_path, remote_path):
        if remote_path.endswith("boom.js"):
            raise IOError("bucket unavailable")
        uploaded.append((local_path, remote_path))
        return not remote_path.endswith("rejected.js")

    results = upload_assets([
        "/static/frontend/ok.js",
        "/static/frontend/rejected.js",
        "/static/frontend/boom.js",
        "/static/frontend/missing.js",
        "/media/a.png",
    ], static_dir, None, upload)

    assert (results.total, results.success, results.failed) == (5, 1, 4)
    assert [d["message"] for d in results.details] == [
        "Successfully uploaded",
        "Failed to upload",
        "bucket unavailable",
        f"File not found: {static_dir / 'frontend' / 'missing.js'}",
        "Unsupported URL format.",
    ]
    assert uploaded[0] == (static_dir / "frontend" / "ok.js", "frontend/ok.js")
    assert results.message == "Upload completed with issues: 1 successful, 4 failed, 5 total."


def test_all_successful_message():
    """A clean batch gets the short summary."""
    results = UploadResults(total=2)
    results.record("/static/a.js", True, "Successfully uploaded")
    results.record("/static/b.js", True, "Successfully uploaded")
    assert results.message == "All 2 files were successfully uploaded."


def test_directory_uploader(tmp_path):
    """Files are copied below the target root, creating directories."""
    source = tmp_path / "src.css"
    source.write_text("body{}", encoding="utf-8")
    uploader = DirectoryUploader(tmp_path / "mirror")

    assert uploader(source, "frontend/A/b/en_US/css/styles.css")
    assert (tmp_path / "mirror/frontend/A/b/en_US/css/styles.css").read_text(encoding="utf-8") == "body{}"
    assert not uploader(Path(tmp_path / "absent.css"), "absent.css")
