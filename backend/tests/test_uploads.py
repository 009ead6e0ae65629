import asyncio
import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from resume_api.exceptions import MissingFileError
from resume_api.services.uploads import (
    build_stored_name,
    ensure_upload_dir,
    save_upload,
    transient_upload,
)


def _upload(content: bytes = b"%PDF-1.4 resume", filename: str = "resume.pdf") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": "application/pdf"}),
    )


class TestBuildStoredName:
    def test_prefixes_epoch_millis(self) -> None:
        assert build_stored_name("resume.pdf", now_ms=1700000000123) == "1700000000123-resume.pdf"

    def test_drops_directory_components(self) -> None:
        assert build_stored_name("../../etc/passwd", now_ms=1) == "1-passwd"
        assert build_stored_name("C:\\Users\\me\\cv.pdf", now_ms=1) == "1-cv.pdf"

    def test_uses_current_time_by_default(self) -> None:
        prefix = build_stored_name("cv.pdf").split("-", 1)[0]
        assert prefix.isdigit() and len(prefix) >= 13


class TestSaveUpload:
    def test_writes_file_and_describes_it(self, upload_dir: Path) -> None:
        document = asyncio.run(save_upload(_upload(b"abc"), str(upload_dir)))

        assert Path(document.path).read_bytes() == b"abc"
        assert document.size == 3
        assert document.original_name == "resume.pdf"
        assert document.content_type == "application/pdf"
        assert document.stored_name.endswith("-resume.pdf")

    def test_creates_missing_directory_lazily(self, upload_dir: Path) -> None:
        assert not upload_dir.exists()
        asyncio.run(save_upload(_upload(), str(upload_dir)))
        assert upload_dir.is_dir()

    def test_accepts_any_binary(self, upload_dir: Path) -> None:
        document = asyncio.run(save_upload(_upload(b"\x00\xff", "photo.png"), str(upload_dir)))
        assert Path(document.path).read_bytes() == b"\x00\xff"

    def test_missing_file_raises(self, upload_dir: Path) -> None:
        with pytest.raises(MissingFileError):
            asyncio.run(save_upload(None, str(upload_dir)))
        assert not upload_dir.exists()

    def test_empty_filename_counts_as_missing(self, upload_dir: Path) -> None:
        with pytest.raises(MissingFileError):
            asyncio.run(save_upload(_upload(filename=""), str(upload_dir)))


class TestTransientUpload:
    def test_deletes_file_after_block(self, upload_dir: Path) -> None:
        async def scenario():
            async with transient_upload(_upload(), str(upload_dir)) as document:
                assert Path(document.path).exists()
                return document

        document = asyncio.run(scenario())
        assert not Path(document.path).exists()

    def test_deletes_file_when_block_raises(self, upload_dir: Path) -> None:
        async def scenario():
            async with transient_upload(_upload(), str(upload_dir)):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(scenario())
        assert list(upload_dir.iterdir()) == []

    def test_tolerates_file_removed_inside_block(self, upload_dir: Path) -> None:
        async def scenario():
            async with transient_upload(_upload(), str(upload_dir)) as document:
                Path(document.path).unlink()

        asyncio.run(scenario())
        assert list(upload_dir.iterdir()) == []


def test_ensure_upload_dir_is_idempotent(upload_dir: Path) -> None:
    ensure_upload_dir(str(upload_dir))
    ensure_upload_dir(str(upload_dir))
    assert upload_dir.is_dir()
