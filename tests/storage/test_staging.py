"""
Unit tests for UploadStagingArea.
"""
import asyncio
import logging
import os
import time
from pathlib import Path

import pytest

from filebox.exceptions import FileSizeExceededError, UnsupportedContentTypeError, ValidationError
from filebox.storage.staging import UploadStagingArea


async def _stream(*chunks: bytes):
    for chunk in chunks:
        yield chunk


@pytest.mark.asyncio
async def test_stage_writes_file_and_removes_it_on_exit(tmp_path):
    """Staged file exists inside the scope and is gone after it."""
    staging = UploadStagingArea(base_path=str(tmp_path))

    async with staging.stage(
        _stream(b"hello ", b"world"),
        filename="notes.TXT",
        content_type="text/plain",
    ) as staged:
        assert staged.path.exists()
        assert staged.path.read_bytes() == b"hello world"
        assert staged.size == 11
        assert staged.original_name == "notes.TXT"
        assert staged.stored_name.endswith(".txt")
        assert staged.path.parent == tmp_path

    assert not staged.path.exists()
    assert staged.removed is True


@pytest.mark.asyncio
async def test_stage_removes_file_when_body_raises(tmp_path):
    """A failure later in the pipeline still removes the staged file."""
    staging = UploadStagingArea(base_path=str(tmp_path))
    staged_paths = []

    with pytest.raises(RuntimeError):
        async with staging.stage(
            _stream(b"data"),
            filename="a.pdf",
            content_type="application/pdf",
        ) as staged:
            staged_paths.append(staged.path)
            raise RuntimeError("downstream failure")

    assert not staged_paths[0].exists()
    assert staging.list_staged_files() == []


@pytest.mark.asyncio
async def test_stage_rejects_disallowed_content_type_before_writing(tmp_path):
    """Disallowed MIME types are rejected without touching the disk."""
    staging = UploadStagingArea(base_path=str(tmp_path / "staging"))

    with pytest.raises(UnsupportedContentTypeError) as exc_info:
        async with staging.stage(
            _stream(b"MZ\x90\x00"),
            filename="tool.exe",
            content_type="application/x-msdownload",
        ):
            pytest.fail("scope must not be entered")

    assert isinstance(exc_info.value, ValidationError)
    assert "application/x-msdownload" in str(exc_info.value)
    assert not (tmp_path / "staging").exists()


@pytest.mark.asyncio
async def test_stage_rejects_oversized_declared_size(tmp_path):
    """A declared size above the ceiling is rejected up front."""
    staging = UploadStagingArea(base_path=str(tmp_path), max_size_mb=1)

    with pytest.raises(FileSizeExceededError) as exc_info:
        async with staging.stage(
            _stream(b"x"),
            filename="big.png",
            content_type="image/png",
            declared_size=2 * 1024 * 1024,
        ):
            pytest.fail("scope must not be entered")

    assert exc_info.value.max_size == 1024 * 1024
    assert staging.list_staged_files() == []


@pytest.mark.asyncio
async def test_stage_aborts_stream_over_limit_and_cleans_up(tmp_path):
    """Streaming stops as soon as the running size passes the ceiling."""
    staging = UploadStagingArea(base_path=str(tmp_path), max_size_mb=1)
    chunk = b"x" * (256 * 1024)
    consumed = []

    async def large_stream():
        for _ in range(8):  # 2MB in total
            consumed.append(1)
            yield chunk

    with pytest.raises(FileSizeExceededError):
        async with staging.stage(
            large_stream(),
            filename="big.txt",
            content_type="text/plain",
        ):
            pytest.fail("scope must not be entered")

    # 4 chunks fit exactly, the 5th trips the limit
    assert len(consumed) == 5
    assert staging.list_staged_files() == []


@pytest.mark.asyncio
async def test_stage_checks_size_on_disk_after_streaming(tmp_path):
    """An undercounted stream is still caught by the on-disk size check."""

    class UndercountingStagingArea(UploadStagingArea):
        async def _write_stream(self, file_stream, file_path):
            # Writes without counting, like a stream reporting short chunks
            with open(file_path, "wb") as f:
                async for chunk in file_stream:
                    f.write(chunk)

    staging = UndercountingStagingArea(base_path=str(tmp_path), max_size_mb=1)

    with pytest.raises(FileSizeExceededError) as exc_info:
        async with staging.stage(
            _stream(b"x" * (1024 * 1024), b"x"),
            filename="big.txt",
            content_type="text/plain",
        ):
            pytest.fail("scope must not be entered")

    assert exc_info.value.file_size == 1024 * 1024 + 1
    assert staging.list_staged_files() == []


@pytest.mark.asyncio
async def test_stage_accepts_file_exactly_at_limit(tmp_path):
    staging = UploadStagingArea(base_path=str(tmp_path), max_size_mb=1)

    async with staging.stage(
        _stream(b"x" * (1024 * 1024)),
        filename="exact.txt",
        content_type="text/plain",
        declared_size=1024 * 1024,
    ) as staged:
        assert staged.size == 1024 * 1024


@pytest.mark.asyncio
async def test_stage_removes_file_when_task_is_cancelled(tmp_path):
    """Cancelling the request task still removes the staged file."""
    staging = UploadStagingArea(base_path=str(tmp_path))
    entered = asyncio.Event()
    staged_paths = []

    async def hold_upload():
        async with staging.stage(
            _stream(b"data"),
            filename="a.txt",
            content_type="text/plain",
        ) as staged:
            staged_paths.append(staged.path)
            entered.set()
            await asyncio.sleep(10)

    task = asyncio.create_task(hold_upload())
    await entered.wait()
    assert staged_paths[0].exists()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not staged_paths[0].exists()


@pytest.mark.asyncio
async def test_cleanup_failure_is_logged_and_does_not_mask_error(tmp_path, monkeypatch, caplog):
    """A failing removal is logged as recovered; the original error propagates."""
    staging = UploadStagingArea(base_path=str(tmp_path))
    unlink_calls = []

    def failing_unlink(self, missing_ok=False):
        unlink_calls.append(self)
        raise PermissionError("read-only filesystem")

    with caplog.at_level(logging.WARNING, logger="filebox"):
        with pytest.raises(RuntimeError, match="downstream failure"):
            async with staging.stage(
                _stream(b"data"),
                filename="a.txt",
                content_type="text/plain",
            ):
                monkeypatch.setattr(Path, "unlink", failing_unlink)
                raise RuntimeError("downstream failure")

    monkeypatch.undo()

    assert len(unlink_calls) == 1
    recovered = [r for r in caplog.records if getattr(r, "event", None) == "recovered_error"]
    assert len(recovered) == 1
    assert recovered[0].operation == "staged_file_cleanup"


@pytest.mark.asyncio
async def test_discard_is_attempted_once(tmp_path):
    staging = UploadStagingArea(base_path=str(tmp_path))

    async with staging.stage(
        _stream(b"data"),
        filename="a.txt",
        content_type="text/plain",
    ) as staged:
        staging.discard(staged)
        assert not staged.path.exists()

        # Recreate the file: a second discard must not touch it
        staged.path.write_bytes(b"other")
        staging.discard(staged)
        assert staged.path.exists()

    # Scope exit does not remove it either
    assert staged.path.exists()


def test_remove_stale_files(tmp_path):
    staging = UploadStagingArea(base_path=str(tmp_path))
    old_file = tmp_path / "old.pdf"
    new_file = tmp_path / "new.pdf"
    old_file.write_bytes(b"old")
    new_file.write_bytes(b"new")

    two_hours_ago = time.time() - 2 * 60 * 60
    os.utime(old_file, (two_hours_ago, two_hours_ago))

    removed = staging.remove_stale_files(max_age_seconds=60 * 60)

    assert removed == 1
    assert not old_file.exists()
    assert new_file.exists()


def test_list_staged_files_without_directory(tmp_path):
    staging = UploadStagingArea(base_path=str(tmp_path / "missing"))
    assert staging.list_staged_files() == []


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("report.PDF", ".pdf"),
        ("archive.tar.gz", ".gz"),
        ("no_extension", ""),
        ("weird.p$f", ""),
        ("../../etc/passwd", ""),
    ],
)
def test_safe_extension(filename, expected):
    assert UploadStagingArea._safe_extension(filename) == expected
