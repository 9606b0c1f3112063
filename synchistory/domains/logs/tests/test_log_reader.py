"""Tests for FilesystemLogReader."""

import pytest

from synchistory.core.exceptions import TransientIOException
from synchistory.domains.logs.reader import FilesystemLogReader


@pytest.fixture
def log_root(tmp_path):
    attempt_dir = tmp_path / "jobs" / "1" / "0"
    attempt_dir.mkdir(parents=True)
    (attempt_dir / "logs.log").write_text("".join(f"line {i}\n" for i in range(10)))
    return tmp_path


@pytest.mark.asyncio
async def test_tail_returns_last_lines(log_root):
    reader = FilesystemLogReader(log_root, max_lines=3)

    assert await reader.tail("jobs/1/0/logs.log") == ["line 7", "line 8", "line 9"]


@pytest.mark.asyncio
async def test_tail_short_log_returns_everything(log_root):
    reader = FilesystemLogReader(log_root, max_lines=100)

    lines = await reader.tail("/jobs/1/0/logs.log")

    assert lines[0] == "line 0"
    assert len(lines) == 10


@pytest.mark.asyncio
@pytest.mark.parametrize("log_path", [None, "", "jobs/1/1/logs.log", "../outside.log"])
async def test_missing_or_foreign_logs_are_empty(log_root, log_path):
    reader = FilesystemLogReader(log_root / "jobs")

    assert await reader.tail(log_path) == []


@pytest.mark.asyncio
async def test_unreadable_log_is_transient(log_root):
    reader = FilesystemLogReader(log_root)

    # A directory cannot be read as a log file
    with pytest.raises(TransientIOException) as exc_info:
        await reader.tail("jobs/1")

    assert exc_info.value.service_name == "log_storage"
