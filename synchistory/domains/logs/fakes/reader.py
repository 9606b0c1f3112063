"""Fake log reader for testing."""

from typing import List, Optional

from synchistory.domains.logs.protocols import LogReaderProtocol


class FakeLogReader(LogReaderProtocol):
    """In-memory fake for LogReaderProtocol."""

    def __init__(self) -> None:
        self._logs: dict[str, List[str]] = {}
        self._calls: list[tuple] = []
        self._should_raise: Optional[Exception] = None

    def seed(self, log_path: str, lines: List[str]) -> None:
        self._logs[log_path] = list(lines)

    def set_error(self, error: Exception) -> None:
        """Make all subsequent calls raise this error."""
        self._should_raise = error

    async def tail(self, log_path: Optional[str]) -> List[str]:
        self._calls.append(("tail", log_path))
        if self._should_raise:
            raise self._should_raise
        if not log_path:
            return []
        return list(self._logs.get(log_path, []))
