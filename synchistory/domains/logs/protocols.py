"""Protocols for attempt log access."""

from typing import List, Optional, Protocol


class LogReaderProtocol(Protocol):
    """Reads the tail of an attempt's log.

    A missing log reference or file yields an empty list; any other
    storage failure surfaces as TransientIOException.
    """

    async def tail(self, log_path: Optional[str]) -> List[str]:
        """Return the last lines of the log at ``log_path``."""
        ...
