"""Filesystem log reader.

Attempt logs live under a shared root (local directory or a mounted
volume); attempts reference them by relative path.
"""

from collections import deque
from pathlib import Path
from typing import List, Optional, Union

import aiofiles

from synchistory.core.exceptions import TransientIOException
from synchistory.core.logging import logger
from synchistory.domains.logs.protocols import LogReaderProtocol


class FilesystemLogReader(LogReaderProtocol):
    """Reads attempt log tails from the filesystem with aiofiles."""

    def __init__(self, base_path: Union[str, Path], max_lines: int = 1000):
        """Initialize log reader.

        Args:
            base_path: Root directory attempt log paths are relative to
            max_lines: Maximum number of trailing lines returned per log
        """
        self.base_path = Path(base_path)
        self.max_lines = max_lines

    def _resolve(self, log_path: str) -> Optional[Path]:
        """Resolve a log reference under the root; None if it points outside it."""
        root = self.base_path.resolve()
        full_path = (root / log_path.lstrip("/")).resolve()
        if root != full_path and root not in full_path.parents:
            return None
        return full_path

    async def tail(self, log_path: Optional[str]) -> List[str]:
        """Return the last ``max_lines`` lines of the log."""
        if not log_path:
            return []

        full_path = self._resolve(log_path)
        if full_path is None:
            logger.warning(f"Ignoring log path outside the storage root: {log_path}")
            return []

        lines: deque[str] = deque(maxlen=self.max_lines)
        try:
            async with aiofiles.open(full_path, "r", encoding="utf-8", errors="replace") as f:
                async for line in f:
                    lines.append(line.rstrip("\n"))
        except FileNotFoundError:
            logger.warning(f"Log file not found: {log_path}")
            return []
        except OSError as e:
            raise TransientIOException("log_storage", f"Failed to read {log_path}: {e}") from e
        return list(lines)
