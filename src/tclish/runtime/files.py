"""
File-handle table.

Maps channel names (``stdin``, ``stdout``, ``stderr`` and ``fileN`` for
opened files) to Python file objects. Standard channels are looked up on
``sys`` at each use so redirected streams are honoured.
"""

import io
import logging
import sys
from pathlib import Path
from typing import Dict, IO, List

from ..shared.errors import TclError
from ..utils.config import (
    CHANNEL_PREFIX, DEFAULT_FILE_ENCODING,
    STDIN_CHANNEL, STDOUT_CHANNEL, STDERR_CHANNEL, STANDARD_CHANNELS,
)

logger = logging.getLogger(__name__)

OPEN_MODES = ("r", "r+", "w", "w+", "a", "a+")

_WHENCE = {"start": io.SEEK_SET, "current": io.SEEK_CUR, "end": io.SEEK_END}


class FileTable:
    """Open channels of one interpreter."""

    def __init__(self):
        self.files: Dict[str, IO[str]] = {}
        self.next_id = 0

    def channels(self) -> List[str]:
        return list(STANDARD_CHANNELS) + sorted(self.files)

    def lookup(self, channel: str) -> IO[str]:
        if channel == STDIN_CHANNEL:
            return sys.stdin
        if channel == STDOUT_CHANNEL:
            return sys.stdout
        if channel == STDERR_CHANNEL:
            return sys.stderr
        try:
            return self.files[channel]
        except KeyError:
            raise TclError(f"can not find channel named \"{channel}\"") from None

    def open(self, path: str, mode: str = "r") -> str:
        if mode not in OPEN_MODES:
            raise TclError(f"illegal access mode \"{mode}\"")
        try:
            handle = Path(path).open(mode, encoding=DEFAULT_FILE_ENCODING)
        except OSError as e:
            raise TclError(f"couldn't open \"{path}\": {e.strerror}") from e
        channel = f"{CHANNEL_PREFIX}{self.next_id}"
        self.next_id += 1
        self.files[channel] = handle
        logger.debug(f"Opened {path} ({mode}) as {channel}")
        return channel

    def close(self, channel: str) -> None:
        if channel in STANDARD_CHANNELS:
            raise TclError(f"can not close standard channel \"{channel}\"")
        handle = self.lookup(channel)
        del self.files[channel]
        handle.close()
        logger.debug(f"Closed {channel}")

    def close_all(self) -> None:
        for channel in list(self.files):
            self.close(channel)

    def write(self, channel: str, text: str, newline: bool = True) -> None:
        handle = self.lookup(channel)
        handle.write(text + "\n" if newline else text)
        if channel in STANDARD_CHANNELS:
            handle.flush()

    def gets(self, channel: str) -> str:
        """Next line without its line terminator; empty at end of file."""
        return self.lookup(channel).readline().rstrip("\n")

    def read(self, channel: str, count: int = -1) -> str:
        return self.lookup(channel).read(count)

    def eof(self, channel: str) -> bool:
        handle = self.lookup(channel)
        if channel in STANDARD_CHANNELS:
            return False
        position = handle.tell()
        at_end = handle.read(1) == ""
        handle.seek(position)
        return at_end

    def seek(self, channel: str, offset: int, origin: str = "start") -> None:
        if origin not in _WHENCE:
            raise TclError(f"bad origin \"{origin}\": must be start, current, or end")
        handle = self.lookup(channel)
        try:
            handle.seek(offset, _WHENCE[origin])
        except (OSError, io.UnsupportedOperation) as e:
            raise TclError(f"error during seek on \"{channel}\": {e}") from e

    def tell(self, channel: str) -> int:
        try:
            return self.lookup(channel).tell()
        except (OSError, io.UnsupportedOperation) as e:
            raise TclError(f"error during tell on \"{channel}\": {e}") from e
