"""
smartrefs.output - Diagnostic output channel.

A named, line-oriented channel for diagnostics produced while fixing
references (e.g. "Project reference for Lib.csproj not found"). The
channel is created lazily on first write; ``activate()`` brings it to the
foreground by flushing the buffered lines to its stream.
"""

from __future__ import annotations

import sys
from typing import TextIO


class OutputChannel:
    """Named diagnostic pane backed by a text stream.

    Attributes:
        name: Display name of the channel (e.g. "Smart References").
        channel_id: Stable identifier of the channel.
        quiet: Suppress informational lines; diagnostics are always kept.
        stream: Where ``activate()`` prints; ``None`` means ``sys.stderr``.
    """

    def __init__(
        self,
        name: str,
        channel_id: str,
        stream: TextIO | None = None,
        quiet: bool = False,
    ) -> None:
        self.name = name
        self.channel_id = channel_id
        self.quiet = quiet
        self.stream = stream
        self._lines: list[str] | None = None
        self._history: list[str] = []

    @property
    def created(self) -> bool:
        """True once something has been written to the channel."""
        return self._lines is not None

    @property
    def lines(self) -> list[str]:
        """Every line written to the channel so far, flushed or not."""
        return list(self._history)

    def _pane(self) -> list[str]:
        if self._lines is None:
            self._lines = []
        return self._lines

    def write_line(self, message: str) -> None:
        """Append a diagnostic line."""
        self._pane().append(message)
        self._history.append(message)

    def info(self, message: str) -> None:
        """Append an informational line, dropped in quiet mode."""
        if not self.quiet:
            self.write_line(message)

    def activate(self) -> None:
        """Bring the channel to the foreground, flushing pending lines."""
        if not self._lines:
            return
        stream = self.stream if self.stream is not None else sys.stderr
        print(f"[{self.name}]", file=stream)
        for line in self._lines:
            print(f"  {line}", file=stream)
        self._lines.clear()


_channels: dict[str, OutputChannel] = {}


def get_channel(
    name: str,
    channel_id: str,
    stream: TextIO | None = None,
    quiet: bool = False,
) -> OutputChannel:
    """Return the channel registered under ``channel_id``, creating it if needed."""
    channel = _channels.get(channel_id)
    if channel is None:
        channel = OutputChannel(name, channel_id, stream=stream, quiet=quiet)
        _channels[channel_id] = channel
    else:
        channel.quiet = quiet
        if stream is not None:
            channel.stream = stream
    return channel


def reset_channels() -> None:
    """Forget all registered channels."""
    _channels.clear()
