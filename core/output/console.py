"""
Console Sink - Prints the current command on a single terminal line.

Each command overwrites the previous one (carriage return, no newline),
so the terminal shows a live readout at the poll rate.
"""

import sys
from typing import Optional, TextIO

from core.render import render_command


class ConsoleSink:
    """
    Writes '\\r<command>' to a stream.

    With a status provider, the bucket bar graph is written in front
    of the command.
    """

    def __init__(self, stream: Optional[TextIO] = None, status=None) -> None:
        """
        Initialize console sink.

        Args:
            stream: Where to write (default: stdout)
            status: Optional zero-argument callable returning a status line
        """
        self._stream = stream or sys.stdout
        self._status = status
        self._last_width = 0

    async def emit(self, command) -> bool:
        self.refresh(command)
        return True

    def refresh(self, command=None) -> None:
        """Redraw the line; with no command only the status is shown"""
        text = render_command(command)
        if self._status is not None:
            text = f"{self._status()} {text}"

        # Pad with spaces so a shorter line fully covers the previous one
        padding = " " * max(0, self._last_width - len(text))
        self._last_width = len(text)

        self._stream.write("\r" + text + padding)
        self._stream.flush()
