"""
Relay of a child process's combined output to the console, keeping
carriage-return progress updates in place.
"""
import re
from dataclasses import dataclass
from typing import IO, Iterable, Iterator, Optional, Union

import click

_LINE_END = re.compile(rb"\r\n|\r|\n")
MAX_CHUNK_SIZE = 65536


@dataclass(frozen=True)
class OutputChunk:
    """A finished line, or a fragment ending in a carriage return."""

    data: bytes

    @property
    def is_fragment(self) -> bool:
        return self.data.endswith(b"\r") and not self.data.endswith(b"\r\n")


@dataclass(frozen=True)
class ExitStatus:
    """Notification that the process exited."""

    code: int


ProcessEvent = Union[OutputChunk, ExitStatus]


def iter_chunks(stream: IO[bytes],
                read_size: int = 4096,
                max_chunk_size: int = MAX_CHUNK_SIZE) -> Iterator[bytes]:
    """
    Splits a byte stream into chunks ending in a newline or a carriage return.

    A trailing carriage return is held back until the next read tells whether it
    starts a CRLF pair. An unterminated run longer than max_chunk_size is yielded
    as a chunk of its own, so a single endless line is relayed in pieces. Whatever
    is left at end of stream is yielded as is.

    :param stream: Buffered binary stream, read with read1 so partial output is seen early.
    :param read_size: Maximum bytes per read.
    :param max_chunk_size: Unterminated bytes held before they are flushed.
    """
    pending = b""
    while True:
        data = stream.read1(read_size)
        if not data:
            break
        # Only a held trailing \r from the previous read can still match
        scan_from = max(len(pending) - 1, 0)
        pending += data
        start = 0
        for match in _LINE_END.finditer(pending, scan_from):
            if match.group() == b"\r" and match.end() == len(pending):
                break
            yield pending[start:match.end()]
            start = match.end()
        pending = pending[start:]
        if len(pending) > max_chunk_size:
            yield pending
            pending = b""
    if pending:
        yield pending


class OutputRelay:
    """
    Forwards process events to an output stream until the exit notification.

    A fragment ending in a carriage return is written immediately without a
    newline so a progress bar redraws in place. The next finished line first
    terminates the pending fragment with a newline, then is written itself.
    """
    def __init__(self, output: Optional[IO[str]] = None):
        """
        :param output: Text stream to relay to. Defaults to stdout.
        """
        self.output = output

    def _write(self, text: str):
        click.echo(text, nl=False, file=self.output)

    def relay(self, events: Iterable[ProcessEvent]) -> int:
        """
        Relays events in order and blocks until the exit notification.
        Events after the exit notification are not consumed.

        :param events: Output chunks followed by the exit status.
        :return: The exit status of the process.
        """
        last = None
        for event in events:
            if isinstance(event, ExitStatus):
                if last is not None:
                    self._write("\n")
                return event.code

            text = event.data.decode("utf-8", errors="replace")
            if event.is_fragment:
                self._write(text)
                last = text
            else:
                if last is not None:
                    self._write("\n")
                    last = None
                self._write(text.rstrip("\r\n") + "\n")

        raise RuntimeError("Process output ended without an exit status")
