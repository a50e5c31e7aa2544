from typing import BinaryIO

from muxwire.core.errors import TransportError, TransportErrorKind


class StreamTransport:
    """
    Transport over a pair of file-like objects.

    Reads come from `reader` and writes go to `writer`; either may be None
    for a one-way stream. The HTTP server uses it to expose a request body
    and a response stream to the protocol stack.

    The streams are not owned: `close` only detaches them, leaving the
    objects themselves to whoever created them.
    """
    def __init__(
        self,
        reader: BinaryIO | None = None,
        writer: BinaryIO | None = None,
    ) -> None:
        self._reader = reader
        self._writer = writer

    def open(self) -> None:
        pass

    def close(self) -> None:
        self._reader = None
        self._writer = None

    def is_open(self) -> bool:
        return self._reader is not None or self._writer is not None

    def peek(self) -> bool:
        return self._reader is not None

    def read(self, size: int) -> bytes:
        if self._reader is None:
            raise TransportError(
                "Cannot read from a stream without reader",
                kind=TransportErrorKind.NOT_OPEN,
            )
        try:
            return self._reader.read(size)
        except OSError as exc:
            raise TransportError(f"Read failed: {exc}") from exc

    def write(self, data: bytes) -> None:
        if self._writer is None:
            raise TransportError(
                "Cannot write to a stream without writer",
                kind=TransportErrorKind.NOT_OPEN,
            )
        try:
            self._writer.write(data)
        except OSError as exc:
            raise TransportError(f"Write failed: {exc}") from exc

    def flush(self) -> None:
        if self._writer is None:
            return
        try:
            self._writer.flush()
        except OSError as exc:
            raise TransportError(f"Flush failed: {exc}") from exc
