import io

from muxwire.core.errors import TransportError, TransportErrorKind


class MemoryBuffer:
    """
    Transport backed by an in-memory byte buffer.

    Writes append at the end of the buffer and reads consume from a separate
    read position, so a MemoryBuffer can be filled by one protocol and then
    drained by another. `flush` is a no-op.
    """
    def __init__(self, value: bytes = b"") -> None:
        self._buffer = io.BytesIO(value)
        self._read_pos = 0
        self._closed = False

    def open(self) -> None:
        pass

    def close(self) -> None:
        self._closed = True

    def is_open(self) -> bool:
        return not self._closed

    def peek(self) -> bool:
        return self._read_pos < len(self._buffer.getbuffer())

    def read(self, size: int) -> bytes:
        self._ensure_open()
        self._buffer.seek(self._read_pos)
        data = self._buffer.read(size)
        self._read_pos += len(data)
        return data

    def write(self, data: bytes) -> None:
        self._ensure_open()
        self._buffer.seek(0, io.SEEK_END)
        self._buffer.write(data)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        """Return the whole buffer, including bytes already read."""
        return self._buffer.getvalue()

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransportError(
                "Memory buffer is closed", kind=TransportErrorKind.NOT_OPEN
            )
