from typing import Protocol


class Transport(Protocol):
    """
    Byte-oriented duplex channel used by a Protocol.

    A Transport is owned by exactly one Protocol at a time and lives as
    long as the connection or request it serves. Implementations decide
    whether `write` goes straight to the wire or is buffered until
    `flush`; callers must always flush after a complete message.
    """

    def open(self) -> None:
        """
        Make the transport ready for I/O. Transports that are usable as
        soon as they are built implement this as a no-op.
        """

    def close(self) -> None:
        """
        Release the underlying resources. Calling close() twice must be
        harmless.
        """

    def is_open(self) -> bool:
        """Return True while the transport can perform I/O."""

    def peek(self) -> bool:
        """
        Return True if data may be available for reading. A True result
        does not guarantee that a subsequent read will not block.
        """

    def read(self, size: int) -> bytes:
        """
        Read up to `size` bytes, blocking until at least one is available.
        An empty result means the stream is exhausted.
        """

    def write(self, data: bytes) -> None:
        """Write all of `data`, possibly into an internal buffer."""

    def flush(self) -> None:
        """Push any buffered bytes to the peer."""


class TransportFactory(Protocol):
    """
    Builds the transport a server hands to its protocols from the raw
    transport of an accepted connection or request (e.g. to add
    buffering or framing).
    """

    def get_transport(self, trans: Transport) -> Transport:
        ...
