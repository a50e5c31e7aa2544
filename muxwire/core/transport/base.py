from muxwire.core.errors import TransportError, TransportErrorKind
from muxwire.core.ports.transport import Transport


def read_all(trans: Transport, size: int) -> bytes:
    """
    Read exactly `size` bytes from `trans`.

    Raises TransportError(END_OF_FILE) when the stream ends first.
    """
    chunks = bytearray()
    while len(chunks) < size:
        chunk = trans.read(size - len(chunks))
        if not chunk:
            raise TransportError(
                f"Cannot read {size} bytes: stream ended after {len(chunks)}",
                kind=TransportErrorKind.END_OF_FILE,
            )
        chunks.extend(chunk)
    return bytes(chunks)


class IdentityTransportFactory:
    """Default TransportFactory: hands back the transport it is given."""

    def get_transport(self, trans: Transport) -> Transport:
        return trans
