from enum import IntEnum

from muxwire.core.models.message import MessageType


class MuxwireError(Exception):
    """Base class of every error raised by muxwire."""


class TransportErrorKind(IntEnum):
    UNKNOWN = 0
    NOT_OPEN = 1
    ALREADY_OPEN = 2
    TIMED_OUT = 3
    END_OF_FILE = 4


class TransportError(MuxwireError):
    """
    Byte-level I/O failure.

    `kind` classifies the failure so callers can branch on it instead of
    parsing the message. HTTP bindings also set `status` to the response
    code that caused the error.
    """

    def __init__(
        self,
        message: str,
        kind: TransportErrorKind = TransportErrorKind.UNKNOWN,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status


class ProtocolError(MuxwireError):
    """Structured message framing was violated."""


class UnexpectedMessageTypeError(ProtocolError):
    """A message type other than CALL or ONEWAY reached a dispatcher."""

    def __init__(self, got: MessageType | int) -> None:
        super().__init__(
            f"Unexpected message type {got!r}: only CALL and ONEWAY "
            f"messages can be dispatched"
        )
        self.got = got


class MalformedHeaderError(ProtocolError):
    """The message name does not carry a `service:function` tag."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Service name not found in message name: {name!r}. "
            f"Did you forget to use a MultiplexedProtocol in your client?"
        )
        self.name = name


class HeaderConsumedError(ProtocolError):
    """The replayed message header was already read once."""

    def __init__(self) -> None:
        super().__init__("Message header already consumed")


class UnknownServiceError(ProtocolError):
    """No processor is registered under the requested service name."""

    def __init__(self, service: str) -> None:
        super().__init__(
            f"Service name not found: {service!r}. "
            f"Did you forget to call register_processor()?"
        )
        self.service = service
