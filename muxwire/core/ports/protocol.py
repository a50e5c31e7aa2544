import typing

from muxwire.core.models.message import MessageHeader, MessageType, TType
from muxwire.core.ports.transport import Transport


class Protocol(typing.Protocol):
    """
    Structured message framing over a Transport.

    A Protocol turns RPC messages into bytes and back: a message is made of
    a header, then nested structs, fields and containers, then scalar
    values. Every `*_begin` call must be matched by exactly one `*_end`
    call, in strict nesting order, on both the write and the read side.

    The interface says nothing about the encoding itself. Any encoding that
    honours these operations can be decorated (see ProtocolDecorator) and
    multiplexed (see MultiplexedProtocol and MultiplexedProcessor).

    Errors raised by the underlying transport propagate unchanged; encoding
    problems are reported as ProtocolError.
    """

    @property
    def transport(self) -> Transport:
        """The transport this protocol reads from and writes to."""

    def write_message_begin(self, name: str, type: MessageType, seqid: int) -> None: ...
    def write_message_end(self) -> None: ...
    def write_struct_begin(self, name: str) -> None: ...
    def write_struct_end(self) -> None: ...
    def write_field_begin(self, name: str, type: TType, id: int) -> None: ...
    def write_field_end(self) -> None: ...
    def write_field_stop(self) -> None: ...
    def write_map_begin(self, ktype: TType, vtype: TType, size: int) -> None: ...
    def write_map_end(self) -> None: ...
    def write_list_begin(self, etype: TType, size: int) -> None: ...
    def write_list_end(self) -> None: ...
    def write_set_begin(self, etype: TType, size: int) -> None: ...
    def write_set_end(self) -> None: ...
    def write_bool(self, value: bool) -> None: ...
    def write_byte(self, value: int) -> None: ...
    def write_i16(self, value: int) -> None: ...
    def write_i32(self, value: int) -> None: ...
    def write_i64(self, value: int) -> None: ...
    def write_double(self, value: float) -> None: ...
    def write_string(self, value: str) -> None: ...
    def write_binary(self, value: bytes) -> None: ...

    def read_message_begin(self) -> MessageHeader: ...
    def read_message_end(self) -> None: ...
    def read_struct_begin(self) -> str: ...
    def read_struct_end(self) -> None: ...
    def read_field_begin(self) -> tuple[str, TType, int]: ...
    def read_field_end(self) -> None: ...
    def read_map_begin(self) -> tuple[TType, TType, int]: ...
    def read_map_end(self) -> None: ...
    def read_list_begin(self) -> tuple[TType, int]: ...
    def read_list_end(self) -> None: ...
    def read_set_begin(self) -> tuple[TType, int]: ...
    def read_set_end(self) -> None: ...
    def read_bool(self) -> bool: ...
    def read_byte(self) -> int: ...
    def read_i16(self) -> int: ...
    def read_i32(self) -> int: ...
    def read_i64(self) -> int: ...
    def read_double(self) -> float: ...
    def read_string(self) -> str: ...
    def read_binary(self) -> bytes: ...

    def skip(self, type: TType) -> None:
        """
        Consume and discard one value of the given type, including nested
        structs and containers. Used to step over unknown fields.
        """

    def flush(self) -> None:
        """Flush the underlying transport."""


class ProtocolFactory(typing.Protocol):
    """Builds a Protocol bound to the given transport."""

    def get_protocol(self, trans: Transport) -> Protocol:
        ...
