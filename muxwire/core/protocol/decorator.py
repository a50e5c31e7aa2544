from muxwire.core.models.message import MessageHeader, MessageType, TType
from muxwire.core.ports.protocol import Protocol
from muxwire.core.ports.transport import Transport


class ProtocolDecorator:
    """
    Forwards every Protocol operation to an enclosed protocol.

    By itself it does not change anything: it is the base for concise
    decorators that override only the operations whose behaviour must
    differ (see MultiplexedProtocol and StoredMessageProtocol) and inherit
    plain pass-through for the rest.

    Arguments and return values are forwarded untouched and errors from the
    enclosed protocol propagate unchanged. Every operation of the Protocol
    interface must be listed here, otherwise a decorator would silently
    lose it.
    """

    def __init__(self, protocol: Protocol) -> None:
        self._protocol = protocol

    @property
    def transport(self) -> Transport:
        return self._protocol.transport

    def write_message_begin(self, name: str, type: MessageType, seqid: int) -> None:
        self._protocol.write_message_begin(name, type, seqid)

    def write_message_end(self) -> None:
        self._protocol.write_message_end()

    def write_struct_begin(self, name: str) -> None:
        self._protocol.write_struct_begin(name)

    def write_struct_end(self) -> None:
        self._protocol.write_struct_end()

    def write_field_begin(self, name: str, type: TType, id: int) -> None:
        self._protocol.write_field_begin(name, type, id)

    def write_field_end(self) -> None:
        self._protocol.write_field_end()

    def write_field_stop(self) -> None:
        self._protocol.write_field_stop()

    def write_map_begin(self, ktype: TType, vtype: TType, size: int) -> None:
        self._protocol.write_map_begin(ktype, vtype, size)

    def write_map_end(self) -> None:
        self._protocol.write_map_end()

    def write_list_begin(self, etype: TType, size: int) -> None:
        self._protocol.write_list_begin(etype, size)

    def write_list_end(self) -> None:
        self._protocol.write_list_end()

    def write_set_begin(self, etype: TType, size: int) -> None:
        self._protocol.write_set_begin(etype, size)

    def write_set_end(self) -> None:
        self._protocol.write_set_end()

    def write_bool(self, value: bool) -> None:
        self._protocol.write_bool(value)

    def write_byte(self, value: int) -> None:
        self._protocol.write_byte(value)

    def write_i16(self, value: int) -> None:
        self._protocol.write_i16(value)

    def write_i32(self, value: int) -> None:
        self._protocol.write_i32(value)

    def write_i64(self, value: int) -> None:
        self._protocol.write_i64(value)

    def write_double(self, value: float) -> None:
        self._protocol.write_double(value)

    def write_string(self, value: str) -> None:
        self._protocol.write_string(value)

    def write_binary(self, value: bytes) -> None:
        self._protocol.write_binary(value)

    def read_message_begin(self) -> MessageHeader:
        return self._protocol.read_message_begin()

    def read_message_end(self) -> None:
        self._protocol.read_message_end()

    def read_struct_begin(self) -> str:
        return self._protocol.read_struct_begin()

    def read_struct_end(self) -> None:
        self._protocol.read_struct_end()

    def read_field_begin(self) -> tuple[str, TType, int]:
        return self._protocol.read_field_begin()

    def read_field_end(self) -> None:
        self._protocol.read_field_end()

    def read_map_begin(self) -> tuple[TType, TType, int]:
        return self._protocol.read_map_begin()

    def read_map_end(self) -> None:
        self._protocol.read_map_end()

    def read_list_begin(self) -> tuple[TType, int]:
        return self._protocol.read_list_begin()

    def read_list_end(self) -> None:
        self._protocol.read_list_end()

    def read_set_begin(self) -> tuple[TType, int]:
        return self._protocol.read_set_begin()

    def read_set_end(self) -> None:
        self._protocol.read_set_end()

    def read_bool(self) -> bool:
        return self._protocol.read_bool()

    def read_byte(self) -> int:
        return self._protocol.read_byte()

    def read_i16(self) -> int:
        return self._protocol.read_i16()

    def read_i32(self) -> int:
        return self._protocol.read_i32()

    def read_i64(self) -> int:
        return self._protocol.read_i64()

    def read_double(self) -> float:
        return self._protocol.read_double()

    def read_string(self) -> str:
        return self._protocol.read_string()

    def read_binary(self) -> bytes:
        return self._protocol.read_binary()

    def skip(self, type: TType) -> None:
        self._protocol.skip(type)

    def flush(self) -> None:
        self._protocol.flush()
