from typing import Any

import msgpack

from muxwire.core.errors import ProtocolError, TransportError, TransportErrorKind
from muxwire.core.models.message import MessageHeader, MessageType, TType
from muxwire.core.ports.transport import Transport
from muxwire.core.protocol.skip import skip


INT_RANGES = {
    "byte": (-(2 ** 7), 2 ** 7 - 1),
    "i16": (-(2 ** 15), 2 ** 15 - 1),
    "i32": (-(2 ** 31), 2 ** 31 - 1),
    "i64": (-(2 ** 63), 2 ** 63 - 1),
}


class MsgPackProtocol:
    """
    MsgPack-based implementation of the Protocol interface.

    Every protocol element is written to the transport as one msgpack
    object, so a message is simply a sequence of msgpack values:

    - message header: `[name, type, seqid]`
    - field header: `[type, id]`, field stop: `[0]`
    - map header: `[ktype, vtype, size]`, list/set header: `[etype, size]`
    - scalars: native msgpack int, float, bool, str and bin values

    Struct boundaries and every `*_end` marker produce no bytes; they only
    exist to satisfy the nesting contract. Field and struct names are not
    transmitted.

    Reading is incremental: bytes are pulled from the transport in chunks
    of at most `read_size` and fed to a streaming unpacker until the next
    value is complete. Bytes read past the current value stay in the
    unpacker for the next read, so a given transport must only be read
    through one MsgPackProtocol instance (decorators share it).
    """

    def __init__(
        self,
        trans: Transport,
        read_size: int = 4096,
        max_buffer_size: int = 1 * 1024 * 1024,
    ) -> None:
        self._trans = trans
        self._read_size = read_size
        self._packer = msgpack.Packer(use_bin_type=True)
        self._unpacker = msgpack.Unpacker(raw=False, max_buffer_size=max_buffer_size)

    @property
    def transport(self) -> Transport:
        return self._trans

    def write_message_begin(self, name: str, type: MessageType, seqid: int) -> None:
        self._check_range("i32", seqid)
        self._write([name, int(type), seqid])

    def write_message_end(self) -> None:
        pass

    def write_struct_begin(self, name: str) -> None:
        pass

    def write_struct_end(self) -> None:
        pass

    def write_field_begin(self, name: str, type: TType, id: int) -> None:
        self._check_range("i16", id)
        self._write([int(type), id])

    def write_field_end(self) -> None:
        pass

    def write_field_stop(self) -> None:
        self._write([int(TType.STOP)])

    def write_map_begin(self, ktype: TType, vtype: TType, size: int) -> None:
        self._write([int(ktype), int(vtype), size])

    def write_map_end(self) -> None:
        pass

    def write_list_begin(self, etype: TType, size: int) -> None:
        self._write([int(etype), size])

    def write_list_end(self) -> None:
        pass

    def write_set_begin(self, etype: TType, size: int) -> None:
        self._write([int(etype), size])

    def write_set_end(self) -> None:
        pass

    def write_bool(self, value: bool) -> None:
        self._write(bool(value))

    def write_byte(self, value: int) -> None:
        self._write(self._check_range("byte", value))

    def write_i16(self, value: int) -> None:
        self._write(self._check_range("i16", value))

    def write_i32(self, value: int) -> None:
        self._write(self._check_range("i32", value))

    def write_i64(self, value: int) -> None:
        self._write(self._check_range("i64", value))

    def write_double(self, value: float) -> None:
        self._write(float(value))

    def write_string(self, value: str) -> None:
        self._write(value)

    def write_binary(self, value: bytes) -> None:
        self._write(bytes(value))

    def read_message_begin(self) -> MessageHeader:
        name, type_id, seqid = self._read_header("message", 3)
        if not isinstance(name, str):
            raise ProtocolError(f"Invalid message name: {name!r}")
        try:
            message_type = MessageType(type_id)
        except ValueError:
            raise ProtocolError(f"Invalid message type: {type_id!r}") from None
        return MessageHeader(name=name, type=message_type, seqid=self._as_int("i32", seqid))

    def read_message_end(self) -> None:
        pass

    def read_struct_begin(self) -> str:
        return ""

    def read_struct_end(self) -> None:
        pass

    def read_field_begin(self) -> tuple[str, TType, int]:
        header = self._read()
        if header == [TType.STOP]:
            return "", TType.STOP, 0
        if not isinstance(header, list) or len(header) != 2:
            raise ProtocolError(f"Invalid field header: {header!r}")
        type_id, field_id = header
        return "", self._as_ttype(type_id), self._as_int("i16", field_id)

    def read_field_end(self) -> None:
        pass

    def read_map_begin(self) -> tuple[TType, TType, int]:
        ktype, vtype, size = self._read_header("map", 3)
        return self._as_ttype(ktype), self._as_ttype(vtype), self._as_size(size)

    def read_map_end(self) -> None:
        pass

    def read_list_begin(self) -> tuple[TType, int]:
        etype, size = self._read_header("list", 2)
        return self._as_ttype(etype), self._as_size(size)

    def read_list_end(self) -> None:
        pass

    def read_set_begin(self) -> tuple[TType, int]:
        etype, size = self._read_header("set", 2)
        return self._as_ttype(etype), self._as_size(size)

    def read_set_end(self) -> None:
        pass

    def read_bool(self) -> bool:
        value = self._read()
        if not isinstance(value, bool):
            raise ProtocolError(f"Expected bool, got {value!r}")
        return value

    def read_byte(self) -> int:
        return self._as_int("byte", self._read())

    def read_i16(self) -> int:
        return self._as_int("i16", self._read())

    def read_i32(self) -> int:
        return self._as_int("i32", self._read())

    def read_i64(self) -> int:
        return self._as_int("i64", self._read())

    def read_double(self) -> float:
        value = self._read()
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProtocolError(f"Expected double, got {value!r}")
        return float(value)

    def read_string(self) -> str:
        value = self._read()
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise ProtocolError(f"Invalid UTF-8 string: {exc}") from exc
        if not isinstance(value, str):
            raise ProtocolError(f"Expected string, got {value!r}")
        return value

    def read_binary(self) -> bytes:
        value = self._read()
        if isinstance(value, str):
            return value.encode("utf-8")
        if not isinstance(value, bytes):
            raise ProtocolError(f"Expected binary, got {value!r}")
        return value

    def skip(self, type: TType) -> None:
        skip(self, type)

    def flush(self) -> None:
        self._trans.flush()

    def _write(self, value: Any) -> None:
        self._trans.write(self._packer.pack(value))

    def _read(self) -> Any:
        while True:
            try:
                return self._unpacker.unpack()
            except msgpack.OutOfData:
                pass
            except ValueError as exc:
                raise ProtocolError(f"Invalid msgpack data: {exc}") from exc

            chunk = self._trans.read(self._read_size)
            if not chunk:
                raise TransportError(
                    "Unexpected end of stream", kind=TransportErrorKind.END_OF_FILE
                )
            try:
                self._unpacker.feed(chunk)
            except msgpack.BufferFull as exc:
                raise ProtocolError("Message exceeds maximum buffer size") from exc

    def _read_header(self, what: str, length: int) -> list[Any]:
        header = self._read()
        if not isinstance(header, list) or len(header) != length:
            raise ProtocolError(f"Invalid {what} header: {header!r}")
        return header

    @staticmethod
    def _check_range(kind: str, value: int) -> int:
        low, high = INT_RANGES[kind]
        if not low <= value <= high:
            raise ProtocolError(f"Value {value} out of range for {kind}")
        return value

    @classmethod
    def _as_int(cls, kind: str, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ProtocolError(f"Expected {kind}, got {value!r}")
        return cls._check_range(kind, value)

    @staticmethod
    def _as_ttype(value: Any) -> TType:
        try:
            return TType(value)
        except ValueError:
            raise ProtocolError(f"Invalid type id: {value!r}") from None

    @staticmethod
    def _as_size(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ProtocolError(f"Invalid container size: {value!r}")
        return value


class MsgPackProtocolFactory:
    def __init__(self, read_size: int = 4096, max_buffer_size: int = 1 * 1024 * 1024) -> None:
        self._read_size = read_size
        self._max_buffer_size = max_buffer_size

    def get_protocol(self, trans: Transport) -> MsgPackProtocol:
        return MsgPackProtocol(
            trans, read_size=self._read_size, max_buffer_size=self._max_buffer_size
        )
