from muxwire.core.errors import ProtocolError
from muxwire.core.models.message import TType
from muxwire.core.ports.protocol import Protocol


DEFAULT_MAX_DEPTH = 64


def skip(protocol: Protocol, ttype: TType, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """
    Consume one value of type `ttype` from `protocol` through its read API.

    Works for any encoding since it relies only on the Protocol operations.
    Structs and containers are walked recursively; `max_depth` bounds the
    recursion so a hostile payload cannot exhaust the stack.
    """
    if max_depth <= 0:
        raise ProtocolError("Maximum skip depth exceeded")

    match ttype:
        case TType.BOOL:
            protocol.read_bool()
        case TType.BYTE:
            protocol.read_byte()
        case TType.I16:
            protocol.read_i16()
        case TType.I32:
            protocol.read_i32()
        case TType.I64:
            protocol.read_i64()
        case TType.DOUBLE:
            protocol.read_double()
        case TType.STRING | TType.UTF8 | TType.UTF16:
            protocol.read_binary()
        case TType.STRUCT:
            protocol.read_struct_begin()
            while True:
                _, ftype, _ = protocol.read_field_begin()
                if ftype == TType.STOP:
                    break
                skip(protocol, ftype, max_depth - 1)
                protocol.read_field_end()
            protocol.read_struct_end()
        case TType.MAP:
            ktype, vtype, size = protocol.read_map_begin()
            for _ in range(size):
                skip(protocol, ktype, max_depth - 1)
                skip(protocol, vtype, max_depth - 1)
            protocol.read_map_end()
        case TType.LIST:
            etype, size = protocol.read_list_begin()
            for _ in range(size):
                skip(protocol, etype, max_depth - 1)
            protocol.read_list_end()
        case TType.SET:
            etype, size = protocol.read_set_begin()
            for _ in range(size):
                skip(protocol, etype, max_depth - 1)
            protocol.read_set_end()
        case _:
            raise ProtocolError(f"Cannot skip unknown type {ttype!r}")
