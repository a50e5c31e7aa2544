from dataclasses import dataclass
from enum import IntEnum


class MessageType(IntEnum):
    """
    Kind of an RPC message, carried in every message header.

    Only CALL and ONEWAY travel from a client to a server. REPLY and
    EXCEPTION are produced by the server in answer to a CALL.
    """
    CALL = 1
    REPLY = 2
    EXCEPTION = 3
    ONEWAY = 4


class TType(IntEnum):
    """Type identifiers for fields and container elements."""
    STOP = 0
    VOID = 1
    BOOL = 2
    BYTE = 3
    DOUBLE = 4
    I16 = 6
    I32 = 8
    I64 = 10
    STRING = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15
    UTF8 = 16
    UTF16 = 17


@dataclass(frozen=True)
class MessageHeader:
    """
    The `(name, type, seqid)` triple that opens every message.

    It is read exactly once per request and is the only routing
    information available to a multiplexing server.
    """
    name: str
    """
    Function name, optionally prefixed by a service name and ':'.
    """

    type: MessageType
    """
    Kind of message, see MessageType.
    """

    seqid: int
    """
    Sequence id chosen by the client, echoed back in the reply.
    """
