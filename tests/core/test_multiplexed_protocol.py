import pytest

from muxwire.core.models.message import MessageHeader, MessageType
from muxwire.core.protocol.multiplexed import (
    SEPARATOR,
    MultiplexedProtocol,
    MultiplexedProtocolFactory,
)
from muxwire.core.transport.memory import MemoryBuffer
from muxwire.infra.msgpack_protocol import MsgPackProtocol, MsgPackProtocolFactory
from tests.fake.fake_protocol import RecordingProtocol


def encode_header(name, type, seqid, service=None) -> bytes:
    trans = MemoryBuffer()
    protocol = MsgPackProtocol(trans)
    if service is not None:
        protocol = MultiplexedProtocol(protocol, service)
    protocol.write_message_begin(name, type, seqid)
    return trans.getvalue()


@pytest.mark.ut
@pytest.mark.parametrize("type", [MessageType.CALL, MessageType.ONEWAY])
def test_calls_are_tagged_with_service_name(type):
    tagged = encode_header("add", type, 9, service="Calculator")
    direct = encode_header("Calculator:add", type, 9)

    assert tagged == direct


@pytest.mark.ut
@pytest.mark.parametrize("type", [MessageType.REPLY, MessageType.EXCEPTION])
def test_replies_are_not_tagged(type):
    tagged = encode_header("add", type, 9, service="Calculator")
    direct = encode_header("add", type, 9)

    assert tagged == direct


@pytest.mark.ut
def test_other_operations_pass_through():
    inner = RecordingProtocol()
    protocol = MultiplexedProtocol(inner, "Weather")

    protocol.write_message_begin("temperature", MessageType.CALL, 1)
    protocol.write_string("Paris")
    protocol.write_message_end()
    protocol.flush()
    header = protocol.read_message_begin()

    assert inner.calls == [
        ("write_message_begin", ("Weather:temperature", MessageType.CALL, 1)),
        ("write_string", ("Paris",)),
        ("write_message_end", ()),
        ("flush", ()),
        ("read_message_begin", ()),
    ]
    assert header == inner.header


@pytest.mark.ut
def test_two_services_share_one_protocol():
    trans = MemoryBuffer()
    base = MsgPackProtocol(trans)
    calculator = MultiplexedProtocol(base, "Calculator")
    weather = MultiplexedProtocol(base, "Weather")

    calculator.write_message_begin("add", MessageType.CALL, 1)
    weather.write_message_begin("forecast", MessageType.ONEWAY, 2)

    reader = MsgPackProtocol(MemoryBuffer(trans.getvalue()))
    assert reader.read_message_begin() == MessageHeader("Calculator:add", MessageType.CALL, 1)
    assert reader.read_message_begin() == MessageHeader("Weather:forecast", MessageType.ONEWAY, 2)


@pytest.mark.ut
@pytest.mark.parametrize("name", ["", f"bad{SEPARATOR}name"])
def test_invalid_service_name(name):
    with pytest.raises(ValueError):
        MultiplexedProtocol(RecordingProtocol(), name)

    with pytest.raises(ValueError):
        MultiplexedProtocolFactory(MsgPackProtocolFactory(), name)


@pytest.mark.ut
def test_factory_wraps_inner_protocol():
    trans = MemoryBuffer()
    factory = MultiplexedProtocolFactory(MsgPackProtocolFactory(), "Calculator")

    protocol = factory.get_protocol(trans)
    protocol.write_message_begin("add", MessageType.CALL, 4)

    assert isinstance(protocol, MultiplexedProtocol)
    assert protocol.service_name == "Calculator"
    assert protocol.transport is trans
    assert trans.getvalue() == encode_header("Calculator:add", MessageType.CALL, 4)
