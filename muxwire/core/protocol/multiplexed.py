from muxwire.core.models.message import MessageType
from muxwire.core.ports.protocol import Protocol, ProtocolFactory
from muxwire.core.ports.transport import Transport
from muxwire.core.protocol.decorator import ProtocolDecorator


SEPARATOR = ":"


def validate_service_name(service_name: str) -> str:
    if not service_name:
        raise ValueError("Service name must not be empty")
    if SEPARATOR in service_name:
        raise ValueError(
            f"Service name {service_name!r} must not contain {SEPARATOR!r}"
        )
    return service_name


class MultiplexedProtocol(ProtocolDecorator):
    """
    Client-side decorator that lets several services share one connection.

    Outgoing CALL and ONEWAY messages are renamed `<service>:<function>` so
    that a MultiplexedProcessor on the server can route them. Replies and
    exceptions are never tagged: a client never has to route its own
    replies. All other operations go straight to the wrapped protocol.

    Several MultiplexedProtocol instances, one per service, may wrap the
    same underlying protocol::

        protocol = MsgPackProtocol(transport)
        calculator = MultiplexedProtocol(protocol, "Calculator")
        weather = MultiplexedProtocol(protocol, "WeatherReport")

    This class is not used by servers.
    """

    def __init__(self, protocol: Protocol, service_name: str) -> None:
        super().__init__(protocol)
        self._service_name = validate_service_name(service_name)

    @property
    def service_name(self) -> str:
        return self._service_name

    def write_message_begin(self, name: str, type: MessageType, seqid: int) -> None:
        if type in (MessageType.CALL, MessageType.ONEWAY):
            name = f"{self._service_name}{SEPARATOR}{name}"
        self._protocol.write_message_begin(name, type, seqid)


class MultiplexedProtocolFactory:
    """
    Wraps every protocol produced by `factory` in a MultiplexedProtocol
    bound to `service_name`.
    """

    def __init__(self, factory: ProtocolFactory, service_name: str) -> None:
        self._factory = factory
        self._service_name = validate_service_name(service_name)

    def get_protocol(self, trans: Transport) -> MultiplexedProtocol:
        return MultiplexedProtocol(
            self._factory.get_protocol(trans), self._service_name
        )
