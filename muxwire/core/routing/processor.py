import logging

from muxwire.core.errors import (
    HeaderConsumedError,
    MalformedHeaderError,
    UnexpectedMessageTypeError,
    UnknownServiceError,
)
from muxwire.core.helpers.lock import RWLock
from muxwire.core.models.message import MessageHeader, MessageType
from muxwire.core.ports.processor import Processor
from muxwire.core.ports.protocol import Protocol
from muxwire.core.ports.transport import Transport
from muxwire.core.protocol.decorator import ProtocolDecorator
from muxwire.core.protocol.multiplexed import SEPARATOR, validate_service_name


class StoredMessageProtocol(ProtocolDecorator):
    """
    Replays a message header that was already read off the wire.

    The first call to `read_message_begin` returns the stored header
    instead of reading the transport; every other operation streams
    through the real protocol, so the target processor decodes the rest of
    the message exactly as if it had read the header itself. Nothing of
    the message body is buffered.

    The header is handed out once. A second `read_message_begin` raises
    HeaderConsumedError.
    """

    def __init__(self, protocol: Protocol, header: MessageHeader) -> None:
        super().__init__(protocol)
        self._header: MessageHeader | None = header

    def read_message_begin(self) -> MessageHeader:
        header = self._header
        if header is None:
            raise HeaderConsumedError()
        self._header = None
        return header


class MultiplexedProcessor:
    """
    Server-side processor that lets a single server provide several
    services.

    Processors are registered under the service name clients pass to their
    MultiplexedProtocol::

        processor = MultiplexedProcessor()
        processor.register_processor("Calculator", CalculatorProcessor(handler))
        processor.register_processor("WeatherReport", WeatherProcessor(handler))

    For every request, `process` reads the message header once, splits the
    `<service>:<function>` name on the first ':', looks the service up and
    hands the request to its processor through a StoredMessageProtocol
    carrying the untagged header. The chosen processor sees the message
    exactly as a non-multiplexed server would.

    Failures (non CALL/ONEWAY message, untagged name, unknown service) are
    raised immediately and concern the current request only; nothing is
    retried and the registry is never modified by `process`.

    The registry belongs to this instance. It is guarded by a
    readers/writer lock so services can be registered while requests are
    being served.
    """

    def __init__(self) -> None:
        self._processors: dict[str, Processor] = {}
        self._lock = RWLock()
        self._logger = logging.getLogger("core.routing.processor")

    def register_processor(self, service_name: str, processor: Processor) -> None:
        """
        Route requests tagged with `service_name` to `processor`.

        The name must match what clients prepend with MultiplexedProtocol,
        usually the service name declared in the IDL. Registering a name
        twice replaces the previous processor.
        """
        validate_service_name(service_name)

        with self._lock.write():
            previous = self._processors.get(service_name)
            self._processors[service_name] = processor

        if previous is not None and previous is not processor:
            self._logger.info(f"Replaced processor for service '{service_name}'")
        else:
            self._logger.debug(f"Registered processor for service '{service_name}'")

    def processors(self) -> dict[str, Processor]:
        with self._lock.read():
            return dict(self._processors)

    def get_processor(self, trans: Transport) -> "MultiplexedProcessor":
        return self

    def process(self, iprot: Protocol, oprot: Protocol) -> bool:
        """
        Dispatch one request to the processor of its service.

        1. read the header off the wire with the real input protocol,
        2. check that it is a CALL or ONEWAY message,
        3. extract the service name from the message name,
        4. look up the processor registered for that service,
        5. dispatch with a StoredMessageProtocol replaying the header
           without the service prefix, and return the processor's result.
        """
        header = iprot.read_message_begin()

        if header.type not in (MessageType.CALL, MessageType.ONEWAY):
            raise UnexpectedMessageTypeError(header.type)

        name = header.name
        index = name.find(SEPARATOR)
        if index < 0 or index == len(name) - 1:
            raise MalformedHeaderError(name)

        service_name = name[:index]
        standard_name = name[index + 1:]

        with self._lock.read():
            processor = self._processors.get(service_name)

        if processor is None:
            raise UnknownServiceError(service_name)

        self._logger.debug(
            f"Dispatching '{standard_name}' (seqid={header.seqid}) "
            f"to service '{service_name}'"
        )

        stored = StoredMessageProtocol(
            iprot,
            MessageHeader(name=standard_name, type=header.type, seqid=header.seqid),
        )
        return processor.process(stored, oprot)
