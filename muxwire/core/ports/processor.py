from typing import Protocol

from muxwire.core.ports.protocol import Protocol as MessageProtocol
from muxwire.core.ports.transport import Transport


class Processor(Protocol):
    """
    Per-service request handler supplied by an application.

    `process` reads exactly one request message from `iprot`, executes it,
    and, unless the call is ONEWAY, writes the reply to `oprot` and
    flushes it. It returns True when the request was handled. Errors are
    raised; they concern the current request only.
    """

    def process(self, iprot: MessageProtocol, oprot: MessageProtocol) -> bool:
        ...


class ProcessorFactory(Protocol):
    """Returns the processor that serves a given client transport."""

    def get_processor(self, trans: Transport) -> Processor:
        ...
