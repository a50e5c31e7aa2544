import io
import logging
import threading
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

import falcon

from muxwire.core.errors import TransportError, TransportErrorKind
from muxwire.core.models.config import HttpServerConfig
from muxwire.core.ports.processor import ProcessorFactory
from muxwire.core.ports.protocol import ProtocolFactory
from muxwire.core.ports.transport import TransportFactory
from muxwire.core.transport.base import IdentityTransportFactory
from muxwire.core.transport.stream import StreamTransport
from muxwire.infra.http_client import CONTENT_TYPE


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _RequestHandler(WSGIRequestHandler):
    def log_message(self, format, *args):  # noqa: A002
        logging.getLogger("infra.http_server").debug(
            f"{self.address_string()} - {format % args}"
        )


class HttpServer:
    """
    Serves RPC requests sent as the body of HTTP requests.

    Every path is bound to the same handler. For each request the body and
    the response stream are wrapped in a StreamTransport, the configured
    transport and protocol factories build the protocol stack around it,
    and the processor obtained from `processor_factory` handles the call.
    The handler is stateless across requests.

    OPTIONS requests are CORS preflights: they are rejected with 403 unless
    CORS is enabled, in which case the allowed origin, methods and headers
    are returned. No processor is involved.

    The Falcon application is available as `app`, so the server can be
    mounted in any WSGI container. `serve` runs it standalone, over TLS
    when the configuration provides an SSL context.

    A processing error never changes the HTTP answer; it is logged and
    kept in `last_error`. An end of stream is a normal close and resets
    `last_error` to None.
    """

    def __init__(
        self,
        processor_factory: ProcessorFactory,
        input_protocol_factory: ProtocolFactory,
        output_protocol_factory: ProtocolFactory | None = None,
        config: HttpServerConfig | None = None,
        input_transport_factory: TransportFactory | None = None,
        output_transport_factory: TransportFactory | None = None,
    ) -> None:
        self._config = config or HttpServerConfig()
        self._processor_factory = processor_factory
        self._input_protocol_factory = input_protocol_factory
        self._output_protocol_factory = output_protocol_factory or input_protocol_factory
        self._input_transport_factory = input_transport_factory or IdentityTransportFactory()
        self._output_transport_factory = output_transport_factory or IdentityTransportFactory()
        self._cors = self._config.cors

        self.last_error: Exception | None = None

        self.app = falcon.App()
        self.app.add_sink(self.handle, prefix="/")

        self._server: WSGIServer | None = None
        self._lock = threading.Lock()
        self._serving = threading.Event()
        self._logger = logging.getLogger("infra.http_server")

    @property
    def processor_factory(self) -> ProcessorFactory:
        return self._processor_factory

    @property
    def input_protocol_factory(self) -> ProtocolFactory:
        return self._input_protocol_factory

    @property
    def output_protocol_factory(self) -> ProtocolFactory:
        return self._output_protocol_factory

    @property
    def input_transport_factory(self) -> TransportFactory:
        return self._input_transport_factory

    @property
    def output_transport_factory(self) -> TransportFactory:
        return self._output_transport_factory

    @property
    def cors_enabled(self) -> bool:
        return self._cors

    def set_cors_enabled(self, enabled: bool) -> None:
        self._cors = enabled

    @property
    def address(self) -> tuple[str, int] | None:
        """Address the server is bound to, once `bind` has run."""
        if self._server is None:
            return None
        host, port = self._server.server_address[:2]
        return host, port

    def handle(self, req: falcon.Request, resp: falcon.Response, **kwargs) -> None:
        """Handle a single HTTP request."""
        if req.method == "OPTIONS":
            self._handle_preflight(req, resp)
            return

        output = io.BytesIO()
        client = StreamTransport(reader=req.bounded_stream, writer=output)

        processor = self._processor_factory.get_processor(client)
        itrans = self._input_transport_factory.get_transport(client)
        otrans = self._output_transport_factory.get_transport(client)
        iprot = self._input_protocol_factory.get_protocol(itrans)
        oprot = self._output_protocol_factory.get_protocol(otrans)

        try:
            processor.process(iprot, oprot)
            self.last_error = None
        except TransportError as exc:
            if exc.kind == TransportErrorKind.END_OF_FILE:
                self.last_error = None
            else:
                self._record_error(req, exc)
        except Exception as exc:
            self._record_error(req, exc)
        finally:
            itrans.close()
            otrans.close()

        resp.content_type = CONTENT_TYPE
        resp.data = output.getvalue()

    def bind(self) -> tuple[str, int]:
        """Create the listening socket without serving yet."""
        host, port = self._bind().server_address[:2]
        return host, port

    def _bind(self) -> WSGIServer:
        with self._lock:
            if self._server is None:
                server = make_server(
                    self._config.host,
                    self._config.port,
                    self.app,
                    server_class=_ThreadingWSGIServer,
                    handler_class=_RequestHandler,
                )
                if self._config.ssl_ctx is not None:
                    server.socket = self._config.ssl_ctx.wrap_socket(
                        server.socket, server_side=True
                    )
                self._server = server
            return self._server

    def serve(self) -> None:
        """Listen on the configured address and process requests until stopped."""
        server = self._bind()
        host, port = server.server_address[:2]
        scheme = "https" if self._config.ssl_ctx is not None else "http"
        self._logger.info(f"Serving on {scheme}://{host}:{port}")

        self._serving.set()
        try:
            server.serve_forever()
        finally:
            self._serving.clear()

    def stop(self) -> None:
        with self._lock:
            server, self._server = self._server, None

        if server is None:
            return

        # shutdown() waits for serve_forever() and would hang if it never ran
        if self._serving.is_set():
            server.shutdown()
        server.server_close()
        self._logger.info("Server stopped")

    def _handle_preflight(self, req: falcon.Request, resp: falcon.Response) -> None:
        if not self._cors:
            resp.status = falcon.HTTP_403
            return

        resp.set_header("Access-Control-Allow-Origin", "*")
        resp.set_header("Access-Control-Allow-Methods", "POST")
        requested = req.get_header("Access-Control-Request-Headers")
        if requested:
            resp.set_header("Access-Control-Allow-Headers", requested)

    def _record_error(self, req: falcon.Request, exc: Exception) -> None:
        self.last_error = exc
        self._logger.error(
            f"Error processing {req.method} {req.path}: {exc}", exc_info=exc
        )
