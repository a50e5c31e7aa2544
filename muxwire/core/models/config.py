import ssl
from dataclasses import dataclass


@dataclass
class HttpServerConfig:
    """
    Static configuration for an HttpServer.
    """
    host: str = "127.0.0.1"
    """
    IP address or hostname on which the server listens.
    """

    port: int = 9090
    """
    TCP port to bind. If set to 0, the OS selects an available port.
    """

    cors: bool = False
    """
    Answer CORS preflight (OPTIONS) requests. When disabled they get a 403.
    """

    ssl_ctx: ssl.SSLContext | None = None
    """
    TLS context used to secure incoming connections. Plain HTTP when None.
    """
