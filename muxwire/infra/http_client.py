import io
import logging

import httpx

from muxwire.core.errors import TransportError, TransportErrorKind
from muxwire.core.ports.transport import Transport


CONTENT_TYPE = "application/x-thrift"


class HttpClient:
    """
    Client transport carrying RPC messages over HTTP.

    HTTP does not expose partial bodies the way a socket does, so whole
    messages are buffered:

    - `write` appends to an in-memory request buffer and never touches
      the network;
    - `flush` POSTs the request buffer with content type
      `application/x-thrift` and, on a 2xx answer, replaces the response
      buffer with the full response body;
    - `read` consumes the current response buffer.

    Build instances with `HttpClient.get` (one GET performed immediately,
    read-only session) or `HttpClient.post` (nothing happens until the
    first flush). Non-2xx answers raise a TransportError carrying the HTTP
    status, and leave the previous response buffer untouched.

    Timeouts are those of the `httpx.Client` in use. Without an injected
    client the transport creates its own on first use and closes it in
    `close`; an injected client is left open for its owner.
    """

    def __init__(
        self,
        url: str,
        client: httpx.Client | None = None,
        response: bytes | None = None,
        post: bool = True,
    ) -> None:
        self._url = url
        self._client = client
        self._owns_client = client is None
        self._request_buffer: bytearray | None = bytearray() if post else None
        self._response_buffer: io.BytesIO | None = None
        if response is not None:
            self._response_buffer = io.BytesIO(response)
        self._logger = logging.getLogger("infra.http_client")

    @classmethod
    def get(cls, url: str, client: httpx.Client | None = None) -> "HttpClient":
        """GET `url` now and expose the response body for reading."""
        trans = cls(url, client=client, post=False)
        try:
            trans._response_buffer = io.BytesIO(trans._send("GET"))
        except TransportError:
            trans.close()
            raise
        return trans

    @classmethod
    def post(cls, url: str, client: httpx.Client | None = None) -> "HttpClient":
        """Prepare a client that POSTs each flushed request to `url`."""
        return cls(url, client=client, post=True)

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_post(self) -> bool:
        return self._request_buffer is not None

    def open(self) -> None:
        pass

    def close(self) -> None:
        self._response_buffer = None
        # an injected client belongs to the caller
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def is_open(self) -> bool:
        return self._response_buffer is not None or self._request_buffer is not None

    def peek(self) -> bool:
        return self.is_open()

    def read(self, size: int) -> bytes:
        if self._response_buffer is None:
            raise TransportError(
                "Response buffer is empty, no request.",
                kind=TransportErrorKind.NOT_OPEN,
            )
        return self._response_buffer.read(size)

    def write(self, data: bytes) -> None:
        if self._request_buffer is None:
            raise TransportError(
                "Cannot write to a GET transport",
                kind=TransportErrorKind.NOT_OPEN,
            )
        self._request_buffer.extend(data)

    def flush(self) -> None:
        if self._request_buffer is None:
            return

        body = bytes(self._request_buffer)
        self._request_buffer.clear()
        self._response_buffer = io.BytesIO(self._send("POST", body))

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client()
        return self._client

    def _send(self, method: str, body: bytes | None = None) -> bytes:
        headers = {"Content-Type": CONTENT_TYPE} if body is not None else None
        try:
            response = self._http().request(method, self._url, content=body, headers=headers)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"{method} {self._url} timed out: {exc}", kind=TransportErrorKind.TIMED_OUT
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {self._url} failed: {exc}") from exc

        if not response.is_success:
            self._logger.warning(f"{method} {self._url} answered {response.status_code}")
            raise TransportError(
                f"HTTP Response code: {response.status_code}",
                status=response.status_code,
            )

        return response.content


class HttpClientTransportFactory:
    """
    Builds a fresh HttpClient per call, POST based or GET based.

    When handed an existing HttpClient, the new transport targets the same
    URL with the same flavor; any other transport is ignored in favour of
    the factory's URL.
    """

    def __init__(self, url: str, post: bool = True, client: httpx.Client | None = None) -> None:
        self._url = url
        self._post = post
        self._client = client

    def get_transport(self, trans: Transport | None = None) -> HttpClient:
        if isinstance(trans, HttpClient):
            url, post = trans.url, trans.is_post
        else:
            url, post = self._url, self._post

        if post:
            return HttpClient.post(url, client=self._client)
        return HttpClient.get(url, client=self._client)
