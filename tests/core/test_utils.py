import logging
import os
import signal
import threading

import pytest

from muxwire.core.helpers.utils import import_object, serve_until_signalled, setup_logging
from muxwire.core.models.message import MessageType


class FakeServer:
    def __init__(self) -> None:
        self.stopped = threading.Event()
        self.served = threading.Event()

    def serve(self) -> None:
        self.served.set()
        self.stopped.wait(timeout=5)

    def stop(self) -> None:
        self.stopped.set()


@pytest.mark.ut
def test_signal_stops_serving():
    server = FakeServer()
    before = signal.getsignal(signal.SIGTERM)

    def send_sigterm():
        server.served.wait(timeout=5)
        os.kill(os.getpid(), signal.SIGTERM)

    threading.Thread(target=send_sigterm, daemon=True).start()
    received = serve_until_signalled(server.serve, server.stop)

    assert received == signal.SIGTERM
    assert server.stopped.is_set()
    assert signal.getsignal(signal.SIGTERM) == before


@pytest.mark.ut
def test_serving_ends_on_its_own():
    calls = []

    received = serve_until_signalled(lambda: calls.append("serve"), lambda: calls.append("stop"))

    assert received is None
    assert calls == ["serve", "stop"]


@pytest.mark.ut
def test_stop_called_when_serve_fails():
    stopped = []

    def serve():
        raise OSError("address already in use")

    with pytest.raises(OSError, match="address already in use"):
        serve_until_signalled(serve, lambda: stopped.append(True))

    assert stopped == [True]


@pytest.mark.ut
def test_http_request_logs_quiet_unless_debug():
    loggers = [logging.getLogger(name) for name in ("httpx", "httpcore")]
    saved = [logger.level for logger in loggers]

    try:
        setup_logging("INFO")
        assert all(logger.level == logging.WARNING for logger in loggers)

        for logger in loggers:
            logger.setLevel(logging.NOTSET)
        setup_logging("DEBUG")
        assert all(logger.level == logging.NOTSET for logger in loggers)
    finally:
        for logger, level in zip(loggers, saved):
            logger.setLevel(level)


@pytest.mark.ut
def test_import_object_follows_attributes():
    assert import_object("muxwire.core.models.message:MessageType.CALL") is MessageType.CALL


@pytest.mark.ut
@pytest.mark.parametrize("path", [
    "muxwire.core.models.message",
    ":MessageType",
    "muxwire.core.models.message:",
    "muxwire.core.models.message:Missing",
])
def test_import_object_rejects_bad_paths(path):
    with pytest.raises(ValueError):
        import_object(path)
