import importlib
import logging
import signal
import sys
import threading
from collections.abc import Callable
from types import FrameType
from typing import Any

SHUTDOWN_SIGNALS = (
    signal.SIGINT,
    signal.SIGTERM,
)

if sys.platform == "win32":
    SHUTDOWN_SIGNALS += (signal.SIGBREAK,)

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s %(name)s:%(funcName)s] : %(message)s"

# Third-party loggers that report every HTTP exchange at INFO
CHATTY_LOGGERS = ("httpx", "httpcore")


def serve_until_signalled(
    serve: Callable[[], None],
    stop: Callable[[], None],
    join_timeout: float = 5.0,
) -> signal.Signals | None:
    """
    Run `serve` on a worker thread until a shutdown signal arrives or the
    worker ends by itself, then call `stop` and wait for the worker.

    Returns the signal that ended serving, or None when `serve` returned
    on its own. An exception raised by `serve` is re-raised once the
    server is stopped. The previous signal handlers are restored before
    returning. Must be called from the main thread.
    """
    logger = logging.getLogger("core.helpers.utils")
    stop_event = threading.Event()
    received: list[signal.Signals] = []
    failures: list[Exception] = []

    def handle(sig: int, frame: FrameType | None) -> None:
        received.append(signal.Signals(sig))
        stop_event.set()

    def run() -> None:
        try:
            serve()
        except Exception as exc:
            failures.append(exc)
        finally:
            stop_event.set()

    previous = {sig: signal.signal(sig, handle) for sig in SHUTDOWN_SIGNALS}
    worker = threading.Thread(target=run, name="muxwire-serve", daemon=True)

    try:
        worker.start()
        # short waits keep the main thread responsive to signals
        while not stop_event.wait(0.5):
            pass
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)

        if received:
            logger.info(f"Received {received[0].name}, shutting down")
        stop()
        worker.join(timeout=join_timeout)
        if worker.is_alive():
            logger.warning(f"Server thread still running after {join_timeout}s")

    if failures:
        raise failures[0]
    return received[0] if received else None


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)

    if level != "DEBUG":
        for name in CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def import_object(path: str) -> Any:
    """
    Resolve a `package.module:attribute` path to the object it names.

    Dotted attributes after the colon are followed, so
    `app.services:registry.calculator` is accepted.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Invalid import path {path!r}, expected 'module:attribute'")

    obj: Any = importlib.import_module(module_name)
    for name in attr.split("."):
        try:
            obj = getattr(obj, name)
        except AttributeError:
            raise ValueError(f"Module {module_name!r} has no attribute {attr!r}") from None
    return obj
