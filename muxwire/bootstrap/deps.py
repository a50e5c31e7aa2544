import argparse
import json
import logging
from functools import lru_cache

from pydantic import ValidationError

from muxwire.bootstrap.config.loader import get_cli_args
from muxwire.bootstrap.config.settings import MuxwireConfig
from muxwire.core.helpers.utils import import_object
from muxwire.core.models.config import HttpServerConfig
from muxwire.core.ports.processor import Processor
from muxwire.core.routing.processor import MultiplexedProcessor
from muxwire.infra.http_server import HttpServer
from muxwire.infra.msgpack_protocol import MsgPackProtocolFactory


@lru_cache
def get_server() -> HttpServer:
    config = get_config()
    protocol_factory = MsgPackProtocolFactory(
        read_size=config.protocol.read_size,
        max_buffer_size=config.protocol.max_buffer_size,
    )

    return HttpServer(
        processor_factory=get_processor(),
        input_protocol_factory=protocol_factory,
        output_protocol_factory=protocol_factory,
        config=build_server_config(config, get_cli_args()),
    )


def build_server_config(
    config: MuxwireConfig, cli: argparse.Namespace | None = None
) -> HttpServerConfig:
    """Server settings from the file, with command line values taking precedence."""
    host = getattr(cli, "host", None)
    port = getattr(cli, "port", None)
    cors = getattr(cli, "cors", None)

    return HttpServerConfig(
        host=config.server.host if host is None else host,
        port=config.server.port if port is None else port,
        cors=config.server.cors if cors is None else cors,
        ssl_ctx=config.get_server_ssl_ctx(),
    )


@lru_cache
def get_processor() -> MultiplexedProcessor:
    return build_processor(get_config().services)


def build_processor(services: dict[str, str]) -> MultiplexedProcessor:
    logger = logging.getLogger("bootstrap.deps")
    processor = MultiplexedProcessor()

    for name, path in services.items():
        try:
            target = import_object(path)
        except (ImportError, ValueError) as ex:
            raise SystemExit(f"Cannot load service '{name}' from '{path}': {ex}")

        if isinstance(target, type) or not hasattr(target, "process"):
            if not callable(target):
                raise SystemExit(f"Service '{name}' from '{path}' is not a processor")
            target = target()

        service: Processor = target
        if not hasattr(service, "process"):
            raise SystemExit(f"Service '{name}' from '{path}' is not a processor")

        processor.register_processor(name, service)
        logger.info(f"Service '{name}' loaded from '{path}'")

    return processor


@lru_cache
def get_config() -> MuxwireConfig:
    try:
        return MuxwireConfig()
    except FileNotFoundError as ex:
        raise SystemExit(f"Provide a correct configuration file path: {ex}")
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
