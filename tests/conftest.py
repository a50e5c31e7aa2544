import os
import ssl
from typing import Generator

import pytest
import yaml

from muxwire.bootstrap.config.settings import MuxwireConfig
from muxwire.core.routing.processor import MultiplexedProcessor
from muxwire.infra.msgpack_protocol import MsgPackProtocolFactory
from tests.fake.fake_processor import CalculatorProcessor
from tests.helpers import FakeMuxwireConfig
from tests.utils import generate_cert_pair, write_pem


@pytest.fixture
def protocol_factory():
    return MsgPackProtocolFactory()


@pytest.fixture
def calculator():
    return CalculatorProcessor()


@pytest.fixture
def multiplexed(calculator):
    processor = MultiplexedProcessor()
    processor.register_processor("Calculator", calculator)
    return processor


@pytest.fixture(scope="session")
def tls_files(tmp_path_factory):
    ca_cert, server_key, server_cert = generate_cert_pair()
    base = tmp_path_factory.mktemp("tls")

    write_pem(ca_cert, base / "ca.pem")
    write_pem(server_cert, base / "server.pem")
    write_pem(server_key, base / "server.key")

    return base / "ca.pem", base / "server.pem", base / "server.key"


@pytest.fixture(scope="session")
def tls_contexts(tls_files):
    cafile, certfile, keyfile = tls_files

    server_ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    server_ctx.load_cert_chain(certfile=certfile, keyfile=keyfile)

    client_ctx = ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=str(cafile))

    return server_ctx, client_ctx


@pytest.fixture
def config_file(tmp_path, tls_files):
    _, certfile, keyfile = tls_files
    file = tmp_path / "muxwire.yaml"

    data = {
        "server": {
            "host": "127.0.0.1",
            "port": 0,
            "cors": True,
            "tls": {
                "certfile": str(certfile),
                "keyfile": str(keyfile),
            },
        },
        "protocol": {
            "read_size": 512,
        },
        "services": {
            "Calculator": "tests.fake.fake_processor:CalculatorProcessor",
            "Shared": "tests.fake.fake_processor:calculator",
        },
    }

    file.write_text(yaml.dump(data))
    return file


@pytest.fixture
def muxwire_config(config_file) -> Generator[MuxwireConfig, None, None]:
    backup = os.environ.copy()

    try:
        os.environ["TEST_MUXWIRECONFIG"] = str(config_file)
        yield FakeMuxwireConfig()
    finally:
        os.environ.clear()
        os.environ.update(backup)
