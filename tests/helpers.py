import os

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, YamlConfigSettingsSource

from muxwire.bootstrap.config.settings import MuxwireConfig
from muxwire.core.models.message import MessageHeader, MessageType, TType
from muxwire.core.ports.protocol import Protocol


def write_add_call(
    protocol: Protocol,
    a: int,
    b: int,
    seqid: int = 1,
    name: str = "add",
    type: MessageType = MessageType.CALL,
) -> None:
    protocol.write_message_begin(name, type, seqid)
    protocol.write_struct_begin("add_args")
    protocol.write_field_begin("a", TType.I32, 1)
    protocol.write_i32(a)
    protocol.write_field_end()
    protocol.write_field_begin("b", TType.I32, 2)
    protocol.write_i32(b)
    protocol.write_field_end()
    protocol.write_field_stop()
    protocol.write_struct_end()
    protocol.write_message_end()
    protocol.flush()


def read_add_reply(protocol: Protocol) -> tuple[MessageHeader, int | None]:
    header = protocol.read_message_begin()
    result = None

    protocol.read_struct_begin()
    while True:
        _, ftype, fid = protocol.read_field_begin()
        if ftype == TType.STOP:
            break
        if fid == 0 and ftype == TType.I32:
            result = protocol.read_i32()
        else:
            protocol.skip(ftype)
        protocol.read_field_end()
    protocol.read_struct_end()
    protocol.read_message_end()

    return header, result


class FakeMuxwireConfig(MuxwireConfig, BaseSettings):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (YamlConfigSettingsSource(settings_cls, yaml_file=os.environ["TEST_MUXWIRECONFIG"]),)
