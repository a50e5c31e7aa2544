import ssl
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from muxwire.bootstrap.config.loader import get_configfile
from muxwire.core.protocol.multiplexed import validate_service_name


class TLSSettings(BaseModel):
    certfile: Annotated[
        Path,
        Field(
            description="Path to the server's TLS certificate (PEM).",
        )
    ]

    keyfile: Annotated[
        Path,
        Field(
            description="Path to the server's TLS private key (PEM).",
        )
    ]

    @field_validator("certfile", "keyfile")
    @classmethod
    def validate_path(cls, v: Path, _: ValidationInfo) -> Path:
        if not v.exists():
            raise ValueError(f"Path {v} does not exist.")
        return v


class ServerSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description="Bind address for the HTTP endpoint.",
            default="127.0.0.1"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port for the HTTP endpoint.",
            default=9090
        )
    ]

    cors: Annotated[
        bool,
        Field(
            description=(
                "Answer CORS preflight (OPTIONS) requests.\n"
                "When disabled, preflights are rejected with 403."
            ),
            default=False
        )
    ]

    tls: Annotated[
        TLSSettings | None,
        Field(
            description="TLS configuration. The endpoint speaks plain HTTP when omitted.",
            default=None
        )
    ]


class ProtocolSettings(BaseModel):
    read_size: Annotated[
        int,
        Field(
            description="Maximum number of bytes pulled from the transport per read.",
            default=4096,
            gt=0
        )
    ]

    max_buffer_size: Annotated[
        int,
        Field(
            description="Maximum size of a single decoded message.",
            default=1 * 1024 * 1024,
            gt=0
        )
    ]


class MuxwireConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MUXWIRE_",
        extra="allow"
    )

    server: Annotated[
        ServerSettings,
        Field(
            description="HTTP endpoint configuration.",
            default_factory=ServerSettings
        )
    ]

    protocol: Annotated[
        ProtocolSettings,
        Field(
            description="Wire protocol limits.",
            default_factory=ProtocolSettings
        )
    ]

    services: Annotated[
        dict[str, str],
        Field(
            description=(
                "Services to serve, keyed by service name.\n"
                "Each value is the import path ('package.module:attribute') of a\n"
                "processor, or of a zero-argument callable returning one. Clients\n"
                "reach a service by tagging calls with its name."
            ),
            default_factory=dict
        )
    ]

    @field_validator("services")
    @classmethod
    def validate_services(cls, v: dict[str, str], _: ValidationInfo) -> dict[str, str]:
        for name in v:
            validate_service_name(name)
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (YamlConfigSettingsSource(settings_cls, yaml_file=get_configfile()),)

    def get_server_ssl_ctx(self) -> ssl.SSLContext | None:
        tls = self.server.tls
        if tls is None:
            return None

        ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        ctx.load_cert_chain(
            certfile=tls.certfile,
            keyfile=tls.keyfile
        )

        return ctx
