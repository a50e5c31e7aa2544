import argparse
import os
from functools import lru_cache
from pathlib import Path

CONFIG_ENV = "MUXWIRECONFIG"
DEFAULT_CONFIG = "muxwire.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="muxwire",
        description=(
            "Serve multiplexed RPC services over HTTP.\n\n"
            "Every service listed in the configuration file is registered on a\n"
            "single multiplexing processor and reachable on the same endpoint.\n"
            "--host, --port and --cors take precedence over the file."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        help=f"Path to the configuration file (default: ${CONFIG_ENV}, then ./{DEFAULT_CONFIG})"
    )
    parser.add_argument(
        "-l", "--log-level",
        default="INFO",
        choices=LOG_LEVELS,
        help="DEBUG also logs every dispatched call and HTTP request (default: INFO)"
    )
    parser.add_argument("--host", help="Bind address of the HTTP endpoint")
    parser.add_argument("--port", type=int, help="TCP port of the HTTP endpoint, 0 for any")
    parser.add_argument(
        "--cors",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Answer or reject CORS preflight requests"
    )

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def resolve_configfile(config: Path | None) -> Path:
    """
    Locate the configuration file: the --config value, then the
    MUXWIRECONFIG environment variable, then muxwire.yaml in the current
    working directory.
    """
    raw = config or os.getenv(CONFIG_ENV)
    file = Path(raw) if raw else Path.cwd() / DEFAULT_CONFIG

    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            f"  Use --config, set ${CONFIG_ENV} or create ./{DEFAULT_CONFIG}."
        )
    return file


@lru_cache
def get_configfile() -> Path:
    return resolve_configfile(get_cli_args().config)
