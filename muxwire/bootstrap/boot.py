from muxwire.bootstrap.config.loader import get_cli_args
from muxwire.bootstrap.deps import get_server
from muxwire.core.helpers.utils import serve_until_signalled, setup_logging


def main():
    cli = get_cli_args()
    setup_logging(cli.log_level)

    server = get_server()
    server.bind()

    serve_until_signalled(server.serve, server.stop)


if __name__ == "__main__":
    main()
