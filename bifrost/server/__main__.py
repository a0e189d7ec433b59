"""Entry point spawned by the client: python -m bifrost.server"""

from bifrost.config.schema import BridgeConfig
from bifrost.server.stdio import run_stdio_server
from bifrost.utils.logging import configure_logging


def main() -> None:
    config = BridgeConfig()
    configure_logging(config.logging.level, config.logging.file or None)
    run_stdio_server(config)


if __name__ == "__main__":
    main()
