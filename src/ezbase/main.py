"""Application entry point for EzBase gateway server."""

from ezbase.app import App
from ezbase.config import Config
from ezbase.logging import setup_logging
from ezbase.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
