"""Uvicorn server runner."""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from ezbase.app import App
from ezbase.config import Config
from ezbase.web.server import create_fastapi_app


def uvicorn_log_config(debug: bool) -> dict:
    """Uvicorn logging config with client addresses in access lines.

    Works on a deep copy so uvicorn's module-level defaults stay untouched.
    """
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    level = "DEBUG" if debug else "INFO"
    for logger in log_config["loggers"].values():
        logger["level"] = level
    return log_config


def run_server(app: App, config: Config) -> None:
    """Serve the gateway until interrupted. Request logging to the log store happens in middleware."""
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=uvicorn_log_config(config.debug),
        access_log=True,
        server_header=False,
    )
