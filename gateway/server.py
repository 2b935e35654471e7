"""
Uvicorn wrapper used by the CLI to serve the gateway.
"""
import logging
from pathlib import Path
from typing import Optional

import uvicorn

from settings import BIND_ADDRESS, LOG_LEVEL, PORT
from .app import app

logger = logging.getLogger(__name__)

DEBUG_LOG_FILE = "gateway_debug.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def enable_debug_logging(log_path: Path) -> None:
    """Route every DEBUG record to stderr and to ``log_path``"""
    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(), logging.FileHandler(log_path, mode="a", encoding="utf-8")],
        force=True,
    )
    # httpx logs full URLs at INFO, which include OAuth codes
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger.info(f"Debug logging enabled, also writing to {log_path}")


class GatewayServer:
    """Serves the FastAPI gateway app with uvicorn"""

    def __init__(self, debug: bool = False, bind_address: Optional[str] = None, port: Optional[int] = None):
        self.debug = debug
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT
        self._server: Optional[uvicorn.Server] = None
        if debug:
            enable_debug_logging(Path(DEBUG_LOG_FILE).resolve())

    def run(self) -> None:
        """Blocks until the server exits"""
        logger.info(f"Serving the MCP gateway on http://{self.bind_address}:{self.port}")
        # Request logging is done by the middleware
        config = uvicorn.Config(
            app,
            host=self.bind_address,
            port=self.port,
            log_level="debug" if self.debug else LOG_LEVEL,
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._server.run()

    def stop(self) -> None:
        """Ask a running server to shut down"""
        if self._server is not None:
            self._server.should_exit = True
