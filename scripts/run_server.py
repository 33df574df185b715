"""Script to launch the encrypted-chat relay server."""

from __future__ import annotations

import argparse
import logging
import os
import sys

import uvicorn

# Ensure src/ is on sys.path (so imports work when run directly)
SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from relay_server.config import load_config  # noqa: E402
from relay_server.server import create_app  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the encrypted-chat relay server.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file (default: $RELAY_SERVER_CONFIG or config/default.yaml)",
    )
    parser.add_argument("--host", type=str, default=None, help="Host to bind (default: from config)")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default: from config)")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: from config)")
    args = parser.parse_args()

    cfg = load_config(args.config)
    server_cfg = cfg.get("server", {})
    host = args.host or os.environ.get("HOST") or server_cfg.get("host", "0.0.0.0")
    port = args.port or int(os.environ.get("PORT") or server_cfg.get("port", 8080))
    level = (args.log_level or cfg.get("logging", {}).get("level", "INFO")).upper()

    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger = logging.getLogger("relay_server")

    # All rooms live in this process's memory, so exactly one worker.
    app = create_app(args.config)
    logger.info("Relay server on http://%s:%s (rooms are in-memory only)", host, port)

    uvicorn.run(app, host=host, port=port, log_level=level.lower())


if __name__ == "__main__":
    main()
