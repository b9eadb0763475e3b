#!/usr/bin/env python3
"""
fleetconsole server entry point

Loads the YAML config, optionally seeds demo data, and runs the FastAPI app
under uvicorn.
"""

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from .core.config import load_config_from, resolve_paths
from .core.server import create_app
from .certificates import get_ssl_context
from .models import db_manager
from .seed import seed_demo_data

logger = logging.getLogger("fleetconsole.server")


def main():
    """Main entry point for fleetconsole server."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="fleetconsole server")
    parser.add_argument("-c", "--config", help="Path to YAML config (default: $FLEETCONSOLE_CONFIG or config.yaml)", default=None)
    parser.add_argument("--seed-demo", action="store_true", help="Insert demo servers, files and processes, then exit")
    args = parser.parse_args()

    config = load_config_from(args.config)
    db_path, _, _, cert_path, key_path = resolve_paths(config)

    if args.seed_demo:
        logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))
        db_manager.db_path = db_path
        if not db_manager.connect():
            raise SystemExit(f"database init failed: {db_path}")
        try:
            counts = seed_demo_data()
        finally:
            db_manager.close()
        print(f"seeded: {counts}")
        return

    ssl_context = get_ssl_context(config.use_tls, config.test_mode, cert_path, key_path)
    app = create_app(config)

    uvicorn_kwargs = {
        "host": config.host,
        "port": config.port,
        "reload": False,
        "access_log": False
    }

    # Add SSL parameters if TLS is enabled
    if ssl_context:
        uvicorn_kwargs.update({
            "ssl_keyfile": str(key_path),
            "ssl_certfile": str(cert_path)
        })

    uvicorn.run(app, **uvicorn_kwargs)


if __name__ == "__main__":
    main()
