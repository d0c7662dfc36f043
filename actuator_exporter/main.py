#!/usr/bin/env python3
"""Main entry point for Spring Actuator Exporter"""
import argparse
import sys
from typing import Any, Dict, List, Optional

import uvicorn

from .app.server import MetricsServer
from .config import Config
from .logging_config import get_logger, log_error, log_server_startup, setup_structured_logging


def build_parser() -> argparse.ArgumentParser:
    """Command line flags; anything not given falls back to the environment"""
    parser = argparse.ArgumentParser(
        prog="spring-actuator-exporter",
        description="Prometheus exporter for Spring Boot Actuator metrics",
    )
    parser.add_argument("--web.listen-address", dest="listen_address",
                        help="Address to listen on for web interface and telemetry (default :9101)")
    parser.add_argument("--web.telemetry-path", dest="telemetry_path",
                        help="Path under which to expose metrics (default /metrics)")
    parser.add_argument("--actuator.scrape-uri", dest="scrape_uri",
                        help="URI on which to scrape Spring Actuator (default http://localhost/metrics)")
    parser.add_argument("--actuator.timeout", dest="scrape_timeout",
                        help="Timeout for trying to get stats from Spring Actuator, e.g. 5s (default 5s)")
    parser.add_argument("--actuator.fail-on-malformed-json", dest="fail_on_malformed_json",
                        action=argparse.BooleanOptionalAction, default=None,
                        help="Terminate when the upstream payload is not a JSON object (default true)")
    parser.add_argument("--log.level", dest="log_level", help="Log level (default INFO)")
    parser.add_argument("--log.file", dest="log_file", help="Also write logs to this file")
    return parser


def parse_overrides(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    """Parse flags into Config keyword overrides"""
    args = build_parser().parse_args(argv)
    return {key: value for key, value in vars(args).items() if value is not None}


def main(argv: Optional[List[str]] = None):
    """Main application entry point"""
    overrides = parse_overrides(argv)
    try:
        config = Config(**overrides)

        setup_structured_logging(config)
        logger = get_logger(__name__)
        log_server_startup(logger, config)

        server = MetricsServer(config)
        uvicorn.run(
            server.get_app(),
            host=config.listen_host,
            port=config.listen_port,
            log_config=None  # We handle logging ourselves
        )

    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        sys.exit(1)


if __name__ == '__main__':
    main()
