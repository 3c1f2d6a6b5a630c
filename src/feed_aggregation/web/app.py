"""
Flask application serving the aggregated feed view.
"""

import argparse
import time
from typing import Optional

import httpx
from flask import Flask, Response, g, request
from flask_compress import Compress

from feed_aggregation import __version__
from feed_aggregation.config import Config, WebConfig, get_config, load_config_from_yaml, set_config
from feed_aggregation.core.services import create_aggregator_service
from feed_aggregation.exceptions import AggregationError, format_error_chain
from feed_aggregation.logger import get_logger, level_for_verbosity, setup_logger
from feed_aggregation.web.renderer import render_digest

logger = get_logger(__name__)


def create_app(
    config: Optional[Config] = None,
    http_client: Optional[httpx.Client] = None,
) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Override the global configuration
        http_client: Shared httpx client for feed requests

    Returns:
        Configured Flask application
    """
    app = Flask(__name__, template_folder="templates")

    config = config or get_config()
    app.config["DEBUG"] = config.web.debug
    app.config["COMPRESS_ALGORITHM"] = ["br", "gzip"]
    Compress(app)

    service = create_aggregator_service(config=config, http_client=http_client)
    app.extensions["aggregator_service"] = service

    # ========================================================================
    # Routes
    # ========================================================================

    @app.route("/")
    def index():
        """Aggregate the feeds listed in the raw query string.

        e.g. ``/?https://www.rust-lang.org/feeds/releases.xml&https://blog.rust-lang.org/feed.xml``
        """
        days = service.aggregate_query(request.query_string)
        return Response(render_digest(days), mimetype="text/html")

    # ========================================================================
    # Request Tracing
    # ========================================================================

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response: Response) -> Response:
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        logger.info(
            f"{request.method} {request.path} -> {response.status_code} in {elapsed_ms:.1f}ms"
        )
        return response

    # ========================================================================
    # Error Handlers
    # ========================================================================

    @app.errorhandler(AggregationError)
    def aggregation_error(e: AggregationError):
        """Report an aggregation failure with its cause chain."""
        logger.warning(f"Aggregation failed: {e}")
        return Response(format_error_chain(e), status=e.status_code, mimetype="text/plain")

    @app.errorhandler(500)
    def server_error(e):
        """Handle 500 errors."""
        error = getattr(e, "original_exception", None) or e
        logger.error(f"Server error: {error}")
        return Response(format_error_chain(error), status=500, mimetype="text/plain")

    logger.info(f"Web app created (timezone: {config.aggregator.timezone or 'local'})")

    return app


def parse_listen_addr(listen_addr: Optional[str], web_config: WebConfig) -> tuple[str, int]:
    """Split ``host:port`` into its parts.

    Missing parts fall back to the web configuration. IPv6 hosts may be
    given in brackets (``[::1]:3000``).

    Raises:
        ValueError: If the port is not a number
    """
    if not listen_addr:
        return web_config.host, web_config.port

    host, sep, port = listen_addr.rpartition(":")
    if not sep:
        return listen_addr, web_config.port

    host = host.strip("[]") or web_config.host
    return host, int(port)


def main(argv: Optional[list[str]] = None) -> None:
    """Run the web server."""
    parser = argparse.ArgumentParser(description="Serve an aggregated view of RSS/Atom feeds")
    parser.add_argument(
        "listen_addr",
        nargs="?",
        help="Address to listen on, as host:port (default from configuration)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)"
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    config = load_config_from_yaml(args.config) if args.config else get_config()
    set_config(config)

    setup_logger(level=level_for_verbosity(args.verbose) if args.verbose else None)

    try:
        host, port = parse_listen_addr(args.listen_addr, config.web)
    except ValueError:
        parser.error(f"invalid listen address: {args.listen_addr}")

    app = create_app(config)
    logger.info(f"Listening on http://{host}:{port}")
    app.run(host=host, port=port, debug=config.web.debug, threaded=True)
