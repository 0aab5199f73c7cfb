#!/usr/bin/env python3

import argparse
import logging
import logging.config
import os

from flask import Flask
from waitress import serve  # type: ignore

from iconkit.blueprints.icons import icons_bp
from iconkit.config import Config
from iconkit.exceptions import IconError
from iconkit.utils.http_utils import APIError, json_error, wants_json
from iconkit.utils.icon_utils import init_icons
from iconkit.utils.logging_utils import use_json_logging

logger = logging.getLogger(__name__)

LOGGING_CONF = os.path.join(os.path.dirname(__file__), "config", "logging.conf")


def create_app(config: Config | None = None) -> Flask:
    app = Flask(__name__)

    icon_config = config or Config()
    app.config["ICON_CONFIG"] = icon_config
    init_icons(app, icon_config.build_factory())

    app.register_blueprint(icons_bp)

    @app.errorhandler(APIError)
    def _handle_api_error(err: APIError):
        if wants_json():
            return json_error(err.message, status=err.status, code=err.code, details=err.details)
        return (err.message, err.status)

    @app.errorhandler(IconError)
    def _handle_icon_error(err: IconError):
        logger.error("Icon error: %s", err)
        if wants_json():
            return json_error(str(err), status=500, code="icon_error")
        return ("Icon error", 500)

    @app.errorhandler(404)
    def _handle_not_found(err):
        if wants_json():
            return json_error("Not found", status=404)
        return ("Not found", 404)

    @app.after_request
    def _set_security_headers(response):
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response

    return app


def main(argv=None):
    """CLI and runtime configuration

    Options precedence:
    1. CLI flags
    2. Environment variables (ICONKIT_*, PORT)
    3. Defaults
    """
    logging.config.fileConfig(LOGGING_CONF, disable_existing_loggers=False)

    parser = argparse.ArgumentParser(description="Icon preview server")
    parser.add_argument("--dev", action="store_true", help="Run in development mode")
    parser.add_argument("--config", type=str, default=None, help="Path to icons JSON config file")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    args = parser.parse_args(argv)

    env_mode = os.getenv("ICONKIT_ENV", "").strip().lower()
    dev_mode = bool(args.dev or env_mode in ("dev", "development"))

    if os.getenv("ICONKIT_LOG_FORMAT", "").strip().lower() == "json":
        use_json_logging("iconkit", service="iconkit")

    if args.config:
        Config.config_file = args.config

    if args.port is not None:
        port = args.port
    else:
        env_port = os.getenv("ICONKIT_PORT") or os.getenv("PORT")
        try:
            port = int(env_port) if env_port else 8080
        except ValueError:
            logger.warning("Ignoring invalid port %r, using 8080", env_port)
            port = 8080

    if dev_mode:
        logging.getLogger("iconkit").setLevel(logging.DEBUG)
        logger.info(f"Starting icon server in DEVELOPMENT mode on port {port}")
    else:
        logger.info(f"Starting icon server on port {port}")
    logging.getLogger("waitress.queue").setLevel(logging.ERROR)

    app = create_app()
    serve(app, host="0.0.0.0", port=port, threads=4)


if __name__ == "__main__":
    main()
