# Service B - the upstream service called by service A
import logging
import os
import sys

from flask import Flask, jsonify
from werkzeug.serving import make_server

logger = logging.getLogger(__name__)


def create_app():
    app = Flask(__name__)

    @app.route('/')
    def service_b():
        """Identity payload - always succeeds"""
        return jsonify({
            "service": "B",
            "message": "Hello from service B"
        })

    @app.route('/health')
    def health_check():
        """Health check for container probes"""
        return jsonify({"status": "healthy", "service": "B"})

    return app


app = create_app()


def log_level_from_env():
    """Numeric level for LOG_LEVEL, default INFO"""
    name = os.getenv('LOG_LEVEL', 'INFO').upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"unknown LOG_LEVEL {name!r}")
    return level


def serve(app, host, port, name):
    """Bind the listener and serve forever; exit 1 if the port cannot be bound"""
    try:
        server = make_server(host, port, app, threaded=True)
    except OSError as e:
        logger.critical(f"🚨 Could not start {name} on {host}:{port}: {e}")
        sys.exit(1)
    except SystemExit:
        # werkzeug prints the bind error itself and exits
        logger.critical(f"🚨 Could not start {name} on {host}:{port}: address unavailable")
        sys.exit(1)

    logger.info(f"Serving {name} on {host}:{port}")
    server.serve_forever()


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(message)s')
    try:
        logging.getLogger().setLevel(log_level_from_env())
        host = os.getenv('HOST', '0.0.0.0')
        port = int(os.getenv('PORT', '8080'))
    except ValueError as e:
        logger.critical(f"🚨 Invalid service B configuration: {e}")
        sys.exit(1)

    serve(app, host, port, "service B")


if __name__ == "__main__":
    main()
