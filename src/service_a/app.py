# Service A - calls service B and republishes its response
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

import requests
from flask import Flask, jsonify
from werkzeug.serving import make_server

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_B_URL = "http://localhost:8081"


@dataclass(frozen=True)
class ServiceAConfig:
    service_b_url: str = DEFAULT_SERVICE_B_URL
    service_b_timeout: Optional[float] = None
    host: str = "0.0.0.0"
    port: int = 8080

    def __post_init__(self):
        object.__setattr__(self, "service_b_url", self.service_b_url.rstrip("/"))
        if self.service_b_timeout is not None and self.service_b_timeout <= 0:
            raise ValueError(f"service B timeout must be positive, got {self.service_b_timeout}")

    @classmethod
    def from_env(cls):
        """Build the config from SERVICE_B_URL, SERVICE_B_TIMEOUT, HOST and PORT"""
        timeout = os.getenv('SERVICE_B_TIMEOUT')
        return cls(
            # An empty SERVICE_B_URL counts as unset
            service_b_url=os.getenv('SERVICE_B_URL') or DEFAULT_SERVICE_B_URL,
            service_b_timeout=float(timeout) if timeout else None,
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', '8080')),
        )


class UpstreamError(Exception):
    """Base class for failures talking to service B"""


class UpstreamUnreachable(UpstreamError):
    """The request to service B never got a response"""

    def __str__(self):
        return f"failed to call service B: {self.args[0]}"


class UpstreamBodyUnreadable(UpstreamError):
    """Service B answered but its body could not be read"""

    def __str__(self):
        return f"failed to read response: {self.args[0]}"


class ServiceBClient:
    def __init__(self, base_url, timeout=None):
        self.base_url = base_url
        self.timeout = timeout

    def fetch(self):
        """GET <base_url>/ and return the body as text, whatever the status code"""
        url = f"{self.base_url}/"
        try:
            response = requests.get(url, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            raise UpstreamUnreachable(e) from e

        with response:
            try:
                body = response.content
            except requests.RequestException as e:
                raise UpstreamBodyUnreadable(e) from e

        logger.info(f"✅ Service B answered {response.status_code} with {len(body)} bytes")
        return body.decode('utf-8', errors='replace')


def create_app(config=None):
    config = config or ServiceAConfig()
    client = ServiceBClient(config.service_b_url, timeout=config.service_b_timeout)

    app = Flask(__name__)
    app.config['SERVICE_A'] = config

    @app.route('/')
    def service_a():
        """Call service B and wrap its body in service A's response"""
        try:
            service_b_msg = client.fetch()
        except UpstreamError as e:
            logger.warning(f"❌ {e}")
            return jsonify({"error": str(e)}), 500

        return jsonify({
            "service": "A",
            "message": "Response from service A",
            "service_b_msg": service_b_msg
        })

    @app.route('/health')
    def health_check():
        """Health check for container probes - does not call service B"""
        return jsonify({
            "status": "healthy",
            "service": "A",
            "service_b_url": config.service_b_url
        })

    return app


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
        config = ServiceAConfig.from_env()
    except ValueError as e:
        logger.critical(f"🚨 Invalid service A configuration: {e}")
        sys.exit(1)

    logger.info(f"Service B at {config.service_b_url}")
    serve(create_app(config), config.host, config.port, "service A")


if __name__ == "__main__":
    main()
