"""Credential-injecting relay for the Harvard Art Museums API.

Forwards GET /harvard-api?endpoint=/object&... to the Harvard host with the
server-held key appended, so the key never reaches the browser.

    flask --app art_curator.relay run --port 8888
"""

from __future__ import annotations

import logging

import requests
from flask import Flask, Response, jsonify, request

from .config import HARVARD_BASE_URL, Settings

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=300"  # 5 minutes


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or Settings.from_env()
    app = Flask(__name__)

    if not settings.harvard_api_key:
        logger.warning("HARVARD_API_KEY is not set; upstream calls will be rejected")

    @app.route(
        "/harvard-api",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        provide_automatic_options=False,
    )
    def harvard_api():
        if request.method != "GET":
            return Response("Method Not Allowed", status=405)

        params = request.args.to_dict()
        endpoint = params.pop("endpoint", None)
        if not endpoint:
            return jsonify({"error": "Missing endpoint parameter"}), 400
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        params["apikey"] = settings.harvard_api_key
        try:
            upstream = requests.get(
                f"{HARVARD_BASE_URL}{endpoint}",
                params=params,
                timeout=settings.request_timeout,
            )
            upstream.raise_for_status()
            body = upstream.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else 502
            logger.error("Harvard API proxy error: %s %s", status, endpoint)
            return jsonify({
                "error": "Error fetching data from Harvard API",
                "details": e.response.text if e.response is not None else str(e),
            }), status
        except (requests.RequestException, ValueError) as e:
            logger.error("Harvard API proxy error: %s", e)
            return jsonify({
                "error": "Error fetching data from Harvard API",
                "details": str(e),
            }), 502

        response = jsonify(body)
        response.headers["Cache-Control"] = CACHE_CONTROL
        return response

    return app
