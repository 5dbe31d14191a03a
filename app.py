#!/usr/bin/env python3
"""
Flask dev server for the property listing API.

Serves the same contract as the Lambda handler (property_handler.py) from an
in-memory store seeded with the sample listings, so the front end can run
without AWS.

Usage:
    python3 app.py

Then point the front end at http://localhost:3001.
"""

import logging
import uuid

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from common import PORT, configure_logging, cors_headers, parse_json_body
from errors import PropertyAPIError
from property_service import PropertyService
from property_store import MemoryPropertyStore
from sample_properties import sample_records
from uploads import create_upload_url

logger = logging.getLogger(__name__)


def _error(status_code, message):
    return jsonify({"error": message, "reference": str(uuid.uuid4())}), status_code


def create_app(service=None):
    """
    Build the dev server.

    Args:
        service: PropertyService to serve; defaults to an in-memory store
            seeded with the sample listings

    Returns:
        Flask app
    """
    app = Flask(__name__)
    service = service or PropertyService(MemoryPropertyStore(sample_records()))

    @app.before_request
    def preflight():
        """Answer CORS preflight for any path before routing."""
        if request.method == "OPTIONS":
            return jsonify({"message": "CORS preflight"}), 200

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(cors_headers)
        return response

    @app.errorhandler(PropertyAPIError)
    def property_error(e):
        logger.warning(f"{request.method} {request.path} failed ({e.status_code}): {e.message}")
        return _error(e.status_code, e.message)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return _error(e.code, e.description)

    @app.errorhandler(Exception)
    def unexpected_error(e):
        logger.error(f"Error handling {request.method} {request.path}: {e}", exc_info=True)
        return _error(500, str(e))

    @app.route('/health')
    def health():
        return jsonify({'status': 'OK', 'message': 'Real Estate API is running'})

    @app.route('/properties', methods=['GET'])
    def list_properties():
        return jsonify(service.list(request.args.to_dict()))

    @app.route('/properties/<property_id>', methods=['GET'])
    def get_property(property_id):
        return jsonify(service.get(property_id))

    @app.route('/properties', methods=['POST'])
    def create_property():
        return jsonify(service.create(_json_body())), 201

    @app.route('/properties/<property_id>', methods=['PUT'])
    def update_property(property_id):
        return jsonify(service.update(property_id, _json_body()))

    @app.route('/properties/<property_id>', methods=['DELETE'])
    def delete_property(property_id):
        return jsonify(service.delete(property_id))

    @app.route('/upload', methods=['POST'])
    def upload():
        return jsonify(create_upload_url(_json_body()))

    return app


def _json_body():
    """Request body as a dict; missing or invalid JSON becomes {}."""
    return parse_json_body(request.get_json(silent=True, force=True))


if __name__ == '__main__':
    configure_logging()
    app = create_app()
    logger.info(f"🚀 Real Estate API server running on port {PORT}")
    logger.info(f"🏠 Properties API: http://localhost:{PORT}/properties")
    app.run(debug=True, port=PORT)
