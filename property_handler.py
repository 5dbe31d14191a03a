"""
property_handler.py - Lambda handler for the property CRUD API

API Gateway proxy integration (REST v1 events and HTTP API / function URL
v2 events):

    GET     /properties          list, query: type, minPrice, maxPrice,
                                 minBedrooms, maxBedrooms, location
    GET     /properties/{id}     get one
    POST    /properties          create (201)
    PUT     /properties/{id}     update
    DELETE  /properties/{id}     delete
    POST    /upload              image upload URL
    OPTIONS *                    CORS preflight

All responses carry the CORS headers. Errors use the same envelope as the
dev server: {"error": message, "reference": request id}.
"""

import base64
import json
import logging
import os
import uuid
from typing import Any, Dict, Optional

from common import TABLE_NAME, DecimalEncoder, cors_headers, dynamodb_table, parse_json_body
from errors import BadRequestError, PropertyAPIError, UnknownRouteError
from property_service import PropertyService
from property_store import DynamoPropertyStore
from uploads import create_upload_url

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

# Built on first invocation and reused across warm starts
_service: Optional[PropertyService] = None


def get_service() -> PropertyService:
    global _service
    if _service is None:
        logger.info(f"Initializing property service for table {TABLE_NAME}")
        _service = PropertyService(DynamoPropertyStore(dynamodb_table(TABLE_NAME)))
    return _service


def _response(status_code: int, payload: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": cors_headers,
        "body": json.dumps(payload, cls=DecimalEncoder)
    }


def error_response(status_code: int, message: str, request_id: str) -> Dict[str, Any]:
    return _response(status_code, {"error": message, "reference": request_id})


def _http_method(event: Dict[str, Any]) -> str:
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    return method.upper()


def _request_path(event: Dict[str, Any]) -> str:
    return event.get("rawPath") or event.get("path") or "/"


def _property_id(event: Dict[str, Any]) -> Optional[str]:
    """Property id from pathParameters, falling back to /properties/{id} in the path."""
    path_params = event.get("pathParameters") or {}
    if path_params.get("id"):
        return path_params["id"]

    parts = [p for p in _request_path(event).split("/") if p]
    if len(parts) >= 2 and parts[-2] == "properties":
        return parts[-1]
    return None


def _request_body(event: Dict[str, Any]) -> dict:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body)
        except ValueError:
            return {}
    return parse_json_body(body)


def _request_id(context) -> str:
    return getattr(context, "aws_request_id", None) or str(uuid.uuid4())


def handler(event, context):
    """
    AWS Lambda handler for property CRUD.

    Args:
        event: API Gateway proxy event
        context: Lambda context (aws_request_id used as error reference)

    Returns:
        API Gateway proxy response dict
    """
    event = event or {}
    request_id = _request_id(context)
    method = _http_method(event)
    path = _request_path(event)

    logger.info(f"Received {method} {path} ({request_id})")

    # Handle OPTIONS preflight request
    if method == "OPTIONS":
        return _response(200, {"message": "CORS preflight"})

    try:
        if path.rstrip("/").endswith("/upload"):
            if method != "POST":
                raise BadRequestError(f"Unsupported method: {method}")
            return _response(200, create_upload_url(_request_body(event)))

        if "properties" not in [p for p in path.split("/") if p]:
            raise UnknownRouteError(f"Unknown endpoint: {path}")

        service = get_service()
        property_id = _property_id(event)

        if method == "GET":
            if property_id:
                return _response(200, service.get(property_id))
            return _response(200, service.list(event.get("queryStringParameters") or {}))

        if method == "POST":
            return _response(201, service.create(_request_body(event)))

        if method == "PUT":
            if not property_id:
                raise BadRequestError("Property ID is required for update")
            return _response(200, service.update(property_id, _request_body(event)))

        if method == "DELETE":
            if not property_id:
                raise BadRequestError("Property ID is required for deletion")
            return _response(200, service.delete(property_id))

        raise BadRequestError(f"Unsupported method: {method}")

    except PropertyAPIError as e:
        logger.warning(f"{method} {path} failed ({e.status_code}): {e.message}")
        return error_response(e.status_code, e.message, request_id)

    except Exception as e:
        logger.error(f"Error handling {method} {path}: {e}", exc_info=True)
        return error_response(500, str(e), request_id)
