"""
common.py - Shared configuration for the property listing API

This module provides functionality used by both the Lambda handler and the
local Flask dev server:
- Environment configuration (table name, region, upload bucket, port)
- Logging setup
- AWS client/resource construction
- CORS headers and JSON helpers shared by both transports
"""

import json
import logging
import os
import sys
from decimal import Decimal, DecimalException
from typing import Optional

import boto3
from boto3.dynamodb.types import DYNAMODB_CONTEXT

# ===============================================
# ENVIRONMENT CONFIGURATION
# ===============================================
# Load configuration from environment variables with sensible defaults

AWS_REGION = os.getenv("AWS_REGION", "us-east-1")

TABLE_NAME = os.getenv("TABLE_NAME", "DreamDwellFlow-Properties-dev")  # DynamoDB table for property records

PORT = int(os.getenv("PORT", "3001"))  # Flask dev server port

# Image uploads (presigned S3 PUT). Unset bucket = mock URLs for local dev
UPLOAD_BUCKET = os.getenv("UPLOAD_BUCKET")
UPLOAD_URL_EXPIRES = int(os.getenv("UPLOAD_URL_EXPIRES", "900"))

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS headers for API Gateway and the dev server
cors_headers = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS"
}


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Send log records to stdout at the configured level (dev server and scripts)."""
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root.addHandler(handler)

    # boto is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)


# ===============================================
# AWS CLIENTS
# ===============================================

def dynamodb_table(table_name: str = TABLE_NAME):
    """Return a boto3 DynamoDB Table resource for the properties table."""
    dynamodb = boto3.resource("dynamodb", region_name=AWS_REGION)
    return dynamodb.Table(table_name)


def s3_client():
    return boto3.client("s3", region_name=AWS_REGION)


# ===============================================
# JSON HELPERS
# ===============================================

class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types from DynamoDB"""
    def default(self, obj):
        if isinstance(obj, Decimal):
            num = float(obj)
            return int(num) if num.is_integer() else num
        return super(DecimalEncoder, self).default(obj)


# DynamoDB numbers: 38 significant digits, magnitude 1E-130 to 9.99E+125
DYNAMODB_MIN_EXPONENT = -130
DYNAMODB_MAX_EXPONENT = 125


def dynamo_number(num) -> Optional[Decimal]:
    """
    Return num as the Decimal DynamoDB would store, or None if it can't be stored.

    Uses the same decimal context boto3's TypeSerializer applies, so a
    non-None result is guaranteed to serialize.
    """
    if isinstance(num, bool):
        return None
    try:
        value = DYNAMODB_CONTEXT.create_decimal(Decimal(str(num)))
    except (DecimalException, ValueError):
        return None
    if not value.is_finite():
        return None
    if value and not (DYNAMODB_MIN_EXPONENT <= value.adjusted() <= DYNAMODB_MAX_EXPONENT):
        return None
    return value


def parse_json_body(body) -> dict:
    """
    Parse a request body into a dict.

    Absent, malformed, or non-object bodies all become an empty dict so the
    service layer always receives a mapping.

    Args:
        body: Raw body (str/bytes), an already-decoded object, or None

    Returns:
        Parsed body dict
    """
    if body is None or body == "" or body == b"":
        return {}
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return {}
    return body if isinstance(body, dict) else {}
