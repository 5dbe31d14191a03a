"""
property_service.py - CRUD operations for property listings

Transport-agnostic service used by both the Lambda handler
(property_handler.py) and the local Flask dev server (app.py).

Owns the record lifecycle:
- CREATE: unset fields get defaults, fresh id, createdAt == updatedAt
- UPDATE: merges supplied fields, always refreshes updatedAt, id never changes
- DELETE: hard delete; a missing id is NotFound
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from common import dynamo_number
from errors import NotFoundError, ValidationError
from property_filters import FilterCriteria

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

DEFAULT_IMAGE = "https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?w=600&h=400&fit=crop"
DEFAULT_USER_ID = "demo-user"  # No auth wired in yet
PROPERTY_TYPES = ("sale", "rent")

# Client-settable fields and the value used when a field is missing or empty
PROPERTY_DEFAULTS = {
    "title": "Untitled Property",
    "price": 0,
    "location": "Unknown Location",
    "bedrooms": 0,
    "bathrooms": 0,
    "area": 0,
    "image": DEFAULT_IMAGE,
    "type": "sale",
    "featured": False,
    "description": "",
    "userId": DEFAULT_USER_ID,
}

# Managed by the service; ignored when supplied by clients
READ_ONLY_FIELDS = ("id", "createdAt", "updatedAt")


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with milliseconds, e.g. 2025-01-31T17:04:05.123Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_property_id() -> str:
    return str(uuid.uuid4())


def _check_type(value: Any) -> None:
    if value not in PROPERTY_TYPES:
        raise ValidationError(f"Invalid property type: {value!r} (expected one of {', '.join(PROPERTY_TYPES)})")


def _check_numbers(fields: Dict[str, Any]) -> None:
    """Reject numbers DynamoDB can't store (NaN, Infinity, >38 digits, out of range)."""
    def walk(key, value):
        if isinstance(value, dict):
            for k, v in value.items():
                walk(f"{key}.{k}", v)
        elif isinstance(value, list):
            for v in value:
                walk(key, v)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            if dynamo_number(value) is None:
                raise ValidationError(f"Invalid number for {key}: {value!r}")

    for key, value in fields.items():
        walk(key, value)


class PropertyService:
    """
    CRUD contract over a record store.

    Args:
        store: MemoryPropertyStore or DynamoPropertyStore
        clock: Returns the current timestamp string (injectable for tests)
        id_factory: Returns a fresh unique property id
    """

    def __init__(
        self,
        store,
        clock: Callable[[], str] = utc_timestamp,
        id_factory: Callable[[], str] = new_property_id
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        List properties matching every supplied filter.

        Args:
            filters: Raw query parameters (type, minPrice, maxPrice,
                minBedrooms, maxBedrooms, location) or a FilterCriteria

        Returns:
            Matching records in store order; empty list when nothing matches
        """
        criteria = filters if isinstance(filters, FilterCriteria) else FilterCriteria.from_query(filters)
        logger.info(f"Listing properties with filters: {criteria}")
        return self.store.scan_all(criteria)

    def get(self, property_id: str) -> Dict[str, Any]:
        logger.info(f"Getting property: {property_id}")
        record = self.store.get(property_id)
        if record is None:
            raise NotFoundError(property_id)
        return record

    def create(self, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Create a property from a partial record.

        No field is required. Missing or empty values take the defaults in
        PROPERTY_DEFAULTS; unknown fields are dropped.

        Returns:
            The complete stored record
        """
        data = data or {}
        logger.info(f"Creating property: {data}")

        now = self.clock()
        record = {"id": self.id_factory()}
        for field, default in PROPERTY_DEFAULTS.items():
            record[field] = data.get(field) or default
        record["createdAt"] = now
        record["updatedAt"] = now

        _check_type(record["type"])
        _check_numbers(record)

        self.store.put(record)
        logger.info(f"Created property id={record['id']}")
        return record

    def update(self, property_id: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Merge supplied fields over an existing property.

        id, createdAt and updatedAt in the input are ignored; updatedAt is
        always refreshed. Omitted fields are left as they are.

        Raises:
            NotFoundError: No property with this id
            ValidationError: type outside sale/rent, or a number DynamoDB can't store
        """
        data = data or {}
        logger.info(f"Updating property: {property_id} {data}")

        fields = {k: v for k, v in data.items() if k not in READ_ONLY_FIELDS}
        if "type" in fields:
            _check_type(fields["type"])
        _check_numbers(fields)
        fields["updatedAt"] = self.clock()

        record = self.store.update_fields(property_id, fields)
        if record is None:
            raise NotFoundError(property_id)
        return record

    def delete(self, property_id: str) -> Dict[str, Any]:
        logger.info(f"Deleting property: {property_id}")
        if not self.store.remove(property_id):
            raise NotFoundError(property_id)
        return {"message": "Property deleted successfully", "id": property_id}
