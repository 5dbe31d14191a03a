"""
property_store.py - Record store backings for property records

Two interchangeable stores with the same contract:

    get(property_id)              -> record dict or None
    put(record)                   -> full upsert
    update_fields(property_id, fields) -> merged record or None if missing
    remove(property_id)           -> True if a record was removed
    scan_all(criteria)            -> all records matching FilterCriteria

MemoryPropertyStore backs the local dev server and tests. DynamoPropertyStore
backs the Lambda deployment. Neither raises user-facing errors: a missing id
comes back as None/False and the service decides what that means.
"""

import copy
import json
import logging
import os
import threading
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from botocore.exceptions import ClientError
from boto3.dynamodb.conditions import Attr

from property_filters import FilterCriteria

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))


# ==========================================
# DynamoDB Type Conversion
# ==========================================

def to_dynamodb(item: Dict[str, Any]) -> Dict[str, Any]:
    """Convert floats to Decimal so boto3 will accept the item."""
    return json.loads(json.dumps(item), parse_float=Decimal)


def from_dynamodb(obj: Any) -> Any:
    """
    Convert DynamoDB Decimal numbers back to int/float.
    """
    if isinstance(obj, Decimal):
        # Whole numbers go straight to int so wide integers keep every digit
        if obj == obj.to_integral_value():
            return int(obj)
        return float(obj)
    if isinstance(obj, dict):
        return {k: from_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [from_dynamodb(item) for item in obj]
    return obj


# ==========================================
# In-memory store
# ==========================================

class MemoryPropertyStore:
    """
    Process-local list of property records in insertion order.

    Every access happens under one lock so concurrent requests on the
    threaded dev server can't lose updates. Records are copied on the way in
    and out.
    """

    def __init__(self, records: Optional[Iterable[Dict[str, Any]]] = None):
        self._lock = threading.Lock()
        self._records: List[Dict[str, Any]] = [copy.deepcopy(r) for r in (records or [])]

    def _index_of(self, property_id: str) -> int:
        for i, record in enumerate(self._records):
            if record.get("id") == property_id:
                return i
        return -1

    def get(self, property_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            i = self._index_of(property_id)
            return copy.deepcopy(self._records[i]) if i >= 0 else None

    def put(self, record: Dict[str, Any]) -> None:
        with self._lock:
            i = self._index_of(record["id"])
            if i >= 0:
                self._records[i] = copy.deepcopy(record)
            else:
                self._records.append(copy.deepcopy(record))

    def update_fields(self, property_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            i = self._index_of(property_id)
            if i < 0:
                return None
            merged = {**self._records[i], **copy.deepcopy(fields), "id": property_id}
            self._records[i] = merged
            return copy.deepcopy(merged)

    def remove(self, property_id: str) -> bool:
        with self._lock:
            i = self._index_of(property_id)
            if i < 0:
                return False
            del self._records[i]
            return True

    def scan_all(self, criteria: Optional[FilterCriteria] = None) -> List[Dict[str, Any]]:
        with self._lock:
            snapshot = copy.deepcopy(self._records)
        if criteria is None or criteria.is_empty():
            return snapshot
        return [record for record in snapshot if criteria.matches(record)]


# ==========================================
# DynamoDB store
# ==========================================

class DynamoPropertyStore:
    """
    Property records in a DynamoDB table keyed on "id".

    Single-item operations are atomic on the DynamoDB side. There are no
    multi-item transactions and a list query is a full table scan.

    Args:
        table: boto3 DynamoDB Table resource (see common.dynamodb_table)
    """

    def __init__(self, table):
        self.table = table

    def get(self, property_id: str) -> Optional[Dict[str, Any]]:
        response = self.table.get_item(Key={"id": property_id})
        item = response.get("Item")
        return from_dynamodb(item) if item else None

    def put(self, record: Dict[str, Any]) -> None:
        self.table.put_item(Item=to_dynamodb(record))

    def update_fields(self, property_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Merge fields into an existing item with one conditional update_item call.

        Returns:
            The full item after the update, or None if the id doesn't exist
        """
        fields = {k: v for k, v in fields.items() if k != "id"}
        if not fields:
            return self.get(property_id)

        # Placeholders are positional so arbitrary field names are safe
        assignments = []
        names = {}
        values = {}
        for i, (key, value) in enumerate(fields.items()):
            assignments.append(f"#f{i} = :v{i}")
            names[f"#f{i}"] = key
            values[f":v{i}"] = value

        try:
            response = self.table.update_item(
                Key={"id": property_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=to_dynamodb(values),
                ConditionExpression=Attr("id").exists(),
                ReturnValues="ALL_NEW"
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                return None
            raise

        return from_dynamodb(response.get("Attributes", {}))

    def remove(self, property_id: str) -> bool:
        response = self.table.delete_item(Key={"id": property_id}, ReturnValues="ALL_OLD")
        return bool(response.get("Attributes"))

    def scan_all(self, criteria: Optional[FilterCriteria] = None) -> List[Dict[str, Any]]:
        """
        Scan the whole table, following LastEvaluatedKey across pages.

        Native criteria go into the FilterExpression; the rest are applied to
        the scanned items afterwards.
        """
        params = {}
        condition = criteria.to_condition() if criteria is not None else None
        if condition is not None:
            params["FilterExpression"] = condition

        items = []
        while True:
            response = self.table.scan(**params)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

        logger.debug(f"Scanned {len(items)} items from {self.table.name}")

        records = [from_dynamodb(item) for item in items]
        if criteria is not None:
            records = criteria.post_filter(records)
        return records
