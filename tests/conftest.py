"""Pytest configuration and fixtures."""

import copy
from datetime import datetime, timedelta, timezone
from numbers import Number

import pytest
from boto3.dynamodb.conditions import AttributeBase, ConditionBase
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from property_service import PropertyService
from property_store import DynamoPropertyStore, MemoryPropertyStore


# ==========================================
# Fake DynamoDB table
# ==========================================

def _compare(left, right, op):
    # DynamoDB comparisons between different types are simply false
    both_numbers = isinstance(left, Number) and isinstance(right, Number) \
        and not isinstance(left, bool) and not isinstance(right, bool)
    both_strings = isinstance(left, str) and isinstance(right, str)
    if not (both_numbers or both_strings):
        return False
    return op(left, right)


def evaluate_condition(condition, item):
    """Evaluate a boto3 condition object against an item (None = missing item)."""
    expression = condition.get_expression()
    operator = expression["operator"]
    values = expression["values"]

    if operator == "AND":
        return all(evaluate_condition(v, item) for v in values)
    if operator == "OR":
        return any(evaluate_condition(v, item) for v in values)
    if operator == "NOT":
        return not evaluate_condition(values[0], item)

    item = item or {}
    name = values[0].name
    if operator == "attribute_exists":
        return name in item
    if operator == "attribute_not_exists":
        return name not in item
    if name not in item:
        return False

    actual = item[name]
    if operator == "=":
        return actual == values[1]
    if operator == "<>":
        return actual != values[1]
    if operator == ">=":
        return _compare(actual, values[1], lambda a, b: a >= b)
    if operator == "<=":
        return _compare(actual, values[1], lambda a, b: a <= b)
    if operator == ">":
        return _compare(actual, values[1], lambda a, b: a > b)
    if operator == "<":
        return _compare(actual, values[1], lambda a, b: a < b)
    if operator == "contains":
        return isinstance(actual, str) and isinstance(values[1], str) and values[1] in actual
    raise NotImplementedError(f"Fake table can't evaluate {operator}")


def _serialize(value):
    """Run a value through boto3's serializer (rejects floats and numbers DynamoDB can't hold)."""
    TypeSerializer().serialize(value)


def _serialize_condition(condition):
    for value in condition.get_expression()["values"]:
        if isinstance(value, ConditionBase):
            _serialize_condition(value)
        elif not isinstance(value, AttributeBase):
            _serialize(value)


class FakeTable:
    """
    In-memory stand-in for a boto3 DynamoDB Table resource.

    Implements the calls DynamoPropertyStore makes, with DynamoDB's scan
    paging (filter applied per page) and conditional update semantics.
    """

    def __init__(self, name="properties-test", page_size=100):
        self.name = name
        self.page_size = page_size
        self.items = {}
        self.scan_calls = []

    def put_item(self, Item):
        _serialize(Item)
        self.items[Item["id"]] = copy.deepcopy(Item)
        return {}

    def get_item(self, Key):
        item = self.items.get(Key["id"])
        return {"Item": copy.deepcopy(item)} if item is not None else {}

    def update_item(self, Key, UpdateExpression, ExpressionAttributeNames,
                    ExpressionAttributeValues, ConditionExpression=None, ReturnValues="NONE"):
        _serialize(ExpressionAttributeValues)
        if ConditionExpression is not None:
            _serialize_condition(ConditionExpression)
        existing = self.items.get(Key["id"])
        if ConditionExpression is not None and not evaluate_condition(ConditionExpression, existing):
            raise ClientError(
                {"Error": {"Code": "ConditionalCheckFailedException",
                           "Message": "The conditional request failed"}},
                "UpdateItem"
            )

        assert UpdateExpression.startswith("SET ")
        item = copy.deepcopy(existing) if existing else dict(Key)
        for assignment in UpdateExpression[4:].split(","):
            name_ph, value_ph = [part.strip() for part in assignment.split("=")]
            item[ExpressionAttributeNames[name_ph]] = copy.deepcopy(ExpressionAttributeValues[value_ph])
        self.items[Key["id"]] = item

        return {"Attributes": copy.deepcopy(item)} if ReturnValues == "ALL_NEW" else {}

    def delete_item(self, Key, ReturnValues="NONE"):
        old = self.items.pop(Key["id"], None)
        if ReturnValues == "ALL_OLD" and old is not None:
            return {"Attributes": old}
        return {}

    def scan(self, FilterExpression=None, ExclusiveStartKey=None):
        self.scan_calls.append({"FilterExpression": FilterExpression, "ExclusiveStartKey": ExclusiveStartKey})
        if FilterExpression is not None:
            _serialize_condition(FilterExpression)
        ids = list(self.items)
        start = ids.index(ExclusiveStartKey["id"]) + 1 if ExclusiveStartKey else 0
        page_ids = ids[start:start + self.page_size]

        page = [copy.deepcopy(self.items[i]) for i in page_ids]
        if FilterExpression is not None:
            page = [item for item in page if evaluate_condition(FilterExpression, item)]

        response = {"Items": page, "Count": len(page), "ScannedCount": len(page_ids)}
        if start + self.page_size < len(ids):
            response["LastEvaluatedKey"] = {"id": page_ids[-1]}
        return response


# ==========================================
# Fixtures
# ==========================================

class StepClock:
    """Timestamp source that advances one second per call."""

    def __init__(self, start=datetime(2025, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture(params=["memory", "dynamodb"])
def store(request):
    """Each store backing in turn."""
    if request.param == "memory":
        return MemoryPropertyStore()
    return DynamoPropertyStore(FakeTable(page_size=3))


@pytest.fixture
def service(store, clock) -> PropertyService:
    return PropertyService(store, clock=clock)


@pytest.fixture
def listings():
    """Fixture listings covering each filter dimension."""
    base = {
        "image": "https://example.com/img.jpg",
        "featured": False,
        "description": "",
        "bathrooms": 1,
        "area": 1000,
        "createdAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2025-01-01T00:00:00.000Z",
        "userId": "demo-user",
    }
    return [
        {**base, "id": "a", "title": "Austin Bungalow", "price": 100000, "type": "sale",
         "bedrooms": 2, "location": "Austin, TX"},
        {**base, "id": "b", "title": "Boston Studio", "price": 1500, "type": "rent",
         "bedrooms": 1, "location": "Boston, MA"},
        {**base, "id": "c", "title": "Malibu Villa", "price": 1200000.5, "type": "sale",
         "bedrooms": 5, "location": "Malibu, CA"},
        {**base, "id": "d", "title": "East Austin Loft", "price": 2500, "type": "rent",
         "bedrooms": 3, "location": "EAST AUSTIN, TX"},
        {**base, "id": "e", "title": "Charleston Townhouse", "price": 650000, "type": "sale",
         "bedrooms": 3, "location": "Charleston, SC"},
    ]


@pytest.fixture(autouse=True)
def no_upload_bucket(monkeypatch):
    """Uploads default to mock URLs regardless of the caller's environment."""
    import uploads
    monkeypatch.setattr(uploads, "UPLOAD_BUCKET", None)
