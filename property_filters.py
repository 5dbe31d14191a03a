"""
property_filters.py - Filter criteria for property list queries

A single FilterCriteria type drives both ways of filtering:
- matches(): in-process predicate used by the in-memory store
- to_condition() + post_filter(): DynamoDB scan FilterExpression plus the
  residual checks DynamoDB can't evaluate exactly

For any criteria, scanning with to_condition() and then applying
post_filter() yields exactly the records for which matches() is true.

Query parameters (all optional, AND-ed together):
    type         exact match ("sale" | "rent")
    minPrice     price >= value
    maxPrice     price <= value
    minBedrooms  bedrooms >= value
    maxBedrooms  bedrooms <= value
    location     case-insensitive substring of location
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Number
from typing import Any, Dict, Iterable, List, Optional, Union

from boto3.dynamodb.conditions import Attr

from common import dynamo_number


def _parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw filter value to a number.

    Query strings arrive as text; anything that doesn't parse to a finite
    number DynamoDB can store means "no constraint" rather than an error.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num):
        return None
    num = int(num) if num.is_integer() else num
    return num if dynamo_number(num) is not None else None


def _parse_int(value: Any) -> Optional[int]:
    # Bedroom counts truncate like parseInt("2.5") -> 2
    num = _parse_number(value)
    if num is None:
        return None
    return int(num)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _to_dynamo_number(num: Union[int, float]) -> Union[int, Decimal]:
    # boto3 rejects float; Decimal(str()) keeps the literal value
    return Decimal(str(num)) if isinstance(num, float) else num


@dataclass(frozen=True)
class FilterCriteria:
    """Optional constraints for a property list query."""

    type: Optional[str] = None
    min_price: Optional[Union[int, float]] = None
    max_price: Optional[Union[int, float]] = None
    min_bedrooms: Optional[int] = None
    max_bedrooms: Optional[int] = None
    location: Optional[str] = None

    @classmethod
    def from_query(cls, params: Optional[Dict[str, Any]]) -> "FilterCriteria":
        """
        Build criteria from raw query-string parameters.

        Args:
            params: Mapping of query parameter name to raw value (or None)

        Returns:
            FilterCriteria with unparseable or empty values dropped
        """
        params = params or {}
        return cls(
            type=params.get("type") or None,
            min_price=_parse_number(params.get("minPrice")),
            max_price=_parse_number(params.get("maxPrice")),
            min_bedrooms=_parse_int(params.get("minBedrooms")),
            max_bedrooms=_parse_int(params.get("maxBedrooms")),
            location=params.get("location") or None,
        )

    def is_empty(self) -> bool:
        return all(value is None for value in (
            self.type, self.min_price, self.max_price,
            self.min_bedrooms, self.max_bedrooms, self.location,
        ))

    # ===============================================
    # IN-PROCESS PREDICATE
    # ===============================================

    def matches(self, record: Dict[str, Any]) -> bool:
        """Return True if the record satisfies every supplied criterion."""
        if self.type is not None and record.get("type") != self.type:
            return False

        price = record.get("price")
        if self.min_price is not None and not (_is_number(price) and price >= self.min_price):
            return False
        if self.max_price is not None and not (_is_number(price) and price <= self.max_price):
            return False

        bedrooms = record.get("bedrooms")
        if self.min_bedrooms is not None and not (_is_number(bedrooms) and bedrooms >= self.min_bedrooms):
            return False
        if self.max_bedrooms is not None and not (_is_number(bedrooms) and bedrooms <= self.max_bedrooms):
            return False

        return self._location_matches(record)

    def _location_matches(self, record: Dict[str, Any]) -> bool:
        if self.location is None:
            return True
        location = record.get("location")
        if not isinstance(location, str):
            return False
        return self.location.lower() in location.lower()

    # ===============================================
    # DYNAMODB TRANSLATION
    # ===============================================

    def to_condition(self):
        """
        Translate the criteria DynamoDB evaluates exactly into a scan FilterExpression.

        Location is left out: DynamoDB's contains() is case-sensitive, so it
        is checked by post_filter() instead.

        Returns:
            boto3 condition object, or None when no native criteria are set
        """
        conditions = []
        if self.type is not None:
            conditions.append(Attr("type").eq(self.type))
        if self.min_price is not None:
            conditions.append(Attr("price").gte(_to_dynamo_number(self.min_price)))
        if self.max_price is not None:
            conditions.append(Attr("price").lte(_to_dynamo_number(self.max_price)))
        if self.min_bedrooms is not None:
            conditions.append(Attr("bedrooms").gte(self.min_bedrooms))
        if self.max_bedrooms is not None:
            conditions.append(Attr("bedrooms").lte(self.max_bedrooms))

        if not conditions:
            return None
        condition = conditions[0]
        for extra in conditions[1:]:
            condition = condition & extra
        return condition

    def post_filter(self, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Apply the criteria to_condition() leaves out to scanned records."""
        return [record for record in records if self._location_matches(record)]
