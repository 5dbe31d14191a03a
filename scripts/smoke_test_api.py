#!/usr/bin/env python3
"""
Smoke test a running property API (dev server or deployed stage).

Walks one listing through its lifecycle: create -> get -> list -> update -> delete.

Usage:
    python3 scripts/smoke_test_api.py
    API_BASE_URL=https://abc123.execute-api.us-east-1.amazonaws.com/prod python3 scripts/smoke_test_api.py
"""

import os
import sys

import requests

API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:3001').rstrip('/')
TIMEOUT = 10


def check(label, response, expected_status):
    ok = response.status_code == expected_status
    print(f"{'✓' if ok else '✗'} {label}: {response.status_code}")
    if not ok:
        print(f"   {response.text}")
        sys.exit(1)
    return response.json()


def main():
    print("=" * 60)
    print(f"SMOKE TEST: {API_BASE_URL}")
    print("=" * 60)

    created = check("create", requests.post(
        f"{API_BASE_URL}/properties",
        json={"title": "Smoke Test Cottage", "price": 100000, "type": "sale",
              "bedrooms": 2, "location": "Austin, TX"},
        timeout=TIMEOUT
    ), 201)
    property_id = created['id']
    print(f"   id={property_id}")

    fetched = check("get", requests.get(f"{API_BASE_URL}/properties/{property_id}", timeout=TIMEOUT), 200)
    assert fetched == created, "fetched record differs from created record"

    listed = check("list", requests.get(
        f"{API_BASE_URL}/properties",
        params={"minPrice": 50000, "maxPrice": 150000, "type": "sale", "location": "austin"},
        timeout=TIMEOUT
    ), 200)
    assert any(p['id'] == property_id for p in listed), "created listing missing from filtered list"

    updated = check("update", requests.put(
        f"{API_BASE_URL}/properties/{property_id}", json={"price": 200000}, timeout=TIMEOUT
    ), 200)
    assert updated['price'] == 200000 and updated['title'] == created['title']

    check("delete", requests.delete(f"{API_BASE_URL}/properties/{property_id}", timeout=TIMEOUT), 200)
    check("get after delete", requests.get(f"{API_BASE_URL}/properties/{property_id}", timeout=TIMEOUT), 404)

    print("\n✅ All checks passed")


if __name__ == '__main__':
    main()
