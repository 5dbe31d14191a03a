#!/usr/bin/env python3
"""
Seed the properties table with the sample listings.

Usage:
    python3 scripts/seed_table.py --dry-run
    TABLE_NAME=DreamDwellFlow-Properties-prod python3 scripts/seed_table.py
"""

import argparse

from common import TABLE_NAME, dynamodb_table
from property_store import DynamoPropertyStore
from sample_properties import sample_records


def main():
    parser = argparse.ArgumentParser(description='Write the sample listings to DynamoDB')
    parser.add_argument('--table', default=TABLE_NAME, help='DynamoDB table name')
    parser.add_argument('--dry-run', action='store_true', help='Print listings without writing')
    args = parser.parse_args()

    records = sample_records()
    print(f"Seeding {len(records)} listings into {args.table} ({'DRY RUN' if args.dry_run else 'LIVE'})")

    if args.dry_run:
        for record in records:
            print(f"  {record['id']}: {record['title']} - {record['location']} (${record['price']:,})")
        return

    store = DynamoPropertyStore(dynamodb_table(args.table))
    written = 0
    for record in records:
        try:
            store.put(record)
            written += 1
            print(f"✓ {record['id']}: {record['title']}")
        except Exception as e:
            print(f"✗ {record['id']}: {e}")

    print(f"\n✅ Wrote {written}/{len(records)} listings")


if __name__ == '__main__':
    main()
