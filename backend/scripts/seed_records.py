#!/usr/bin/env python3
"""
Seed return items and laptop returns from a JSON file, or from a small
built-in sample when no file is given, and print a bearer token for the
seeding user so the API can be tried right away.

The JSON file holds {"return_items": [...], "laptop_returns": [...]}; every
entry goes through the same validation as the entry forms.

Usage:
    python scripts/seed_records.py --user-id desk-admin
    python scripts/seed_records.py --file samples.json --user-id desk-admin --reset
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from returndesk.adapters.auth_provider import SessionContext, TokenAuthProvider
from returndesk.db import SessionLocal, init_db
from returndesk.entities import ENTITIES
from returndesk.schemas.validation import ValidationError, validate_record
from returndesk.services.record_store import RecordStore

SAMPLE = {
    "return_items": [
        {"return_date": "2024-01-10", "brand_name": "Canon", "store_code": "S001",
         "shop_location": "Main Street", "canon_printer_sn": "CN-1001",
         "canon_printer_model": "PIXMA G3010", "keyboard": "KB-77", "remark": "Shop closed"},
        {"return_date": "2024-01-20", "brand_name": "Epson", "store_code": "S002",
         "receipt_printer_sn": "EP-2002", "receipt_printer_model": "TM-T82III",
         "receiver_signature": "J. Doe"},
    ],
    "laptop_returns": [
        {"return_date": "2024-03-01", "brand": "Dell", "laptop_model": "Latitude 5520",
         "serial_number": "SN123", "has_charger": True, "store_code": "S001"},
        {"return_date": "2024-03-05", "brand": "HP", "laptop_model": "EliteBook 840",
         "serial_number": "SN456", "has_charger": False, "location": "Warehouse"},
    ],
}


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--file", help="JSON file with return_items / laptop_returns lists")
    parser.add_argument("--user-id", default="seed-user", help="user id stamped on seeded records")
    parser.add_argument("--reset", action="store_true", help="drop and recreate tables first")
    args = parser.parse_args()

    data = SAMPLE
    if args.file:
        with open(args.file, "r", encoding="utf-8") as fh:
            data = json.load(fh)

    init_db(reset=args.reset)

    provider = TokenAuthProvider()
    token = provider.issue_token(args.user_id)
    ctx = SessionContext(provider)
    ctx.initialize(token)

    db = SessionLocal()
    try:
        for collection, entity in ENTITIES.items():
            store = RecordStore(db, entity, ctx)
            created = 0
            for i, entry in enumerate(data.get(collection, [])):
                try:
                    store.insert(validate_record(entity.schema_in, entry))
                    created += 1
                except ValidationError as e:
                    print(f"skipping {collection}[{i}]: {e.field}: {e.message}")
            print(f"Seeded {created} {entity.plural}.")
    finally:
        db.close()
        ctx.teardown()

    print(f"Bearer token for {args.user_id}:\n{token}")


if __name__ == "__main__":
    main()
