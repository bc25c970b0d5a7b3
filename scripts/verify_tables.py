#!/usr/bin/env python3
"""
Verify that every table and storage bucket the repositories use exists.

A table "exists" when a one-row select succeeds (an empty result is fine;
RLS may hide every row from the anon key).

Usage:
    python scripts/verify_tables.py
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

REQUIRED_VARS = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]

TABLES = [
    "organizations",
    "users",
    "beneficiaries",
    "beneficiary_allocations",
    "housing",
    "housing_rooms",
    "cases",
    "case_notes",
    "case_documents",
    "product_types",
    "donations",
    "voluntary_people",
    "organization_invites",
    "platform_invites",
    "platform_admin_invites",
    "organization_join_requests",
    "organization_data_access_requests",
    "update_organization_type_requests",
]

BUCKETS = ["profile-images", "case-documents"]


async def verify() -> bool:
    from lib.api_client import ApiClient

    client = ApiClient(key=os.getenv("SUPABASE_SERVICE_KEY") or None)
    ok = True

    print("Tables:")
    for table in TABLES:
        try:
            query = await client.query(table)
            await query.select("id").limit(1).execute()
            print(f"  [PASS] {table}")
        except Exception as e:
            ok = False
            print(f"  [FAIL] {table}: {str(e)[:120]}")

    print("Buckets:")
    try:
        existing = {getattr(b, "name", None) or getattr(b, "id", None) for b in await client.list_buckets()}
    except Exception as e:
        print(f"  [FAIL] could not list buckets: {str(e)[:120]}")
        return False

    for bucket in BUCKETS:
        if bucket in existing:
            print(f"  [PASS] {bucket}")
        else:
            ok = False
            print(f"  [FAIL] {bucket}: not found")

    return ok


def main() -> int:
    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        print(f"Missing environment variables: {', '.join(missing)}")
        return 1

    ok = asyncio.run(verify())
    print("Schema looks complete" if ok else "Schema is incomplete")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
