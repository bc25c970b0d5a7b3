#!/usr/bin/env python3
"""
Check that the hosted backend and the legacy API are reachable.

Usage:
    python scripts/check_connection.py
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

REQUIRED_VARS = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]


def report(name: str, ok: bool, detail: str = "") -> bool:
    mark = "PASS" if ok else "FAIL"
    print(f"  [{mark}] {name}{': ' + detail if detail else ''}")
    return ok


async def check() -> bool:
    from app.config import settings
    from lib.api_client import ApiClient
    from lib.legacy_client import LegacyApiClient

    client = ApiClient()
    results = []

    print(f"Hosted backend: {settings.SUPABASE_URL}")
    try:
        query = await client.query("organizations")
        response = await query.select("id", count="exact").limit(1).execute()
        results.append(report("database", True, f"{response.count or 0} organizations visible"))
    except Exception as e:
        results.append(report("database", False, str(e)[:120]))

    try:
        buckets = await client.list_buckets()
        names = ", ".join(getattr(b, "name", str(b)) for b in buckets) or "none visible"
        results.append(report("storage", True, names))
    except Exception as e:
        results.append(report("storage", False, str(e)[:120]))

    print(f"Legacy API: {settings.LEGACY_API_URL}")
    try:
        await LegacyApiClient().request("health")
        results.append(report("legacy api", True))
    except Exception as e:
        # The legacy API is only a fallback; its absence is reported, not fatal
        report("legacy api", False, str(e)[:120])

    return all(results)


def main() -> int:
    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        print(f"Missing environment variables: {', '.join(missing)}")
        print("Copy .env.example to .env and fill them in.")
        return 1

    ok = asyncio.run(check())
    print("All checks passed" if ok else "Some checks failed")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
