#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database, document store and AI endpoint are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from careerhub.db.postgres import test_postgres_connection
from careerhub.db.mongodb import test_mongo_connection
from careerhub.services.ai_client import ai_configured, get_ai_client
from careerhub.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAREERHUB - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Relational database...")
    if settings.database_url:
        print("    URL: taken from DATABASE_URL")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    print("    OK" if test_postgres_connection() else "    FAILED")

    print("\n[2] MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    print("    OK" if test_mongo_connection() else "    FAILED")

    print("\n[3] AI endpoint...")
    if ai_configured():
        print(f"    Base URL: {settings.openai_base_url} ({settings.openai_model})")
        print("    OK" if get_ai_client().test_connection() else "    FAILED")
    else:
        print("    Skipped: OPENAI_API_KEY not set")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()
