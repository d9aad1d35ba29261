#!/usr/bin/env python3
# =============================================================================
# scripts/seed_users.py - Load Sample Users into MongoDB
# =============================================================================
# Inserts a handful of sample users so the list, search and export
# endpoints have something to show in development.
#
# Usage:
#   python scripts/seed_users.py            # add sample users
#   python scripts/seed_users.py --reset    # delete all users first
#
# Prerequisites:
#   - MongoDB must be running
#   - MONGODB_URI must be set (.env file)
# =============================================================================

import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.config import settings
from app.exceptions import UserAlreadyExistsError
from core.models.user import UserCreate
from core.services.user_service import UserService
from lib.mongo_client import USERS_COLLECTION, create_mongo_client, ensure_user_indexes

SAMPLE_USERS = [
    {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com",
     "phone": "+44 20 7946 0001", "city": "London", "country": "United Kingdom"},
    {"first_name": "Marie", "last_name": "Curie", "email": "marie.curie@example.org",
     "address": "11 Rue Pierre et Marie Curie", "city": "Paris", "zip_code": "75005",
     "country": "France"},
    {"first_name": "Grace", "last_name": "Hopper", "email": "grace.hopper@example.com",
     "city": "Arlington", "state": "VA", "zip_code": "22201", "country": "USA"},
    {"first_name": "Alan", "last_name": "Turing", "email": "alan.turing@example.co.uk",
     "city": "Manchester", "country": "United Kingdom"},
    {"first_name": "Katherine", "last_name": "Johnson", "email": "kjohnson@example.com",
     "phone": "757-555-0199", "city": "Hampton", "state": "VA", "country": "USA"},
]


def main():
    """Seed the users collection."""
    parser = argparse.ArgumentParser(description="Load sample users into MongoDB")
    parser.add_argument("--reset", action="store_true", help="Delete all users before seeding")
    args = parser.parse_args()

    print("=" * 60)
    print("User Directory - Seed Users")
    print("=" * 60)

    client = create_mongo_client(settings)
    try:
        collection = client[settings.MONGODB_DATABASE][USERS_COLLECTION]
        ensure_user_indexes(collection)

        if args.reset:
            deleted = collection.delete_many({}).deleted_count
            print(f"Deleted {deleted} existing users")

        service = UserService(collection)
        created = 0
        for user in SAMPLE_USERS:
            try:
                service.create_user(UserCreate(**user))
                created += 1
                print(f"  + {user['first_name']} {user['last_name']} <{user['email']}>")
            except UserAlreadyExistsError:
                print(f"  = {user['email']} already exists, skipped")

        print()
        print(f"Created {created} users")
    finally:
        client.close()


if __name__ == "__main__":
    main()
