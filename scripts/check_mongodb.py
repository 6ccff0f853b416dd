#!/usr/bin/env python3
"""
Check that MongoDB can run fund transfers.

Transfers use multi-document transactions, which need a replica set (a
single-node replica set is enough). This pings the server, confirms a
replica set name and creates the collection indexes.

Usage:
    python scripts/check_mongodb.py
"""

import asyncio
import sys
from motor.motor_asyncio import AsyncIOMotorClient

from tradejournal.config.database import create_indexes
from tradejournal.config.settings import get_settings


async def check_mongodb() -> bool:
    """Check connection, replica set and indexes."""
    settings = get_settings()

    print("Attempting to connect to MongoDB...")
    print(f"URL: {settings.MONGODB_URL}")
    print(f"Database: {settings.MONGODB_DB_NAME}")
    print()

    client = AsyncIOMotorClient(settings.MONGODB_URL, serverSelectionTimeoutMS=5000)
    try:
        await client.admin.command("ping")
        print("✅ MongoDB connection successful!")

        hello = await client.admin.command("hello")
        replica_set = hello.get("setName")
        if replica_set:
            print(f"✅ Replica set '{replica_set}' - transactions available")
        else:
            print("❌ Standalone server - transfers need a replica set")
            print("\nTo convert a local server:")
            print("   mongod --replSet rs0 ...")
            print("   mongosh --eval 'rs.initiate()'")
            print("   MONGODB_URL=mongodb://localhost:27017/?replicaSet=rs0")
            return False

        await create_indexes(client[settings.MONGODB_DB_NAME])
        print("✅ Indexes ensured (currency_rates pair index is unique)")
        return True

    except Exception as e:
        print(f"❌ MongoDB check failed: {str(e)}")
        print("\nTroubleshooting:")
        print("1. Make sure MongoDB is running:")
        print("   - Docker: docker run -d -p 27017:27017 mongo --replSet rs0")
        print("2. Check your MONGODB_URL in .env file")
        return False
    finally:
        client.close()


if __name__ == "__main__":
    success = asyncio.run(check_mongodb())
    sys.exit(0 if success else 1)
