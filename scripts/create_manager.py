"""
Manager Seeding Script

Managers have no registration endpoint; create them here.
Run from project root: python scripts/create_manager.py admin s3cret
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from orderdesk.database import async_session_maker, engine, init_db  # noqa: E402
from orderdesk.services.managers import ManagerAuthService  # noqa: E402


async def create_manager(username: str, password: str) -> None:
    await init_db()
    async with async_session_maker() as session:
        manager = await ManagerAuthService(session).create_manager(username, password)
    await engine.dispose()
    print(f"✅ Manager '{manager.username}' created (id={manager.id})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a dashboard manager")
    parser.add_argument("username")
    parser.add_argument("password")
    args = parser.parse_args()

    asyncio.run(create_manager(args.username, args.password))
