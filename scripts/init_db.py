#!/usr/bin/env python
"""Create tables and the default leaderboard settings row."""

import asyncio

from skillfest.db.database import async_session_maker, init_db
from skillfest.services.leaderboard_service import LeaderboardService


async def init_leaderboard_settings() -> None:
    async with async_session_maker() as session:
        current = await LeaderboardService(session).get_settings()
        await session.commit()
        print(f"Leaderboard visible: {current.visible}")


async def main() -> None:
    print("Creating database tables...")
    await init_db()
    print("Tables created.")

    print("Initializing leaderboard settings...")
    await init_leaderboard_settings()
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
