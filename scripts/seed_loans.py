"""
Seed the three demo loan applications into an empty database.
Run: python -m scripts.seed_loans (from the project root, with DATABASE_URL set).
"""
import asyncio

from database import AsyncSessionLocal, dispose_engine, init_db
from services.seed import seed_demo_loans


async def main() -> int:
    await init_db()
    async with AsyncSessionLocal() as session:
        inserted = await seed_demo_loans(session)
        await session.commit()
    await dispose_engine()
    return inserted


if __name__ == "__main__":
    count = asyncio.run(main())
    print(f"Seeded {count} loan(s).")
