import asyncio
import sys
from pathlib import Path

"""
Check that DATABASE_URL is reachable: `python scripts/check_db_connection.py`
"""

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from db.database import engine  # noqa: E402


async def check() -> int:
    try:
        async with engine.connect() as conn:
            now = (await conn.execute(select(func.current_timestamp()))).scalar_one()
    except SQLAlchemyError as e:
        print(f"Connection error: {e}")
        return 1
    finally:
        await engine.dispose()
    print(f"Connected successfully: {now}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check()))
