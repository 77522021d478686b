import asyncio
import os
import sys
from pathlib import Path

# Add parent directory to path to import libs
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

project_root = Path(__file__).resolve().parents[1]
env_file = os.environ.get("ENV_FILE", ".env")
load_dotenv(project_root / env_file, override=True)

from sqlalchemy import update

from libs.db.config import AsyncSessionLocal
from libs.db.registry import load_all_models
from services.kids_service.models import Kid
from services.users_service.models import User


async def approve_all() -> tuple[int, int]:
    """Mark every user and kid approved. Returns (users, kids) updated."""
    load_all_models()
    async with AsyncSessionLocal() as session:
        async with session.begin():
            users = await session.execute(
                update(User).where(User.is_approved.is_(False)).values(is_approved=True)
            )
            kids = await session.execute(
                update(Kid).where(Kid.is_approved.is_(False)).values(is_approved=True)
            )

    print(f"✅ Approved {users.rowcount} user(s) and {kids.rowcount} kid(s)")
    return users.rowcount, kids.rowcount


if __name__ == "__main__":
    asyncio.run(approve_all())
