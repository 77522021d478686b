import asyncio
import os
import sys
from pathlib import Path
from uuid import uuid4

# Add parent directory to path to import libs
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

# Load env file selected for the run (defaults to .env when ENV_FILE not set)
# MUST be done before importing libs that use get_settings()
project_root = Path(__file__).resolve().parents[1]
env_file = os.environ.get("ENV_FILE", ".env")
load_dotenv(project_root / env_file, override=True)

from sqlalchemy import select

from libs.auth.models import UserRole
from libs.auth.passwords import hash_password
from libs.common.config import get_settings
from libs.db.config import AsyncSessionLocal
from libs.db.registry import load_all_models
from services.users_service.models import User, UserStatus

settings = get_settings()


async def seed_admin() -> bool:
    """Create the admin account from ADMIN_EMAIL / ADMIN_PASSWORD. Returns True if created."""
    load_all_models()
    email = settings.ADMIN_EMAIL.strip().lower()

    async with AsyncSessionLocal() as session:
        async with session.begin():
            result = await session.execute(select(User).where(User.email == email))
            if result.scalar_one_or_none():
                print(f"⚠️ Admin {email} already exists, nothing to do.")
                return False

            session.add(
                User(
                    id=uuid4(),
                    email=email,
                    phone="",
                    password_hash=hash_password(settings.ADMIN_PASSWORD),
                    role=UserRole.ADMIN,
                    status=UserStatus.ACTIVE,
                    is_approved=True,
                )
            )

    print(f"✅ Admin {email} created. Change the password after first login.")
    return True


if __name__ == "__main__":
    asyncio.run(seed_admin())
