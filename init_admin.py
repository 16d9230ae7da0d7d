"""
Create the initial administrator account.

Usage: python init_admin.py --email admin@example.com --password 'S3cret!pass'
"""
import argparse
import asyncio

from marketplace.core.config import get_settings
from marketplace.core.errors import MarketplaceError
from marketplace.infrastructure.database import Database
from marketplace.modules.users import ROLE_ADMIN, UserCreateInput, UserService


async def create_admin(email: str, password: str, name: str) -> int:
    settings = get_settings()
    database = Database(settings.database)
    try:
        await database.create_all()
        async with database.transaction() as session:
            service = UserService.with_session(session, password_rounds=settings.security.bcrypt_rounds)
            if await service.find_by_email(email) is not None:
                print(f"User {email} already exists, nothing to do")
                return 0
            admin = await service.register(
                UserCreateInput(name=name, email=email, password=password, role=ROLE_ADMIN)
            )
    except MarketplaceError as exc:
        print(f"Failed to create administrator: {exc.message}")
        return 1
    finally:
        await database.dispose()

    print("=" * 50)
    print("Administrator account created")
    print("=" * 50)
    print(f"ID:    {admin.id}")
    print(f"Email: {admin.email}")
    print("=" * 50)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(create_admin(args.email, args.password, args.name)))


if __name__ == "__main__":
    main()
