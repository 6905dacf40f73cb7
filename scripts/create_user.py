"""Create a user and print the bearer token for the API."""

from __future__ import annotations

import argparse
import asyncio

from wardrobe_api.db.session import AsyncSessionFactory, init_db
from wardrobe_api.services.users import UserService


async def create_user(email: str) -> str:
    await init_db()
    async with AsyncSessionFactory() as session:
        user, token = await UserService().create_user(session, email=email)
    return f"Created user {user.id} <{user.email}>\nBearer token (shown once): {token}"


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email", help="Email address identifying the user")
    args = parser.parse_args()
    print(asyncio.run(create_user(args.email)))


if __name__ == "__main__":
    main()
