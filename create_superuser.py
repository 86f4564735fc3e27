import asyncio
import sys
from getpass import getpass

from sqlalchemy import or_, select

from opensrs_gateway.core.database import AsyncSessionLocal
from opensrs_gateway.core.init import create_tables
# Import all models to ensure relationships are resolved
from opensrs_gateway.models import User, UserRole
from opensrs_gateway.core.security import get_password_hash


async def create_superuser():
    print("=== Create Admin User ===")

    username = input("Username: ").strip()
    email = input("Email: ").strip().lower()
    if not username or not email:
        print("Error: Username and email are required")
        return

    password = getpass("Password: ")
    if len(password) < 6:
        print("Error: Password must be at least 6 characters")
        return

    password_confirm = getpass("Confirm Password: ")
    if password != password_confirm:
        print("Error: Passwords do not match")
        return

    first_name = input("First Name: ").strip() or "Admin"
    last_name = input("Last Name: ").strip() or "User"

    await create_tables()

    async with AsyncSessionLocal() as session:
        # Check if user exists
        result = await session.execute(
            select(User).where(or_(User.email == email, User.username == username))
        )
        user = result.scalar_one_or_none()

        if user:
            print(f"User {user.username} <{user.email}> already exists.")
            confirm = input("Do you want to promote this user to admin? (y/n): ").lower()
            if confirm == 'y':
                user.role = UserRole.ADMIN
                user.is_active = True
                await session.commit()
                print(f"Successfully promoted {user.username} to admin!")
            else:
                print("Operation cancelled.")
        else:
            new_user = User(
                username=username,
                email=email,
                password_hash=get_password_hash(password),
                first_name=first_name,
                last_name=last_name,
                role=UserRole.ADMIN,
                is_active=True,
            )
            session.add(new_user)
            await session.commit()
            print(f"Successfully created admin {username}!")


if __name__ == "__main__":
    try:
        if sys.platform == 'win32':
            asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
        asyncio.run(create_superuser())
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
