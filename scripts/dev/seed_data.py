#!/usr/bin/env python
"""Seed database with the allow-listed admins and a sample member."""
import sys
from pathlib import Path

# Repository root on path so `src.*` resolves
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from sqlalchemy.orm import Session
from src.app.config import settings
from src.db.base import SessionLocal, engine, Base
from src.models import User
from src.repositories.user_repo import UserRepository

SAMPLE_MEMBER = ("member@example.com", "Sample Member")


def seed_users(db: Session):
    """Create the allow-listed admins plus one regular member."""
    repo = UserRepository(db)
    users = [(email, email.split("@")[0], True) for email in settings.admin_users]
    users.append((*SAMPLE_MEMBER, False))

    for email, name, is_admin in users:
        if repo.get_by_email(email):
            print(f"  → Skipped existing user: {email}")
            continue
        repo.create_user(email=email, name=name, is_admin=is_admin)
        print(f"  → Created user: {email} (admin: {is_admin})")

    print("✅ Created users")


if __name__ == "__main__":
    print("🌱 Seeding database...")
    print("=" * 50)

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_users(db)
        print("=" * 50)
        print("✅ Database seeded successfully!")
        print(f"\n📝 {db.query(User).count()} users. Sign in with Google using one of these e-mails.")
    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()
