"""Seed script to create demo data for development."""

import sys
import os
from datetime import timedelta

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from formcraft.database import SessionLocal, init_db
from formcraft.models.form import FormStatus
from formcraft.models.user import PlanType, User
from formcraft.schemas.form import FormCreate
from formcraft.services.auth import AuthService
from formcraft.services.form import FormService

DEMO_EMAIL = "demo@example.com"

# (template id, title, published)
DEMO_FORMS = [
    ("contact", "Contact Us", True),
    ("feedback", "Customer Feedback", True),
    ("registration", "Launch Event Registration", False),
]


def seed_database(db: Session = None) -> str:
    """Create a demo owner with one form per starter template; returns an access token."""
    own_session = db is None
    db = db or SessionLocal()

    try:
        print("Creating demo user...")
        user = db.query(User).filter(User.email == DEMO_EMAIL).first()
        if not user:
            user = User(
                email=DEMO_EMAIL,
                username="demo",
                plan_type=PlanType.PREMIUM,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            print(f"  Created user: {DEMO_EMAIL}")

        print("\nCreating forms...")
        existing = {f.title for f in FormService.get_user_forms(db, user.id)}
        for template_id, title, published in DEMO_FORMS:
            if title in existing:
                print(f"  Skipped existing form: {title}")
                continue
            form = FormService.create_form(
                db, user, FormCreate(title=title, template_id=template_id)
            )
            if published:
                FormService.set_status(db, form.id, user, FormStatus.PUBLISHED)
            print(f"  Created form: {title} ({form.id})")

        token = AuthService.create_access_token(
            data={"sub": str(user.id)},
            expires_delta=timedelta(days=30)
        )
        print("\nSeed data created successfully!")
        print(f"\nBearer token for {DEMO_EMAIL}:\n  {token}")
        return token

    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    print("Creating database tables...")
    init_db()

    seed_database()
