"""Create all database tables and the standard departments."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401 - registers all models
from app.models.department import Department

STANDARD_DEPARTMENTS = (
    ("Emergency Medical Services", "ems", "#dc2626"),
    ("Police Department", "police", "#1d4ed8"),
    ("Department of Justice", "doj", "#7c3aed"),
    ("Fire Department", "fire", "#ea580c"),
    ("Government", "government", "#15803d"),
)


def init_db():
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = {row.slug for row in db.query(Department).all()}
        for name, slug, color in STANDARD_DEPARTMENTS:
            if slug not in existing:
                db.add(Department(name=name, slug=slug, color=color))
        db.commit()
    finally:
        db.close()
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
