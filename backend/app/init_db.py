# backend/app/init_db.py
"""Create all tables directly from the models (local development without alembic)."""

from app.database import Base, engine
import app.models  # noqa: F401

if __name__ == "__main__":
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created.")
