"""
Seed the SQLite database with the sample listings in sample_listings.json.
Drops and recreates the concierge tables.
Run from backend/: python scripts/seed_sqlite.py [path/to/listings.json]
"""

import json
import os
import sys

# Add backend directory to path for concierge imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from concierge.db.database import SessionLocal, engine
from concierge.db.models import Base
from concierge.db.seed import seed_listings, seed_profiles


def main():
    json_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "sample_listings.json"
    )
    print(f"Database: {engine.url}")

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print("Tables created")

    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    session = SessionLocal()
    try:
        listings = seed_listings(session, data.get("listings", []))
        profiles = seed_profiles(session, data.get("profiles", []))
    finally:
        session.close()

    print(f"Inserted {listings} listings and {profiles} profiles from {json_path}")


if __name__ == "__main__":
    main()
