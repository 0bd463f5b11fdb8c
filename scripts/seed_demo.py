# scripts/seed_demo.py
import logging

from streeteats.backend.app import models  # noqa: F401
from streeteats.backend.app.db import Base, SessionLocal, engine
from streeteats.backend.app.seed import seed_demo_vendors


def main():
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        added = seed_demo_vendors(db)
    finally:
        db.close()
    print(f"[SEED] {added} vendors added")


if __name__ == "__main__":
    main()
