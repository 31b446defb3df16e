# workforce/db/init_db.py
# Creates the schema and seeds demo users plus the default policy.
import logging

from sqlalchemy.orm import Session

from workforce.core import security
from workforce.core.config import settings
from workforce.db import models
from workforce.db.session import engine
from workforce.services.policy import DEFAULT_POLICY

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("admin@example.com", "Admin User", models.ROLE_ADMIN),
    ("employee@example.com", "John Employee", models.ROLE_EMPLOYEE),
]
DEMO_PASSWORD = "password123"

def seed(db: Session) -> None:
    """Insert the demo users and default policy into an empty database."""
    if db.query(models.User).count() > 0:
        return
    for email, name, role in DEMO_USERS:
        db.add(models.User(
            email=email, name=name, role=role,
            hashed_password=security.get_password_hash(DEMO_PASSWORD),
        ))
    for key, value in DEFAULT_POLICY.items():
        db.add(models.PolicySetting(key=key, value=value))
    db.commit()
    logger.info("Seeded %d demo users and the default policy", len(DEMO_USERS))

def init_db(bind=None, seed_demo: bool | None = None) -> None:
    bind = bind or engine
    if seed_demo is None:
        seed_demo = settings.SEED_DEMO_DATA
    models.Base.metadata.create_all(bind=bind)
    if seed_demo:
        with Session(bind=bind) as db:
            seed(db)

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
