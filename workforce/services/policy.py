# workforce/services/policy.py
# Policy settings live in the store and are loaded per request, then passed to
# whatever reads them.
import logging

from sqlalchemy.orm import Session

from workforce.db import models
from workforce.schemas.admin import PolicySettings
from workforce.services.tracker import transaction

logger = logging.getLogger(__name__)

DEFAULT_POLICY = {
    "min_daily_hours": "8",
    "max_session_duration": "4",
    "late_threshold": "09:15",
    "auto_checkout": "19:00",
}

def load_policy(db: Session) -> PolicySettings:
    rows = db.query(models.PolicySetting).all()
    values = {row.key: row.value for row in rows if row.key in PolicySettings.model_fields}
    return PolicySettings(**values)

def save_policy(db: Session, updates: PolicySettings) -> PolicySettings:
    """Upsert every key present in ``updates``; keys left out keep their value."""
    changes = updates.model_dump(exclude_none=True)
    with transaction(db):
        for key, value in changes.items():
            db.merge(models.PolicySetting(key=key, value=str(value)))
    logger.info("Policy settings updated: %s", ", ".join(sorted(changes)) or "nothing")
    return load_policy(db)
