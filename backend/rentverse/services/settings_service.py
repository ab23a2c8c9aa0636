from sqlalchemy.orm import Session

from rentverse.database import utcnow
from rentverse.models.setting import PlatformSetting


def get_setting(db: Session, key: str, default: str | None = None) -> str | None:
    row = db.get(PlatformSetting, key)
    return row.value if row else default


def put_setting(db: Session, key: str, value: str) -> PlatformSetting:
    """Upsert a setting; the caller commits."""
    now = utcnow()
    row = db.get(PlatformSetting, key)
    if row:
        row.value = value
        row.updated_at = now
    else:
        row = PlatformSetting(key=key, value=value, updated_at=now)
        db.add(row)
    return row


def is_maintenance_mode(db: Session) -> bool:
    return (get_setting(db, "maintenance_mode", "false") or "").lower() == "true"
