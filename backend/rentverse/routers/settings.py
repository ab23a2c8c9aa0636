from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rentverse.database import get_db
from rentverse.services.settings_service import is_maintenance_mode

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/public")
async def public_settings(db: Session = Depends(get_db)):
    return {"maintenance_mode": is_maintenance_mode(db)}
