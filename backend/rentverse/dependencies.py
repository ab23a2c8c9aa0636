from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from rentverse.database import get_db
from rentverse.models.user import User
from rentverse.utils.permissions import has_permission, is_admin_role
from rentverse.utils.security import InvalidTokenError, decode_access_token


async def require_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    try:
        user_id = decode_access_token(authorization[7:])
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.get(User, user_id)
    # Banned accounts are treated exactly like unknown ones
    if user is None or user.banned:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user


def require_admin(module: str, action: str = "read"):
    async def _require_admin(user: User = Depends(require_user)) -> User:
        if not is_admin_role(user.role):
            raise HTTPException(status_code=403, detail="Admin access required")
        if not has_permission(user.role, module, action):
            raise HTTPException(status_code=403, detail=f"Missing permission {module}.{action}")
        return user

    return _require_admin
