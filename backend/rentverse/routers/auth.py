import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from rentverse.config import settings
from rentverse.database import get_db, utcnow
from rentverse.models.user import User
from rentverse.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from rentverse.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        city=user.city,
        avatar=user.avatar,
        bio=user.bio,
        verified=bool(user.verified),
        role=user.role,
        created_at=user.created_at,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
    email = req.email.strip().lower()
    if len(req.password) < settings.min_password_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.min_password_length} characters",
        )
    if db.query(User).filter(func.lower(User.email) == email).first():
        raise HTTPException(status_code=409, detail="User already exists")

    user = User(
        id=str(uuid.uuid4()),
        email=email,
        password_hash=hash_password(req.password),
        first_name=req.first_name,
        last_name=req.last_name,
        phone=req.phone or None,
        city=req.city or None,
        verified=False,
        role="USER",
        banned=False,
        created_at=utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)

    return AuthResponse(
        message="User registered successfully",
        user=user_to_response(user),
        token=create_access_token(user.id),
    )


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(func.lower(User.email) == req.email.strip().lower()).first()
    if not user or not verify_password(user.password_hash, req.password):
        raise HTTPException(status_code=400, detail="Invalid email or password")
    if user.banned:
        raise HTTPException(status_code=403, detail="Account is banned")

    return AuthResponse(
        message="Login successful",
        user=user_to_response(user),
        token=create_access_token(user.id),
    )
