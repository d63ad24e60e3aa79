"""Authentication API endpoints and the per-request permission dependency"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.database import get_db
from app.engine.permissions import Capability, Permissions, permissions_for
from app.models.user import User
from app.schemas.auth import Token, RefreshRequest, UserResponse, MeResponse

router = APIRouter()
logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _encode(claims: dict, lifetime: timedelta) -> str:
    claims = {**claims, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(user: User) -> str:
    """Short-lived token carrying the role and, for residents, the unit"""
    return _encode(
        {
            "sub": str(user.id),
            "role": user.role.value,
            "unit": user.unit_number,
            "type": ACCESS_TOKEN,
        },
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user: User) -> str:
    return _encode(
        {"sub": str(user.id), "type": REFRESH_TOKEN},
        timedelta(days=settings.refresh_token_expire_days),
    )


def _subject(token: str, expected_type: str) -> Optional[UUID]:
    """User id from a token of the expected type, or None when it is unusable"""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        if payload.get("type") != expected_type:
            return None
        return UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None


async def _load_user(db: AsyncSession, user_id: UUID) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


def _issue_tokens(user: User) -> Token:
    refresh = create_refresh_token(user)
    # Only the latest refresh token stays valid
    user.refresh_token = refresh
    return Token(
        access_token=create_access_token(user),
        refresh_token=refresh,
        expires_in=settings.access_token_expire_minutes * 60,
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Active user behind a bearer access token"""
    user_id = _subject(token, ACCESS_TOKEN)
    user = await _load_user(db, user_id) if user_id else None

    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_permissions(current_user: User = Depends(get_current_user)) -> Permissions:
    """Capabilities of the current user, evaluated once per request"""
    return permissions_for(current_user.role, current_user.id, current_user.unit_number)


def require_capability(capability: Capability):
    """Dependency factory rejecting actors whose role lacks a capability"""
    async def capability_checker(permissions: Permissions = Depends(get_permissions)) -> Permissions:
        if not permissions.has(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires the {capability.value} capability",
            )
        return permissions
    return capability_checker


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Exchange email and password for a token pair"""
    result = await db.execute(select(User).where(User.email == form_data.username))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(form_data.password, user.hashed_password):
        logger.warning("Failed login", email=form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled",
        )

    user.last_login = datetime.utcnow()
    tokens = _issue_tokens(user)
    await db.commit()

    logger.info("User logged in", user_id=str(user.id), role=user.role.value)
    return tokens


@router.post("/refresh", response_model=Token)
async def refresh_token(
    request: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    """Rotate the token pair"""
    user_id = _subject(request.refresh_token, REFRESH_TOKEN)
    user = await _load_user(db, user_id) if user_id else None

    if user is None or not user.is_active or user.refresh_token != request.refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    tokens = _issue_tokens(user)
    await db.commit()
    return tokens


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
    permissions: Permissions = Depends(get_permissions),
):
    """Current user and what they may do"""
    return MeResponse(
        **UserResponse.model_validate(current_user).model_dump(),
        capabilities=sorted(c.value for c in permissions.capabilities),
    )


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Invalidate the stored refresh token"""
    current_user.refresh_token = None
    await db.commit()
    return {"message": "Successfully logged out"}
